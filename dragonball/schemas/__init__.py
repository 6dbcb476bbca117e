"""Pydantic schemas for catalog payloads and favorites state."""

from dragonball.schemas.character import (  # noqa: F401
    CatalogPage,
    CatalogPageLinks,
    CatalogPageMeta,
    CharacterRecord,
)
from dragonball.schemas.favorites import (  # noqa: F401
    FavoriteCharacter,
    FavoritesState,
)
