"""Favorites domain components split by responsibility.

``store`` isolates remote persistence of favorite IDs while ``hydration``
turns those IDs into catalog records. The view model in
:mod:`dragonball.services.favorites_view_model` coordinates both.
"""

from .hydration import (
    CategoryResult,
    CharacterCatalog,
    HydrationOutcome,
    filter_favorites,
    query_categories,
)
from .store import (
    FavoritesStore,
    FirestoreFavoritesStore,
    decode_favorite,
    encode_favorite,
)

__all__ = [
    "CategoryResult",
    "CharacterCatalog",
    "FavoritesStore",
    "FirestoreFavoritesStore",
    "HydrationOutcome",
    "decode_favorite",
    "encode_favorite",
    "filter_favorites",
    "query_categories",
]
