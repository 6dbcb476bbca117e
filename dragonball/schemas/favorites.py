"""Pydantic schemas describing favorites and the view-model state."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dragonball.schemas.character import CharacterRecord


class FavoriteCharacter(BaseModel):
    """A character the user marked as favorite.

    Identity is the character ID; the persisted document carries the same
    value under ``characterID``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    character_id: int = Field(
        ...,
        alias="characterID",
        description="Catalog identifier of the favorited character.",
    )


class FavoritesState(BaseModel):
    """Snapshot of everything the favorites screen observes."""

    favorite_ids: list[FavoriteCharacter] = Field(
        default_factory=list,
        description="Favorites in store order, unique by character ID.",
    )
    hydrated_characters: list[CharacterRecord] = Field(
        default_factory=list,
        description=(
            "Catalog records for the favorites, in catalog category order"
            " rather than favoriting order."
        ),
    )
    is_loading: bool = False
    has_error: bool = False
    error_message: str = ""
    hydration_warning: str | None = Field(
        None,
        description="Set when one or more catalog categories failed to load.",
    )
    failed_categories: list[str] = Field(default_factory=list)


__all__ = ["FavoriteCharacter", "FavoritesState"]
