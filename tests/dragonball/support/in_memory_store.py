"""Test doubles standing in for the Firestore store and the character catalog."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping

from dragonball.schemas.character import CharacterRecord
from dragonball.schemas.favorites import FavoriteCharacter
from dragonball.services.exceptions import CatalogError, PersistenceError


class InMemoryFavoritesStore:
    """Favorites store keyed by character ID, with switchable failures."""

    def __init__(self, initial: Iterable[int] = ()) -> None:
        self._documents: dict[int, FavoriteCharacter] = {
            character_id: FavoriteCharacter(character_id=character_id)
            for character_id in initial
        }
        self.fail_create = False
        self.fail_list = False
        self.fail_delete = False
        self.created: list[int] = []
        self.deleted: list[int] = []
        self.list_calls = 0

    @property
    def ids(self) -> list[int]:
        return list(self._documents)

    async def create_favorite(self, favorite: FavoriteCharacter) -> None:
        self.created.append(favorite.character_id)
        if self.fail_create:
            raise PersistenceError("create rejected", operation="create")
        self._documents[favorite.character_id] = favorite

    async def list_favorites(self) -> list[FavoriteCharacter]:
        self.list_calls += 1
        if self.fail_list:
            raise PersistenceError("list rejected", operation="list")
        return list(self._documents.values())

    async def delete_favorite(self, character_id: int) -> None:
        self.deleted.append(character_id)
        if self.fail_delete:
            raise PersistenceError("delete rejected", operation="delete")
        self._documents.pop(character_id, None)


class FakeCatalog:
    """Catalog serving fixed categories; failing categories raise ``CatalogError``.

    ``delays`` lets a test reorder completion of concurrent category queries.
    """

    def __init__(
        self,
        categories: Mapping[str, Iterable[int]],
        *,
        failing: Iterable[str] = (),
        delays: Mapping[str, float] | None = None,
    ) -> None:
        self._categories = {
            name: [make_character(character_id) for character_id in ids]
            for name, ids in categories.items()
        }
        self.failing = set(failing)
        self._delays = dict(delays or {})
        self.queried: list[str] = []

    async def query_category(self, name: str) -> list[CharacterRecord]:
        self.queried.append(name)
        delay = self._delays.get(name)
        if delay:
            await asyncio.sleep(delay)
        if name in self.failing:
            raise CatalogError(f"category {name} unavailable", category=name)
        return list(self._categories.get(name, []))


def make_character(character_id: int) -> CharacterRecord:
    return CharacterRecord(
        id=character_id,
        name=f"Character {character_id}",
        ki="1.000",
        maxKi="10.000",
        race="Saiyan",
        gender="Male",
        image=f"https://example.com/characters/{character_id}.webp",
        affiliation="Z Fighter",
    )
