"""Resolve favorite IDs into catalog records across several categories."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from dragonball.schemas.character import CharacterRecord
from dragonball.schemas.favorites import FavoriteCharacter
from dragonball.services.exceptions import CatalogError

logger = logging.getLogger(__name__)


class CharacterCatalog(Protocol):
    async def query_category(self, name: str) -> list[CharacterRecord]:
        """Return every character of category ``name`` in catalog order."""


@dataclass(frozen=True)
class CategoryResult:
    """Outcome of querying a single catalog category."""

    category: str
    records: tuple[CharacterRecord, ...] = ()
    error: CatalogError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class HydrationOutcome:
    """Aggregate of every category query issued during one hydration pass."""

    results: tuple[CategoryResult, ...] = field(default_factory=tuple)

    @property
    def complete(self) -> bool:
        return all(result.ok for result in self.results)

    @property
    def failed_categories(self) -> list[str]:
        return [result.category for result in self.results if not result.ok]

    @property
    def records(self) -> list[CharacterRecord]:
        """Concatenate successful categories in query order."""

        merged: list[CharacterRecord] = []
        for result in self.results:
            merged.extend(result.records)
        return merged

    @property
    def warning(self) -> str | None:
        failed = self.failed_categories
        if not failed:
            return None
        return "No se pudieron cargar las categorías: " + ", ".join(failed)


async def query_categories(
    catalog: CharacterCatalog, categories: Sequence[str]
) -> HydrationOutcome:
    """Query every category concurrently, keeping results in ``categories`` order.

    ``asyncio.gather`` preserves argument order, so completion order never
    affects the concatenated result.
    """

    responses = await asyncio.gather(
        *(catalog.query_category(name) for name in categories),
        return_exceptions=True,
    )

    results: list[CategoryResult] = []
    for name, response in zip(categories, responses):
        if isinstance(response, CatalogError):
            logger.warning("Catalog category %s failed: %s", name, response)
            results.append(CategoryResult(category=name, error=response))
        elif isinstance(response, BaseException):
            raise response
        else:
            results.append(CategoryResult(category=name, records=tuple(response)))
    return HydrationOutcome(results=tuple(results))


def filter_favorites(
    records: Iterable[CharacterRecord], favorites: Iterable[FavoriteCharacter]
) -> list[CharacterRecord]:
    """Keep only records whose ID is a favorite, preserving ``records`` order."""

    favorite_ids = {favorite.character_id for favorite in favorites}
    return [record for record in records if record.id in favorite_ids]


__all__ = [
    "CategoryResult",
    "CharacterCatalog",
    "HydrationOutcome",
    "filter_favorites",
    "query_categories",
]
