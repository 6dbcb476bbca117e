"""Error types raised by the favorites store and the character catalog."""

from __future__ import annotations


class FavoritesError(Exception):
    """Base class for failures the favorites view model knows how to absorb."""


class PersistenceError(FavoritesError):
    """The favorites store rejected or failed a create/list/delete call."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code


class CatalogError(FavoritesError):
    """A catalog category could not be fetched or decoded."""

    def __init__(
        self,
        message: str,
        *,
        category: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.status_code = status_code


__all__ = ["CatalogError", "FavoritesError", "PersistenceError"]
