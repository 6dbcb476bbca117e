from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CharacterRecord(BaseModel):
    """Character as served by the catalog; never mutated locally."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    id: int
    name: str = ""
    ki: str | None = None
    max_ki: str | None = Field(default=None, alias="maxKi")
    race: str | None = None
    gender: str | None = None
    description: str | None = None
    image: str | None = None
    affiliation: str | None = None


class CatalogPageMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total_items: int | None = Field(default=None, alias="totalItems")
    item_count: int | None = Field(default=None, alias="itemCount")
    items_per_page: int | None = Field(default=None, alias="itemsPerPage")
    total_pages: int | None = Field(default=None, alias="totalPages")
    current_page: int | None = Field(default=None, alias="currentPage")


class CatalogPageLinks(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first: str | None = None
    previous: str | None = None
    next: str | None = None
    last: str | None = None


class CatalogPage(BaseModel):
    """Paginated envelope returned by the catalog service.

    Some categories are served as a bare JSON list instead of an envelope;
    :meth:`from_payload` accepts both shapes.
    """

    model_config = ConfigDict(extra="ignore")

    items: list[CharacterRecord] = Field(default_factory=list)
    meta: CatalogPageMeta = Field(default_factory=CatalogPageMeta)
    links: CatalogPageLinks = Field(default_factory=CatalogPageLinks)

    @classmethod
    def from_payload(cls, payload: Any) -> CatalogPage:
        if isinstance(payload, list):
            return cls(items=payload)
        return cls.model_validate(payload)

    @property
    def has_next(self) -> bool:
        """Return ``True`` when the envelope advertises another page."""

        if self.meta.total_pages is not None and self.meta.current_page is not None:
            return self.meta.current_page < self.meta.total_pages
        return bool(self.links.next)


__all__ = [
    "CatalogPage",
    "CatalogPageLinks",
    "CatalogPageMeta",
    "CharacterRecord",
]
