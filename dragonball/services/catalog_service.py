"""HTTP client for the paginated Dragon Ball character catalog."""

from __future__ import annotations

import logging
from types import TracebackType

import httpx
from pydantic import ValidationError

from dragonball.schemas.character import CatalogPage, CharacterRecord
from dragonball.services.exceptions import CatalogError
from dragonball.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

_USER_AGENT = "DragonBall-Favorites/0.1"


class CharacterCatalogService:
    """Fetch every character of a named catalog category.

    Each category lives at ``{base_url}/{category}`` and is paged with
    ``page``/``limit`` query parameters. All pages are collected in order so
    callers see a single flat list per category.
    """

    def __init__(
        self,
        *,
        base_url: str,
        page_size: int,
        max_pages: int,
        timeout: float,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.strip().rstrip("/")
        self._page_size = page_size
        self._max_pages = max_pages
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": _USER_AGENT},
            timeout=timeout,
        )

    @classmethod
    def from_settings(
        cls,
        active_settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> CharacterCatalogService:
        configured = active_settings or get_settings()
        return cls(
            base_url=configured.catalog_base_url,
            page_size=configured.catalog_page_size,
            max_pages=configured.catalog_max_pages,
            timeout=configured.http_timeout_seconds,
            client=client,
        )

    async def query_category(self, name: str) -> list[CharacterRecord]:
        """Return every character in ``name`` preserving catalog order.

        Raises :class:`CatalogError` when any page fails to load or decode.
        """

        url = f"{self._base_url}/{name}"
        records: list[CharacterRecord] = []
        page_number = 1

        while True:
            page = await self._fetch_page(name, url, page_number)
            records.extend(page.items)
            if not page.has_next or not page.items:
                break
            if page_number >= self._max_pages:
                logger.warning(
                    "Catalog category %s exceeded %d pages; truncating results",
                    name,
                    self._max_pages,
                )
                break
            page_number += 1

        logger.debug(
            "Catalog category %s returned %d characters across %d page(s)",
            name,
            len(records),
            page_number,
        )
        return records

    async def _fetch_page(self, name: str, url: str, page_number: int) -> CatalogPage:
        params = {"page": page_number, "limit": self._page_size}
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return CatalogPage.from_payload(response.json())
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning(
                "Catalog category %s page %d failed with HTTP %d",
                name,
                page_number,
                status_code,
            )
            raise CatalogError(
                f"Catalog returned HTTP {status_code} for category '{name}'",
                category=name,
                status_code=status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Catalog category %s unreachable: %s", name, exc)
            raise CatalogError(
                f"Catalog request for category '{name}' failed: {exc}",
                category=name,
            ) from exc
        except (ValidationError, ValueError) as exc:
            logger.warning("Catalog category %s returned a malformed page: %s", name, exc)
            raise CatalogError(
                f"Catalog payload for category '{name}' could not be decoded",
                category=name,
            ) from exc

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this service created it."""

        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> CharacterCatalogService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()


__all__ = ["CharacterCatalogService"]
