"""Remote persistence for favorite characters.

:class:`FavoritesStore` is the contract the view model depends on.
:class:`FirestoreFavoritesStore` implements it against the Firestore REST API,
storing one document per favorite with the character ID as document ID:

* ``create_favorite`` – ``PATCH`` (upsert) of ``{collection}/{characterID}``.
* ``list_favorites`` – paged ``GET`` of the collection following
  ``nextPageToken``.
* ``delete_favorite`` – ``DELETE`` of ``{collection}/{characterID}``.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from dragonball.schemas.favorites import FavoriteCharacter
from dragonball.services.exceptions import PersistenceError
from dragonball.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

_CHARACTER_ID_FIELD = "characterID"


@runtime_checkable
class FavoritesStore(Protocol):
    async def create_favorite(self, favorite: FavoriteCharacter) -> None:
        """Persist ``favorite``; storing an existing ID is a no-op upsert."""

    async def list_favorites(self) -> list[FavoriteCharacter]:
        """Return every persisted favorite in store order."""

    async def delete_favorite(self, character_id: int) -> None:
        """Remove the favorite keyed by ``character_id``."""


def encode_favorite(favorite: FavoriteCharacter) -> dict[str, Any]:
    """Return the Firestore document body for ``favorite``."""

    return {
        "fields": {
            _CHARACTER_ID_FIELD: {"integerValue": str(favorite.character_id)},
        }
    }


def decode_favorite(document: dict[str, Any]) -> FavoriteCharacter:
    """Build a :class:`FavoriteCharacter` from a Firestore document.

    Documents written by older clients may lack the ``characterID`` field; the
    trailing segment of the document name is the character ID in that case.
    """

    fields = document.get("fields") or {}
    value = fields.get(_CHARACTER_ID_FIELD) or {}
    raw_id = value.get("integerValue", value.get("doubleValue"))
    if raw_id is None:
        raw_id = str(document.get("name", "")).rsplit("/", 1)[-1]
    return FavoriteCharacter.model_validate({_CHARACTER_ID_FIELD: raw_id})


class FirestoreFavoritesStore:
    """Favorites store backed by a Firestore collection."""

    def __init__(
        self,
        *,
        documents_url: str,
        collection: str,
        page_size: int,
        max_pages: int,
        timeout: float,
        api_token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._collection_url = f"{documents_url.rstrip('/')}/{collection}"
        self._page_size = page_size
        self._max_pages = max_pages
        headers = {"Authorization": f"Bearer {api_token}"} if api_token else {}
        self._headers = headers
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls,
        active_settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> FirestoreFavoritesStore:
        configured = active_settings or get_settings()
        return cls(
            documents_url=configured.firestore_documents_url,
            collection=configured.firestore_collection,
            page_size=configured.firestore_page_size,
            max_pages=configured.firestore_max_pages,
            timeout=configured.http_timeout_seconds,
            api_token=configured.firestore_api_token,
            client=client,
        )

    async def create_favorite(self, favorite: FavoriteCharacter) -> None:
        url = f"{self._collection_url}/{favorite.character_id}"
        await self._send("create", "PATCH", url, json=encode_favorite(favorite))
        logger.debug("Stored favorite character %d", favorite.character_id)

    async def list_favorites(self) -> list[FavoriteCharacter]:
        """Return every stored favorite, following page tokens.

        Listing stops early when the server repeats a page token or after
        ``max_pages`` pages.
        """

        favorites: list[FavoriteCharacter] = []
        page_token: str | None = None
        seen_tokens: set[str] = set()
        page_count = 0

        while True:
            page_count += 1
            params: dict[str, Any] = {"pageSize": self._page_size}
            if page_token:
                params["pageToken"] = page_token
            response = await self._send(
                "list", "GET", self._collection_url, params=params
            )
            try:
                payload = response.json()
                favorites.extend(
                    decode_favorite(document)
                    for document in payload.get("documents", [])
                )
            except (ValidationError, ValueError, AttributeError) as exc:
                logger.warning("Favorites store returned a malformed page: %s", exc)
                raise PersistenceError(
                    "Favorites store returned an unreadable document list",
                    operation="list",
                ) from exc

            page_token = payload.get("nextPageToken")
            if not page_token:
                break
            if page_token in seen_tokens:
                logger.warning(
                    "Favorites store repeated page token %r; stopping after %d page(s)",
                    page_token,
                    page_count,
                )
                break
            if page_count >= self._max_pages:
                logger.warning(
                    "Favorites listing exceeded %d pages; truncating results",
                    self._max_pages,
                )
                break
            seen_tokens.add(page_token)

        logger.debug("Loaded %d favorite characters", len(favorites))
        return favorites

    async def delete_favorite(self, character_id: int) -> None:
        url = f"{self._collection_url}/{character_id}"
        await self._send("delete", "DELETE", url, missing_ok=True)
        logger.debug("Deleted favorite character %d", character_id)

    async def _send(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        missing_ok: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, url, headers=self._headers, **kwargs
            )
            if missing_ok and response.status_code == httpx.codes.NOT_FOUND:
                return response
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning(
                "Favorites store %s failed with HTTP %d", operation, status_code
            )
            raise PersistenceError(
                f"Favorites store {operation} returned HTTP {status_code}",
                operation=operation,
                status_code=status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Favorites store %s unreachable: %s", operation, exc)
            raise PersistenceError(
                f"Favorites store {operation} failed: {exc}",
                operation=operation,
            ) from exc

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this store created it."""

        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> FirestoreFavoritesStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()


__all__ = [
    "FavoritesStore",
    "FirestoreFavoritesStore",
    "decode_favorite",
    "encode_favorite",
]
