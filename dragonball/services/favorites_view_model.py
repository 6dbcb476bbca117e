"""State holder behind the favorites screen.

:class:`FavoritesViewModel` owns a single :class:`FavoritesState` and is the
only writer of it. The UI reads through the accessor properties (which return
copies) or subscribes with :meth:`FavoritesViewModel.add_listener`.

Collaborators:
* :class:`~dragonball.services.favorites.FavoritesStore` – remote persistence
  of favorite IDs. Every mutation is followed by a reload of the store's list,
  whether the mutation succeeded or not, so local state converges on the
  store's.
* :class:`~dragonball.services.favorites.CharacterCatalog` – catalog queried
  per category to hydrate favorite IDs into full records.

Store failures are absorbed into ``has_error``/``error_message``; catalog
failures during hydration leave the previous records in place and are reported
through ``hydration_warning``/``failed_categories`` instead.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager

from dragonball.schemas.character import CharacterRecord
from dragonball.schemas.favorites import FavoriteCharacter, FavoritesState
from dragonball.services.exceptions import PersistenceError
from dragonball.services.favorites import (
    CharacterCatalog,
    FavoritesStore,
    filter_favorites,
    query_categories,
)
from dragonball.settings import DEFAULT_CATALOG_CATEGORIES

logger = logging.getLogger(__name__)

ADD_ERROR_MESSAGE = "Error al agregar a favoritos"
LOAD_ERROR_MESSAGE = "Error al obtener personajes favoritos"
REMOVE_ERROR_MESSAGE = "No se pudo eliminar el personaje desde favoritos"

StateListener = Callable[[FavoritesState], None]


def _unique_favorites(
    favorites: Iterable[FavoriteCharacter],
) -> list[FavoriteCharacter]:
    seen: set[int] = set()
    unique: list[FavoriteCharacter] = []
    for favorite in favorites:
        if favorite.character_id in seen:
            continue
        seen.add(favorite.character_id)
        unique.append(favorite)
    return unique


class FavoritesViewModel:
    """Coordinates favorite IDs, their persistence and catalog hydration."""

    def __init__(
        self,
        *,
        store: FavoritesStore,
        catalog: CharacterCatalog,
        categories: Sequence[str] = DEFAULT_CATALOG_CATEGORIES,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._categories = tuple(categories)
        self._state = FavoritesState()
        self._listeners: list[StateListener] = []
        self._lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

    # -- Observable state ---------------------------------------------------------

    @property
    def categories(self) -> tuple[str, ...]:
        return self._categories

    @property
    def state(self) -> FavoritesState:
        return self._state.model_copy(deep=True)

    @property
    def favorite_ids(self) -> list[FavoriteCharacter]:
        return list(self._state.favorite_ids)

    @property
    def hydrated_characters(self) -> list[CharacterRecord]:
        return list(self._state.hydrated_characters)

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def has_error(self) -> bool:
        return self._state.has_error

    @property
    def error_message(self) -> str:
        return self._state.error_message

    @property
    def hydration_warning(self) -> str | None:
        return self._state.hydration_warning

    @property
    def failed_categories(self) -> list[str]:
        return list(self._state.failed_categories)

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for state snapshots; returns an unsubscribe hook."""

        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def dismiss_error(self) -> None:
        """Clear the error flag once the UI has shown it."""

        if not self._state.has_error and not self._state.error_message:
            return
        self._state.has_error = False
        self._state.error_message = ""
        self._notify()

    # -- Operations ---------------------------------------------------------------

    def is_favorite(self, character_id: int) -> bool:
        return any(
            favorite.character_id == character_id
            for favorite in self._state.favorite_ids
        )

    async def add_to_favorites(self, character_id: int) -> None:
        """Mark ``character_id`` as favorite locally, then persist it.

        The local list is updated before the store is called. Adding an ID that
        is already present does not duplicate it.
        """

        self._ensure_owner_loop()
        favorite = FavoriteCharacter(character_id=character_id)

        async with self._lock:
            with self._loading():
                if not self.is_favorite(character_id):
                    self._state.favorite_ids.append(favorite)
                    self._notify()

                failure: PersistenceError | None = None
                try:
                    await self._store.create_favorite(favorite)
                except PersistenceError as exc:
                    logger.warning(
                        "Could not store favorite character %d: %s", character_id, exc
                    )
                    failure = exc

                await self._reload_favorite_ids()
                if failure is not None:
                    self._set_error(ADD_ERROR_MESSAGE)

    async def refresh_favorite_ids(self) -> None:
        """Replace local favorites with the store's list."""

        self._ensure_owner_loop()
        async with self._lock:
            with self._loading():
                await self._reload_favorite_ids()

    async def refresh_hydrated_characters(self) -> None:
        """Resolve current favorites into catalog records.

        Records follow catalog category order, not favoriting order. When any
        category fails the previous records are kept and the failure is
        reported through ``hydration_warning`` without raising ``has_error``.
        """

        self._ensure_owner_loop()
        async with self._lock:
            with self._loading():
                outcome = await query_categories(self._catalog, self._categories)
                self._state.failed_categories = outcome.failed_categories
                self._state.hydration_warning = outcome.warning
                if outcome.complete:
                    self._state.hydrated_characters = filter_favorites(
                        outcome.records, self._state.favorite_ids
                    )
                else:
                    logger.warning(
                        "Keeping %d hydrated characters; categories failed: %s",
                        len(self._state.hydrated_characters),
                        ", ".join(outcome.failed_categories),
                    )
                self._notify()

    async def remove_from_favorites(self, character_id: int) -> bool:
        """Drop ``character_id`` locally and from the store.

        Returns ``False`` when the store rejects the delete.
        """

        self._ensure_owner_loop()
        async with self._lock:
            with self._loading():
                self._state.hydrated_characters = [
                    record
                    for record in self._state.hydrated_characters
                    if record.id != character_id
                ]
                self._state.favorite_ids = [
                    favorite
                    for favorite in self._state.favorite_ids
                    if favorite.character_id != character_id
                ]
                self._notify()

                failure: PersistenceError | None = None
                try:
                    await self._store.delete_favorite(character_id)
                except PersistenceError as exc:
                    logger.warning(
                        "Could not delete favorite character %d: %s", character_id, exc
                    )
                    failure = exc

                await self._reload_favorite_ids()
                if failure is not None:
                    self._set_error(REMOVE_ERROR_MESSAGE)
                    return False
                return True

    async def load(self) -> None:
        """Initial screen load: favorites from the store, then their records."""

        await self.refresh_favorite_ids()
        await self.refresh_hydrated_characters()

    async def aclose(self) -> None:
        """Close collaborators that hold network resources."""

        for collaborator in (self._store, self._catalog):
            close = getattr(collaborator, "aclose", None)
            if close is not None:
                await close()

    # -- Internals ----------------------------------------------------------------

    async def _reload_favorite_ids(self) -> None:
        try:
            favorites = await self._store.list_favorites()
        except PersistenceError as exc:
            logger.warning("Could not load favorite characters: %s", exc)
            self._set_error(LOAD_ERROR_MESSAGE)
            return

        self._state.favorite_ids = _unique_favorites(favorites)
        # Hydrated records must stay a subset of the favorites.
        self._state.hydrated_characters = filter_favorites(
            self._state.hydrated_characters, self._state.favorite_ids
        )
        self._notify()

    def _set_error(self, message: str) -> None:
        self._state.has_error = True
        self._state.error_message = message
        self._notify()

    @contextmanager
    def _loading(self) -> Iterator[None]:
        self._state.is_loading = True
        self._notify()
        try:
            yield
        finally:
            self._state.is_loading = False
            self._notify()

    def _ensure_owner_loop(self) -> None:
        """Bind to the first running loop and reject calls from any other."""

        running = asyncio.get_running_loop()
        if self._loop is None:
            self._loop = running
        elif self._loop is not running:
            raise RuntimeError(
                "FavoritesViewModel is bound to another event loop; "
                "drive it from the loop that owns the UI."
            )

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:  # noqa: BLE001
                logger.exception("Favorites state listener %r failed", listener)


__all__ = [
    "ADD_ERROR_MESSAGE",
    "FavoritesViewModel",
    "LOAD_ERROR_MESSAGE",
    "REMOVE_ERROR_MESSAGE",
    "StateListener",
]
