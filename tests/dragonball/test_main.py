from __future__ import annotations

import pytest

from dragonball.main import create_favorites_view_model
from dragonball.services.favorites_view_model import FavoritesViewModel
from dragonball.settings import DEFAULT_CATALOG_CATEGORIES, AppSettings


@pytest.mark.asyncio
async def test_create_favorites_view_model_wires_settings() -> None:
    configured = AppSettings(firestore_project_id="dragonball-app")

    view_model = create_favorites_view_model(configured)
    try:
        assert isinstance(view_model, FavoritesViewModel)
        assert view_model.favorite_ids == []
        assert view_model.has_error is False
        assert view_model.categories == DEFAULT_CATALOG_CATEGORIES
    finally:
        await view_model.aclose()


@pytest.mark.asyncio
async def test_view_model_always_queries_the_fixed_categories(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("CATALOG_CATEGORIES", "dragons")
    configured = AppSettings(firestore_project_id="dragonball-app")

    view_model = create_favorites_view_model(configured)
    try:
        assert view_model.categories == (
            "dragonball",
            "dragonballz",
            "dragonballgt",
            "dragons",
        )
    finally:
        await view_model.aclose()

def test_create_favorites_view_model_requires_project() -> None:
    with pytest.raises(RuntimeError, match="FIRESTORE_PROJECT_ID"):
        create_favorites_view_model(AppSettings(firestore_project_id=""))
