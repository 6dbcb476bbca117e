from __future__ import annotations

import httpx
import pytest

from dragonball.services.catalog_service import CharacterCatalogService
from dragonball.services.exceptions import CatalogError
from dragonball.settings import AppSettings

BASE_URL = "https://catalog.test/api"


def _character(character_id: int) -> dict:
    return {
        "id": character_id,
        "name": f"Character {character_id}",
        "ki": "60.000.000",
        "maxKi": "90 Septillion",
        "race": "Saiyan",
        "gender": "Male",
        "description": "",
        "image": f"https://catalog.test/images/{character_id}.webp",
        "affiliation": "Z Fighter",
        "deletedAt": None,
    }


def _service(handler, *, max_pages: int = 20) -> CharacterCatalogService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CharacterCatalogService(
        base_url=BASE_URL,
        page_size=2,
        max_pages=max_pages,
        timeout=5.0,
        client=client,
    )


def _paged(pages: dict[int, list[int]]):
    total_pages = len(pages)
    requested: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        requested.append(page)
        return httpx.Response(
            200,
            json={
                "items": [_character(character_id) for character_id in pages[page]],
                "meta": {
                    "totalItems": sum(len(ids) for ids in pages.values()),
                    "itemCount": len(pages[page]),
                    "itemsPerPage": 2,
                    "totalPages": total_pages,
                    "currentPage": page,
                },
                "links": {"next": "" if page == total_pages else "more"},
            },
        )

    return handler, requested


@pytest.mark.asyncio
async def test_query_category_collects_every_page_in_order() -> None:
    handler, requested = _paged({1: [1, 2], 2: [3, 4], 3: [5]})
    service = _service(handler)

    records = await service.query_category("dragonballz")

    assert [record.id for record in records] == [1, 2, 3, 4, 5]
    assert requested == [1, 2, 3]
    assert records[0].max_ki == "90 Septillion"


@pytest.mark.asyncio
async def test_query_category_requests_category_path() -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        assert request.url.params["limit"] == "2"
        return httpx.Response(200, json=[_character(9)])

    service = _service(handler)
    records = await service.query_category("dragons")

    assert paths == ["/api/dragons"]
    assert [record.id for record in records] == [9]


@pytest.mark.asyncio
async def test_query_category_keeps_unknown_display_fields() -> None:
    payload = [{**_character(1), "transformations": ["Super Saiyan"]}]
    service = _service(lambda request: httpx.Response(200, json=payload))

    (record,) = await service.query_category("dragonball")

    assert record.model_extra == {"deletedAt": None, "transformations": ["Super Saiyan"]}


@pytest.mark.asyncio
async def test_query_category_stops_at_max_pages() -> None:
    handler, requested = _paged({1: [1, 2], 2: [3, 4], 3: [5, 6]})
    service = _service(handler, max_pages=2)

    records = await service.query_category("dragonball")

    assert requested == [1, 2]
    assert [record.id for record in records] == [1, 2, 3, 4]


@pytest.mark.asyncio
async def test_http_status_failure_raises_catalog_error() -> None:
    service = _service(lambda request: httpx.Response(500))

    with pytest.raises(CatalogError) as excinfo:
        await service.query_category("dragonballgt")

    assert excinfo.value.category == "dragonballgt"
    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
async def test_transport_failure_raises_catalog_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    service = _service(handler)

    with pytest.raises(CatalogError):
        await service.query_category("dragonball")


@pytest.mark.asyncio
async def test_malformed_payload_raises_catalog_error() -> None:
    service = _service(
        lambda request: httpx.Response(200, json={"items": [{"name": "No id"}]})
    )

    with pytest.raises(CatalogError):
        await service.query_category("dragonball")


@pytest.mark.asyncio
async def test_non_json_payload_raises_catalog_error() -> None:
    service = _service(lambda request: httpx.Response(200, text="<html></html>"))

    with pytest.raises(CatalogError):
        await service.query_category("dragonball")


@pytest.mark.asyncio
async def test_from_settings_uses_configured_base_url() -> None:
    configured = AppSettings(catalog_base_url="https://other.test/api/", catalog_page_size=5)
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(str(request.url))
        return httpx.Response(200, json=[])

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    async with CharacterCatalogService.from_settings(configured, client=client) as service:
        assert await service.query_category("dragonball") == []

    assert paths == ["https://other.test/api/dragonball?page=1&limit=5"]
