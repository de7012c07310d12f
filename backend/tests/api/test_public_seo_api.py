"""Tests for the public SEO endpoints used by the storefront."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from autolisting.modules.seo.models import SeoUrl, UrlRedirect
from tests.fixtures.constants import TEST_TENANT_ID
from tests.fixtures.db import scalar_result, scalars_result

BASE = "/api/v1/public"
TENANT = {"tenant_id": str(TEST_TENANT_ID)}


def make_page() -> SeoUrl:
    return SeoUrl(
        tenant_id=TEST_TENANT_ID,
        locale="pt-BR",
        path="chevrolet/onix-10",
        type="vehicle_detail",
        canonical_url="/chevrolet/onix-10",
        title="Onix 1.0",
        meta_description="Veja detalhes do Onix 1.0",
        breadcrumbs=[
            {"name": "Início", "path": "/"},
            {"name": "Chevrolet", "path": "/chevrolet"},
            {"name": "Onix 1.0", "path": "/chevrolet/onix-10"},
        ],
        route_params={"vehicle_id": "00000000-0000-0000-0000-000000000020"},
        is_indexable=True,
        include_in_sitemap=True,
        sitemap_priority=0.8,
        sitemap_changefreq="weekly",
        lastmod=datetime(2026, 3, 1, tzinfo=UTC),
    )


@pytest.mark.asyncio
async def test_get_page(client: AsyncClient, mock_db: AsyncMock) -> None:
    mock_db.execute.return_value = scalar_result(make_page())

    response = await client.get(
        f"{BASE}/seo/page", params={**TENANT, "path": "/chevrolet/onix-10"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["type"] == "vehicle_detail"
    assert data["canonical_url"] == "/chevrolet/onix-10"
    assert [crumb["name"] for crumb in data["breadcrumbs"]] == ["Início", "Chevrolet", "Onix 1.0"]


@pytest.mark.asyncio
async def test_get_missing_page(client: AsyncClient, mock_db: AsyncMock) -> None:
    mock_db.execute.return_value = scalar_result(None)

    response = await client.get(f"{BASE}/seo/page", params={**TENANT, "path": "/nope"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_tenant_is_required(client: AsyncClient) -> None:
    response = await client.get(f"{BASE}/seo/page", params={"path": "/chevrolet"})

    assert response.status_code == 400
    assert response.json()["type"].endswith("/tenant_required")


@pytest.mark.asyncio
async def test_resolve_redirect(client: AsyncClient, mock_db: AsyncMock) -> None:
    redirect = UrlRedirect(
        tenant_id=TEST_TENANT_ID,
        from_url="chevrolet/onix-10",
        to_url="chevrolet/onix-10-turbo",
        redirect_type=301,
        is_active=True,
        hit_count=0,
    )
    mock_db.execute.return_value = scalar_result(redirect)

    response = await client.get(
        f"{BASE}/redirects/resolve", params={**TENANT, "path": "/chevrolet/onix-10"}
    )

    assert response.status_code == 200
    assert response.json() == {
        "redirect": True,
        "from_url": "chevrolet/onix-10",
        "to_url": "/chevrolet/onix-10-turbo",
        "status_code": 301,
    }
    assert redirect.hit_count == 1
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_resolve_without_redirect(client: AsyncClient, mock_db: AsyncMock) -> None:
    mock_db.execute.return_value = scalar_result(None)

    response = await client.get(
        f"{BASE}/redirects/resolve", params={**TENANT, "path": "/chevrolet/onix-10"}
    )

    assert response.status_code == 200
    assert response.json()["redirect"] is False
    mock_db.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_sitemap(client: AsyncClient, mock_db: AsyncMock) -> None:
    mock_db.execute.return_value = scalars_result([make_page()])

    response = await client.get(f"{BASE}/sitemap.xml", params=TENANT)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert "<loc>http://test/chevrolet/onix-10</loc>" in response.text
    assert "<priority>0.8</priority>" in response.text
