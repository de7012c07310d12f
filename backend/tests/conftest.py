"""Pytest configuration and fixtures.

Tests run without PostgreSQL or Redis: sessions are ``AsyncMock`` objects
whose ``execute`` results are arranged per test, and the app is exercised
through httpx with the database, tenant and task queue dependencies
overridden. The suites under ``tests/integration`` use a real database and
are skipped when it cannot be reached.
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from autolisting.core.database import get_db
from autolisting.core.dependencies import get_task_queue, get_tenant_from_header
from autolisting.main import create_app
from autolisting.modules.catalog.models import (
    City,
    Neighborhood,
    State,
    Vehicle,
    VehicleBrand,
)
from autolisting.modules.urls.paths import (
    BrandSource,
    CitySource,
    NeighborhoodSource,
    VehicleSource,
)
from tests.fixtures.constants import TEST_BRAND_ID, TEST_TENANT_ID, TEST_VEHICLE_ID
from tests.fixtures.db import fake_savepoint

# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session."""
    db = AsyncMock()
    db.add = Mock()
    db.begin_nested = Mock(side_effect=lambda: fake_savepoint())
    return db


@pytest.fixture
def task_queue() -> AsyncMock:
    """Task queue whose ``enqueue`` succeeds."""
    return AsyncMock()


# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def brand() -> VehicleBrand:
    return VehicleBrand(id=TEST_BRAND_ID, name="Chevrolet", code="chevrolet")


@pytest.fixture
def vehicle(brand: VehicleBrand) -> Vehicle:
    now = datetime.now(UTC)
    vehicle = Vehicle(
        id=TEST_VEHICLE_ID,
        tenant_id=TEST_TENANT_ID,
        brand_id=brand.id,
        title="Onix 1.0",
        description=None,
        url="onix-10",
        is_active=True,
        created_at=now,
        updated_at=now,
        deleted_at=None,
    )
    vehicle.brand = brand
    return vehicle


@pytest.fixture
def sao_paulo() -> City:
    city = City(id=uuid4(), name="São Paulo", state_id=uuid4())
    city.state = State(id=city.state_id, name="São Paulo", code="SP")
    return city


@pytest.fixture
def vila_madalena(sao_paulo: City) -> Neighborhood:
    neighborhood = Neighborhood(id=uuid4(), name="Vila Madalena", city_id=sao_paulo.id)
    neighborhood.city = sao_paulo
    return neighborhood


@pytest.fixture
def brand_source() -> BrandSource:
    return BrandSource(id=TEST_BRAND_ID, name="Chevrolet")


@pytest.fixture
def vehicle_source(brand_source: BrandSource) -> VehicleSource:
    return VehicleSource(
        id=TEST_VEHICLE_ID,
        title="Onix 1.0 Turbo",
        brand=brand_source,
        url="onix-10-turbo",
    )


@pytest.fixture
def city_source() -> CitySource:
    return CitySource(id=uuid4(), name="São Paulo", state_name="São Paulo", state_code="SP")


@pytest.fixture
def neighborhood_source(city_source: CitySource) -> NeighborhoodSource:
    return NeighborhoodSource(id=uuid4(), name="Vila Madalena", city=city_source)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def app(mock_db: AsyncMock, task_queue: AsyncMock) -> FastAPI:
    """Create test FastAPI application."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield mock_db

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_tenant_from_header] = lambda: TEST_TENANT_ID
    application.dependency_overrides[get_task_queue] = lambda: task_queue

    return application


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
