"""Fixtures for tests that run against a real PostgreSQL database.

Set ``TEST_DATABASE_URL`` to point at a scratch database; the default is the
application database url. Tables are created inside an outer transaction that
is rolled back after each test, and the session joins it through savepoints so
service-level commits never reach the database. Tests are skipped when the
database cannot be reached.
"""

import os
from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from autolisting.config import settings
from autolisting.core.base_model import Base
from autolisting.modules.catalog.models import Vehicle, VehicleBrand
from autolisting.modules.seo.models import SeoUrl, UrlRedirect  # noqa: F401
from autolisting.modules.tenants.models import Tenant


def _database_url() -> str:
    return os.environ.get("TEST_DATABASE_URL", str(settings.database_url))


@pytest_asyncio.fixture(scope="function")
async def db_connection() -> AsyncGenerator[AsyncConnection, None]:
    """Connection holding an outer transaction that is always rolled back."""
    engine = create_async_engine(_database_url(), poolclass=NullPool)
    try:
        connection = await engine.connect()
    except Exception as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL is not reachable: {e}")

    transaction = await connection.begin()
    await connection.run_sync(Base.metadata.create_all)

    yield connection

    await transaction.rollback()
    await connection.close()
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_connection: AsyncConnection) -> AsyncGenerator[AsyncSession, None]:
    """Session whose commits only release savepoints of the outer transaction."""
    session = AsyncSession(
        bind=db_connection,
        expire_on_commit=False,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )
    yield session
    await session.close()


@pytest_asyncio.fixture(scope="function")
async def test_tenant(db_session: AsyncSession) -> Tenant:
    suffix = uuid4().hex[:8]
    tenant = Tenant(name=f"Loja {suffix}", slug=f"loja-{suffix}", is_active=True)
    db_session.add(tenant)
    await db_session.flush()
    return tenant


@pytest_asyncio.fixture(scope="function")
async def test_brand(db_session: AsyncSession) -> VehicleBrand:
    # Brand names are global and unique.
    brand = VehicleBrand(name=f"Chevrolet {uuid4().hex[:8]}")
    db_session.add(brand)
    await db_session.flush()
    return brand


@pytest_asyncio.fixture(scope="function")
async def make_vehicle(db_session: AsyncSession, test_tenant: Tenant, test_brand: VehicleBrand):
    """Factory adding a flushed vehicle of the test tenant."""

    async def factory(title: str = "Onix 1.0", url: str | None = None, **kwargs) -> Vehicle:
        vehicle = Vehicle(
            tenant_id=test_tenant.id,
            brand_id=test_brand.id,
            title=title,
            url=url,
            is_active=kwargs.pop("is_active", True),
            **kwargs,
        )
        db_session.add(vehicle)
        await db_session.flush()
        return vehicle

    return factory
