"""Tenant lookup utilities.

Resolves the default tenant in single-tenant deployments and the tenant
behind an inbound host name for the redirect middleware.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from autolisting.config import settings
from autolisting.modules.tenants.models import Tenant

# Cache for default tenant ID to avoid repeated database queries
_default_tenant_id: UUID | None = None


async def get_default_tenant(db: AsyncSession) -> Tenant:
    """Get the default tenant from the database.

    Raises:
        RuntimeError: If default tenant is not found
    """
    stmt = select(Tenant).where(
        Tenant.slug == settings.default_tenant_slug,
        Tenant.deleted_at.is_(None),
    )
    result = await db.execute(stmt)
    tenant = result.scalar_one_or_none()

    if not tenant:
        raise RuntimeError(f"Default tenant '{settings.default_tenant_slug}' not found.")

    return tenant


async def get_default_tenant_id(db: AsyncSession) -> UUID:
    """Get the default tenant ID with caching."""
    global _default_tenant_id

    if _default_tenant_id is None:
        tenant = await get_default_tenant(db)
        _default_tenant_id = tenant.id

    return _default_tenant_id


async def validate_tenant_exists(db: AsyncSession, tenant_id: UUID) -> bool:
    """Validate that a tenant exists and is active."""
    stmt = select(Tenant.id).where(
        Tenant.id == tenant_id,
        Tenant.is_active.is_(True),
        Tenant.deleted_at.is_(None),
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None


async def get_tenant_id_by_domain(db: AsyncSession, domain: str) -> UUID | None:
    """Find the active tenant serving a host name (port stripped)."""
    host = domain.split(":", 1)[0].lower()
    stmt = select(Tenant.id).where(
        Tenant.domain == host,
        Tenant.is_active.is_(True),
        Tenant.deleted_at.is_(None),
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_active_tenant_ids(db: AsyncSession) -> list[UUID]:
    """IDs of every active tenant (used by the regenerate-all task)."""
    stmt = (
        select(Tenant.id)
        .where(Tenant.is_active.is_(True), Tenant.deleted_at.is_(None))
        .order_by(Tenant.created_at)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
