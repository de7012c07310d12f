"""Common FastAPI dependencies."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from autolisting.config import settings
from autolisting.core.database import get_db
from autolisting.core.exceptions import (
    DefaultTenantConfigError,
    InvalidTenantIdError,
    TenantHeaderRequiredError,
    TenantNotFoundError,
    TenantRequiredError,
)
from autolisting.core.redis import get_redis_client
from autolisting.core.tasks import TaskQueue
from autolisting.core.tenant import get_default_tenant_id, validate_tenant_exists

# Type alias for database dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


class PaginationParams:
    """Common pagination parameters."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number"),
        page_size: int = Query(
            default=20, ge=1, le=100, alias="page_size", description="Items per page"
        ),
    ) -> None:
        self.page = page
        self.page_size = page_size
        self.offset = (page - 1) * page_size

    @property
    def limit(self) -> int:
        return self.page_size


Pagination = Annotated[PaginationParams, Depends()]


class LocaleParams:
    """Locale parameter for public API."""

    def __init__(
        self,
        locale: str = Query(
            default=settings.seo_default_locale,
            min_length=2,
            max_length=5,
            description="Locale code (e.g., 'pt-BR')",
        ),
    ) -> None:
        self.locale = locale


Locale = Annotated[LocaleParams, Depends()]


async def get_public_tenant_id(
    tenant_id: UUID | None = Query(
        default=None,
        description="Tenant ID (optional in single-tenant mode, required in multi-tenant mode)",
    ),
    db: AsyncSession = Depends(get_db),
) -> UUID:
    """Get tenant_id for public endpoints.

    In single-tenant mode the default tenant is always used. In multi-tenant
    mode tenant_id is required.
    """
    if settings.single_tenant_mode:
        return await get_default_tenant_id(db)

    if tenant_id is None:
        raise TenantRequiredError()

    return tenant_id


PublicTenantId = Annotated[UUID, Depends(get_public_tenant_id)]


async def get_tenant_from_header(
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-ID"),
    db: AsyncSession = Depends(get_db),
) -> UUID:
    """Get tenant_id from X-Tenant-ID header for admin endpoints.

    Raises:
        DefaultTenantConfigError: If default tenant is misconfigured (single-tenant mode)
        TenantHeaderRequiredError: If header is missing (multi-tenant mode)
        InvalidTenantIdError: If header value is not a valid UUID
        TenantNotFoundError: If tenant doesn't exist or is inactive
    """
    if settings.single_tenant_mode:
        try:
            return await get_default_tenant_id(db)
        except RuntimeError as e:
            raise DefaultTenantConfigError(str(e))

    if not x_tenant_id:
        raise TenantHeaderRequiredError()

    try:
        tenant_id = UUID(x_tenant_id)
    except ValueError:
        raise InvalidTenantIdError(x_tenant_id)

    if not await validate_tenant_exists(db, tenant_id):
        raise TenantNotFoundError(tenant_id)

    return tenant_id


TenantFromHeader = Annotated[UUID, Depends(get_tenant_from_header)]


def get_task_queue() -> TaskQueue:
    """Task queue over the shared Redis client.

    Enqueueing fails (and is logged by the caller) while Redis is down.
    """
    return TaskQueue(get_redis_client())


TaskQueueDep = Annotated[TaskQueue, Depends(get_task_queue)]
