"""API routes for catalog module."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from autolisting.core.dependencies import DBSession, Pagination, TaskQueueDep, TenantFromHeader
from autolisting.modules.catalog.schemas import (
    VehicleCreate,
    VehicleListResponse,
    VehicleResponse,
    VehicleUpdate,
)
from autolisting.modules.catalog.service import VehicleService
from autolisting.modules.urls.schemas import UrlSuggestionsResponse
from autolisting.modules.urls.slugs import slugify
from autolisting.modules.urls.uniqueness import UniqueUrlResolver

router = APIRouter()


# ============================================================================
# Admin Routes - Vehicles
# ============================================================================


@router.get(
    "/admin/vehicles",
    response_model=VehicleListResponse,
    summary="List vehicles",
    tags=["Admin - Vehicles"],
)
async def list_vehicles(
    pagination: Pagination,
    tenant_id: TenantFromHeader,
    db: DBSession,
    is_active: bool | None = Query(default=None, alias="isActive"),
    brand_id: UUID | None = Query(default=None, alias="brandId"),
    search: str | None = Query(default=None, max_length=100),
) -> VehicleListResponse:
    """List tenant vehicles."""
    service = VehicleService(db)
    vehicles, total = await service.list_vehicles(
        tenant_id=tenant_id,
        page=pagination.page,
        page_size=pagination.page_size,
        is_active=is_active,
        brand_id=brand_id,
        search=search,
    )

    return VehicleListResponse(
        items=[VehicleResponse.model_validate(v) for v in vehicles],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get(
    "/admin/vehicles/url-suggestions",
    response_model=UrlSuggestionsResponse,
    summary="Suggest free vehicle urls",
    tags=["Admin - Vehicles"],
)
async def get_url_suggestions(
    tenant_id: TenantFromHeader,
    db: DBSession,
    title: str = Query(..., min_length=1, max_length=255),
    limit: int = Query(default=5, ge=1, le=20),
) -> UrlSuggestionsResponse:
    """Check a title's slug and list free numbered alternatives."""
    resolver = UniqueUrlResolver(db)
    base_slug = slugify(title)

    return UrlSuggestionsResponse(
        title=title,
        base_slug=base_slug,
        available=not await resolver.url_exists(base_slug, tenant_id),
        suggestions=await resolver.generate_suggestions(title, tenant_id, limit),
    )


@router.post(
    "/admin/vehicles",
    response_model=VehicleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create vehicle",
    tags=["Admin - Vehicles"],
)
async def create_vehicle(
    data: VehicleCreate,
    tenant_id: TenantFromHeader,
    db: DBSession,
    task_queue: TaskQueueDep,
) -> VehicleResponse:
    """Create a vehicle. Its url is derived from the title."""
    service = VehicleService(db, task_queue)
    vehicle = await service.create(tenant_id, data)
    return VehicleResponse.model_validate(vehicle)


@router.get(
    "/admin/vehicles/{vehicle_id}",
    response_model=VehicleResponse,
    summary="Get vehicle",
    tags=["Admin - Vehicles"],
)
async def get_vehicle(
    vehicle_id: UUID,
    tenant_id: TenantFromHeader,
    db: DBSession,
) -> VehicleResponse:
    """Get vehicle by ID."""
    service = VehicleService(db)
    vehicle = await service.get_by_id(vehicle_id, tenant_id)
    return VehicleResponse.model_validate(vehicle)


@router.patch(
    "/admin/vehicles/{vehicle_id}",
    response_model=VehicleResponse,
    summary="Update vehicle",
    tags=["Admin - Vehicles"],
)
async def update_vehicle(
    vehicle_id: UUID,
    data: VehicleUpdate,
    tenant_id: TenantFromHeader,
    db: DBSession,
    task_queue: TaskQueueDep,
) -> VehicleResponse:
    """Update a vehicle. A new title moves the url and records a 301."""
    service = VehicleService(db, task_queue)
    vehicle = await service.update(vehicle_id, tenant_id, data)
    return VehicleResponse.model_validate(vehicle)


@router.delete(
    "/admin/vehicles/{vehicle_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete vehicle",
    tags=["Admin - Vehicles"],
)
async def delete_vehicle(
    vehicle_id: UUID,
    tenant_id: TenantFromHeader,
    db: DBSession,
    task_queue: TaskQueueDep,
) -> None:
    """Soft delete a vehicle."""
    service = VehicleService(db, task_queue)
    await service.delete(vehicle_id, tenant_id)


@router.post(
    "/admin/vehicles/{vehicle_id}/restore",
    response_model=VehicleResponse,
    summary="Restore vehicle",
    tags=["Admin - Vehicles"],
)
async def restore_vehicle(
    vehicle_id: UUID,
    tenant_id: TenantFromHeader,
    db: DBSession,
    task_queue: TaskQueueDep,
) -> VehicleResponse:
    """Restore a soft-deleted vehicle."""
    service = VehicleService(db, task_queue)
    vehicle = await service.restore(vehicle_id, tenant_id)
    return VehicleResponse.model_validate(vehicle)
