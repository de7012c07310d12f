"""Catalog module service layer."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from autolisting.core.base_service import BaseService
from autolisting.core.database import transactional
from autolisting.core.exceptions import NotFoundError
from autolisting.core.logging import get_logger
from autolisting.core.tasks import TaskQueue
from autolisting.modules.catalog.models import Vehicle, VehicleBrand
from autolisting.modules.catalog.schemas import VehicleCreate, VehicleUpdate
from autolisting.modules.urls.lifecycle import VehicleUrlLifecycle

logger = get_logger(__name__)

# Fields that show up in generated SEO pages
SEO_FIELDS = ("title", "brand_id", "description", "is_active")


class VehicleService(BaseService[Vehicle]):
    """Vehicle CRUD.

    Every mutation runs its url step inside the same transaction, then
    schedules the tenant SEO url regeneration once committed.
    """

    model = Vehicle

    def __init__(
        self,
        db: AsyncSession,
        task_queue: TaskQueue | None = None,
        *,
        lifecycle: VehicleUrlLifecycle | None = None,
    ) -> None:
        super().__init__(db)
        self.lifecycle = lifecycle or VehicleUrlLifecycle(db, task_queue)

    def _get_default_options(self) -> list:
        return [selectinload(Vehicle.brand)]

    async def get_by_id(
        self, vehicle_id: UUID, tenant_id: UUID, include_deleted: bool = False
    ) -> Vehicle:
        """Get vehicle by ID."""
        return await self._get_by_id(vehicle_id, tenant_id, include_deleted=include_deleted)

    async def list_vehicles(
        self,
        tenant_id: UUID,
        page: int = 1,
        page_size: int = 20,
        is_active: bool | None = None,
        brand_id: UUID | None = None,
        search: str | None = None,
    ) -> tuple[list[Vehicle], int]:
        """List vehicles with filters."""
        filters = []
        if is_active is not None:
            filters.append(Vehicle.is_active == is_active)
        if brand_id:
            filters.append(Vehicle.brand_id == brand_id)
        if search:
            filters.append(Vehicle.title.ilike(f"%{search}%"))

        base_query = self._build_base_query(tenant_id, filters=filters)
        return await self._paginate(
            base_query,
            page,
            page_size,
            order_by=[Vehicle.created_at.desc(), Vehicle.id],
        )

    async def _ensure_brand(self, brand_id: UUID) -> None:
        result = await self.db.execute(select(VehicleBrand.id).where(VehicleBrand.id == brand_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("VehicleBrand", brand_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, tenant_id: UUID, data: VehicleCreate) -> Vehicle:
        """Create vehicle with a unique url."""
        vehicle = await self._create(tenant_id, data)
        await self.lifecycle.schedule_regeneration(tenant_id, "vehicle_created")
        return vehicle

    @transactional
    async def _create(self, tenant_id: UUID, data: VehicleCreate) -> Vehicle:
        await self._ensure_brand(data.brand_id)

        vehicle = Vehicle(tenant_id=tenant_id, **data.model_dump())
        self.db.add(vehicle)
        await self.db.flush()

        await self.lifecycle.on_vehicle_created(vehicle)
        await self.db.refresh(vehicle, ["brand"])

        logger.info("vehicle_created", vehicle_id=str(vehicle.id), url=vehicle.url)
        return vehicle

    async def update(self, vehicle_id: UUID, tenant_id: UUID, data: VehicleUpdate) -> Vehicle:
        """Update vehicle; a new title moves its url and leaves a redirect."""
        vehicle, seo_changed = await self._update(vehicle_id, tenant_id, data)
        if seo_changed:
            await self.lifecycle.schedule_regeneration(tenant_id, "vehicle_updated")
        return vehicle

    @transactional
    async def _update(
        self, vehicle_id: UUID, tenant_id: UUID, data: VehicleUpdate
    ) -> tuple[Vehicle, bool]:
        vehicle = await self.get_by_id(vehicle_id, tenant_id)
        old_title = vehicle.title
        old_url = vehicle.url

        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("brand_id"):
            await self._ensure_brand(update_data["brand_id"])

        seo_changed = False
        for field, value in update_data.items():
            if value is None and field in ("brand_id", "title", "is_active"):
                continue
            if getattr(vehicle, field) != value:
                setattr(vehicle, field, value)
                seo_changed = seo_changed or field in SEO_FIELDS

        await self.db.flush()
        await self.lifecycle.on_vehicle_updated(vehicle, old_title, old_url)
        await self.db.refresh(vehicle, ["brand"])

        return vehicle, seo_changed

    async def delete(self, vehicle_id: UUID, tenant_id: UUID) -> None:
        """Soft delete vehicle and switch off redirects to its last url."""
        await self._delete(vehicle_id, tenant_id)
        await self.lifecycle.schedule_regeneration(tenant_id, "vehicle_deleted")

    @transactional
    async def _delete(self, vehicle_id: UUID, tenant_id: UUID) -> None:
        vehicle = await self.get_by_id(vehicle_id, tenant_id)
        last_url = vehicle.url

        await self._soft_delete(vehicle)
        await self.lifecycle.on_vehicle_deleted(vehicle, last_url)

        logger.info("vehicle_deleted", vehicle_id=str(vehicle_id), last_url=last_url)

    async def restore(self, vehicle_id: UUID, tenant_id: UUID) -> Vehicle:
        """Restore a soft-deleted vehicle; its url is resolved again."""
        vehicle, restored = await self._restore(vehicle_id, tenant_id)
        if restored:
            await self.lifecycle.schedule_regeneration(tenant_id, "vehicle_restored")
        return vehicle

    @transactional
    async def _restore(self, vehicle_id: UUID, tenant_id: UUID) -> tuple[Vehicle, bool]:
        vehicle = await self.get_by_id(vehicle_id, tenant_id, include_deleted=True)
        if not vehicle.is_deleted:
            return vehicle, False

        vehicle.restore()
        await self.lifecycle.on_vehicle_restored(vehicle)
        await self.db.refresh(vehicle, ["brand"])

        logger.info("vehicle_restored", vehicle_id=str(vehicle_id), url=vehicle.url)
        return vehicle, True
