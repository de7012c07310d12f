"""Base service with common CRUD operations.

Provides reusable patterns for the service layer to reduce code duplication.
"""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from autolisting.core.base_model import Base
from autolisting.core.exceptions import NotFoundError

# Type variable for models
ModelT = TypeVar("ModelT", bound=Base)


class BaseService(Generic[ModelT]):
    """Base service class with common CRUD operations.

    Provides standard patterns for:
    - get_by_id with tenant isolation
    - soft delete
    - pagination

    Usage:
        class VehicleService(BaseService[Vehicle]):
            model = Vehicle

            def _get_default_options(self) -> list:
                return [selectinload(Vehicle.brand)]
    """

    # Override in subclass
    model: type[ModelT]

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _get_default_options(self) -> list[Any]:
        """Override in subclass to provide default eager loading options."""
        return []

    async def _get_by_id(
        self,
        entity_id: UUID,
        tenant_id: UUID,
        *,
        options: list[Any] | None = None,
        include_deleted: bool = False,
    ) -> ModelT:
        """Get entity by ID with tenant isolation.

        Args:
            entity_id: Entity UUID
            tenant_id: Tenant UUID for isolation
            options: SQLAlchemy loading options (default: self._get_default_options())
            include_deleted: If True, include soft-deleted records

        Raises:
            NotFoundError: If entity not found
        """
        load_options = options if options is not None else self._get_default_options()

        stmt = select(self.model).where(self.model.id == entity_id)

        if hasattr(self.model, "tenant_id"):
            stmt = stmt.where(self.model.tenant_id == tenant_id)

        if hasattr(self.model, "deleted_at") and not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))

        if load_options:
            stmt = stmt.options(*load_options)

        result = await self.db.execute(stmt)
        entity = result.scalar_one_or_none()

        if not entity:
            raise NotFoundError(self.model.__name__, entity_id)

        return entity

    async def _soft_delete(self, entity: ModelT) -> None:
        """Soft delete an already loaded entity."""
        if hasattr(entity, "soft_delete"):
            entity.soft_delete()
        elif hasattr(entity, "deleted_at"):
            entity.deleted_at = datetime.now(UTC)
        else:
            raise TypeError(f"{self.model.__name__} does not support soft delete")

        await self.db.flush()

    async def _paginate(
        self,
        base_query: Select,
        page: int,
        page_size: int,
        *,
        options: list[Any] | None = None,
        order_by: list[Any] | None = None,
    ) -> tuple[list[ModelT], int]:
        """Execute paginated query.

        Returns:
            Tuple of (items, total_count)
        """
        load_options = options if options is not None else self._get_default_options()

        count_stmt = select(func.count()).select_from(base_query.subquery())
        total = (await self.db.execute(count_stmt)).scalar() or 0

        stmt = base_query
        if load_options:
            stmt = stmt.options(*load_options)

        if order_by:
            stmt = stmt.order_by(*order_by)

        stmt = stmt.offset((page - 1) * page_size).limit(page_size)

        result = await self.db.execute(stmt)
        items = list(result.scalars().all())

        return items, total

    def _build_base_query(
        self,
        tenant_id: UUID,
        *,
        filters: list[Any] | None = None,
        include_deleted: bool = False,
    ) -> Select:
        """Build base query with tenant and soft-delete filters."""
        stmt = select(self.model)

        if hasattr(self.model, "tenant_id"):
            stmt = stmt.where(self.model.tenant_id == tenant_id)

        if hasattr(self.model, "deleted_at") and not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))

        if filters:
            for filter_condition in filters:
                stmt = stmt.where(filter_condition)

        return stmt
