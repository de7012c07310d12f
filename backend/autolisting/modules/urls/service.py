"""Full-tenant SEO url generation.

Loads each catalog entity set with one explicit query, feeds the snapshots
through ``HierarchicalPathBuilder`` and upserts the drafts in batches.
Re-running is always safe: records are keyed by path and stale paths are
only removed by an explicit clear.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from itertools import chain, islice
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from autolisting.config import settings
from autolisting.core.database import transactional
from autolisting.core.logging import get_logger
from autolisting.modules.catalog.models import (
    City,
    Neighborhood,
    TenantCity,
    TenantNeighborhood,
    Vehicle,
    VehicleBrand,
)
from autolisting.modules.seo.schemas import TenantUrlStats
from autolisting.modules.seo.service import SeoUrlRegistry
from autolisting.modules.urls.paths import (
    BrandSource,
    CitySource,
    GeneratedUrl,
    HierarchicalPathBuilder,
    NeighborhoodSource,
    VehicleSource,
)
from autolisting.modules.urls.schemas import UrlGenerationSummary

logger = get_logger(__name__)


@dataclass(frozen=True)
class CatalogSnapshot:
    """Everything the builder needs for one tenant."""

    brands: list[BrandSource]
    vehicles: list[VehicleSource]
    cities: list[CitySource]
    neighborhoods: list[NeighborhoodSource]

    def planned_summary(self) -> UrlGenerationSummary:
        """Counts a generation pass over this snapshot will produce."""
        per_location = len(self.brands) + len(self.vehicles)
        summary = UrlGenerationSummary(
            brands=2 * len(self.brands),
            vehicles=len(self.vehicles),
            city_urls=len(self.cities) * per_location,
            neighborhood_urls=len(self.neighborhoods) * per_location,
        )
        summary.total_urls = (
            summary.brands + summary.vehicles + summary.city_urls + summary.neighborhood_urls
        )
        return summary


class HierarchicalUrlService:
    """Generates, clears and reports a tenant's SEO urls."""

    def __init__(
        self,
        db: AsyncSession,
        *,
        builder: HierarchicalPathBuilder | None = None,
        locale: str | None = None,
        batch_size: int | None = None,
    ) -> None:
        self.db = db
        self.builder = builder or HierarchicalPathBuilder()
        self.locale = locale or settings.seo_default_locale
        self.batch_size = batch_size or settings.url_generation_batch_size
        self.registry = SeoUrlRegistry(db)

    # ------------------------------------------------------------------
    # Catalog fetches
    # ------------------------------------------------------------------

    async def _fetch_brands(self, tenant_id: UUID) -> list[BrandSource]:
        """Brands with at least one live vehicle in the tenant, active or not."""
        has_vehicle = exists().where(
            Vehicle.brand_id == VehicleBrand.id,
            Vehicle.tenant_id == tenant_id,
            Vehicle.deleted_at.is_(None),
        )
        stmt = select(VehicleBrand).where(has_vehicle).order_by(VehicleBrand.name)
        result = await self.db.execute(stmt)
        return [BrandSource.from_model(brand) for brand in result.scalars().all()]

    async def _fetch_vehicles(self, tenant_id: UUID) -> list[VehicleSource]:
        stmt = (
            select(Vehicle)
            .options(joinedload(Vehicle.brand))
            .where(
                Vehicle.tenant_id == tenant_id,
                Vehicle.is_active.is_(True),
                Vehicle.deleted_at.is_(None),
            )
            .order_by(Vehicle.created_at, Vehicle.id)
        )
        result = await self.db.execute(stmt)
        return [VehicleSource.from_model(vehicle) for vehicle in result.scalars().all()]

    async def _fetch_cities(self, tenant_id: UUID) -> list[CitySource]:
        stmt = (
            select(TenantCity)
            .options(joinedload(TenantCity.city).joinedload(City.state))
            .where(TenantCity.tenant_id == tenant_id, TenantCity.is_active.is_(True))
            .order_by(TenantCity.created_at, TenantCity.id)
        )
        result = await self.db.execute(stmt)
        return [CitySource.from_model(link.city) for link in result.scalars().all()]

    async def _fetch_neighborhoods(self, tenant_id: UUID) -> list[NeighborhoodSource]:
        stmt = (
            select(TenantNeighborhood)
            .options(
                joinedload(TenantNeighborhood.neighborhood)
                .joinedload(Neighborhood.city)
                .joinedload(City.state)
            )
            .where(
                TenantNeighborhood.tenant_id == tenant_id,
                TenantNeighborhood.is_active.is_(True),
            )
            .order_by(TenantNeighborhood.created_at, TenantNeighborhood.id)
        )
        result = await self.db.execute(stmt)
        return [
            NeighborhoodSource.from_model(link.neighborhood) for link in result.scalars().all()
        ]

    async def load_snapshot(self, tenant_id: UUID) -> CatalogSnapshot:
        return CatalogSnapshot(
            brands=await self._fetch_brands(tenant_id),
            vehicles=await self._fetch_vehicles(tenant_id),
            cities=await self._fetch_cities(tenant_id),
            neighborhoods=await self._fetch_neighborhoods(tenant_id),
        )

    def iter_drafts(self, snapshot: CatalogSnapshot) -> Iterator[GeneratedUrl]:
        """Brands, vehicles, then city and neighborhood variants."""
        return chain(
            self.builder.iter_brand_urls(snapshot.brands),
            self.builder.iter_vehicle_urls(snapshot.vehicles),
            self.builder.iter_city_urls(snapshot.brands, snapshot.vehicles, snapshot.cities),
            self.builder.iter_neighborhood_urls(
                snapshot.brands, snapshot.vehicles, snapshot.neighborhoods
            ),
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _write(self, tenant_id: UUID, drafts: Iterable[GeneratedUrl]) -> int:
        """Upsert drafts batch by batch, committing after each batch."""
        written = 0
        iterator = iter(drafts)
        while batch := list(islice(iterator, self.batch_size)):
            await self.registry.upsert_many(tenant_id, self.locale, batch)
            await self.db.commit()
            written += len(batch)
        return written

    async def generate_all_urls_for_tenant(self, tenant_id: UUID) -> UrlGenerationSummary:
        """Upsert every page of the tenant catalog and return the counts."""
        return await self.regenerate_tenant_urls(tenant_id, clear_existing=False)

    async def regenerate_tenant_urls(
        self, tenant_id: UUID, clear_existing: bool = True
    ) -> UrlGenerationSummary:
        """Optionally clear, then generate.

        The clear is committed together with the first batch. A failure
        rolls back the current batch; earlier batches stay written and a
        rerun converges to the same record set.
        """
        try:
            deleted = await self.registry.clear_all(tenant_id) if clear_existing else 0

            snapshot = await self.load_snapshot(tenant_id)
            summary = UrlGenerationSummary(deleted_urls=deleted)
            summary.brands = await self._write(
                tenant_id, self.builder.iter_brand_urls(snapshot.brands)
            )
            summary.vehicles = await self._write(
                tenant_id, self.builder.iter_vehicle_urls(snapshot.vehicles)
            )
            summary.city_urls = await self._write(
                tenant_id,
                self.builder.iter_city_urls(snapshot.brands, snapshot.vehicles, snapshot.cities),
            )
            summary.neighborhood_urls = await self._write(
                tenant_id,
                self.builder.iter_neighborhood_urls(
                    snapshot.brands, snapshot.vehicles, snapshot.neighborhoods
                ),
            )
            summary.total_urls = (
                summary.brands + summary.vehicles + summary.city_urls + summary.neighborhood_urls
            )
            # Commits a clear that was not followed by any batch.
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "tenant_urls_generated",
            tenant_id=str(tenant_id),
            **summary.model_dump(),
        )
        return summary

    @transactional
    async def clear_tenant_urls(self, tenant_id: UUID) -> int:
        """Delete all SEO urls of the tenant."""
        deleted = await self.registry.clear_all(tenant_id)
        logger.info("tenant_urls_cleared", tenant_id=str(tenant_id), deleted_count=deleted)
        return deleted

    async def get_tenant_url_stats(self, tenant_id: UUID) -> TenantUrlStats:
        return await self.registry.stats(tenant_id)

    async def preview_urls(
        self, tenant_id: UUID, limit: int = 100
    ) -> tuple[UrlGenerationSummary, list[GeneratedUrl]]:
        """Dry run: planned counts plus the first ``limit`` drafts. Writes nothing."""
        snapshot = await self.load_snapshot(tenant_id)
        drafts = list(islice(self.iter_drafts(snapshot), limit))
        return snapshot.planned_summary(), drafts
