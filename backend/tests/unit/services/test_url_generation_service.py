"""Unit tests for full-tenant SEO url generation."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from autolisting.modules.catalog.models import (
    City,
    Neighborhood,
    TenantCity,
    TenantNeighborhood,
    Vehicle,
    VehicleBrand,
)
from autolisting.modules.seo.models import SeoUrl
from autolisting.modules.urls.paths import (
    BrandSource,
    CitySource,
    HierarchicalPathBuilder,
    NeighborhoodSource,
    VehicleSource,
)
from autolisting.modules.urls.service import CatalogSnapshot, HierarchicalUrlService
from tests.fixtures.constants import TEST_TENANT_ID
from tests.fixtures.db import rowcount_result, scalars_result


def added_records(mock_db: AsyncMock) -> list[SeoUrl]:
    return [call.args[0] for call in mock_db.add.call_args_list]


class TestHierarchicalUrlService:
    """Tests for HierarchicalUrlService."""

    @pytest.fixture
    def service(self, mock_db: AsyncMock) -> HierarchicalUrlService:
        return HierarchicalUrlService(
            mock_db,
            builder=HierarchicalPathBuilder("comprar-carro"),
            locale="pt-BR",
            batch_size=100,
        )

    @pytest.fixture
    def snapshot(
        self,
        brand_source: BrandSource,
        vehicle_source: VehicleSource,
        city_source: CitySource,
    ) -> CatalogSnapshot:
        """One brand, one vehicle, one served city, no neighborhoods."""
        return CatalogSnapshot(
            brands=[brand_source],
            vehicles=[vehicle_source],
            cities=[city_source],
            neighborhoods=[],
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generates_every_page_of_the_catalog(
        self,
        service: HierarchicalUrlService,
        mock_db: AsyncMock,
        snapshot: CatalogSnapshot,
    ) -> None:
        service.load_snapshot = AsyncMock(return_value=snapshot)
        mock_db.execute.return_value = scalars_result([])

        summary = await service.generate_all_urls_for_tenant(TEST_TENANT_ID)

        records = {record.path: record for record in added_records(mock_db)}
        assert set(records) == {
            "chevrolet",
            "comprar-carro/chevrolet",
            "chevrolet/onix-10-turbo",
            "chevrolet/sao-paulo-sp",
            "chevrolet/onix-10-turbo/sao-paulo-sp",
        }
        assert records["chevrolet/onix-10-turbo"].sitemap_priority == 0.8
        assert records["chevrolet/onix-10-turbo/sao-paulo-sp"].type == "vehicle_detail"
        assert records["chevrolet/sao-paulo-sp"].sitemap_priority == 0.6
        assert all(record.tenant_id == TEST_TENANT_ID for record in records.values())
        assert all(record.locale == "pt-BR" for record in records.values())

        assert (summary.brands, summary.vehicles, summary.city_urls) == (2, 1, 2)
        assert summary.neighborhood_urls == 0
        assert summary.total_urls == 5
        assert summary.deleted_urls == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rerun_updates_in_place(
        self,
        service: HierarchicalUrlService,
        mock_db: AsyncMock,
        snapshot: CatalogSnapshot,
    ) -> None:
        """A second pass over an unchanged catalog adds nothing."""
        service.load_snapshot = AsyncMock(return_value=snapshot)
        mock_db.execute.return_value = scalars_result([])
        first = await service.regenerate_tenant_urls(TEST_TENANT_ID, clear_existing=False)
        stored = added_records(mock_db)

        mock_db.add.reset_mock()
        mock_db.execute.return_value = scalars_result(stored)
        second = await service.regenerate_tenant_urls(TEST_TENANT_ID, clear_existing=False)

        mock_db.add.assert_not_called()
        assert second == first

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_clear_existing_deletes_first(
        self,
        service: HierarchicalUrlService,
        mock_db: AsyncMock,
        snapshot: CatalogSnapshot,
    ) -> None:
        service.load_snapshot = AsyncMock(return_value=snapshot)
        mock_db.execute.side_effect = [rowcount_result(9)] + [scalars_result([])] * 4

        summary = await service.regenerate_tenant_urls(TEST_TENANT_ID, clear_existing=True)

        delete_stmt = mock_db.execute.await_args_list[0].args[0]
        assert str(delete_stmt).startswith("DELETE FROM seo_urls")
        assert summary.deleted_urls == 9
        assert summary.total_urls == 5

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_commits_per_batch(
        self, mock_db: AsyncMock, brand_source: BrandSource
    ) -> None:
        service = HierarchicalUrlService(mock_db, batch_size=1)
        service.load_snapshot = AsyncMock(
            return_value=CatalogSnapshot(brands=[brand_source], vehicles=[], cities=[], neighborhoods=[])
        )
        mock_db.execute.return_value = scalars_result([])

        summary = await service.regenerate_tenant_urls(TEST_TENANT_ID, clear_existing=False)

        assert summary.total_urls == 2
        # two single-draft batches plus the closing commit
        assert mock_db.commit.await_count == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failure_rolls_back_and_propagates(
        self,
        service: HierarchicalUrlService,
        mock_db: AsyncMock,
        snapshot: CatalogSnapshot,
    ) -> None:
        service.load_snapshot = AsyncMock(return_value=snapshot)
        mock_db.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(OperationalError):
            await service.regenerate_tenant_urls(TEST_TENANT_ID, clear_existing=False)

        mock_db.rollback.assert_awaited_once()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_load_snapshot_reads_each_entity_set(
        self,
        service: HierarchicalUrlService,
        mock_db: AsyncMock,
        brand: VehicleBrand,
        vehicle: Vehicle,
        sao_paulo: City,
        vila_madalena: Neighborhood,
    ) -> None:
        city_link = TenantCity(id=uuid4(), tenant_id=TEST_TENANT_ID, city_id=sao_paulo.id)
        city_link.city = sao_paulo
        neighborhood_link = TenantNeighborhood(
            id=uuid4(), tenant_id=TEST_TENANT_ID, neighborhood_id=vila_madalena.id
        )
        neighborhood_link.neighborhood = vila_madalena
        mock_db.execute.side_effect = [
            scalars_result([brand]),
            scalars_result([vehicle]),
            scalars_result([city_link]),
            scalars_result([neighborhood_link]),
        ]

        snapshot = await service.load_snapshot(TEST_TENANT_ID)

        assert [b.slug for b in snapshot.brands] == ["chevrolet"]
        assert [v.slug for v in snapshot.vehicles] == ["onix-10"]
        assert [c.slug for c in snapshot.cities] == ["sao-paulo-sp"]
        assert [n.slug for n in snapshot.neighborhoods] == ["vila-madalena-sao-paulo-sp"]
        assert mock_db.execute.await_count == 4

    @pytest.mark.unit
    def test_planned_summary(
        self,
        brand_source: BrandSource,
        vehicle_source: VehicleSource,
        city_source: CitySource,
        neighborhood_source: NeighborhoodSource,
    ) -> None:
        snapshot = CatalogSnapshot(
            brands=[brand_source, BrandSource(id=uuid4(), name="Fiat")],
            vehicles=[vehicle_source] * 3,
            cities=[city_source],
            neighborhoods=[neighborhood_source] * 2,
        )

        summary = snapshot.planned_summary()

        assert summary.brands == 4
        assert summary.vehicles == 3
        assert summary.city_urls == 5
        assert summary.neighborhood_urls == 10
        assert summary.total_urls == 22

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_preview_writes_nothing(
        self,
        service: HierarchicalUrlService,
        mock_db: AsyncMock,
        snapshot: CatalogSnapshot,
    ) -> None:
        service.load_snapshot = AsyncMock(return_value=snapshot)

        summary, drafts = await service.preview_urls(TEST_TENANT_ID, limit=3)

        assert summary.total_urls == 5
        assert [draft.path for draft in drafts] == [
            "chevrolet",
            "comprar-carro/chevrolet",
            "chevrolet/onix-10-turbo",
        ]
        mock_db.add.assert_not_called()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_clear_tenant_urls(
        self, service: HierarchicalUrlService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute.return_value = rowcount_result(12)

        deleted = await service.clear_tenant_urls(TEST_TENANT_ID)

        assert deleted == 12
        mock_db.commit.assert_awaited_once()
