"""Unit tests for tenant-scoped url uniqueness."""

import re
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from autolisting.core.exceptions import UniquenessExhaustedError
from autolisting.modules.urls.uniqueness import UniqueUrlResolver, is_variant_of
from tests.fixtures.constants import TEST_TENANT_ID
from tests.fixtures.db import scalar_result, scalars_result


class TestUniqueUrlResolver:
    """Tests for UniqueUrlResolver."""

    @pytest.fixture
    def resolver(self, mock_db: AsyncMock) -> UniqueUrlResolver:
        return UniqueUrlResolver(mock_db)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_free_slug_is_returned_as_is(
        self, resolver: UniqueUrlResolver, mock_db: AsyncMock
    ) -> None:
        mock_db.execute.return_value = scalars_result([])

        url = await resolver.generate_unique_url("Onix 1.0", TEST_TENANT_ID)

        assert url == "onix-10"

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("occupied", "expected"),
        [
            (["onix-10"], "onix-10-1"),
            (["onix-10", "onix-10-1"], "onix-10-2"),
            (["onix-10", "onix-10-2"], "onix-10-1"),
            (["onix-10-1"], "onix-10"),
        ],
    )
    async def test_first_free_variant_wins(
        self,
        resolver: UniqueUrlResolver,
        mock_db: AsyncMock,
        occupied: list[str],
        expected: str,
    ) -> None:
        mock_db.execute.return_value = scalars_result(occupied)

        url = await resolver.generate_unique_url("Onix 1.0", TEST_TENANT_ID)

        assert url == expected

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_taken_slugs_count_as_occupied(
        self, resolver: UniqueUrlResolver, mock_db: AsyncMock
    ) -> None:
        """Slugs rejected by the unique index on a previous attempt are skipped."""
        mock_db.execute.return_value = scalars_result(["onix-10"])

        url = await resolver.resolve("onix-10", TEST_TENANT_ID, taken={"onix-10-1"})

        assert url == "onix-10-2"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exclude_id_filters_own_row(
        self, resolver: UniqueUrlResolver, mock_db: AsyncMock
    ) -> None:
        mock_db.execute.return_value = scalars_result([])

        await resolver.resolve("onix-10", TEST_TENANT_ID, exclude_id=uuid4())

        stmt = mock_db.execute.await_args.args[0]
        assert "vehicles.id !=" in str(stmt)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_query_is_scoped_to_live_rows_of_tenant(
        self, resolver: UniqueUrlResolver, mock_db: AsyncMock
    ) -> None:
        mock_db.execute.return_value = scalars_result([])

        await resolver.resolve("onix-10", TEST_TENANT_ID)

        sql = str(mock_db.execute.await_args.args[0])
        assert "vehicles.tenant_id =" in sql
        assert "vehicles.deleted_at IS NULL" in sql
        assert "vehicles.id !=" not in sql

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cap_without_fallback_raises(self, mock_db: AsyncMock) -> None:
        resolver = UniqueUrlResolver(mock_db, max_attempts=2, random_fallback=False)
        mock_db.execute.return_value = scalars_result(["onix-10", "onix-10-1", "onix-10-2"])

        with pytest.raises(UniquenessExhaustedError) as exc_info:
            await resolver.resolve("onix-10", TEST_TENANT_ID)

        assert exc_info.value.status_code == 409

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cap_with_fallback_uses_random_suffix(self, mock_db: AsyncMock) -> None:
        resolver = UniqueUrlResolver(mock_db, max_attempts=2, random_fallback=True)
        occupied = ["onix-10", "onix-10-1", "onix-10-2"]
        mock_db.execute.return_value = scalars_result(occupied)

        url = await resolver.resolve("onix-10", TEST_TENANT_ID)

        assert re.fullmatch(r"onix-10-[0-9a-f]{8}", url)
        assert url not in occupied

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_url_exists(self, resolver: UniqueUrlResolver, mock_db: AsyncMock) -> None:
        mock_db.execute.return_value = scalar_result("onix-10")

        assert await resolver.url_exists("onix-10", TEST_TENANT_ID)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_url_does_not_exist(
        self, resolver: UniqueUrlResolver, mock_db: AsyncMock
    ) -> None:
        mock_db.execute.return_value = scalar_result(None)

        assert not await resolver.url_exists("onix-10", TEST_TENANT_ID)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_suggestions_skip_occupied_variants(
        self, resolver: UniqueUrlResolver, mock_db: AsyncMock
    ) -> None:
        mock_db.execute.return_value = scalars_result(["onix-10", "onix-10-1", "onix-10-3"])

        suggestions = await resolver.generate_suggestions("Onix 1.0", TEST_TENANT_ID, 3)

        assert suggestions == ["onix-10-2", "onix-10-4", "onix-10-5"]


class TestIsVariantOf:
    """Tests for is_variant_of()."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("onix-10", True),
            ("onix-10-3", True),
            ("onix-10-turbo", False),
            ("onix-1", False),
            (None, False),
            ("", False),
        ],
    )
    def test_variants(self, url: str | None, expected: bool) -> None:
        assert is_variant_of(url, "onix-10") is expected
