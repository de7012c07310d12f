"""Unit tests for the command line scripts."""

from unittest.mock import AsyncMock, Mock, patch
from uuid import uuid4

import pytest

from autolisting.modules.urls.paths import BrandSource
from autolisting.modules.urls.service import CatalogSnapshot
from autolisting.scripts import regenerate_urls
from tests.fixtures.constants import TEST_TENANT_ID
from tests.fixtures.db import session_factory_for


class TestRegenerateUrlsArgs:
    @pytest.mark.unit
    def test_tenant_and_all_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            regenerate_urls.parse_args(["--tenant-id", str(uuid4()), "--all"])

    @pytest.mark.unit
    def test_target_is_required(self) -> None:
        with pytest.raises(SystemExit):
            regenerate_urls.parse_args([])

    @pytest.mark.unit
    def test_options(self) -> None:
        args = regenerate_urls.parse_args(
            ["--tenant-id", str(TEST_TENANT_ID), "--dry-run", "--keep-existing"]
        )

        assert args.tenant_id == TEST_TENANT_ID
        assert args.dry_run is True
        assert args.keep_existing is True


class TestRegenerateTenant:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_dry_run_reports_planned_total(self, mock_db: AsyncMock) -> None:
        service = Mock()
        service.load_snapshot = AsyncMock(
            return_value=CatalogSnapshot(
                brands=[BrandSource(id=uuid4(), name="Fiat")],
                vehicles=[],
                cities=[],
                neighborhoods=[],
            )
        )
        service.regenerate_tenant_urls = AsyncMock()

        with (
            patch.object(regenerate_urls, "get_db_context", session_factory_for(mock_db)),
            patch.object(regenerate_urls, "HierarchicalUrlService", return_value=service),
        ):
            total = await regenerate_urls.regenerate_tenant(
                TEST_TENANT_ID, dry_run=True, keep_existing=False
            )

        assert total == 2
        service.regenerate_tenant_urls.assert_not_awaited()
