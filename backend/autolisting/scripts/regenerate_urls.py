#!/usr/bin/env python3
"""Regenerate hierarchical SEO urls from the command line.

Usage:
    python -m autolisting.scripts.regenerate_urls --tenant-id <uuid>
    python -m autolisting.scripts.regenerate_urls --all --keep-existing
    python -m autolisting.scripts.regenerate_urls --tenant-id <uuid> --dry-run
"""

import argparse
import asyncio
import sys
from uuid import UUID

from autolisting.core.database import close_db, get_db_context
from autolisting.core.logging import get_logger, setup_logging
from autolisting.core.tenant import list_active_tenant_ids
from autolisting.modules.urls.service import HierarchicalUrlService

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Regenerate SEO urls")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--tenant-id", type=UUID, help="Tenant to regenerate")
    target.add_argument("--all", action="store_true", help="Every active tenant")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the counts that would be written",
    )
    parser.add_argument(
        "--keep-existing",
        action="store_true",
        help="Upsert without clearing the tenant's current urls first",
    )
    return parser.parse_args(argv)


async def regenerate_tenant(tenant_id: UUID, dry_run: bool, keep_existing: bool) -> int:
    """Returns the number of urls written (or planned on a dry run)."""
    async with get_db_context() as db:
        service = HierarchicalUrlService(db)

        if dry_run:
            snapshot = await service.load_snapshot(tenant_id)
            summary = snapshot.planned_summary()
            print(f"[dry-run] {tenant_id}: {summary.model_dump()}")
            return summary.total_urls

        summary = await service.regenerate_tenant_urls(
            tenant_id, clear_existing=not keep_existing
        )
        print(f"{tenant_id}: {summary.model_dump()}")
        return summary.total_urls


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()

    if args.all:
        async with get_db_context() as db:
            tenant_ids = await list_active_tenant_ids(db)
    else:
        tenant_ids = [args.tenant_id]

    total = 0
    failures = 0
    try:
        for tenant_id in tenant_ids:
            try:
                total += await regenerate_tenant(tenant_id, args.dry_run, args.keep_existing)
            except Exception as e:
                failures += 1
                logger.exception("tenant_url_regeneration_failed", tenant_id=str(tenant_id), error=str(e))
    finally:
        await close_db()

    print(f"Tenants: {len(tenant_ids)}, urls: {total}, failed: {failures}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
