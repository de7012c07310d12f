#!/usr/bin/env python3
"""Re-apply the current slug rules to stored vehicle urls.

Run after changing the slug vocabulary. Every vehicle whose url is no longer
a variant of its title slug gets a new url and a 301 from the old one.

Usage:
    python -m autolisting.scripts.regenerate_vehicle_urls --dry-run
    python -m autolisting.scripts.regenerate_vehicle_urls --tenant-id <uuid>
"""

import argparse
import asyncio
import sys
from uuid import UUID

from sqlalchemy import select

from autolisting.core.database import close_db, get_db_context
from autolisting.core.logging import get_logger, setup_logging
from autolisting.core.redis import close_redis, init_redis
from autolisting.core.tasks import TaskQueue
from autolisting.modules.catalog.models import Vehicle
from autolisting.modules.urls.lifecycle import VehicleUrlLifecycle
from autolisting.modules.urls.slugs import slugify
from autolisting.modules.urls.tasks import REGENERATE_TENANT_URLS
from autolisting.modules.urls.uniqueness import is_variant_of

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Re-apply slug rules to vehicle urls")
    parser.add_argument("--tenant-id", type=UUID, help="Only this tenant")
    parser.add_argument("--dry-run", action="store_true", help="Only show what would change")
    parser.add_argument("--batch-size", type=int, default=100, help="Vehicles read per query")
    return parser.parse_args(argv)


async def find_outdated(tenant_id: UUID | None, batch_size: int) -> list[tuple[UUID, str | None, str]]:
    """(vehicle_id, current url, title slug) for every live vehicle needing a new url."""
    outdated = []
    offset = 0

    async with get_db_context() as db:
        while True:
            stmt = select(Vehicle.id, Vehicle.url, Vehicle.title).where(Vehicle.deleted_at.is_(None))
            if tenant_id:
                stmt = stmt.where(Vehicle.tenant_id == tenant_id)
            stmt = stmt.order_by(Vehicle.created_at, Vehicle.id).offset(offset).limit(batch_size)

            rows = (await db.execute(stmt)).all()
            if not rows:
                break

            for vehicle_id, url, title in rows:
                base_slug = slugify(title)
                if not is_variant_of(url, base_slug):
                    outdated.append((vehicle_id, url, base_slug))
            offset += batch_size

    return outdated


async def reapply(vehicle_id: UUID) -> tuple[UUID, str | None]:
    """Move one vehicle in its own transaction. Returns (tenant_id, new url)."""
    async with get_db_context() as db:
        vehicle = (
            await db.execute(select(Vehicle).where(Vehicle.id == vehicle_id))
        ).scalar_one()
        tenant_id = vehicle.tenant_id

        lifecycle = VehicleUrlLifecycle(db, task_queue=None)
        try:
            new_url = await lifecycle.reapply_slug_rules(vehicle)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    return tenant_id, new_url


async def schedule(tenant_ids: set[UUID]) -> None:
    redis_client = await init_redis()
    queue = TaskQueue(redis_client)
    for tenant_id in tenant_ids:
        await queue.enqueue(
            REGENERATE_TENANT_URLS,
            {"tenant_id": str(tenant_id), "clear_existing": True, "reason": "vehicle_urls_reapplied"},
        )
    print(f"Regeneration queued for {len(tenant_ids)} tenant(s)")


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()

    errors = 0
    touched_tenants: set[UUID] = set()

    try:
        outdated = await find_outdated(args.tenant_id, args.batch_size)
        print(f"Vehicles needing a new url: {len(outdated)}")

        for vehicle_id, current_url, base_slug in outdated:
            if args.dry_run:
                print(f"[dry-run] {vehicle_id}: '{current_url}' -> '{base_slug}' (before suffix)")
                continue

            try:
                tenant_id, new_url = await reapply(vehicle_id)
            except Exception as e:
                errors += 1
                logger.exception("vehicle_url_reapply_failed", vehicle_id=str(vehicle_id), error=str(e))
                continue

            touched_tenants.add(tenant_id)
            print(f"{vehicle_id}: '{current_url}' -> '{new_url}'")

        if touched_tenants:
            await schedule(touched_tenants)
    finally:
        await close_redis()
        await close_db()

    print(f"Errors: {errors}")
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
