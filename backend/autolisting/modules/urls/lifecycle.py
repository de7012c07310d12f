"""Vehicle url lifecycle.

Runs the synchronous url step of a vehicle mutation inside the caller's
transaction and, once the caller has committed, schedules the tenant-wide
SEO url regeneration on the task queue.

    created   -> resolve slug (no exclusion), release redirects leaving
                 from it, store it
    updated   -> title changed only: resolve slug excluding self,
                 record old -> new redirect, store it
    deleted   -> deactivate redirects for the last url
    restored  -> like created, excluding self
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from autolisting.config import settings
from autolisting.core.exceptions import StorageUnavailableError, UniquenessExhaustedError
from autolisting.core.logging import get_logger
from autolisting.core.tasks import TaskQueue
from autolisting.modules.catalog.models import Vehicle
from autolisting.modules.seo.service import REASON_VEHICLE_URL_CHANGED, RedirectService
from autolisting.modules.urls.slugs import slugify
from autolisting.modules.urls.tasks import REGENERATE_TENANT_URLS
from autolisting.modules.urls.uniqueness import UniqueUrlResolver, is_variant_of

logger = get_logger(__name__)


class VehicleUrlLifecycle:
    """Reacts to vehicle create/update/delete/restore."""

    def __init__(
        self,
        db: AsyncSession,
        task_queue: TaskQueue | None,
        *,
        resolver: UniqueUrlResolver | None = None,
        redirects: RedirectService | None = None,
        max_retries: int | None = None,
    ) -> None:
        self.db = db
        self.task_queue = task_queue
        self.resolver = resolver or UniqueUrlResolver(db)
        self.redirects = redirects or RedirectService(db)
        self.max_retries = (
            max_retries if max_retries is not None else settings.url_assign_max_retries
        )

    async def _assign_url(
        self,
        vehicle: Vehicle,
        *,
        exclude_id: UUID | None,
        previous_url: str | None = None,
    ) -> str:
        """Resolve, redirect and store the url inside a SAVEPOINT.

        A unique violation on (tenant_id, url) means a concurrent writer took
        the slug; the savepoint is rolled back and resolution reruns with that
        slug marked as taken.
        """
        # Read before the savepoint: a rollback expires the instance.
        tenant_id = vehicle.tenant_id
        title = vehicle.title
        taken: set[str] = set()

        for attempt in range(1, self.max_retries + 1):
            new_url = None
            try:
                async with self.db.begin_nested():
                    new_url = await self.resolver.generate_unique_url(
                        title, tenant_id, exclude_id=exclude_id, taken=taken
                    )
                    if previous_url and previous_url != new_url:
                        await self.redirects.record_move(
                            tenant_id, previous_url, new_url, REASON_VEHICLE_URL_CHANGED
                        )
                    else:
                        # A live url must never be the source of an active redirect.
                        await self.redirects.release_path(tenant_id, new_url)
                    vehicle.url = new_url
                    await self.db.flush()
            except IntegrityError:
                if new_url is None:
                    raise
                taken.add(new_url)
                logger.warning(
                    "vehicle_url_conflict",
                    tenant_id=str(tenant_id),
                    url=new_url,
                    attempt=attempt,
                )
                continue
            except (OperationalError, InterfaceError) as e:
                logger.error(
                    "vehicle_url_storage_unavailable",
                    tenant_id=str(tenant_id),
                    error=str(e),
                )
                raise StorageUnavailableError("vehicle url assignment") from e

            logger.info(
                "vehicle_url_assigned",
                tenant_id=str(tenant_id),
                previous_url=previous_url,
                url=new_url,
            )
            return new_url

        raise UniquenessExhaustedError(slugify(title), self.max_retries)

    async def on_vehicle_created(self, vehicle: Vehicle) -> str:
        return await self._assign_url(vehicle, exclude_id=None)

    async def on_vehicle_updated(
        self,
        vehicle: Vehicle,
        old_title: str,
        old_url: str | None,
    ) -> str | None:
        """Returns the new url, or None when the title did not change."""
        if vehicle.title == old_title:
            return None

        return await self._assign_url(vehicle, exclude_id=vehicle.id, previous_url=old_url)

    async def on_vehicle_deleted(self, vehicle: Vehicle, last_url: str | None) -> int:
        if not last_url:
            return 0
        return await self.redirects.deactivate_for_path(vehicle.tenant_id, last_url)

    async def on_vehicle_restored(self, vehicle: Vehicle) -> str:
        # The old slug may belong to a live vehicle by now; the row must not
        # carry it when it is flushed back into the unique index.
        vehicle.url = None
        return await self._assign_url(vehicle, exclude_id=vehicle.id)

    async def reapply_slug_rules(self, vehicle: Vehicle) -> str | None:
        """Move a vehicle whose stored url no longer matches its title's slug.

        Used after the vocabulary changes. Returns the new url, or None when
        the current one is still a variant of the title slug.
        """
        if is_variant_of(vehicle.url, slugify(vehicle.title)):
            return None
        return await self._assign_url(vehicle, exclude_id=vehicle.id, previous_url=vehicle.url)

    async def schedule_regeneration(
        self,
        tenant_id: UUID,
        reason: str,
        *,
        clear_existing: bool = True,
    ) -> bool:
        """Enqueue the tenant regeneration. Never raises.

        Call after commit. Returns False when the task could not be queued;
        the next successful regeneration catches up.
        """
        if self.task_queue is None:
            logger.warning(
                "url_regeneration_skipped",
                tenant_id=str(tenant_id),
                reason=reason,
            )
            return False

        try:
            await self.task_queue.enqueue(
                REGENERATE_TENANT_URLS,
                {"tenant_id": str(tenant_id), "clear_existing": clear_existing, "reason": reason},
            )
        except Exception as e:
            logger.exception(
                "url_regeneration_enqueue_failed",
                tenant_id=str(tenant_id),
                reason=reason,
                error=str(e),
            )
            return False

        return True
