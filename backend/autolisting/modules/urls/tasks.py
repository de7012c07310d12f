"""Background task handlers for SEO url regeneration.

Handlers are idempotent: the worker may deliver a task more than once.
"""

from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from autolisting.core.database import get_db_context
from autolisting.core.exceptions import RegenerationTaskError
from autolisting.core.logging import bind_tenant, get_logger, unbind_context
from autolisting.core.tasks import TaskHandler
from autolisting.core.tenant import list_active_tenant_ids
from autolisting.modules.urls.service import HierarchicalUrlService

logger = get_logger(__name__)

REGENERATE_TENANT_URLS = "regenerate_tenant_urls"
REGENERATE_ALL_TENANTS = "regenerate_all_tenants"


def _parse_tenant_id(payload: dict[str, Any]) -> UUID:
    raw = payload.get("tenant_id")
    try:
        return UUID(str(raw))
    except ValueError as e:
        raise RegenerationTaskError(REGENERATE_TENANT_URLS, raw, "invalid tenant_id") from e


async def regenerate_tenant_urls(payload: dict[str, Any]) -> None:
    """Payload: ``{"tenant_id": str, "clear_existing": bool}``."""
    tenant_id = _parse_tenant_id(payload)
    clear_existing = bool(payload.get("clear_existing", True))
    bind_tenant(tenant_id)

    async with get_db_context() as db:
        service = HierarchicalUrlService(db)
        try:
            await service.regenerate_tenant_urls(tenant_id, clear_existing=clear_existing)
        except SQLAlchemyError as e:
            raise RegenerationTaskError(REGENERATE_TENANT_URLS, tenant_id, str(e)) from e


async def regenerate_all_tenants(payload: dict[str, Any]) -> None:
    """Regenerate every active tenant; one failing tenant does not stop the rest."""
    clear_existing = bool(payload.get("clear_existing", True))

    async with get_db_context() as db:
        tenant_ids = await list_active_tenant_ids(db)

    failed: list[str] = []
    for tenant_id in tenant_ids:
        try:
            await regenerate_tenant_urls(
                {"tenant_id": str(tenant_id), "clear_existing": clear_existing}
            )
        except RegenerationTaskError as e:
            logger.error(
                "tenant_url_regeneration_failed",
                tenant_id=str(tenant_id),
                error=e.reason,
            )
            failed.append(str(tenant_id))
        except Exception as e:
            logger.exception(
                "tenant_url_regeneration_failed",
                tenant_id=str(tenant_id),
                error=str(e),
            )
            failed.append(str(tenant_id))
        finally:
            unbind_context("tenant_id")

    logger.info(
        "all_tenants_urls_regenerated",
        tenants=len(tenant_ids),
        failed=len(failed),
        failed_tenant_ids=failed,
    )


TASK_HANDLERS: dict[str, TaskHandler] = {
    REGENERATE_TENANT_URLS: regenerate_tenant_urls,
    REGENERATE_ALL_TENANTS: regenerate_all_tenants,
}
