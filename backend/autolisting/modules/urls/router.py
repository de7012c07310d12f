"""Admin API routes for SEO url generation."""

from fastapi import APIRouter, Query, status

from autolisting.core.dependencies import DBSession, TaskQueueDep, TenantFromHeader
from autolisting.core.exceptions import AppException
from autolisting.core.logging import get_logger
from autolisting.modules.seo.schemas import BreadcrumbItem, TenantUrlStats
from autolisting.modules.urls.schemas import (
    ClearUrlsResponse,
    GenerateUrlsRequest,
    GenerateUrlsResponse,
    RegenerateUrlsRequest,
    RegenerationAcceptedResponse,
    UrlPreviewItem,
    UrlPreviewResponse,
)
from autolisting.modules.urls.service import HierarchicalUrlService
from autolisting.modules.urls.tasks import REGENERATE_TENANT_URLS

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/admin/seo/urls/generate",
    response_model=GenerateUrlsResponse,
    summary="Generate SEO urls",
    description="Generate every hierarchical url of the tenant synchronously.",
    tags=["Admin - SEO URLs"],
)
async def generate_urls(
    tenant_id: TenantFromHeader,
    db: DBSession,
    data: GenerateUrlsRequest | None = None,
) -> GenerateUrlsResponse:
    """Generate urls now and return counts plus fresh stats."""
    clear_existing = data.clear_existing if data else False
    service = HierarchicalUrlService(db)

    summary = await service.regenerate_tenant_urls(tenant_id, clear_existing=clear_existing)
    stats = await service.get_tenant_url_stats(tenant_id)

    return GenerateUrlsResponse(tenant_id=tenant_id, summary=summary, stats=stats)


@router.post(
    "/admin/seo/urls/regenerate",
    response_model=RegenerationAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Queue SEO url regeneration",
    tags=["Admin - SEO URLs"],
)
async def regenerate_urls(
    tenant_id: TenantFromHeader,
    task_queue: TaskQueueDep,
    data: RegenerateUrlsRequest | None = None,
) -> RegenerationAcceptedResponse:
    """Queue a background regeneration for the tenant."""
    clear_existing = data.clear_existing if data else True

    try:
        await task_queue.enqueue(
            REGENERATE_TENANT_URLS,
            {"tenant_id": str(tenant_id), "clear_existing": clear_existing, "reason": "admin"},
        )
    except Exception as e:
        logger.error("url_regeneration_enqueue_failed", tenant_id=str(tenant_id), error=str(e))
        raise AppException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="task_queue_unavailable",
            message="Task queue is unavailable, try again later",
        ) from e

    return RegenerationAcceptedResponse(tenant_id=tenant_id, task=REGENERATE_TENANT_URLS)


@router.get(
    "/admin/seo/urls/stats",
    response_model=TenantUrlStats,
    summary="SEO url stats",
    tags=["Admin - SEO URLs"],
)
async def get_url_stats(
    tenant_id: TenantFromHeader,
    db: DBSession,
) -> TenantUrlStats:
    """Counts of stored urls by type."""
    service = HierarchicalUrlService(db)
    return await service.get_tenant_url_stats(tenant_id)


@router.delete(
    "/admin/seo/urls",
    response_model=ClearUrlsResponse,
    summary="Clear SEO urls",
    tags=["Admin - SEO URLs"],
)
async def clear_urls(
    tenant_id: TenantFromHeader,
    db: DBSession,
) -> ClearUrlsResponse:
    """Delete every generated url of the tenant. Redirects are kept."""
    service = HierarchicalUrlService(db)
    deleted = await service.clear_tenant_urls(tenant_id)
    return ClearUrlsResponse(tenant_id=tenant_id, deleted_count=deleted)


@router.get(
    "/admin/seo/urls/preview",
    response_model=UrlPreviewResponse,
    summary="Preview SEO urls",
    tags=["Admin - SEO URLs"],
)
async def preview_urls(
    tenant_id: TenantFromHeader,
    db: DBSession,
    limit: int = Query(default=100, ge=1, le=1000),
) -> UrlPreviewResponse:
    """Dry run of a generation pass; nothing is written."""
    service = HierarchicalUrlService(db)
    summary, drafts = await service.preview_urls(tenant_id, limit=limit)

    return UrlPreviewResponse(
        summary=summary,
        items=[
            UrlPreviewItem(
                path=draft.path,
                type=draft.type.value,
                canonical_url=draft.canonical_url,
                title=draft.title,
                meta_description=draft.meta_description,
                breadcrumbs=[BreadcrumbItem(**crumb.to_dict()) for crumb in draft.breadcrumbs],
                route_params=dict(draft.route_params),
                sitemap_priority=draft.sitemap_priority,
            )
            for draft in drafts
        ],
        truncated=summary.total_urls > len(drafts),
    )
