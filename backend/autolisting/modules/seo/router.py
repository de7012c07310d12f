"""API routes for SEO module."""

from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse

from autolisting.core.dependencies import (
    DBSession,
    Locale,
    Pagination,
    PublicTenantId,
    TenantFromHeader,
)
from autolisting.core.exceptions import NotFoundError
from autolisting.modules.seo.schemas import (
    RedirectListResponse,
    RedirectResolution,
    RedirectResponse,
    SeoPageResponse,
    SeoUrlListResponse,
    SeoUrlResponse,
)
from autolisting.modules.seo.service import (
    RedirectService,
    SeoUrlRegistry,
    SitemapService,
    normalize_path,
)

router = APIRouter()


# ============================================================================
# Public Routes
# ============================================================================


@router.get(
    "/public/seo/page",
    response_model=SeoPageResponse,
    summary="Get SEO page for path",
    tags=["Public - SEO"],
)
async def get_seo_page(
    tenant_id: PublicTenantId,
    locale: Locale,
    db: DBSession,
    path: str = Query(..., min_length=1, max_length=500, description="Page path"),
) -> SeoPageResponse:
    """Get the generated page record (title, breadcrumbs, route params) for a path."""
    registry = SeoUrlRegistry(db)
    record = await registry.get_by_path(tenant_id, path, locale.locale)

    if not record:
        raise NotFoundError("SeoUrl", normalize_path(path))

    return SeoPageResponse.model_validate(record)


@router.get(
    "/public/redirects/resolve",
    response_model=RedirectResolution,
    summary="Resolve redirect for path",
    tags=["Public - SEO"],
)
async def resolve_redirect(
    tenant_id: PublicTenantId,
    db: DBSession,
    path: str = Query(..., min_length=1, max_length=500, description="Inbound path"),
) -> RedirectResolution:
    """Tell the storefront whether an inbound path must be permanently redirected."""
    service = RedirectService(db)
    redirect = await service.resolve(tenant_id, path)

    if redirect is None:
        return RedirectResolution(redirect=False, from_url=normalize_path(path))

    await service.record_hit(redirect)
    await db.commit()

    return RedirectResolution(
        redirect=True,
        from_url=redirect.from_url,
        to_url=f"/{redirect.to_url}",
        status_code=redirect.redirect_type,
    )


@router.get(
    "/public/sitemap.xml",
    response_class=PlainTextResponse,
    summary="Get sitemap.xml",
    tags=["Public - SEO"],
)
async def get_sitemap(
    request: Request,
    tenant_id: PublicTenantId,
    locale: Locale,
    db: DBSession,
) -> PlainTextResponse:
    """Generate and return sitemap.xml."""
    service = SitemapService(db)

    # Build base URL from request
    base_url = f"{request.url.scheme}://{request.url.netloc}"

    xml = await service.generate_sitemap_xml(tenant_id, locale.locale, base_url)

    return PlainTextResponse(
        content=xml,
        media_type="application/xml",
        headers={"Cache-Control": "public, max-age=3600"},
    )


# ============================================================================
# Admin Routes - SEO URLs
# ============================================================================


@router.get(
    "/admin/seo/urls",
    response_model=SeoUrlListResponse,
    summary="List SEO urls",
    tags=["Admin - SEO URLs"],
)
async def list_seo_urls(
    pagination: Pagination,
    tenant_id: TenantFromHeader,
    db: DBSession,
    url_type: str | None = Query(
        default=None, alias="type", pattern="^(vehicle_detail|collection)$"
    ),
    locale: str | None = Query(default=None, min_length=2, max_length=5),
) -> SeoUrlListResponse:
    """List generated SEO urls."""
    registry = SeoUrlRegistry(db)
    urls, total = await registry.list_urls(
        tenant_id=tenant_id,
        url_type=url_type,
        locale=locale,
        page=pagination.page,
        page_size=pagination.page_size,
    )

    return SeoUrlListResponse(
        items=[SeoUrlResponse.model_validate(u) for u in urls],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


# ============================================================================
# Admin Routes - Redirects
# ============================================================================


@router.get(
    "/admin/seo/redirects",
    response_model=RedirectListResponse,
    summary="List redirects",
    tags=["Admin - SEO"],
)
async def list_redirects(
    pagination: Pagination,
    tenant_id: TenantFromHeader,
    db: DBSession,
    is_active: bool | None = Query(default=None, alias="isActive"),
) -> RedirectListResponse:
    """List all redirects."""
    service = RedirectService(db)
    redirects, total = await service.list_redirects(
        tenant_id=tenant_id,
        is_active=is_active,
        page=pagination.page,
        page_size=pagination.page_size,
    )

    return RedirectListResponse(
        items=[RedirectResponse.model_validate(r) for r in redirects],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )
