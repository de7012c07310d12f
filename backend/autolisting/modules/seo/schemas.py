"""Pydantic schemas for SEO module."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# SEO URL Schemas
# ============================================================================


class BreadcrumbItem(BaseModel):
    """One breadcrumb entry, root to leaf."""

    name: str
    path: str


class SeoUrlResponse(BaseModel):
    """Schema for SEO url record response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    locale: str
    path: str
    type: str
    canonical_url: str
    title: str
    meta_description: str | None = None
    breadcrumbs: list[BreadcrumbItem] = Field(default_factory=list)
    route_params: dict[str, str] = Field(default_factory=dict)
    is_indexable: bool
    include_in_sitemap: bool
    sitemap_priority: float
    sitemap_changefreq: str
    lastmod: datetime
    created_at: datetime
    updated_at: datetime


class SeoUrlListResponse(BaseModel):
    """Schema for SEO url list response."""

    items: list[SeoUrlResponse]
    total: int
    page: int
    page_size: int


class SeoPageResponse(BaseModel):
    """Public page metadata for the storefront."""

    model_config = ConfigDict(from_attributes=True)

    path: str
    type: str
    canonical_url: str
    title: str
    meta_description: str | None = None
    breadcrumbs: list[BreadcrumbItem] = Field(default_factory=list)
    route_params: dict[str, str] = Field(default_factory=dict)
    is_indexable: bool


class UrlTypeStats(BaseModel):
    """Counts for one page type."""

    count: int = 0
    sitemap_count: int = 0
    indexable_count: int = 0


class TenantUrlStats(BaseModel):
    """Aggregate counts of a tenant's SEO urls."""

    total_urls: int = 0
    by_type: dict[str, UrlTypeStats] = Field(default_factory=dict)
    sitemap_urls: int = 0
    indexable_urls: int = 0


# ============================================================================
# Redirect Schemas
# ============================================================================


class RedirectResponse(BaseModel):
    """Schema for redirect response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    from_url: str
    to_url: str
    redirect_type: int
    reason: str | None = None
    is_active: bool
    hit_count: int
    last_redirected_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class RedirectListResponse(BaseModel):
    """Schema for redirect list response."""

    items: list[RedirectResponse]
    total: int
    page: int
    page_size: int


class RedirectResolution(BaseModel):
    """Answer of the public redirect lookup.

    ``redirect`` is false when the path should fall through to normal routing.
    """

    redirect: bool
    from_url: str
    to_url: str | None = None
    status_code: int | None = None
