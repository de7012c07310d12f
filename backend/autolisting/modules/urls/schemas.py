"""Pydantic schemas for url generation endpoints."""

from uuid import UUID

from pydantic import BaseModel, Field

from autolisting.modules.seo.schemas import BreadcrumbItem, TenantUrlStats


class UrlGenerationSummary(BaseModel):
    """Counts produced by one full tenant generation pass."""

    brands: int = 0
    vehicles: int = 0
    city_urls: int = 0
    neighborhood_urls: int = 0
    total_urls: int = 0
    deleted_urls: int = 0


class GenerateUrlsRequest(BaseModel):
    """Options for synchronous generation."""

    clear_existing: bool = Field(
        default=False,
        description="Delete every existing SEO url of the tenant before generating",
    )


class RegenerateUrlsRequest(BaseModel):
    """Options for queued regeneration."""

    clear_existing: bool = True


class GenerateUrlsResponse(BaseModel):
    tenant_id: UUID
    summary: UrlGenerationSummary
    stats: TenantUrlStats


class RegenerationAcceptedResponse(BaseModel):
    tenant_id: UUID
    task: str
    status: str = "queued"


class ClearUrlsResponse(BaseModel):
    tenant_id: UUID
    deleted_count: int


class UrlPreviewItem(BaseModel):
    """Draft record produced without writing anything."""

    path: str
    type: str
    canonical_url: str
    title: str
    meta_description: str
    breadcrumbs: list[BreadcrumbItem]
    route_params: dict[str, str]
    sitemap_priority: float


class UrlPreviewResponse(BaseModel):
    summary: UrlGenerationSummary
    items: list[UrlPreviewItem]
    truncated: bool = False


class UrlSuggestionsResponse(BaseModel):
    """Free alternatives for a vehicle title."""

    title: str
    base_slug: str
    available: bool
    suggestions: list[str]
