"""SEO module database models."""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from autolisting.core.base_model import (
    ActiveMixin,
    Base,
    TenantMixin,
    TimestampMixin,
    UUIDMixin,
)


class SeoUrl(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Canonical SEO record for one generated page.

    Keyed by (tenant_id, locale, path). Regeneration upserts on that key and
    only rewrites content columns and ``lastmod``.
    """

    __tablename__ = "seo_urls"

    locale: Mapped[str] = mapped_column(String(10), nullable=False)

    # Path without leading slash (e.g. 'chevrolet/onix-10-turbo')
    path: Mapped[str] = mapped_column(String(500), nullable=False)

    # 'vehicle_detail' or 'collection'
    type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)

    canonical_url: Mapped[str] = mapped_column(String(500), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # [{"name": ..., "path": ...}] root to leaf
    breadcrumbs: Mapped[list[dict[str, str]]] = mapped_column(
        JSONB, nullable=False, default=list
    )

    # Entity ids needed to render the page (vehicle_id, brand_id, city_id, ...)
    route_params: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)

    is_indexable: Mapped[bool] = mapped_column(default=True, nullable=False)
    include_in_sitemap: Mapped[bool] = mapped_column(default=True, nullable=False)
    sitemap_priority: Mapped[float] = mapped_column(Float, default=0.6, nullable=False)
    sitemap_changefreq: Mapped[str] = mapped_column(String(20), default="weekly", nullable=False)

    lastmod: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        Index("ux_seo_urls_tenant_locale_path", "tenant_id", "locale", "path", unique=True),
        CheckConstraint(
            "type IN ('vehicle_detail', 'collection')",
            name="ck_seo_urls_type",
        ),
        CheckConstraint(
            "sitemap_priority >= 0 AND sitemap_priority <= 1",
            name="ck_seo_urls_priority_range",
        ),
    )

    def __repr__(self) -> str:
        return f"<SeoUrl {self.path}>"


class UrlRedirect(Base, UUIDMixin, TimestampMixin, TenantMixin, ActiveMixin):
    """Permanent redirect from an old vehicle path to its current one.

    Never deleted: removing a vehicle only deactivates its redirects.
    """

    __tablename__ = "url_redirects"

    from_url: Mapped[str] = mapped_column(String(500), nullable=False)
    to_url: Mapped[str] = mapped_column(String(500), nullable=False)
    redirect_type: Mapped[int] = mapped_column(Integer, default=301, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Analytics
    hit_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_redirected_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ux_url_redirects_tenant_from", "tenant_id", "from_url", unique=True),
        Index("ix_url_redirects_tenant_to", "tenant_id", "to_url"),
        CheckConstraint("redirect_type = 301", name="ck_url_redirects_type"),
        CheckConstraint("char_length(from_url) >= 1", name="ck_url_redirects_from_url"),
    )

    def __repr__(self) -> str:
        return f"<UrlRedirect {self.from_url} -> {self.to_url}>"

    def increment_hit(self) -> None:
        """Increment hit counter."""
        self.hit_count += 1
        self.last_redirected_at = datetime.now(UTC)
