"""SEO module service layer."""

from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import UUID
from xml.sax.saxutils import escape

from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from autolisting.config import settings
from autolisting.core.logging import get_logger
from autolisting.modules.seo.models import SeoUrl, UrlRedirect
from autolisting.modules.seo.schemas import TenantUrlStats, UrlTypeStats
from autolisting.modules.urls.paths import GeneratedUrl

logger = get_logger(__name__)

REDIRECT_PERMANENT = 301
REASON_VEHICLE_URL_CHANGED = "vehicle_url_changed"


def normalize_path(path: str) -> str:
    """Stored paths have no leading or trailing slash."""
    return path.strip().strip("/")


class SeoUrlRegistry:
    """Canonical SEO url records keyed by (tenant_id, locale, path).

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_path(
        self, tenant_id: UUID, path: str, locale: str | None = None
    ) -> SeoUrl | None:
        """Get SEO url by path and locale."""
        stmt = (
            select(SeoUrl)
            .where(SeoUrl.tenant_id == tenant_id)
            .where(SeoUrl.locale == (locale or settings.seo_default_locale))
            .where(SeoUrl.path == normalize_path(path))
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _apply(record: SeoUrl, draft: GeneratedUrl, now: datetime) -> None:
        for field, value in draft.content().items():
            setattr(record, field, value)
        record.lastmod = now

    async def upsert(self, tenant_id: UUID, locale: str, draft: GeneratedUrl) -> SeoUrl:
        """Create the record for ``draft.path`` or overwrite its content."""
        record = await self.get_by_path(tenant_id, draft.path, locale)
        if record is None:
            record = SeoUrl(tenant_id=tenant_id, locale=locale, path=draft.path)
            self.db.add(record)

        self._apply(record, draft, datetime.now(UTC))
        await self.db.flush()
        return record

    async def upsert_many(
        self, tenant_id: UUID, locale: str, drafts: Iterable[GeneratedUrl]
    ) -> int:
        """Upsert a batch with a single lookup query.

        Drafts sharing a path collapse to the last one. Returns the number of
        distinct paths written.
        """
        by_path = {draft.path: draft for draft in drafts}
        if not by_path:
            return 0

        stmt = select(SeoUrl).where(
            SeoUrl.tenant_id == tenant_id,
            SeoUrl.locale == locale,
            SeoUrl.path.in_(list(by_path)),
        )
        result = await self.db.execute(stmt)
        existing = {record.path: record for record in result.scalars().all()}

        now = datetime.now(UTC)
        for path, draft in by_path.items():
            record = existing.get(path)
            if record is None:
                record = SeoUrl(tenant_id=tenant_id, locale=locale, path=path)
                self.db.add(record)
            self._apply(record, draft, now)

        await self.db.flush()
        return len(by_path)

    async def clear_all(self, tenant_id: UUID) -> int:
        """Delete every SEO url of the tenant. Returns the deleted count."""
        result = await self.db.execute(delete(SeoUrl).where(SeoUrl.tenant_id == tenant_id))
        return result.rowcount or 0

    async def stats(self, tenant_id: UUID) -> TenantUrlStats:
        """Counts grouped by page type."""
        stmt = (
            select(
                SeoUrl.type,
                func.count().label("count"),
                func.sum(case((SeoUrl.include_in_sitemap.is_(True), 1), else_=0)).label(
                    "sitemap_count"
                ),
                func.sum(case((SeoUrl.is_indexable.is_(True), 1), else_=0)).label(
                    "indexable_count"
                ),
            )
            .where(SeoUrl.tenant_id == tenant_id)
            .group_by(SeoUrl.type)
        )
        result = await self.db.execute(stmt)

        by_type = {
            row.type: UrlTypeStats(
                count=row.count,
                sitemap_count=row.sitemap_count or 0,
                indexable_count=row.indexable_count or 0,
            )
            for row in result.all()
        }

        return TenantUrlStats(
            total_urls=sum(item.count for item in by_type.values()),
            by_type=by_type,
            sitemap_urls=sum(item.sitemap_count for item in by_type.values()),
            indexable_urls=sum(item.indexable_count for item in by_type.values()),
        )

    async def list_urls(
        self,
        tenant_id: UUID,
        url_type: str | None = None,
        locale: str | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> tuple[list[SeoUrl], int]:
        """List SEO urls."""
        base_query = select(SeoUrl).where(SeoUrl.tenant_id == tenant_id)

        if url_type:
            base_query = base_query.where(SeoUrl.type == url_type)
        if locale:
            base_query = base_query.where(SeoUrl.locale == locale)

        # Count
        count_stmt = select(func.count()).select_from(base_query.subquery())
        total = (await self.db.execute(count_stmt)).scalar() or 0

        # Get results
        stmt = (
            base_query.order_by(SeoUrl.path)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(stmt)
        urls = list(result.scalars().all())

        return urls, total

    async def get_sitemap_urls(self, tenant_id: UUID, locale: str) -> list[SeoUrl]:
        """Get all URLs for sitemap."""
        stmt = (
            select(SeoUrl)
            .where(SeoUrl.tenant_id == tenant_id)
            .where(SeoUrl.locale == locale)
            .where(SeoUrl.include_in_sitemap.is_(True))
            .order_by(SeoUrl.sitemap_priority.desc(), SeoUrl.path)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())


class RedirectService:
    """Maintains 301 redirects from old vehicle paths to current ones.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_from_url(self, tenant_id: UUID, from_url: str) -> UrlRedirect | None:
        """Get redirect by source path, active or not."""
        stmt = (
            select(UrlRedirect)
            .where(UrlRedirect.tenant_id == tenant_id)
            .where(UrlRedirect.from_url == normalize_path(from_url))
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def resolve(self, tenant_id: UUID, path: str) -> UrlRedirect | None:
        """Active redirect for an inbound path, if any."""
        from_url = normalize_path(path)
        if not from_url:
            return None

        stmt = (
            select(UrlRedirect)
            .where(UrlRedirect.tenant_id == tenant_id)
            .where(UrlRedirect.from_url == from_url)
            .where(UrlRedirect.is_active.is_(True))
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def record_move(
        self,
        tenant_id: UUID,
        from_url: str,
        to_url: str,
        reason: str = REASON_VEHICLE_URL_CHANGED,
    ) -> UrlRedirect | None:
        """Point ``from_url`` at ``to_url``.

        Reuses the existing record for (tenant_id, from_url) when there is
        one. Active redirects that ended at ``from_url`` are retargeted to
        ``to_url`` so visitors never hop twice, and a redirect whose source
        is ``to_url`` is switched off because that path is live again.
        Returns None when the paths are equal.
        """
        from_url = normalize_path(from_url)
        to_url = normalize_path(to_url)
        if from_url == to_url:
            return None

        redirect = await self.get_by_from_url(tenant_id, from_url)
        if redirect is None:
            redirect = UrlRedirect(
                tenant_id=tenant_id,
                from_url=from_url,
                to_url=to_url,
                redirect_type=REDIRECT_PERMANENT,
                reason=reason,
                is_active=True,
                hit_count=0,
            )
            self.db.add(redirect)
        else:
            redirect.to_url = to_url
            redirect.reason = reason
            redirect.redirect_type = REDIRECT_PERMANENT
            redirect.is_active = True

        stmt = select(UrlRedirect).where(
            UrlRedirect.tenant_id == tenant_id,
            UrlRedirect.is_active.is_(True),
            UrlRedirect.from_url != from_url,
            or_(UrlRedirect.to_url == from_url, UrlRedirect.from_url == to_url),
        )
        result = await self.db.execute(stmt)
        for related in result.scalars().all():
            if related.from_url == to_url:
                related.is_active = False
            else:
                related.to_url = to_url

        await self.db.flush()

        logger.info(
            "redirect_recorded",
            tenant_id=str(tenant_id),
            from_url=from_url,
            to_url=to_url,
            reason=reason,
        )
        return redirect

    async def deactivate_for_path(self, tenant_id: UUID, path: str) -> int:
        """Switch off redirects leaving from or landing on ``path``.

        Rows are kept for history. Returns the number deactivated.
        """
        path = normalize_path(path)
        if not path:
            return 0

        stmt = (
            update(UrlRedirect)
            .where(
                UrlRedirect.tenant_id == tenant_id,
                UrlRedirect.is_active.is_(True),
                or_(UrlRedirect.from_url == path, UrlRedirect.to_url == path),
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        count = result.rowcount or 0

        if count:
            logger.info(
                "redirects_deactivated",
                tenant_id=str(tenant_id),
                path=path,
                count=count,
            )
        return count

    async def release_path(self, tenant_id: UUID, path: str) -> int:
        """Switch off redirects leaving from ``path`` because it is live again.

        Returns the number deactivated.
        """
        path = normalize_path(path)
        if not path:
            return 0

        stmt = (
            update(UrlRedirect)
            .where(
                UrlRedirect.tenant_id == tenant_id,
                UrlRedirect.is_active.is_(True),
                UrlRedirect.from_url == path,
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        count = result.rowcount or 0

        if count:
            logger.info("redirects_released", tenant_id=str(tenant_id), path=path, count=count)
        return count

    async def record_hit(self, redirect: UrlRedirect) -> None:
        """Record a redirect hit."""
        redirect.increment_hit()
        await self.db.flush()

    async def list_redirects(
        self,
        tenant_id: UUID,
        is_active: bool | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> tuple[list[UrlRedirect], int]:
        """List redirects."""
        base_query = select(UrlRedirect).where(UrlRedirect.tenant_id == tenant_id)

        if is_active is not None:
            base_query = base_query.where(UrlRedirect.is_active == is_active)

        # Count
        count_stmt = select(func.count()).select_from(base_query.subquery())
        total = (await self.db.execute(count_stmt)).scalar() or 0

        # Get results
        stmt = (
            base_query.order_by(UrlRedirect.from_url)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(stmt)
        redirects = list(result.scalars().all())

        return redirects, total


class SitemapService:
    """Service for generating sitemaps."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.registry = SeoUrlRegistry(db)

    async def generate_sitemap_xml(self, tenant_id: UUID, locale: str, base_url: str) -> str:
        """Generate sitemap.xml content."""
        urls = await self.registry.get_sitemap_urls(tenant_id, locale)
        base_url = base_url.rstrip("/")

        xml_parts = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        ]

        for record in urls:
            url_parts = ["  <url>", f"    <loc>{escape(base_url + record.canonical_url)}</loc>"]

            if record.lastmod:
                url_parts.append(f"    <lastmod>{record.lastmod.strftime('%Y-%m-%d')}</lastmod>")

            if record.sitemap_changefreq:
                url_parts.append(f"    <changefreq>{record.sitemap_changefreq}</changefreq>")

            if record.sitemap_priority is not None:
                url_parts.append(f"    <priority>{record.sitemap_priority:.1f}</priority>")

            url_parts.append("  </url>")
            xml_parts.append("\n".join(url_parts))

        xml_parts.append("</urlset>")

        return "\n".join(xml_parts)
