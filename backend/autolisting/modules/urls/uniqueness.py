"""Tenant-scoped unique vehicle url resolution."""

import re
import secrets
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from autolisting.config import settings
from autolisting.core.exceptions import UniquenessExhaustedError
from autolisting.core.logging import get_logger
from autolisting.modules.catalog.models import Vehicle
from autolisting.modules.urls.slugs import slugify

logger = get_logger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def is_variant_of(url: str | None, base_slug: str) -> bool:
    """True for ``base_slug`` itself or a numbered ``base_slug-N``."""
    if not url:
        return False
    return url == base_slug or re.fullmatch(rf"{re.escape(base_slug)}-\d+", url) is not None


class UniqueUrlResolver:
    """Find the first free ``base``, ``base-1``, ``base-2`` ... for a tenant.

    The scope is live (not soft-deleted) vehicles of one tenant. The counter
    is unbounded unless ``max_attempts`` is set; resolution only stops once
    a free slug is found. With a cap, ``random_fallback`` returns
    ``base-<hex>`` instead of raising ``UniquenessExhaustedError``.

    Check-then-act is not atomic: the partial unique index on
    ``vehicles (tenant_id, url)`` rejects a concurrent duplicate and the
    caller retries with the rejected slug passed in ``taken``.
    """

    def __init__(
        self,
        db: AsyncSession,
        *,
        max_attempts: int | None = None,
        random_fallback: bool | None = None,
    ) -> None:
        self.db = db
        self.max_attempts = max_attempts if max_attempts is not None else settings.url_suffix_max_attempts
        self.random_fallback = (
            random_fallback if random_fallback is not None else settings.url_random_suffix_fallback
        )

    def _scope(self, tenant_id: UUID, exclude_id: UUID | None):
        stmt = select(Vehicle.url).where(
            Vehicle.tenant_id == tenant_id,
            Vehicle.deleted_at.is_(None),
            Vehicle.url.is_not(None),
        )
        if exclude_id is not None:
            stmt = stmt.where(Vehicle.id != exclude_id)
        return stmt

    async def url_exists(
        self,
        url: str,
        tenant_id: UUID,
        exclude_id: UUID | None = None,
    ) -> bool:
        """Check whether another live vehicle of the tenant owns ``url``."""
        stmt = self._scope(tenant_id, exclude_id).where(Vehicle.url == url).limit(1)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def _load_occupied(
        self,
        base_slug: str,
        tenant_id: UUID,
        exclude_id: UUID | None,
    ) -> set[str]:
        """All urls equal to ``base_slug`` or starting with ``base_slug-``."""
        stmt = self._scope(tenant_id, exclude_id).where(
            or_(
                Vehicle.url == base_slug,
                Vehicle.url.like(f"{_escape_like(base_slug)}-%", escape="\\"),
            )
        )
        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    async def resolve(
        self,
        base_slug: str,
        tenant_id: UUID,
        exclude_id: UUID | None = None,
        taken: Iterable[str] = (),
    ) -> str:
        """Return ``base_slug`` or its first free numbered variant."""
        occupied = await self._load_occupied(base_slug, tenant_id, exclude_id)
        occupied.update(taken)

        if base_slug not in occupied:
            return base_slug

        counter = 1
        while self.max_attempts is None or counter <= self.max_attempts:
            candidate = f"{base_slug}-{counter}"
            if candidate not in occupied:
                return candidate
            counter += 1

        if self.random_fallback:
            candidate = f"{base_slug}-{secrets.token_hex(4)}"
            while candidate in occupied:
                candidate = f"{base_slug}-{secrets.token_hex(4)}"
            logger.warning(
                "url_suffix_random_fallback",
                tenant_id=str(tenant_id),
                base_slug=base_slug,
                url=candidate,
            )
            return candidate

        raise UniquenessExhaustedError(base_slug, self.max_attempts)

    async def generate_unique_url(
        self,
        title: str,
        tenant_id: UUID,
        exclude_id: UUID | None = None,
        taken: Iterable[str] = (),
    ) -> str:
        """Slugify ``title`` and resolve it within the tenant."""
        return await self.resolve(slugify(title), tenant_id, exclude_id, taken)

    async def generate_suggestions(
        self,
        title: str,
        tenant_id: UUID,
        max_suggestions: int = 5,
    ) -> list[str]:
        """Free numbered variants of the title slug, in counter order."""
        base_slug = slugify(title)
        occupied = await self._load_occupied(base_slug, tenant_id, None)

        suggestions: list[str] = []
        counter = 1
        while len(suggestions) < max_suggestions:
            candidate = f"{base_slug}-{counter}"
            if candidate not in occupied:
                suggestions.append(candidate)
            counter += 1

        return suggestions
