"""Permanent redirects for renamed vehicle pages."""

from contextlib import AbstractAsyncContextManager
from typing import Callable
from uuid import UUID

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from autolisting.config import settings
from autolisting.core.database import get_db_context
from autolisting.core.logging import get_logger
from autolisting.core.tenant import get_default_tenant_id, get_tenant_id_by_domain
from autolisting.modules.seo.service import RedirectService

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]

REDIRECT_METHODS = frozenset({"GET", "HEAD"})
SKIP_PREFIXES = ("/health", "/docs", "/redoc", "/openapi.json")


class UrlRedirectMiddleware(BaseHTTPMiddleware):
    """Answers 301 for inbound page paths that have an active redirect.

    Only GET/HEAD requests outside the API prefix are considered. The tenant
    comes from ``X-Tenant-ID``, the default tenant in single-tenant mode, or
    the ``Host`` domain. Anything without a redirect falls through.
    """

    def __init__(self, app: ASGIApp, session_factory: SessionFactory | None = None) -> None:
        super().__init__(app)
        self.session_factory = session_factory or get_db_context

    def _should_check(self, request: Request) -> bool:
        if request.method not in REDIRECT_METHODS:
            return False
        path = request.url.path
        if path == "/" or path.startswith(settings.api_prefix):
            return False
        return not path.startswith(SKIP_PREFIXES)

    async def _resolve_tenant(self, request: Request, db: AsyncSession) -> UUID | None:
        header = request.headers.get("x-tenant-id")
        if header:
            try:
                return UUID(header)
            except ValueError:
                return None

        if settings.single_tenant_mode:
            return await get_default_tenant_id(db)

        host = request.headers.get("host")
        if not host:
            return None
        return await get_tenant_id_by_domain(db, host)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        if not self._should_check(request):
            return await call_next(request)

        target = None
        try:
            async with self.session_factory() as db:
                tenant_id = await self._resolve_tenant(request, db)
                if tenant_id is not None:
                    service = RedirectService(db)
                    redirect = await service.resolve(tenant_id, request.url.path)
                    if redirect is not None:
                        await service.record_hit(redirect)
                        await db.commit()
                        target = (redirect.to_url, redirect.redirect_type)
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            # Lookup failures serve the page as is.
            logger.warning("redirect_lookup_failed", path=request.url.path, error=str(e))

        if target is None:
            return await call_next(request)

        to_url, status_code = target
        location = f"/{to_url}"
        if request.url.query:
            location = f"{location}?{request.url.query}"

        logger.info("redirect_served", from_path=request.url.path, to_url=location)
        return RedirectResponse(url=location, status_code=status_code)
