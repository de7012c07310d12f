"""Request logging middleware."""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from autolisting.core.logging import bind_context, clear_context, get_logger

logger = get_logger(__name__)

# Probes hit these every few seconds
QUIET_PATHS = frozenset({"/health", "/health/ready"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request with timing and binds request context.

    ``request_id`` is taken from an inbound ``X-Request-ID`` header when the
    proxy sets one, otherwise generated, and echoed on the response.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        quiet = request.url.path in QUIET_PATHS

        bind_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=self._get_client_ip(request),
        )
        tenant_header = request.headers.get("x-tenant-id")
        if tenant_header:
            bind_context(tenant_id=tenant_header)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            process_time = time.perf_counter() - start_time

            if not quiet:
                logger.info(
                    "request_completed",
                    status_code=response.status_code,
                    process_time_ms=round(process_time * 1000, 2),
                )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"
            return response

        except Exception as exc:
            process_time = time.perf_counter() - start_time
            logger.exception(
                "request_failed",
                error=str(exc),
                process_time_ms=round(process_time * 1000, 2),
            )
            raise

        finally:
            clear_context()

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP from request, handling proxies."""
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"
