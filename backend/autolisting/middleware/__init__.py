"""Application middleware."""

from autolisting.middleware.redirects import UrlRedirectMiddleware
from autolisting.middleware.request_logging import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
    "UrlRedirectMiddleware",
]
