"""Core module - foundational components."""

from autolisting.core.database import get_db
from autolisting.core.exceptions import AppException
from autolisting.core.logging import get_logger

__all__ = ["get_db", "AppException", "get_logger"]
