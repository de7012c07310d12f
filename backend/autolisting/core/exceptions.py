"""Application exception hierarchy following RFC 7807 Problem Details."""

from typing import Any
from uuid import UUID

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception following RFC 7807.

    All custom exceptions should inherit from this class.
    Provides consistent error response format.
    """

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.error_detail = detail or {}

        super().__init__(
            status_code=status_code,
            detail={
                "type": f"https://api.autolisting.local/errors/{error_code}",
                "title": error_code.replace("_", " ").title(),
                "status": status_code,
                "detail": message,
                "instance": None,  # Will be set by exception handler
                **self.error_detail,
            },
        )


# ============================================================================
# Resource Exceptions (404, 409)
# ============================================================================


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(
        self,
        resource: str,
        identifier: str | UUID | None = None,
    ) -> None:
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id '{identifier}' not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="not_found",
            message=message,
            detail={"resource": resource},
        )


class UniquenessExhaustedError(AppException):
    """No free url variant was found within the configured attempts."""

    def __init__(self, base_slug: str, attempts: int) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="url_uniqueness_exhausted",
            message=f"Could not find a free url for '{base_slug}' after {attempts} attempts",
            detail={"base_slug": base_slug, "attempts": attempts},
        )


# ============================================================================
# Tenant Exceptions (400, 404, 500)
# ============================================================================


class TenantRequiredError(AppException):
    """Tenant ID is required in multi-tenant mode."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="tenant_required",
            message="tenant_id parameter is required in multi-tenant mode",
        )


class TenantHeaderRequiredError(AppException):
    """X-Tenant-ID header is required in multi-tenant mode."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="tenant_header_required",
            message="X-Tenant-ID header is required (single_tenant_mode=false)",
        )


class InvalidTenantIdError(AppException):
    """Invalid tenant ID format."""

    def __init__(self, value: str) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="invalid_tenant_id",
            message="Invalid X-Tenant-ID format",
            detail={"value": value},
        )


class TenantNotFoundError(AppException):
    """Tenant not found or inactive."""

    def __init__(self, tenant_id: UUID | str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="tenant_not_found",
            message="Tenant not found or inactive",
            detail={"tenant_id": str(tenant_id)},
        )


class DefaultTenantConfigError(AppException):
    """Default tenant configuration error in single-tenant mode."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="default_tenant_config_error",
            message=reason,
        )


# ============================================================================
# Storage Exceptions (503)
# ============================================================================


class DatabaseError(AppException):
    """Database connection or query error."""

    def __init__(self, message: str = "Database error occurred") -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="database_error",
            message=message,
        )


class StorageUnavailableError(DatabaseError):
    """Storage could not be reached while assigning an entity url.

    The originating save fails; an entity is never persisted with an
    unresolved path.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(message=f"Storage unavailable during {operation}")
        self.error_detail["operation"] = operation
        if isinstance(self.detail, dict):
            self.detail["operation"] = operation


# ============================================================================
# Background task failures (never rendered as HTTP responses)
# ============================================================================


class RegenerationTaskError(Exception):
    """URL regeneration task failed.

    Raised inside task handlers and logged at the worker boundary; the
    entity mutation that scheduled the task is never affected.
    """

    def __init__(self, task_name: str, tenant_id: UUID | str | None, reason: str) -> None:
        self.task_name = task_name
        self.tenant_id = tenant_id
        self.reason = reason
        super().__init__(f"{task_name} failed for tenant {tenant_id}: {reason}")
