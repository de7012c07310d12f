"""Health check endpoints."""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from autolisting.config import settings
from autolisting.core.database import check_db_connection
from autolisting.core.redis import check_redis_connection, get_redis_client

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response with dependency status."""

    status: str
    checks: dict[str, bool]
    queued_tasks: int | None = None


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Basic health check",
    description="Returns OK if the service is running. Use for load balancer health checks.",
)
async def health() -> HealthResponse:
    """Basic health check - always returns OK if service is running."""
    return HealthResponse(
        status="ok",
        version=settings.app_version,
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Checks the database and the Redis task queue.",
    responses={
        status.HTTP_503_SERVICE_UNAVAILABLE: {
            "description": "Service not ready - one or more dependencies are down",
        }
    },
)
async def readiness(response: Response) -> ReadinessResponse:
    """Readiness probe - checks all dependencies."""
    db_ok = await check_db_connection()
    redis_ok = await check_redis_connection()

    queued_tasks = None
    client = get_redis_client()
    if redis_ok and client is not None:
        queued_tasks = await client.llen(settings.task_queue_name)

    all_ok = db_ok and redis_ok
    if not all_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status="ok" if all_ok else "degraded",
        checks={
            "database": db_ok,
            "redis": redis_ok,
        },
        queued_tasks=queued_tasks,
    )
