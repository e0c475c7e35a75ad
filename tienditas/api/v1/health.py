"""Health check endpoints."""

from fastapi import APIRouter

from tienditas.core.config import settings
from tienditas.core.deps import RedisClient
from tienditas.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(redis: RedisClient) -> HealthResponse:
    """
    Health check endpoint.

    Checks connectivity to the Redis instance holding the store collection.
    """
    status = "healthy"
    checks: dict[str, str] = {}

    try:
        await redis.ping()
        checks["redis"] = "healthy"
    except Exception as e:
        status = "unhealthy"
        checks["redis"] = f"unhealthy: {str(e)}"

    return HealthResponse(
        status=status,
        version=settings.version,
        environment=settings.environment,
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness probe for container orchestration.

    Simple check that the service is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(redis: RedisClient) -> dict[str, str]:
    """
    Readiness probe for container orchestration.

    Checks that the store collection can be reached.
    """
    await redis.ping()
    return {"status": "ready"}
