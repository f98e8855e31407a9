"""Health check endpoints."""

from fastapi import APIRouter, HTTPException, status

from storefront.core.config import settings
from storefront.core.deps import RepositoryDep
from storefront.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(repo: RepositoryDep) -> HealthResponse:
    """
    Health check endpoint.

    Checks storage connectivity and returns service status.
    """
    health = HealthResponse(
        status="healthy",
        version=settings.version,
        environment=settings.environment,
        storage_backend=repo.backend_name,
        checks={},
    )

    try:
        await repo.ping()
        health.checks["storage"] = "healthy"
    except Exception as e:
        health.status = "unhealthy"
        health.checks["storage"] = f"unhealthy: {str(e)}"

    return health


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness probe for Kubernetes/container orchestration.

    Simple check that the service is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(repo: RepositoryDep) -> dict[str, str]:
    """
    Readiness probe for Kubernetes/container orchestration.

    Checks if the storage backend is ready to receive traffic.
    """
    try:
        await repo.ping()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Storage unavailable: {str(e)}",
        )

    return {"status": "ready"}
