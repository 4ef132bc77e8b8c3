"""Health check endpoints."""

from fastapi import APIRouter, Depends

from gisty.models.schemas import HealthResponse
from gisty.services.gist_service import GistService

router = APIRouter(tags=["Health"])


async def get_gist_service() -> GistService:
    """Placeholder - overridden in main.py."""
    raise NotImplementedError


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
)
async def health_check(
    service: GistService = Depends(get_gist_service),
) -> HealthResponse:
    """
    Check the health of the service.

    Verifies:
    - GitHub API is reachable
    - whether the gist cache is usable
    """
    github_healthy = await service.check_health()

    return HealthResponse(
        status="healthy" if github_healthy else "degraded",
        version="1.0.0",
        github_api_reachable=github_healthy,
        cache_enabled=service.cache_enabled,
    )


@router.get(
    "/health/live",
    summary="Liveness probe",
)
async def liveness():
    """Simple liveness check - returns 200 if service is running."""
    return {"status": "alive"}


@router.get(
    "/health/ready",
    summary="Readiness probe",
)
async def readiness(
    service: GistService = Depends(get_gist_service),
):
    """Readiness check - verifies external dependencies."""
    if not await service.check_health():
        return {"status": "not_ready", "reason": "GitHub API unreachable"}
    return {"status": "ready"}
