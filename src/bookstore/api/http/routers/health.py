"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.bookstore.api.http.app_data import ApplicationDependencies

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(request: Request) -> dict[str, str]:
    """Liveness check: 200 as long as the process is running.

    It does not check dependencies.
    """
    return {"status": "healthy", "service": request.app.state.service}


@router.get("/ready", response_model=None)
def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness check: 200 when the shared collection is reachable, else 503."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    db_healthy = app_deps.database_service.health_check()

    response = {
        "status": "ready" if db_healthy else "not_ready",
        "service": app_deps.service,
        "checks": {
            "database": {
                "status": "healthy" if db_healthy else "unhealthy",
                "collection": app_deps.database_service.collection_name,
            }
        },
    }

    if not db_healthy:
        return JSONResponse(status_code=503, content=response)
    return response
