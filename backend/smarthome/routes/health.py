"""
SmartHome API: Health Check Route
=================================

What:  GET /health for monitoring and load balancer health checks.
How:   Reads the connectivity flag recorded by the startup ping. It does not
       touch the database, so it has no side effects and always answers 200.
"""

from fastapi import APIRouter, Depends

from smarthome.dependencies import AppDependencies, get_dependencies
from smarthome.schemas.responses import HealthResponse

router = APIRouter(tags=["Health"])

STATUS_OK = "ok"
STATUS_ERROR = "error"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(deps: AppDependencies = Depends(get_dependencies)) -> HealthResponse:
    return HealthResponse(
        api=STATUS_OK,
        database=STATUS_OK if deps.database_connected else STATUS_ERROR,
    )
