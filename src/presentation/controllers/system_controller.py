"""
System Router - Presentation Layer

Liveness and build information for the statistics service. Both endpoints
report the reachability of the time-series database holding the counter and
weather series.
"""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Request, status

from src.application.dtos.health_dto import ApplicationInfoDTO, SystemHealthDTO
from src.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
)
from src.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["System"])

STORE_UNAVAILABLE_DETAIL = "Statistics store status unavailable"
INFO_UNAVAILABLE_DETAIL = "Statistics service info unavailable"


def _dependency_states(system_health: SystemHealthDTO) -> dict:
    return {dependency.name: dependency.status.value for dependency in system_health.dependencies}


@router.get("/health", response_model=SystemHealthDTO)
@inject
async def health(
    get_health_status_use_case: GetHealthStatusUseCase = Depends(
        Provide["get_health_status_use_case"]
    ),
) -> SystemHealthDTO:
    """Overall status plus one entry per series collection dependency."""
    try:
        health_status = await get_health_status_use_case.execute()
    except Exception as e:
        logger.error("system.health_failed", error=str(e), exc_info=e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=STORE_UNAVAILABLE_DETAIL,
        ) from e

    logger.debug(
        "system.health_checked",
        status=health_status.status.value,
        dependencies=_dependency_states(health_status),
    )
    return health_status


@router.get("/info", response_model=ApplicationInfoDTO)
@inject
async def info(
    request: Request,
    get_application_info_use_case: GetApplicationInfoUseCase = Depends(
        Provide["get_application_info_use_case"]
    ),
) -> ApplicationInfoDTO:
    """Version, uptime and series database of the running service."""
    started_at = getattr(request.app.state, "started_at", None)
    try:
        info_response = await get_application_info_use_case.execute(started_at)
    except Exception as e:
        logger.error("system.info_failed", error=str(e), exc_info=e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INFO_UNAVAILABLE_DETAIL,
        ) from e

    logger.debug(
        "system.info_served",
        version=info_response.version,
        database=info_response.database.get("name"),
    )
    return info_response
