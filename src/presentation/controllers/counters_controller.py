"""
Counters Router - Presentation Layer

This module defines the FastAPI router for per-counter statistics. The
current instant is read here, once per request, and handed to the use cases.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from src.application.dtos.stats_dto import (
    AvailableWeeksDTO,
    CounterActivityDTO,
    CounterSummaryDTO,
    DailyYearStatsDTO,
    DayHourlyProfileDTO,
    HourValueDTO,
    WeekHourlyDetailDTO,
    WeeklyComparisonDTO,
    YearlyProgressDTO,
    YearlyTotalDTO,
)
from src.application.use_cases.counter_stats_use_cases import (
    GetCounterActivityUseCase,
    GetCounterAvailableWeeksUseCase,
    GetCounterCurrentWeekHourlyUseCase,
    GetCounterDailyStatsUseCase,
    GetCounterDayProfileUseCase,
    GetCounterSummaryUseCase,
    GetCounterWeekHourlyUseCase,
    GetCounterWeeklyComparisonUseCase,
    GetCounterYearlyProgressUseCase,
    GetCounterYearlyTotalsUseCase,
)
from src.domain.entities.errors import InvalidPeriodError
from src.domain.services.paris_calendar import parse_local_date
from src.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/counters", tags=["Counters"])


def _internal_error(event: str, counter_id: str, error: Exception) -> HTTPException:
    logger.error(event, counter_id=counter_id, error=str(error), exc_info=error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


@router.get("/{counter_id}/summary", response_model=CounterSummaryDTO)
@inject
async def get_counter_summary(
    counter_id: str,
    use_case: GetCounterSummaryUseCase = Depends(Provide["get_counter_summary_use_case"]),
) -> CounterSummaryDTO:
    """
    Get the headline figures of a counter.

    Yesterday and the day before are whole Europe/Paris days, so they last
    23 or 25 hours around DST changes.
    """
    try:
        return await use_case.execute(counter_id, datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("counters.summary_failed", counter_id, e) from e


@router.get("/{counter_id}/daily", response_model=DailyYearStatsDTO)
@inject
async def get_counter_daily(
    counter_id: str,
    year: Optional[int] = Query(None, ge=1970, le=2100, description="Calendar year, current year by default"),
    use_case: GetCounterDailyStatsUseCase = Depends(Provide["get_counter_daily_stats_use_case"]),
) -> DailyYearStatsDTO:
    """Get the fully elapsed days of a year with global and active-day averages."""
    try:
        return await use_case.execute(counter_id, year, datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("counters.daily_failed", counter_id, e) from e


@router.get("/{counter_id}/weekly", response_model=WeeklyComparisonDTO)
@inject
async def get_counter_weekly(
    counter_id: str,
    use_case: GetCounterWeeklyComparisonUseCase = Depends(
        Provide["get_counter_weekly_comparison_use_case"]
    ),
) -> WeeklyComparisonDTO:
    """Compare the current week with the previous one, Monday to Sunday."""
    try:
        return await use_case.execute(counter_id, datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("counters.weekly_failed", counter_id, e) from e


@router.get("/{counter_id}/yearly", response_model=List[YearlyTotalDTO])
@inject
async def get_counter_yearly(
    counter_id: str,
    use_case: GetCounterYearlyTotalsUseCase = Depends(Provide["get_counter_yearly_totals_use_case"]),
) -> List[YearlyTotalDTO]:
    try:
        return await use_case.execute(counter_id)
    except Exception as e:
        raise _internal_error("counters.yearly_failed", counter_id, e) from e


@router.get("/{counter_id}/yearly-progress", response_model=List[YearlyProgressDTO])
@inject
async def get_counter_yearly_progress(
    counter_id: str,
    use_case: GetCounterYearlyProgressUseCase = Depends(
        Provide["get_counter_yearly_progress_use_case"]
    ),
) -> List[YearlyProgressDTO]:
    try:
        return await use_case.execute(counter_id, datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("counters.yearly_progress_failed", counter_id, e) from e


@router.get("/{counter_id}/hourly", response_model=Dict[str, List[HourValueDTO]])
@inject
async def get_counter_current_week_hourly(
    counter_id: str,
    use_case: GetCounterCurrentWeekHourlyUseCase = Depends(
        Provide["get_counter_current_week_hourly_use_case"]
    ),
) -> Dict[str, List[HourValueDTO]]:
    """Get the weekday x hour table of the current Paris week."""
    try:
        return await use_case.execute(counter_id, datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("counters.hourly_failed", counter_id, e) from e


@router.get("/{counter_id}/hourly/{year}/weeks", response_model=AvailableWeeksDTO)
@inject
async def get_counter_available_weeks(
    counter_id: str,
    year: int = Path(..., ge=1970, le=2100),
    use_case: GetCounterAvailableWeeksUseCase = Depends(
        Provide["get_counter_available_weeks_use_case"]
    ),
) -> AvailableWeeksDTO:
    try:
        return await use_case.execute(counter_id, year)
    except Exception as e:
        raise _internal_error("counters.available_weeks_failed", counter_id, e) from e


@router.get("/{counter_id}/hourly/{year}/{week}", response_model=WeekHourlyDetailDTO)
@inject
async def get_counter_week_hourly(
    counter_id: str,
    year: int = Path(..., ge=1970, le=2100),
    week: int = Path(..., description="ISO-8601 week number"),
    use_case: GetCounterWeekHourlyUseCase = Depends(Provide["get_counter_week_hourly_use_case"]),
) -> WeekHourlyDetailDTO:
    """
    Get the weekday x hour table of an ISO week.

    Raises:
        HTTPException: 400 when the week does not exist in the year
    """
    try:
        return await use_case.execute(counter_id, year, week, datetime.now(timezone.utc))
    except InvalidPeriodError as e:
        logger.info("counters.invalid_week", counter_id=counter_id, year=year, week=week)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except Exception as e:
        raise _internal_error("counters.week_hourly_failed", counter_id, e) from e


@router.get("/{counter_id}/day/{day}", response_model=DayHourlyProfileDTO)
@inject
async def get_counter_day_profile(
    counter_id: str,
    day: str = Path(..., description="Paris date, YYYY-MM-DD"),
    use_case: GetCounterDayProfileUseCase = Depends(Provide["get_counter_day_profile_use_case"]),
) -> DayHourlyProfileDTO:
    """Get the hourly totals of one Paris day (23, 24 or 25 hours)."""
    try:
        return await use_case.execute(counter_id, parse_local_date(day, "day"))
    except InvalidPeriodError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except Exception as e:
        raise _internal_error("counters.day_profile_failed", counter_id, e) from e


@router.get("/{counter_id}/active", response_model=CounterActivityDTO)
@inject
async def get_counter_activity(
    counter_id: str,
    use_case: GetCounterActivityUseCase = Depends(Provide["get_counter_activity_use_case"]),
) -> CounterActivityDTO:
    try:
        return await use_case.execute(counter_id, datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("counters.activity_failed", counter_id, e) from e
