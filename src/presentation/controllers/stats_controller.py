"""
Statistics Router - Presentation Layer

This module defines the FastAPI router for statistics across every counter.
Date query parameters are Europe/Paris calendar dates (``YYYY-MM-DD``).
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.application.dtos.stats_dto import (
    DailyDistributionDTO,
    DailyHighlightsDTO,
    DailyYearStatsDTO,
    EvolutionDTO,
    GlobalDailyTotalsDTO,
    GlobalSummaryDTO,
    GlobalWeeklyComparisonDTO,
    HourlyDistributionDTO,
    WeekdayWeekendSplitDTO,
    YearRangeDTO,
)
from src.application.use_cases.counter_stats_use_cases import GetCounterDailyStatsUseCase
from src.application.use_cases.global_stats_use_cases import (
    GetAvailableYearsUseCase,
    GetDailyDistributionUseCase,
    GetDailyHighlightsUseCase,
    GetDailyTotalsByWeekdayUseCase,
    GetEvolutionUseCase,
    GetGlobalSummaryUseCase,
    GetGlobalWeeklyComparisonUseCase,
    GetHourlyDistributionUseCase,
    GetWeekdayWeekendSplitUseCase,
)
from src.domain.entities.errors import InvalidPeriodError
from src.domain.services.paris_calendar import parse_local_date

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/stats", tags=["Statistics"])

START_DATE_QUERY = Query(..., description="First Paris date of the range, YYYY-MM-DD")
END_DATE_QUERY = Query(..., description="Last Paris date of the range, YYYY-MM-DD")
YEAR_QUERY = Query(None, ge=1970, le=2100, description="Calendar year, current year by default")


def _bad_request(event: str, error: InvalidPeriodError) -> HTTPException:
    logger.info(event, error=error.message, details=error.details)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)


def _internal_error(event: str, error: Exception) -> HTTPException:
    logger.error(event, error=str(error), exc_info=error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


@router.get("/summary", response_model=GlobalSummaryDTO)
@inject
async def get_global_summary(
    use_case: GetGlobalSummaryUseCase = Depends(Provide["get_global_summary_use_case"]),
) -> GlobalSummaryDTO:
    """Get total passages, first passage and active counter count."""
    try:
        return await use_case.execute(datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("stats.summary_failed", e) from e


@router.get("/daily-highlights", response_model=DailyHighlightsDTO)
@inject
async def get_daily_highlights(
    use_case: GetDailyHighlightsUseCase = Depends(Provide["get_daily_highlights_use_case"]),
) -> DailyHighlightsDTO:
    try:
        return await use_case.execute(datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("stats.daily_highlights_failed", e) from e


@router.get("/daily", response_model=DailyYearStatsDTO)
@inject
async def get_global_daily(
    year: Optional[int] = YEAR_QUERY,
    use_case: GetCounterDailyStatsUseCase = Depends(Provide["get_global_daily_stats_use_case"]),
) -> DailyYearStatsDTO:
    try:
        return await use_case.execute(None, year, datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("stats.daily_failed", e) from e


@router.get("/daily-by-weekday", response_model=GlobalDailyTotalsDTO)
@inject
async def get_daily_by_weekday(
    year: Optional[int] = YEAR_QUERY,
    use_case: GetDailyTotalsByWeekdayUseCase = Depends(
        Provide["get_daily_totals_by_weekday_use_case"]
    ),
) -> GlobalDailyTotalsDTO:
    """
    Get totals per weekday for a year.

    Long runs of zero days (sensor downtime) are removed before averaging.
    """
    try:
        return await use_case.execute(year, datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("stats.daily_by_weekday_failed", e) from e


@router.get("/evolution", response_model=EvolutionDTO)
@inject
async def get_evolution(
    start_date: str = START_DATE_QUERY,
    end_date: str = END_DATE_QUERY,
    reference_start_date: Optional[str] = Query(None, description="Defaults to start_date minus one year"),
    reference_end_date: Optional[str] = Query(None, description="Defaults to the same day count"),
    use_case: GetEvolutionUseCase = Depends(Provide["get_evolution_use_case"]),
) -> EvolutionDTO:
    """
    Compare a period with a reference period, day by day.

    Both series are gap-free and aligned by index, not by calendar date.
    """
    try:
        return await use_case.execute(
            parse_local_date(start_date, "start_date"),
            parse_local_date(end_date, "end_date"),
            parse_local_date(reference_start_date, "reference_start_date")
            if reference_start_date
            else None,
            parse_local_date(reference_end_date, "reference_end_date")
            if reference_end_date
            else None,
        )
    except InvalidPeriodError as e:
        raise _bad_request("stats.evolution_invalid_period", e) from e
    except Exception as e:
        raise _internal_error("stats.evolution_failed", e) from e


@router.get("/weekday-weekend", response_model=WeekdayWeekendSplitDTO)
@inject
async def get_weekday_weekend(
    start_date: str = START_DATE_QUERY,
    end_date: str = END_DATE_QUERY,
    use_case: GetWeekdayWeekendSplitUseCase = Depends(
        Provide["get_weekday_weekend_split_use_case"]
    ),
) -> WeekdayWeekendSplitDTO:
    try:
        return await use_case.execute(
            parse_local_date(start_date, "start_date"), parse_local_date(end_date, "end_date")
        )
    except InvalidPeriodError as e:
        raise _bad_request("stats.weekday_weekend_invalid_period", e) from e
    except Exception as e:
        raise _internal_error("stats.weekday_weekend_failed", e) from e


@router.get("/daily-distribution", response_model=DailyDistributionDTO)
@inject
async def get_daily_distribution(
    start_date: str = START_DATE_QUERY,
    end_date: str = END_DATE_QUERY,
    use_case: GetDailyDistributionUseCase = Depends(Provide["get_daily_distribution_use_case"]),
) -> DailyDistributionDTO:
    try:
        return await use_case.execute(
            parse_local_date(start_date, "start_date"), parse_local_date(end_date, "end_date")
        )
    except InvalidPeriodError as e:
        raise _bad_request("stats.daily_distribution_invalid_period", e) from e
    except Exception as e:
        raise _internal_error("stats.daily_distribution_failed", e) from e


@router.get("/hourly-distribution", response_model=HourlyDistributionDTO)
@inject
async def get_hourly_distribution(
    start_date: str = START_DATE_QUERY,
    end_date: str = END_DATE_QUERY,
    day_class: Optional[str] = Query(
        "global", description="global, week (Monday-Friday) or weekend"
    ),
    use_case: GetHourlyDistributionUseCase = Depends(
        Provide["get_hourly_distribution_use_case"]
    ),
) -> HourlyDistributionDTO:
    """Get the hour-of-day profile of a range; hours without passages are omitted."""
    try:
        return await use_case.execute(
            parse_local_date(start_date, "start_date"),
            parse_local_date(end_date, "end_date"),
            day_class,
        )
    except InvalidPeriodError as e:
        raise _bad_request("stats.hourly_distribution_invalid_period", e) from e
    except Exception as e:
        raise _internal_error("stats.hourly_distribution_failed", e) from e


@router.get("/weekly-comparison", response_model=GlobalWeeklyComparisonDTO)
@inject
async def get_global_weekly_comparison(
    use_case: GetGlobalWeeklyComparisonUseCase = Depends(
        Provide["get_global_weekly_comparison_use_case"]
    ),
) -> GlobalWeeklyComparisonDTO:
    try:
        return await use_case.execute(datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("stats.weekly_comparison_failed", e) from e


@router.get("/available-years", response_model=YearRangeDTO)
@inject
async def get_available_years(
    use_case: GetAvailableYearsUseCase = Depends(Provide["get_available_years_use_case"]),
) -> YearRangeDTO:
    try:
        return await use_case.execute(datetime.now(timezone.utc))
    except Exception as e:
        raise _internal_error("stats.available_years_failed", e) from e
