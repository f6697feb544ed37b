"""
Counter statistics use cases.

Each use case fetches what one per-counter view needs (concurrently when the
fetches are independent), runs the pure statistics functions and maps the
result to DTOs. ``now`` is always supplied by the caller.
"""

import asyncio
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

import structlog

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
from src.application.use_cases.stats_fetching import StatsUseCase
from src.domain.entities.time_series import Granularity
from src.domain.services import comparative_stats
from src.domain.services.paris_calendar import (
    before_yesterday_bounds_paris,
    iso_week_bounds_paris,
    iso_weeks_in_year,
    paris_date,
    week_bounds_paris,
    yesterday_bounds_paris,
)

logger = structlog.get_logger(__name__)

ONE_WEEK_SPAN = timedelta(days=6)


class GetCounterSummaryUseCase(StatsUseCase):
    """Headline figures of a counter (yesterday, totals, record day)."""

    async def execute(self, counter_id: str, now: datetime) -> CounterSummaryDTO:
        before_yesterday = before_yesterday_bounds_paris(now)
        yesterday = yesterday_bounds_paris(now)

        (first, last), total, before_points, yesterday_points = await asyncio.gather(
            self._first_and_last(counter_id),
            self._total(counter_id),
            self._points(counter_id, before_yesterday.start_utc, before_yesterday.end_utc),
            self._points(counter_id, yesterday.start_utc, yesterday.end_utc),
        )

        day_buckets = []
        if first is not None and last is not None:
            day_buckets = await self._buckets(counter_id, paris_date(first), paris_date(last))

        summary = comparative_stats.counter_summary(
            before_yesterday_points=before_points,
            yesterday_points=yesterday_points,
            first_timestamp=first,
            last_timestamp=last,
            total_passages=total,
            day_buckets=day_buckets,
            now=now,
        )
        return CounterSummaryDTO.from_domain(summary)


class GetCounterDailyStatsUseCase(StatsUseCase):
    """Elapsed days of a year for one counter."""

    async def execute(
        self, counter_id: Optional[str], year: Optional[int], now: datetime
    ) -> DailyYearStatsDTO:
        selected_year = year or paris_date(now).year
        day_buckets = await self._buckets(
            counter_id, date(selected_year, 1, 1), date(selected_year, 12, 31)
        )
        stats = comparative_stats.daily_stats_for_year(day_buckets, selected_year, now)
        return DailyYearStatsDTO.from_domain(stats)


class GetCounterWeeklyComparisonUseCase(StatsUseCase):
    async def execute(self, counter_id: str, now: datetime) -> WeeklyComparisonDTO:
        monday, previous_monday = comparative_stats.current_and_previous_week(now)
        current, previous = await asyncio.gather(
            self._buckets(counter_id, monday, monday + ONE_WEEK_SPAN),
            self._buckets(counter_id, previous_monday, previous_monday + ONE_WEEK_SPAN),
        )
        comparison = comparative_stats.weekly_comparison(
            current, previous, now, zero_is_missing=True
        )
        return WeeklyComparisonDTO.from_domain(comparison)


class GetCounterYearlyTotalsUseCase(StatsUseCase):
    async def execute(self, counter_id: str) -> List[YearlyTotalDTO]:
        first, last = await self._first_and_last(counter_id)
        if first is None or last is None:
            return []
        month_buckets = await self._buckets(
            counter_id, paris_date(first), paris_date(last), Granularity.MONTH
        )
        return [
            YearlyTotalDTO.from_domain(row)
            for row in comparative_stats.yearly_totals(month_buckets)
        ]


class GetCounterYearlyProgressUseCase(StatsUseCase):
    """Year-to-date against full-year totals for every year with data."""

    async def execute(self, counter_id: str, now: datetime) -> List[YearlyProgressDTO]:
        first, last = await self._first_and_last(counter_id)
        if first is None or last is None:
            return []
        first_year, last_year = paris_date(first).year, paris_date(last).year
        day_buckets = await self._buckets(
            counter_id, date(first_year, 1, 1), date(last_year, 12, 31)
        )
        rows = comparative_stats.yearly_progress(
            day_buckets, range(first_year, last_year + 1), now
        )
        return [YearlyProgressDTO.from_domain(row) for row in rows]


class GetCounterCurrentWeekHourlyUseCase(StatsUseCase):
    async def execute(self, counter_id: str, now: datetime) -> Dict[str, List[HourValueDTO]]:
        bounds = week_bounds_paris(now)
        points = await self._points(counter_id, bounds.start_utc, bounds.end_utc)
        table = comparative_stats.current_week_hourly(points, now)
        return {
            name: [HourValueDTO.from_domain(value) for value in values]
            for name, values in table.items()
        }


class GetCounterWeekHourlyUseCase(StatsUseCase):
    """
    Weekday x hour detail of an ISO week.

    Raises:
        InvalidPeriodError: the week does not exist in the year.
    """

    async def execute(
        self, counter_id: str, year: int, week: int, now: datetime
    ) -> WeekHourlyDetailDTO:
        bounds = iso_week_bounds_paris(year, week)
        points, (first, last) = await asyncio.gather(
            self._points(counter_id, bounds.start_utc, bounds.end_utc),
            self._first_and_last(counter_id),
        )
        detail = comparative_stats.week_hourly_detail(
            points,
            year,
            week,
            comparative_stats.available_years(first, last, now),
        )
        return WeekHourlyDetailDTO.from_domain(detail)


class GetCounterAvailableWeeksUseCase(StatsUseCase):
    async def execute(self, counter_id: str, year: int) -> AvailableWeeksDTO:
        first_week = iso_week_bounds_paris(year, 1)
        last_week = iso_week_bounds_paris(year, iso_weeks_in_year(year))
        day_buckets = await self._buckets(
            counter_id, paris_date(first_week.start_utc), paris_date(last_week.end_utc)
        )
        return AvailableWeeksDTO(
            year=year, weeks=comparative_stats.available_weeks(day_buckets, year)
        )


class GetCounterDayProfileUseCase(StatsUseCase):
    async def execute(self, counter_id: str, day: date) -> DayHourlyProfileDTO:
        points = await self._points_between(counter_id, day, day)
        profile = comparative_stats.day_hourly_profile(points, day)
        return DayHourlyProfileDTO.from_domain(profile)


class GetCounterActivityUseCase(StatsUseCase):
    async def execute(self, counter_id: str, now: datetime) -> CounterActivityDTO:
        _, last = await self._first_and_last(counter_id)
        active = comparative_stats.is_counter_active(
            last, now, self._options.active_window_days
        )
        logger.debug("stats.counter_activity", counter_id=counter_id, active=active)
        return CounterActivityDTO(counter_id=counter_id, active=active, last_passage_date=last)
