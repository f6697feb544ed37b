"""
Global statistics use cases.

Same pattern as the counter use cases, over every counter at once
(``series_key=None``). The daily highlights also read the weather store.
"""

import asyncio
from datetime import date, datetime
from typing import Optional

from src.application.dtos.stats_dto import (
    DailyDistributionDTO,
    DailyHighlightsDTO,
    EvolutionDTO,
    GlobalDailyTotalsDTO,
    GlobalSummaryDTO,
    GlobalWeeklyComparisonDTO,
    HourlyDistributionDTO,
    WeekdayWeekendSplitDTO,
    YearRangeDTO,
)
from src.application.models import StatsOptions
from src.application.use_cases.stats_fetching import StatsUseCase
from src.domain.entities.time_series import DayClass
from src.domain.repositories.series_store import ISeriesStore
from src.domain.repositories.weather_store import IWeatherStore
from src.domain.services import comparative_stats
from src.domain.services.paris_calendar import (
    before_yesterday_bounds_paris,
    end_of_day_paris,
    paris_date,
    yesterday_bounds_paris,
)


class GetGlobalSummaryUseCase(StatsUseCase):
    async def execute(self, now: datetime) -> GlobalSummaryDTO:
        since = comparative_stats.active_since(now, self._options.active_window_days)
        total, (first, _), series_keys, active_keys = await asyncio.gather(
            self._total(None),
            self._first_and_last(None),
            self._safe_fetch("series_keys", self._series_store.series_keys(), []),
            self._safe_fetch(
                "active_series_keys", self._series_store.active_series_keys(since), []
            ),
        )
        summary = comparative_stats.global_summary(total, first, series_keys, active_keys)
        return GlobalSummaryDTO.from_domain(summary)


class GetDailyHighlightsUseCase(StatsUseCase):
    """Passages of the last two full days and weather of the last three."""

    def __init__(
        self,
        series_store: ISeriesStore,
        weather_store: IWeatherStore,
        options: Optional[StatsOptions] = None,
    ):
        super().__init__(series_store, options)
        self._weather_store = weather_store

    async def execute(self, now: datetime) -> DailyHighlightsDTO:
        before_yesterday = before_yesterday_bounds_paris(now)
        yesterday = yesterday_bounds_paris(now)

        before_total, yesterday_total, observations = await asyncio.gather(
            self._total(None, before_yesterday.start_utc, before_yesterday.end_utc),
            self._total(None, yesterday.start_utc, yesterday.end_utc),
            self._safe_fetch(
                "fetch_observations",
                self._weather_store.fetch_observations(
                    self._options.weather_zone,
                    before_yesterday.start_utc,
                    end_of_day_paris(now),
                ),
                [],
            ),
        )
        highlights = comparative_stats.daily_highlights(
            before_total, yesterday_total, observations, now
        )
        return DailyHighlightsDTO.from_domain(highlights)


class GetDailyTotalsByWeekdayUseCase(StatsUseCase):
    async def execute(self, year: Optional[int], now: datetime) -> GlobalDailyTotalsDTO:
        selected_year = year or paris_date(now).year
        day_buckets = await self._buckets(
            None, date(selected_year, 1, 1), date(selected_year, 12, 31)
        )
        totals = comparative_stats.global_daily_totals_by_weekday(
            day_buckets, selected_year, self._options.max_zero_run
        )
        return GlobalDailyTotalsDTO.from_domain(totals)


class GetEvolutionUseCase(StatsUseCase):
    """
    Day series of a period against its reference period.

    The reference defaults to the same number of days starting one calendar
    year before ``start``.

    Raises:
        InvalidPeriodError: a range ends before it starts.
    """

    async def execute(
        self,
        start: date,
        end: date,
        reference_start: Optional[date] = None,
        reference_end: Optional[date] = None,
    ) -> EvolutionDTO:
        if reference_start is None or reference_end is None:
            reference_start, reference_end = comparative_stats.reference_range(start, end)

        current, reference = await asyncio.gather(
            self._buckets(None, start, end),
            self._buckets(None, reference_start, reference_end),
        )
        result = comparative_stats.evolution(
            current, reference, start, end, reference_start, reference_end
        )
        return EvolutionDTO.from_domain(result)


class GetWeekdayWeekendSplitUseCase(StatsUseCase):
    async def execute(self, start: date, end: date) -> WeekdayWeekendSplitDTO:
        day_buckets = await self._buckets(None, start, end)
        split = comparative_stats.weekday_weekend_split(day_buckets, start, end)
        return WeekdayWeekendSplitDTO.from_domain(split)


class GetDailyDistributionUseCase(StatsUseCase):
    async def execute(self, start: date, end: date) -> DailyDistributionDTO:
        day_buckets = await self._buckets(None, start, end)
        distribution = comparative_stats.daily_distribution(day_buckets, start, end)
        return DailyDistributionDTO.from_domain(distribution)


class GetHourlyDistributionUseCase(StatsUseCase):
    """
    Hour-of-day profile over a range, optionally weekdays or weekends only.

    Raises:
        InvalidPeriodError: unknown day class or a range ending before it starts.
    """

    async def execute(
        self, start: date, end: date, day_class: Optional[str] = None
    ) -> HourlyDistributionDTO:
        selected: DayClass = comparative_stats.parse_day_class(day_class)
        points = await self._points_between(None, start, end)
        distribution = comparative_stats.hourly_distribution(points, start, end, selected)
        return HourlyDistributionDTO.from_domain(distribution)


class GetGlobalWeeklyComparisonUseCase(StatsUseCase):
    async def execute(self, now: datetime) -> GlobalWeeklyComparisonDTO:
        current_year = paris_date(now).year
        previous_year = current_year - 1
        current, previous = await asyncio.gather(
            self._buckets(None, date(current_year, 1, 1), date(current_year, 12, 31)),
            self._buckets(None, date(previous_year, 1, 1), date(previous_year, 12, 31)),
        )
        comparison = comparative_stats.global_weekly_comparison(
            current, previous, now, self._options.min_weekly_daily_total
        )
        return GlobalWeeklyComparisonDTO.from_domain(comparison)


class GetAvailableYearsUseCase(StatsUseCase):
    async def execute(self, now: datetime, counter_id: Optional[str] = None) -> YearRangeDTO:
        first, last = await self._first_and_last(counter_id)
        return YearRangeDTO.from_domain(comparative_stats.available_years(first, last, now))
