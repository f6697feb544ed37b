"""
Use Cases Package - Application Layer

This package contains the use cases behind every endpoint. They fetch from
the series stores, run the domain statistics and return DTOs.
"""

from .counter_stats_use_cases import (
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
from .global_stats_use_cases import (
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
from .health_use_cases import GetApplicationInfoUseCase, GetHealthStatusUseCase

__all__ = [
    "GetCounterActivityUseCase",
    "GetCounterAvailableWeeksUseCase",
    "GetCounterCurrentWeekHourlyUseCase",
    "GetCounterDailyStatsUseCase",
    "GetCounterDayProfileUseCase",
    "GetCounterSummaryUseCase",
    "GetCounterWeekHourlyUseCase",
    "GetCounterWeeklyComparisonUseCase",
    "GetCounterYearlyProgressUseCase",
    "GetCounterYearlyTotalsUseCase",
    "GetAvailableYearsUseCase",
    "GetDailyDistributionUseCase",
    "GetDailyHighlightsUseCase",
    "GetDailyTotalsByWeekdayUseCase",
    "GetEvolutionUseCase",
    "GetGlobalSummaryUseCase",
    "GetGlobalWeeklyComparisonUseCase",
    "GetHourlyDistributionUseCase",
    "GetWeekdayWeekendSplitUseCase",
    "GetApplicationInfoUseCase",
    "GetHealthStatusUseCase",
]
