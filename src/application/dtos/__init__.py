"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used for data exchange
between the application layer and the presentation layer.
"""

from .health_dto import ApplicationInfoDTO, DependencyStatusDTO, SystemHealthDTO
from .stats_dto import (
    AvailableWeeksDTO,
    CounterActivityDTO,
    CounterSummaryDTO,
    DailyDistributionDTO,
    DailyHighlightsDTO,
    DailyYearStatsDTO,
    DayHourlyProfileDTO,
    EvolutionDTO,
    GlobalDailyTotalsDTO,
    GlobalSummaryDTO,
    GlobalWeeklyComparisonDTO,
    HourlyDistributionDTO,
    HourValueDTO,
    WeekdayWeekendSplitDTO,
    WeekHourlyDetailDTO,
    WeeklyComparisonDTO,
    YearlyProgressDTO,
    YearlyTotalDTO,
    YearRangeDTO,
)

__all__ = [
    "SystemHealthDTO",
    "DependencyStatusDTO",
    "ApplicationInfoDTO",
    "AvailableWeeksDTO",
    "CounterActivityDTO",
    "CounterSummaryDTO",
    "DailyDistributionDTO",
    "DailyHighlightsDTO",
    "DailyYearStatsDTO",
    "DayHourlyProfileDTO",
    "EvolutionDTO",
    "GlobalDailyTotalsDTO",
    "GlobalSummaryDTO",
    "GlobalWeeklyComparisonDTO",
    "HourlyDistributionDTO",
    "HourValueDTO",
    "WeekdayWeekendSplitDTO",
    "WeekHourlyDetailDTO",
    "WeeklyComparisonDTO",
    "YearlyProgressDTO",
    "YearlyTotalDTO",
    "YearRangeDTO",
]
