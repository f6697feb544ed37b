"""
Domain Entities Package

This package contains the time-series value objects, the statistics records
and the domain errors.
"""

from .errors import (
    DomainError,
    InvalidPeriodError,
    SeriesStoreError,
    TimeZoneResolutionError,
)
from .health import ApplicationInfo, DependencyStatus, ServiceStatus, SystemHealth
from .time_series import (
    Bucket,
    ComparisonResult,
    DayClass,
    Granularity,
    GroupedSum,
    PeriodBoundary,
    TimePoint,
    WeatherObservation,
)

__all__ = [
    "Bucket",
    "ComparisonResult",
    "DayClass",
    "Granularity",
    "GroupedSum",
    "PeriodBoundary",
    "TimePoint",
    "WeatherObservation",
    "SystemHealth",
    "DependencyStatus",
    "ServiceStatus",
    "ApplicationInfo",
    "DomainError",
    "SeriesStoreError",
    "TimeZoneResolutionError",
    "InvalidPeriodError",
]
