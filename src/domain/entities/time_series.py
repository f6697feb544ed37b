"""Domain entities for counter and weather time series."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

Number = Union[int, float]


class Granularity(str, Enum):
    """Calendar unit used to group points into buckets."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    HOUR = "hour"


class DayClass(str, Enum):
    """Restriction applied to instants before hourly bucketing."""

    GLOBAL = "global"
    WEEK = "week"
    WEEKEND = "weekend"


@dataclass(frozen=True, slots=True)
class TimePoint:
    """A single raw counter observation, timestamp stored in UTC."""

    series_key: str
    timestamp_utc: datetime
    value: Number


@dataclass(frozen=True, slots=True)
class WeatherObservation:
    """An hourly weather observation for a zone."""

    zone: str
    timestamp_utc: datetime
    temperature: Optional[float] = None
    rain: Optional[float] = None
    cloud_cover: Optional[float] = None
    weather_code: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Bucket:
    """
    Aggregate of the points sharing a Paris-local calendar key.

    ``count`` is the number of raw points unless the producing function
    documents otherwise (distinct days, spine days).
    """

    key: str
    sum: Number = 0
    count: int = 0


@dataclass(frozen=True, slots=True)
class GroupedSum:
    """Row returned by server-side grouping in the series store."""

    bucket_key: str
    sum: Number
    count: int = 0

    def to_bucket(self) -> Bucket:
        return Bucket(key=self.bucket_key, sum=self.sum, count=self.count)


@dataclass(frozen=True, slots=True)
class PeriodBoundary:
    """UTC range equivalent of a Paris-local calendar unit (inclusive)."""

    start_utc: datetime
    end_utc: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start_utc <= instant <= self.end_utc


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    """Current period series against a reference period, aligned by index."""

    current_period: List[Bucket]
    reference_period: List[Bucket]
    current_label: str
    reference_label: str
