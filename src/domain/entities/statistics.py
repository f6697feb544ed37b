"""
Statistics domain entities.

Value objects returned by the comparative statistics engine. They carry no
behaviour; the application layer maps them to DTOs for the HTTP surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from src.domain.entities.time_series import Number


@dataclass(slots=True)
class DayValue:
    day: str
    value: Optional[Number]


@dataclass(slots=True)
class HourValue:
    hour: int
    value: Number


@dataclass(slots=True)
class Period:
    start: str
    end: str


@dataclass(slots=True)
class YearRange:
    start: int
    end: int


@dataclass(slots=True)
class DailyYearStats:
    """Fully elapsed days of a calendar year with their averages."""

    year: List[DayValue] = field(default_factory=list)
    global_average: float = 0.0
    active_days_average: float = 0.0


@dataclass(slots=True)
class WeekdayTotal:
    day: str
    value: Number = 0
    count: int = 0
    average: int = 0


@dataclass(slots=True)
class GlobalDailyTotals:
    """Weekday totals after zero-run filtering, with filtering bookkeeping."""

    daily_totals: List[WeekdayTotal] = field(default_factory=list)
    global_average: int = 0
    total_days: int = 0
    original_days: int = 0
    filtered_days: int = 0


@dataclass(slots=True)
class WeeklyComparison:
    current_week: List[DayValue] = field(default_factory=list)
    last_week: List[DayValue] = field(default_factory=list)
    current_week_average: int = 0
    last_week_average: int = 0
    global_average: int = 0


@dataclass(slots=True)
class YearlyTotal:
    year: int
    total: Number = 0


@dataclass(slots=True)
class YearlyProgress:
    year: int
    total: Number = 0
    year_to_date: Number = 0
    calendar_progress: float = 0.0
    progress: float = 0.0


@dataclass(slots=True)
class GroupStats:
    total: Number = 0
    count: int = 0
    average: int = 0


@dataclass(slots=True)
class WeekdayWeekendSplit:
    weekdays: GroupStats
    weekends: GroupStats
    period: Period


@dataclass(slots=True)
class HourlyDistributionEntry:
    name: str
    hour: int
    total: Number = 0
    average: int = 0
    count: int = 0


@dataclass(slots=True)
class HourlyDistribution:
    distribution: List[HourlyDistributionEntry]
    period: Period


@dataclass(slots=True)
class DailyDistributionEntry:
    name: str
    day_of_week: int
    total: Number = 0
    average: int = 0
    count: int = 0


@dataclass(slots=True)
class DailyDistribution:
    distribution: List[DailyDistributionEntry]
    period: Period


@dataclass(slots=True)
class WeekHourly:
    number: int
    start_date: datetime
    end_date: datetime
    stats: Dict[str, List[HourValue]]


@dataclass(slots=True)
class WeekHourlyDetail:
    year: int
    week: WeekHourly
    available_years: YearRange


@dataclass(slots=True)
class MaxDay:
    date: date
    value: Number


@dataclass(slots=True)
class CounterSummary:
    before_yesterday: Number = 0
    yesterday: Number = 0
    first_passage_date: Optional[datetime] = None
    last_passage_date: Optional[datetime] = None
    last_passage_before_yesterday: Optional[datetime] = None
    last_passage_yesterday: Optional[datetime] = None
    total_passages: Number = 0
    max_day: Optional[MaxDay] = None


@dataclass(slots=True)
class GlobalSummary:
    total_passages: Number = 0
    first_passage_date: Optional[datetime] = None
    total_counters: int = 0
    active_counters: int = 0


@dataclass(slots=True)
class DayHourlyProfile:
    """One entry per Paris-local hour of a day (23, 24 or 25 entries)."""

    index: List[datetime] = field(default_factory=list)
    values: List[Number] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)


@dataclass(slots=True)
class WeeklyValue:
    week: str
    value: int
    year: Optional[int] = None


@dataclass(slots=True)
class GlobalWeeklyComparison:
    current_year: List[WeeklyValue] = field(default_factory=list)
    previous_year: List[WeeklyValue] = field(default_factory=list)
    current_year_total: Number = 0
    previous_year_total: Number = 0


@dataclass(slots=True)
class WeatherSnapshot:
    temperature: Optional[float] = None
    is_raining: bool = False
    is_cloudy: bool = False
    description: Optional[str] = None


@dataclass(slots=True)
class PassagesHighlights:
    day_before_yesterday: Number = 0
    yesterday: Number = 0


@dataclass(slots=True)
class WeatherHighlights:
    day_before_yesterday: WeatherSnapshot = field(default_factory=WeatherSnapshot)
    yesterday: WeatherSnapshot = field(default_factory=WeatherSnapshot)
    today: WeatherSnapshot = field(default_factory=WeatherSnapshot)


@dataclass(slots=True)
class DailyHighlights:
    passages: PassagesHighlights = field(default_factory=PassagesHighlights)
    weather: WeatherHighlights = field(default_factory=WeatherHighlights)
