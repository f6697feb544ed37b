"""
DTOs for the counter and global statistics endpoints.

Field names are snake_case in Python and camelCase on the wire. Instants
serialize as ISO-8601 UTC strings. Most DTOs validate straight from the
domain dataclasses (``from_attributes``).
"""

import datetime as dt
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.entities.time_series import Bucket, ComparisonResult

Number = Union[int, float]


class CamelModel(BaseModel):
    """Base DTO: camelCase aliases, built from domain objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @classmethod
    def from_domain(cls, entity: Any):
        return cls.model_validate(entity)


class DayValueDTO(CamelModel):
    day: str = Field(description="ISO date or lowercase weekday name")
    value: Optional[Number] = Field(default=None, description="Total, null when no data")


class HourValueDTO(CamelModel):
    hour: int = Field(ge=0, le=23)
    value: Number = 0


class PeriodDTO(CamelModel):
    start: str
    end: str


class YearRangeDTO(CamelModel):
    start: int
    end: int


class DailyYearStatsDTO(CamelModel):
    year: List[DayValueDTO] = Field(default_factory=list)
    global_average: float = 0.0
    active_days_average: float = 0.0

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "year": [{"day": "2025-01-01", "value": 812}, {"day": "2025-01-02", "value": 0}],
                "globalAverage": 406.0,
                "activeDaysAverage": 812.0,
            }
        }
    )


class WeekdayTotalDTO(CamelModel):
    day: str
    value: Number = 0
    count: int = 0
    average: int = 0


class GlobalDailyTotalsDTO(CamelModel):
    daily_totals: List[WeekdayTotalDTO] = Field(default_factory=list)
    global_average: int = 0
    total_days: int = 0
    original_days: int = 0
    filtered_days: int = 0


class WeeklyComparisonDTO(CamelModel):
    current_week: List[DayValueDTO] = Field(default_factory=list)
    last_week: List[DayValueDTO] = Field(default_factory=list)
    current_week_average: int = 0
    last_week_average: int = 0
    global_average: int = 0

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "currentWeek": [
                    {"day": "monday", "value": 1520},
                    {"day": "tuesday", "value": None},
                ],
                "lastWeek": [{"day": "monday", "value": 1480}],
                "currentWeekAverage": 1520,
                "lastWeekAverage": 1480,
                "globalAverage": 1500,
            }
        }
    )


class YearlyTotalDTO(CamelModel):
    year: int
    total: Number = 0


class YearlyProgressDTO(CamelModel):
    year: int
    total: Number = 0
    year_to_date: Number = 0
    calendar_progress: float = 0.0
    progress: float = 0.0


class GroupStatsDTO(CamelModel):
    total: Number = 0
    count: int = 0
    average: int = 0


class WeekdayWeekendSplitDTO(CamelModel):
    weekdays: GroupStatsDTO
    weekends: GroupStatsDTO
    period: PeriodDTO


class HourlyDistributionEntryDTO(CamelModel):
    name: str
    hour: int
    total: Number = 0
    average: int = 0
    count: int = 0


class HourlyDistributionDTO(CamelModel):
    distribution: List[HourlyDistributionEntryDTO] = Field(default_factory=list)
    period: PeriodDTO


class DailyDistributionEntryDTO(CamelModel):
    name: str
    day_of_week: int = Field(ge=1, le=7, description="ISO weekday, 1 is Monday")
    total: Number = 0
    average: int = 0
    count: int = 0


class DailyDistributionDTO(CamelModel):
    distribution: List[DailyDistributionEntryDTO] = Field(default_factory=list)
    period: PeriodDTO


class WeekHourlyDTO(CamelModel):
    number: int
    start_date: dt.datetime
    end_date: dt.datetime
    stats: Dict[str, List[HourValueDTO]] = Field(default_factory=dict)


class WeekHourlyDetailDTO(CamelModel):
    year: int
    week: WeekHourlyDTO
    available_years: YearRangeDTO


class AvailableWeeksDTO(CamelModel):
    year: int
    weeks: List[int] = Field(default_factory=list)


class MaxDayDTO(CamelModel):
    date: dt.date
    value: Number


class CounterSummaryDTO(CamelModel):
    before_yesterday: Number = 0
    yesterday: Number = 0
    first_passage_date: Optional[dt.datetime] = None
    last_passage_date: Optional[dt.datetime] = None
    last_passage_before_yesterday: Optional[dt.datetime] = None
    last_passage_yesterday: Optional[dt.datetime] = None
    total_passages: Number = 0
    max_day: Optional[MaxDayDTO] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "beforeYesterday": 1432,
                "yesterday": 1610,
                "firstPassageDate": "2020-03-01T23:00:00Z",
                "lastPassageDate": "2025-03-10T06:00:00Z",
                "lastPassageBeforeYesterday": "2025-03-08T22:00:00Z",
                "lastPassageYesterday": "2025-03-09T22:00:00Z",
                "totalPassages": 2489312,
                "maxDay": {"date": "2023-06-15", "value": 3120},
            }
        }
    )


class CounterActivityDTO(CamelModel):
    counter_id: str
    active: bool
    last_passage_date: Optional[dt.datetime] = None


class GlobalSummaryDTO(CamelModel):
    total_passages: Number = 0
    first_passage_date: Optional[dt.datetime] = None
    total_counters: int = 0
    active_counters: int = 0


class DayHourlyProfileDTO(CamelModel):
    index: List[dt.datetime] = Field(default_factory=list, description="UTC start of each local hour")
    values: List[Number] = Field(default_factory=list)
    labels: List[str] = Field(default_factory=list)


class WeeklyValueDTO(CamelModel):
    week: str
    value: int = 0
    year: Optional[int] = None


class GlobalWeeklyComparisonDTO(CamelModel):
    current_year: List[WeeklyValueDTO] = Field(default_factory=list)
    previous_year: List[WeeklyValueDTO] = Field(default_factory=list)
    current_year_total: Number = 0
    previous_year_total: Number = 0


class WeatherSnapshotDTO(CamelModel):
    temperature: Optional[float] = None
    is_raining: bool = False
    is_cloudy: bool = False
    description: Optional[str] = None


class PassagesHighlightsDTO(CamelModel):
    day_before_yesterday: Number = 0
    yesterday: Number = 0


class WeatherHighlightsDTO(CamelModel):
    day_before_yesterday: WeatherSnapshotDTO = Field(default_factory=WeatherSnapshotDTO)
    yesterday: WeatherSnapshotDTO = Field(default_factory=WeatherSnapshotDTO)
    today: WeatherSnapshotDTO = Field(default_factory=WeatherSnapshotDTO)


class DailyHighlightsDTO(CamelModel):
    passages: PassagesHighlightsDTO = Field(default_factory=PassagesHighlightsDTO)
    weather: WeatherHighlightsDTO = Field(default_factory=WeatherHighlightsDTO)


class EvolutionPointDTO(CamelModel):
    day: str
    total: Number = 0
    count: int = 0

    @classmethod
    def from_bucket(cls, bucket: Bucket) -> "EvolutionPointDTO":
        return cls(day=bucket.key, total=bucket.sum, count=bucket.count)


class EvolutionDTO(CamelModel):
    current_period: List[EvolutionPointDTO] = Field(default_factory=list)
    reference_period: List[EvolutionPointDTO] = Field(default_factory=list)
    current_label: str = ""
    reference_label: str = ""

    @classmethod
    def from_domain(cls, entity: ComparisonResult) -> "EvolutionDTO":
        return cls(
            current_period=[EvolutionPointDTO.from_bucket(b) for b in entity.current_period],
            reference_period=[EvolutionPointDTO.from_bucket(b) for b in entity.reference_period],
            current_label=entity.current_label,
            reference_label=entity.reference_label,
        )
