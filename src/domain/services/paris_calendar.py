"""
Domain Service - Paris calendar

Conversion between UTC instants and Europe/Paris calendar units. Every
statistics view buckets on Paris wall-clock dates while the store keeps UTC
timestamps, so all boundary math goes through this module.

Boundaries are returned as timezone-aware UTC datetimes. A unit's end is the
next unit's start minus one millisecond, which makes DST days span 23 or 25
hours of real time.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

from src.domain.entities.errors import InvalidPeriodError, TimeZoneResolutionError
from src.domain.entities.time_series import PeriodBoundary
from src.shared.consts import PARIS_TIMEZONE

logger = structlog.get_logger(__name__)

ONE_MILLISECOND = timedelta(milliseconds=1)
WINTER_OFFSET_HOURS = 1.0
SUMMER_OFFSET_HOURS = 2.0


@lru_cache(maxsize=1)
def _paris_zone() -> tzinfo:
    try:
        return ZoneInfo(PARIS_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise TimeZoneResolutionError(
            f"Unable to load time zone {PARIS_TIMEZONE}",
            details={"error": str(exc)},
        ) from exc


def ensure_utc(instant: datetime) -> datetime:
    """Return ``instant`` as an aware UTC datetime; naive values are UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def _last_sunday(year: int, month: int) -> date:
    last_day = date(year, month, calendar.monthrange(year, month)[1])
    return last_day - timedelta(days=(last_day.weekday() + 1) % 7)


def eu_rule_offset_hours(instant: datetime) -> float:
    """
    Paris offset from the EU summer-time rule, using UTC arithmetic only.

    Summer time runs from the last Sunday of March 01:00 UTC to the last
    Sunday of October 01:00 UTC.
    """
    utc = ensure_utc(instant)
    summer_start = datetime.combine(
        _last_sunday(utc.year, 3), time(1), tzinfo=timezone.utc
    )
    summer_end = datetime.combine(
        _last_sunday(utc.year, 10), time(1), tzinfo=timezone.utc
    )
    if summer_start <= utc < summer_end:
        return SUMMER_OFFSET_HOURS
    return WINTER_OFFSET_HOURS


def resolve_paris_offset(instant: datetime) -> float:
    """
    Return the Europe/Paris UTC offset in hours effective at ``instant``.

    Raises:
        TimeZoneResolutionError: the zone database is unavailable or returns
            no offset for the instant.
    """
    zone = _paris_zone()
    offset = ensure_utc(instant).astimezone(zone).utcoffset()
    if offset is None:
        raise TimeZoneResolutionError(
            "Time zone returned no UTC offset",
            details={"instant": ensure_utc(instant).isoformat()},
        )
    return offset.total_seconds() / 3600


def paris_offset_hours(instant: datetime) -> float:
    """
    Lenient offset lookup used by the aggregation paths.

    Falls back to ``eu_rule_offset_hours`` (and logs it) when the zone
    cannot be resolved. Callers that must know about the failure use
    ``resolve_paris_offset`` instead.
    """
    try:
        return resolve_paris_offset(instant)
    except TimeZoneResolutionError as exc:
        fallback = eu_rule_offset_hours(instant)
        logger.warning(
            "calendar.offset_fallback",
            instant=ensure_utc(instant).isoformat(),
            fallback_offset_hours=fallback,
            error=exc.message,
        )
        return fallback


def _zone_for(instant: datetime) -> tzinfo:
    try:
        return _paris_zone()
    except TimeZoneResolutionError:
        return timezone(timedelta(hours=paris_offset_hours(instant)))


def to_paris_local(instant: datetime) -> datetime:
    """
    Same instant expressed with the Paris offset.

    Only meant for reading local fields (date, hour, weekday). Convert back
    with ``ensure_utc`` before storing or comparing against store ranges.
    """
    utc = ensure_utc(instant)
    return utc.astimezone(_zone_for(utc))


def paris_date(instant: datetime) -> date:
    """Paris calendar date of ``instant``."""
    return to_paris_local(instant).date()


def local_midnight_utc(local_day: date) -> datetime:
    """UTC instant of 00:00:00.000 Paris time on ``local_day``."""
    try:
        zone = _paris_zone()
    except TimeZoneResolutionError:
        naive_midnight = datetime.combine(local_day, time(0), tzinfo=timezone.utc)
        offset = paris_offset_hours(naive_midnight - timedelta(hours=1))
        return naive_midnight - timedelta(hours=offset)
    return datetime.combine(local_day, time(0), tzinfo=zone).astimezone(timezone.utc)


def _local_end_utc(last_local_day: date) -> datetime:
    return local_midnight_utc(last_local_day + timedelta(days=1)) - ONE_MILLISECOND


def start_of_day_paris(instant: datetime) -> datetime:
    return local_midnight_utc(paris_date(instant))


def end_of_day_paris(instant: datetime) -> datetime:
    return _local_end_utc(paris_date(instant))


def monday_of(local_day: date) -> date:
    return local_day - timedelta(days=local_day.weekday())


def start_of_week_paris(instant: datetime) -> datetime:
    """Monday 00:00:00.000 Paris of the week containing ``instant``."""
    return local_midnight_utc(monday_of(paris_date(instant)))


def end_of_week_paris(instant: datetime) -> datetime:
    """Sunday 23:59:59.999 Paris of the week containing ``instant``."""
    return _local_end_utc(monday_of(paris_date(instant)) + timedelta(days=6))


def start_of_month_paris(instant: datetime) -> datetime:
    return local_midnight_utc(paris_date(instant).replace(day=1))


def end_of_month_paris(instant: datetime) -> datetime:
    local_day = paris_date(instant)
    last_day = calendar.monthrange(local_day.year, local_day.month)[1]
    return _local_end_utc(local_day.replace(day=last_day))


def start_of_year_paris(instant: datetime) -> datetime:
    return local_midnight_utc(date(paris_date(instant).year, 1, 1))


def end_of_year_paris(instant: datetime) -> datetime:
    return _local_end_utc(date(paris_date(instant).year, 12, 31))


def day_bounds_paris(local_day: date) -> PeriodBoundary:
    return PeriodBoundary(local_midnight_utc(local_day), _local_end_utc(local_day))


def date_range_bounds_paris(start: date, end: date) -> PeriodBoundary:
    """UTC range covering the Paris dates ``start`` to ``end`` inclusive."""
    if end < start:
        raise InvalidPeriodError(
            "End date is before start date",
            details={"start": start.isoformat(), "end": end.isoformat()},
        )
    return PeriodBoundary(local_midnight_utc(start), _local_end_utc(end))


def year_bounds_paris(year: int) -> PeriodBoundary:
    return date_range_bounds_paris(date(year, 1, 1), date(year, 12, 31))


def week_bounds_paris(instant: datetime) -> PeriodBoundary:
    return PeriodBoundary(start_of_week_paris(instant), end_of_week_paris(instant))


def yesterday_bounds_paris(now: datetime) -> PeriodBoundary:
    return day_bounds_paris(paris_date(now) - timedelta(days=1))


def before_yesterday_bounds_paris(now: datetime) -> PeriodBoundary:
    return day_bounds_paris(paris_date(now) - timedelta(days=2))


def iso_week_number(instant: datetime) -> int:
    """ISO-8601 week number (Thursday rule) of the Paris-local date."""
    return paris_date(instant).isocalendar()[1]


def iso_week_year(instant: datetime) -> int:
    """ISO-8601 week-numbering year of the Paris-local date."""
    return paris_date(instant).isocalendar()[0]


def iso_weeks_in_year(year: int) -> int:
    # 28 December always belongs to the last ISO week of its year.
    return date(year, 12, 28).isocalendar()[1]


def week_start_date(year: int, week: int) -> datetime:
    """
    Monday 00:00 Paris (as UTC) of ISO week ``week`` of ``year``.

    Raises:
        InvalidPeriodError: ``week`` is outside 1..iso_weeks_in_year(year).
    """
    if not 1 <= week <= iso_weeks_in_year(year):
        raise InvalidPeriodError(
            f"Week {week} does not exist in {year}",
            details={"year": year, "week": week},
        )
    return local_midnight_utc(date.fromisocalendar(year, week, 1))


def iso_week_bounds_paris(year: int, week: int) -> PeriodBoundary:
    start = week_start_date(year, week)
    return PeriodBoundary(start, end_of_week_paris(start))


def hours_of_day_paris(local_day: date) -> List[datetime]:
    """
    UTC start instant of every Paris-local hour of ``local_day``.

    Yields 23 entries on the spring-forward day and 25 on the fall-back day.
    """
    start = local_midnight_utc(local_day)
    end = local_midnight_utc(local_day + timedelta(days=1))
    hours: List[datetime] = []
    current = start
    while current < end:
        hours.append(current)
        current += timedelta(hours=1)
    return hours


def day_spine(start: date, end: date) -> List[date]:
    """Every calendar date from ``start`` to ``end`` inclusive."""
    if end < start:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def shift_years(local_day: date, years: int) -> date:
    """Naive calendar-year shift; 29 February lands on 28 February."""
    target_year = local_day.year + years
    if local_day.month == 2 and local_day.day == 29 and not calendar.isleap(target_year):
        return date(target_year, 2, 28)
    return local_day.replace(year=target_year)


def same_day_in_year(local_day: date, year: int) -> date:
    return shift_years(local_day, year - local_day.year)


def parse_local_date(value: str, field_name: Optional[str] = None) -> date:
    """Parse an ISO ``YYYY-MM-DD`` Paris date coming from a request."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise InvalidPeriodError(
            f"Invalid date for {field_name or 'date'}: {value!r}",
            details={"field": field_name, "value": value},
        ) from exc
