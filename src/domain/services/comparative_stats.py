"""
Domain Service - Comparative statistics

Builds the statistics views served by the API from buckets or raw points that
were already fetched. Every function is pure: the current instant is always
passed in as ``now`` and nothing here touches a store.

Degenerate input (no points, no days, zero denominators) yields zero-filled
results; only invalid periods raise ``InvalidPeriodError``.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

import pandas as pd

from src.domain.entities.errors import InvalidPeriodError
from src.domain.entities.statistics import (
    CounterSummary,
    DailyDistribution,
    DailyDistributionEntry,
    DailyHighlights,
    DailyYearStats,
    DayHourlyProfile,
    DayValue,
    GlobalDailyTotals,
    GlobalSummary,
    GlobalWeeklyComparison,
    GroupStats,
    HourlyDistribution,
    HourlyDistributionEntry,
    HourValue,
    MaxDay,
    PassagesHighlights,
    Period,
    WeatherHighlights,
    WeatherSnapshot,
    WeekdayTotal,
    WeekdayWeekendSplit,
    WeekHourly,
    WeekHourlyDetail,
    WeeklyComparison,
    WeeklyValue,
    YearlyProgress,
    YearlyTotal,
    YearRange,
)
from src.domain.entities.time_series import (
    Bucket,
    ComparisonResult,
    DayClass,
    Number,
    PeriodBoundary,
    TimePoint,
    WeatherObservation,
)
from src.domain.services import weather_codes
from src.domain.services.bucket_aggregator import (
    bucket_by_day_of_week,
    day_key,
    filter_consecutive_zero_runs,
    left_join_spine,
    max_bucket,
    paris_frame,
    round_half_up,
    safe_ratio,
    total,
    week_key,
)
from src.domain.services.paris_calendar import (
    before_yesterday_bounds_paris,
    day_spine,
    days_in_year,
    ensure_utc,
    hours_of_day_paris,
    iso_week_bounds_paris,
    monday_of,
    paris_date,
    same_day_in_year,
    shift_years,
    to_paris_local,
    week_bounds_paris,
    yesterday_bounds_paris,
)
from src.shared.consts import WEEKDAY_NAMES

DEFAULT_MAX_ZERO_RUN = 2
DEFAULT_MIN_DAILY_TOTAL = 50
DEFAULT_ACTIVE_WINDOW_DAYS = 14
CLOUDY_COVER_THRESHOLD = 80

WEEKEND_DAYS = frozenset({5, 6})


def _bucket_date(bucket: Bucket) -> date:
    return date.fromisoformat(bucket.key)


def _period(start: date, end: date) -> Period:
    return Period(start=start.isoformat(), end=end.isoformat())


def _check_range(start: date, end: date) -> None:
    if end < start:
        raise InvalidPeriodError(
            "End date is before start date",
            details={"start": start.isoformat(), "end": end.isoformat()},
        )


def _year_of(bucket: Bucket) -> int:
    return int(bucket.key[:4])


def parse_day_class(value: Union[DayClass, str, None]) -> DayClass:
    if value is None:
        return DayClass.GLOBAL
    if isinstance(value, DayClass):
        return value
    try:
        return DayClass(value)
    except ValueError as exc:
        raise InvalidPeriodError(
            f"Unknown day class: {value!r}",
            details={"day_class": value, "allowed": [item.value for item in DayClass]},
        ) from exc


def matches_day_class(weekday: int, day_class: DayClass) -> bool:
    """``weekday`` is Python's Monday=0 index."""
    if day_class is DayClass.WEEK:
        return weekday not in WEEKEND_DAYS
    if day_class is DayClass.WEEKEND:
        return weekday in WEEKEND_DAYS
    return True


def _hour_values(table: Mapping[str, Sequence[Bucket]]) -> Dict[str, List[HourValue]]:
    return {
        name: [HourValue(hour=int(bucket.key), value=bucket.sum) for bucket in buckets]
        for name, buckets in table.items()
    }


def daily_stats_for_year(
    day_buckets: Iterable[Bucket], year: int, now: datetime
) -> DailyYearStats:
    """
    Daily totals for ``year`` restricted to fully elapsed Paris days.

    The whole calendar year is used as a spine (missing days are 0) and every
    day from today (Paris) onward is dropped. ``global_average`` divides by
    the reported days, ``active_days_average`` by the days with a positive
    total. Averages are left unrounded.
    """
    today = paris_date(now)
    spine = [day for day in day_spine(date(year, 1, 1), date(year, 12, 31)) if day < today]
    joined = left_join_spine(spine, day_buckets)
    year_total = total(joined)
    active_days = sum(1 for bucket in joined if bucket.sum > 0)
    return DailyYearStats(
        year=[DayValue(day=bucket.key, value=bucket.sum) for bucket in joined],
        global_average=safe_ratio(year_total, len(joined)),
        active_days_average=safe_ratio(year_total, active_days),
    )


def global_daily_totals_by_weekday(
    day_buckets: Iterable[Bucket],
    year: int,
    max_zero_run: int = DEFAULT_MAX_ZERO_RUN,
) -> GlobalDailyTotals:
    """
    Per-weekday totals over ``year`` after removing long zero runs.

    Only days with a positive total feed the weekday sums, counts and
    averages. ``original_days`` and ``filtered_days`` report the spine length
    before and after the zero-run filter.
    """
    spine = left_join_spine(day_spine(date(year, 1, 1), date(year, 12, 31)), day_buckets)
    filtered = filter_consecutive_zero_runs(spine, max_zero_run)
    active = [bucket for bucket in filtered if bucket.sum > 0]

    sums: List[Number] = [0] * len(WEEKDAY_NAMES)
    counts = [0] * len(WEEKDAY_NAMES)
    for bucket in active:
        weekday = _bucket_date(bucket).weekday()
        sums[weekday] += bucket.sum
        counts[weekday] += 1

    daily_totals = [
        WeekdayTotal(
            day=name,
            value=sums[index],
            count=counts[index],
            average=round_half_up(safe_ratio(sums[index], counts[index])),
        )
        for index, name in enumerate(WEEKDAY_NAMES)
    ]
    return GlobalDailyTotals(
        daily_totals=daily_totals,
        global_average=round_half_up(safe_ratio(total(active), len(active))),
        total_days=len(active),
        original_days=len(spine),
        filtered_days=len(filtered),
    )


def current_and_previous_week(now: datetime) -> Tuple[date, date]:
    """Paris Mondays of the week containing ``now`` and of the week before."""
    monday = monday_of(paris_date(now))
    return monday, monday - timedelta(days=7)


def _week_values(
    buckets: Iterable[Bucket], monday: date, cutoff: Optional[date]
) -> List[DayValue]:
    by_key = {bucket.key: bucket for bucket in buckets}
    values: List[DayValue] = []
    for offset, name in enumerate(WEEKDAY_NAMES):
        day = monday + timedelta(days=offset)
        bucket = by_key.get(day_key(day))
        if (cutoff is not None and day > cutoff) or bucket is None:
            values.append(DayValue(day=name, value=None))
        else:
            values.append(DayValue(day=name, value=bucket.sum))
    return values


def _present_average(values: Iterable[DayValue], zero_is_missing: bool) -> int:
    present = [
        item.value
        for item in values
        if item.value is not None and not (zero_is_missing and item.value == 0)
    ]
    return round_half_up(safe_ratio(sum(present), len(present)))


def weekly_comparison(
    current_buckets: Iterable[Bucket],
    previous_buckets: Iterable[Bucket],
    now: datetime,
    zero_is_missing: bool = True,
) -> WeeklyComparison:
    """
    This Paris week against the previous one, Monday to Sunday.

    Days of the current week after today are ``None`` ("no data yet") and so
    are days without any bucket. Averages ignore ``None`` values, and zero
    values too when ``zero_is_missing`` is set. ``global_average`` is the mean
    of the two week averages, so a half-finished week weighs as much as a full
    one.
    """
    monday, previous_monday = current_and_previous_week(now)
    current_week = _week_values(current_buckets, monday, paris_date(now))
    last_week = _week_values(previous_buckets, previous_monday, None)
    current_average = _present_average(current_week, zero_is_missing)
    last_average = _present_average(last_week, zero_is_missing)
    return WeeklyComparison(
        current_week=current_week,
        last_week=last_week,
        current_week_average=current_average,
        last_week_average=last_average,
        global_average=round_half_up((current_average + last_average) / 2),
    )


def yearly_progress(
    day_buckets: Iterable[Bucket],
    years: Optional[Iterable[int]],
    now: datetime,
) -> List[YearlyProgress]:
    """
    Year-to-date against full-year totals, one row per year.

    ``year_to_date`` sums 1 January up to today's month and day moved into
    that year (29 February becomes 28 February in common years).
    ``calendar_progress`` is that day's ordinal over 365 or 366.
    When ``years`` is None the range is taken from the buckets.
    """
    buckets = list(day_buckets)
    if years is None:
        present = sorted({_year_of(bucket) for bucket in buckets})
        years = range(present[0], present[-1] + 1) if present else []

    today = paris_date(now)
    rows: List[YearlyProgress] = []
    for year in years:
        cutoff = same_day_in_year(today, year).isoformat()
        in_year = [bucket for bucket in buckets if _year_of(bucket) == year]
        year_total = total(in_year)
        year_to_date = total(bucket for bucket in in_year if bucket.key <= cutoff)
        day_of_year = same_day_in_year(today, year).timetuple().tm_yday
        rows.append(
            YearlyProgress(
                year=year,
                total=year_total,
                year_to_date=year_to_date,
                calendar_progress=safe_ratio(day_of_year, days_in_year(year)),
                progress=safe_ratio(year_to_date, year_total),
            )
        )
    return rows


def reference_range(start: date, end: date) -> Tuple[date, date]:
    """
    Default comparison window: one calendar year earlier, same day count.

    The shift is a naive calendar shift, so a range starting on 29 February
    starts on 28 February of the previous year.
    """
    _check_range(start, end)
    reference_start = shift_years(start, -1)
    return reference_start, reference_start + (end - start)


def _range_label(start: date, end: date) -> str:
    return f"{start.isoformat()}/{end.isoformat()}"


def evolution(
    current_buckets: Iterable[Bucket],
    reference_buckets: Iterable[Bucket],
    start: date,
    end: date,
    reference_start: Optional[date] = None,
    reference_end: Optional[date] = None,
) -> ComparisonResult:
    """Gap-free day series for a period and its reference, aligned by index."""
    _check_range(start, end)
    if reference_start is None or reference_end is None:
        reference_start, reference_end = reference_range(start, end)
    _check_range(reference_start, reference_end)

    return ComparisonResult(
        current_period=left_join_spine(day_spine(start, end), current_buckets),
        reference_period=left_join_spine(
            day_spine(reference_start, reference_end), reference_buckets
        ),
        current_label=_range_label(start, end),
        reference_label=_range_label(reference_start, reference_end),
    )


def weekday_weekend_split(
    day_buckets: Iterable[Bucket], start: date, end: date
) -> WeekdayWeekendSplit:
    """
    Monday-Friday against Saturday-Sunday over ``start``..``end``.

    ``count`` is the number of spine days of each class, so a class with no
    day in the range reports zeros.
    """
    _check_range(start, end)
    groups = {False: [0, 0], True: [0, 0]}
    for bucket in left_join_spine(day_spine(start, end), day_buckets):
        group = groups[_bucket_date(bucket).weekday() in WEEKEND_DAYS]
        group[0] += bucket.sum
        group[1] += 1

    def _stats(values: List[Number]) -> GroupStats:
        return GroupStats(
            total=values[0],
            count=int(values[1]),
            average=round_half_up(safe_ratio(values[0], values[1])),
        )

    return WeekdayWeekendSplit(
        weekdays=_stats(groups[False]),
        weekends=_stats(groups[True]),
        period=_period(start, end),
    )


def hourly_distribution(
    points: Iterable[TimePoint],
    start: date,
    end: date,
    day_class: Union[DayClass, str, None] = DayClass.GLOBAL,
) -> HourlyDistribution:
    """
    Hour-of-day profile over a date range, zero-total hours dropped.

    Points outside ``start``..``end`` (Paris dates) or outside ``day_class``
    are ignored. ``count`` is the number of distinct Paris days that
    contributed to the hour and ``average`` is ``round(total / count)``.
    """
    _check_range(start, end)
    selected = parse_day_class(day_class)
    distribution: List[HourlyDistributionEntry] = []

    frame = paris_frame(points)
    if frame.empty:
        return HourlyDistribution(distribution=distribution, period=_period(start, end))

    local = frame["local"]
    in_range = (local >= pd.Timestamp(start)) & (local < pd.Timestamp(end + timedelta(days=1)))
    in_class = local.dt.weekday.map(lambda weekday: matches_day_class(int(weekday), selected))
    kept = frame[in_range & in_class.astype(bool)].assign(
        hour=lambda rows: rows["local"].dt.hour,
        day=lambda rows: rows["local"].dt.normalize(),
    )
    per_hour = kept.groupby("hour").agg(total=("value", "sum"), days=("day", "nunique"))

    for hour, hour_total, day_count in zip(
        per_hour.index.tolist(), per_hour["total"].tolist(), per_hour["days"].tolist()
    ):
        if hour_total == 0:
            continue
        distribution.append(
            HourlyDistributionEntry(
                name=f"{hour}h",
                hour=hour,
                total=hour_total,
                average=round_half_up(safe_ratio(hour_total, day_count)),
                count=day_count,
            )
        )
    return HourlyDistribution(distribution=distribution, period=_period(start, end))


def week_hourly_detail(
    points: Iterable[TimePoint],
    year: int,
    week: int,
    available_years: YearRange,
) -> WeekHourlyDetail:
    """Weekday x hour table of ISO week ``week`` of ``year``."""
    bounds = iso_week_bounds_paris(year, week)
    in_week = [point for point in points if bounds.contains(ensure_utc(point.timestamp_utc))]
    return WeekHourlyDetail(
        year=year,
        week=WeekHourly(
            number=week,
            start_date=bounds.start_utc,
            end_date=bounds.end_utc,
            stats=_hour_values(bucket_by_day_of_week(in_week)),
        ),
        available_years=available_years,
    )


def current_week_hourly(
    points: Iterable[TimePoint], now: datetime
) -> Dict[str, List[HourValue]]:
    bounds = week_bounds_paris(now)
    in_week = [point for point in points if bounds.contains(ensure_utc(point.timestamp_utc))]
    return _hour_values(bucket_by_day_of_week(in_week))


def available_years(
    first_timestamp: Optional[datetime],
    last_timestamp: Optional[datetime],
    now: datetime,
) -> YearRange:
    """Paris years spanned by the data, the current year when there is none."""
    if first_timestamp is None:
        current = paris_date(now).year
        return YearRange(start=current, end=current)
    last = last_timestamp or now
    return YearRange(start=paris_date(first_timestamp).year, end=paris_date(last).year)


def available_weeks(day_buckets: Iterable[Bucket], year: int) -> List[int]:
    """Sorted ISO week numbers of ``year`` that have at least one bucket."""
    weeks: Set[int] = set()
    for bucket in day_buckets:
        if bucket.count == 0 and bucket.sum == 0:
            continue
        iso_year, iso_week, _ = _bucket_date(bucket).isocalendar()
        if iso_year == year:
            weeks.add(iso_week)
    return sorted(weeks)


def yearly_totals(buckets: Iterable[Bucket]) -> List[YearlyTotal]:
    """
    Totals per Paris year from the first to the last year with data.

    Accepts day or month buckets (keys starting with ``YYYY``); years in
    between without data are reported with a zero total.
    """
    per_year: Dict[int, Number] = defaultdict(int)
    for bucket in buckets:
        per_year[_year_of(bucket)] += bucket.sum
    if not per_year:
        return []
    first, last = min(per_year), max(per_year)
    return [YearlyTotal(year=year, total=per_year.get(year, 0)) for year in range(first, last + 1)]


def counter_summary(
    before_yesterday_points: Iterable[TimePoint],
    yesterday_points: Iterable[TimePoint],
    first_timestamp: Optional[datetime],
    last_timestamp: Optional[datetime],
    total_passages: Number,
    day_buckets: Iterable[Bucket],
    now: datetime,
) -> CounterSummary:
    """
    Headline figures for one counter.

    The yesterday and day-before-yesterday windows are whole Paris days,
    which last 23 or 25 hours on DST transition nights.
    """
    before_yesterday = before_yesterday_bounds_paris(now)
    yesterday = yesterday_bounds_paris(now)

    def _window(points: Iterable[TimePoint], bounds: PeriodBoundary) -> List[TimePoint]:
        return [point for point in points if bounds.contains(ensure_utc(point.timestamp_utc))]

    before_points = _window(before_yesterday_points, before_yesterday)
    yesterday_window = _window(yesterday_points, yesterday)
    best = max_bucket(day_buckets)

    return CounterSummary(
        before_yesterday=sum((point.value for point in before_points), 0),
        yesterday=sum((point.value for point in yesterday_window), 0),
        first_passage_date=first_timestamp,
        last_passage_date=last_timestamp,
        last_passage_before_yesterday=max(
            (ensure_utc(point.timestamp_utc) for point in before_points), default=None
        ),
        last_passage_yesterday=max(
            (ensure_utc(point.timestamp_utc) for point in yesterday_window), default=None
        ),
        total_passages=total_passages,
        max_day=MaxDay(date=_bucket_date(best), value=best.sum) if best else None,
    )


def day_hourly_profile(points: Iterable[TimePoint], local_day: date) -> DayHourlyProfile:
    """
    Hourly totals of one Paris day.

    ``index`` holds the UTC start of each local hour and ``labels`` the local
    hour (``"0h"``..``"23h"``); the fall-back day repeats ``"2h"``.
    """
    hours = hours_of_day_paris(local_day)
    instants = [(ensure_utc(point.timestamp_utc), point.value) for point in points]
    values: List[Number] = []
    for hour_start in hours:
        hour_end = hour_start + timedelta(hours=1)
        values.append(sum((value for ts, value in instants if hour_start <= ts < hour_end), 0))
    return DayHourlyProfile(
        index=hours,
        values=values,
        labels=[f"{to_paris_local(hour_start).hour}h" for hour_start in hours],
    )


def daily_distribution(
    day_buckets: Iterable[Bucket], start: date, end: date
) -> DailyDistribution:
    """Totals per weekday over the range; ``count`` is spine days of that weekday."""
    _check_range(start, end)
    sums: List[Number] = [0] * len(WEEKDAY_NAMES)
    counts = [0] * len(WEEKDAY_NAMES)
    for bucket in left_join_spine(day_spine(start, end), day_buckets):
        weekday = _bucket_date(bucket).weekday()
        sums[weekday] += bucket.sum
        counts[weekday] += 1

    return DailyDistribution(
        distribution=[
            DailyDistributionEntry(
                name=name,
                day_of_week=index + 1,
                total=sums[index],
                average=round_half_up(safe_ratio(sums[index], counts[index])),
                count=counts[index],
            )
            for index, name in enumerate(WEEKDAY_NAMES)
        ],
        period=_period(start, end),
    )


def weekly_averages_for_year(
    day_buckets: Iterable[Bucket],
    year: int,
    min_daily_total: Number = DEFAULT_MIN_DAILY_TOTAL,
) -> List[WeeklyValue]:
    """
    Mean daily total per Paris week of ``year``.

    Rows start at the Monday of the week holding 1 January and stop at the
    last Monday on or before 31 December. Only days of ``year`` whose total
    is strictly above ``min_daily_total`` are averaged; a week without such
    a day reports 0.
    """
    per_week: Dict[str, List[Number]] = defaultdict(list)
    for bucket in day_buckets:
        day = _bucket_date(bucket)
        if day.year == year and bucket.sum > min_daily_total:
            per_week[week_key(day)].append(bucket.sum)

    rows: List[WeeklyValue] = []
    monday = monday_of(date(year, 1, 1))
    last_day = date(year, 12, 31)
    while monday <= last_day:
        key = day_key(monday)
        values = per_week.get(key, [])
        rows.append(WeeklyValue(week=key, value=round_half_up(safe_ratio(sum(values), len(values)))))
        monday += timedelta(days=7)
    return rows


def global_weekly_comparison(
    current_year_buckets: Iterable[Bucket],
    previous_year_buckets: Iterable[Bucket],
    now: datetime,
    min_daily_total: Number = DEFAULT_MIN_DAILY_TOTAL,
) -> GlobalWeeklyComparison:
    """
    Weekly averages of the current Paris year against the previous year.

    Current-year weeks starting after the current week are dropped and the
    current-year total stops before the current week's Monday.
    """
    current_monday = monday_of(paris_date(now))
    current_year = paris_date(now).year
    previous_year = current_year - 1
    current_buckets = list(current_year_buckets)
    previous_buckets = list(previous_year_buckets)

    current_rows = [
        WeeklyValue(week=row.week, value=row.value, year=current_year)
        for row in weekly_averages_for_year(current_buckets, current_year, min_daily_total)
        if date.fromisoformat(row.week) <= current_monday
    ]
    previous_rows = [
        WeeklyValue(week=row.week, value=row.value, year=previous_year)
        for row in weekly_averages_for_year(previous_buckets, previous_year, min_daily_total)
    ]
    return GlobalWeeklyComparison(
        current_year=current_rows,
        previous_year=previous_rows,
        current_year_total=total(
            bucket
            for bucket in current_buckets
            if _year_of(bucket) == current_year and _bucket_date(bucket) < current_monday
        ),
        previous_year_total=total(
            bucket for bucket in previous_buckets if _year_of(bucket) == previous_year
        ),
    )


def active_since(now: datetime, window_days: int = DEFAULT_ACTIVE_WINDOW_DAYS) -> datetime:
    return ensure_utc(now) - timedelta(days=window_days)


def is_counter_active(
    last_timestamp: Optional[datetime],
    now: datetime,
    window_days: int = DEFAULT_ACTIVE_WINDOW_DAYS,
) -> bool:
    if last_timestamp is None:
        return False
    return ensure_utc(last_timestamp) >= active_since(now, window_days)


def global_summary(
    total_passages: Number,
    first_timestamp: Optional[datetime],
    series_keys: Iterable[str],
    active_series_keys: Iterable[str],
) -> GlobalSummary:
    return GlobalSummary(
        total_passages=total_passages,
        first_passage_date=first_timestamp,
        total_counters=len(set(series_keys)),
        active_counters=len(set(active_series_keys)),
    )


def weather_snapshot(observations: Iterable[WeatherObservation]) -> WeatherSnapshot:
    """
    Summary of one day of observations.

    ``temperature`` is the maximum observed value (None without any),
    raining means some ``rain > 0`` or a rain weather code, cloudy means some
    cloud cover above 80 % or a cloudy weather code. The description comes
    from the latest observation with a code.
    """
    observed = sorted(observations, key=lambda item: ensure_utc(item.timestamp_utc))
    temperatures = [item.temperature for item in observed if item.temperature is not None]
    codes = [item.weather_code for item in observed if item.weather_code is not None]
    return WeatherSnapshot(
        temperature=max(temperatures) if temperatures else None,
        is_raining=any(
            (item.rain or 0) > 0 or weather_codes.is_raining(item.weather_code)
            for item in observed
        ),
        is_cloudy=any(
            (item.cloud_cover or 0) > CLOUDY_COVER_THRESHOLD
            or weather_codes.is_cloudy(item.weather_code)
            for item in observed
        ),
        description=weather_codes.describe(codes[-1]) if codes else None,
    )


def daily_highlights(
    before_yesterday_total: Number,
    yesterday_total: Number,
    observations: Iterable[WeatherObservation],
    now: datetime,
) -> DailyHighlights:
    """Passages of the last two full Paris days and weather of the last three."""
    today = paris_date(now)
    per_day: Dict[date, List[WeatherObservation]] = defaultdict(list)
    for observation in observations:
        per_day[paris_date(observation.timestamp_utc)].append(observation)

    return DailyHighlights(
        passages=PassagesHighlights(
            day_before_yesterday=before_yesterday_total,
            yesterday=yesterday_total,
        ),
        weather=WeatherHighlights(
            day_before_yesterday=weather_snapshot(per_day.get(today - timedelta(days=2), [])),
            yesterday=weather_snapshot(per_day.get(today - timedelta(days=1), [])),
            today=weather_snapshot(per_day.get(today, [])),
        ),
    )
