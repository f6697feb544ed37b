"""
Domain Service - Bucket aggregator

Reduces time points (already filtered to a UTC range) into buckets keyed by a
Paris-local calendar unit. Points are loaded into a pandas frame, converted to
Paris wall-clock time with ``tz_convert`` and grouped there. Sums are plain
accumulation of the stored values; averaging and rounding are left to the
consumer.
"""

from __future__ import annotations

import math
from collections import OrderedDict
from datetime import date
from typing import Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from src.domain.entities.time_series import Bucket, Granularity, Number, TimePoint
from src.domain.services.paris_calendar import monday_of
from src.shared.consts import HOURS_PER_DAY, PARIS_TIMEZONE, WEEKDAY_NAMES


def day_key(local_day: date) -> str:
    return local_day.isoformat()


def week_key(local_day: date) -> str:
    return monday_of(local_day).isoformat()


def month_key(local_day: date) -> str:
    return f"{local_day.year:04d}-{local_day.month:02d}"


def paris_frame(points: Iterable[TimePoint]) -> pd.DataFrame:
    """
    Frame of ``value`` and ``local`` (naive Paris wall-clock time) per point.

    Naive timestamps are read as UTC.
    """
    records = [(point.timestamp_utc, point.value) for point in points]
    frame = pd.DataFrame.from_records(records, columns=["timestamp", "value"])
    timestamps = pd.to_datetime(frame["timestamp"], utc=True)
    frame["local"] = timestamps.dt.tz_convert(PARIS_TIMEZONE).dt.tz_localize(None)
    return frame


def _calendar_keys(local: pd.Series, granularity: Granularity) -> pd.Series:
    if granularity is Granularity.DAY:
        return local.dt.strftime("%Y-%m-%d")
    if granularity is Granularity.WEEK:
        # W-SUN periods run Monday to Sunday
        return local.dt.to_period("W-SUN").dt.start_time.dt.strftime("%Y-%m-%d")
    return local.dt.strftime("%Y-%m")


def _group(points: Iterable[TimePoint], granularity: Granularity) -> List[Bucket]:
    frame = paris_frame(points)
    if frame.empty:
        return []
    keys = _calendar_keys(frame["local"], granularity)
    grouped = frame.groupby(keys, sort=True)["value"].agg(["sum", "size"])
    return [
        Bucket(key=key, sum=value_sum, count=count)
        for key, value_sum, count in zip(
            grouped.index.tolist(), grouped["sum"].tolist(), grouped["size"].tolist()
        )
    ]


def bucket_by_day(points: Iterable[TimePoint]) -> List[Bucket]:
    """
    Sum points per Paris-local day (``YYYY-MM-DD``).

    Only days present in the input get a bucket; ``count`` is the number of
    raw points. Use ``left_join_spine`` for gap-free coverage.
    """
    return _group(points, Granularity.DAY)


def bucket_by_week(points: Iterable[TimePoint]) -> List[Bucket]:
    """Sum points per Paris week, keyed by the Monday's ``YYYY-MM-DD``."""
    return _group(points, Granularity.WEEK)


def bucket_by_month(points: Iterable[TimePoint]) -> List[Bucket]:
    return _group(points, Granularity.MONTH)


def bucket_by_hour_of_day(points: Iterable[TimePoint]) -> List[Bucket]:
    """Exactly 24 buckets keyed ``"0"``..``"23"``, zero-filled."""
    frame = paris_frame(points)
    if frame.empty:
        return [Bucket(key=str(hour), sum=0, count=0) for hour in range(HOURS_PER_DAY)]

    grouped = (
        frame.groupby(frame["local"].dt.hour)["value"]
        .agg(["sum", "size"])
        .reindex(range(HOURS_PER_DAY), fill_value=0)
    )
    return [
        Bucket(key=str(hour), sum=value_sum, count=count)
        for hour, value_sum, count in zip(
            range(HOURS_PER_DAY), grouped["sum"].tolist(), grouped["size"].tolist()
        )
    ]


def bucket_by_day_of_week(points: Iterable[TimePoint]) -> "OrderedDict[str, List[Bucket]]":
    """
    Weekday x hour cross tabulation, 7 x 24 cells.

    Keys are lowercase English weekday names in ISO order (monday first).
    """
    grid = pd.MultiIndex.from_product(
        [range(len(WEEKDAY_NAMES)), range(HOURS_PER_DAY)], names=["weekday", "hour"]
    )
    frame = paris_frame(points)
    if frame.empty:
        grouped = pd.DataFrame({"sum": 0, "size": 0}, index=grid)
    else:
        local = frame["local"]
        weekdays = local.dt.weekday.astype("int64").rename("weekday")
        hours = local.dt.hour.astype("int64").rename("hour")
        grouped = (
            frame.groupby([weekdays, hours])["value"]
            .agg(["sum", "size"])
            .reindex(grid, fill_value=0)
        )

    table: "OrderedDict[str, List[Bucket]]" = OrderedDict()
    for index, name in enumerate(WEEKDAY_NAMES):
        cells = grouped.loc[index]
        table[name] = [
            Bucket(key=str(hour), sum=value_sum, count=count)
            for hour, value_sum, count in zip(
                range(HOURS_PER_DAY), cells["sum"].tolist(), cells["size"].tolist()
            )
        ]
    return table


def bucket_by(points: Iterable[TimePoint], granularity: Granularity) -> List[Bucket]:
    """Dispatch on ``granularity``; used by stores without server-side grouping."""
    if granularity is Granularity.HOUR:
        return [bucket for bucket in bucket_by_hour_of_day(points) if bucket.count]
    return _group(points, granularity)


def filter_consecutive_zero_runs(day_buckets: Sequence[Bucket], max_run: int) -> List[Bucket]:
    """
    Drop every maximal run of zero-sum buckets longer than ``max_run``.

    Runs of length ``max_run`` or less are kept, wherever they sit in the
    series (leading, inner or trailing). Input order is preserved.
    """
    if max_run < 0:
        raise ValueError("max_run must be >= 0")

    kept: List[Bucket] = []
    run: List[Bucket] = []
    for bucket in day_buckets:
        if bucket.sum == 0:
            run.append(bucket)
            continue
        if len(run) <= max_run:
            kept.extend(run)
        run = []
        kept.append(bucket)
    if len(run) <= max_run:
        kept.extend(run)
    return kept


def max_bucket(day_buckets: Iterable[Bucket]) -> Optional[Bucket]:
    """Bucket with the largest sum; ties go to the earliest key."""
    best: Optional[Bucket] = None
    for bucket in day_buckets:
        if best is None or bucket.sum > best.sum:
            best = bucket
        elif bucket.sum == best.sum and bucket.key < best.key:
            best = bucket
    return best


def left_join_spine(spine: Iterable[date], buckets: Iterable[Bucket]) -> List[Bucket]:
    """One bucket per spine day; days absent from ``buckets`` get sum 0, count 0."""
    by_key: Mapping[str, Bucket] = {bucket.key: bucket for bucket in buckets}
    joined: List[Bucket] = []
    for local_day in spine:
        key = day_key(local_day)
        joined.append(by_key.get(key) or Bucket(key=key, sum=0, count=0))
    return joined


def safe_ratio(numerator: Number, denominator: Number) -> float:
    if not denominator:
        return 0.0
    result = numerator / denominator
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return int(math.floor(value + 0.5))


def total(buckets: Iterable[Bucket]) -> Number:
    return sum((bucket.sum for bucket in buckets), 0)
