from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.domain.entities.errors import InvalidPeriodError
from src.domain.entities.statistics import YearRange
from src.domain.entities.time_series import Bucket, DayClass, WeatherObservation
from src.domain.services import comparative_stats as stats
from tests.conftest import hourly_points, point, utc


def _bucket(day: str, value: int, count: int = 24) -> Bucket:
    return Bucket(key=day, sum=value, count=count)


def _series(first: date, *values: int) -> list[Bucket]:
    return [_bucket((first + timedelta(days=index)).isoformat(), value) for index, value in enumerate(values)]


def _observation(timestamp: datetime, **fields) -> WeatherObservation:
    return WeatherObservation(zone="montpellier", timestamp_utc=timestamp, **fields)


class TestDailyStatsForYear:
    def test_excludes_today_and_later(self, winter_now: datetime) -> None:
        buckets = [
            _bucket("2025-01-01", 100),
            _bucket("2025-01-02", 0),
            _bucket("2025-01-03", 50),
            _bucket("2025-01-15", 999),
        ]

        result = stats.daily_stats_for_year(buckets, 2025, winter_now)

        assert len(result.year) == 14
        assert result.year[-1].day == "2025-01-14"
        assert [item.value for item in result.year[:4]] == [100, 0, 50, 0]
        assert result.global_average == pytest.approx(150 / 14)
        assert result.active_days_average == pytest.approx(75.0)

    def test_past_year_reports_every_day(self, winter_now: datetime) -> None:
        result = stats.daily_stats_for_year([], 2024, winter_now)
        assert len(result.year) == 366
        assert result.global_average == 0.0
        assert result.active_days_average == 0.0

    def test_future_year_is_empty(self, winter_now: datetime) -> None:
        result = stats.daily_stats_for_year([_bucket("2026-01-01", 5)], 2026, winter_now)
        assert result.year == []
        assert result.global_average == 0.0


def test_global_daily_totals_filters_downtime_before_averaging() -> None:
    # Monday 1 January 2024 to Sunday 7 January, then nothing for the year
    buckets = _series(date(2024, 1, 1), 100, 200, 0, 300, 0, 0, 400)

    result = stats.global_daily_totals_by_weekday(buckets, 2024, max_zero_run=2)

    assert result.original_days == 366
    assert result.filtered_days == 7
    assert result.total_days == 4
    assert result.global_average == 250
    by_day = {item.day: item for item in result.daily_totals}
    assert list(by_day) == [
        "monday",
        "tuesday",
        "wednesday",
        "thursday",
        "friday",
        "saturday",
        "sunday",
    ]
    assert (by_day["monday"].value, by_day["monday"].count, by_day["monday"].average) == (100, 1, 100)
    assert (by_day["wednesday"].value, by_day["wednesday"].count, by_day["wednesday"].average) == (0, 0, 0)
    assert by_day["sunday"].value == 400


def test_global_daily_totals_without_data_is_zero_filled() -> None:
    result = stats.global_daily_totals_by_weekday([], 2023)
    assert result.total_days == 0
    assert result.filtered_days == 0
    assert result.global_average == 0
    assert all(item.average == 0 for item in result.daily_totals)


class TestWeeklyComparison:
    def _current(self) -> list[Bucket]:
        return [
            _bucket("2025-01-13", 100),
            _bucket("2025-01-14", 0),
            _bucket("2025-01-15", 50),
            _bucket("2025-01-16", 70),
        ]

    def _previous(self) -> list[Bucket]:
        return _series(date(2025, 1, 6), 10, 20, 30, 40, 50, 60, 0)

    def test_future_days_are_null(self, winter_now: datetime) -> None:
        result = stats.weekly_comparison(self._current(), self._previous(), winter_now)

        assert [item.day for item in result.current_week][0] == "monday"
        assert [item.value for item in result.current_week] == [100, 0, 50, None, None, None, None]
        assert [item.value for item in result.last_week] == [10, 20, 30, 40, 50, 60, 0]

    def test_zero_is_missing_ignores_zero_days(self, winter_now: datetime) -> None:
        result = stats.weekly_comparison(self._current(), self._previous(), winter_now)
        assert result.current_week_average == 75
        assert result.last_week_average == 35
        assert result.global_average == 55

    def test_zero_values_count_when_not_missing(self, winter_now: datetime) -> None:
        result = stats.weekly_comparison(
            self._current(), self._previous(), winter_now, zero_is_missing=False
        )
        assert result.current_week_average == 50
        assert result.last_week_average == 30
        assert result.global_average == 40

    def test_global_average_weighs_both_weeks_equally(self) -> None:
        now = utc(2025, 3, 12, 11)  # Wednesday, nothing counted yet today
        current = _series(date(2025, 3, 10), 100, 100)
        previous = _series(date(2025, 3, 3), *([400] * 7))

        result = stats.weekly_comparison(current, previous, now)

        assert (result.current_week_average, result.last_week_average) == (100, 400)
        assert result.global_average == 250

    def test_days_without_bucket_are_null(self, winter_now: datetime) -> None:
        previous = [bucket for bucket in self._previous() if bucket.key != "2025-01-09"]
        result = stats.weekly_comparison([], previous, winter_now)
        assert result.last_week[3].value is None
        assert result.current_week_average == 0

    def test_current_and_previous_week(self, winter_now: datetime) -> None:
        assert stats.current_and_previous_week(winter_now) == (date(2025, 1, 13), date(2025, 1, 6))


class TestYearlyProgress:
    def _buckets(self) -> list[Bucket]:
        return [
            _bucket("2024-01-15", 100),
            _bucket("2024-03-01", 50),
            _bucket("2024-03-02", 25),
            _bucket("2024-12-31", 125),
            _bucket("2025-02-01", 40),
        ]

    def test_year_to_date_against_full_year(self) -> None:
        rows = stats.yearly_progress(self._buckets(), [2024, 2025], utc(2025, 3, 1, 12))

        first, second = rows
        assert (first.year, first.total, first.year_to_date) == (2024, 300, 150)
        assert first.progress == pytest.approx(0.5)
        assert first.calendar_progress == pytest.approx(61 / 366)
        assert (second.year, second.total, second.year_to_date) == (2025, 40, 40)
        assert second.progress == pytest.approx(1.0)
        assert second.calendar_progress == pytest.approx(60 / 365)

    def test_years_default_to_bucket_range(self) -> None:
        rows = stats.yearly_progress(self._buckets(), None, utc(2025, 3, 1, 12))
        assert [row.year for row in rows] == [2024, 2025]
        assert stats.yearly_progress([], None, utc(2025, 3, 1, 12)) == []

    def test_leap_day_maps_to_28_february(self) -> None:
        buckets = [_bucket("2023-02-28", 10), _bucket("2023-03-01", 90)]
        rows = stats.yearly_progress(buckets, [2023], utc(2024, 2, 29, 12))
        assert rows[0].year_to_date == 10
        assert rows[0].progress == pytest.approx(0.1)

    def test_year_without_data_reports_zero_progress(self) -> None:
        rows = stats.yearly_progress([], [2022], utc(2025, 3, 1, 12))
        assert rows[0].total == 0
        assert rows[0].progress == 0.0


class TestEvolution:
    def test_reference_range_shifts_one_year(self) -> None:
        assert stats.reference_range(date(2024, 2, 29), date(2024, 3, 6)) == (
            date(2023, 2, 28),
            date(2023, 3, 6),
        )

    def test_series_are_gap_free_and_aligned(self) -> None:
        result = stats.evolution(
            [_bucket("2024-01-02", 10)],
            [_bucket("2023-01-01", 5)],
            date(2024, 1, 1),
            date(2024, 1, 3),
        )

        assert [bucket.sum for bucket in result.current_period] == [0, 10, 0]
        assert [bucket.sum for bucket in result.reference_period] == [5, 0, 0]
        assert len(result.current_period) == len(result.reference_period)
        assert result.current_label == "2024-01-01/2024-01-03"
        assert result.reference_label == "2023-01-01/2023-01-03"

    def test_explicit_reference_range(self) -> None:
        result = stats.evolution(
            [], [], date(2024, 5, 1), date(2024, 5, 7), date(2024, 4, 1), date(2024, 4, 30)
        )
        assert len(result.current_period) == 7
        assert len(result.reference_period) == 30

    def test_reversed_range_is_invalid(self) -> None:
        with pytest.raises(InvalidPeriodError):
            stats.evolution([], [], date(2024, 1, 3), date(2024, 1, 1))


class TestWeekdayWeekendSplit:
    def test_weekdays_only(self) -> None:
        buckets = _series(date(2024, 1, 1), 10, 20, 30, 40, 50)

        result = stats.weekday_weekend_split(buckets, date(2024, 1, 1), date(2024, 1, 5))

        assert (result.weekdays.total, result.weekdays.count, result.weekdays.average) == (150, 5, 30)
        assert (result.weekends.total, result.weekends.count, result.weekends.average) == (0, 0, 0)
        assert (result.period.start, result.period.end) == ("2024-01-01", "2024-01-05")

    def test_full_week(self) -> None:
        buckets = _series(date(2024, 1, 1), 10, 20, 30, 40, 50, 7, 8)
        result = stats.weekday_weekend_split(buckets, date(2024, 1, 1), date(2024, 1, 7))
        assert (result.weekends.total, result.weekends.count, result.weekends.average) == (15, 2, 8)

    def test_missing_days_count_as_zero(self) -> None:
        result = stats.weekday_weekend_split(
            [_bucket("2024-01-01", 70)], date(2024, 1, 1), date(2024, 1, 7)
        )
        assert (result.weekdays.total, result.weekdays.count, result.weekdays.average) == (70, 5, 14)


class TestHourlyDistribution:
    def _points(self):
        return [
            point(utc(2024, 6, 3, 6), 10),  # Monday 8h
            point(utc(2024, 6, 4, 6), 20),  # Tuesday 8h
            point(utc(2024, 6, 3, 15), 5),  # Monday 17h
            point(utc(2024, 6, 8, 6), 7),  # Saturday 8h
            point(utc(2024, 6, 3, 10), 0),  # Monday 12h, nothing counted
            point(utc(2024, 6, 10, 6), 1000),  # next Monday, out of range
        ]

    def test_zero_hours_are_dropped(self) -> None:
        result = stats.hourly_distribution(self._points(), date(2024, 6, 3), date(2024, 6, 9))

        assert [entry.name for entry in result.distribution] == ["8h", "17h"]
        eight, seventeen = result.distribution
        assert (eight.hour, eight.total, eight.count, eight.average) == (8, 37, 3, 12)
        assert (seventeen.total, seventeen.count, seventeen.average) == (5, 1, 5)
        assert (result.period.start, result.period.end) == ("2024-06-03", "2024-06-09")

    def test_week_class_keeps_monday_to_friday(self) -> None:
        result = stats.hourly_distribution(
            self._points(), date(2024, 6, 3), date(2024, 6, 9), DayClass.WEEK
        )
        eight = result.distribution[0]
        assert (eight.total, eight.count, eight.average) == (30, 2, 15)

    def test_weekend_class_accepts_plain_string(self) -> None:
        result = stats.hourly_distribution(
            self._points(), date(2024, 6, 3), date(2024, 6, 9), "weekend"
        )
        assert [(entry.name, entry.total) for entry in result.distribution] == [("8h", 7)]

    def test_unknown_day_class_is_invalid(self) -> None:
        with pytest.raises(InvalidPeriodError):
            stats.hourly_distribution([], date(2024, 6, 3), date(2024, 6, 9), "holidays")

    def test_no_points_gives_empty_distribution(self) -> None:
        result = stats.hourly_distribution([], date(2024, 6, 3), date(2024, 6, 9))
        assert result.distribution == []


def test_week_hourly_detail_keeps_points_of_the_iso_week() -> None:
    points = [point(utc(2025, 1, 13, 7), 12), point(utc(2025, 1, 20, 7), 99)]

    detail = stats.week_hourly_detail(points, 2025, 3, YearRange(start=2023, end=2025))

    assert detail.year == 2025
    assert detail.week.number == 3
    assert detail.week.start_date == utc(2025, 1, 12, 23)
    assert detail.week.stats["monday"][8].value == 12
    assert detail.week.stats["monday"][8].hour == 8
    assert sum(value.value for values in detail.week.stats.values() for value in values) == 12
    assert detail.available_years == YearRange(start=2023, end=2025)


def test_week_hourly_detail_rejects_missing_week() -> None:
    with pytest.raises(InvalidPeriodError):
        stats.week_hourly_detail([], 2024, 53, YearRange(start=2024, end=2024))


def test_current_week_hourly(winter_now: datetime) -> None:
    table = stats.current_week_hourly(
        [point(utc(2025, 1, 15, 16), 4), point(utc(2025, 1, 10, 16), 9)], winter_now
    )
    assert table["wednesday"][17].value == 4
    assert sum(value.value for values in table.values() for value in values) == 4


def test_available_years(winter_now: datetime) -> None:
    assert stats.available_years(None, None, winter_now) == YearRange(start=2025, end=2025)
    assert stats.available_years(
        utc(2019, 12, 31, 23, 30), utc(2024, 12, 31, 12), winter_now
    ) == YearRange(start=2020, end=2024)


def test_available_weeks_uses_iso_week_year() -> None:
    buckets = [
        _bucket("2024-12-30", 5),
        _bucket("2025-01-01", 5),
        _bucket("2025-01-13", 5),
        _bucket("2025-01-20", 0, count=0),
        _bucket("2025-12-29", 5),
    ]
    assert stats.available_weeks(buckets, 2025) == [1, 3]


def test_yearly_totals_fill_missing_years() -> None:
    buckets = [Bucket(key="2022-05", sum=10), Bucket(key="2024-01", sum=5), Bucket(key="2024-02", sum=5)]
    rows = stats.yearly_totals(buckets)
    assert [(row.year, row.total) for row in rows] == [(2022, 10), (2023, 0), (2024, 10)]
    assert stats.yearly_totals([]) == []


def test_counter_summary_on_fall_back_night() -> None:
    now = utc(2024, 10, 28, 10)
    yesterday = hourly_points(utc(2024, 10, 26, 22), 25, value=2) + [point(utc(2024, 10, 27, 23), 100)]
    before_yesterday = hourly_points(utc(2024, 10, 25, 22), 24, value=1)
    day_buckets = [_bucket("2024-10-20", 300), _bucket("2024-10-21", 500), _bucket("2024-10-22", 500)]

    summary = stats.counter_summary(
        before_yesterday_points=before_yesterday,
        yesterday_points=yesterday,
        first_timestamp=utc(2020, 1, 1),
        last_timestamp=utc(2024, 10, 28, 8),
        total_passages=123456,
        day_buckets=day_buckets,
        now=now,
    )

    assert summary.yesterday == 50
    assert summary.before_yesterday == 24
    assert summary.last_passage_yesterday == utc(2024, 10, 27, 22)
    assert summary.last_passage_before_yesterday == utc(2024, 10, 26, 21)
    assert summary.total_passages == 123456
    assert summary.max_day is not None
    assert (summary.max_day.date, summary.max_day.value) == (date(2024, 10, 21), 500)


def test_counter_summary_without_data(winter_now: datetime) -> None:
    summary = stats.counter_summary([], [], None, None, 0, [], winter_now)
    assert summary.yesterday == 0
    assert summary.max_day is None
    assert summary.last_passage_yesterday is None


def test_day_hourly_profile_on_fall_back_day_repeats_2h() -> None:
    profile = stats.day_hourly_profile(hourly_points(utc(2024, 10, 26, 22), 25), date(2024, 10, 27))
    assert len(profile.values) == 25
    assert profile.values == [1] * 25
    assert profile.labels[:4] == ["0h", "1h", "2h", "2h"]
    assert profile.labels[-1] == "23h"


def test_day_hourly_profile_on_spring_forward_day_skips_2h() -> None:
    profile = stats.day_hourly_profile([], date(2024, 3, 31))
    assert len(profile.index) == 23
    assert profile.labels[:3] == ["0h", "1h", "3h"]
    assert profile.values == [0] * 23


def test_daily_distribution_counts_spine_days() -> None:
    buckets = [_bucket("2024-01-01", 10), _bucket("2024-01-08", 20)]

    result = stats.daily_distribution(buckets, date(2024, 1, 1), date(2024, 1, 14))

    monday = result.distribution[0]
    assert (monday.name, monday.day_of_week, monday.total, monday.count, monday.average) == (
        "monday",
        1,
        30,
        2,
        15,
    )
    sunday = result.distribution[6]
    assert (sunday.day_of_week, sunday.total, sunday.count) == (7, 0, 2)


def test_weekly_averages_skip_quiet_days() -> None:
    buckets = [
        _bucket("2024-12-31", 1000),
        _bucket("2025-01-01", 100),
        _bucket("2025-01-02", 40),
        _bucket("2025-01-03", 200),
    ]

    rows = stats.weekly_averages_for_year(buckets, 2025, min_daily_total=50)

    assert rows[0].week == "2024-12-30"
    assert rows[0].value == 150
    assert rows[1].value == 0
    assert rows[-1].week == "2025-12-29"
    assert len(rows) == 53


def test_global_weekly_comparison_stops_at_current_week(winter_now: datetime) -> None:
    current = [_bucket("2025-01-02", 100), _bucket("2025-01-13", 500)]
    previous = [_bucket("2024-01-03", 80), _bucket("2024-06-12", 120)]

    result = stats.global_weekly_comparison(current, previous, winter_now)

    assert [row.week for row in result.current_year] == ["2024-12-30", "2025-01-06", "2025-01-13"]
    assert all(row.year == 2025 for row in result.current_year)
    assert result.current_year[2].value == 500
    assert result.current_year_total == 100
    assert len(result.previous_year) == 53
    assert result.previous_year[0].year == 2024
    assert result.previous_year_total == 200


def test_counter_activity_window(winter_now: datetime) -> None:
    assert stats.is_counter_active(winter_now - timedelta(days=13), winter_now) is True
    assert stats.is_counter_active(winter_now - timedelta(days=15), winter_now) is False
    assert stats.is_counter_active(None, winter_now) is False
    assert stats.active_since(winter_now, 14) == utc(2025, 1, 1, 9)


def test_global_summary_counts_distinct_counters() -> None:
    summary = stats.global_summary(10, utc(2020, 1, 1), ["a", "b", "a"], ["b"])
    assert (summary.total_counters, summary.active_counters, summary.total_passages) == (2, 1, 10)


def test_weather_snapshot() -> None:
    snapshot = stats.weather_snapshot(
        [
            _observation(utc(2025, 1, 14, 16), temperature=14.5, rain=0.2, cloud_cover=90, weather_code=61),
            _observation(utc(2025, 1, 14, 8), temperature=10.0, rain=0.0, cloud_cover=50, weather_code=1),
        ]
    )
    assert snapshot.temperature == 14.5
    assert snapshot.is_raining is True
    assert snapshot.is_cloudy is True
    assert snapshot.description == "Light rain"


def test_weather_snapshot_reads_weather_codes() -> None:
    raining = stats.weather_snapshot(
        [_observation(utc(2025, 1, 14, 9), rain=0.0, cloud_cover=20, weather_code=63)]
    )
    overcast = stats.weather_snapshot([_observation(utc(2025, 1, 14, 9), weather_code=3)])

    assert (raining.is_raining, raining.is_cloudy) == (True, False)
    assert raining.description == "Moderate rain"
    assert (overcast.is_raining, overcast.is_cloudy) == (False, True)


def test_weather_snapshot_without_observations() -> None:
    snapshot = stats.weather_snapshot([])
    assert snapshot.temperature is None
    assert snapshot.is_raining is False
    assert snapshot.is_cloudy is False
    assert snapshot.description is None


def test_daily_highlights_split_weather_by_paris_day(winter_now: datetime) -> None:
    observations = [
        _observation(utc(2025, 1, 13, 12), temperature=8.0),
        _observation(utc(2025, 1, 13, 23, 30), temperature=3.0),  # 14 January in Paris
        _observation(utc(2025, 1, 14, 12), temperature=11.0, rain=1.2),
        _observation(utc(2025, 1, 15, 8), temperature=6.0, cloud_cover=95),
    ]

    highlights = stats.daily_highlights(1500, 1700, observations, winter_now)

    assert highlights.passages.day_before_yesterday == 1500
    assert highlights.passages.yesterday == 1700
    assert highlights.weather.day_before_yesterday.temperature == 8.0
    assert highlights.weather.yesterday.temperature == 11.0
    assert highlights.weather.yesterday.is_raining is True
    assert highlights.weather.today.is_cloudy is True
    assert highlights.weather.today.is_raining is False
