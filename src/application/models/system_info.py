"""Lightweight settings structures consumed by the application layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SystemInfo:
    """Subset of configuration required by system-related use cases."""

    title: str
    description: str
    version: str
    environment: str
    git_commit: str
    build_time: str
    mongo_uri: str
    database_name: str


@dataclass(frozen=True)
class StatsOptions:
    """Tunables of the statistics views, read from the ``STATS_`` settings."""

    max_zero_run: int = 2
    min_weekly_daily_total: int = 50
    active_window_days: int = 14
    fetch_timeout_seconds: float = 10.0
    weather_zone: str = "montpellier"
