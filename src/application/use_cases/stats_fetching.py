"""
Shared fetching helpers for the statistics use cases.

Every store call goes through ``_safe_fetch``: it is bounded by the configured
timeout and, on failure, logged and replaced by an empty default so that the
view still renders (as an empty chart) and sibling fetches are unaffected.
"""

import asyncio
from datetime import date, datetime
from typing import Awaitable, List, Optional, Tuple, TypeVar

import structlog

from src.application.models import StatsOptions
from src.domain.entities.errors import SeriesStoreError
from src.domain.entities.time_series import Bucket, Granularity, Number, TimePoint
from src.domain.repositories.series_store import ISeriesStore
from src.domain.services.paris_calendar import date_range_bounds_paris

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class StatsUseCase:
    """Base class of the statistics use cases."""

    def __init__(self, series_store: ISeriesStore, options: Optional[StatsOptions] = None):
        self._series_store = series_store
        self._options = options or StatsOptions()

    async def _safe_fetch(self, operation: str, awaitable: Awaitable[T], default: T) -> T:
        try:
            return await asyncio.wait_for(
                awaitable, timeout=self._options.fetch_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(
                "stats.fetch_failed",
                operation=operation,
                error="timeout",
                timeout_seconds=self._options.fetch_timeout_seconds,
            )
        except SeriesStoreError as e:
            logger.warning(
                "stats.fetch_failed",
                operation=operation,
                error=e.message,
                details=e.details,
            )
        return default

    async def _points(
        self, series_key: Optional[str], start: datetime, end: datetime
    ) -> List[TimePoint]:
        return await self._safe_fetch(
            "fetch_range", self._series_store.fetch_range(series_key, start, end), []
        )

    async def _points_between(
        self, series_key: Optional[str], start: date, end: date
    ) -> List[TimePoint]:
        bounds = date_range_bounds_paris(start, end)
        return await self._points(series_key, bounds.start_utc, bounds.end_utc)

    async def _buckets(
        self,
        series_key: Optional[str],
        start: date,
        end: date,
        granularity: Granularity = Granularity.DAY,
    ) -> List[Bucket]:
        """Grouped buckets covering the Paris dates ``start``..``end``."""
        bounds = date_range_bounds_paris(start, end)
        rows = await self._safe_fetch(
            f"fetch_grouped_{granularity.value}",
            self._series_store.fetch_range_grouped_by_paris_bucket(
                series_key, bounds.start_utc, bounds.end_utc, granularity
            ),
            [],
        )
        return [row.to_bucket() for row in rows]

    async def _first_and_last(
        self, series_key: Optional[str]
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        return await self._safe_fetch(
            "first_and_last_timestamps",
            self._series_store.first_and_last_timestamps(series_key),
            (None, None),
        )

    async def _total(
        self,
        series_key: Optional[str],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Number:
        return await self._safe_fetch(
            "total_value", self._series_store.total_value(series_key, start, end), 0
        )
