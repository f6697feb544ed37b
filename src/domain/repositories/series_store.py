"""
Series Store Interface

Read-only access to counter time series. Implementations live in the
infrastructure layer; the statistics use cases only depend on this contract.
A ``series_key`` of ``None`` means "all series" (global statistics).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from src.domain.entities.time_series import Granularity, GroupedSum, Number, TimePoint


class ISeriesStore(ABC):
    """Interface for counter time-series stores."""

    @abstractmethod
    async def fetch_range(
        self, series_key: Optional[str], start_utc: datetime, end_utc: datetime
    ) -> List[TimePoint]:
        """
        Fetch raw points with ``start_utc <= timestamp <= end_utc``.

        Args:
            series_key: Counter identifier, or None for every counter
            start_utc: Inclusive lower bound
            end_utc: Inclusive upper bound

        Returns:
            Points ordered by timestamp ascending
        """
        pass

    @abstractmethod
    async def fetch_range_grouped_by_paris_bucket(
        self,
        series_key: Optional[str],
        start_utc: datetime,
        end_utc: datetime,
        granularity: Granularity,
    ) -> List[GroupedSum]:
        """
        Server-side equivalent of the bucket aggregator.

        Rows must carry the same keys, sums and point counts as bucketing the
        ``fetch_range`` result in process. Only buckets with data are returned.
        """
        pass

    @abstractmethod
    async def first_and_last_timestamps(
        self, series_key: Optional[str]
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        """Earliest and latest point timestamps, ``(None, None)`` when empty."""
        pass

    @abstractmethod
    async def total_value(
        self,
        series_key: Optional[str],
        start_utc: Optional[datetime] = None,
        end_utc: Optional[datetime] = None,
    ) -> Number:
        """Sum of values, optionally restricted to an inclusive UTC range."""
        pass

    @abstractmethod
    async def series_keys(self) -> List[str]:
        pass

    @abstractmethod
    async def active_series_keys(self, since_utc: datetime) -> List[str]:
        """Series with at least one point at or after ``since_utc``."""
        pass
