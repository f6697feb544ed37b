from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

import pytest

from src.domain.entities.errors import SeriesStoreError
from src.domain.entities.time_series import (
    Granularity,
    GroupedSum,
    Number,
    TimePoint,
    WeatherObservation,
)
from src.domain.repositories.series_store import ISeriesStore
from src.domain.repositories.weather_store import IWeatherStore
from src.domain.services.bucket_aggregator import bucket_by

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def point(timestamp: datetime, value: Number, series_key: str = "X2H22104775") -> TimePoint:
    return TimePoint(series_key=series_key, timestamp_utc=timestamp, value=value)


def hourly_points(
    start: datetime, hours: int, value: Number = 1, series_key: str = "X2H22104775"
) -> List[TimePoint]:
    return [point(start + timedelta(hours=offset), value, series_key) for offset in range(hours)]


class FakeSeriesStore(ISeriesStore):
    """In-memory series store; groups in process with the bucket aggregator."""

    def __init__(self, points: Iterable[TimePoint] = ()) -> None:
        self.points: List[TimePoint] = list(points)
        self.failing: Set[str] = set()
        self.delay: float = 0.0
        self.calls: List[Tuple[str, Any]] = []

    async def _enter(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if self.delay:
            await asyncio.sleep(self.delay)
        if operation in self.failing:
            raise SeriesStoreError(f"{operation} failed", details={"operation": operation})

    def _select(
        self,
        series_key: Optional[str],
        start_utc: Optional[datetime] = None,
        end_utc: Optional[datetime] = None,
    ) -> List[TimePoint]:
        return [
            item
            for item in self.points
            if (series_key is None or item.series_key == series_key)
            and (start_utc is None or item.timestamp_utc >= start_utc)
            and (end_utc is None or item.timestamp_utc <= end_utc)
        ]

    async def fetch_range(
        self, series_key: Optional[str], start_utc: datetime, end_utc: datetime
    ) -> List[TimePoint]:
        await self._enter("fetch_range", series_key, start_utc, end_utc)
        return sorted(self._select(series_key, start_utc, end_utc), key=lambda p: p.timestamp_utc)

    async def fetch_range_grouped_by_paris_bucket(
        self,
        series_key: Optional[str],
        start_utc: datetime,
        end_utc: datetime,
        granularity: Granularity,
    ) -> List[GroupedSum]:
        await self._enter("fetch_range_grouped_by_paris_bucket", series_key, granularity)
        buckets = bucket_by(self._select(series_key, start_utc, end_utc), granularity)
        return [GroupedSum(bucket_key=b.key, sum=b.sum, count=b.count) for b in buckets]

    async def first_and_last_timestamps(
        self, series_key: Optional[str]
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        await self._enter("first_and_last_timestamps", series_key)
        selected = self._select(series_key)
        if not selected:
            return None, None
        stamps = [item.timestamp_utc for item in selected]
        return min(stamps), max(stamps)

    async def total_value(
        self,
        series_key: Optional[str],
        start_utc: Optional[datetime] = None,
        end_utc: Optional[datetime] = None,
    ) -> Number:
        await self._enter("total_value", series_key, start_utc, end_utc)
        return sum((item.value for item in self._select(series_key, start_utc, end_utc)), 0)

    async def series_keys(self) -> List[str]:
        await self._enter("series_keys")
        return sorted({item.series_key for item in self.points})

    async def active_series_keys(self, since_utc: datetime) -> List[str]:
        await self._enter("active_series_keys", since_utc)
        return sorted({item.series_key for item in self._select(None, since_utc)})


class FakeWeatherStore(IWeatherStore):
    def __init__(self, observations: Iterable[WeatherObservation] = ()) -> None:
        self.observations = list(observations)
        self.fail = False
        self.requests: List[Tuple[str, datetime, datetime]] = []

    async def fetch_observations(
        self, zone: str, start_utc: datetime, end_utc: datetime
    ) -> List[WeatherObservation]:
        self.requests.append((zone, start_utc, end_utc))
        if self.fail:
            raise SeriesStoreError("weather unavailable")
        return [
            item
            for item in self.observations
            if item.zone == zone and start_utc <= item.timestamp_utc <= end_utc
        ]


class FakeCursor:
    def __init__(self, documents: Sequence[Dict[str, Any]]):
        self._documents = list(documents)

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._documents.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self._documents)


class FakeCollection:
    """Minimal pymongo collection: equality and $gte/$lte range queries."""

    def __init__(self) -> None:
        self.documents: List[Dict[str, Any]] = []
        self.pipelines: List[List[Dict[str, Any]]] = []
        self.aggregate_result: List[Dict[str, Any]] = []
        self.last_query: Dict[str, Any] | None = None
        self.dropped_indexes: List[str] = []
        self.created_indexes: List[tuple[Any, ...]] = []

    def find(self, query: Dict[str, Any], projection: Any = None) -> FakeCursor:
        self.last_query = query
        return FakeCursor([doc for doc in self.documents if self._matches(doc, query)])

    def find_one(self, query: Dict[str, Any], sort: Any = None) -> Dict[str, Any] | None:
        cursor = self.find(query)
        if sort:
            key, direction = sort[0]
            cursor.sort(key, direction)
        return next(iter(cursor), None)

    def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        self.pipelines.append(pipeline)
        return list(self.aggregate_result)

    def distinct(self, field: str, query: Dict[str, Any]) -> List[Any]:
        self.last_query = query
        return list({doc[field] for doc in self.documents if self._matches(doc, query)})

    def drop_index(self, index_name: str) -> None:
        self.dropped_indexes.append(index_name)

    def create_index(self, keys: Any, name: str | None = None, **kwargs: Any) -> Any:
        self.created_indexes.append((keys, name, kwargs))
        return name or keys

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        for key, condition in query.items():
            value = document.get(key)
            if isinstance(condition, dict):
                if "$gte" in condition and not value >= condition["$gte"]:
                    return False
                if "$lte" in condition and not value <= condition["$lte"]:
                    return False
            elif value != condition:
                return False
        return True


class FakeMongoDatabase:
    """Stand-in for ``MongoDatabase`` exposing the async query helpers."""

    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}
        self.counters_collection = "counter_timeseries"
        self.weather_collection = "weather_timeseries"
        self.error: Exception | None = None

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    async def find_one(
        self, collection_name: str, query: Dict[str, Any], sort: Any = None
    ) -> Any:
        self._check()
        return self.get_collection(collection_name).find_one(query, sort=sort)

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort_by: str | None = None,
        sort_direction: int = 1,
        projection: Dict[str, Any] | None = None,
    ) -> List[Dict[str, Any]]:
        self._check()
        cursor = self.get_collection(collection_name).find(query, projection)
        if sort_by:
            cursor.sort(sort_by, sort_direction)
        return list(cursor)

    async def aggregate(
        self, collection_name: str, pipeline: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        self._check()
        return self.get_collection(collection_name).aggregate(pipeline)

    async def distinct(
        self, collection_name: str, field: str, query: Dict[str, Any] | None = None
    ) -> List[Any]:
        self._check()
        return self.get_collection(collection_name).distinct(field, query or {})

    async def create_indexes(self) -> None:  # pragma: no cover - stub for tests
        pass

    def close(self) -> None:
        pass


@pytest.fixture()
def fake_mongo_database() -> FakeMongoDatabase:
    return FakeMongoDatabase()


@pytest.fixture()
def series_store() -> FakeSeriesStore:
    return FakeSeriesStore()


@pytest.fixture()
def weather_store() -> FakeWeatherStore:
    return FakeWeatherStore()


@pytest.fixture()
def winter_now() -> datetime:
    # Wednesday 15 January 2025, 10:00 Paris
    return utc(2025, 1, 15, 9)
