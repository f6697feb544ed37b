"""
Infrastructure Repository - Counter series MongoDB Implementation

Reads counter points from the ``counter_timeseries`` collection. Documents
look like ``{"counter_id": str, "date": UTC datetime, "value": number}``.

Server-side grouping converts dates to Europe/Paris inside the aggregation
pipeline so that its bucket keys match the in-process bucket aggregator.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import structlog
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from src.domain.entities.errors import SeriesStoreError
from src.domain.entities.time_series import Granularity, GroupedSum, Number, TimePoint
from src.domain.repositories.series_store import ISeriesStore
from src.domain.services.paris_calendar import ensure_utc
from src.infrastructure.database.mongo_database import MongoDatabase
from src.shared.consts import PARIS_TIMEZONE

logger = structlog.get_logger(__name__)

_POINT_PROJECTION = {"_id": 0, "counter_id": 1, "date": 1, "value": 1}


def paris_bucket_expression(granularity: Granularity) -> Dict[str, Any]:
    """Aggregation expression producing the bucket key of ``$date``."""
    if granularity is Granularity.DAY:
        return {
            "$dateToString": {"format": "%Y-%m-%d", "date": "$date", "timezone": PARIS_TIMEZONE}
        }
    if granularity is Granularity.MONTH:
        return {
            "$dateToString": {"format": "%Y-%m", "date": "$date", "timezone": PARIS_TIMEZONE}
        }
    if granularity is Granularity.WEEK:
        return {
            "$dateToString": {
                "format": "%Y-%m-%d",
                "date": {
                    "$dateTrunc": {
                        "date": "$date",
                        "unit": "week",
                        "timezone": PARIS_TIMEZONE,
                        "startOfWeek": "monday",
                    }
                },
                "timezone": PARIS_TIMEZONE,
            }
        }
    return {"$toString": {"$hour": {"date": "$date", "timezone": PARIS_TIMEZONE}}}


class MongoSeriesStore(ISeriesStore):
    """MongoDB implementation of the counter series store."""

    def __init__(self, database: MongoDatabase):
        self.database = database
        self.collection_name = database.counters_collection

    @staticmethod
    def _match(
        series_key: Optional[str],
        start_utc: Optional[datetime] = None,
        end_utc: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if series_key is not None:
            query["counter_id"] = series_key
        date_range: Dict[str, datetime] = {}
        if start_utc is not None:
            date_range["$gte"] = ensure_utc(start_utc)
        if end_utc is not None:
            date_range["$lte"] = ensure_utc(end_utc)
        if date_range:
            query["date"] = date_range
        return query

    @staticmethod
    def _to_point(document: Dict[str, Any]) -> TimePoint:
        return TimePoint(
            series_key=str(document.get("counter_id", "")),
            timestamp_utc=ensure_utc(document["date"]),
            value=document.get("value") or 0,
        )

    def _failure(self, operation: str, error: PyMongoError, **context: Any) -> SeriesStoreError:
        logger.error(
            "series_store.query_failed",
            operation=operation,
            collection=self.collection_name,
            error=str(error),
            **context,
        )
        return SeriesStoreError(
            f"Counter series query '{operation}' failed",
            details={"error": str(error), **context},
        )

    async def fetch_range(
        self, series_key: Optional[str], start_utc: datetime, end_utc: datetime
    ) -> List[TimePoint]:
        try:
            documents = await self.database.find_many(
                self.collection_name,
                self._match(series_key, start_utc, end_utc),
                sort_by="date",
                sort_direction=ASCENDING,
                projection=_POINT_PROJECTION,
            )
        except PyMongoError as e:
            raise self._failure("fetch_range", e, series_key=series_key) from e
        return [self._to_point(document) for document in documents]

    async def fetch_range_grouped_by_paris_bucket(
        self,
        series_key: Optional[str],
        start_utc: datetime,
        end_utc: datetime,
        granularity: Granularity,
    ) -> List[GroupedSum]:
        pipeline = [
            {"$match": self._match(series_key, start_utc, end_utc)},
            {
                "$group": {
                    "_id": paris_bucket_expression(granularity),
                    "sum": {"$sum": "$value"},
                    "count": {"$sum": 1},
                }
            },
            {"$sort": {"_id": 1}},
        ]
        try:
            rows = await self.database.aggregate(self.collection_name, pipeline)
        except PyMongoError as e:
            raise self._failure(
                "fetch_range_grouped_by_paris_bucket",
                e,
                series_key=series_key,
                granularity=granularity.value,
            ) from e

        grouped = [
            GroupedSum(bucket_key=str(row["_id"]), sum=row.get("sum") or 0, count=row.get("count", 0))
            for row in rows
        ]
        if granularity is Granularity.HOUR:
            grouped.sort(key=lambda row: int(row.bucket_key))
        return grouped

    async def first_and_last_timestamps(
        self, series_key: Optional[str]
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        query = self._match(series_key)
        try:
            first = await self.database.find_one(
                self.collection_name, query, sort=[("date", ASCENDING)]
            )
            last = await self.database.find_one(
                self.collection_name, query, sort=[("date", DESCENDING)]
            )
        except PyMongoError as e:
            raise self._failure("first_and_last_timestamps", e, series_key=series_key) from e
        return (
            ensure_utc(first["date"]) if first else None,
            ensure_utc(last["date"]) if last else None,
        )

    async def total_value(
        self,
        series_key: Optional[str],
        start_utc: Optional[datetime] = None,
        end_utc: Optional[datetime] = None,
    ) -> Number:
        pipeline = [
            {"$match": self._match(series_key, start_utc, end_utc)},
            {"$group": {"_id": None, "total": {"$sum": "$value"}}},
        ]
        try:
            rows = await self.database.aggregate(self.collection_name, pipeline)
        except PyMongoError as e:
            raise self._failure("total_value", e, series_key=series_key) from e
        if not rows:
            return 0
        return rows[0].get("total") or 0

    async def series_keys(self) -> List[str]:
        try:
            keys = await self.database.distinct(self.collection_name, "counter_id")
        except PyMongoError as e:
            raise self._failure("series_keys", e) from e
        return sorted(str(key) for key in keys)

    async def active_series_keys(self, since_utc: datetime) -> List[str]:
        try:
            keys = await self.database.distinct(
                self.collection_name,
                "counter_id",
                {"date": {"$gte": ensure_utc(since_utc)}},
            )
        except PyMongoError as e:
            raise self._failure(
                "active_series_keys", e, since=ensure_utc(since_utc).isoformat()
            ) from e
        return sorted(str(key) for key in keys)
