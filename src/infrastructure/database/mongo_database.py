"""
MongoDB Database - Infrastructure Layer

This module provides the MongoDB client shared by the time-series stores.
It owns the connection, the collection names and the startup indexes. Query
helpers run the blocking pymongo calls in a worker thread.
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pymongo.errors
import structlog
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = structlog.get_logger(__name__)

DEFAULT_COUNTERS_COLLECTION = "counter_timeseries"
DEFAULT_WEATHER_COLLECTION = "weather_timeseries"


class MongoDatabase:
    """MongoDB database client."""

    def __init__(
        self,
        mongo_uri: str,
        db_name: str,
        counters_collection: str = DEFAULT_COUNTERS_COLLECTION,
        weather_collection: str = DEFAULT_WEATHER_COLLECTION,
    ):
        """
        Initialize the MongoDB database client.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Name of the database to use
            counters_collection: Collection holding counter points
            weather_collection: Collection holding weather observations
        """
        # tz_aware so that stored UTC dates come back as aware datetimes
        self.client: MongoClient = MongoClient(mongo_uri, tz_aware=True)
        self.db: Database = self.client[db_name]
        self.counters_collection = counters_collection
        self.weather_collection = weather_collection

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get a collection from the database.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB collection
        """
        return self.db[collection_name]

    async def find_one(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort: Optional[Sequence[Tuple[str, int]]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Find a single document in a collection.

        Args:
            collection_name: Name of the collection
            query: Query to match documents
            sort: Optional sort keys applied before picking

        Returns:
            The document if found, None otherwise
        """
        collection = self.db[collection_name]
        if sort:
            return await asyncio.to_thread(collection.find_one, query, sort=list(sort))
        return await asyncio.to_thread(collection.find_one, query)

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort_by: Optional[str] = None,
        sort_direction: int = ASCENDING,
        projection: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Find every document matching ``query``.

        Args:
            collection_name: Name of the collection
            query: Query to match documents
            sort_by: Field to sort by
            sort_direction: Sort direction (1 for ascending, -1 for descending)
            projection: Fields to return

        Returns:
            List of documents
        """

        def _run() -> List[Dict[str, Any]]:
            cursor = self.db[collection_name].find(query, projection)
            if sort_by:
                cursor = cursor.sort(sort_by, sort_direction)
            return list(cursor)

        return await asyncio.to_thread(_run)

    async def aggregate(
        self, collection_name: str, pipeline: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        """Run an aggregation pipeline and materialize its result."""

        def _run() -> List[Dict[str, Any]]:
            return list(self.db[collection_name].aggregate(pipeline))

        return await asyncio.to_thread(_run)

    async def distinct(
        self, collection_name: str, field: str, query: Optional[Dict[str, Any]] = None
    ) -> List[Any]:
        return await asyncio.to_thread(self.db[collection_name].distinct, field, query or {})

    def close(self) -> None:
        """Close the database connection."""
        self.client.close()

    def _safe_drop_index(self, collection_name: str, index_name: str) -> None:
        """
        Safely drop an index if it exists.

        Args:
            collection_name: Name of the collection
            index_name: Name of the index to drop
        """
        try:
            self.db[collection_name].drop_index(index_name)
        except pymongo.errors.OperationFailure:
            # Index doesn't exist, nothing to do
            pass

    async def create_indexes(self) -> None:
        """
        Create the indexes the statistics queries rely on.
        Called once during application startup.
        """
        counters = self.counters_collection
        self._safe_drop_index(counters, "date_idx")

        try:
            # One point per counter and timestamp
            self.db[counters].create_index(
                [("counter_id", ASCENDING), ("date", ASCENDING)],
                name="counter_date_unique_idx",
                unique=True,
                background=True,
            )
            self.db[counters].create_index(
                [("date", DESCENDING)], name="date_idx", background=True
            )
        except pymongo.errors.OperationFailure as e:
            logger.warning(
                "mongo.create_indexes_failed", collection=counters, error=str(e)
            )

        weather = self.weather_collection
        try:
            self.db[weather].create_index(
                [("zone", ASCENDING), ("date", ASCENDING)],
                name="zone_date_unique_idx",
                unique=True,
                background=True,
            )
        except pymongo.errors.OperationFailure as e:
            logger.warning(
                "mongo.create_indexes_failed", collection=weather, error=str(e)
            )
