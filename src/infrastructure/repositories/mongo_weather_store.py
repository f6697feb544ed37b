"""
Infrastructure Repository - Weather MongoDB Implementation

Reads hourly observations from the ``weather_timeseries`` collection, where
field names follow the upstream Open-Meteo payload.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from src.domain.entities.errors import SeriesStoreError
from src.domain.entities.time_series import WeatherObservation
from src.domain.repositories.weather_store import IWeatherStore
from src.domain.services.paris_calendar import ensure_utc
from src.infrastructure.database.mongo_database import MongoDatabase

logger = structlog.get_logger(__name__)


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


class MongoWeatherStore(IWeatherStore):
    """MongoDB implementation of the weather store."""

    def __init__(self, database: MongoDatabase):
        self.database = database
        self.collection_name = database.weather_collection

    @staticmethod
    def _to_observation(document: Dict[str, Any]) -> WeatherObservation:
        code = document.get("weather_code")
        return WeatherObservation(
            zone=str(document.get("zone", "")),
            timestamp_utc=ensure_utc(document["date"]),
            temperature=_optional_float(document.get("temperature_2m")),
            rain=_optional_float(document.get("rain")),
            cloud_cover=_optional_float(document.get("cloud_cover")),
            weather_code=int(code) if code is not None else None,
        )

    async def fetch_observations(
        self, zone: str, start_utc: datetime, end_utc: datetime
    ) -> List[WeatherObservation]:
        query = {
            "zone": zone,
            "date": {"$gte": ensure_utc(start_utc), "$lte": ensure_utc(end_utc)},
        }
        try:
            documents = await self.database.find_many(
                self.collection_name, query, sort_by="date", sort_direction=ASCENDING
            )
        except PyMongoError as e:
            logger.error(
                "weather_store.query_failed",
                zone=zone,
                collection=self.collection_name,
                error=str(e),
            )
            raise SeriesStoreError(
                "Weather observation query failed",
                details={"zone": zone, "error": str(e)},
            ) from e
        return [self._to_observation(document) for document in documents]
