from __future__ import annotations

from typing import cast

import pytest
from pymongo.errors import PyMongoError

from src.domain.entities.errors import SeriesStoreError
from src.infrastructure.database.mongo_database import MongoDatabase
from src.infrastructure.repositories.mongo_weather_store import MongoWeatherStore
from tests.conftest import FakeMongoDatabase, utc


@pytest.mark.asyncio
async def test_fetch_observations_maps_open_meteo_fields(
    fake_mongo_database: FakeMongoDatabase,
) -> None:
    fake_mongo_database.get_collection("weather_timeseries").documents.extend(
        [
            {
                "zone": "montpellier",
                "date": utc(2025, 1, 14, 13),
                "temperature_2m": 12,
                "rain": 0.4,
                "cloud_cover": 85,
                "weather_code": 61.0,
            },
            {"zone": "montpellier", "date": utc(2025, 1, 14, 12), "temperature_2m": 11.5},
            {"zone": "sete", "date": utc(2025, 1, 14, 12), "temperature_2m": 30},
        ]
    )
    store = MongoWeatherStore(cast(MongoDatabase, fake_mongo_database))

    observations = await store.fetch_observations(
        "montpellier", utc(2025, 1, 13, 23), utc(2025, 1, 14, 22, 59)
    )

    assert [obs.timestamp_utc for obs in observations] == [utc(2025, 1, 14, 12), utc(2025, 1, 14, 13)]
    latest = observations[1]
    assert latest.temperature == 12.0
    assert latest.rain == 0.4
    assert latest.cloud_cover == 85.0
    assert latest.weather_code == 61
    assert observations[0].rain is None
    assert observations[0].weather_code is None


@pytest.mark.asyncio
async def test_fetch_observations_wraps_driver_errors(
    fake_mongo_database: FakeMongoDatabase,
) -> None:
    fake_mongo_database.error = PyMongoError("timeout")
    store = MongoWeatherStore(cast(MongoDatabase, fake_mongo_database))

    with pytest.raises(SeriesStoreError) as error:
        await store.fetch_observations("montpellier", utc(2025, 1, 1), utc(2025, 1, 2))

    assert error.value.details["zone"] == "montpellier"
