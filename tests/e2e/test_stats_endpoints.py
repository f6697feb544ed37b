from __future__ import annotations

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from src.main.app import create_app
from src.main.container import get_container
from tests.conftest import FakeSeriesStore, FakeWeatherStore, hourly_points, point, utc


class _StubMongo:
    async def create_indexes(self):
        return None

    def close(self):
        return None


@pytest.fixture()
def series_points():
    return hourly_points(utc(2024, 10, 26, 22), 25, value=2, series_key="X2H22104775") + [
        point(utc(2025, 1, 6, 7), 10, "X2H22104775"),
        point(utc(2025, 1, 11, 9), 30, "X2H20063161"),
        point(utc(2024, 1, 8, 7), 5, "X2H22104775"),
    ]


@pytest.fixture()
def client(series_points):
    app = create_app()
    container = get_container()
    container.mongo_database.override(providers.Object(_StubMongo()))
    container.series_store.override(providers.Object(FakeSeriesStore(series_points)))
    container.weather_store.override(providers.Object(FakeWeatherStore()))

    with TestClient(app) as test_client:
        yield test_client


def test_evolution_endpoint(client):
    response = client.get(
        "/stats/evolution", params={"start_date": "2025-01-06", "end_date": "2025-01-12"}
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["currentPeriod"]) == 7
    assert body["currentPeriod"][0] == {"day": "2025-01-06", "total": 10, "count": 1}
    assert body["referenceLabel"] == "2024-01-06/2024-01-12"
    assert body["referencePeriod"][2]["total"] == 5


def test_evolution_endpoint_rejects_bad_input(client):
    reversed_range = client.get(
        "/stats/evolution", params={"start_date": "2025-01-12", "end_date": "2025-01-06"}
    )
    bad_date = client.get(
        "/stats/evolution", params={"start_date": "06/01/2025", "end_date": "2025-01-12"}
    )
    missing = client.get("/stats/evolution", params={"start_date": "2025-01-06"})

    assert reversed_range.status_code == 400
    assert bad_date.status_code == 400
    assert missing.status_code == 422


def test_weekday_weekend_endpoint(client):
    response = client.get(
        "/stats/weekday-weekend", params={"start_date": "2025-01-06", "end_date": "2025-01-12"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["weekdays"] == {"total": 10, "count": 5, "average": 2}
    assert body["weekends"] == {"total": 30, "count": 2, "average": 15}
    assert body["period"] == {"start": "2025-01-06", "end": "2025-01-12"}


def test_hourly_distribution_endpoint(client):
    response = client.get(
        "/stats/hourly-distribution",
        params={"start_date": "2025-01-06", "end_date": "2025-01-12", "day_class": "week"},
    )

    assert response.status_code == 200
    assert response.json()["distribution"] == [
        {"name": "8h", "hour": 8, "total": 10, "average": 10, "count": 1}
    ]


def test_summary_endpoint(client):
    response = client.get("/stats/summary")

    assert response.status_code == 200
    body = response.json()
    assert body["totalPassages"] == 95
    assert body["totalCounters"] == 2


def test_counter_day_profile_on_fall_back_day(client):
    response = client.get("/counters/X2H22104775/day/2024-10-27")

    assert response.status_code == 200
    body = response.json()
    assert len(body["values"]) == 25
    assert sum(body["values"]) == 50


def test_counter_week_hourly_endpoint(client):
    ok = client.get("/counters/X2H22104775/hourly/2025/2")
    missing_week = client.get("/counters/X2H22104775/hourly/2024/53")

    assert ok.status_code == 200
    assert ok.json()["week"]["stats"]["monday"][8]["value"] == 10
    assert ok.json()["availableYears"] == {"start": 2024, "end": 2025}
    assert missing_week.status_code == 400


def test_counter_available_weeks_endpoint(client):
    response = client.get("/counters/X2H22104775/hourly/2024/weeks")

    assert response.status_code == 200
    assert response.json() == {"year": 2024, "weeks": [2, 43]}


def test_counter_yearly_endpoint(client):
    response = client.get("/counters/X2H22104775/yearly")

    assert response.status_code == 200
    assert response.json() == [{"year": 2024, "total": 55}, {"year": 2025, "total": 10}]
