"""Infrastructure implementation for system health checks."""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import Iterable, List

import structlog
from pymongo.errors import PyMongoError

from src.domain.entities.health import DependencyStatus, ServiceStatus, SystemHealth
from src.domain.ports.health_check import IHealthCheckService
from src.infrastructure.database.mongo_database import MongoDatabase

logger = structlog.get_logger(__name__)


class HealthCheckService(IHealthCheckService):
    """Probe the time-series database and aggregate the result."""

    def __init__(self, mongo_database: MongoDatabase, *, timeout: float = 5.0) -> None:
        self._mongo_database = mongo_database
        self._timeout = timeout

    async def evaluate(self) -> SystemHealth:
        dependency_statuses: List[DependencyStatus] = [await self._check_mongo()]
        overall_status = self._aggregate_status(dependency_statuses)
        return SystemHealth(status=overall_status, dependencies=dependency_statuses)

    def _aggregate_status(self, statuses: Iterable[DependencyStatus]) -> ServiceStatus:
        has_unknown = False
        has_degraded = False

        for status in statuses:
            if status.status == ServiceStatus.DOWN:
                return ServiceStatus.DOWN
            if status.status == ServiceStatus.DEGRADED:
                has_degraded = True
            if status.status == ServiceStatus.UNKNOWN:
                has_unknown = True

        if has_degraded:
            return ServiceStatus.DEGRADED
        if has_unknown:
            return ServiceStatus.UNKNOWN
        return ServiceStatus.UP

    async def _check_mongo(self) -> DependencyStatus:
        if not self._mongo_database:
            return DependencyStatus(
                name="mongo",
                status=ServiceStatus.UNKNOWN,
                message="Mongo database client not configured.",
            )

        start = perf_counter()
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self._mongo_database.client.admin.command, "ping"),
                timeout=self._timeout,
            )
        except (PyMongoError, asyncio.TimeoutError) as exc:
            latency_ms = (perf_counter() - start) * 1000
            logger.warning("health.mongo_ping_failed", error=str(exc))
            return DependencyStatus(
                name="mongo",
                status=ServiceStatus.DOWN,
                message=f"MongoDB ping failed: {exc}",
                latency_ms=latency_ms,
            )

        latency_ms = (perf_counter() - start) * 1000
        return DependencyStatus(
            name="mongo",
            status=ServiceStatus.UP,
            message="MongoDB ping successful",
            latency_ms=latency_ms,
            details={
                "database": self._mongo_database.db.name,
                "collections": [
                    self._mongo_database.counters_collection,
                    self._mongo_database.weather_collection,
                ],
            },
        )
