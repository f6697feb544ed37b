"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from contextlib import asynccontextmanager

from dependency_injector import containers, providers

from src.application.models import StatsOptions, SystemInfo
from src.application.use_cases.counter_stats_use_cases import (
    GetCounterActivityUseCase,
    GetCounterAvailableWeeksUseCase,
    GetCounterCurrentWeekHourlyUseCase,
    GetCounterDailyStatsUseCase,
    GetCounterDayProfileUseCase,
    GetCounterSummaryUseCase,
    GetCounterWeekHourlyUseCase,
    GetCounterWeeklyComparisonUseCase,
    GetCounterYearlyProgressUseCase,
    GetCounterYearlyTotalsUseCase,
)
from src.application.use_cases.global_stats_use_cases import (
    GetAvailableYearsUseCase,
    GetDailyDistributionUseCase,
    GetDailyHighlightsUseCase,
    GetDailyTotalsByWeekdayUseCase,
    GetEvolutionUseCase,
    GetGlobalSummaryUseCase,
    GetGlobalWeeklyComparisonUseCase,
    GetHourlyDistributionUseCase,
    GetWeekdayWeekendSplitUseCase,
)
from src.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
)
from src.infrastructure.database import MongoDatabase
from src.infrastructure.repositories import MongoSeriesStore, MongoWeatherStore
from src.infrastructure.services import HealthCheckService
from src.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependency-injector."""

    wiring_config = containers.WiringConfiguration(
        packages=["..presentation", "..application"]
    )

    # Settings
    config = providers.Configuration()

    # Infrastructure
    mongo_database = providers.Singleton(
        MongoDatabase,
        mongo_uri=config.database.mongo_uri,
        db_name=config.database.database_name,
        counters_collection=config.database.counters_collection,
        weather_collection=config.database.weather_collection,
    )

    series_store = providers.Singleton(MongoSeriesStore, database=mongo_database)

    weather_store = providers.Singleton(MongoWeatherStore, database=mongo_database)

    health_check_service = providers.Singleton(
        HealthCheckService,
        mongo_database=mongo_database,
        timeout=config.database.ping_timeout_seconds,
    )

    system_info = providers.Singleton(
        SystemInfo,
        title=config.app.title,
        description=config.app.description,
        version=config.app.version,
        environment=providers.Callable(
            lambda env: env.value if hasattr(env, "value") else str(env),
            config.environment,
        ),
        git_commit=config.app.git_commit,
        build_time=config.app.build_time,
        mongo_uri=config.database.mongo_uri,
        database_name=config.database.database_name,
    )

    stats_options = providers.Singleton(
        StatsOptions,
        max_zero_run=config.stats.max_zero_run,
        min_weekly_daily_total=config.stats.min_weekly_daily_total,
        active_window_days=config.stats.active_window_days,
        fetch_timeout_seconds=config.stats.fetch_timeout_seconds,
        weather_zone=config.stats.weather_zone,
    )

    # Application (use cases) - system
    get_health_status_use_case = providers.Factory(
        GetHealthStatusUseCase,
        health_check_service=health_check_service,
    )

    get_application_info_use_case = providers.Factory(
        GetApplicationInfoUseCase,
        health_check_service=health_check_service,
        system_info=system_info,
    )

    # Application (use cases) - counters
    get_counter_summary_use_case = providers.Factory(
        GetCounterSummaryUseCase, series_store=series_store, options=stats_options
    )

    get_counter_daily_stats_use_case = providers.Factory(
        GetCounterDailyStatsUseCase, series_store=series_store, options=stats_options
    )

    get_counter_weekly_comparison_use_case = providers.Factory(
        GetCounterWeeklyComparisonUseCase,
        series_store=series_store,
        options=stats_options,
    )

    get_counter_yearly_totals_use_case = providers.Factory(
        GetCounterYearlyTotalsUseCase, series_store=series_store, options=stats_options
    )

    get_counter_yearly_progress_use_case = providers.Factory(
        GetCounterYearlyProgressUseCase,
        series_store=series_store,
        options=stats_options,
    )

    get_counter_current_week_hourly_use_case = providers.Factory(
        GetCounterCurrentWeekHourlyUseCase,
        series_store=series_store,
        options=stats_options,
    )

    get_counter_week_hourly_use_case = providers.Factory(
        GetCounterWeekHourlyUseCase, series_store=series_store, options=stats_options
    )

    get_counter_available_weeks_use_case = providers.Factory(
        GetCounterAvailableWeeksUseCase,
        series_store=series_store,
        options=stats_options,
    )

    get_counter_day_profile_use_case = providers.Factory(
        GetCounterDayProfileUseCase, series_store=series_store, options=stats_options
    )

    get_counter_activity_use_case = providers.Factory(
        GetCounterActivityUseCase, series_store=series_store, options=stats_options
    )

    # Application (use cases) - every counter
    get_global_summary_use_case = providers.Factory(
        GetGlobalSummaryUseCase, series_store=series_store, options=stats_options
    )

    get_daily_highlights_use_case = providers.Factory(
        GetDailyHighlightsUseCase,
        series_store=series_store,
        weather_store=weather_store,
        options=stats_options,
    )

    get_global_daily_stats_use_case = providers.Factory(
        GetCounterDailyStatsUseCase, series_store=series_store, options=stats_options
    )

    get_daily_totals_by_weekday_use_case = providers.Factory(
        GetDailyTotalsByWeekdayUseCase, series_store=series_store, options=stats_options
    )

    get_evolution_use_case = providers.Factory(
        GetEvolutionUseCase, series_store=series_store, options=stats_options
    )

    get_weekday_weekend_split_use_case = providers.Factory(
        GetWeekdayWeekendSplitUseCase, series_store=series_store, options=stats_options
    )

    get_daily_distribution_use_case = providers.Factory(
        GetDailyDistributionUseCase, series_store=series_store, options=stats_options
    )

    get_hourly_distribution_use_case = providers.Factory(
        GetHourlyDistributionUseCase, series_store=series_store, options=stats_options
    )

    get_global_weekly_comparison_use_case = providers.Factory(
        GetGlobalWeeklyComparisonUseCase,
        series_store=series_store,
        options=stats_options,
    )

    get_available_years_use_case = providers.Factory(
        GetAvailableYearsUseCase, series_store=series_store, options=stats_options
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan():
    """
    Centralized lifecycle management for external resources.

    Creates the time-series indexes on startup and closes the MongoDB
    client on shutdown.
    """
    container = get_container()
    mongo_database = container.mongo_database()

    try:
        logger.info("container.mongo.ensure_connection")
        await mongo_database.create_indexes()
        logger.info("container.resources.initialized")
        yield container

    finally:
        logger.info("container.mongo.close")
        mongo_database.close()
        logger.info("container.resources.shutdown")
