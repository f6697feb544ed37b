"""
Repositories Package - Infrastructure Layer

This package contains the MongoDB implementations of the series store
interfaces defined in the domain layer.
"""

from .mongo_series_store import MongoSeriesStore
from .mongo_weather_store import MongoWeatherStore

__all__ = ["MongoSeriesStore", "MongoWeatherStore"]
