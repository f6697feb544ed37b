"""
Repositories Package

This package contains interfaces defining the read contracts for the counter
and weather time series. Specific implementations are provided by the
infrastructure layer.
"""

from .series_store import ISeriesStore
from .weather_store import IWeatherStore

__all__ = ["ISeriesStore", "IWeatherStore"]
