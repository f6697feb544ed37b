"""Weather Store Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from src.domain.entities.time_series import WeatherObservation


class IWeatherStore(ABC):
    """Interface for weather observation stores."""

    @abstractmethod
    async def fetch_observations(
        self, zone: str, start_utc: datetime, end_utc: datetime
    ) -> List[WeatherObservation]:
        """
        Fetch observations of ``zone`` within an inclusive UTC range.

        Returns:
            Observations ordered by timestamp ascending
        """
        pass
