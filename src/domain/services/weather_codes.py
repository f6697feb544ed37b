"""Open-Meteo WMO weather code helpers."""

from enum import IntEnum
from typing import Optional


class WeatherCode(IntEnum):
    CLEAR = 0
    MOSTLY_CLEAR = 1
    PARTLY_CLOUDY = 2
    OVERCAST = 3
    FOG = 45
    RIMING_FOG = 48
    LIGHT_DRIZZLE = 51
    MODERATE_DRIZZLE = 53
    DENSE_DRIZZLE = 55
    LIGHT_FREEZING_DRIZZLE = 56
    DENSE_FREEZING_DRIZZLE = 57
    LIGHT_RAIN = 61
    MODERATE_RAIN = 63
    HEAVY_RAIN = 65
    LIGHT_FREEZING_RAIN = 66
    HEAVY_FREEZING_RAIN = 67
    LIGHT_SNOW = 71
    MODERATE_SNOW = 73
    HEAVY_SNOW = 75
    SNOW_GRAINS = 77
    LIGHT_SHOWERS = 80
    MODERATE_SHOWERS = 81
    VIOLENT_SHOWERS = 82
    LIGHT_SNOW_SHOWERS = 85
    HEAVY_SNOW_SHOWERS = 86
    THUNDERSTORM = 95
    THUNDERSTORM_HAIL = 96
    THUNDERSTORM_HEAVY_HAIL = 99


# Liquid precipitation only, snow codes are not rain.
RAIN_CODES = frozenset(
    {
        WeatherCode.LIGHT_DRIZZLE,
        WeatherCode.MODERATE_DRIZZLE,
        WeatherCode.DENSE_DRIZZLE,
        WeatherCode.LIGHT_FREEZING_DRIZZLE,
        WeatherCode.DENSE_FREEZING_DRIZZLE,
        WeatherCode.LIGHT_RAIN,
        WeatherCode.MODERATE_RAIN,
        WeatherCode.HEAVY_RAIN,
        WeatherCode.LIGHT_FREEZING_RAIN,
        WeatherCode.HEAVY_FREEZING_RAIN,
        WeatherCode.LIGHT_SHOWERS,
        WeatherCode.MODERATE_SHOWERS,
        WeatherCode.VIOLENT_SHOWERS,
        WeatherCode.THUNDERSTORM,
        WeatherCode.THUNDERSTORM_HAIL,
        WeatherCode.THUNDERSTORM_HEAVY_HAIL,
    }
)

CLOUDY_CODES = frozenset(
    {WeatherCode.MOSTLY_CLEAR, WeatherCode.PARTLY_CLOUDY, WeatherCode.OVERCAST}
)

DESCRIPTIONS = {
    WeatherCode.CLEAR: "Clear sky",
    WeatherCode.MOSTLY_CLEAR: "Mainly clear",
    WeatherCode.PARTLY_CLOUDY: "Partly cloudy",
    WeatherCode.OVERCAST: "Overcast",
    WeatherCode.FOG: "Fog",
    WeatherCode.RIMING_FOG: "Depositing rime fog",
    WeatherCode.LIGHT_DRIZZLE: "Light drizzle",
    WeatherCode.MODERATE_DRIZZLE: "Moderate drizzle",
    WeatherCode.DENSE_DRIZZLE: "Dense drizzle",
    WeatherCode.LIGHT_FREEZING_DRIZZLE: "Light freezing drizzle",
    WeatherCode.DENSE_FREEZING_DRIZZLE: "Dense freezing drizzle",
    WeatherCode.LIGHT_RAIN: "Light rain",
    WeatherCode.MODERATE_RAIN: "Moderate rain",
    WeatherCode.HEAVY_RAIN: "Heavy rain",
    WeatherCode.LIGHT_FREEZING_RAIN: "Light freezing rain",
    WeatherCode.HEAVY_FREEZING_RAIN: "Heavy freezing rain",
    WeatherCode.LIGHT_SNOW: "Light snow",
    WeatherCode.MODERATE_SNOW: "Moderate snow",
    WeatherCode.HEAVY_SNOW: "Heavy snow",
    WeatherCode.SNOW_GRAINS: "Snow grains",
    WeatherCode.LIGHT_SHOWERS: "Light showers",
    WeatherCode.MODERATE_SHOWERS: "Moderate showers",
    WeatherCode.VIOLENT_SHOWERS: "Violent showers",
    WeatherCode.LIGHT_SNOW_SHOWERS: "Light snow showers",
    WeatherCode.HEAVY_SNOW_SHOWERS: "Heavy snow showers",
    WeatherCode.THUNDERSTORM: "Thunderstorm",
    WeatherCode.THUNDERSTORM_HAIL: "Thunderstorm with light hail",
    WeatherCode.THUNDERSTORM_HEAVY_HAIL: "Thunderstorm with heavy hail",
}

UNKNOWN_DESCRIPTION = "Unknown conditions"


def is_raining(code: Optional[int]) -> bool:
    return code in RAIN_CODES


def is_cloudy(code: Optional[int]) -> bool:
    return code in CLOUDY_CODES


def describe(code: Optional[int]) -> str:
    """Human readable label; unknown or missing codes get a generic label."""
    if code is None:
        return UNKNOWN_DESCRIPTION
    return DESCRIPTIONS.get(code, UNKNOWN_DESCRIPTION)
