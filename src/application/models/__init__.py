"""Application-level configuration models."""

from .system_info import StatsOptions, SystemInfo

__all__ = ["StatsOptions", "SystemInfo"]
