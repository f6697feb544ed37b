"""
Controllers Package - Presentation Layer

This package contains FastAPI controllers (routers) that handle
HTTP requests and responses. Controllers are responsible for
input validation, error handling, and mapping between API DTOs
and application layer use cases.
"""

from .counters_controller import router as counters_router
from .stats_controller import router as stats_router
from .system_controller import router as system_router

__all__ = ["counters_router", "stats_router", "system_router"]
