"""
Database package - Infrastructure Layer

MongoDB connection shared by the counter and weather time-series stores.
"""

from src.infrastructure.database.mongo_database import MongoDatabase

__all__ = ["MongoDatabase"]
