"""
Database package - Infrastructure Layer

MongoDB connection and index management for farecast.
"""

from farecast.infrastructure.database.mongo_database import (
    OBSERVATIONS_COLLECTION,
    PACKAGES_COLLECTION,
    MongoDatabase,
)

__all__ = ["MongoDatabase", "OBSERVATIONS_COLLECTION", "PACKAGES_COLLECTION"]
