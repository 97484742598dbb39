"""
MongoDB Database - Infrastructure Layer

This module provides the MongoDB client shared by the repositories.
It handles the connection, collection lookup and index management.
"""

import pymongo.errors
import structlog
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = structlog.get_logger(__name__)

OBSERVATIONS_COLLECTION = "price_observations"
PACKAGES_COLLECTION = "packages"


class MongoDatabase:
    """MongoDB database client."""

    def __init__(self, mongo_uri: str, db_name: str):
        """
        Initialize the MongoDB database client.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Name of the database to use
        """
        self.client: MongoClient = MongoClient(mongo_uri)
        self.db: Database = self.client[db_name]

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get a collection from the database.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB collection
        """
        return self.db[collection_name]

    def close(self) -> None:
        """Close the database connection."""
        self.client.close()

    def _ensure_index(self, collection_name: str, keys, name: str, **kwargs) -> None:
        # create_index is a no-op when an identical index already exists
        try:
            self.db[collection_name].create_index(keys, name=name, **kwargs)
        except pymongo.errors.OperationFailure as e:
            logger.warning(
                "database.index_creation_failed",
                collection=collection_name,
                index=name,
                error=str(e),
            )

    async def create_indexes(self) -> None:
        """
        Create the indexes the batch jobs query by.
        This is an async method to be called during application startup.
        Existing indexes are left in place.
        """
        self._ensure_index(OBSERVATIONS_COLLECTION, "id", "id_idx", unique=True)
        self._ensure_index(
            OBSERVATIONS_COLLECTION,
            [("kind", ASCENDING), ("captured_at", DESCENDING)],
            "kind_captured_at_idx",
        )
        self._ensure_index(
            PACKAGES_COLLECTION,
            [
                ("origin", ASCENDING),
                ("dest", ASCENDING),
                ("depart_date", ASCENDING),
                ("stay_nights", ASCENDING),
            ],
            "package_key_idx",
        )
