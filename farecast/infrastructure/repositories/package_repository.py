"""
Infrastructure Repository - Package MongoDB Implementation

This module implements the package repository using MongoDB.
"""

from datetime import timezone
from typing import Any, Dict, List
from uuid import uuid4

import structlog
from pymongo.errors import PyMongoError

from farecast.domain.entities.package import Package
from farecast.domain.repositories.package_repository import IPackageRepository
from farecast.infrastructure.database.mongo_database import (
    PACKAGES_COLLECTION,
    MongoDatabase,
)

logger = structlog.get_logger(__name__)


class PackageRepository(IPackageRepository):
    """MongoDB implementation of package repository."""

    def __init__(self, database: MongoDatabase):
        """Initialize repository with database connection."""
        self.database = database
        self.collection_name = PACKAGES_COLLECTION

    async def list_packages(self) -> List[Package]:
        try:
            collection = self.database.get_collection(self.collection_name)
            return [self._from_document(doc) for doc in collection.find({})]

        except PyMongoError as e:
            logger.error("packages.list_failed", error=str(e))
            raise e

    async def delete_package(self, package_id: str) -> bool:
        try:
            collection = self.database.get_collection(self.collection_name)

            result = collection.delete_one({"id": package_id})
            return result.deleted_count > 0

        except PyMongoError as e:
            logger.error("packages.delete_failed", id=package_id, error=str(e))
            raise e

    async def insert_package(self, package: Package) -> Package:
        """Insert a package, assigning it an ID if it has none."""
        try:
            collection = self.database.get_collection(self.collection_name)

            if package.id is None:
                package.id = str(uuid4())

            result = collection.insert_one(self._to_document(package))

            if result.inserted_id:
                logger.debug("packages.inserted", id=package.id)
                return package
            else:
                raise Exception("Failed to insert package")

        except PyMongoError as e:
            logger.error(
                "packages.insert_failed",
                id=package.id,
                stage="insert",
                error=str(e),
            )
            raise e

    def _to_document(self, package: Package) -> Dict[str, Any]:
        """Convert package entity to MongoDB document."""
        return {
            "id": package.id,
            "origin": package.origin,
            "dest": package.dest,
            "region": package.region,
            "depart_date": package.depart_date,
            "return_date": package.return_date,
            "stay_nights": package.stay_nights,
            "flight_price": package.flight_price,
            "hotel_total": package.hotel_total,
            "total_price": package.total_price,
            "pct_saved": package.pct_saved,
            "rarity_score": package.rarity_score,
            "drop_probability": package.drop_probability,
            "is_hot_deal": package.is_hot_deal,
            "flight_url": package.flight_url,
            "hotel_url": package.hotel_url,
            "created_at": package.created_at,
        }

    def _from_document(self, document: Dict[str, Any]) -> Package:
        """Convert MongoDB document to package entity."""
        created_at = document["created_at"]
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return Package(
            id=document.get("id"),
            origin=document["origin"],
            dest=document["dest"],
            region=document["region"],
            depart_date=document["depart_date"],
            return_date=document["return_date"],
            stay_nights=int(document["stay_nights"]),
            flight_price=float(document["flight_price"]),
            hotel_total=float(document["hotel_total"]),
            total_price=float(document["total_price"]),
            pct_saved=float(document["pct_saved"]),
            rarity_score=float(document["rarity_score"]),
            drop_probability=float(document["drop_probability"]),
            is_hot_deal=bool(document["is_hot_deal"]),
            flight_url=document.get("flight_url"),
            hotel_url=document.get("hotel_url"),
            created_at=created_at,
        )
