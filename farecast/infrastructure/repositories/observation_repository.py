"""
Infrastructure Repository - Price Observation MongoDB Implementation

Flights and hotels share the ``price_observations`` collection and are told
apart by their ``kind`` field. Analytic fields are stored flat next to the
captured values.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from pymongo.errors import PyMongoError

from farecast.domain.entities.observation import (
    FlightObservation,
    HotelObservation,
    ObservationScores,
    PriceObservation,
)
from farecast.domain.repositories.observation_repository import IObservationRepository
from farecast.infrastructure.database.mongo_database import (
    OBSERVATIONS_COLLECTION,
    MongoDatabase,
)
from farecast.shared.consts import ObservationKind

logger = structlog.get_logger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # pymongo returns naive datetimes unless the client is tz_aware
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class ObservationRepository(IObservationRepository):
    """MongoDB implementation of the price observation repository."""

    def __init__(self, database: MongoDatabase):
        """Initialize repository with database connection."""
        self.database = database
        self.collection_name = OBSERVATIONS_COLLECTION

    async def list_observations(
        self, kind: ObservationKind, since: Optional[datetime] = None
    ) -> List[PriceObservation]:
        """List observations of one kind, optionally captured since an instant."""
        try:
            collection = self.database.get_collection(self.collection_name)

            query: Dict[str, Any] = {"kind": kind.value}
            if since is not None:
                query["captured_at"] = {"$gte": since}

            observations: List[PriceObservation] = []
            for document in collection.find(query):
                try:
                    observations.append(self._from_document(document))
                except (KeyError, TypeError, ValueError) as e:
                    # Malformed rows are skipped, not fatal
                    logger.warning(
                        "observations.document_skipped",
                        id=document.get("id"),
                        kind=kind.value,
                        stage="map",
                        error=str(e),
                    )
            return observations

        except PyMongoError as e:
            logger.error(
                "observations.list_failed", kind=kind.value, error=str(e)
            )
            raise e

    async def get_observation(self, observation_id: str) -> Optional[PriceObservation]:
        """Get an observation by ID."""
        try:
            collection = self.database.get_collection(self.collection_name)

            document = collection.find_one({"id": observation_id})

            if document:
                return self._from_document(document)
            return None

        except PyMongoError as e:
            logger.error("observations.get_failed", id=observation_id, error=str(e))
            raise e

    async def patch_observation(
        self, observation_id: str, scores: ObservationScores
    ) -> bool:
        """Overwrite the analytic fields of an observation."""
        try:
            collection = self.database.get_collection(self.collection_name)

            result = collection.update_one(
                {"id": observation_id}, {"$set": self._scores_to_document(scores)}
            )
            return result.matched_count > 0

        except PyMongoError as e:
            logger.error(
                "observations.patch_failed",
                id=observation_id,
                stage="patch",
                error=str(e),
            )
            raise e

    def _scores_to_document(self, scores: ObservationScores) -> Dict[str, Any]:
        return {
            "expected_price": scores.expected_price,
            "delta_pct": scores.delta_pct,
            "z_score": scores.z_score,
            "rarity": scores.rarity,
            "is_anomaly": scores.is_anomaly,
            "model_updated_at": scores.model_updated_at,
        }

    def _to_document(self, observation: PriceObservation) -> Dict[str, Any]:
        """Convert an observation to a MongoDB document."""
        document: Dict[str, Any] = {
            "id": observation.id,
            "kind": observation.kind.value,
            "date": observation.date,
            "price": observation.price,
            "captured_at": observation.captured_at,
            "url": observation.url,
        }
        if isinstance(observation, FlightObservation):
            document.update(
                origin=observation.origin,
                dest=observation.dest,
                airline=observation.airline,
            )
        elif isinstance(observation, HotelObservation):
            document.update(
                region=observation.region,
                check_out=observation.check_out,
                hotel_name=observation.hotel_name,
            )
        if observation.scores is not None:
            document.update(self._scores_to_document(observation.scores))
        return document

    def _from_document(self, document: Dict[str, Any]) -> PriceObservation:
        """Convert a MongoDB document to a Flight or Hotel observation."""
        scores = None
        if (
            document.get("expected_price") is not None
            and document.get("model_updated_at") is not None
        ):
            scores = ObservationScores(
                expected_price=float(document["expected_price"]),
                delta_pct=float(document.get("delta_pct") or 0.0),
                z_score=float(document.get("z_score") or 0.0),
                rarity=float(document.get("rarity", 0.5)),
                is_anomaly=bool(document.get("is_anomaly", False)),
                model_updated_at=_as_utc(document["model_updated_at"]),
            )

        common: Dict[str, Any] = {
            "id": str(document["id"]),
            "date": document["date"],
            "price": float(document["price"]),
            "captured_at": _as_utc(document.get("captured_at"))
            or datetime.now(timezone.utc),
            "url": document.get("url"),
            "scores": scores,
        }

        if document.get("kind") == ObservationKind.HOTEL.value:
            return HotelObservation(
                region=document["region"],
                check_out=document.get("check_out"),
                hotel_name=document.get("hotel_name"),
                **common,
            )
        return FlightObservation(
            origin=document["origin"],
            dest=document["dest"],
            airline=document.get("airline"),
            **common,
        )
