"""
Domain Repository Interface - Price Observations

Storage collaborator for captured prices. Observations are written by the
acquisition layer; this core only reads them and patches analytic fields.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from farecast.domain.entities.observation import ObservationScores, PriceObservation
from farecast.shared.consts import ObservationKind


class IObservationRepository(ABC):
    """Interface for price observation repositories."""

    @abstractmethod
    async def list_observations(
        self, kind: ObservationKind, since: Optional[datetime] = None
    ) -> List[PriceObservation]:
        """
        List observations of one kind.

        Args:
            kind: Flight fares or hotel rates
            since: Only observations captured at or after this instant

        Returns:
            ``FlightObservation`` or ``HotelObservation`` records
        """
        pass

    @abstractmethod
    async def get_observation(self, observation_id: str) -> Optional[PriceObservation]:
        """Get an observation by ID."""
        pass

    @abstractmethod
    async def patch_observation(
        self, observation_id: str, scores: ObservationScores
    ) -> bool:
        """Overwrite the analytic fields of an observation."""
        pass
