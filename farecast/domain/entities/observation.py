"""
Domain Entities - Price Observations

Flight fares and hotel rates are captured as separate record types that
share a common scored-observation shape: a series key, a calendar date, a
positive price and the analytic fields written back by the baseline refresh.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from farecast.shared.consts import ObservationKind


@dataclass(frozen=True)
class ObservationScores:
    """Analytic fields derived from the latest fit of an observation's series."""

    expected_price: float
    delta_pct: float
    z_score: float
    rarity: float
    is_anomaly: bool
    model_updated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


@dataclass(kw_only=True)
class PriceObservation(ABC):
    """
    A single captured price.

    ``date`` is the travel date (departure for flights, check-in for hotels)
    as an ISO ``YYYY-MM-DD`` string. ``scores`` is only ever assigned from a
    fit over the whole series containing the observation.
    """

    kind: ClassVar[ObservationKind]

    id: str
    date: str
    price: float
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    url: Optional[str] = None
    scores: Optional[ObservationScores] = None

    @property
    @abstractmethod
    def key(self) -> str:
        """Series key the observation belongs to."""

    @property
    def travel_date(self) -> Optional[date]:
        try:
            return date.fromisoformat(self.date)
        except (TypeError, ValueError):
            return None

    @property
    def is_scored(self) -> bool:
        return self.scores is not None

    @property
    def expected_price(self) -> Optional[float]:
        return self.scores.expected_price if self.scores else None

    @property
    def delta_pct(self) -> Optional[float]:
        return self.scores.delta_pct if self.scores else None

    @property
    def z_score(self) -> Optional[float]:
        return self.scores.z_score if self.scores else None

    @property
    def rarity(self) -> Optional[float]:
        return self.scores.rarity if self.scores else None

    @property
    def is_anomaly(self) -> Optional[bool]:
        return self.scores.is_anomaly if self.scores else None

    @property
    def model_updated_at(self) -> Optional[datetime]:
        return self.scores.model_updated_at if self.scores else None


@dataclass(kw_only=True)
class FlightObservation(PriceObservation):
    """Lowest fare for a route on a departure date."""

    kind: ClassVar[ObservationKind] = ObservationKind.FLIGHT

    origin: str
    dest: str
    airline: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.origin}-{self.dest}"


@dataclass(kw_only=True)
class HotelObservation(PriceObservation):
    """Nightly rate for a stay in a region, ``date`` being the check-in day."""

    kind: ClassVar[ObservationKind] = ObservationKind.HOTEL

    region: str
    check_out: Optional[str] = None
    hotel_name: Optional[str] = None

    @property
    def key(self) -> str:
        return self.region

    @property
    def check_in(self) -> str:
        return self.date

    @property
    def stay_nights(self) -> Optional[int]:
        """Nights between check-in and check-out, None if either is unknown."""
        if not self.check_out:
            return None
        start = self.travel_date
        try:
            end = date.fromisoformat(self.check_out)
        except ValueError:
            return None
        if start is None:
            return None
        return (end - start).days
