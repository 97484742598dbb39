"""
Domain Service - Package Assembler

Pairs scored flights with hotel stays in the destination's region that
check in on the departure day, prices the bundle against its expected
cost and keeps the best bundle per (origin, dest, departDate, stayNights).
"""

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import structlog

from farecast.domain.entities.errors import MissingCompatibilityError
from farecast.domain.entities.observation import FlightObservation, HotelObservation
from farecast.domain.entities.package import Package
from farecast.domain.services.drop_probability import PackageDropModel

logger = structlog.get_logger(__name__)


class StayPolicy(str, Enum):
    """How acceptable stay lengths are decided."""

    RANGE = "range"
    ALLOW_LIST = "allow_list"


DEFAULT_DESTINATION_REGIONS: Dict[str, str] = {
    "MCO": "MCO",
    "FLL": "FLL",
    "MIA": "MIA",
    "TPA": "TPA",
}


@dataclass(frozen=True)
class PackagePolicy:
    stay_policy: StayPolicy = StayPolicy.RANGE
    allowed_stay_nights: Tuple[int, ...] = (3, 5, 7, 14)
    max_stay_nights: int = 14
    hotel_markup: float = 1.2
    hot_deal_min_delta: float = 0.15
    hot_deal_max_rarity: float = 0.1
    neutral_rarity: float = 0.5
    destination_regions: Mapping[str, str] = field(
        default_factory=lambda: dict(DEFAULT_DESTINATION_REGIONS)
    )

    def accepts_stay(self, nights: int) -> bool:
        if self.stay_policy == StayPolicy.ALLOW_LIST:
            return nights in self.allowed_stay_nights
        return 0 < nights <= self.max_stay_nights


HotelIndex = Dict[Tuple[str, str], List[HotelObservation]]


def index_hotels(hotels: Iterable[HotelObservation]) -> HotelIndex:
    """Index priced hotel stays by (region, check-in date)."""
    index: HotelIndex = defaultdict(list)
    for hotel in hotels:
        if hotel.price > 0:
            index[(hotel.region, hotel.check_in)].append(hotel)
    return index


class PackageAssembler:
    """Builds and deduplicates flight + hotel packages."""

    def __init__(
        self,
        policy: Optional[PackagePolicy] = None,
        drop_model: Optional[PackageDropModel] = None,
    ):
        self.policy = policy or PackagePolicy()
        self.drop_model = drop_model or PackageDropModel()

    def compatible_hotels(
        self, flight: FlightObservation, hotels: HotelIndex
    ) -> Tuple[str, List[HotelObservation]]:
        """
        Return the flight's region and the hotel stays it can be paired with.

        Raises:
            MissingCompatibilityError: If the destination has no region or
                no stay in that region starts on the departure date.
        """
        region = self.policy.destination_regions.get(flight.dest)
        if region is None:
            raise MissingCompatibilityError(flight.id, f"no region for {flight.dest}")
        matches = hotels.get((region, flight.date), [])
        if not matches:
            raise MissingCompatibilityError(
                flight.id, f"no stay in {region} checking in {flight.date}"
            )
        return region, matches

    def price_package(
        self, flight: FlightObservation, hotel: HotelObservation, region: str
    ) -> Optional[Package]:
        """Price one flight/hotel pair, None if the stay length is not accepted."""
        nights = hotel.stay_nights
        if nights is None or hotel.check_out is None:
            return None
        if not self.policy.accepts_stay(nights):
            return None

        hotel_total = hotel.price * nights
        total_price = flight.price + hotel_total

        expected_flight = flight.expected_price
        if expected_flight is None:
            expected_flight = flight.price
        expected_total = expected_flight + hotel.price * self.policy.hotel_markup * nights
        pct_saved = (
            max(0.0, (expected_total - total_price) / expected_total)
            if expected_total > 0
            else 0.0
        )

        flight_rarity = (
            flight.rarity if flight.rarity is not None else self.policy.neutral_rarity
        )
        hotel_rarity = (
            hotel.rarity if hotel.rarity is not None else self.policy.neutral_rarity
        )
        rarity_score = (flight_rarity + hotel_rarity) / 2

        delta_pct = flight.delta_pct or 0.0
        is_hot_deal = (
            delta_pct >= self.policy.hot_deal_min_delta
            and flight_rarity <= self.policy.hot_deal_max_rarity
        )

        return Package(
            origin=flight.origin,
            dest=flight.dest,
            region=region,
            depart_date=flight.date,
            return_date=hotel.check_out,
            stay_nights=nights,
            flight_price=flight.price,
            hotel_total=hotel_total,
            total_price=total_price,
            pct_saved=pct_saved,
            rarity_score=rarity_score,
            drop_probability=self.drop_model.probability(
                delta_pct, rarity_score, pct_saved
            ),
            is_hot_deal=is_hot_deal,
            flight_url=flight.url,
            hotel_url=hotel.url,
        )

    def assemble(
        self,
        flights: Sequence[FlightObservation],
        hotels: Sequence[HotelObservation],
    ) -> List[Package]:
        """Build every candidate package from scored flights and hotel stays."""
        index = index_hotels(hotels)
        candidates: List[Package] = []

        for flight in flights:
            if flight.expected_price is None or flight.rarity is None:
                continue
            try:
                region, matches = self.compatible_hotels(flight, index)
            except MissingCompatibilityError as exc:
                logger.debug(
                    "packages.no_compatible_hotel",
                    key=flight.key,
                    date=flight.date,
                    reason=exc.details.get("reason"),
                )
                continue

            for hotel in matches:
                package = self.price_package(flight, hotel, region)
                if package is not None:
                    candidates.append(package)

        return candidates


def deduplicate_packages(packages: Iterable[Package]) -> List[Package]:
    """Keep the highest ``pct_saved`` package per key; ties keep the first seen."""
    best: Dict[Tuple[str, str, str, int], Package] = {}
    for package in packages:
        current = best.get(package.dedup_key)
        if current is None or package.pct_saved > current.pct_saved:
            best[package.dedup_key] = package
    return list(best.values())
