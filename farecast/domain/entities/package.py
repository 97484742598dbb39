"""
Domain Entities - Travel Package

A package pairs one scored flight with one compatible hotel stay. Packages
are rebuilt from scratch on every assembly run and never patched in place.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple


@dataclass
class Package:
    """Flight + hotel bundle with its savings and rarity economics."""

    origin: str
    dest: str
    region: str
    depart_date: str
    return_date: str
    stay_nights: int
    flight_price: float
    hotel_total: float
    total_price: float
    pct_saved: float
    rarity_score: float
    drop_probability: float
    is_hot_deal: bool
    flight_url: Optional[str] = None
    hotel_url: Optional[str] = None
    id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def dedup_key(self) -> Tuple[str, str, str, int]:
        """Only one package survives per (origin, dest, departDate, stayNights)."""
        return (self.origin, self.dest, self.depart_date, self.stay_nights)
