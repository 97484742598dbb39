"""
Domain Service - Series Builder

Groups raw observations into per-route (flights) or per-region (hotels)
price series ordered by travel date, and separates the groups long
enough to fit from those that are not.
"""

from dataclasses import dataclass, field
from typing import Dict, Generic, List, Sequence, TypeVar

import numpy as np
import pandas as pd
import structlog

from farecast.domain.entities.observation import PriceObservation

logger = structlog.get_logger(__name__)

ObservationT = TypeVar("ObservationT", bound=PriceObservation)


@dataclass
class PriceSeries(Generic[ObservationT]):
    """Observations sharing a key, ascending by date."""

    key: str
    observations: List[ObservationT]

    @property
    def prices(self) -> np.ndarray:
        return np.asarray([obs.price for obs in self.observations], dtype=float)

    def __len__(self) -> int:
        return len(self.observations)


@dataclass
class SeriesBatch(Generic[ObservationT]):
    eligible: List[PriceSeries[ObservationT]] = field(default_factory=list)
    # key -> number of valid observations in the rejected group
    skipped: Dict[str, int] = field(default_factory=dict)


def build_series(
    observations: Sequence[ObservationT], min_length: int
) -> SeriesBatch[ObservationT]:
    """
    Group ``observations`` by key and order each group chronologically.

    Observations without a positive price are dropped before counting.
    Groups with fewer than ``min_length`` valid observations are reported
    in ``skipped`` instead of ``eligible``. Ties on the travel date keep
    capture order.
    """
    batch: SeriesBatch[ObservationT] = SeriesBatch()
    if not observations:
        return batch

    frame = pd.DataFrame(
        {
            "position": range(len(observations)),
            "key": [obs.key for obs in observations],
            "date": [obs.date for obs in observations],
            "captured_at": pd.to_datetime(
                [obs.captured_at for obs in observations], utc=True
            ),
            "price": pd.to_numeric(
                [obs.price for obs in observations], errors="coerce"
            ),
        }
    )

    invalid = int((~(frame["price"] > 0)).sum())
    if invalid:
        logger.debug("series.invalid_prices_dropped", count=invalid)
    frame = frame[frame["price"] > 0]

    frame = frame.sort_values(["key", "date", "captured_at"], kind="mergesort")

    for key, group in frame.groupby("key", sort=True):
        if len(group) < min_length:
            batch.skipped[str(key)] = len(group)
            continue
        batch.eligible.append(
            PriceSeries(
                key=str(key),
                observations=[observations[pos] for pos in group["position"]],
            )
        )

    return batch
