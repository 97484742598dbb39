"""
Domain Service - Drop-Probability Models

Two fixed-coefficient logistic models estimate how likely a price is to
fall further. They take different inputs and are used at different call
sites, so they stay separate:

  * ``RecordDropModel``  - single observation query (deltaPct, zScore,
    rarity, days to travel), with a book/wait recommendation.
  * ``PackageDropModel`` - bundle scoring inside package assembly
    (flight deltaPct, combined rarity, bundle savings).
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from farecast.domain.entities.forecasting import (
    Confidence,
    DropEstimate,
    Recommendation,
)

DEFAULT_DAYS_OUT = 30


def logistic(x: float) -> float:
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def days_until(travel_date: Optional[date], today: Optional[date] = None) -> int:
    """Whole days until ``travel_date``, floored at 0; 30 when unknown."""
    if travel_date is None:
        return DEFAULT_DAYS_OUT
    reference = today or date.today()
    return max(0, (travel_date - reference).days)


@dataclass(frozen=True)
class RecordDropModel:
    intercept: float = 0.2
    delta_pct_coef: float = -2.0
    days_out_coef: float = 0.02
    rarity_coef: float = -1.0
    z_score_coef: float = -0.1

    # Recommendation thresholds
    book_below: float = 0.3
    wait_above: float = 0.7

    def probability(
        self, delta_pct: float, z_score: float, rarity: float, days_out: int
    ) -> float:
        logit = (
            self.intercept
            + self.delta_pct_coef * delta_pct
            + self.days_out_coef * days_out
            + self.rarity_coef * (1 - rarity)
            + self.z_score_coef * abs(z_score)
        )
        return logistic(logit)

    def estimate(
        self, delta_pct: float, z_score: float, rarity: float, days_out: int
    ) -> DropEstimate:
        probability = self.probability(delta_pct, z_score, rarity, days_out)

        # First matching rule wins
        if delta_pct > 0.2 or rarity < 0.2:
            confidence, recommendation = Confidence.HIGH, Recommendation.BOOK
        elif delta_pct < 0.05 and days_out > 14:
            confidence, recommendation = Confidence.HIGH, Recommendation.WAIT
        elif abs(z_score) > 2:
            confidence = Confidence.HIGH
            recommendation = (
                Recommendation.BOOK if delta_pct > 0.1 else Recommendation.WAIT
            )
        else:
            confidence, recommendation = Confidence.MEDIUM, Recommendation.WAIT

        if probability < self.book_below:
            recommendation = Recommendation.BOOK
        elif probability > self.wait_above:
            recommendation = Recommendation.WAIT

        return DropEstimate(
            probability=probability,
            confidence=confidence,
            recommendation=recommendation,
            days_out=days_out,
        )


@dataclass(frozen=True)
class PackageDropModel:
    delta_pct_coef: float = 2.0
    rarity_score_coef: float = -1.0
    pct_saved_coef: float = -0.5

    def probability(
        self, delta_pct: float, rarity_score: float, pct_saved: float
    ) -> float:
        x = (
            self.delta_pct_coef * delta_pct
            + self.rarity_score_coef * rarity_score
            + self.pct_saved_coef * pct_saved
        )
        return logistic(x)
