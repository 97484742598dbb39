"""Domain entities produced by the statistical services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


@dataclass(frozen=True)
class HoltWintersModel:
    """
    Additive Holt-Winters fit of one price series.

    ``level``, ``trend``, ``fitted`` and ``residuals`` hold one entry per
    observation; ``seasonal`` is the current cycle of ``seasonal_period``
    offsets, indexed by position modulo the period.
    """

    alpha: float
    beta: float
    gamma: float
    seasonal_period: int
    level: np.ndarray
    trend: np.ndarray
    seasonal: np.ndarray
    fitted: np.ndarray
    residuals: np.ndarray
    mae: float
    mse: float

    @property
    def n_observations(self) -> int:
        return int(self.fitted.shape[0])

    def forecast(self, steps: int = 1) -> float:
        """Additive forecast ``steps`` periods past the last observation."""
        if steps < 1:
            raise ValueError("Forecast horizon must be at least one step")
        last = self.n_observations - 1
        season = self.seasonal[(last + steps) % self.seasonal_period]
        return float(self.level[last] + steps * self.trend[last] + season)


@dataclass(frozen=True)
class AnomalyScore:
    """Deviation of an actual price from its expected value."""

    z_score: float
    delta_pct: float
    is_anomaly: bool


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Recommendation(str, Enum):
    BOOK = "book"
    WAIT = "wait"


@dataclass(frozen=True)
class DropEstimate:
    """Probability of a further price drop and the advice derived from it."""

    probability: float
    confidence: Confidence
    recommendation: Recommendation
    days_out: int
