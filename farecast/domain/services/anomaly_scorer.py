"""
Domain Service - Anomaly & Rarity Scorer

Robust z-scores against a model's residuals and empirical-CDF rarity of a
price within its own history.
"""

from typing import Sequence

import numpy as np

from farecast.domain.entities.forecasting import AnomalyScore

# Scales MAD to a consistent estimator of sigma under normality
MAD_SCALE = 1.4826
ANOMALY_Z_THRESHOLD = 2.0
NEUTRAL_RARITY = 0.5


def _upper_median(sorted_values: np.ndarray) -> float:
    return float(sorted_values[sorted_values.shape[0] // 2])


def robust_std(residuals: Sequence[float]) -> float:
    """
    Median absolute deviation of ``residuals`` scaled to a sigma estimate.

    Even-length samples use the upper middle element as the median. An
    empty sample has zero spread.
    """
    values = np.sort(np.asarray(residuals, dtype=float))
    if values.size == 0:
        return 0.0
    center = _upper_median(values)
    deviations = np.sort(np.abs(values - center))
    return _upper_median(deviations) * MAD_SCALE


def score(
    actual: float, expected: float, residual_history: Sequence[float]
) -> AnomalyScore:
    """Score ``actual`` against ``expected`` using the spread of past residuals."""
    delta_pct = (expected - actual) / expected if expected != 0 else 0.0

    spread = robust_std(residual_history)
    # Zero spread means every residual agrees: treat as no deviation
    z_score = (actual - expected) / spread if spread > 0 else 0.0

    return AnomalyScore(
        z_score=float(z_score),
        delta_pct=float(delta_pct),
        is_anomaly=bool(abs(z_score) > ANOMALY_Z_THRESHOLD),
    )


def rarity(current_price: float, historical_prices: Sequence[float]) -> float:
    """
    Fraction of ``historical_prices`` at or below ``current_price``.

    Low values mark prices cheaper than almost all of the history.
    """
    history = np.asarray(historical_prices, dtype=float)
    if history.size == 0:
        return NEUTRAL_RARITY
    return float(np.count_nonzero(history <= current_price) / history.size)
