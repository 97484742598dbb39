"""
Domain Service - Simple Exponential Smoothing

Single-parameter smoothing used for quick level summaries of a series.
Kept separate from the Holt-Winters fitter: it has no trend or seasonal
component and is never used to produce persisted expected prices.
"""

from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class SimpleSmoothingConfig:
    alpha: float = 0.3


def simple_exponential_smoothing(
    values: Sequence[float], config: SimpleSmoothingConfig = SimpleSmoothingConfig()
) -> List[float]:
    """Return the smoothed series, seeded with the first value."""
    if not values:
        return []
    smoothed = [float(values[0])]
    for value in values[1:]:
        smoothed.append(config.alpha * value + (1 - config.alpha) * smoothed[-1])
    return smoothed
