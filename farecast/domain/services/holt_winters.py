"""
Domain Service - Holt-Winters Fitter

Additive triple exponential smoothing with a fixed seasonal period.

Components:
  * level    - the typical price around time t
  * trend    - per-step drift of the level
  * seasonal - repeating offsets within one period (weekday effects)

Smoothing weights are chosen by an exhaustive grid search on in-sample
one-step-ahead mean squared error unless they are fixed by the caller.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import product
from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog

from farecast.domain.entities.errors import (
    DegenerateParameterError,
    InsufficientDataError,
    InvalidSmoothingParameterError,
)
from farecast.domain.entities.forecasting import HoltWintersModel
from farecast.shared.consts import DEFAULT_SEASONAL_PERIOD

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class HoltWintersConfig:
    """Smoothing weights and search space for the full Holt-Winters model."""

    seasonal_period: int = DEFAULT_SEASONAL_PERIOD
    alpha: Optional[float] = None
    beta: Optional[float] = None
    gamma: Optional[float] = None
    alpha_grid: Tuple[float, ...] = (0.1, 0.3, 0.5, 0.7)
    beta_grid: Tuple[float, ...] = (0.05, 0.1, 0.2)
    gamma_grid: Tuple[float, ...] = (0.05, 0.1, 0.2)
    fallback: Tuple[float, float, float] = (0.3, 0.1, 0.1)

    @property
    def min_observations(self) -> int:
        return 2 * self.seasonal_period


@dataclass(frozen=True)
class _InitialState:
    level: float
    trend: float
    seasonal: List[float]


def _initial_state(y: Sequence[float], m: int) -> _InitialState:
    n = len(y)

    # Seasonal buckets: mean of every observation sharing a position mod m
    buckets = []
    for i in range(m):
        members = y[i::m]
        buckets.append(sum(members) / len(members) if members else 0.0)
    grand_mean = sum(buckets) / m

    deseasonalized = [y[i] - (buckets[i] - grand_mean) for i in range(m)]
    level = sum(deseasonalized) / m

    # Least-squares slope over the first two seasons, x = 1..limit
    limit = min(2 * m, n)
    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for i in range(limit):
        x = i + 1
        value = y[i] - buckets[i % m]
        sum_x += x
        sum_y += value
        sum_xy += x * value
        sum_x2 += x * x
    denominator = limit * sum_x2 - sum_x * sum_x
    trend = (limit * sum_xy - sum_x * sum_y) / denominator if denominator != 0 else 0.0

    seasonal = [bucket - grand_mean for bucket in buckets]
    return _InitialState(level=level, trend=trend, seasonal=seasonal)


def _run_recursion(
    y: Sequence[float], m: int, alpha: float, beta: float, gamma: float
) -> HoltWintersModel:
    n = len(y)
    state = _initial_state(y, m)

    level = [0.0] * n
    trend = [0.0] * n
    fitted = [0.0] * n
    cycle = list(state.seasonal)

    level[0] = state.level
    trend[0] = state.trend
    fitted[0] = state.level + cycle[0]

    for t in range(1, n):
        idx = t % m
        prev_level = level[t - 1]
        prev_trend = trend[t - 1]

        fitted[t] = prev_level + prev_trend + cycle[idx]
        level[t] = alpha * (y[t] - cycle[idx]) + (1 - alpha) * (prev_level + prev_trend)
        trend[t] = beta * (level[t] - prev_level) + (1 - beta) * prev_trend

        estimate = gamma * (y[t] - level[t]) + (1 - gamma) * cycle[idx]
        # The first season is covered by the bucket initialisation; its
        # estimates are parked one cycle ahead and the live cycle only
        # starts moving once a full season has been observed.
        if t >= m:
            cycle[idx] = estimate

    residuals = [actual - predicted for actual, predicted in zip(y, fitted)]
    mae = sum(abs(r) for r in residuals) / n
    mse = sum(r * r for r in residuals) / n

    return HoltWintersModel(
        alpha=alpha,
        beta=beta,
        gamma=gamma,
        seasonal_period=m,
        level=np.asarray(level, dtype=float),
        trend=np.asarray(trend, dtype=float),
        seasonal=np.asarray(cycle, dtype=float),
        fitted=np.asarray(fitted, dtype=float),
        residuals=np.asarray(residuals, dtype=float),
        mae=float(mae),
        mse=float(mse),
    )


def fit_with_params(
    y: Sequence[float], m: int, alpha: float, beta: float, gamma: float
) -> HoltWintersModel:
    """
    Run the recursion for one parameter combination.

    Raises:
        DegenerateParameterError: If the fit contains non-finite values.
    """
    try:
        model = _run_recursion(y, m, alpha, beta, gamma)
    except (ArithmeticError, ValueError) as exc:
        raise DegenerateParameterError(alpha, beta, gamma) from exc

    if not math.isfinite(model.mse) or not np.all(np.isfinite(model.fitted)):
        raise DegenerateParameterError(alpha, beta, gamma)
    return model


class HoltWintersFitter:
    """Fits additive Holt-Winters models with automatic parameter selection."""

    def __init__(self, config: Optional[HoltWintersConfig] = None):
        self.config = config or HoltWintersConfig()

    def fit(
        self,
        series: Sequence[float],
        alpha: Optional[float] = None,
        beta: Optional[float] = None,
        gamma: Optional[float] = None,
    ) -> HoltWintersModel:
        """
        Fit a model to ``series``.

        Weights passed here take precedence over the configured ones; any
        weight left unspecified is searched over its candidate grid.

        Raises:
            InsufficientDataError: If the series is shorter than two periods.
            InvalidSmoothingParameterError: If a fixed weight is outside (0, 1).
        """
        m = self.config.seasonal_period
        if m < 1:
            raise ValueError("Seasonal period must be a positive integer")
        y = [float(value) for value in series]
        if len(y) < self.config.min_observations:
            raise InsufficientDataError(
                required=self.config.min_observations, available=len(y)
            )

        alpha = alpha if alpha is not None else self.config.alpha
        beta = beta if beta is not None else self.config.beta
        gamma = gamma if gamma is not None else self.config.gamma
        for name, value in (("alpha", alpha), ("beta", beta), ("gamma", gamma)):
            if value is not None and not 0.0 < value < 1.0:
                raise InvalidSmoothingParameterError(name, value)

        candidates = product(
            [alpha] if alpha is not None else self.config.alpha_grid,
            [beta] if beta is not None else self.config.beta_grid,
            [gamma] if gamma is not None else self.config.gamma_grid,
        )

        best: Optional[HoltWintersModel] = None
        for a, b, g in candidates:
            try:
                model = fit_with_params(y, m, a, b, g)
            except DegenerateParameterError:
                continue
            if best is None or model.mse < best.mse:
                best = model

        if best is None:
            logger.warning(
                "holt_winters.grid_exhausted",
                observations=len(y),
                fallback=self.config.fallback,
            )
            best = _run_recursion(y, m, *self.config.fallback)

        return best


def fit_series(
    prices: Sequence[float], period: int = DEFAULT_SEASONAL_PERIOD
) -> HoltWintersModel:
    """Fit a Holt-Winters model with grid-searched weights."""
    return HoltWintersFitter(HoltWintersConfig(seasonal_period=period)).fit(prices)
