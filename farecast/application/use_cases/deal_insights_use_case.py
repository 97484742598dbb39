"""
Application Use Cases - Deal Insights

Read-only queries over scored observations:
  * Top deals ranked by a blend of savings and rarity
  * Summary analytics for one route or hotel region
  * Accuracy of the persisted expected prices
"""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

import numpy as np
import structlog

from farecast.application.dtos.insights_dto import (
    ModelPerformanceDTO,
    RouteAnalyticsDTO,
    TopDealDTO,
)
from farecast.domain.entities.observation import PriceObservation
from farecast.domain.repositories.observation_repository import IObservationRepository
from farecast.domain.services.anomaly_scorer import NEUTRAL_RARITY
from farecast.domain.services.exponential_smoothing import (
    SimpleSmoothingConfig,
    simple_exponential_smoothing,
)
from farecast.shared.consts import ObservationKind

logger = structlog.get_logger(__name__)

DEAL_THRESHOLD = 0.1
TREND_THRESHOLD = 0.05
TREND_WINDOW = 7
ANALYTICS_WINDOW = 90


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _newest_first(observations: Sequence[PriceObservation]) -> List[PriceObservation]:
    return sorted(observations, key=lambda obs: _as_utc(obs.captured_at), reverse=True)


def deal_score(delta_pct: float, rarity: float) -> float:
    return max(0.0, 0.7 * delta_pct + 0.3 * (1 - rarity))


class GetTopDealsUseCase:
    def __init__(self, observation_repository: IObservationRepository):
        self.observation_repository = observation_repository

    async def execute(
        self,
        limit: int = 20,
        min_savings: Optional[float] = None,
        max_rarity: Optional[float] = None,
        kind: Optional[ObservationKind] = None,
    ) -> List[TopDealDTO]:
        """
        Rank scored observations by deal score, best first.

        Args:
            limit: Maximum number of deals returned
            min_savings: Drop deals whose deltaPct is below this value
            max_rarity: Drop deals whose rarity is above this value
            kind: Restrict to flights or hotels; both when omitted
        """
        kinds = [kind] if kind is not None else list(ObservationKind)

        deals: List[TopDealDTO] = []
        for current in kinds:
            for obs in await self.observation_repository.list_observations(current):
                if not obs.is_scored or obs.price <= 0:
                    continue
                delta_pct = obs.delta_pct if obs.delta_pct is not None else 0.0
                obs_rarity = obs.rarity if obs.rarity is not None else NEUTRAL_RARITY
                if min_savings is not None and delta_pct < min_savings:
                    continue
                if max_rarity is not None and obs_rarity > max_rarity:
                    continue

                expected = float(obs.expected_price)
                deals.append(
                    TopDealDTO(
                        id=obs.id,
                        kind=current,
                        key=obs.key,
                        date=obs.date,
                        price=obs.price,
                        expected_price=expected,
                        delta_pct=delta_pct,
                        rarity=obs_rarity,
                        is_anomaly=bool(obs.is_anomaly),
                        savings=max(0.0, expected - obs.price),
                        deal_score=deal_score(delta_pct, obs_rarity),
                        url=obs.url,
                    )
                )

        # Stable sort keeps storage order between equal scores
        deals.sort(key=lambda deal: deal.deal_score, reverse=True)
        logger.debug("insights.top_deals", candidates=len(deals), limit=limit)
        return deals[:limit]


class GetRouteAnalyticsUseCase:
    def __init__(
        self,
        observation_repository: IObservationRepository,
        smoothing: SimpleSmoothingConfig = SimpleSmoothingConfig(),
    ):
        self.observation_repository = observation_repository
        self.smoothing = smoothing

    async def execute(self, kind: ObservationKind, key: str) -> RouteAnalyticsDTO:
        """Summarise the latest observations of one route ("JFK-MCO") or region."""
        observations = [
            obs
            for obs in await self.observation_repository.list_observations(kind)
            if obs.key == key
        ]
        recent = _newest_first(observations)[:ANALYTICS_WINDOW]
        if not recent:
            return RouteAnalyticsDTO(kind=kind, key=key)

        prices = np.asarray([obs.price for obs in recent if obs.price > 0], dtype=float)
        expected = [
            obs.expected_price
            for obs in recent
            if obs.expected_price is not None and obs.expected_price > 0
        ]
        deltas = [obs.delta_pct or 0.0 for obs in recent]

        smoothed = simple_exponential_smoothing(prices[::-1].tolist(), self.smoothing)

        return RouteAnalyticsDTO(
            kind=kind,
            key=key,
            total_observations=len(recent),
            avg_price=round(float(prices.mean())) if prices.size else 0.0,
            min_price=round(float(prices.min())) if prices.size else 0.0,
            max_price=round(float(prices.max())) if prices.size else 0.0,
            avg_expected=round(float(np.mean(expected))) if expected else 0.0,
            avg_savings=round(float(np.mean(deltas)), 2),
            smoothed_price=round(smoothed[-1], 2) if smoothed else None,
            deals=sum(1 for delta in deltas if delta > DEAL_THRESHOLD),
            trend=self.trend(prices),
            recent_ids=[obs.id for obs in recent[:10]],
        )

    @staticmethod
    def trend(prices_newest_first: np.ndarray) -> str:
        """Compare the latest window's mean with the window before it."""
        latest = prices_newest_first[:TREND_WINDOW]
        previous = prices_newest_first[TREND_WINDOW : 2 * TREND_WINDOW]
        if latest.size == 0 or previous.size == 0:
            return "unknown"

        latest_avg = float(latest.mean())
        previous_avg = float(previous.mean())
        if latest_avg > previous_avg * (1 + TREND_THRESHOLD):
            return "increasing"
        if latest_avg < previous_avg * (1 - TREND_THRESHOLD):
            return "decreasing"
        return "stable"


class GetModelPerformanceUseCase:
    def __init__(self, observation_repository: IObservationRepository):
        self.observation_repository = observation_repository

    async def execute(self) -> ModelPerformanceDTO:
        scored: List[PriceObservation] = []
        for kind in ObservationKind:
            scored.extend(
                obs
                for obs in await self.observation_repository.list_observations(kind)
                if obs.model_updated_at is not None
            )
        if not scored:
            return ModelPerformanceDTO()

        # Records further off than the expectation itself are outliers, not misses
        errors = [
            abs(obs.price - obs.expected_price) / obs.expected_price
            for obs in scored
            if obs.expected_price
            and obs.price
            and abs(obs.price - obs.expected_price) < obs.expected_price
        ]
        mape = float(np.mean(errors)) if errors else 0.0
        accuracy = min(100.0, max(0.0, (1 - mape) * 100))

        last_updated = max(_as_utc(obs.model_updated_at) for obs in scored)

        return ModelPerformanceDTO(
            total_scored=len(scored),
            samples_analyzed=len(errors),
            avg_accuracy=round(accuracy),
            last_updated=last_updated,
        )
