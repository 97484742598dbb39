"""
Application Use Case - Drop Probability

Answers "will this price fall further?" for a single observation using the
record-level logistic model.
"""

from datetime import date
from typing import Optional

import structlog

from farecast.application.dtos.insights_dto import DropFactorsDTO, DropProbabilityDTO
from farecast.domain.entities.forecasting import Confidence, Recommendation
from farecast.domain.entities.observation import PriceObservation
from farecast.domain.repositories.observation_repository import IObservationRepository
from farecast.domain.services.anomaly_scorer import NEUTRAL_RARITY
from farecast.domain.services.drop_probability import RecordDropModel, days_until

logger = structlog.get_logger(__name__)


class EstimateDropProbabilityUseCase:
    def __init__(
        self,
        observation_repository: IObservationRepository,
        model: Optional[RecordDropModel] = None,
    ):
        self.observation_repository = observation_repository
        self.model = model or RecordDropModel()

    def execute(
        self, observation: PriceObservation, today: Optional[date] = None
    ) -> DropProbabilityDTO:
        """Estimate from the observation's persisted score fields."""
        delta_pct = observation.delta_pct if observation.delta_pct is not None else 0.0
        z_score = observation.z_score if observation.z_score is not None else 0.0
        rarity = observation.rarity if observation.rarity is not None else NEUTRAL_RARITY
        days_out = days_until(observation.travel_date, today)

        estimate = self.model.estimate(delta_pct, z_score, rarity, days_out)

        return DropProbabilityDTO(
            probability=round(estimate.probability, 2),
            confidence=estimate.confidence,
            recommendation=estimate.recommendation,
            factors=DropFactorsDTO(
                current_savings=round(delta_pct * 100),
                days_out=days_out,
                rarity_percentile=round((1 - rarity) * 100),
                anomaly_score=round(abs(z_score), 1),
            ),
        )

    async def execute_by_id(
        self, observation_id: str, today: Optional[date] = None
    ) -> DropProbabilityDTO:
        """Look the observation up first; unknown IDs get a neutral answer."""
        observation = await self.observation_repository.get_observation(observation_id)
        if observation is None:
            logger.info("drop_probability.observation_missing", id=observation_id)
            return DropProbabilityDTO(
                probability=0.5,
                confidence=Confidence.LOW,
                recommendation=Recommendation.WAIT,
            )
        return self.execute(observation, today)
