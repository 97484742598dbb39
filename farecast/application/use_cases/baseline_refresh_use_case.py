"""
Application Use Case - Baseline Refresh

Rebuilds the statistical fields of every price observation:
  * Reads all observations of one kind from storage
  * Groups them into per-route / per-region series
  * Fits one Holt-Winters model per eligible series
  * Scores each observation against its series' fit and writes the
    expected price, deviation, z-score, rarity and anomaly flag back

A failing series is logged and skipped; the rest of the batch continues.
A run that scores no series at all raises BaselineRunError.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

import numpy as np
import structlog

from farecast.application.dtos.baseline_dto import (
    AllBaselinesSummaryDTO,
    BaselineRefreshSummaryDTO,
)
from farecast.domain.entities.errors import BaselineRunError
from farecast.domain.entities.forecasting import HoltWintersModel
from farecast.domain.entities.observation import ObservationScores, PriceObservation
from farecast.domain.repositories.observation_repository import IObservationRepository
from farecast.domain.services.anomaly_scorer import rarity, score
from farecast.domain.services.holt_winters import HoltWintersConfig, HoltWintersFitter
from farecast.domain.services.series_builder import PriceSeries, build_series
from farecast.shared.consts import ObservationKind

logger = structlog.get_logger(__name__)


class RefreshBaselinesUseCase:
    """Fits and scores every route or region series of one kind."""

    def __init__(
        self,
        observation_repository: IObservationRepository,
        config: Optional[HoltWintersConfig] = None,
        history_days: int = 0,
    ):
        """
        Args:
            observation_repository: Storage of price observations
            config: Holt-Winters period and smoothing weights
            history_days: Ignore observations captured before this many
                days ago; 0 uses the full history
        """
        self.observation_repository = observation_repository
        self.config = config or HoltWintersConfig()
        self.fitter = HoltWintersFitter(self.config)
        self.history_days = history_days

    async def execute(self, kind: ObservationKind) -> BaselineRefreshSummaryDTO:
        since = None
        if self.history_days > 0:
            since = datetime.now(timezone.utc) - timedelta(days=self.history_days)

        observations = await self.observation_repository.list_observations(
            kind, since=since
        )
        batch = build_series(observations, self.config.min_observations)

        logger.info(
            "baselines.start",
            kind=kind.value,
            observations=len(observations),
            eligible=len(batch.eligible),
            skipped=len(batch.skipped),
        )
        for key, count in batch.skipped.items():
            logger.info(
                "baselines.series_skipped",
                kind=kind.value,
                key=key,
                observations=count,
                required=self.config.min_observations,
            )
        if not batch.eligible:
            logger.warning(
                "baselines.no_eligible_series",
                kind=kind.value,
                skipped=len(batch.skipped),
            )
            raise BaselineRunError(
                f"No {kind.value} series has enough observations to fit",
                {"kind": kind.value, "skipped": len(batch.skipped), "failed": 0},
            )

        processed = failed = updated = 0
        for series in batch.eligible:
            try:
                model = self.fitter.fit(series.prices)
            except Exception as exc:
                failed += 1
                logger.error(
                    "baselines.series_failed",
                    kind=kind.value,
                    key=series.key,
                    stage="fit",
                    error=str(exc),
                )
                continue

            logger.debug(
                "baselines.model_fitted",
                kind=kind.value,
                key=series.key,
                alpha=model.alpha,
                beta=model.beta,
                gamma=model.gamma,
                mse=model.mse,
            )

            try:
                scored = self.score_series(series, model)
            except Exception as exc:
                failed += 1
                logger.error(
                    "baselines.series_failed",
                    kind=kind.value,
                    key=series.key,
                    stage="score",
                    error=str(exc),
                )
                continue

            # Storage failures are run-level and propagate
            for observation, scores in scored:
                await self.observation_repository.patch_observation(
                    observation.id, scores
                )
                observation.scores = scores
                updated += 1
            processed += 1

        if processed == 0:
            raise BaselineRunError(
                f"Every eligible {kind.value} series failed",
                {"kind": kind.value, "skipped": len(batch.skipped), "failed": failed},
            )

        summary = BaselineRefreshSummaryDTO(
            kind=kind,
            groups_processed=processed,
            groups_skipped=len(batch.skipped),
            groups_failed=failed,
            records_updated=updated,
            completed_at=datetime.now(timezone.utc),
        )
        logger.info("baselines.completed", **summary.model_dump(mode="json"))
        return summary

    @staticmethod
    def score_series(
        series: PriceSeries, model: HoltWintersModel
    ) -> List[Tuple[PriceObservation, ObservationScores]]:
        """Derive the analytic fields of every observation from one fit."""
        prices = series.prices
        history = prices.tolist()
        residuals = model.residuals.tolist()
        updated_at = datetime.now(timezone.utc)

        results: List[Tuple[PriceObservation, ObservationScores]] = []
        for i, observation in enumerate(series.observations):
            if i >= model.n_observations:
                break
            expected = float(model.fitted[i])
            actual = float(prices[i])
            if not np.isfinite(expected):
                raise ValueError(f"Non-finite fitted value at position {i}")

            anomaly = score(actual, expected, residuals)
            results.append(
                (
                    observation,
                    ObservationScores(
                        expected_price=float(round(expected)),
                        delta_pct=round(anomaly.delta_pct, 3),
                        z_score=round(anomaly.z_score, 2),
                        rarity=round(rarity(actual, history), 3),
                        is_anomaly=anomaly.is_anomaly,
                        model_updated_at=updated_at,
                    ),
                )
            )
        return results


class RefreshAllBaselinesUseCase:
    """
    Refreshes flight routes then hotel regions.

    One kind without any scored series is reported as an empty summary;
    the run fails only when neither kind scored a series.
    """

    def __init__(self, refresh_baselines: RefreshBaselinesUseCase):
        self.refresh_baselines = refresh_baselines

    async def execute(self) -> AllBaselinesSummaryDTO:
        errors: List[BaselineRunError] = []
        flights = await self._refresh_kind(ObservationKind.FLIGHT, errors)
        hotels = await self._refresh_kind(ObservationKind.HOTEL, errors)

        if len(errors) == 2:
            raise BaselineRunError(
                "No flight or hotel series could be scored",
                {"flight": errors[0].details, "hotel": errors[1].details},
            )

        return AllBaselinesSummaryDTO(
            flights=flights,
            hotels=hotels,
            total_records=flights.records_updated + hotels.records_updated,
            total_groups=flights.groups_processed + hotels.groups_processed,
            completed_at=datetime.now(timezone.utc),
        )

    async def _refresh_kind(
        self, kind: ObservationKind, errors: List[BaselineRunError]
    ) -> BaselineRefreshSummaryDTO:
        try:
            return await self.refresh_baselines.execute(kind)
        except BaselineRunError as exc:
            errors.append(exc)
            logger.warning(
                "baselines.kind_unscored", kind=kind.value, error=exc.message
            )
            return BaselineRefreshSummaryDTO(
                kind=kind,
                groups_skipped=exc.details.get("skipped", 0),
                groups_failed=exc.details.get("failed", 0),
                completed_at=datetime.now(timezone.utc),
            )
