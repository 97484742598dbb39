"""
Application DTOs - Drop probability and deal insights

Read-side views over scored observations.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from farecast.domain.entities.forecasting import Confidence, Recommendation
from farecast.shared.consts import ObservationKind


class DropFactorsDTO(BaseModel):
    current_savings: int = Field(description="deltaPct as a whole percentage")
    days_out: int
    rarity_percentile: int = Field(description="Share of history priced above, %")
    anomaly_score: float = Field(description="|zScore| rounded to one decimal")


class DropProbabilityDTO(BaseModel):
    probability: float = Field(ge=0.0, le=1.0)
    confidence: Confidence
    recommendation: Recommendation
    factors: Optional[DropFactorsDTO] = None


class TopDealDTO(BaseModel):
    id: str
    kind: ObservationKind
    key: str
    date: str
    price: float
    expected_price: float
    delta_pct: float
    rarity: float
    is_anomaly: bool
    savings: float = Field(ge=0.0)
    deal_score: float = Field(ge=0.0)
    url: Optional[str] = None


class RouteAnalyticsDTO(BaseModel):
    kind: ObservationKind
    key: str
    total_observations: int = 0
    avg_price: float = 0.0
    min_price: float = 0.0
    max_price: float = 0.0
    avg_expected: float = 0.0
    avg_savings: float = 0.0
    smoothed_price: Optional[float] = None
    deals: int = 0
    trend: str = "unknown"
    recent_ids: List[str] = Field(default_factory=list)


class ModelPerformanceDTO(BaseModel):
    total_scored: int = 0
    samples_analyzed: int = 0
    avg_accuracy: float = 0.0
    last_updated: Optional[datetime] = None
