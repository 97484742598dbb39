"""
Application DTOs - Baseline Refresh

Summaries returned by the baseline refresh use cases.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from farecast.shared.consts import ObservationKind


class BaselineRefreshSummaryDTO(BaseModel):
    """Outcome of refreshing every series of one observation kind."""

    kind: ObservationKind
    groups_processed: int = Field(
        default=0, ge=0, description="Series fitted and scored"
    )
    groups_skipped: int = Field(
        default=0, ge=0, description="Series below the minimum length"
    )
    groups_failed: int = Field(
        default=0, ge=0, description="Series whose fit or scoring raised"
    )
    records_updated: int = Field(
        default=0, ge=0, description="Observations whose analytic fields were written"
    )
    completed_at: datetime


class AllBaselinesSummaryDTO(BaseModel):
    """Combined flight and hotel refresh."""

    flights: BaselineRefreshSummaryDTO
    hotels: BaselineRefreshSummaryDTO
    total_records: int
    total_groups: int
    completed_at: datetime
