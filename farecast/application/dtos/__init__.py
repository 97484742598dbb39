"""
DTOs Package - Application Layer

Data Transfer Objects returned by the use cases.
"""

from .baseline_dto import AllBaselinesSummaryDTO, BaselineRefreshSummaryDTO
from .insights_dto import (
    DropFactorsDTO,
    DropProbabilityDTO,
    ModelPerformanceDTO,
    RouteAnalyticsDTO,
    TopDealDTO,
)
from .package_dto import PackageBuildResultDTO

__all__ = [
    "AllBaselinesSummaryDTO",
    "BaselineRefreshSummaryDTO",
    "DropFactorsDTO",
    "DropProbabilityDTO",
    "ModelPerformanceDTO",
    "PackageBuildResultDTO",
    "RouteAnalyticsDTO",
    "TopDealDTO",
]
