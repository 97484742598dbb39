"""
Use Cases Package - Application Layer

Business operations orchestrating domain services and repositories.
"""

from .baseline_refresh_use_case import (
    RefreshAllBaselinesUseCase,
    RefreshBaselinesUseCase,
)
from .deal_insights_use_case import (
    GetModelPerformanceUseCase,
    GetRouteAnalyticsUseCase,
    GetTopDealsUseCase,
)
from .drop_probability_use_case import EstimateDropProbabilityUseCase
from .package_building_use_case import BuildPackagesUseCase

__all__ = [
    "BuildPackagesUseCase",
    "EstimateDropProbabilityUseCase",
    "GetModelPerformanceUseCase",
    "GetRouteAnalyticsUseCase",
    "GetTopDealsUseCase",
    "RefreshAllBaselinesUseCase",
    "RefreshBaselinesUseCase",
]
