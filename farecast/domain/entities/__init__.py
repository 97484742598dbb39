"""
Domain Entities Package

This package contains the core domain entities and business logic.
"""

from .errors import (
    BaselineRunError,
    DegenerateParameterError,
    DomainError,
    InsufficientDataError,
    InvalidSmoothingParameterError,
    MissingCompatibilityError,
)
from .forecasting import (
    AnomalyScore,
    Confidence,
    DropEstimate,
    HoltWintersModel,
    Recommendation,
)
from .observation import (
    FlightObservation,
    HotelObservation,
    ObservationScores,
    PriceObservation,
)
from .package import Package

__all__ = [
    "AnomalyScore",
    "BaselineRunError",
    "Confidence",
    "DegenerateParameterError",
    "DomainError",
    "DropEstimate",
    "FlightObservation",
    "HoltWintersModel",
    "HotelObservation",
    "InsufficientDataError",
    "InvalidSmoothingParameterError",
    "MissingCompatibilityError",
    "ObservationScores",
    "Package",
    "PriceObservation",
    "Recommendation",
]
