"""
Domain Errors

This module defines custom error classes for domain-specific exceptions.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InsufficientDataError(DomainError):
    """Raised when a series is too short to fit a seasonal model."""

    def __init__(
        self, required: int, available: int, details: Optional[Dict[str, Any]] = None
    ):
        self.required = required
        self.available = available
        message = (
            f"Need at least {required} observations, got {available}"
        )
        super().__init__(message, details)


class InvalidSmoothingParameterError(DomainError):
    """Raised when an explicit smoothing weight lies outside (0, 1)."""

    def __init__(self, name: str, value: float):
        super().__init__(
            f"Smoothing parameter {name}={value} must be in the open interval (0, 1)",
            {"parameter": name, "value": value},
        )


class DegenerateParameterError(DomainError):
    """Raised when a smoothing parameter combination yields a non-finite fit."""

    def __init__(self, alpha: float, beta: float, gamma: float):
        super().__init__(
            "Holt-Winters recursion produced non-finite values",
            {"alpha": alpha, "beta": beta, "gamma": gamma},
        )


class MissingCompatibilityError(DomainError):
    """Raised when no hotel stay can be paired with a flight."""

    def __init__(self, flight_id: str, reason: str):
        super().__init__(
            f"No compatible hotel for flight {flight_id}: {reason}",
            {"flight_id": flight_id, "reason": reason},
        )


class BaselineRunError(DomainError):
    """Raised when a baseline refresh scored no series at all."""

    pass
