"""
Repository implementations - Infrastructure Layer

MongoDB-backed implementations of the domain repository interfaces.
"""

from farecast.infrastructure.repositories.observation_repository import (
    ObservationRepository,
)
from farecast.infrastructure.repositories.package_repository import PackageRepository

__all__ = ["ObservationRepository", "PackageRepository"]
