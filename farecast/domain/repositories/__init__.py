"""
Repositories Package

This package contains interfaces defining repository contracts
for data access operations. Specific implementations are provided
by the infrastructure layer.
"""

from .observation_repository import IObservationRepository
from .package_repository import IPackageRepository

__all__ = ["IObservationRepository", "IPackageRepository"]
