"""
Domain Repository Interface - Packages
"""

from abc import ABC, abstractmethod
from typing import List

from farecast.domain.entities.package import Package


class IPackageRepository(ABC):
    """Interface for package repositories."""

    @abstractmethod
    async def list_packages(self) -> List[Package]:
        """List every persisted package."""
        pass

    @abstractmethod
    async def delete_package(self, package_id: str) -> bool:
        """Delete a package by ID."""
        pass

    @abstractmethod
    async def insert_package(self, package: Package) -> Package:
        """Persist a new package and return it with its ID assigned."""
        pass
