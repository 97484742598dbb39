"""
Application Use Case - Package Building

Assembles flight + hotel packages from recently scored observations and
replaces the previously persisted package set with the new one.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import structlog

from farecast.application.dtos.package_dto import PackageBuildResultDTO
from farecast.domain.entities.observation import FlightObservation, HotelObservation
from farecast.domain.repositories.observation_repository import IObservationRepository
from farecast.domain.repositories.package_repository import IPackageRepository
from farecast.domain.services.package_assembler import (
    PackageAssembler,
    deduplicate_packages,
)
from farecast.shared.consts import ObservationKind

logger = structlog.get_logger(__name__)


class BuildPackagesUseCase:
    """Rebuilds the package collection from the trailing observation window."""

    def __init__(
        self,
        observation_repository: IObservationRepository,
        package_repository: IPackageRepository,
        assembler: Optional[PackageAssembler] = None,
        window_days: int = 30,
    ):
        self.observation_repository = observation_repository
        self.package_repository = package_repository
        self.assembler = assembler or PackageAssembler()
        self.window_days = window_days

    async def execute(self) -> PackageBuildResultDTO:
        since = datetime.now(timezone.utc) - timedelta(days=self.window_days)

        flights: List[FlightObservation] = [
            obs
            for obs in await self.observation_repository.list_observations(
                ObservationKind.FLIGHT, since=since
            )
            if isinstance(obs, FlightObservation)
        ]
        hotels: List[HotelObservation] = [
            obs
            for obs in await self.observation_repository.list_observations(
                ObservationKind.HOTEL, since=since
            )
            if isinstance(obs, HotelObservation)
        ]

        logger.info(
            "packages.start",
            flights=len(flights),
            hotels=len(hotels),
            window_days=self.window_days,
        )

        candidates = self.assembler.assemble(flights, hotels)
        packages = deduplicate_packages(candidates)
        logger.info(
            "packages.assembled", candidates=len(candidates), unique=len(packages)
        )

        # Previous packages are superseded, never patched
        replaced = 0
        for existing in await self.package_repository.list_packages():
            if existing.id is None:
                continue
            if await self.package_repository.delete_package(existing.id):
                replaced += 1

        created = 0
        for package in packages:
            try:
                await self.package_repository.insert_package(package)
                created += 1
            except Exception as exc:
                logger.error(
                    "packages.insert_failed",
                    key="-".join(str(part) for part in package.dedup_key),
                    stage="insert",
                    error=str(exc),
                )

        logger.info("packages.completed", created=created, replaced=replaced)
        return PackageBuildResultDTO(
            created=created, candidates=len(candidates), replaced=replaced
        )
