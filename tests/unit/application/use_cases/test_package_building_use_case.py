from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from farecast.application.use_cases.package_building_use_case import (
    BuildPackagesUseCase,
)
from farecast.domain.entities.package import Package
from farecast.domain.services.package_assembler import (
    PackageAssembler,
    PackagePolicy,
    StayPolicy,
)
from farecast.shared.consts import ObservationKind
from tests.conftest import (
    InMemoryObservationRepository,
    InMemoryPackageRepository,
    make_flight,
    make_hotel,
    make_scores,
)


def _recent() -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=1)


def _flight(id: str, price: float, expected: float, delta: float, rarity: float):
    return make_flight(
        id,
        price,
        day=14,
        captured_at=_recent(),
        scores=make_scores(expected_price=expected, delta_pct=delta, rarity=rarity),
    )


def _hotel(id: str, price: float, nights: int = 7, captured_at=None):
    return make_hotel(
        id,
        price,
        check_in="2025-01-15",
        nights=nights,
        captured_at=captured_at or _recent(),
    )


def _stale_package(id: str) -> Package:
    return Package(
        id=id,
        origin="JFK",
        dest="MIA",
        region="MIA",
        depart_date="2024-11-01",
        return_date="2024-11-04",
        stay_nights=3,
        flight_price=150.0,
        hotel_total=300.0,
        total_price=450.0,
        pct_saved=0.05,
        rarity_score=0.6,
        drop_probability=0.4,
        is_hot_deal=False,
    )


@pytest.mark.asyncio
async def test_build_supersedes_previous_packages() -> None:
    observations = InMemoryObservationRepository(
        [_flight("f1", 200.0, 250.0, 0.2, 0.05), _hotel("h1", 100.0)]
    )
    packages = InMemoryPackageRepository([_stale_package("old-1"), _stale_package("old-2")])

    result = await BuildPackagesUseCase(observations, packages).execute()

    assert result.created == 1
    assert result.candidates == 1
    assert result.replaced == 2
    assert sorted(packages.deleted) == ["old-1", "old-2"]
    (package,) = packages.packages.values()
    assert package.dest == "MCO"
    assert package.is_hot_deal is True


@pytest.mark.asyncio
async def test_rerun_is_idempotent(package_repository) -> None:
    observations = InMemoryObservationRepository(
        [_flight("f1", 200.0, 250.0, 0.2, 0.05), _hotel("h1", 100.0)]
    )
    use_case = BuildPackagesUseCase(observations, package_repository)

    first = await use_case.execute()
    second = await use_case.execute()

    assert first.created == second.created == 1
    assert second.replaced == 1
    assert len(package_repository.packages) == 1


@pytest.mark.asyncio
async def test_duplicate_keys_keep_best_savings(package_repository) -> None:
    observations = InMemoryObservationRepository(
        [
            _flight("pricey", 260.0, 250.0, -0.04, 0.6),
            _flight("cheap", 180.0, 250.0, 0.28, 0.05),
            _hotel("h1", 100.0),
        ]
    )

    result = await BuildPackagesUseCase(observations, package_repository).execute()

    assert result.candidates == 2
    assert result.created == 1
    (package,) = package_repository.packages.values()
    assert package.flight_price == 180.0


@pytest.mark.asyncio
async def test_failed_insert_is_skipped(package_repository) -> None:
    observations = InMemoryObservationRepository(
        [
            _flight("f1", 200.0, 250.0, 0.2, 0.05),
            _hotel("h7", 100.0, nights=7),
            _hotel("h3", 110.0, nights=3),
        ]
    )
    package_repository.fail_on.add(("JFK", "MCO", "2025-01-15", 7))

    result = await BuildPackagesUseCase(observations, package_repository).execute()

    assert result.candidates == 2
    assert result.created == 1
    assert [p.stay_nights for p in package_repository.packages.values()] == [3]


@pytest.mark.asyncio
async def test_only_recent_observations_are_used(package_repository) -> None:
    old = datetime.now(timezone.utc) - timedelta(days=60)
    observations = InMemoryObservationRepository(
        [_flight("f1", 200.0, 250.0, 0.2, 0.05), _hotel("h1", 100.0, captured_at=old)]
    )

    result = await BuildPackagesUseCase(
        observations, package_repository, window_days=30
    ).execute()

    assert result.created == 0
    kinds = [kind for kind, _ in observations.list_calls]
    assert kinds == [ObservationKind.FLIGHT, ObservationKind.HOTEL]
    assert all(since is not None for _, since in observations.list_calls)


@pytest.mark.asyncio
async def test_assembler_policy_is_applied(package_repository) -> None:
    observations = InMemoryObservationRepository(
        [_flight("f1", 200.0, 250.0, 0.2, 0.05), _hotel("h4", 100.0, nights=4)]
    )
    assembler = PackageAssembler(PackagePolicy(stay_policy=StayPolicy.ALLOW_LIST))

    result = await BuildPackagesUseCase(
        observations, package_repository, assembler=assembler
    ).execute()

    assert result.candidates == 0
    assert result.created == 0
