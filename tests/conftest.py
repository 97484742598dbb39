from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from farecast.domain.entities.observation import (  # noqa: E402
    FlightObservation,
    HotelObservation,
    ObservationScores,
    PriceObservation,
)
from farecast.domain.entities.package import Package  # noqa: E402
from farecast.domain.repositories.observation_repository import (  # noqa: E402
    IObservationRepository,
)
from farecast.domain.repositories.package_repository import (  # noqa: E402
    IPackageRepository,
)
from farecast.shared.consts import ObservationKind  # noqa: E402

# Reference series used across the Holt-Winters and baseline tests
REFERENCE_SERIES = [100, 102, 98, 101, 103, 99, 100, 100, 103, 97, 102, 104, 98, 101]

BASE_DATE = date(2025, 1, 1)
CAPTURED_AT = datetime(2024, 12, 1, 12, 0, tzinfo=timezone.utc)


def make_flight(
    id: str,
    price: float,
    day: int = 0,
    origin: str = "JFK",
    dest: str = "MCO",
    scores: Optional[ObservationScores] = None,
    captured_at: Optional[datetime] = None,
    url: Optional[str] = None,
) -> FlightObservation:
    return FlightObservation(
        id=id,
        date=(BASE_DATE + timedelta(days=day)).isoformat(),
        price=price,
        captured_at=captured_at or CAPTURED_AT,
        url=url,
        scores=scores,
        origin=origin,
        dest=dest,
    )


def make_hotel(
    id: str,
    price: float,
    check_in: str = "2025-01-15",
    nights: Optional[int] = 7,
    region: str = "MCO",
    scores: Optional[ObservationScores] = None,
    captured_at: Optional[datetime] = None,
) -> HotelObservation:
    check_out = None
    if nights is not None:
        check_out = (date.fromisoformat(check_in) + timedelta(days=nights)).isoformat()
    return HotelObservation(
        id=id,
        date=check_in,
        price=price,
        captured_at=captured_at or CAPTURED_AT,
        scores=scores,
        region=region,
        check_out=check_out,
    )


def make_scores(
    expected_price: float = 100.0,
    delta_pct: float = 0.0,
    z_score: float = 0.0,
    rarity: float = 0.5,
    is_anomaly: bool = False,
    model_updated_at: Optional[datetime] = None,
) -> ObservationScores:
    return ObservationScores(
        expected_price=expected_price,
        delta_pct=delta_pct,
        z_score=z_score,
        rarity=rarity,
        is_anomaly=is_anomaly,
        model_updated_at=model_updated_at or CAPTURED_AT,
    )


def route_series(
    prices: Sequence[float], origin: str = "JFK", dest: str = "MCO"
) -> List[FlightObservation]:
    return [
        make_flight(f"{origin}-{dest}-{i}", price, day=i, origin=origin, dest=dest)
        for i, price in enumerate(prices)
    ]


class InMemoryObservationRepository(IObservationRepository):
    def __init__(self, observations: Sequence[PriceObservation] = ()) -> None:
        self.observations: Dict[str, PriceObservation] = {
            obs.id: obs for obs in observations
        }
        self.patches: List[tuple[str, ObservationScores]] = []
        self.list_calls: List[tuple[ObservationKind, Optional[datetime]]] = []

    async def list_observations(
        self, kind: ObservationKind, since: Optional[datetime] = None
    ) -> List[PriceObservation]:
        self.list_calls.append((kind, since))
        return [
            obs
            for obs in self.observations.values()
            if obs.kind == kind and (since is None or obs.captured_at >= since)
        ]

    async def get_observation(self, observation_id: str) -> Optional[PriceObservation]:
        return self.observations.get(observation_id)

    async def patch_observation(
        self, observation_id: str, scores: ObservationScores
    ) -> bool:
        self.patches.append((observation_id, scores))
        return observation_id in self.observations


class InMemoryPackageRepository(IPackageRepository):
    def __init__(self, packages: Sequence[Package] = ()) -> None:
        self.packages: Dict[str, Package] = {
            pkg.id: pkg for pkg in packages if pkg.id is not None
        }
        self.deleted: List[str] = []
        self.fail_on: set[tuple[str, str, str, int]] = set()
        self._counter = 0

    async def list_packages(self) -> List[Package]:
        return list(self.packages.values())

    async def delete_package(self, package_id: str) -> bool:
        self.deleted.append(package_id)
        return self.packages.pop(package_id, None) is not None

    async def insert_package(self, package: Package) -> Package:
        if package.dedup_key in self.fail_on:
            raise RuntimeError("write rejected")
        self._counter += 1
        package.id = f"pkg-{self._counter}"
        self.packages[package.id] = package
        return package


class FakeCursor:
    def __init__(self, documents: Sequence[Dict[str, Any]]):
        self._documents = list(documents)

    def sort(self, *args: Any, **kwargs: Any) -> "FakeCursor":
        return self

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self._documents)


class FakeCollection:
    def __init__(self) -> None:
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.inserts: List[Dict[str, Any]] = []
        self.last_query: Dict[str, Any] | None = None
        self.dropped_indexes: List[str] = []
        self.created_indexes: List[tuple[Any, ...]] = []

    def find_one(self, query: Dict[str, Any]) -> Dict[str, Any] | None:
        self.last_query = query
        key = query.get("id")
        if not isinstance(key, str):
            return None
        return self.documents.get(key)

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        self.last_query = query
        results = [doc for doc in self.documents.values() if self._matches(doc, query)]
        return FakeCursor(results)

    def insert_one(self, document: Dict[str, Any]) -> Any:
        self.inserts.append(document)
        self.documents[document["id"]] = document
        return SimpleNamespace(acknowledged=True, inserted_id=document["id"])

    def update_one(self, query: Dict[str, Any], update: Dict[str, Any]) -> Any:
        key = query.get("id")
        if not isinstance(key, str) or key not in self.documents:
            return SimpleNamespace(matched_count=0, modified_count=0)
        self.documents[key].update(update.get("$set", {}))
        return SimpleNamespace(matched_count=1, modified_count=1)

    def delete_one(self, query: Dict[str, Any]) -> Any:
        key = query.get("id")
        if isinstance(key, str) and key in self.documents:
            del self.documents[key]
            return SimpleNamespace(deleted_count=1, acknowledged=True)
        return SimpleNamespace(deleted_count=0, acknowledged=False)

    def drop_index(self, index_name: str) -> None:
        self.dropped_indexes.append(index_name)

    def create_index(self, keys: Any, name: str | None = None, **kwargs: Any) -> Any:
        self.created_indexes.append((keys, name, kwargs))
        return name or keys

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        for key, value in query.items():
            if isinstance(value, dict) and "$gte" in value:
                field = document.get(key)
                if field is None or field < value["$gte"]:
                    return False
            elif document.get(key) != value:
                return False
        return True


class FakeMongoDatabase:
    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def create_indexes(self) -> None:  # pragma: no cover - stub for tests
        pass

    def close(self) -> None:
        pass


@pytest.fixture()
def fake_mongo_database() -> FakeMongoDatabase:
    return FakeMongoDatabase()


@pytest.fixture()
def reference_flights() -> List[FlightObservation]:
    return route_series(REFERENCE_SERIES)


@pytest.fixture()
def observation_repository() -> InMemoryObservationRepository:
    return InMemoryObservationRepository()


@pytest.fixture()
def package_repository() -> InMemoryPackageRepository:
    return InMemoryPackageRepository()
