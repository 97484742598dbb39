from __future__ import annotations

from typing import cast

import pytest
from pymongo.errors import PyMongoError

from farecast.domain.entities.package import Package
from farecast.infrastructure.database.mongo_database import (
    PACKAGES_COLLECTION,
    MongoDatabase,
)
from farecast.infrastructure.repositories.package_repository import PackageRepository


def _package() -> Package:
    return Package(
        origin="JFK",
        dest="MCO",
        region="MCO",
        depart_date="2025-01-15",
        return_date="2025-01-22",
        stay_nights=7,
        flight_price=200.0,
        hotel_total=700.0,
        total_price=900.0,
        pct_saved=0.174,
        rarity_score=0.275,
        drop_probability=0.45,
        is_hot_deal=True,
        flight_url="https://fly.example/1",
        hotel_url="https://stay.example/1",
    )


@pytest.mark.asyncio
async def test_insert_assigns_id_and_persists(fake_mongo_database) -> None:
    repository = PackageRepository(cast(MongoDatabase, fake_mongo_database))

    stored = await repository.insert_package(_package())

    assert stored.id is not None
    document = fake_mongo_database.get_collection(PACKAGES_COLLECTION).documents[stored.id]
    assert document["hotel_url"] == "https://stay.example/1"
    assert document["created_at"] == stored.created_at

    (listed,) = await repository.list_packages()
    assert listed == stored


@pytest.mark.asyncio
async def test_delete_package(fake_mongo_database) -> None:
    repository = PackageRepository(cast(MongoDatabase, fake_mongo_database))
    stored = await repository.insert_package(_package())

    assert await repository.delete_package(stored.id) is True
    assert await repository.delete_package(stored.id) is False
    assert await repository.list_packages() == []


@pytest.mark.asyncio
async def test_insert_error_is_reraised(fake_mongo_database) -> None:
    repository = PackageRepository(cast(MongoDatabase, fake_mongo_database))

    def broken(document):
        raise PyMongoError("duplicate key")

    fake_mongo_database.get_collection(PACKAGES_COLLECTION).insert_one = broken

    with pytest.raises(PyMongoError):
        await repository.insert_package(_package())
