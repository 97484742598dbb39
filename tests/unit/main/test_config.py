from __future__ import annotations

import pytest
from pydantic import ValidationError

from farecast.domain.services.package_assembler import StayPolicy
from farecast.main.config import AppSettings, PackageSettings, get_settings
from farecast.shared.consts import EnumEnvironment


def test_get_settings_loads_defaults(monkeypatch) -> None:
    monkeypatch.delenv("DB_MONGO_URI", raising=False)
    settings = get_settings()

    assert settings.database.mongo_uri.startswith("mongodb://")
    assert settings.environment == EnumEnvironment.DEVELOPMENT
    assert settings.analytics.seasonal_period == 7
    assert settings.analytics.alpha is None
    assert settings.analytics.history_days == 0
    assert settings.packages.window_days == 30
    assert settings.packages.stay_policy == StayPolicy.RANGE
    assert settings.packages.allowed_stay_nights == [3, 5, 7, 14]
    assert settings.packages.hotel_markup == 1.2
    assert settings.packages.hot_deal_max_rarity == 0.1
    assert settings.packages.destination_regions == {
        "MCO": "MCO",
        "FLL": "FLL",
        "MIA": "MIA",
        "TPA": "TPA",
    }


def test_settings_respect_environment_variables(monkeypatch) -> None:
    monkeypatch.setenv("DB_MONGO_URI", "mongodb://test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ANALYTICS_ALPHA", "0.3")
    monkeypatch.setenv("ANALYTICS_HISTORY_DAYS", "365")
    monkeypatch.setenv("PACKAGES_STAY_POLICY", "allow_list")
    monkeypatch.setenv("PACKAGES_ALLOWED_STAY_NIGHTS", "[2, 4]")
    monkeypatch.setenv("PACKAGES_DESTINATION_REGIONS", '{"MCO": "ORL"}')

    settings = AppSettings()

    assert settings.database.mongo_uri == "mongodb://test"
    assert settings.logging.level.value == "DEBUG"
    assert settings.analytics.alpha == 0.3
    assert settings.analytics.history_days == 365
    assert settings.packages.stay_policy == StayPolicy.ALLOW_LIST
    assert settings.packages.allowed_stay_nights == [2, 4]
    assert settings.packages.destination_regions == {"MCO": "ORL"}


def test_smoothing_weights_must_be_open_unit_interval(monkeypatch) -> None:
    monkeypatch.setenv("ANALYTICS_GAMMA", "1.0")

    with pytest.raises(ValidationError):
        AppSettings()


def test_stay_lengths_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        PackageSettings(allowed_stay_nights=[0, 3])
