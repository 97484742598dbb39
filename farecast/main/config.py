"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from farecast.domain.services.package_assembler import (
    DEFAULT_DESTINATION_REGIONS,
    StayPolicy,
)
from farecast.shared import DEFAULT_SEASONAL_PERIOD, EnumEnvironment, EnumLogLevel


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    mongo_uri: str = Field(
        default="mongodb://localhost:27017/farecast",
        description="MongoDB connection URI",
    )
    database_name: str = Field(
        default="farecast", description="Name of the MongoDB database"
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console only)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AnalyticsSettings(BaseSettings):
    """Baseline refresh settings."""

    seasonal_period: int = Field(
        default=DEFAULT_SEASONAL_PERIOD, ge=1, description="Season length in steps"
    )
    alpha: Optional[float] = Field(
        default=None, gt=0, lt=1, description="Fixed level weight, searched if unset"
    )
    beta: Optional[float] = Field(
        default=None, gt=0, lt=1, description="Fixed trend weight, searched if unset"
    )
    gamma: Optional[float] = Field(
        default=None, gt=0, lt=1, description="Fixed seasonal weight, searched if unset"
    )
    history_days: int = Field(
        default=0,
        ge=0,
        description="Only fit observations captured in the last N days (0 = all)",
    )

    model_config = SettingsConfigDict(
        env_prefix="ANALYTICS_", case_sensitive=False, extra="ignore"
    )


class PackageSettings(BaseSettings):
    """Package assembly settings."""

    window_days: int = Field(
        default=30, ge=1, description="Observation capture window for assembly"
    )
    stay_policy: StayPolicy = Field(
        default=StayPolicy.RANGE, description="How acceptable stay lengths are chosen"
    )
    allowed_stay_nights: List[int] = Field(
        default_factory=lambda: [3, 5, 7, 14],
        description="Accepted stay lengths under the allow_list policy",
    )
    max_stay_nights: int = Field(
        default=14, ge=1, description="Longest accepted stay under the range policy"
    )
    hotel_markup: float = Field(
        default=1.2, gt=0, description="Multiplier for the expected hotel cost"
    )
    hot_deal_min_delta: float = Field(default=0.15)
    hot_deal_max_rarity: float = Field(default=0.1, ge=0, le=1)
    neutral_rarity: float = Field(default=0.5, ge=0, le=1)
    destination_regions: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_DESTINATION_REGIONS),
        description="Flight destination airport to hotel region",
    )

    model_config = SettingsConfigDict(
        env_prefix="PACKAGES_", case_sensitive=False, extra="ignore"
    )

    @field_validator("allowed_stay_nights")
    @classmethod
    def _positive_nights(cls, value: List[int]) -> List[int]:
        if any(nights <= 0 for nights in value):
            raise ValueError("stay lengths must be positive")
        return value


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    packages: PackageSettings = Field(default_factory=PackageSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on environment.
    """
    return AppSettings()
