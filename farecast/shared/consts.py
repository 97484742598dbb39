from enum import Enum


class EnumEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class EnumLogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ObservationKind(str, Enum):
    """Source of a price observation: a flight route or a hotel region."""

    FLIGHT = "flight"
    HOTEL = "hotel"


# Weekly seasonality
DEFAULT_SEASONAL_PERIOD = 7
