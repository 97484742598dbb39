"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from contextlib import asynccontextmanager

from dependency_injector import containers, providers

from farecast.application.use_cases import (
    BuildPackagesUseCase,
    EstimateDropProbabilityUseCase,
    GetModelPerformanceUseCase,
    GetRouteAnalyticsUseCase,
    GetTopDealsUseCase,
    RefreshAllBaselinesUseCase,
    RefreshBaselinesUseCase,
)
from farecast.domain.services import (
    HoltWintersConfig,
    PackageAssembler,
    PackageDropModel,
    PackagePolicy,
    RecordDropModel,
    SimpleSmoothingConfig,
)
from farecast.infrastructure.database import MongoDatabase
from farecast.infrastructure.repositories import (
    ObservationRepository,
    PackageRepository,
)
from farecast.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependency-injector."""

    # Settings
    config = providers.Configuration()

    # Infrastructure
    mongo_database = providers.Singleton(
        MongoDatabase,
        mongo_uri=config.database.mongo_uri,
        db_name=config.database.database_name,
    )

    observation_repository = providers.Singleton(
        ObservationRepository,
        database=mongo_database,
    )

    package_repository = providers.Singleton(
        PackageRepository,
        database=mongo_database,
    )

    # Domain services
    holt_winters_config = providers.Singleton(
        HoltWintersConfig,
        seasonal_period=config.analytics.seasonal_period,
        alpha=config.analytics.alpha,
        beta=config.analytics.beta,
        gamma=config.analytics.gamma,
    )

    package_policy = providers.Singleton(
        PackagePolicy,
        stay_policy=config.packages.stay_policy,
        allowed_stay_nights=providers.Callable(
            tuple, config.packages.allowed_stay_nights
        ),
        max_stay_nights=config.packages.max_stay_nights,
        hotel_markup=config.packages.hotel_markup,
        hot_deal_min_delta=config.packages.hot_deal_min_delta,
        hot_deal_max_rarity=config.packages.hot_deal_max_rarity,
        neutral_rarity=config.packages.neutral_rarity,
        destination_regions=config.packages.destination_regions,
    )

    package_assembler = providers.Factory(
        PackageAssembler,
        policy=package_policy,
        drop_model=providers.Singleton(PackageDropModel),
    )

    record_drop_model = providers.Singleton(RecordDropModel)

    # Application (use cases)
    refresh_baselines_use_case = providers.Factory(
        RefreshBaselinesUseCase,
        observation_repository=observation_repository,
        config=holt_winters_config,
        history_days=config.analytics.history_days,
    )

    refresh_all_baselines_use_case = providers.Factory(
        RefreshAllBaselinesUseCase,
        refresh_baselines=refresh_baselines_use_case,
    )

    build_packages_use_case = providers.Factory(
        BuildPackagesUseCase,
        observation_repository=observation_repository,
        package_repository=package_repository,
        assembler=package_assembler,
        window_days=config.packages.window_days,
    )

    estimate_drop_probability_use_case = providers.Factory(
        EstimateDropProbabilityUseCase,
        observation_repository=observation_repository,
        model=record_drop_model,
    )

    get_top_deals_use_case = providers.Factory(
        GetTopDealsUseCase,
        observation_repository=observation_repository,
    )

    get_route_analytics_use_case = providers.Factory(
        GetRouteAnalyticsUseCase,
        observation_repository=observation_repository,
        smoothing=providers.Singleton(SimpleSmoothingConfig),
    )

    get_model_performance_use_case = providers.Factory(
        GetModelPerformanceUseCase,
        observation_repository=observation_repository,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan():
    """
    Open the database, ensure its indexes and close it on exit.

    Wraps one batch process (a scheduled job run or a shell session).
    """
    container = get_container()
    mongo_database = container.mongo_database()

    try:
        logger.info("container.mongo.ensure_connection")
        await mongo_database.create_indexes()

        logger.info("container.resources.initialized")
        yield container

    finally:
        logger.info("container.mongo.close")
        mongo_database.close()
        logger.info("container.resources.shutdown")
