"""
Batch Entry Point - Main Layer

Runs one full analytics pass: refresh every flight and hotel baseline,
then rebuild packages from the freshly scored observations.

    python -m farecast.main
"""

import asyncio

from farecast.main.config import get_settings
from farecast.main.container import app_lifespan, init_container
from farecast.shared import configure_logging, get_logger, update_logging_from_settings

# Configure logging with basic settings first
configure_logging()

logger = get_logger(__name__)


async def run_batch() -> None:
    settings = get_settings()
    update_logging_from_settings(settings)
    init_container(settings)

    async with app_lifespan() as container:
        baselines = await container.refresh_all_baselines_use_case().execute()
        packages = await container.build_packages_use_case().execute()

    logger.info(
        "batch.completed",
        records_updated=baselines.total_records,
        groups_processed=baselines.total_groups,
        packages_created=packages.created,
    )


def main() -> None:
    """Main entry point for one batch run."""
    logger.info("batch.start")
    asyncio.run(run_batch())


if __name__ == "__main__":
    main()
