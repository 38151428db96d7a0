"""Configuration and environment utilities."""

from pathlib import Path

from ..config.logging import get_logger, setup_logging
from ..config.settings import get_missing_settings, get_settings


def ensure_data_directory() -> None:
    """Ensure the data directory and database tables exist."""
    logger = get_logger(__name__)

    settings = get_settings()
    data_path = Path(settings.data_directory)
    data_path.mkdir(exist_ok=True)

    logger.info("Ensured data directory exists", path=str(data_path))

    from ..ormdb.database import create_tables

    create_tables()
    logger.info("Ensured database tables exist")


def initialize_application() -> None:
    """Initialize application configuration, logging and storage."""
    settings = get_settings()

    setup_logging(settings)

    ensure_data_directory()

    logger = get_logger(__name__)
    logger.info(
        "Application initialized successfully",
        environment=settings.environment,
        debug=settings.debug,
        quote_provider=settings.quote_provider,
        email_backend=settings.email_backend,
    )


def validate_environment() -> bool:
    """
    Check that the configured backends have the settings they need.

    Missing settings are logged; the monitoring job also refuses to run
    without them, so this is an early warning rather than a hard stop.

    Returns:
        True if nothing is missing, False otherwise
    """
    logger = get_logger(__name__)
    missing = get_missing_settings()

    if missing:
        logger.warning("Missing configuration", missing=missing)
        return False

    return True
