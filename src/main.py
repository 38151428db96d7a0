"""
Pricewatch - Main application entry point.

Watches user-defined stock and index price alerts and emails the owner when
a threshold is crossed.
"""

import argparse
import asyncio
import sys

import uvicorn
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from pricewatch.alerts.job import build_alert_monitoring_job
from pricewatch.config.logging import get_logger
from pricewatch.config.settings import get_missing_settings, get_settings
from pricewatch.scheduler import (
    add_alert_monitoring_job,
    list_scheduled_jobs,
    shutdown_scheduler,
    start_scheduler,
)
from pricewatch.utils.config import initialize_application, validate_environment


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Price alert monitoring service")
    parser.add_argument(
        "--once",
        action="store_true",
        help="run a single alert monitoring pass and exit",
    )
    parser.add_argument(
        "--no-api",
        action="store_true",
        help="run the scheduler without the HTTP API",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    """Main application entry point."""
    args = parse_args(argv)

    initialize_application()

    logger = get_logger(__name__)
    settings = get_settings()

    if not validate_environment():
        print(
            "Missing configuration: "
            + ", ".join(get_missing_settings(settings))
            + ". Alert monitoring runs will be skipped until these are set."
        )

    if args.once:
        logger.info("Running a single alert monitoring pass")
        asyncio.run(build_alert_monitoring_job(settings).run())
        return

    start_scheduler()
    add_alert_monitoring_job(settings)
    list_scheduled_jobs()

    try:
        if args.no_api:
            logger.info("Starting scheduler-only mode")
            print("Pricewatch scheduler running. Press Ctrl+C to stop.")
            asyncio.run(_wait_forever())
        else:
            logger.info(
                "Starting API server",
                host=settings.endpoint_host,
                port=settings.endpoint_port,
            )
            uvicorn.run(
                "pricewatch.webapi.app:app",
                host=settings.endpoint_host,
                port=settings.endpoint_port,
                reload=settings.api_reload,
                log_level=settings.api_log_level.lower(),
            )
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
        print("\nShutting down...")
    finally:
        logger.info("Shutting down scheduler")
        shutdown_scheduler()


async def _wait_forever() -> None:
    await asyncio.Event().wait()


if __name__ == "__main__":
    main(sys.argv[1:])
