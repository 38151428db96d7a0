"""Structured logging setup built on structlog and the stdlib logging module."""

import logging
import logging.handlers
import re
import sys
from pathlib import Path
from typing import Any, List, Optional

import structlog
from structlog.types import Processor

from .settings import Settings, get_settings

_SIZE_UNITS = {"": 1, "B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}
_SIZE_PATTERN = re.compile(r"^(\d+)\s*([KMG]?B)?$")


def _shared_processors() -> List[Processor]:
    return [
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structlog and the root stdlib logger from settings.

    ``log_format='structured'`` renders JSON lines, anything else renders
    human-readable console output. With ``log_file_enabled`` the same lines
    also go to a size-rotated file.

    Args:
        settings: Settings to read (defaults to the cached settings)
    """
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level, logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    processors = _shared_processors()
    if settings.log_format == "structured":
        processors.append(structlog.processors.JSONRenderer())
    else:
        # No ANSI colors when the same lines end up in a file
        processors.append(
            structlog.dev.ConsoleRenderer(colors=not settings.log_file_enabled)
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if settings.log_file_enabled:
        _add_rotating_file_handler(
            Path(settings.log_file_path),
            _parse_file_size(settings.log_max_file_size),
            settings.log_backup_count,
            log_level,
        )


def _add_rotating_file_handler(
    log_file: Path, max_bytes: int, backup_count: int, log_level: int
) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=log_file, maxBytes=max_bytes, backupCount=backup_count
    )
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logging.getLogger().addHandler(handler)


def _parse_file_size(size_str: str) -> int:
    """Parse sizes like '512', '64KB' or '10MB' into bytes."""
    match = _SIZE_PATTERN.match(size_str.strip().upper())
    if not match:
        raise ValueError(f"Invalid file size: {size_str!r}")

    number, unit = match.groups()
    return int(number) * _SIZE_UNITS[unit or ""]


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, usually as ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def log_performance(operation: str, duration_ms: float, **context: Any) -> None:
    """
    Log how long an operation took.

    Args:
        operation: Name of the operation
        duration_ms: Duration in milliseconds
        **context: Additional context
    """
    get_logger("performance").info(
        "Performance metric",
        operation=operation,
        duration_ms=round(duration_ms, 2),
        **context,
    )


def log_audit_event(event: str, user_id: str = None, **context: Any) -> None:
    """
    Log a change made on behalf of a user.

    Args:
        event: What happened, e.g. 'alert_created'
        user_id: Owner the change was made for
        **context: Additional context
    """
    get_logger("audit").info(
        "Audit event", audit_event=event, user_id=user_id, **context
    )
