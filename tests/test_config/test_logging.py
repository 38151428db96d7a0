"""Tests for logging configuration."""

import logging
import logging.handlers

import pytest
import structlog

from pricewatch.config.logging import (
    _parse_file_size,
    log_audit_event,
    log_performance,
    setup_logging,
)
from pricewatch.config.settings import Settings


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    structlog.reset_defaults()


@pytest.mark.parametrize(
    "size, expected",
    [
        ("512", 512),
        ("10KB", 10 * 1024),
        ("10mb", 10 * 1024 * 1024),
        (" 2GB ", 2 * 1024 * 1024 * 1024),
    ],
)
def test_parse_file_size(size, expected):
    assert _parse_file_size(size) == expected


def test_parse_file_size_rejects_garbage():
    with pytest.raises(ValueError):
        _parse_file_size("ten megabytes")


def test_setup_logging_writes_rotating_file(tmp_path, restore_logging):
    log_file = tmp_path / "logs" / "pricewatch.log"

    setup_logging(
        Settings(
            log_level="INFO",
            log_file_enabled=True,
            log_file_path=str(log_file),
            log_max_file_size="64KB",
        )
    )

    handlers = [
        handler
        for handler in logging.getLogger().handlers
        if isinstance(handler, logging.handlers.RotatingFileHandler)
    ]
    assert len(handlers) == 1
    assert handlers[0].maxBytes == 64 * 1024
    assert log_file.parent.is_dir()


def test_performance_and_audit_events_are_structured():
    with structlog.testing.capture_logs() as logs:
        log_performance("alert_monitoring_run", 12.5, alert_count=3)
        log_audit_event("alert_created", user_id="owner-1", alert_id="a1")

    assert logs[0]["operation"] == "alert_monitoring_run"
    assert logs[0]["duration_ms"] == 12.5
    assert logs[0]["alert_count"] == 3
    assert logs[1]["audit_event"] == "alert_created"
    assert logs[1]["user_id"] == "owner-1"
    assert logs[1]["alert_id"] == "a1"
