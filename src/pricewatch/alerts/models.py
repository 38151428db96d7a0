"""Data models for price alerts."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# Provider specific markers for index tickers ("I:SPX" style and "^GSPC" style)
INDEX_SYMBOL_PREFIXES = ("I:", "^")


class AlertCondition(Enum):
    """Direction in which the price has to cross the threshold."""

    ABOVE = "above"
    BELOW = "below"


class AlertOutcome(Enum):
    """What happened to one alert during a monitoring run."""

    NOT_TRIGGERED = "not_triggered"
    QUOTE_FAILED = "quote_failed"
    NO_OWNER_EMAIL = "no_owner_email"
    NOTIFIED = "notified"
    NOTIFICATION_FAILED = "notification_failed"
    FAILED = "failed"


@dataclass(frozen=True)
class Alert:
    """Snapshot of one persisted price alert."""

    id: str
    owner_id: str
    symbol: str
    threshold: float
    condition: AlertCondition
    created_at: datetime


def normalize_symbol(symbol: str) -> str:
    """
    Normalize a ticker into its provider-agnostic stored form.

    Args:
        symbol: Ticker as entered by the user (e.g. 'spy', 'I:SPX', '^GSPC')

    Returns:
        Upper-cased ticker without index markers
    """
    normalized = symbol.strip().upper()
    for prefix in INDEX_SYMBOL_PREFIXES:
        if normalized.startswith(prefix):
            normalized = normalized[len(prefix) :]
            break
    return normalized.strip()
