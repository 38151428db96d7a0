"""Exception hierarchy shared by the monitoring engine and the web API."""

from typing import Any, Dict, Optional


class PricewatchError(Exception):
    """Base exception for Pricewatch application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PricewatchError):
    """A required setting for a backend is missing or invalid."""

    def __init__(self, setting: str, message: str):
        super().__init__(
            message=f"Configuration error for '{setting}': {message}",
            details={"setting": setting},
        )
        self.setting = setting


class AlertValidationError(PricewatchError, ValueError):
    """An alert write was rejected before reaching the database."""

    def __init__(self, field: str, message: str):
        super().__init__(message=message, details={"field": field})
        self.field = field
