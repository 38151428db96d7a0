"""Persistence for price alerts and owner profiles."""

from .database import (
    Base,
    check_database_health,
    create_tables,
    get_engine,
    get_session_factory,
    get_session_sync,
)
from .models import PriceAlert, UserProfile
from .repositories import DeleteResult, PriceAlertRepository, UserProfileRepository

__all__ = [
    # Engine and sessions
    "Base",
    "check_database_health",
    "create_tables",
    "get_engine",
    "get_session_factory",
    "get_session_sync",
    # Models
    "PriceAlert",
    "UserProfile",
    # Repositories
    "DeleteResult",
    "PriceAlertRepository",
    "UserProfileRepository",
]
