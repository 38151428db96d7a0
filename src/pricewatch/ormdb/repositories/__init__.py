"""Repository classes for database operations using SQLAlchemy ORM."""

from .base import BaseRepository
from .price_alert import DeleteResult, PriceAlertRepository
from .user_profile import UserProfileRepository

__all__ = [
    "BaseRepository",
    "DeleteResult",
    "PriceAlertRepository",
    "UserProfileRepository",
]
