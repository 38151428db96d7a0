"""SQLAlchemy ORM models for the Pricewatch application."""

import datetime
import uuid

from sqlalchemy import Column, DateTime, Float, String

from ..alerts.models import Alert, AlertCondition
from .database import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class PriceAlert(Base):
    """A standing single-shot price alert owned by one user."""

    __tablename__ = "price_alerts"

    id = Column(String(32), primary_key=True, default=_new_id)
    owner_id = Column(String, nullable=False, index=True)
    symbol = Column(String, nullable=False)
    threshold = Column(Float, nullable=False)
    condition = Column(String, nullable=False)  # "above" or "below"
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_alert(self) -> Alert:
        """Detach the row into an immutable domain snapshot."""
        return Alert(
            id=self.id,
            owner_id=self.owner_id,
            symbol=self.symbol,
            threshold=float(self.threshold),
            condition=AlertCondition(self.condition),
            created_at=self.created_at,
        )

    def __repr__(self):
        return (
            f"<PriceAlert(id='{self.id}', symbol='{self.symbol}', "
            f"condition='{self.condition}', threshold={self.threshold})>"
        )


class UserProfile(Base):
    """Contact details of an alert owner."""

    __tablename__ = "user_profiles"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=True)
    display_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<UserProfile(id='{self.id}', email='{self.email}')>"
