"""Repository for price alert operations."""

import math
from enum import Enum
from numbers import Real
from typing import Iterator, List, Optional, Union

from sqlalchemy import desc

from ...alerts.models import Alert, AlertCondition, normalize_symbol
from ...exceptions import AlertValidationError
from ..models import PriceAlert
from .base import BaseRepository


class DeleteResult(Enum):
    """Outcome of a delete by id."""

    OK = "ok"
    NOT_FOUND = "not_found"


class PriceAlertRepository(BaseRepository):
    """Repository for price alert operations."""

    STREAM_BATCH_SIZE = 100

    def list_all(self) -> Iterator[Alert]:
        """Stream every stored alert; the iterator is meant to be read once."""
        query = self.session.query(PriceAlert).yield_per(self.STREAM_BATCH_SIZE)
        for row in query:
            yield row.to_alert()

    def list_by_owner(self, owner_id: str) -> List[Alert]:
        """Get an owner's alerts, newest first."""
        rows = (
            self.session.query(PriceAlert)
            .filter(PriceAlert.owner_id == owner_id)
            .order_by(desc(PriceAlert.created_at))
            .all()
        )
        return [row.to_alert() for row in rows]

    def get_by_id(self, alert_id: str) -> Optional[Alert]:
        """Get a single alert by id."""
        row = self.session.get(PriceAlert, alert_id)
        return row.to_alert() if row else None

    def insert(
        self,
        owner_id: str,
        symbol: str,
        threshold: float,
        condition: Union[AlertCondition, str],
    ) -> Alert:
        """Validate and store a new alert."""
        if not owner_id:
            raise AlertValidationError("owner_id", "Owner id is required")

        normalized_symbol = normalize_symbol(symbol or "")
        if not normalized_symbol:
            raise AlertValidationError("symbol", "Symbol is required")

        # bool is a Real subclass but never a meaningful price
        if isinstance(threshold, bool) or not isinstance(threshold, Real):
            raise AlertValidationError("threshold", "Threshold must be a number")
        if not math.isfinite(threshold):
            raise AlertValidationError("threshold", "Threshold must be finite")

        try:
            alert_condition = AlertCondition(
                condition.value if isinstance(condition, AlertCondition) else condition
            )
        except ValueError:
            raise AlertValidationError(
                "condition", "Condition must be either 'above' or 'below'"
            )

        row = PriceAlert(
            owner_id=owner_id,
            symbol=normalized_symbol,
            threshold=float(threshold),
            condition=alert_condition.value,
        )

        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)

        return row.to_alert()

    def delete_by_id(self, alert_id: str) -> DeleteResult:
        """Delete an alert; deleting an absent id reports NOT_FOUND."""
        try:
            deleted = (
                self.session.query(PriceAlert)
                .filter(PriceAlert.id == alert_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return DeleteResult.OK if deleted else DeleteResult.NOT_FOUND
