"""Response models for the Pricewatch API."""

from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from ...alerts.models import Alert

# Generic type for data responses
T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseResponse(BaseModel):
    """Base response model for all API responses."""

    success: bool = Field(..., description="Whether the request was successful")
    timestamp: datetime = Field(
        default_factory=_utcnow, description="Response timestamp"
    )
    request_id: Optional[str] = Field(
        None, description="Unique request identifier for tracking"
    )

    model_config = ConfigDict(use_enum_values=True)

    @field_serializer("timestamp")
    def serialize_timestamp(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()


class SuccessResponse(BaseResponse, Generic[T]):
    """Generic success response with typed data."""

    success: bool = Field(True, description="Always true for success responses")
    data: T = Field(..., description="Response data")
    message: Optional[str] = Field(None, description="Optional success message")


class ErrorResponse(BaseResponse):
    """Error response model."""

    success: bool = Field(False, description="Always false for error responses")
    error: Dict[str, Any] = Field(..., description="Error details")


class AlertData(BaseModel):
    """A price alert as returned to its owner."""

    id: str = Field(..., description="Alert identifier")
    symbol: str = Field(..., description="Normalized ticker")
    threshold: float = Field(..., description="Price boundary")
    condition: str = Field(..., description="'above' or 'below'")
    created_at: datetime = Field(..., description="Creation timestamp")

    @classmethod
    def from_alert(cls, alert: Alert) -> "AlertData":
        """Build the API view of a domain alert."""
        return cls(
            id=alert.id,
            symbol=alert.symbol,
            threshold=alert.threshold,
            condition=alert.condition.value,
            created_at=alert.created_at,
        )


class AlertResponse(SuccessResponse[AlertData]):
    """Response model for single alert."""

    data: AlertData = Field(..., description="Alert data")


class AlertListResponse(SuccessResponse[List[AlertData]]):
    """Response model for alert list."""

    data: List[AlertData] = Field(..., description="List of alerts")


class StatusResponse(SuccessResponse[Dict[str, Any]]):
    """Generic status response."""

    data: Dict[str, Any] = Field(..., description="Status data")

    @classmethod
    def create(
        cls,
        data: Dict[str, Any],
        message: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> "StatusResponse":
        """Create a status response."""
        return cls(success=True, data=data, message=message, request_id=request_id)
