"""API request and response models."""

from .requests import AlertCreateRequest
from .responses import (
    AlertData,
    AlertListResponse,
    AlertResponse,
    ErrorResponse,
    StatusResponse,
)

__all__ = [
    "AlertCreateRequest",
    "AlertData",
    "AlertListResponse",
    "AlertResponse",
    "ErrorResponse",
    "StatusResponse",
]
