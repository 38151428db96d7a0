"""Data models for quote resolution."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Protocol

from ..exceptions import PricewatchError


class QuoteFailureKind(Enum):
    """Why a quote could not be resolved."""

    RATE_LIMITED = "rate_limited"
    FORBIDDEN = "forbidden"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Quote:
    """A freshly resolved price for one symbol."""

    symbol: str
    price: float
    as_of: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class QuoteError(PricewatchError):
    """Quote resolution failed; ``kind`` tells the caller how."""

    def __init__(
        self,
        kind: QuoteFailureKind,
        message: str,
        symbol: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            details={"kind": kind.value, "symbol": symbol, "status_code": status_code},
        )
        self.kind = kind
        self.symbol = symbol
        self.status_code = status_code


def classify_status(status_code: int) -> QuoteFailureKind:
    """Map an upstream HTTP status code onto a failure kind."""
    if status_code == 429:
        return QuoteFailureKind.RATE_LIMITED
    if status_code in (401, 403):
        return QuoteFailureKind.FORBIDDEN
    if status_code in (404, 422):
        return QuoteFailureKind.NOT_FOUND
    if status_code >= 500:
        return QuoteFailureKind.UNAVAILABLE
    return QuoteFailureKind.UNKNOWN


class QuoteProvider(Protocol):
    """Protocol for quote provider implementations."""

    name: str

    def is_configured(self) -> bool:
        """Whether the provider has the credentials it needs."""
        ...

    async def resolve_price(self, symbol: str) -> Quote:
        """Resolve the latest price for a normalized symbol."""
        ...
