"""Request models for the Pricewatch API."""

import re

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ...alerts.models import AlertCondition, normalize_symbol

_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9.\-]*$")


class AlertCreateRequest(BaseModel):
    """Request model for creating a price alert."""

    symbol: str = Field(
        ...,
        description="Ticker to watch (e.g. SPY, I:SPX)",
        min_length=1,
        max_length=16,
        validation_alias=AliasChoices("symbol", "ticker"),
    )
    threshold: float = Field(
        ...,
        description="Price boundary that fires the alert",
        strict=True,
        allow_inf_nan=False,
    )
    condition: AlertCondition = Field(
        ..., description="Fire when the price goes 'above' or 'below' the threshold"
    )

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v):
        """Normalize the symbol and check its format."""
        normalized = normalize_symbol(v)
        if not _SYMBOL_PATTERN.match(normalized):
            raise ValueError("Symbol must contain only letters, digits, '.' or '-'")
        return normalized
