"""Tests for quote models and provider selection."""

import pytest

from pricewatch.config.settings import Settings
from pricewatch.quotes import (
    AlpacaQuoteProvider,
    QuoteError,
    QuoteFailureKind,
    YahooQuoteProvider,
    classify_status,
    create_quote_provider,
)


@pytest.mark.parametrize(
    "status, kind",
    [
        (429, QuoteFailureKind.RATE_LIMITED),
        (401, QuoteFailureKind.FORBIDDEN),
        (403, QuoteFailureKind.FORBIDDEN),
        (404, QuoteFailureKind.NOT_FOUND),
        (422, QuoteFailureKind.NOT_FOUND),
        (500, QuoteFailureKind.UNAVAILABLE),
        (504, QuoteFailureKind.UNAVAILABLE),
        (400, QuoteFailureKind.UNKNOWN),
        (302, QuoteFailureKind.UNKNOWN),
    ],
)
def test_classify_status(status, kind):
    assert classify_status(status) is kind


def test_quote_error_carries_details():
    error = QuoteError(
        QuoteFailureKind.RATE_LIMITED, "slow down", symbol="SPY", status_code=429
    )

    assert error.kind is QuoteFailureKind.RATE_LIMITED
    assert error.message == "slow down"
    assert error.details == {
        "kind": "rate_limited",
        "symbol": "SPY",
        "status_code": 429,
    }


class TestCreateQuoteProvider:
    def test_alpaca_by_default(self):
        provider = create_quote_provider(Settings())

        assert isinstance(provider, AlpacaQuoteProvider)
        assert provider.key_id == "test_key_id"
        assert provider.is_configured()

    def test_yahoo_selected(self):
        provider = create_quote_provider(Settings(quote_provider="yahoo"))

        assert isinstance(provider, YahooQuoteProvider)
        assert provider.to_provider_symbol("VIX") == "^VIX"
