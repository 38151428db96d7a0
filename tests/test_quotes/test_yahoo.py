"""Tests for the Yahoo Finance quote provider."""

from unittest.mock import patch

import pandas as pd
import pytest
from yfinance.exceptions import YFRateLimitError

from pricewatch.quotes import QuoteError, QuoteFailureKind, YahooQuoteProvider


@pytest.fixture
def provider():
    return YahooQuoteProvider(index_symbols=["GSPC", "DJI"], timeout_seconds=5)


@pytest.fixture
def mock_yf():
    with patch("pricewatch.quotes.yahoo.yf") as yf:
        yield yf


def history(closes):
    return pd.DataFrame({"Close": closes})


class TestYahooQuoteProvider:
    def test_is_always_configured(self):
        assert YahooQuoteProvider().is_configured()

    @pytest.mark.parametrize(
        "symbol, expected",
        [("GSPC", "^GSPC"), ("dji", "^DJI"), ("SPY", "SPY"), ("aapl", "AAPL")],
    )
    def test_index_symbols_get_caret(self, provider, symbol, expected):
        assert provider.to_provider_symbol(symbol) == expected

    @pytest.mark.asyncio
    async def test_resolves_latest_close(self, provider, mock_yf):
        mock_yf.Ticker.return_value.history.return_value = history(
            [500.0, 501.5, float("nan")]
        )

        quote = await provider.resolve_price("GSPC")

        assert quote.symbol == "GSPC"
        assert quote.price == 501.5
        mock_yf.Ticker.assert_called_once_with("^GSPC")
        mock_yf.Ticker.return_value.history.assert_called_once_with(
            period="1d", interval="1m"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "closes",
        [[], [float("nan")], [0.0], [-3.0]],
    )
    async def test_no_usable_price_is_not_found(self, provider, mock_yf, closes):
        mock_yf.Ticker.return_value.history.return_value = history(closes)

        with pytest.raises(QuoteError) as exc_info:
            await provider.resolve_price("SPY")

        assert exc_info.value.kind is QuoteFailureKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_rate_limit_is_classified(self, provider, mock_yf):
        mock_yf.Ticker.return_value.history.side_effect = YFRateLimitError()

        with pytest.raises(QuoteError) as exc_info:
            await provider.resolve_price("SPY")

        assert exc_info.value.kind is QuoteFailureKind.RATE_LIMITED
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self, provider, mock_yf):
        mock_yf.Ticker.return_value.history.side_effect = ConnectionError("reset")

        with pytest.raises(QuoteError) as exc_info:
            await provider.resolve_price("SPY")

        assert exc_info.value.kind is QuoteFailureKind.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_unexpected_error_is_unknown(self, provider, mock_yf):
        mock_yf.Ticker.return_value.history.side_effect = KeyError("Close")

        with pytest.raises(QuoteError) as exc_info:
            await provider.resolve_price("SPY")

        assert exc_info.value.kind is QuoteFailureKind.UNKNOWN

    @pytest.mark.asyncio
    async def test_empty_symbol_is_not_found(self, provider, mock_yf):
        with pytest.raises(QuoteError) as exc_info:
            await provider.resolve_price("")

        assert exc_info.value.kind is QuoteFailureKind.NOT_FOUND
        mock_yf.Ticker.assert_not_called()
