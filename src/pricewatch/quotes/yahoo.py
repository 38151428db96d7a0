"""Yahoo Finance quote provider backed by yfinance."""

import asyncio
import math
from typing import Iterable, Optional

import yfinance as yf
from yfinance.exceptions import YFRateLimitError

from ..config.logging import get_logger
from .models import Quote, QuoteError, QuoteFailureKind

logger = get_logger(__name__)


class YahooQuoteProvider:
    """Resolves the most recent one-minute close through yfinance."""

    name = "yahoo"

    def __init__(
        self,
        index_symbols: Optional[Iterable[str]] = None,
        timeout_seconds: float = 10.0,
    ):
        self.index_symbols = {s.upper() for s in (index_symbols or ())}
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(provider=self.name)

    def is_configured(self) -> bool:
        # yfinance needs no credentials
        return True

    def to_provider_symbol(self, symbol: str) -> str:
        """Yahoo marks indices with a caret, e.g. GSPC -> ^GSPC."""
        if symbol.upper() in self.index_symbols:
            return f"^{symbol.upper()}"
        return symbol.upper()

    async def resolve_price(self, symbol: str) -> Quote:
        """
        Fetch the latest price for a symbol.

        Args:
            symbol: Normalized ticker (e.g. 'SPY', 'GSPC')

        Returns:
            Quote with the most recent close

        Raises:
            QuoteError: If the quote could not be resolved
        """
        if not symbol:
            raise QuoteError(QuoteFailureKind.NOT_FOUND, "Empty symbol", symbol=symbol)

        provider_symbol = self.to_provider_symbol(symbol)

        try:
            price = await asyncio.wait_for(
                asyncio.to_thread(self._fetch_last_price, provider_symbol),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise QuoteError(
                QuoteFailureKind.UNAVAILABLE,
                f"Timed out after {self.timeout_seconds}s",
                symbol=symbol,
            ) from e
        except YFRateLimitError as e:
            raise QuoteError(
                QuoteFailureKind.RATE_LIMITED, str(e), symbol=symbol, status_code=429
            ) from e
        except (ConnectionError, OSError) as e:
            raise QuoteError(
                QuoteFailureKind.UNAVAILABLE, f"Connection error: {e}", symbol=symbol
            ) from e
        except Exception as e:
            raise QuoteError(QuoteFailureKind.UNKNOWN, str(e), symbol=symbol) from e

        if price is None or not math.isfinite(price) or price <= 0:
            self.logger.warning(
                "Could not get latest quote price",
                symbol=symbol,
                provider_symbol=provider_symbol,
            )
            raise QuoteError(
                QuoteFailureKind.NOT_FOUND, "No usable price returned", symbol=symbol
            )

        return Quote(symbol=symbol, price=price)

    @staticmethod
    def _fetch_last_price(provider_symbol: str) -> Optional[float]:
        """Blocking yfinance lookup of the most recent one-minute close."""
        stock = yf.Ticker(provider_symbol)
        data = stock.history(period="1d", interval="1m")

        if data.empty:
            return None

        closes = data["Close"].dropna()
        if closes.empty:
            return None
        return float(closes.iloc[-1])  # most recent minute
