"""Alpaca market data quote provider."""

import asyncio
import math
from typing import Optional

import aiohttp

from ..config.logging import get_logger
from .models import Quote, QuoteError, QuoteFailureKind, classify_status

logger = get_logger(__name__)


class AlpacaQuoteProvider:
    """Resolves the latest ask price through Alpaca's market data API."""

    name = "alpaca"

    def __init__(
        self,
        key_id: Optional[str],
        secret_key: Optional[str],
        data_url: str = "https://data.alpaca.markets",
        feed: str = "iex",
        timeout_seconds: float = 10.0,
    ):
        self.key_id = key_id
        self.secret_key = secret_key
        self.data_url = data_url.rstrip("/")
        self.feed = feed
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(provider=self.name)

    def is_configured(self) -> bool:
        return bool(self.key_id and self.secret_key)

    async def resolve_price(self, symbol: str) -> Quote:
        """
        Fetch the latest quote for a symbol.

        Args:
            symbol: Normalized ticker (e.g. 'SPY')

        Returns:
            Quote with the latest ask price

        Raises:
            QuoteError: If the quote could not be resolved
        """
        if not symbol:
            raise QuoteError(QuoteFailureKind.NOT_FOUND, "Empty symbol", symbol=symbol)
        if not self.is_configured():
            raise QuoteError(
                QuoteFailureKind.FORBIDDEN,
                "Alpaca API keys not configured",
                symbol=symbol,
            )

        url = f"{self.data_url}/v2/stocks/{symbol}/quotes/latest"
        headers = {
            "APCA-API-KEY-ID": self.key_id,
            "APCA-API-SECRET-KEY": self.secret_key,
        }
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        self.logger.debug("Fetching latest quote", symbol=symbol)

        try:
            async with aiohttp.ClientSession(
                headers=headers, timeout=timeout
            ) as session:
                async with session.get(url, params={"feed": self.feed}) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        kind = classify_status(response.status)
                        raise QuoteError(
                            kind,
                            f"Alpaca returned {response.status}: {error_text[:200]}",
                            symbol=symbol,
                            status_code=response.status,
                        )
                    payload = await response.json()
        except QuoteError:
            raise
        except asyncio.TimeoutError as e:
            raise QuoteError(
                QuoteFailureKind.UNAVAILABLE,
                f"Timed out after {self.timeout_seconds}s",
                symbol=symbol,
            ) from e
        except aiohttp.ClientError as e:
            raise QuoteError(
                QuoteFailureKind.UNAVAILABLE, f"Connection error: {e}", symbol=symbol
            ) from e
        except Exception as e:
            raise QuoteError(QuoteFailureKind.UNKNOWN, str(e), symbol=symbol) from e

        return Quote(symbol=symbol, price=self._extract_price(payload, symbol))

    def _extract_price(self, payload: dict, symbol: str) -> float:
        """Pull a usable ask price out of a latest-quote payload."""
        quote = (payload or {}).get("quote") or {}
        ask_price = quote.get("ap")

        try:
            price = float(ask_price)
        except (TypeError, ValueError):
            price = None

        if price is None or not math.isfinite(price) or price <= 0:
            self.logger.warning("Could not get latest quote price", symbol=symbol)
            raise QuoteError(
                QuoteFailureKind.NOT_FOUND,
                "No usable ask price in latest quote",
                symbol=symbol,
            )

        return price
