"""Quote provider adapters."""

from ..config.settings import Settings
from .alpaca import AlpacaQuoteProvider
from .models import Quote, QuoteError, QuoteFailureKind, QuoteProvider, classify_status
from .yahoo import YahooQuoteProvider


def create_quote_provider(settings: Settings) -> QuoteProvider:
    """Build the quote provider selected by ``settings.quote_provider``."""
    if settings.quote_provider == "yahoo":
        return YahooQuoteProvider(
            index_symbols=settings.yahoo_index_symbols,
            timeout_seconds=settings.quote_timeout_seconds,
        )
    return AlpacaQuoteProvider(
        key_id=settings.alpaca_key_id,
        secret_key=settings.alpaca_secret_key,
        data_url=settings.alpaca_data_url,
        feed=settings.alpaca_feed,
        timeout_seconds=settings.quote_timeout_seconds,
    )


__all__ = [
    "AlpacaQuoteProvider",
    "Quote",
    "QuoteError",
    "QuoteFailureKind",
    "QuoteProvider",
    "YahooQuoteProvider",
    "classify_status",
    "create_quote_provider",
]
