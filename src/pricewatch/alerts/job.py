"""Scheduled price alert monitoring job.

One run loads every stored alert, quotes its symbol, and for each alert whose
condition is met emails the owner and removes the alert. Each alert is
processed in isolation: a failed quote, owner lookup, send or delete is
logged and never stops the rest of the batch.

Triggered alerts are deleted whether or not the email went out, so an owner
gets at most one notification per alert.
"""

import asyncio
import math
import time
from collections import Counter
from typing import Callable, List, Optional

from ..config.logging import get_logger, log_performance
from ..config.settings import Settings, get_settings
from ..exceptions import ConfigurationError
from ..notifications import (
    EmailSender,
    NotificationOutcome,
    SendResult,
    create_email_sender,
    render_alert_email,
)
from ..ormdb.repositories import DeleteResult, PriceAlertRepository
from ..quotes import (
    Quote,
    QuoteError,
    QuoteFailureKind,
    QuoteProvider,
    create_quote_provider,
)
from .directory import OwnerDirectory, UserProfileDirectory
from .evaluator import evaluate
from .models import Alert, AlertOutcome

logger = get_logger(__name__)

# Failure kinds that point at our own setup rather than a passing upstream issue
_ERROR_LEVEL_KINDS = {QuoteFailureKind.FORBIDDEN}


class AlertMonitoringJob:
    """Evaluates all stored alerts against fresh quotes."""

    def __init__(
        self,
        quote_provider: QuoteProvider,
        email_sender: EmailSender,
        owner_directory: OwnerDirectory,
        store_factory: Callable[[], PriceAlertRepository] = PriceAlertRepository,
        max_concurrency: int = 5,
        quote_timeout_seconds: Optional[float] = None,
        send_timeout_seconds: Optional[float] = None,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.quote_provider = quote_provider
        self.email_sender = email_sender
        self.owner_directory = owner_directory
        self.store_factory = store_factory
        self.max_concurrency = max_concurrency
        self.quote_timeout_seconds = quote_timeout_seconds
        self.send_timeout_seconds = send_timeout_seconds
        self.logger = logger.bind(job="alert_monitoring")

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if either backend cannot be used."""
        if not self.email_sender.is_configured():
            raise ConfigurationError(
                "email_backend",
                f"{getattr(self.email_sender, 'name', 'email')} sender is "
                "missing credentials or a sender address",
            )

        if not self.quote_provider.is_configured():
            raise ConfigurationError(
                "quote_provider",
                f"{getattr(self.quote_provider, 'name', 'quote')} provider is "
                "missing credentials",
            )

    async def run(self) -> None:
        """Execute one monitoring run over the full alert set."""
        start_time = time.perf_counter()

        try:
            self.ensure_configured()
        except ConfigurationError as e:
            self.logger.error(
                "Alert monitoring not configured, skipping run",
                setting=e.setting,
                error=e.message,
            )
            return

        try:
            alerts = await asyncio.to_thread(self._load_alerts)
        except Exception as e:
            self.logger.error("Failed to load alerts", error=str(e), exc_info=True)
            return

        if not alerts:
            self.logger.info("No alerts to evaluate")
            return

        self.logger.info(
            "Alert monitoring run started",
            alert_count=len(alerts),
            max_concurrency=self.max_concurrency,
        )

        semaphore = asyncio.Semaphore(self.max_concurrency)
        outcomes = await asyncio.gather(
            *(self._process_isolated(alert, semaphore) for alert in alerts)
        )

        counts = Counter(outcome.value for outcome in outcomes)
        self.logger.info(
            "Alert monitoring run completed", alert_count=len(alerts), **counts
        )
        log_performance(
            "alert_monitoring_run",
            (time.perf_counter() - start_time) * 1000,
            alert_count=len(alerts),
        )

    def _load_alerts(self) -> List[Alert]:
        with self.store_factory() as store:
            return list(store.list_all())

    async def _process_isolated(
        self, alert: Alert, semaphore: asyncio.Semaphore
    ) -> AlertOutcome:
        async with semaphore:
            try:
                return await self.process_alert(alert)
            except Exception as e:
                self.logger.error(
                    "Unexpected error while processing alert",
                    alert_id=alert.id,
                    symbol=alert.symbol,
                    error=str(e),
                    exc_info=True,
                )
                return AlertOutcome.FAILED

    async def process_alert(self, alert: Alert) -> AlertOutcome:
        """
        Run the quote, evaluate, notify, retire pipeline for one alert.

        Args:
            alert: Alert to process

        Returns:
            AlertOutcome describing what happened
        """
        log = self.logger.bind(alert_id=alert.id, symbol=alert.symbol)

        quote = await self._resolve_quote(alert, log)
        if quote is None:
            return AlertOutcome.QUOTE_FAILED

        if not evaluate(quote.price, alert.condition, alert.threshold):
            log.debug(
                "Alert not triggered",
                price=quote.price,
                condition=alert.condition.value,
                threshold=alert.threshold,
            )
            return AlertOutcome.NOT_TRIGGERED

        log.info(
            "Alert triggered",
            price=quote.price,
            condition=alert.condition.value,
            threshold=alert.threshold,
        )

        try:
            email = await self.owner_directory.resolve_owner_email(alert.owner_id)
        except Exception as e:
            log.error(
                "Owner email lookup failed, alert kept",
                owner_id=alert.owner_id,
                error=str(e),
                exc_info=True,
            )
            return AlertOutcome.NO_OWNER_EMAIL

        if not email:
            log.error(
                "No email on file for alert owner, alert kept",
                owner_id=alert.owner_id,
            )
            return AlertOutcome.NO_OWNER_EMAIL

        outcome = await self._notify(alert, quote, email, log)
        await self._retire(alert, log)

        if outcome.delivered:
            return AlertOutcome.NOTIFIED
        return AlertOutcome.NOTIFICATION_FAILED

    async def _resolve_quote(self, alert: Alert, log) -> Optional[Quote]:
        try:
            quote = await asyncio.wait_for(
                self.quote_provider.resolve_price(alert.symbol),
                timeout=self.quote_timeout_seconds,
            )
        except QuoteError as e:
            log_method = log.error if e.kind in _ERROR_LEVEL_KINDS else log.warning
            log_method(
                "Quote resolution failed, alert skipped",
                kind=e.kind.value,
                status_code=e.status_code,
                error=e.message,
            )
            return None
        except asyncio.TimeoutError:
            log.warning(
                "Quote resolution timed out, alert skipped",
                kind=QuoteFailureKind.UNAVAILABLE.value,
                timeout_seconds=self.quote_timeout_seconds,
            )
            return None
        except Exception as e:
            log.warning(
                "Quote resolution failed, alert skipped",
                kind=QuoteFailureKind.UNKNOWN.value,
                error=str(e),
                exc_info=True,
            )
            return None

        if quote is None or quote.price is None or not math.isfinite(quote.price):
            log.warning(
                "No usable price, alert skipped",
                kind=QuoteFailureKind.NOT_FOUND.value,
            )
            return None

        return quote

    async def _notify(
        self, alert: Alert, quote: Quote, email: str, log
    ) -> NotificationOutcome:
        subject, body = render_alert_email(alert, quote)

        try:
            result = await asyncio.wait_for(
                self.email_sender.send(email, subject, body),
                timeout=self.send_timeout_seconds,
            )
        except asyncio.TimeoutError:
            result = SendResult(
                success=False,
                error=f"Send timed out after {self.send_timeout_seconds}s",
            )
        except Exception as e:
            result = SendResult(success=False, error=str(e) or type(e).__name__)

        outcome = NotificationOutcome(
            alert_id=alert.id, delivered=result.success, error=result.error
        )

        if outcome.delivered:
            log.info(
                "Alert notification sent",
                owner_id=alert.owner_id,
                delivery_time_ms=result.delivery_time_ms,
                message_id=result.message_id,
            )
        else:
            log.error(
                "Alert notification failed, alert will still be removed",
                owner_id=alert.owner_id,
                error=outcome.error,
            )

        return outcome

    def _delete_alert(self, alert_id: str) -> DeleteResult:
        with self.store_factory() as store:
            return store.delete_by_id(alert_id)

    async def _retire(self, alert: Alert, log) -> None:
        try:
            result = await asyncio.to_thread(self._delete_alert, alert.id)
        except Exception as e:
            log.error(
                "Failed to delete triggered alert, it may be notified again next run",
                error=str(e),
                exc_info=True,
            )
            return

        if result is DeleteResult.NOT_FOUND:
            log.warning("Triggered alert was already removed")
        else:
            log.info("Triggered alert removed")


def build_alert_monitoring_job(
    settings: Optional[Settings] = None,
) -> AlertMonitoringJob:
    """
    Construct the monitoring job with the configured backends.

    Args:
        settings: Settings to use (defaults to the cached settings)

    Returns:
        Ready-to-run AlertMonitoringJob
    """
    settings = settings or get_settings()

    return AlertMonitoringJob(
        quote_provider=create_quote_provider(settings),
        email_sender=create_email_sender(settings),
        owner_directory=UserProfileDirectory(),
        max_concurrency=settings.alert_max_concurrency,
        quote_timeout_seconds=settings.quote_timeout_seconds,
        send_timeout_seconds=settings.email_timeout_seconds,
    )


def run_alert_monitoring_sync() -> None:
    """Scheduler entry point: run one monitoring pass to completion."""
    asyncio.run(build_alert_monitoring_job().run())
