"""Email sender implementations."""

import asyncio
import smtplib
import time
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

import aiohttp

from ..config.logging import get_logger
from .models import EmailBody, SendResult

logger = get_logger(__name__)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class SendGridEmailSender:
    """Sends email through the SendGrid v3 mail send API."""

    name = "sendgrid"

    def __init__(
        self,
        api_key: Optional[str],
        from_address: Optional[str],
        from_name: str = "Pricewatch Alerts",
        api_url: str = "https://api.sendgrid.com/v3/mail/send",
        timeout_seconds: float = 15.0,
    ):
        self.api_key = api_key
        self.from_address = from_address
        self.from_name = from_name
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(sender=self.name)

    def is_configured(self) -> bool:
        return bool(self.api_key and self.from_address)

    def _build_payload(self, to: str, subject: str, body: EmailBody) -> dict:
        return {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.from_address, "name": self.from_name},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": body.text},
                {"type": "text/html", "value": body.html},
            ],
        }

    async def send(self, to: str, subject: str, body: EmailBody) -> SendResult:
        """
        Hand one message to SendGrid.

        Args:
            to: Recipient address
            subject: Message subject
            body: Text and HTML content

        Returns:
            SendResult with delivery status
        """
        if not to:
            return SendResult(success=False, error="Recipient address is empty")

        start_time = time.perf_counter()
        headers = {"Authorization": f"Bearer {self.api_key}"}
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(
                headers=headers, timeout=timeout
            ) as session:
                async with session.post(
                    self.api_url, json=self._build_payload(to, subject, body)
                ) as response:
                    if 200 <= response.status < 300:
                        message_id = response.headers.get("X-Message-Id")
                        self.logger.info(
                            "Email accepted for delivery",
                            to=to,
                            status=response.status,
                            message_id=message_id,
                        )
                        return SendResult(
                            success=True,
                            delivery_time_ms=_elapsed_ms(start_time),
                            message_id=message_id,
                        )

                    error_text = await response.text()
                    error = f"SendGrid returned {response.status}: {error_text[:200]}"
                    self.logger.error(
                        "Email rejected by provider",
                        to=to,
                        status=response.status,
                        error=error_text[:500],
                    )
                    return SendResult(
                        success=False,
                        error=error,
                        delivery_time_ms=_elapsed_ms(start_time),
                    )
        except Exception as e:
            self.logger.error(
                "Failed to send email", to=to, error=str(e), exc_info=True
            )
            return SendResult(
                success=False,
                error=str(e) or type(e).__name__,
                delivery_time_ms=_elapsed_ms(start_time),
            )


class SmtpEmailSender:
    """Sends email over SMTP with STARTTLS and login."""

    name = "smtp"

    def __init__(
        self,
        host: Optional[str],
        port: int,
        from_address: Optional[str],
        username: Optional[str] = None,
        password: Optional[str] = None,
        from_name: str = "Pricewatch Alerts",
        use_tls: bool = True,
        timeout_seconds: float = 15.0,
    ):
        self.host = host
        self.port = port
        self.from_address = from_address
        self.username = username
        self.password = password
        self.from_name = from_name
        self.use_tls = use_tls
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(sender=self.name)

    def is_configured(self) -> bool:
        return bool(self.host and self.from_address)

    def _build_message(self, to: str, subject: str, body: EmailBody) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_address))
        msg["To"] = to
        msg.set_content(body.text)
        msg.add_alternative(body.html, subtype="html")
        return msg

    def _deliver(self, msg: EmailMessage) -> dict:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            return server.send_message(msg)

    async def send(self, to: str, subject: str, body: EmailBody) -> SendResult:
        """
        Send one message over SMTP.

        Args:
            to: Recipient address
            subject: Message subject
            body: Text and HTML content

        Returns:
            SendResult with delivery status
        """
        if not to:
            return SendResult(success=False, error="Recipient address is empty")

        start_time = time.perf_counter()
        msg = self._build_message(to, subject, body)

        try:
            refused = await asyncio.to_thread(self._deliver, msg)
        except Exception as e:
            self.logger.error(
                "Failed to send email", to=to, error=str(e), exc_info=True
            )
            return SendResult(
                success=False,
                error=str(e) or type(e).__name__,
                delivery_time_ms=_elapsed_ms(start_time),
            )

        if refused:
            self.logger.error(
                "Recipient refused by SMTP server", to=to, refused=refused
            )
            return SendResult(
                success=False,
                error=f"Recipient refused: {to}",
                delivery_time_ms=_elapsed_ms(start_time),
            )

        self.logger.info("Email accepted for delivery", to=to)
        return SendResult(success=True, delivery_time_ms=_elapsed_ms(start_time))
