"""Data models for email notifications."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class EmailBody:
    """Plain text and HTML renditions of one message."""

    text: str
    html: str


@dataclass
class SendResult:
    """Result of one email delivery attempt."""

    success: bool
    error: Optional[str] = None
    delivery_time_ms: float = 0.0
    message_id: Optional[str] = None


@dataclass
class NotificationOutcome:
    """Per-alert delivery outcome, logged by the monitoring job."""

    alert_id: str
    delivered: bool
    error: Optional[str] = None


class EmailSender(Protocol):
    """Protocol for email sender implementations."""

    name: str

    def is_configured(self) -> bool:
        """Whether the sender has credentials and a from-address."""
        ...

    async def send(self, to: str, subject: str, body: EmailBody) -> SendResult:
        """Send a single message to one recipient."""
        ...
