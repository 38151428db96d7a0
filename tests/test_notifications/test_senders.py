"""Tests for the SendGrid and SMTP email senders."""

import smtplib
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import aiohttp
import pytest

from pricewatch.config.settings import Settings
from pricewatch.notifications import (
    EmailBody,
    SendGridEmailSender,
    SmtpEmailSender,
    create_email_sender,
)

BODY = EmailBody(text="SPY crossed 500", html="<p>SPY crossed 500</p>")


@pytest.fixture
def mock_sendgrid(mock_aiohttp_session):
    """Patch aiohttp so SendGrid posts return a configurable response."""
    response = AsyncMock()
    response.status = 202
    response.headers = {"X-Message-Id": "sg-message-1"}
    response.text = AsyncMock(return_value="")

    session_context, session = mock_aiohttp_session(response)

    with patch(
        "pricewatch.notifications.senders.aiohttp.ClientSession"
    ) as client_session:
        client_session.return_value = session_context
        yield {
            "response": response,
            "session": session,
            "client_session": client_session,
        }


class TestSendGridEmailSender:
    @pytest.fixture
    def sender(self):
        return SendGridEmailSender(
            api_key="sg-key",
            from_address="alerts@example.com",
            from_name="Alerts",
            api_url="https://sendgrid.example.test/v3/mail/send",
        )

    def test_is_configured(self):
        assert SendGridEmailSender("key", "from@example.com").is_configured()
        assert not SendGridEmailSender(None, "from@example.com").is_configured()
        assert not SendGridEmailSender("key", None).is_configured()

    @pytest.mark.asyncio
    async def test_send_success(self, sender, mock_sendgrid):
        result = await sender.send("owner@example.com", "Price alert", BODY)

        assert result.success
        assert result.error is None
        assert result.message_id == "sg-message-1"

        args, kwargs = mock_sendgrid["session"].post.call_args
        assert args[0] == "https://sendgrid.example.test/v3/mail/send"
        payload = kwargs["json"]
        assert payload["personalizations"] == [
            {"to": [{"email": "owner@example.com"}]}
        ]
        assert payload["from"] == {"email": "alerts@example.com", "name": "Alerts"}
        assert payload["subject"] == "Price alert"
        assert payload["content"] == [
            {"type": "text/plain", "value": BODY.text},
            {"type": "text/html", "value": BODY.html},
        ]

        headers = mock_sendgrid["client_session"].call_args[1]["headers"]
        assert headers["Authorization"] == "Bearer sg-key"

    @pytest.mark.asyncio
    async def test_send_rejected(self, sender, mock_sendgrid):
        mock_sendgrid["response"].status = 401
        mock_sendgrid["response"].text = AsyncMock(return_value="invalid api key")

        result = await sender.send("owner@example.com", "Price alert", BODY)

        assert not result.success
        assert "401" in result.error
        assert "invalid api key" in result.error

    @pytest.mark.asyncio
    async def test_send_connection_error(self, sender, mock_sendgrid):
        mock_sendgrid["session"].post = Mock(
            side_effect=aiohttp.ClientConnectionError("connection refused")
        )

        result = await sender.send("owner@example.com", "Price alert", BODY)

        assert not result.success
        assert "connection refused" in result.error

    @pytest.mark.asyncio
    async def test_empty_recipient_is_not_sent(self, sender, mock_sendgrid):
        result = await sender.send("", "Price alert", BODY)

        assert not result.success
        mock_sendgrid["client_session"].assert_not_called()


class TestSmtpEmailSender:
    @pytest.fixture
    def sender(self):
        return SmtpEmailSender(
            host="smtp.example.test",
            port=587,
            from_address="alerts@example.com",
            username="user",
            password="pass",
            from_name="Alerts",
        )

    @pytest.fixture
    def mock_smtp(self):
        with patch("pricewatch.notifications.senders.smtplib.SMTP") as smtp:
            server = MagicMock()
            server.send_message.return_value = {}
            smtp.return_value.__enter__.return_value = server
            yield {"smtp": smtp, "server": server}

    def test_is_configured(self):
        assert SmtpEmailSender("smtp.example.test", 25, "a@example.com").is_configured()
        assert not SmtpEmailSender(None, 25, "a@example.com").is_configured()
        assert not SmtpEmailSender("smtp.example.test", 25, None).is_configured()

    def test_build_message_has_text_and_html(self, sender):
        msg = sender._build_message("owner@example.com", "Price alert", BODY)

        assert msg["Subject"] == "Price alert"
        assert msg["To"] == "owner@example.com"
        assert msg["From"] == "Alerts <alerts@example.com>"
        text_part = msg.get_body(preferencelist=("plain",))
        html_part = msg.get_body(preferencelist=("html",))
        assert text_part.get_content().strip() == BODY.text
        assert html_part.get_content().strip() == BODY.html

    @pytest.mark.asyncio
    async def test_send_success(self, sender, mock_smtp):
        result = await sender.send("owner@example.com", "Price alert", BODY)

        assert result.success
        mock_smtp["smtp"].assert_called_once_with(
            "smtp.example.test", 587, timeout=15.0
        )
        mock_smtp["server"].starttls.assert_called_once()
        mock_smtp["server"].login.assert_called_once_with("user", "pass")
        mock_smtp["server"].send_message.assert_called_once()

    @pytest.mark.asyncio
    async def test_send_without_tls_or_login(self, mock_smtp):
        sender = SmtpEmailSender(
            host="localhost", port=25, from_address="a@example.com", use_tls=False
        )

        result = await sender.send("owner@example.com", "Price alert", BODY)

        assert result.success
        mock_smtp["server"].starttls.assert_not_called()
        mock_smtp["server"].login.assert_not_called()

    @pytest.mark.asyncio
    async def test_refused_recipient_is_failure(self, sender, mock_smtp):
        mock_smtp["server"].send_message.return_value = {
            "owner@example.com": (550, b"No such user")
        }

        result = await sender.send("owner@example.com", "Price alert", BODY)

        assert not result.success
        assert "owner@example.com" in result.error

    @pytest.mark.asyncio
    async def test_smtp_error_is_failure(self, sender, mock_smtp):
        mock_smtp["server"].login.side_effect = smtplib.SMTPAuthenticationError(
            535, b"Authentication failed"
        )

        result = await sender.send("owner@example.com", "Price alert", BODY)

        assert not result.success
        assert "Authentication failed" in result.error


class TestCreateEmailSender:
    def test_sendgrid_by_default(self):
        sender = create_email_sender(Settings())

        assert isinstance(sender, SendGridEmailSender)
        assert sender.is_configured()

    def test_smtp_selected(self):
        sender = create_email_sender(
            Settings(email_backend="smtp", smtp_host="smtp.example.test")
        )

        assert isinstance(sender, SmtpEmailSender)
        assert sender.host == "smtp.example.test"
        assert sender.is_configured()
