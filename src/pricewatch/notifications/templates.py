"""Email content for triggered price alerts."""

from html import escape
from typing import Tuple

from ..alerts.models import Alert
from ..quotes.models import Quote
from .models import EmailBody


def render_alert_email(alert: Alert, quote: Quote) -> Tuple[str, EmailBody]:
    """
    Build the subject and body of a triggered-alert email.

    Args:
        alert: The alert that fired
        quote: The quote that fired it

    Returns:
        Tuple of (subject, EmailBody)
    """
    direction = alert.condition.value
    subject = f"Price alert: {alert.symbol} is {direction} {alert.threshold:,.2f}"
    quoted_at = quote.as_of.strftime("%Y-%m-%d %H:%M UTC")

    text = (
        f"Your price alert for {alert.symbol} has been triggered.\n\n"
        f"Condition: price {direction} {alert.threshold:,.2f}\n"
        f"Current price: {quote.price:,.2f} (as of {quoted_at})\n\n"
        "This alert has now been removed. Create a new one if you want to keep "
        "watching this symbol.\n"
    )

    symbol = escape(alert.symbol)
    html = f"""<html>
  <body>
    <p>Your price alert for <strong>{symbol}</strong> has been triggered.</p>
    <ul>
      <li>Condition: price {direction} {alert.threshold:,.2f}</li>
      <li>Current price: <strong>{quote.price:,.2f}</strong> (as of {quoted_at})</li>
    </ul>
    <p>This alert has now been removed. Create a new one if you want to keep
    watching this symbol.</p>
  </body>
</html>
"""

    return subject, EmailBody(text=text, html=html)
