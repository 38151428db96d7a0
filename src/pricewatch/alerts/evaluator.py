"""Trigger evaluation for price alerts."""

from .models import AlertCondition


def evaluate(price: float, condition: AlertCondition, threshold: float) -> bool:
    """
    Decide whether a quoted price fires an alert.

    An alert fires only when the price strictly crosses the threshold in the
    alert's direction; touching the threshold does not fire it.

    Args:
        price: Freshly quoted price (finite)
        condition: Direction of the alert
        threshold: Price boundary stored on the alert

    Returns:
        True if the alert is triggered
    """
    if condition is AlertCondition.ABOVE:
        return price > threshold
    if condition is AlertCondition.BELOW:
        return price < threshold
    raise ValueError(f"Unsupported alert condition: {condition!r}")
