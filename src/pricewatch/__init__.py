"""Pricewatch - price alert monitoring and email notification engine."""

__version__ = "1.0.0"
