"""Ticker Matcher - deterministic ticker resolution for financial news."""

__version__ = "0.1.0"
