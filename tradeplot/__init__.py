"""tradeplot - chart collector for trading bot runs."""

__version__ = "0.1.0"
