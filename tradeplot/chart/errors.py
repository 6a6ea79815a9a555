"""
Error types raised by the chart pipeline.

Configuration and alignment errors surface synchronously from finalize.
Persistence errors are reported through the completion callback.
"""
from typing import Any, Optional


class ChartError(Exception):
    """Base class for chart pipeline errors."""


class ConfigurationError(ChartError, ValueError):
    """Configuration asks for something the collected data cannot provide."""


class MissingReportError(ConfigurationError):
    """Finalize was called before any performance report arrived."""


class AlignmentError(ChartError, ValueError):
    """Candle and strategy snapshot buffers are not positionally aligned."""


class PersistenceError(ChartError, OSError):
    """The sink failed to store the rendered chart."""

    def __init__(self, message: str, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.payload = payload
