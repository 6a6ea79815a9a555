"""
Timestamp helpers shared by every chart series.

All series use the same hour-resolution display format so that candles,
trades and indicator overlays line up on one date axis.
"""
from datetime import datetime, timezone
from typing import Iterable, List, Union

import pandas as pd

PLOT_DATE_FORMAT = "%Y-%m-%d %H"

TimeLike = Union[int, float, str, datetime, pd.Timestamp]


def plot_date(unix_seconds: float) -> str:
    """Format Unix seconds as a UTC ``YYYY-MM-DD HH`` string."""
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc).strftime(PLOT_DATE_FORMAT)


def plot_dates(unix_seconds: Iterable[float]) -> List[str]:
    """Vectorized :func:`plot_date`."""
    return [plot_date(ts) for ts in unix_seconds]


def to_epoch(value: TimeLike) -> int:
    """
    Normalize an event timestamp to integer Unix seconds.

    Accepts numbers (already epoch seconds), datetimes, pandas Timestamps
    and ISO-8601 strings. Naive values are treated as UTC.
    """
    if isinstance(value, bool):
        raise TypeError(f"Unsupported timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)

    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return int(ts.timestamp())
