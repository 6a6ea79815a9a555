"""
Chart series derivation.

Turns the buffered events into named series:
- Price: candle midpoint (open + close) / 2
- Volume: candle volume on its own axis
- Buy / Sell: trade markers at execution price
- Indicators: one overlay per configured indicator path
"""
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import asdict
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from tradeplot.chart.axes import AxisAllocation
from tradeplot.chart.buffers import Capabilities, EventBuffers
from tradeplot.chart.errors import AlignmentError, ConfigurationError
from tradeplot.chart.time_codec import plot_dates
from tradeplot.chart.types import LINE, MARKERS, Candle, ChartSeries, StrategySnapshot, Trade
from tradeplot.config import ChartConfig, IndicatorConfig, LineStyle, MarkerStyle

CANDLE_COLUMNS = ["start", "open", "high", "low", "close", "volume"]
TRADE_COLUMNS = ["id", "action", "price", "date"]


def candles_frame(candles: Iterable[Candle]) -> pd.DataFrame:
    """Candles as a DataFrame (empty frames keep the OHLCV columns)."""
    return pd.DataFrame([asdict(c) for c in candles], columns=CANDLE_COLUMNS)


def trades_frame(trades: Iterable[Trade]) -> pd.DataFrame:
    records = [{"id": t.id, "action": t.action, "price": t.price, "date": t.date} for t in trades]
    return pd.DataFrame(records, columns=TRADE_COLUMNS)


def _line_style(style: LineStyle) -> dict:
    return {
        "opacity": style.opacity,
        "line": {"color": style.color, "width": style.width},
    }


def _marker_style(style: MarkerStyle) -> dict:
    return {
        "marker": {"color": style.color, "opacity": style.opacity, "size": style.size},
    }


def price_series(frame: pd.DataFrame, dates: List[str], style: LineStyle) -> ChartSeries:
    price = ((frame["open"] + frame["close"]) / 2).tolist()
    return ChartSeries(
        name="Price",
        kind=LINE,
        x=tuple(dates),
        y=tuple(price),
        xaxis="x",
        yaxis="y",
        style=_line_style(style),
    )


def volume_series(frame: pd.DataFrame, dates: List[str], style: LineStyle, yaxis: str) -> ChartSeries:
    return ChartSeries(
        name="Volume",
        kind=LINE,
        x=tuple(dates),
        y=tuple(frame["volume"].tolist()),
        xaxis="x",
        yaxis=yaxis,
        style=_line_style(style),
    )


def trade_series(frame: pd.DataFrame, action: str, style: MarkerStyle) -> ChartSeries:
    """Marker series for all trades with the given action (possibly empty)."""
    part = frame[frame["action"] == action]
    return ChartSeries(
        name=action.capitalize(),
        kind=MARKERS,
        x=tuple(plot_dates(part["date"].tolist())),
        y=tuple(part["price"].tolist()),
        xaxis="x",
        yaxis="y",
        style=_marker_style(style),
    )


def normalize_path(indicator: IndicatorConfig) -> Tuple[Any, ...]:
    """
    Validate an indicator access path.

    Lists / tuples of keys and integer indexes are used as-is; a dotted
    string such as ``"macd.result"`` is split, with numeric segments
    becoming indexes.
    """
    path = indicator.path
    if isinstance(path, str):
        path = [int(p) if p.lstrip("-").isdigit() else p for p in path.split(".")]

    if not isinstance(path, (list, tuple)) or not path:
        raise ConfigurationError(f"Indicator '{indicator.name}' has an invalid path: {indicator.path!r}")

    for key in path:
        if isinstance(key, bool) or not isinstance(key, (str, int)) or key == "":
            raise ConfigurationError(
                f"Indicator '{indicator.name}' path contains an invalid key: {key!r}"
            )
    return tuple(path)


def walk_path(tree: Any, path: Tuple[Any, ...]) -> Any:
    """Follow ``path`` through nested mappings / sequences; None when missing."""
    node = tree
    for key in path:
        if isinstance(node, Mapping):
            if key not in node:
                return None
            node = node[key]
        elif isinstance(node, Sequence) and not isinstance(node, str) and isinstance(key, int):
            try:
                node = node[key]
            except IndexError:
                return None
        else:
            return None
    return node


def _plot_value(value: Any) -> Optional[float]:
    """Numeric leaf as float; anything else (including NaN) plots as a gap."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    if not np.isfinite(value):
        return None
    return float(value)


def indicator_values(snapshots: Iterable[StrategySnapshot], path: Tuple[Any, ...]) -> List[Optional[float]]:
    return [_plot_value(walk_path(s.indicators, path)) for s in snapshots]


def indicator_series(
    snapshots: List[StrategySnapshot],
    dates: List[str],
    indicator: IndicatorConfig,
    yaxis: str,
) -> ChartSeries:
    path = normalize_path(indicator)
    line = {"width": indicator.width}
    if indicator.color is not None:
        line["color"] = indicator.color
    return ChartSeries(
        name=indicator.name,
        kind=LINE,
        x=tuple(dates),
        y=tuple(indicator_values(snapshots, path)),
        xaxis="x",
        yaxis=yaxis,
        style={"opacity": indicator.opacity, "line": line},
    )


def check_alignment(buffers: EventBuffers, allocation: AxisAllocation) -> None:
    """Indicator overlays index candles and snapshots by position."""
    if not allocation.indicators:
        return
    if len(buffers.candles) != len(buffers.snapshots):
        raise AlignmentError(
            f"Candle and strategy buffers differ in length: "
            f"{len(buffers.candles)} candles vs {len(buffers.snapshots)} snapshots"
        )


def derive_series(
    buffers: EventBuffers,
    config: ChartConfig,
    allocation: AxisAllocation,
    capabilities: Optional[Capabilities] = None,
) -> List[ChartSeries]:
    """
    Build every enabled series in display order: Price, Buy, Sell, Volume, indicators.

    Enabled categories always yield a series, with empty coordinates when
    no events arrived.
    """
    capabilities = capabilities or buffers.capabilities
    data = config.plot.data
    check_alignment(buffers, allocation)

    candles = candles_frame(buffers.candles)
    dates = plot_dates(candles["start"].tolist())
    series: List[ChartSeries] = []

    if capabilities.price:
        series.append(price_series(candles, dates, data.price))

    if capabilities.trades:
        trades = trades_frame(buffers.trades)
        series.append(trade_series(trades, "buy", data.trades.buy))
        series.append(trade_series(trades, "sell", data.trades.sell))

    if capabilities.volume and allocation.volume is not None:
        series.append(volume_series(candles, dates, data.volume, allocation.volume.ref))

    for indicator, slot in allocation.indicators:
        series.append(indicator_series(buffers.snapshots, dates, indicator, slot.ref))

    return series
