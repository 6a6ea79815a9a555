"""
Append-only event buffers for one chart run.

Buffers candles, completed trades and strategy snapshots in arrival order,
plus the latest performance report. Which streams are recorded is decided
once at construction from the chart configuration.
"""
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from tradeplot.chart.types import Candle, PerformanceReport, StrategySnapshot, Trade
from tradeplot.config import ChartConfig


@dataclass(frozen=True)
class Capabilities:
    """Enabled chart categories, shared by buffers, derivation and axis allocation."""
    price: bool = True
    volume: bool = True
    trades: bool = True
    indicators: bool = True

    @classmethod
    def from_config(cls, config: ChartConfig) -> "Capabilities":
        data = config.plot.data
        return cls(
            price=data.price.enabled,
            volume=data.volume.enabled,
            trades=data.trades.enabled,
            indicators=data.strategy.enabled,
        )

    @property
    def candles(self) -> bool:
        # Indicator overlays are plotted against the candle time axis
        return self.price or self.volume or self.indicators

    @property
    def snapshots(self) -> bool:
        return self.indicators


class EventBuffers:
    """
    Ordered storage for the events of a single run.

    Features:
    - One append per candle / trade / snapshot, no processing beyond normalization
    - Disabled streams ignore their events
    - Last-write-wins performance report
    """

    def __init__(self, capabilities: Optional[Capabilities] = None) -> None:
        self.capabilities = capabilities or Capabilities()
        self.candles: List[Candle] = []
        self.trades: List[Trade] = []
        self.snapshots: List[StrategySnapshot] = []
        self.performance_report: Optional[PerformanceReport] = None

    def record_candle(self, candle: Mapping[str, Any]) -> None:
        if not self.capabilities.candles:
            return
        self.candles.append(candle if isinstance(candle, Candle) else Candle.from_event(candle))

    def record_trade(self, trade: Mapping[str, Any]) -> None:
        if not self.capabilities.trades:
            return
        self.trades.append(trade if isinstance(trade, Trade) else Trade.from_event(trade))

    def record_snapshot(self, snapshot: Mapping[str, Any]) -> None:
        if not self.capabilities.snapshots:
            return
        if isinstance(snapshot, StrategySnapshot):
            snapshot = StrategySnapshot.from_event({"indicators": snapshot.indicators})
        else:
            snapshot = StrategySnapshot.from_event(snapshot)
        self.snapshots.append(snapshot)

    def set_performance_report(self, report: Mapping[str, Any]) -> None:
        self.performance_report = dict(report)
