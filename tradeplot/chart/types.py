"""
Chart data types.

Contains the buffered event records (Candle, Trade, StrategySnapshot) and the
finalize-time products (ChartSeries, AxisSlot, ChartPayload).
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from tradeplot.chart.time_codec import to_epoch

# Flat metric -> value mapping (profit, market, timespan, ...)
PerformanceReport = Dict[str, Any]

LINE = "line"
MARKERS = "markers"


def _pick(event: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in the event (camelCase or snake_case)."""
    for key in keys:
        if key in event:
            return event[key]
    return default


@dataclass(frozen=True)
class Candle:
    """One OHLCV bar with its start normalized to epoch seconds."""
    start: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> "Candle":
        return cls(
            start=to_epoch(event["start"]),
            open=event["open"],
            high=event["high"],
            low=event["low"],
            close=event["close"],
            volume=event["volume"],
        )


@dataclass(frozen=True)
class Trade:
    """Completed buy or sell execution."""
    id: Any
    action: str  # "buy" or "sell"
    price: float
    date: int
    advice_id: Any = None
    amount: Optional[float] = None
    cost: Optional[float] = None
    portfolio: Dict[str, Any] = field(default_factory=dict)
    balance: Optional[float] = None
    fee_percent: Optional[float] = None
    effective_price: Optional[float] = None

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> "Trade":
        return cls(
            id=event.get("id"),
            action=event["action"],
            price=event["price"],
            date=to_epoch(event["date"]),
            advice_id=_pick(event, "adviceId", "advice_id"),
            amount=event.get("amount"),
            cost=event.get("cost"),
            portfolio=dict(event.get("portfolio") or {}),
            balance=event.get("balance"),
            fee_percent=_pick(event, "feePercent", "fee_percent"),
            effective_price=_pick(event, "effectivePrice", "effective_price"),
        )


@dataclass(frozen=True)
class StrategySnapshot:
    """Indicator values for one strategy cycle, aligned to a candle by position."""
    indicators: Dict[str, Any]

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> "StrategySnapshot":
        return cls(indicators=copy.deepcopy(dict(event.get("indicators") or {})))


@dataclass(frozen=True)
class ChartSeries:
    """A named x/y series bound to an axis pair."""
    name: str
    kind: str  # LINE or MARKERS
    x: Tuple[str, ...]
    y: Tuple[Any, ...]
    xaxis: str = "x"
    yaxis: str = "y"
    style: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.y)

    def to_trace(self) -> Dict[str, Any]:
        """Plotly trace dict."""
        trace = {
            "name": self.name,
            "type": "scattergl",
            "mode": "lines" if self.kind == LINE else "markers",
            "x": list(self.x),
            "y": list(self.y),
            "xaxis": self.xaxis,
            "yaxis": self.yaxis,
        }
        trace.update(copy.deepcopy(self.style))
        return trace


@dataclass(frozen=True)
class AxisSlot:
    """A numbered y-axis definition."""
    number: int
    title: Optional[str] = None
    hidden_title: Optional[str] = None
    side: Optional[str] = None
    overlaying: Optional[str] = None
    show_tick_labels: bool = True
    scale_type: str = "linear"

    @property
    def key(self) -> str:
        """Layout key: yaxis, yaxis2, yaxis4, ..."""
        return "yaxis" if self.number == 1 else f"yaxis{self.number}"

    @property
    def ref(self) -> str:
        """Trace reference: y, y2, y4, ..."""
        return "y" if self.number == 1 else f"y{self.number}"

    def to_layout(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {}
        if self.title is not None:
            entry["title"] = self.title
        if self.hidden_title is not None:
            entry["hiddenTitle"] = self.hidden_title
        entry["autorange"] = True
        entry["type"] = self.scale_type
        if self.side is not None:
            entry["side"] = self.side
        if self.overlaying is not None:
            entry["overlaying"] = self.overlaying
        if not self.show_tick_labels:
            entry["showticklabels"] = False
        return entry


@dataclass(frozen=True)
class ChartPayload:
    """Series, layout and report summary for one finished run."""
    series: Tuple[ChartSeries, ...]
    layout: Dict[str, Any]
    report_summary: Tuple[Tuple[str, float], ...]
    render_config: Dict[str, Any]
    stats: Dict[str, Any] = field(default_factory=dict)

    def series_named(self, name: str) -> ChartSeries:
        for s in self.series:
            if s.name == name:
                return s
        raise KeyError(name)

    @property
    def series_names(self) -> List[str]:
        return [s.name for s in self.series]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready object consumed by ``Plotly.newPlot``."""
        return {
            "chart": [s.to_trace() for s in self.series],
            "layout": copy.deepcopy(self.layout),
            "config": copy.deepcopy(self.render_config),
            "stats": copy.deepcopy(self.stats),
            "performance": [[label, value] for label, value in self.report_summary],
        }
