"""
Configuration for the chart collector.

Responsible for:
- Default settings for every chart category
- Deep-merging user YAML over the defaults
- Converting the merged mapping into typed dataclasses

Usage:
    config = load_config("config/tradeplot.yaml")
    collector = ChartCollector(config)
"""
import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


DEFAULTS: Dict[str, Any] = {
    "run": {
        "method": "",
        "date_from": "",
        "date_to": "",
        "asset": "",
        "currency": "",
        "exchange": "",
    },
    "plot": {
        "write": {
            "enabled": True,
            "path": "",
        },
        "performance_report": {
            "enabled": True,
            "items": [],
        },
        "css": {
            "additional": "",
        },
        "layout": {
            "autosize": True,
            "height": 620,
            "width": None,
            "legend_orientation": "h",
            "buttons": {
                "day": [1, 5, 10],
                "week": [1],
                "month": [1, 3, 6],
                "year": [1, 3],
            },
            "additional": {},
        },
        "data": {
            "price": {
                "enabled": True,
                "color": "blue",
                "width": 2,
                "opacity": 0.75,
            },
            "trades": {
                "enabled": True,
                "buy": {"color": "green", "opacity": 0.9, "size": 10},
                "sell": {"color": "red", "opacity": 0.9, "size": 10},
            },
            "volume": {
                "enabled": True,
                "color": "purple",
                "width": 2,
                "opacity": 0.8,
            },
            "strategy": {
                "enabled": True,
                "indicators": {},
            },
        },
    },
}


def deep_merge(base: Dict[str, Any], override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Recursively merge ``override`` into a copy of ``base``.

    Nested mappings are merged key by key; any other value in ``override``
    (lists included) replaces the base value.
    """
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


@dataclass
class RunConfig:
    """Describes the run being charted (used for titles)."""
    method: str = ""
    date_from: str = ""
    date_to: str = ""
    asset: str = ""
    currency: str = ""
    exchange: str = ""

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RunConfig":
        return cls(
            method=d.get("method", ""),
            date_from=str(d.get("date_from", "")),
            date_to=str(d.get("date_to", "")),
            asset=d.get("asset", ""),
            currency=d.get("currency", ""),
            exchange=d.get("exchange", ""),
        )


@dataclass
class WriteConfig:
    enabled: bool = True
    path: str = ""


@dataclass
class PerformanceReportConfig:
    """Ordered (label, metric key) pairs shown under the chart."""
    enabled: bool = True
    items: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PerformanceReportConfig":
        items = []
        for item in d.get("items") or []:
            if isinstance(item, dict):
                items.append((str(item["label"]), str(item["key"])))
            else:
                label, key = item
                items.append((str(label), str(key)))
        return cls(enabled=bool(d.get("enabled", True)), items=items)


@dataclass
class LayoutConfig:
    autosize: bool = True
    height: Optional[int] = 620
    width: Optional[int] = None
    legend_orientation: str = "h"
    # Range selector step counts per unit, in display order
    buttons: Dict[str, List[int]] = field(
        default_factory=lambda: copy.deepcopy(DEFAULTS["plot"]["layout"]["buttons"])
    )
    # Merged into the layout verbatim
    additional: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LayoutConfig":
        return cls(
            autosize=d.get("autosize", True),
            height=d.get("height"),
            width=d.get("width"),
            legend_orientation=d.get("legend_orientation", "h"),
            buttons={unit: list(counts or []) for unit, counts in (d.get("buttons") or {}).items()},
            additional=dict(d.get("additional") or {}),
        )


@dataclass
class LineStyle:
    enabled: bool = True
    color: str = "blue"
    width: float = 2
    opacity: float = 1.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LineStyle":
        return cls(
            enabled=bool(d.get("enabled", True)),
            color=d.get("color", "blue"),
            width=d.get("width", 2),
            opacity=d.get("opacity", 1.0),
        )


@dataclass
class MarkerStyle:
    color: str = "green"
    opacity: float = 0.9
    size: float = 10

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MarkerStyle":
        return cls(
            color=d.get("color", "green"),
            opacity=d.get("opacity", 0.9),
            size=d.get("size", 10),
        )


@dataclass
class TradesConfig:
    enabled: bool = True
    buy: MarkerStyle = field(default_factory=lambda: MarkerStyle(color="green"))
    sell: MarkerStyle = field(default_factory=lambda: MarkerStyle(color="red"))


@dataclass
class IndicatorConfig:
    """One indicator overlay: where to find it in a snapshot and how to draw it."""
    name: str
    path: Any  # sequence of keys / indexes into the indicator map
    yaxis: Optional[int] = None  # axis offset; the chart axis is yaxis + 3
    color: Optional[str] = None
    width: float = 2
    opacity: float = 1.0

    @classmethod
    def from_dict(cls, name: str, d: Dict[str, Any]) -> "IndicatorConfig":
        return cls(
            name=str(name),
            path=d.get("path"),
            yaxis=d.get("yaxis"),
            color=d.get("color"),
            width=d.get("width", 2),
            opacity=d.get("opacity", 1.0),
        )


@dataclass
class StrategyConfig:
    enabled: bool = True
    indicators: List[IndicatorConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StrategyConfig":
        raw = d.get("indicators") or {}
        # Mapping form keeps declaration order; list form carries explicit names
        if isinstance(raw, dict):
            indicators = [IndicatorConfig.from_dict(name, conf or {}) for name, conf in raw.items()]
        else:
            indicators = [IndicatorConfig.from_dict(conf["name"], conf) for conf in raw]
        return cls(enabled=bool(d.get("enabled", True)), indicators=indicators)


@dataclass
class DataConfig:
    price: LineStyle = field(default_factory=lambda: LineStyle(opacity=0.75))
    trades: TradesConfig = field(default_factory=TradesConfig)
    volume: LineStyle = field(default_factory=lambda: LineStyle(color="purple", opacity=0.8))
    strategy: StrategyConfig = field(default_factory=StrategyConfig)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DataConfig":
        trades = d.get("trades", {})
        return cls(
            price=LineStyle.from_dict(d.get("price", {})),
            trades=TradesConfig(
                enabled=bool(trades.get("enabled", True)),
                buy=MarkerStyle.from_dict(trades.get("buy", {})),
                sell=MarkerStyle.from_dict(trades.get("sell", {})),
            ),
            volume=LineStyle.from_dict(d.get("volume", {})),
            strategy=StrategyConfig.from_dict(d.get("strategy", {})),
        )


@dataclass
class PlotConfig:
    write: WriteConfig = field(default_factory=WriteConfig)
    performance_report: PerformanceReportConfig = field(default_factory=PerformanceReportConfig)
    css_additional: str = ""
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    data: DataConfig = field(default_factory=DataConfig)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PlotConfig":
        write = d.get("write", {})
        return cls(
            write=WriteConfig(enabled=bool(write.get("enabled", True)), path=write.get("path") or ""),
            performance_report=PerformanceReportConfig.from_dict(d.get("performance_report", {})),
            css_additional=(d.get("css") or {}).get("additional") or "",
            layout=LayoutConfig.from_dict(d.get("layout", {})),
            data=DataConfig.from_dict(d.get("data", {})),
        )


@dataclass
class ChartConfig:
    """Top-level configuration: run description plus plot settings."""
    run: RunConfig = field(default_factory=RunConfig)
    plot: PlotConfig = field(default_factory=PlotConfig)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]] = None) -> "ChartConfig":
        """Create config from a (partial) dictionary merged over DEFAULTS."""
        merged = deep_merge(DEFAULTS, d)
        return cls(
            run=RunConfig.from_dict(merged["run"]),
            plot=PlotConfig.from_dict(merged["plot"]),
        )


def load_config(path: str) -> ChartConfig:
    """
    Load chart configuration from a YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        ChartConfig instance
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f)

    return ChartConfig.from_dict(data or {})


DEFAULT_CONFIG = """\
# tradeplot configuration
run:
  method: MACD
  date_from: "2021-01-01"
  date_to: "2021-03-01"
  asset: BTC
  currency: USDT
  exchange: binance

plot:
  write:
    enabled: true
    path: plots

  performance_report:
    enabled: true
    items:
      - [Profit, profit]
      - [Market, market]
      - [Edge, edge]
      - [Trades, trades]

  css:
    additional: ""

  layout:
    autosize: true
    height: 620
    width: null
    legend_orientation: h
    buttons:
      day: [1, 5, 10]
      week: [1]
      month: [1, 3, 6]
      year: [1, 3]
    additional: {}

  data:
    price:
      enabled: true
      color: blue
      width: 2
      opacity: 0.75
    trades:
      enabled: true
      buy: {color: green, opacity: 0.9, size: 10}
      sell: {color: red, opacity: 0.9, size: 10}
    volume:
      enabled: true
      color: purple
      width: 2
      opacity: 0.8
    strategy:
      enabled: true
      indicators:
        macd:
          path: [macd, result]
          yaxis: 1
          color: orange
          width: 1
          opacity: 0.8
"""


def create_default_config(output_path: str = "config/tradeplot.yaml") -> None:
    """
    Create a default configuration file.

    Args:
        output_path: Path to write configuration file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with open(output, "w") as f:
        f.write(DEFAULT_CONFIG)

    logger.info(f"Created default config at {output_path}")
