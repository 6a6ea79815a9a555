"""Chart collection and payload assembly for trading runs."""
from tradeplot.chart.assembler import RENDER_CONFIG, assemble_payload, build_payload
from tradeplot.chart.axes import AxisAllocation, allocate_axes
from tradeplot.chart.buffers import Capabilities, EventBuffers
from tradeplot.chart.collector import (
    CANDLE_EVENT,
    REPORT_EVENT,
    SNAPSHOT_EVENT,
    TRADE_EVENT,
    ChartCollector,
)
from tradeplot.chart.errors import (
    AlignmentError,
    ChartError,
    ConfigurationError,
    MissingReportError,
    PersistenceError,
)
from tradeplot.chart.html_report import HtmlFileSink, render_html
from tradeplot.chart.time_codec import plot_date, plot_dates, to_epoch
from tradeplot.chart.types import (
    AxisSlot,
    Candle,
    ChartPayload,
    ChartSeries,
    StrategySnapshot,
    Trade,
)

__all__ = [
    "AlignmentError",
    "AxisAllocation",
    "AxisSlot",
    "CANDLE_EVENT",
    "Candle",
    "Capabilities",
    "ChartCollector",
    "ChartError",
    "ChartPayload",
    "ChartSeries",
    "ConfigurationError",
    "EventBuffers",
    "HtmlFileSink",
    "MissingReportError",
    "PersistenceError",
    "RENDER_CONFIG",
    "REPORT_EVENT",
    "SNAPSHOT_EVENT",
    "StrategySnapshot",
    "TRADE_EVENT",
    "Trade",
    "allocate_axes",
    "assemble_payload",
    "build_payload",
    "plot_date",
    "plot_dates",
    "render_html",
    "to_epoch",
]
