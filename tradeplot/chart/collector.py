"""
Chart collector: the narrow interface a host runtime talks to.

Usage:
    collector = ChartCollector(load_config("config/tradeplot.yaml"))

    # One call per event, in upstream order
    collector.record_candle(candle)
    collector.record_trade(trade)
    collector.record_snapshot(strat_update)
    collector.set_performance_report(report)

    # Once, at the end of the run
    payload = await collector.finalize(done=lambda err: ...)
"""
import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from tradeplot.chart.assembler import build_payload
from tradeplot.chart.buffers import Capabilities, EventBuffers
from tradeplot.chart.errors import PersistenceError
from tradeplot.chart.html_report import HtmlFileSink, render_html
from tradeplot.chart.types import ChartPayload
from tradeplot.config import ChartConfig

logger = logging.getLogger(__name__)

CANDLE_EVENT = "candle"
TRADE_EVENT = "trade_completed"
SNAPSHOT_EVENT = "strat_update"
REPORT_EVENT = "performance_report"

DoneCallback = Callable[[Optional[PersistenceError]], Any]


class ChartCollector:
    """
    Buffers one run's events and turns them into a chart at the end.

    A collector serves a single ingest-then-finalize lifecycle; start a new
    one for the next run.
    """

    def __init__(
        self,
        config: Optional[ChartConfig] = None,
        sink: Optional[HtmlFileSink] = None,
    ) -> None:
        """
        Initialize the collector.

        Args:
            config: Chart configuration (defaults when omitted)
            sink: Destination for the rendered document when writing is enabled
        """
        self.config = config or ChartConfig.from_dict(None)
        self.capabilities = Capabilities.from_config(self.config)
        self.buffers = EventBuffers(self.capabilities)
        self.sink = sink or HtmlFileSink()

        self.payload: Optional[ChartPayload] = None
        self.output_path: Optional[Path] = None
        self._finalized = False

    def record_candle(self, candle: Mapping[str, Any]) -> None:
        self.buffers.record_candle(candle)

    def record_trade(self, trade: Mapping[str, Any]) -> None:
        self.buffers.record_trade(trade)

    def record_snapshot(self, snapshot: Mapping[str, Any]) -> None:
        self.buffers.record_snapshot(snapshot)

    def set_performance_report(self, report: Mapping[str, Any]) -> None:
        self.buffers.set_performance_report(report)

    def handlers(self) -> Dict[str, Callable[[Mapping[str, Any]], None]]:
        """Event name -> handler, for enabled streams only."""
        result: Dict[str, Callable[[Mapping[str, Any]], None]] = {}
        if self.capabilities.candles:
            result[CANDLE_EVENT] = self.record_candle
        if self.capabilities.trades:
            result[TRADE_EVENT] = self.record_trade
        if self.capabilities.snapshots:
            result[SNAPSHOT_EVENT] = self.record_snapshot
        result[REPORT_EVENT] = self.set_performance_report
        return result

    def build_payload(self) -> ChartPayload:
        """Build the payload from the events received so far."""
        return build_payload(self.buffers, self.config, self.capabilities)

    async def finalize(self, done: Optional[DoneCallback] = None) -> ChartPayload:
        """
        Build the chart payload and hand it to the sink.

        Configuration and alignment errors are raised before anything is
        written. A sink failure is passed to ``done``; without a callback it
        is raised as PersistenceError.

        Args:
            done: Called once with None or the PersistenceError after the sink finishes

        Returns:
            The assembled ChartPayload
        """
        if self._finalized:
            raise RuntimeError("finalize() already called for this run")
        self._finalized = True

        payload = self.build_payload()
        self.payload = payload

        error: Optional[PersistenceError] = None
        write = self.config.plot.write
        if write.enabled:
            document = render_html(payload, self.config)
            try:
                self.output_path = await self.sink.write(document, write.path)
            except Exception as e:
                error = PersistenceError(f"Unable to store chart: {e}", payload=payload)
                error.__cause__ = e

        logger.debug(
            f"Chart finalized with {len(payload.series)} series",
            extra={
                "event": "chart_finalized",
                "candles": len(self.buffers.candles),
                "trades": len(self.buffers.trades),
                "snapshots": len(self.buffers.snapshots),
                "written": write.enabled and error is None,
            },
        )

        if done is not None:
            result = done(error)
            if inspect.isawaitable(result):
                await result
        elif error is not None:
            raise error

        return payload
