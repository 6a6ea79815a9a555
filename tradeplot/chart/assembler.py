"""
Chart payload assembly.

Runs the finalize pipeline over the buffered events:
axis allocation -> series derivation -> layout -> report summary -> payload.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from tradeplot.chart.axes import allocate_axes
from tradeplot.chart.buffers import Capabilities, EventBuffers
from tradeplot.chart.layout import build_layout
from tradeplot.chart.report import summarize_report, with_edge
from tradeplot.chart.series import derive_series
from tradeplot.chart.types import ChartPayload, ChartSeries
from tradeplot.config import ChartConfig

RENDER_CONFIG: Dict[str, Any] = {"responsive": True}


def assemble_payload(
    series: Sequence[ChartSeries],
    layout: Dict[str, Any],
    report_summary: Sequence[Tuple[str, float]],
    stats: Optional[Dict[str, Any]] = None,
) -> ChartPayload:
    return ChartPayload(
        series=tuple(series),
        layout=layout,
        report_summary=tuple(report_summary),
        render_config=dict(RENDER_CONFIG),
        stats=stats or {},
    )


def _stats(series: List[ChartSeries], report: Dict[str, Any]) -> Dict[str, Any]:
    """Raw per-series values kept alongside the traces."""
    return {
        "series": {s.name: {"x": list(s.x), "y": list(s.y)} for s in series},
        "performanceReport": dict(report),
    }


def build_payload(
    buffers: EventBuffers,
    config: ChartConfig,
    capabilities: Optional[Capabilities] = None,
) -> ChartPayload:
    """
    Build the chart payload from the current buffer contents.

    Pure with respect to the buffers: the held report is not modified and
    repeated calls give equal payloads.

    Raises:
        MissingReportError: no performance report was received
        ConfigurationError: bad indicator path or report item
        AlignmentError: candle / snapshot buffers differ in length
    """
    capabilities = capabilities or buffers.capabilities
    report = with_edge(buffers.performance_report)

    allocation = allocate_axes(config, capabilities)
    series = derive_series(buffers, config, allocation, capabilities)
    layout = build_layout(config, allocation, report)

    report_config = config.plot.performance_report
    summary = summarize_report(report, report_config.items) if report_config.enabled else []

    return assemble_payload(series, layout, summary, _stats(series, report))
