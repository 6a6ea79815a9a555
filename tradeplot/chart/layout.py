"""
Plotly layout construction.

Builds the title, sizing, legend, date x-axis with range selector buttons,
and one y-axis entry per allocated axis slot.
"""
from typing import Any, Dict, List, Mapping

from tradeplot.chart.axes import AxisAllocation
from tradeplot.chart.errors import ConfigurationError, MissingReportError
from tradeplot.chart.types import PerformanceReport
from tradeplot.config import ChartConfig


def build_title(config: ChartConfig, report: PerformanceReport) -> str:
    """``"{method} : {from} to {to} : {timespan}"``."""
    if report is None:
        raise MissingReportError("No performance report received; cannot build chart title")
    if "timespan" not in report:
        raise ConfigurationError("Performance report has no 'timespan' field")
    run = config.run
    return f"{run.method} : {run.date_from} to {run.date_to} : {report['timespan']}"


def range_selector_buttons(buttons: Mapping[str, List[int]]) -> List[Dict[str, Any]]:
    """
    Flatten per-unit step counts into Plotly range selector buttons.

    ``{"day": [1, 5], "month": [1]}`` becomes 1d, 5d, 1m buttons followed by
    a final "all" button.
    """
    result: List[Dict[str, Any]] = []
    for unit, counts in buttons.items():
        if not unit:
            raise ConfigurationError("Range selector unit must be a non-empty string")
        for count in counts:
            if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
                raise ConfigurationError(f"Invalid range selector count for '{unit}': {count!r}")
            result.append({
                "count": count,
                "label": f"{count}{unit[0]}",
                "step": unit,
                "stepmode": "backward",
            })
    result.append({"step": "all"})
    return result


def build_layout(
    config: ChartConfig,
    allocation: AxisAllocation,
    report: PerformanceReport,
) -> Dict[str, Any]:
    """Assemble the layout; ``layout.additional`` is merged last, unvalidated."""
    layout_config = config.plot.layout

    layout: Dict[str, Any] = {
        "title": build_title(config, report),
        "autosize": layout_config.autosize,
        "height": layout_config.height,
        "width": layout_config.width,
        "legend": {
            "orientation": layout_config.legend_orientation,
            "bgcolor": "rgba(0,0,0,0)",
        },
        "xaxis": {
            "autorange": True,
            "rangeselector": {
                "buttons": range_selector_buttons(layout_config.buttons),
            },
            "type": "date",
        },
    }

    for slot in allocation.slots():
        layout[slot.key] = slot.to_layout()

    layout.update(layout_config.additional)
    return layout
