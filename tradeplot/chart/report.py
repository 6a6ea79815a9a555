"""
Performance report summary.
"""
import numbers
from typing import List, Optional, Sequence, Tuple

from tradeplot.chart.errors import ConfigurationError, MissingReportError
from tradeplot.chart.types import PerformanceReport


def with_edge(report: Optional[PerformanceReport]) -> PerformanceReport:
    """Copy of the report with ``edge = profit - market``."""
    if report is None:
        raise MissingReportError("No performance report received before finalize")
    for key in ("profit", "market"):
        if key not in report:
            raise ConfigurationError(f"Performance report has no '{key}' field")

    result = dict(report)
    result["edge"] = report["profit"] - report["market"]
    return result


def summarize_report(
    report: PerformanceReport,
    items: Sequence[Tuple[str, str]],
) -> List[Tuple[str, float]]:
    """
    Pick the configured metrics from the report, rounded to 2 decimals.

    Args:
        report: Performance report (usually from :func:`with_edge`)
        items: Ordered (label, metric key) pairs

    Returns:
        Ordered (label, value) pairs
    """
    summary = []
    for label, key in items:
        if key not in report:
            raise ConfigurationError(f"Performance report has no metric '{key}' (label '{label}')")
        value = report[key]
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ConfigurationError(f"Performance metric '{key}' is not numeric: {value!r}")
        summary.append((label, round(float(value), 2)))
    return summary
