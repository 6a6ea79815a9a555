"""
HTML document for a chart payload, and the file sink that stores it.

The document is self-contained apart from the Plotly.js CDN script:
- Performance bar with the summarized report metrics
- Built-in styles plus any configured extra CSS
- The JSON payload passed straight to ``Plotly.newPlot``
"""
import asyncio
import html
import json
import logging
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from tradeplot.chart.types import ChartPayload
from tradeplot.config import ChartConfig

logger = logging.getLogger(__name__)

PLOTLY_CDN = "https://cdn.plot.ly/plotly-latest.min.js"
PLOT_FILENAME = "plot.html"

PLOT_STYLES = """
.performance {
    position: absolute;
    bottom: 0;
    right: 0;
    padding-bottom: 8px;
    z-index: 1;
}
.performance-item {
    padding: 0 6px;
}
.performance-item-name {
    font-weight: bold;
}
.performance-item-value {
    font-size: 1.15em;
}
""".strip()


def performance_html(summary: Sequence[Tuple[str, float]]) -> str:
    """Performance bar markup; values shown with 2 decimals."""
    items: List[str] = []
    for label, value in summary:
        items.append(
            f'<span class="performance-item">'
            f'<span class="performance-item-name">{html.escape(label)}:</span> '
            f'<span class="performance-item-value">{value:.2f}</span>'
            f'</span>'
        )
    return f'<div class="performance">{" ".join(items)}</div>'


def _script_json(payload: ChartPayload) -> str:
    # "</" would end the <script> element early
    return json.dumps(payload.to_dict(), default=str).replace("</", "<\\/")


def render_html(payload: ChartPayload, config: ChartConfig) -> str:
    """Render the full HTML document for a payload."""
    performance_bar = ""
    if config.plot.performance_report.enabled:
        performance_bar = performance_html(payload.report_summary)

    return f"""<!DOCTYPE html>
<html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>{html.escape(config.run.method)} Plot</title>
        <script type="text/javascript" src="{PLOTLY_CDN}"></script>
        <style type="text/css">{PLOT_STYLES}{config.plot.css_additional}</style>
    </head>
    <body>
        {performance_bar}
        <div id="chart"></div>
        <script type="text/javascript">
            const data = {_script_json(payload)};
            Plotly.newPlot("chart", data.chart, data.layout, data.config);
        </script>
    </body>
</html>
"""


class HtmlFileSink:
    """
    Writes rendered chart documents to ``<base_dir>/<relative_dir>/plot.html``.

    Usage:
        sink = HtmlFileSink(Path("."))
        path = await sink.write(document, "plots")
    """

    def __init__(self, base_dir: Union[str, Path] = ".") -> None:
        self.base_dir = Path(base_dir)

    def target(self, relative_dir: str = "") -> Path:
        return self.base_dir / relative_dir / PLOT_FILENAME

    def _write(self, path: Path, document: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding="utf-8")

    async def write(self, document: str, relative_dir: str = "") -> Path:
        """
        Write the document off the event loop.

        Raises:
            OSError: if the file cannot be written
        """
        path = self.target(relative_dir)
        try:
            await asyncio.to_thread(self._write, path, document)
        except OSError as e:
            logger.error(
                f"Unable to write {PLOT_FILENAME}: {e}",
                extra={"event": "chart_write_failed", "path": str(path)},
            )
            raise

        logger.info(
            f"Written {PLOT_FILENAME} to: {path}",
            extra={"event": "chart_written", "path": str(path), "bytes": len(document)},
        )
        return path
