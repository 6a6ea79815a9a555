"""
Render command: replay a recorded event log into a chart.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.table import Table

from commands import console
from tradeplot.chart import ChartCollector, ChartError, ChartPayload, HtmlFileSink
from tradeplot.config import ChartConfig, load_config
from tradeplot.utils.logger import configure_simple_logging, setup_logging
from tradeplot.workers import EventBus, attach_collector, replay_events


async def _replay_and_finalize(events: Path, collector: ChartCollector) -> ChartPayload:
    bus = EventBus(raise_errors=True)
    attach_collector(bus, collector)
    await replay_events(events, bus)
    return await collector.finalize()


def _print_payload(payload: ChartPayload) -> None:
    table = Table(title="Chart Series", box=box.ROUNDED)
    table.add_column("Series", style="cyan")
    table.add_column("Mode", style="green")
    table.add_column("Points", justify="right")
    table.add_column("Axis", style="yellow")

    for s in payload.series:
        table.add_row(s.name, s.kind, str(len(s)), f"{s.xaxis}/{s.yaxis}")

    console.print(table)

    if payload.report_summary:
        perf = Table(title="Performance", box=box.SIMPLE)
        perf.add_column("Metric", style="cyan")
        perf.add_column("Value", justify="right")
        for label, value in payload.report_summary:
            color = "green" if value >= 0 else "red"
            perf.add_row(label, f"[{color}]{value:.2f}[/{color}]")
        console.print(perf)


def render(
    events: Path = typer.Argument(..., help="JSON-lines event log"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Directory for plot.html (overrides plot.write.path)"),
    no_write: bool = typer.Option(False, "--no-write", help="Build the chart without writing plot.html"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
    log_dir: Optional[Path] = typer.Option(
        None, "--log-dir", help="Also write rotating JSON, error and chart-event logs here"
    ),
):
    """Replay an event log and build the chart."""
    if log_dir is not None:
        setup_logging(log_dir=str(log_dir), level=log_level)
    else:
        configure_simple_logging(level=log_level)

    try:
        config = load_config(str(config_path)) if config_path else ChartConfig.from_dict(None)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if output is not None:
        config.plot.write.path = output
    if no_write:
        config.plot.write.enabled = False

    collector = ChartCollector(config, sink=HtmlFileSink(Path.cwd()))

    try:
        payload = asyncio.run(_replay_and_finalize(events, collector))
    except (ChartError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Render failed: {e}[/red]")
        raise typer.Exit(1)

    _print_payload(payload)

    if collector.output_path is not None:
        console.print(f"\n[green]Chart written to {collector.output_path}[/green]")
