"""
Configuration commands for tradeplot CLI.
"""

import dataclasses
import json
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.syntax import Syntax

from commands import console, DEFAULT_CONFIG_PATH
from tradeplot.config import ChartConfig, create_default_config, load_config

config_app = typer.Typer(help="Manage chart configuration", no_args_is_help=True)


@config_app.command("init")
def config_init(
    path: Path = typer.Argument(DEFAULT_CONFIG_PATH, help="Where to write the config file"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
):
    """Write a starter configuration file."""
    if path.exists() and not force:
        console.print(f"[red]{path} already exists (use --force to overwrite)[/red]")
        raise typer.Exit(1)

    create_default_config(str(path))
    console.print(f"[green]Created default config at {path}[/green]")


@config_app.command("show")
def config_show(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config to merge over defaults"),
):
    """Print the effective configuration (defaults merged with the file)."""
    try:
        config = load_config(str(config_path)) if config_path else ChartConfig.from_dict(None)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    # JSON round trip turns tuples into lists for the YAML dumper
    data = json.loads(json.dumps(dataclasses.asdict(config)))
    console.print(Syntax(yaml.safe_dump(data, sort_keys=False), "yaml"))
