#!/usr/bin/env python3
"""
tradeplot CLI - build charts from recorded trading runs.

Usage:
    python manage.py config init
    python manage.py config show --config config/tradeplot.yaml
    python manage.py render events.jsonl --config config/tradeplot.yaml
    python manage.py render events.jsonl --no-write
"""

import typer

from commands.config import config_app
from commands.render import render

app = typer.Typer(
    name="tradeplot",
    help="tradeplot CLI - Build interactive charts from trading bot runs",
    no_args_is_help=True,
)

app.add_typer(config_app, name="config")
app.command("render")(render)


if __name__ == "__main__":
    app()
