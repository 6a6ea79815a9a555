"""
Commands package - CLI command modules for tradeplot.

Each module contains the Typer app or command for one command group.
"""

from pathlib import Path

from rich.console import Console

# Shared console instance
console = Console()

# Paths
PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "tradeplot.yaml"
