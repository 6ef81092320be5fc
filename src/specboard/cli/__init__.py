"""
specboard CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging

import typer
from rich.console import Console

from specboard import __version__
from specboard.cli import dashboard, projects, scan, toggle
from specboard.core.config.env import load_layered_env

PANEL_INSPECT = "Inspect a Project"
PANEL_SERVE = "Serve the Dashboard"
PANEL_MANAGE = "Manage Projects"

app = typer.Typer(
    name="specboard",
    help="Live dashboard for spec-kit projects",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    specboard - live dashboard for spec-kit projects.

    Reads specs/<feature>/ directories (spec.md, plan.md, tasks.md and
    friends), derives each feature's stage and progress, and serves it
    to a browser with live updates as the files change.

    Quick Start:
        specboard scan                 # Features in the current project
        specboard metrics              # Roll-up numbers
        specboard dashboard            # Serve the live dashboard
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env()

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ctx.obj = {"debug": debug}


app.command(name="scan", rich_help_panel=PANEL_INSPECT)(scan.scan)
app.command(name="metrics", rich_help_panel=PANEL_INSPECT)(scan.metrics)
app.command(name="toggle", rich_help_panel=PANEL_INSPECT)(toggle.toggle)

app.command(name="dashboard", rich_help_panel=PANEL_SERVE)(dashboard.dashboard)

app.add_typer(projects.app, name="projects", rich_help_panel=PANEL_MANAGE)


@app.command(rich_help_panel=PANEL_MANAGE)
def version() -> None:
    """Show specboard version and exit."""
    console.print(f"specboard version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
