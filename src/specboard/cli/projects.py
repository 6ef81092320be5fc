"""
specboard CLI - projects commands.

Manage the registry of named projects.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from specboard.cli.common import err_console
from specboard.core.config.loader import load_config
from specboard.core.registry.store import RegistryError, registry_from_config
from specboard.utils.paths import normalize_path
from specboard.utils.project import is_speckit_project

app = typer.Typer(
    name="projects",
    help="Manage registered projects",
    no_args_is_help=True,
)

console = Console()


@app.command("list")
def list_projects() -> None:
    """List registered projects, most recently updated first."""
    registry = registry_from_config(load_config())
    try:
        records = registry.list_projects()
    except RegistryError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not records:
        console.print("[dim]No projects registered. Add one with 'specboard projects add'.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Display name")
    table.add_column("Path")
    table.add_column("Updated")
    for record in records:
        table.add_row(
            record.name,
            record.display_name,
            record.file_path,
            record.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command("add")
def add_project(
    name: str = typer.Argument(..., help="URL-safe slug (lowercase letters, numbers, hyphens)"),
    path: Path = typer.Argument(..., help="Project root directory"),
    display_name: str | None = typer.Option(
        None,
        "--display-name",
        "-d",
        help="Human-readable name (defaults to the directory name)",
    ),
) -> None:
    """
    Register a project under NAME.

    Examples:
        specboard projects add my-app ~/code/my-app
        specboard projects add my-app . --display-name "My App"
    """
    root = normalize_path(path).resolve()
    if not is_speckit_project(root):
        console.print(
            f"[yellow]Warning:[/yellow] {root} has no specs/ or .specify/ directory yet"
        )

    registry = registry_from_config(load_config())
    try:
        record = registry.add(name, display_name or root.name, root)
    except RegistryError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Registered {record.name} -> {record.file_path}")


@app.command("remove")
def remove_project(
    name: str = typer.Argument(..., help="Registered project name"),
) -> None:
    """Unregister the project called NAME (files on disk are untouched)."""
    registry = registry_from_config(load_config())
    try:
        record = registry.remove(name)
    except RegistryError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Removed {record.name}")
