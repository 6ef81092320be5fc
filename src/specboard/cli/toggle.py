"""
specboard CLI - toggle command.

Flip one markdown checkbox in place.
"""

from pathlib import Path

import typer
from rich.console import Console

from specboard.cli.common import err_console
from specboard.core.speckit.checkbox import toggle_checkbox_in_file
from specboard.utils.paths import normalize_path

console = Console()


def toggle(
    file: Path = typer.Argument(..., help="Markdown file containing the checkbox"),
    line: int = typer.Argument(..., min=0, help="0-based line index of the checkbox"),
) -> None:
    """
    Toggle the checkbox on LINE of FILE.

    Examples:
        specboard toggle specs/001-auth/tasks.md 12
        specboard toggle specs/001-auth/checklists/ux.md 4
    """
    file_path = normalize_path(file)
    result = toggle_checkbox_in_file(file_path, line)
    if not result.success:
        err_console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(1)

    state = "checked" if result.new_state else "unchecked"
    console.print(f"[green]✓[/green] {file_path}:{line} is now {state}")
