"""
Helpers shared by CLI commands.
"""

from pathlib import Path

import typer
from rich.console import Console

from specboard.utils.paths import normalize_path
from specboard.utils.project import find_project_root, is_speckit_project

err_console = Console(stderr=True)


def is_debug(ctx: typer.Context) -> bool:
    return bool(ctx.obj.get("debug", False)) if ctx.obj else False


def resolve_project_root(path: Path | None) -> Path:
    """
    Resolve the project root for a command.

    With an explicit path, that directory must be a spec-kit project.
    Without one, the nearest ancestor of the working directory holding
    specs/ or .specify/ is used.

    Raises:
        typer.Exit: If no spec-kit project is found
    """
    if path is not None:
        root = normalize_path(path).resolve()
        if not root.is_dir() or not is_speckit_project(root):
            err_console.print(
                f"[red]Error:[/red] Not a spec-kit project: {root} "
                "(expected a specs/ or .specify/ directory)"
            )
            raise typer.Exit(1)
        return root

    root = find_project_root()
    if root is None:
        err_console.print(
            "[red]Error:[/red] Not in a spec-kit project. "
            "Could not find specs/ or .specify/ in this or any parent directory."
        )
        raise typer.Exit(1)
    return root
