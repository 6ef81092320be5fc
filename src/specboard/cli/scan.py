"""
specboard CLI - scan and metrics commands.

Print a spec-kit project's features and roll-up metrics.
"""

import json as json_module
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from specboard.cli.common import err_console, resolve_project_root
from specboard.core.speckit.metrics import compute_metrics, completion_percentage
from specboard.core.speckit.models import FeatureStage, Project
from specboard.core.speckit.scanner import ProjectScanner

console = Console()

STAGE_STYLES: dict[FeatureStage, str] = {
    FeatureStage.SPECIFY: "dim",
    FeatureStage.PLAN: "blue",
    FeatureStage.TASKS: "cyan",
    FeatureStage.IMPLEMENT: "yellow",
    FeatureStage.COMPLETE: "green",
}

PATH_ARGUMENT = typer.Argument(
    None,
    help="Project root (defaults to the nearest ancestor with specs/ or .specify/)",
)


def _load_project(path: Path | None) -> Project:
    root = resolve_project_root(path)
    project = ProjectScanner().scan(root)
    if project is None:
        err_console.print(f"[red]Error:[/red] Could not read project at {root}")
        raise typer.Exit(1)
    return project


def _print_json(data: object) -> None:
    typer.echo(json_module.dumps(data, indent=2))


def scan(
    path: Path | None = PATH_ARGUMENT,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the full project snapshot as JSON",
    ),
) -> None:
    """
    Scan a spec-kit project and list its features.

    Examples:
        specboard scan                   # Project containing the current directory
        specboard scan ~/code/my-app     # Explicit project root
        specboard scan --json            # Full snapshot as JSON
    """
    project = _load_project(path)

    if json_output:
        _print_json(project.model_dump(mode="json", by_alias=True))
        return

    console.print(f"\n[bold]{project.name}[/bold] [dim]{project.path}[/dim]")
    if project.has_constitution and project.constitution is not None:
        version = project.constitution.version or "unversioned"
        console.print(
            f"[dim]Constitution: {len(project.constitution.principles)} principles "
            f"({version})[/dim]"
        )

    if not project.features:
        console.print("\n[yellow]No features found under specs/[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Feature")
    table.add_column("Stage")
    table.add_column("Tasks", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Clarifications", justify="right")
    table.add_column("Checklists", justify="right")

    for feature in project.features:
        style = STAGE_STYLES[feature.stage]
        checklists = (
            f"{feature.completed_checklist_items}/{feature.total_checklist_items}"
            if feature.has_checklists else "-"
        )
        table.add_row(
            f"{feature.id}\n[dim]{feature.name}[/dim]",
            f"[{style}]{feature.stage.label}[/{style}]",
            f"{feature.completed_tasks}/{feature.total_tasks}",
            f"{completion_percentage(feature.completed_tasks, feature.total_tasks)}%",
            str(feature.total_clarifications),
            checklists,
        )

    console.print(table)


def metrics(
    path: Path | None = PATH_ARGUMENT,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output metrics as JSON",
    ),
) -> None:
    """
    Show roll-up metrics for a spec-kit project.

    Examples:
        specboard metrics
        specboard metrics ~/code/my-app --json
    """
    project = _load_project(path)
    result = compute_metrics(project)

    if json_output:
        _print_json(result.model_dump(mode="json", by_alias=True))
        return

    console.print(f"\n[bold]{project.name}[/bold]")
    console.print(f"Features: {result.total_features}")
    for stage, count in result.features_by_stage.items():
        console.print(f"  {stage.label}: {count}")
    console.print(
        f"Tasks: {result.completed_tasks}/{result.total_tasks} complete "
        f"({result.completion_percentage}%), {result.in_progress_tasks} in progress, "
        f"{result.pending_tasks} pending"
    )
    if result.tasks_by_phase:
        console.print("Tasks by phase:")
        for phase, count in result.tasks_by_phase.items():
            console.print(f"  {phase}: {count}")
    console.print(f"Clarifications: {result.total_clarifications}")
