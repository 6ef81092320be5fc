"""
specboard CLI - Dashboard command.

Serve the live dashboard API for a spec-kit project.
"""

import logging
import threading
import time
import webbrowser
from pathlib import Path
from urllib.parse import quote

import typer
import uvicorn
from rich.console import Console

from specboard.cli.common import is_debug, resolve_project_root
from specboard.core.config.loader import load_config
from specboard.core.dashboard.api.app import create_app

console = Console()
logger = logging.getLogger(__name__)


def dashboard(
    ctx: typer.Context,
    path: Path | None = typer.Argument(
        None,
        help="Project root (defaults to the nearest ancestor with specs/ or .specify/)",
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to run the server on (default from config: 8080)",
    ),
    host: str | None = typer.Option(
        None,
        "--host",
        help="Interface to bind (default from config: 127.0.0.1)",
    ),
    no_browser: bool = typer.Option(
        False,
        "--no-browser",
        help="Don't open browser automatically",
    ),
) -> None:
    """
    Launch the dashboard server.

    This command:
    1. Loads configuration (defaults, user, project, env)
    2. Starts the FastAPI server with uvicorn
    3. Opens the project's live update stream in your browser

    Examples:
        specboard dashboard                  # Serve on 127.0.0.1:8080
        specboard dashboard --port 3000      # Serve on port 3000
        specboard dashboard --no-browser     # Don't open browser
    """
    debug = is_debug(ctx)
    project_root = resolve_project_root(path)
    config = load_config(project_root)
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    if debug:
        console.print(f"[dim]Project root: {project_root}[/dim]")
        console.print(f"[dim]Watch: {config.watch.model_dump()}[/dim]")

    fastapi_app = create_app(config)
    fastapi_app.state.dashboard.recents.add(project_root)

    url = f"http://{bind_host}:{bind_port}"
    logger.info(f"Serving {project_root} on {url}")
    project_url = f"{url}/api/project?path={quote(str(project_root))}"
    console.print("\n[bold cyan]Starting dashboard server...[/bold cyan]")
    console.print(f"[dim]Project: {project_url}[/dim]")
    console.print(f"[dim]Live updates: {url}/api/watch?path={quote(str(project_root))}[/dim]")
    console.print(f"[dim]Docs: {url}/docs[/dim]")

    if not no_browser:

        def open_browser() -> None:
            time.sleep(1.5)  # Wait for server to start
            console.print(f"\n[green]Opening browser:[/green] {project_url}")
            webbrowser.open(project_url)

        threading.Thread(target=open_browser, daemon=True).start()

    console.print("\n[dim]Press Ctrl+C to stop[/dim]\n")

    try:
        uvicorn.run(
            fastapi_app,
            host=bind_host,
            port=bind_port,
            log_level="debug" if debug else "warning",
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Dashboard stopped[/yellow]")
        raise typer.Exit(0)
