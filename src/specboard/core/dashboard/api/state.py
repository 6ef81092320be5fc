"""
Application state shared by the dashboard routes.

One DashboardState is created per app by create_app() and stored on
``app.state.dashboard``. Routes reach it through the get_state dependency
instead of module globals, so every test can build an isolated app.
"""

import logging
from pathlib import Path

from fastapi import HTTPException, Request, status

from specboard.core.config.models import SpecboardConfig
from specboard.core.registry.recents import RecentStorage, recents_from_config
from specboard.core.registry.store import ProjectRegistry, registry_from_config
from specboard.core.speckit.scanner import ProjectScanner
from specboard.core.watch.session import WatchSession
from specboard.utils.paths import is_path_safe

logger = logging.getLogger(__name__)

# Seconds of silence before the SSE stream sends a keep-alive comment
KEEPALIVE_SECONDS = 30.0

ACCESS_DENIED = "Access denied: Path is outside allowed directories"


class DashboardState:
    """
    Long-lived objects behind the HTTP API.

    Attributes:
        config: Effective configuration
        scanner: Scanner shared by all requests (stateless)
        registry: Named project registry
        recents: Recently opened project paths
        sessions: Open watch sessions, closed on shutdown
    """

    def __init__(
        self,
        config: SpecboardConfig,
        scanner: ProjectScanner | None = None,
        registry: ProjectRegistry | None = None,
        recent_storage: RecentStorage | None = None,
    ):
        self.config = config
        self.scanner = scanner or ProjectScanner()

        self.registry = registry or registry_from_config(config)
        self.recents = recents_from_config(config, recent_storage)

        self.keepalive_seconds = KEEPALIVE_SECONDS
        self.sessions: set[WatchSession] = set()

    def check_path(self, path: str | Path) -> Path:
        """
        Pass a client-supplied path through the path-safety gate.

        Returns:
            The resolved path

        Raises:
            HTTPException: 403 if the path is outside the allowed roots
        """
        verdict = is_path_safe(path, self.config.paths.allowed_roots)
        if not verdict.safe:
            logger.warning(f"Rejected path outside allowed roots: {path}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ACCESS_DENIED)
        return verdict.resolved_path

    def open_session(self, root: Path) -> WatchSession:
        """Create a watch session for one subscriber."""
        watch = self.config.watch
        session = WatchSession(
            root,
            scanner=self.scanner,
            debounce=watch.debounce_seconds,
            poll_interval=watch.poll_interval_seconds,
            depth=watch.depth,
            ignore_hidden=watch.ignore_hidden,
        )
        self.sessions.add(session)
        return session

    def close_session(self, session: WatchSession) -> None:
        session.close()
        self.sessions.discard(session)

    def close_all(self) -> None:
        for session in list(self.sessions):
            self.close_session(session)


def get_state(request: Request) -> DashboardState:
    """FastAPI dependency returning the app's DashboardState."""
    state: DashboardState = request.app.state.dashboard
    return state
