"""
Tests for the dashboard API.

Tests validate:
- Project, metrics and board endpoints
- The path-safety gate (403) on every path-taking endpoint
- Checklist toggling over HTTP
- Registry and recent-projects endpoints
- Directory browsing
- Error response format
- SSE framing and the stream generator
"""

import json

import pytest
from fastapi.testclient import TestClient

from specboard.core.config.models import PathsConfig, SpecboardConfig
from specboard.core.dashboard.api import DashboardState, create_app
from specboard.core.dashboard.api.routes.watch import format_sse, stream_updates
from specboard.core.dashboard.api.state import ACCESS_DENIED
from specboard.core.registry import MemoryRecentStorage, ProjectRegistry
from specboard.core.speckit.models import UpdateEvent
from specboard.core.speckit.scanner import ProjectScanner


@pytest.fixture
def state(tmp_path):
    """Dashboard state confined to tmp_path with isolated storage."""
    config = SpecboardConfig(paths=PathsConfig(allowed_roots=[str(tmp_path)]))
    return DashboardState(
        config,
        registry=ProjectRegistry(tmp_path / "state" / "projects.json"),
        recent_storage=MemoryRecentStorage(),
    )


@pytest.fixture
def client(state):
    """Test client for an app built around the isolated state."""
    with TestClient(create_app(state=state)) as test_client:
        yield test_client


# ==============================================================================
# Root and health
# ==============================================================================


class TestHealth:
    """Tests for root and health endpoints."""

    def test_root(self, client):
        """Test the root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health(self, client):
        """Test the health endpoint."""
        assert client.get("/health").json() == {"status": "healthy"}


# ==============================================================================
# Project endpoints
# ==============================================================================


class TestProjectEndpoint:
    """Tests for GET /api/project."""

    def test_returns_project(self, client, speckit_project):
        """Test a scan of the sample project with camelCase fields."""
        response = client.get("/api/project", params={"path": str(speckit_project)})

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "my-app"
        assert data["hasConstitution"] is True
        assert [f["id"] for f in data["features"]] == ["001-user-auth", "002-reporting"]
        assert data["features"][0]["completedTasks"] == 3

    def test_not_a_project(self, client, tmp_path):
        """Test a plain directory returns 404."""
        plain = tmp_path / "plain"
        plain.mkdir()

        response = client.get("/api/project", params={"path": str(plain)})

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    def test_outside_allowed_roots(self, client):
        """Test a path outside the allowed roots is forbidden."""
        response = client.get("/api/project", params={"path": "/etc"})

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "FORBIDDEN"
        assert body["message"] == ACCESS_DENIED

    def test_traversal_rejected(self, client, speckit_project):
        """Test .. segments cannot escape the allowed roots."""
        response = client.get(
            "/api/project", params={"path": f"{speckit_project}/../../../../etc"}
        )
        assert response.status_code == 403

    def test_missing_path(self, client):
        """Test the path parameter is required."""
        response = client.get("/api/project")

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestMetricsAndBoard:
    """Tests for GET /api/project/metrics and /api/project/board."""

    def test_metrics(self, client, speckit_project):
        """Test metrics for the sample project."""
        response = client.get("/api/project/metrics", params={"path": str(speckit_project)})

        assert response.status_code == 200
        data = response.json()
        assert data["totalFeatures"] == 2
        assert data["totalTasks"] == 5
        assert data["completionPercentage"] == 60
        assert data["featuresByStage"]["implement"] == 1

    def test_metrics_for_non_project_are_zero(self, client, tmp_path):
        """Test a directory without project data yields zeros."""
        plain = tmp_path / "plain"
        plain.mkdir()

        data = client.get("/api/project/metrics", params={"path": str(plain)}).json()

        assert data["totalFeatures"] == 0
        assert data["completionPercentage"] == 0

    def test_board(self, client, speckit_project):
        """Test board columns for the sample project."""
        data = client.get("/api/project/board", params={"path": str(speckit_project)}).json()

        assert [c["id"] for c in data["columns"]] == ["backlog", "in_progress", "review", "done"]
        assert data["columns"][0]["cards"][0]["id"] == "002-reporting"
        assert data["columns"][1]["cards"][0]["id"] == "001-user-auth"

    def test_board_forbidden(self, client):
        """Test the board endpoint is gated too."""
        assert client.get("/api/project/board", params={"path": "/etc"}).status_code == 403


# ==============================================================================
# Checklist toggle
# ==============================================================================


class TestChecklistToggle:
    """Tests for POST /api/checklist/toggle."""

    def test_toggle(self, client, tmp_path, write_file):
        """Test a checkbox is flipped on disk."""
        checklist = write_file(tmp_path / "checklist.md", "# Review\n- [ ] Spec reviewed\n")

        response = client.post(
            "/api/checklist/toggle", json={"filePath": str(checklist), "lineIndex": 1}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "newState": True, "error": None}
        assert checklist.read_text() == "# Review\n- [x] Spec reviewed\n"

    def test_invalid_line(self, client, tmp_path, write_file):
        """Test toggling a non-checkbox line returns 400 with the error."""
        checklist = write_file(tmp_path / "checklist.md", "# Review\n")

        response = client.post(
            "/api/checklist/toggle", json={"filePath": str(checklist), "lineIndex": 0}
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "not a valid checkbox line" in response.json()["error"]

    def test_out_of_bounds(self, client, tmp_path, write_file):
        """Test an out-of-range line returns 400."""
        checklist = write_file(tmp_path / "checklist.md", "- [ ] a\n")

        response = client.post(
            "/api/checklist/toggle", json={"filePath": str(checklist), "lineIndex": 99}
        )

        assert response.status_code == 400
        assert "out of bounds" in response.json()["error"]

    def test_non_markdown_rejected(self, client, tmp_path, write_file):
        """Test only .md files may be edited."""
        target = write_file(tmp_path / "notes.txt", "- [ ] a\n")

        response = client.post(
            "/api/checklist/toggle", json={"filePath": str(target), "lineIndex": 0}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"
        assert target.read_text() == "- [ ] a\n"

    def test_outside_allowed_roots(self, client):
        """Test files outside the allowed roots are forbidden."""
        response = client.post(
            "/api/checklist/toggle", json={"filePath": "/etc/hosts.md", "lineIndex": 0}
        )
        assert response.status_code == 403

    def test_negative_line_index(self, client, tmp_path):
        """Test a negative index fails validation."""
        response = client.post(
            "/api/checklist/toggle",
            json={"filePath": str(tmp_path / "c.md"), "lineIndex": -1},
        )
        assert response.status_code == 422


# ==============================================================================
# Registry and recents
# ==============================================================================


class TestProjectsEndpoints:
    """Tests for /api/projects."""

    def test_crud(self, client, speckit_project):
        """Test create, list, get and delete."""
        created = client.post(
            "/api/projects",
            json={"name": "my-app", "displayName": "My App", "filePath": str(speckit_project)},
        )
        assert created.status_code == 201
        assert created.json()["filePath"] == str(speckit_project.resolve())

        assert [p["name"] for p in client.get("/api/projects").json()] == ["my-app"]
        assert client.get("/api/projects/my-app").json()["displayName"] == "My App"

        assert client.delete("/api/projects/my-app").status_code == 200
        assert client.get("/api/projects").json() == []

    def test_duplicate_conflict(self, client, speckit_project):
        """Test registering the same name twice returns 409."""
        body = {"name": "my-app", "displayName": "My App", "filePath": str(speckit_project)}
        client.post("/api/projects", json=body)

        response = client.post("/api/projects", json=body)

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    def test_invalid_name(self, client, speckit_project):
        """Test a non-slug name returns 400."""
        response = client.post(
            "/api/projects",
            json={"name": "My App", "displayName": "My App", "filePath": str(speckit_project)},
        )
        assert response.status_code == 400

    def test_blank_display_name(self, client, speckit_project):
        """Test a whitespace-only display name fails validation."""
        response = client.post(
            "/api/projects",
            json={"name": "my-app", "displayName": "   ", "filePath": str(speckit_project)},
        )
        assert response.status_code == 422

    def test_unknown_project(self, client):
        """Test unknown names return 404."""
        assert client.get("/api/projects/nope").status_code == 404
        assert client.delete("/api/projects/nope").status_code == 404

    def test_path_gate(self, client):
        """Test registering a directory outside the roots is forbidden."""
        response = client.post(
            "/api/projects", json={"name": "etc", "displayName": "Etc", "filePath": "/etc"}
        )
        assert response.status_code == 403


class TestRecentEndpoints:
    """Tests for /api/recent."""

    def test_add_and_list(self, client, tmp_path):
        """Test recent paths are newest first and de-duplicated."""
        first = tmp_path / "a"
        second = tmp_path / "b"

        client.post("/api/recent", json={"path": str(first)})
        client.post("/api/recent", json={"path": str(second)})
        response = client.post("/api/recent", json={"path": str(first)})

        expected = [str(first.resolve()), str(second.resolve())]
        assert response.json() == {"paths": expected}
        assert client.get("/api/recent").json() == {"paths": expected}

    def test_path_gate(self, client):
        """Test paths outside the roots are forbidden."""
        assert client.post("/api/recent", json={"path": "/etc"}).status_code == 403


# ==============================================================================
# Browse
# ==============================================================================


class TestBrowse:
    """Tests for GET /api/browse."""

    def test_lists_directories_projects_first(self, client, tmp_path, speckit_project, write_file):
        """Test child directories are listed with spec-kit projects first."""
        (tmp_path / "aaa-plain").mkdir()
        (tmp_path / ".hidden").mkdir()
        write_file(tmp_path / "file.txt", "x")

        data = client.get("/api/browse", params={"path": str(tmp_path)}).json()

        names = [e["name"] for e in data["entries"]]
        assert names[0] == "my-app"
        assert "aaa-plain" in names
        assert ".hidden" not in names
        assert "file.txt" not in names
        assert data["entries"][0]["isSpecKitProject"] is True
        assert data["currentPath"] == str(tmp_path.resolve())
        assert data["isSpecKitProject"] is False

    def test_missing_directory(self, client, tmp_path):
        """Test a missing directory returns 404."""
        response = client.get("/api/browse", params={"path": str(tmp_path / "missing")})
        assert response.status_code == 404

    def test_file_is_not_a_directory(self, client, tmp_path, write_file):
        """Test a file path returns 400."""
        target = write_file(tmp_path / "file.txt", "x")

        response = client.get("/api/browse", params={"path": str(target)})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_PATH"

    def test_forbidden(self, client):
        """Test browsing outside the roots is forbidden."""
        assert client.get("/api/browse", params={"path": "/etc"}).status_code == 403


# ==============================================================================
# Live updates
# ==============================================================================


class FakeRequest:
    """Request stand-in that disconnects after a number of checks."""

    def __init__(self, checks_before_disconnect: int):
        self.remaining = checks_before_disconnect

    async def is_disconnected(self) -> bool:
        self.remaining -= 1
        return self.remaining < 0


class EmptyScanner(ProjectScanner):
    async def scan_async(self, root):
        return None


class TestWatchStream:
    """Tests for the SSE endpoint and stream generator."""

    def test_format_sse(self):
        """Test an event is framed as one compact data line."""
        frame = format_sse(UpdateEvent(type="error", error="boom"))

        assert frame.startswith("data: ")
        assert frame.endswith("\n\n")
        assert json.loads(frame[len("data: "):]) == {
            "type": "error",
            "data": None,
            "error": "boom",
        }

    def test_watch_forbidden(self, client, state):
        """Test the stream is gated and opens no session."""
        response = client.get("/api/watch", params={"path": "/etc"})

        assert response.status_code == 403
        assert state.sessions == set()

    @pytest.mark.asyncio
    async def test_stream_sends_initial_snapshot(self, state, speckit_project):
        """Test the first frame is the initial scan and the session is closed after."""
        session = state.open_session(speckit_project)

        frames = [frame async for frame in stream_updates(FakeRequest(1), state, session)]

        assert len(frames) == 1
        payload = json.loads(frames[0][len("data: "):])
        assert payload["type"] == "update"
        assert payload["data"]["name"] == "my-app"
        assert session.closed is True
        assert state.sessions == set()

    @pytest.mark.asyncio
    async def test_stream_keepalive(self, tmp_path, speckit_project):
        """Test idle streams send ping comments."""
        state = DashboardState(
            SpecboardConfig(paths=PathsConfig(allowed_roots=[str(tmp_path)])),
            scanner=EmptyScanner(),
            registry=ProjectRegistry(tmp_path / "projects.json"),
            recent_storage=MemoryRecentStorage(),
        )
        state.keepalive_seconds = 0.01
        session = state.open_session(speckit_project)

        frames = [frame async for frame in stream_updates(FakeRequest(2), state, session)]

        assert frames == [": ping\n\n", ": ping\n\n"]
        assert session.closed is True

    def test_shutdown_closes_sessions(self, state, speckit_project):
        """Test app shutdown closes any open session."""
        app = create_app(state=state)
        with TestClient(app):
            session = state.open_session(speckit_project)

        assert session.closed is True
        assert state.sessions == set()
