"""
Pytest configuration and shared fixtures.

Provides isolated config/env state, a builder for spec-kit project trees,
and sample markdown documents used across the test suite.
"""

from pathlib import Path

import pytest

from specboard.core.config.loader import clear_cache

# ==============================================================================
# Environment Isolation
# ==============================================================================

SPECBOARD_ENV_VARS = (
    "SPECBOARD_DEBOUNCE_MS",
    "SPECBOARD_POLL_INTERVAL_MS",
    "SPECBOARD_HOST",
    "SPECBOARD_PORT",
    "SPECBOARD_ALLOWED_ROOTS",
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point XDG_CONFIG_HOME at a temp dir and drop SPECBOARD_* variables."""
    config_home = tmp_path / "xdg-config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for name in SPECBOARD_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_cache()
    yield config_home
    clear_cache()


# ==============================================================================
# Sample Documents
# ==============================================================================

SAMPLE_SPEC = """# Feature Specification: User Auth

## User Scenarios & Testing

### User Story 1 - Login (Priority: P1)

Users sign in with their email address.

**Why this priority**: Nothing else works without it.

**Acceptance Scenarios**:

1. **Given** a registered user, **When** they log in, **Then** they see the dashboard
2. **Given** a wrong password, **When** they log in, **Then** an error is shown

### User Story 2 - Password reset (Priority: P2)

Users recover access by email.

- Reset link expires after one hour

## Clarifications

### Session 2025-01-15
- Q: Which auth provider? → A: OAuth via GitHub
- Q: Session length? → A: 24 hours

### Session 2025-01-20
- Q: Lockout policy? → A: 5 attempts
"""

SAMPLE_PLAN = """# Implementation Plan: User Auth

## Technical Context

**Language/Version**: Python 3.11
**Primary Dependencies**: FastAPI, pydantic
**Storage**: PostgreSQL
**Testing**: pytest
**Target Platform**: Linux server

## Project Structure
"""

SAMPLE_TASKS = """# Tasks: User Auth

## Phase 1: Setup
- [x] T001 Create project structure
- [x] T002 [P] Configure linting in pyproject.toml

## Phase 2: User Story 1 - Login (Priority: P1)
- [x] T003 [P] [US1] Create User model in src/models/user.py
- [ ] T004 [US1] Implement login endpoint (src/api/login.py)

## Phase 3: User Story 2 - Password reset (Priority: P2)
- [ ] T005 [US2] Send reset email
"""

SAMPLE_CONSTITUTION = """# Project Constitution

## Core Principles

### I. Library-First
Every feature starts as a standalone library.

### II. Test-First
Tests are written before implementation.

## Governance
Amendments require a documented migration plan.

**Version**: 2.1.1 | **Ratified**: 2025-06-13 | **Last Amended**: 2025-07-16
"""


@pytest.fixture
def sample_spec():
    """spec.md with two user stories and two clarification sessions."""
    return SAMPLE_SPEC


@pytest.fixture
def sample_plan():
    """plan.md with a filled-in Technical Context block."""
    return SAMPLE_PLAN


@pytest.fixture
def sample_tasks():
    """tasks.md with three phases, five tasks and three done."""
    return SAMPLE_TASKS


@pytest.fixture
def sample_constitution():
    """constitution.md in the spec-kit template layout."""
    return SAMPLE_CONSTITUTION


# ==============================================================================
# Project Builders
# ==============================================================================


def _write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def write_file():
    """
    Return a writer that creates parent directories as needed.

    Usage:
        checklist = write_file(tmp_path / "ux.md", "- [ ] Reviewed\n")
    """
    return _write_file


@pytest.fixture
def make_feature():
    """
    Return a builder that creates specs/<name>/ with the given files.

    Usage:
        feature_dir = make_feature(root, "001-auth", spec=SAMPLE_SPEC, tasks="...")
    """

    def _make(
        root: Path,
        name: str,
        spec: str | None = None,
        plan: str | None = None,
        tasks: str | None = None,
        extra: dict[str, str] | None = None,
    ) -> Path:
        feature_dir = root / "specs" / name
        feature_dir.mkdir(parents=True, exist_ok=True)
        if spec is not None:
            _write_file(feature_dir / "spec.md", spec)
        if plan is not None:
            _write_file(feature_dir / "plan.md", plan)
        if tasks is not None:
            _write_file(feature_dir / "tasks.md", tasks)
        for relative, content in (extra or {}).items():
            _write_file(feature_dir / relative, content)
        return feature_dir

    return _make


@pytest.fixture
def speckit_project(tmp_path, make_feature):
    """
    Provide a spec-kit project with two features and a constitution.

    Creates:
    - .specify/memory/constitution.md
    - specs/001-user-auth/ (spec, plan, tasks, research, checklist)
    - specs/002-reporting/ (spec only)
    """
    root = tmp_path / "my-app"
    root.mkdir()
    _write_file(root / ".specify" / "memory" / "constitution.md", SAMPLE_CONSTITUTION)
    make_feature(
        root,
        "001-user-auth",
        spec=SAMPLE_SPEC,
        plan=SAMPLE_PLAN,
        tasks=SAMPLE_TASKS,
        extra={
            "research.md": "# Research\n",
            "checklists/requirements.md": "- [x] Complete\n- [ ] Testable\n",
        },
    )
    make_feature(root, "002-reporting", spec="# Reporting\n")
    return root
