"""
Task list extraction from tasks.md.

Task lines follow the spec-kit tasks template:

    ## Phase 3: User Story 1 - Login (Priority: P1)
    - [ ] T012 [P] [US1] Create User model in src/models/user.py
    - [x] T013 [US1] Implement login form (src/login.ts)

Per line, in order: checkbox, task id (optionally bold or followed by a
colon), bracket tags ([P] = parallel, [USn] = user story), then free text.
A trailing parenthesized path, a backticked path, or an "in <path>" phrase
sets the file path; only the parenthesized form is removed from the
description.

Headings (level 2 and deeper) open phases. Tasks before the first heading
land in a phase called "Tasks". A repeated task id keeps its first
occurrence.
"""

import logging
import re
from dataclasses import dataclass, field

from specboard.core.speckit.models import Task, TaskGroup, TaskPhase, UserStory
from specboard.core.speckit.parsers.markdown import parse_heading, split_lines, strip_emphasis

logger = logging.getLogger(__name__)

TASK_LINE_PATTERN = re.compile(r"^\s*[-*+]\s*\[(?P<state>[ xX~/\-])\]\s*(?P<rest>.*)$")
TASK_ID_PATTERN = re.compile(r"^(?:\*\*|__)?(?P<id>T\d+)(?:\*\*|__)?\s*:?\s*(?P<body>.*)$")
TAG_PATTERN = re.compile(r"^\[(?P<tag>[^\]]+)\]\s*")
STORY_TAG_PATTERN = re.compile(r"^(?:US|Story\s*)\s*(?P<number>\d+)$", re.IGNORECASE)

TRAILING_PATH_PATTERN = re.compile(r"\s*\((?P<path>[^()\s]+)\)\s*$")
BACKTICK_PATH_PATTERN = re.compile(r"`(?P<path>[^`\s]+)`")
IN_PATH_PATTERN = re.compile(r"\bin\s+(?P<path>[\w.~/-]+)")
EXTENSION_PATTERN = re.compile(r"\.[A-Za-z0-9]{1,8}$")

COMPLETED_STATES = frozenset("xX")
IN_PROGRESS_STATES = frozenset("~/-")

DEFAULT_PHASE_NAME = "Tasks"
UNGROUPED_TITLE = "Other Tasks"


@dataclass
class ParsedTasks:
    """Flat task list plus its phase structure."""

    tasks: list[Task] = field(default_factory=list)
    phases: list[TaskPhase] = field(default_factory=list)
    has_phase_headings: bool = False


def looks_like_path(candidate: str) -> bool:
    """Return True if ``candidate`` reads like a file path."""
    candidate = candidate.rstrip(".,;:")
    if not candidate or candidate.startswith("http"):
        return False
    return "/" in candidate or EXTENSION_PATTERN.search(candidate) is not None


def _extract_file_path(description: str) -> tuple[str, str | None]:
    """Return (description, file_path) for a task body."""
    trailing = TRAILING_PATH_PATTERN.search(description)
    if trailing and looks_like_path(trailing.group("path")):
        return description[: trailing.start()].rstrip(), trailing.group("path")

    for match in BACKTICK_PATH_PATTERN.finditer(description):
        if looks_like_path(match.group("path")):
            return description, match.group("path")

    for match in IN_PATH_PATTERN.finditer(description):
        candidate = match.group("path").rstrip(".,;:")
        if looks_like_path(candidate):
            return description, candidate

    return description, None


def parse_task_line(line: str, line_index: int | None = None) -> Task | None:
    """
    Parse one tasks.md line.

    Args:
        line: A single line of markdown
        line_index: Optional 0-based line index to record on the task

    Returns:
        Task, or None if the line is not a task line

    Example:
        >>> task = parse_task_line("- [x] T003 [P] [US1] Implement login form (src/login.ts)")
        >>> (task.id, task.parallel, task.user_story, task.file_path)
        ('T003', True, 'US1', 'src/login.ts')
    """
    match = TASK_LINE_PATTERN.match(line)
    if not match:
        return None

    id_match = TASK_ID_PATTERN.match(match.group("rest").strip())
    if not id_match:
        return None

    state = match.group("state")
    body = id_match.group("body")
    parallel = False
    user_story: str | None = None

    while True:
        tag_match = TAG_PATTERN.match(body)
        if not tag_match:
            break
        tag = tag_match.group("tag").strip()
        story_match = STORY_TAG_PATTERN.match(tag)
        if tag.upper() == "P":
            parallel = True
        elif story_match:
            user_story = f"US{int(story_match.group('number'))}"
        else:
            break
        body = body[tag_match.end() :]

    description, file_path = _extract_file_path(body.strip())

    return Task(
        id=id_match.group("id"),
        description=description.strip(),
        completed=state in COMPLETED_STATES,
        parallel=parallel,
        user_story=user_story,
        file_path=file_path,
        in_progress=state in IN_PROGRESS_STATES,
        line=line_index,
    )


def parse_tasks(content: str) -> ParsedTasks:
    """
    Extract tasks and phases from tasks.md content.

    Args:
        content: Raw markdown of tasks.md

    Returns:
        ParsedTasks with the flat task list and the non-empty phases
    """
    result = ParsedTasks()
    seen_ids: set[str] = set()
    current = TaskPhase(name=DEFAULT_PHASE_NAME)
    phases = [current]

    for index, line in enumerate(split_lines(content)):
        heading = parse_heading(line)
        if heading is not None:
            if heading.level >= 2:
                current = TaskPhase(name=strip_emphasis(heading.text))
                phases.append(current)
                result.has_phase_headings = True
            continue

        task = parse_task_line(line, index)
        if task is None:
            continue
        if task.id in seen_ids:
            logger.debug(f"Duplicate task id {task.id} on line {index}, keeping first")
            continue

        seen_ids.add(task.id)
        result.tasks.append(task)
        current.tasks.append(task)

    result.phases = [phase for phase in phases if phase.tasks]
    logger.debug(f"Parsed {len(result.tasks)} tasks in {len(result.phases)} phases")
    return result


def build_task_groups(tasks: list[Task], stories: list[UserStory] | None = None) -> list[TaskGroup]:
    """
    Group tasks by user story tag.

    Groups appear in order of each story's first task; untagged tasks
    follow in a final "Other Tasks" group. Returns an empty list when no
    task carries a story tag.

    Args:
        tasks: Flat task list
        stories: User stories from spec.md, used for group titles

    Returns:
        TaskGroups covering every task exactly once
    """
    if not any(task.user_story for task in tasks):
        return []

    titles = {story.id: story.title for story in stories or []}
    grouped: dict[str, list[Task]] = {}
    ungrouped: list[Task] = []
    for task in tasks:
        if task.user_story:
            grouped.setdefault(task.user_story, []).append(task)
        else:
            ungrouped.append(task)

    groups = [
        _make_group(story_id, titles.get(story_id) or f"User Story {story_id[2:]}", items)
        for story_id, items in grouped.items()
    ]
    if ungrouped:
        groups.append(_make_group(None, UNGROUPED_TITLE, ungrouped))
    return groups


def _make_group(story_id: str | None, title: str, tasks: list[Task]) -> TaskGroup:
    return TaskGroup(
        story_id=story_id,
        story_title=title,
        tasks=tasks,
        completed_count=sum(1 for task in tasks if task.completed),
        total_count=len(tasks),
    )
