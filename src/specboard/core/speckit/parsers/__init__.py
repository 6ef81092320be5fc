"""
Section extractors for spec-kit markdown documents.

Each extractor is a pure function from raw text to a typed structure and
degrades to an empty result instead of raising:
- parse_user_stories: User stories from spec.md
- parse_clarifications: Clarification sessions from spec.md
- parse_technical_context: Technical Context block from plan.md
- parse_tasks / build_task_groups: Task list and groupings from tasks.md
- parse_constitution: Principles and sections from constitution.md
- count_checklist_items: Checkbox counts from checklist files
"""

from specboard.core.speckit.parsers.checklists import count_checklist_items
from specboard.core.speckit.parsers.clarifications import parse_clarifications
from specboard.core.speckit.parsers.constitution import parse_constitution
from specboard.core.speckit.parsers.tasks import (
    ParsedTasks,
    build_task_groups,
    parse_task_line,
    parse_tasks,
)
from specboard.core.speckit.parsers.technical_context import parse_technical_context
from specboard.core.speckit.parsers.user_stories import parse_user_stories

__all__ = [
    "ParsedTasks",
    "build_task_groups",
    "count_checklist_items",
    "parse_clarifications",
    "parse_constitution",
    "parse_task_line",
    "parse_tasks",
    "parse_technical_context",
    "parse_user_stories",
]
