"""
Technical Context extraction from plan.md.

The spec-kit plan template has a block like:

    ## Technical Context
    **Language/Version**: Python 3.11
    **Primary Dependencies**: FastAPI, pydantic
    **Storage**: PostgreSQL
    **Testing**: pytest
    **Target Platform**: Linux server

Labels are matched by keyword, so "Language/Version" and "Language" both
fill ``language``. A value may sit on the label line or on the next
non-empty line. Missing fields stay empty strings.
"""

import logging
import re

from specboard.core.speckit.models import TechnicalContext
from specboard.core.speckit.parsers.markdown import (
    list_item_text,
    parse_heading,
    section_lines,
    split_lines,
    strip_emphasis,
)

logger = logging.getLogger(__name__)

LABEL_PATTERN = re.compile(
    r"^\s*(?:[-*+]\s+)?(?:\*\*|__)?(?P<label>[A-Za-z][^:*_]*?)\s*"
    r"(?::\s*(?:\*\*|__)|(?:\*\*|__)?\s*:)\s*(?P<value>.*)$"
)

# Field name -> keywords that identify its label (checked in order)
FIELD_KEYWORDS: dict[str, tuple[str, ...]] = {
    "language": ("language",),
    "dependencies": ("dependenc",),
    "storage": ("storage", "database"),
    "testing": ("testing", "test framework", "tests"),
    "platform": ("platform",),
}

SECTION_TITLE = "technical context"


def _field_for_label(label: str) -> str | None:
    lowered = label.lower()
    for field_name, keywords in FIELD_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return field_name
    return None


def split_dependencies(value: str) -> list[str]:
    """
    Split a dependency list on commas/semicolons outside parentheses.

    Example:
        >>> split_dependencies("FastAPI (async, web), pydantic; rich")
        ['FastAPI (async, web)', 'pydantic', 'rich']
    """
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in value:
        if char in "([":
            depth += 1
        elif char in ")]" and depth:
            depth -= 1
        if char in ",;" and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return [strip_emphasis(part) for part in parts if part.strip()]


def _next_value(lines: list[str], start: int) -> str:
    """Return the first non-empty line after ``start`` if it is a plain value."""
    for line in lines[start + 1 :]:
        if not line.strip():
            continue
        if parse_heading(line) is not None or LABEL_PATTERN.match(line):
            return ""
        item = list_item_text(line)
        return strip_emphasis(item if item is not None else line.strip())
    return ""


def parse_technical_context(content: str) -> TechnicalContext | None:
    """
    Extract the Technical Context block from plan.md content.

    Args:
        content: Raw markdown of plan.md

    Returns:
        TechnicalContext, or None if the document has neither a Technical
        Context section nor any recognized label
    """
    all_lines = split_lines(content)
    section = section_lines(all_lines, SECTION_TITLE)
    lines = section if section is not None else all_lines

    values: dict[str, str] = {}
    for index, line in enumerate(lines):
        if parse_heading(line) is not None:
            continue
        match = LABEL_PATTERN.match(line)
        if not match:
            continue
        field_name = _field_for_label(match.group("label"))
        if field_name is None or field_name in values:
            continue
        value = strip_emphasis(match.group("value").strip())
        if not value:
            value = _next_value(lines, index)
        values[field_name] = value

    if section is None and not values:
        return None

    return TechnicalContext(
        language=values.get("language", ""),
        dependencies=split_dependencies(values.get("dependencies", "")),
        storage=values.get("storage", ""),
        testing=values.get("testing", ""),
        platform=values.get("platform", ""),
    )
