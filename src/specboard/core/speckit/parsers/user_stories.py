"""
User story extraction from spec.md.

Recognizes story headings in both the short and the spec-kit template form:

    ### US1 - Login (P1)
    ### User Story 2 - Password reset (Priority: P2) 🎯 MVP

Everything up to the next heading of the same or higher level belongs to
the story. List items (bulleted or numbered) become acceptance criteria;
plain paragraphs become the description; bold ``**Label**:`` lines such as
"Why this priority" are skipped. Deeper sub-headings are ignored.
"""

import logging
import re

from specboard.core.speckit.models import Priority, UserStory
from specboard.core.speckit.parsers.markdown import (
    list_item_text,
    parse_heading,
    split_lines,
    strip_emphasis,
)

logger = logging.getLogger(__name__)

STORY_ID_PATTERN = re.compile(
    r"^(?:US\s*(?P<short>\d+)|User\s+Story\s+(?P<long>\d+))\b\s*[-–—:]?\s*(?P<rest>.*)$",
    re.IGNORECASE,
)
PAREN_PRIORITY_PATTERN = re.compile(r"\(\s*(?:Priority\s*:\s*)?(P[1-3])\s*\)", re.IGNORECASE)
LABELED_PRIORITY_PATTERN = re.compile(r"\bPriority\s*:\s*(P[1-3])\b", re.IGNORECASE)
LABEL_LINE_PATTERN = re.compile(r"^\s*(\*\*|__)[^*_]+?(?::\1|\1\s*:)")

MIN_STORY_LEVEL = 2
MAX_STORY_LEVEL = 4


def _parse_story_heading(text: str) -> tuple[str, str, Priority] | None:
    """Split a heading into (id, title, priority), or None if not a story."""
    match = STORY_ID_PATTERN.match(strip_emphasis(text))
    if not match:
        return None

    number = match.group("short") or match.group("long")
    rest = match.group("rest")
    priority = Priority.P3

    paren = PAREN_PRIORITY_PATTERN.search(rest)
    if paren:
        priority = Priority(paren.group(1).upper())
        title = rest[: paren.start()]
    else:
        labeled = LABELED_PRIORITY_PATTERN.search(rest)
        if labeled:
            priority = Priority(labeled.group(1).upper())
            title = rest[: labeled.start()]
        else:
            title = rest

    title = title.strip().rstrip("-–—:|,").strip()
    return f"US{int(number)}", title, priority


def parse_user_stories(content: str) -> list[UserStory]:
    """
    Extract user stories from spec.md content.

    Args:
        content: Raw markdown

    Returns:
        Stories in document order; empty if none are found

    Example:
        >>> stories = parse_user_stories("### US1 - Login (P1)\\n- works\\n- fails")
        >>> stories[0].acceptance_criteria
        ['works', 'fails']
    """
    stories: list[UserStory] = []
    lines = split_lines(content)

    index = 0
    while index < len(lines):
        heading = parse_heading(lines[index])
        parsed = None
        if heading is not None and MIN_STORY_LEVEL <= heading.level <= MAX_STORY_LEVEL:
            parsed = _parse_story_heading(heading.text)
        if heading is None or parsed is None:
            index += 1
            continue

        story_id, title, priority = parsed
        description_parts: list[str] = []
        criteria: list[str] = []
        last_was_item = False

        index += 1
        while index < len(lines):
            line = lines[index]
            inner = parse_heading(line)
            if inner is not None:
                if inner.level <= heading.level:
                    break
                last_was_item = False
                index += 1
                continue

            item = list_item_text(line)
            if item is not None:
                if item:
                    criteria.append(strip_emphasis(item))
                last_was_item = True
            elif not line.strip():
                last_was_item = False
            elif last_was_item and line[:1].isspace() and criteria:
                criteria[-1] = f"{criteria[-1]} {strip_emphasis(line.strip())}"
            elif LABEL_LINE_PATTERN.match(line):
                last_was_item = False
            else:
                description_parts.append(line.strip())
                last_was_item = False
            index += 1

        stories.append(
            UserStory(
                id=story_id,
                title=title,
                priority=priority,
                description=" ".join(description_parts),
                acceptance_criteria=criteria,
            )
        )

    logger.debug(f"Parsed {len(stories)} user stories")
    return stories
