"""
Clarification history extraction from spec.md.

/speckit.clarify records answers under a Clarifications section:

    ## Clarifications

    ### Session 2025-01-15
    - Q: Which auth provider? → A: OAuth via GitHub
    - Q: Session length? → A: 24 hours

Q/A pairs also appear split across two lines (``Q:`` then ``A:``), with or
without bold markers. Pairs attach to the nearest preceding dated heading;
pairs before any date go into an undated session (date ``""``).
"""

import logging
import re

from specboard.core.speckit.models import Clarification, ClarificationSession
from specboard.core.speckit.parsers.markdown import parse_heading, section_lines, split_lines

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")
SESSION_LINE_PATTERN = re.compile(r"^\s*(?:\*\*|__)?Session\s+(\d{4}-\d{2}-\d{2})", re.IGNORECASE)

_BOLD = r"(?:\*\*|__)?"
_PREFIX = r"^\s*(?:[-*+]\s+|\d+[.)]\s+)?"


def _marker(letter: str, word: str) -> str:
    return rf"{_BOLD}(?:{letter}|{word})\s*(?::\s*{_BOLD}|{_BOLD}\s*:)\s*"


QA_INLINE_PATTERN = re.compile(
    _PREFIX
    + _marker("Q", "Question")
    + r"(?P<question>.+?)\s*(?:→|->|=>)\s*(?:"
    + _marker("A", "Answer")
    + r")?(?P<answer>.*)$"
)
QUESTION_PATTERN = re.compile(_PREFIX + _marker("Q", "Question") + r"(?P<question>.+)$")
ANSWER_PATTERN = re.compile(_PREFIX + _marker("A", "Answer") + r"(?P<answer>.*)$")

SECTION_TITLE = "clarifications"


def _session_date(line: str) -> str | None:
    """Return the date if this line opens a session, else None."""
    heading = parse_heading(line)
    if heading is not None:
        match = DATE_PATTERN.search(heading.text)
        return match.group(1) if match else None
    match = SESSION_LINE_PATTERN.match(line)
    return match.group(1) if match else None


def parse_clarifications(content: str) -> list[ClarificationSession]:
    """
    Extract clarification sessions from spec.md content.

    Args:
        content: Raw markdown of spec.md

    Returns:
        Non-empty sessions in document order
    """
    all_lines = split_lines(content)
    section = section_lines(all_lines, SECTION_TITLE)
    lines = section if section is not None else all_lines

    sessions: list[ClarificationSession] = []
    current: ClarificationSession | None = None
    pending_question: str | None = None

    def add_pair(question: str, answer: str) -> None:
        nonlocal current
        if current is None:
            current = ClarificationSession(date="")
            sessions.append(current)
        current.clarifications.append(
            Clarification(question=question.strip(), answer=answer.strip())
        )

    for line in lines:
        date = _session_date(line)
        if date is not None:
            if pending_question is not None:
                add_pair(pending_question, "")
                pending_question = None
            current = ClarificationSession(date=date)
            sessions.append(current)
            continue

        inline = QA_INLINE_PATTERN.match(line)
        if inline:
            if pending_question is not None:
                add_pair(pending_question, "")
            pending_question = None
            add_pair(inline.group("question"), inline.group("answer"))
            continue

        question = QUESTION_PATTERN.match(line)
        if question:
            if pending_question is not None:
                add_pair(pending_question, "")
            pending_question = question.group("question")
            continue

        answer = ANSWER_PATTERN.match(line)
        if answer and pending_question is not None:
            add_pair(pending_question, answer.group("answer"))
            pending_question = None

    if pending_question is not None:
        add_pair(pending_question, "")

    result = [session for session in sessions if session.clarifications]
    logger.debug(f"Parsed {len(result)} clarification sessions")
    return result
