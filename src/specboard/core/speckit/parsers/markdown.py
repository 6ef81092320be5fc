"""
Line-level markdown helpers shared by the section extractors.

These are deliberately small: each extractor owns its own line patterns and
only borrows heading/list/emphasis handling from here.
"""

import re
from dataclasses import dataclass

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)\s*#*\s*$")
LIST_ITEM_PATTERN = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(.*)$")
EMPHASIS_PATTERN = re.compile(r"(?<!\w)(\*\*|__|\*|_)(?=\S)(.+?)(?<=\S)\1(?!\w)")


@dataclass(frozen=True)
class Heading:
    """A markdown ATX heading."""

    level: int
    text: str


def split_lines(text: str) -> list[str]:
    """Split text into lines, dropping carriage returns."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def parse_heading(line: str) -> Heading | None:
    """Return the heading on this line, or None."""
    match = HEADING_PATTERN.match(line)
    if not match:
        return None
    return Heading(level=len(match.group(1)), text=match.group(2).strip())


def list_item_text(line: str) -> str | None:
    """Return the text of a bullet or numbered list item, or None."""
    match = LIST_ITEM_PATTERN.match(line)
    if not match:
        return None
    return match.group(1).strip()


def strip_emphasis(text: str) -> str:
    """Remove bold/italic markers, keeping the inner text."""
    previous = None
    while previous != text:
        previous = text
        text = EMPHASIS_PATTERN.sub(r"\2", text)
    return text.strip()


def section_lines(lines: list[str], title: str) -> list[str] | None:
    """
    Return the body of the first heading whose text contains ``title``.

    The body runs until the next heading of the same or higher level.
    Matching is case-insensitive.

    Args:
        lines: Document lines
        title: Heading text to look for

    Returns:
        Lines of the section body, or None if no such heading exists
    """
    needle = title.lower()
    for index, line in enumerate(lines):
        heading = parse_heading(line)
        if heading is None or needle not in heading.text.lower():
            continue

        body: list[str] = []
        for following in lines[index + 1 :]:
            next_heading = parse_heading(following)
            if next_heading is not None and next_heading.level <= heading.level:
                break
            body.append(following)
        return body
    return None
