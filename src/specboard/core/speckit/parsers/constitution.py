"""
Constitution parsing for spec-kit projects.

The constitution (usually .specify/memory/constitution.md) is split into
named sections at each level-2 heading. Principles are picked out of it:

- level-3 headings inside a section whose name mentions "Principle"
- any heading numbered with a roman or arabic numeral ("### I. Library-First")

Version metadata comes from YAML front matter when present, otherwise from
the template's footer line:

    **Version**: 2.1.1 | **Ratified**: 2025-06-13 | **Last Amended**: 2025-07-16
"""

import logging
import re
from typing import Any

import frontmatter  # type: ignore[import-untyped]
import yaml

from specboard.core.speckit.models import (
    Constitution,
    ConstitutionPrinciple,
    ConstitutionSection,
)
from specboard.core.speckit.parsers.markdown import parse_heading, split_lines, strip_emphasis

logger = logging.getLogger(__name__)

NUMBERED_HEADING_PATTERN = re.compile(r"^(?:[IVXLC]+|\d+)[.)]\s+(?P<name>.+)$")

_FIELD = r"(?:\*\*|__)?\s*:\s*(?:\*\*|__)?\s*(?P<value>[^|*\n]+)"
VERSION_PATTERN = re.compile(r"(?:\*\*|__)?Version" + _FIELD, re.IGNORECASE)
RATIFIED_PATTERN = re.compile(r"(?:\*\*|__)?Ratified(?:\s+Date)?" + _FIELD, re.IGNORECASE)
AMENDED_PATTERN = re.compile(r"(?:\*\*|__)?Last\s+Amended(?:\s+Date)?" + _FIELD, re.IGNORECASE)

FRONTMATTER_KEYS: dict[str, tuple[str, ...]] = {
    "version": ("version", "constitution_version"),
    "ratified_date": ("ratified", "ratified_date", "ratification_date"),
    "last_amended_date": ("last_amended", "last_amended_date", "amended"),
}


def _load_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """
    Split front matter from the body.

    A leading ``---`` block only counts as front matter when it parses to a
    non-empty mapping. Anything else (invalid YAML, or a horizontal rule
    around ordinary markdown) leaves the whole document as the body.
    """
    try:
        post = frontmatter.loads(content)
    except yaml.YAMLError as e:
        logger.warning(f"Invalid constitution front matter: {e}. Ignoring it.")
        return {}, content
    if not post.metadata:
        return {}, content
    return dict(post.metadata), post.content


def _metadata_value(metadata: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = metadata.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def _inline_value(pattern: re.Pattern[str], body: str) -> str | None:
    # The footer line comes last; prose mentions earlier in the file lose
    matches = list(pattern.finditer(body))
    if not matches:
        return None
    value = matches[-1].group("value").strip()
    return value or None


def _principle_name(heading_text: str) -> str:
    text = strip_emphasis(heading_text)
    numbered = NUMBERED_HEADING_PATTERN.match(text)
    return numbered.group("name").strip() if numbered else text


def _body_until(lines: list[str], start: int, level: int) -> str:
    """Join lines after ``start`` up to the next heading at ``level`` or above."""
    body: list[str] = []
    for line in lines[start + 1 :]:
        heading = parse_heading(line)
        if heading is not None and heading.level <= level:
            break
        body.append(line)
    return "\n".join(body).strip()


def parse_constitution(content: str) -> Constitution:
    """
    Parse constitution.md content.

    Args:
        content: Raw markdown, optionally with YAML front matter

    Returns:
        Constitution with sections, principles and whatever version
        metadata was found; never raises
    """
    metadata, body = _load_frontmatter(content)
    lines = split_lines(body)

    sections: list[ConstitutionSection] = []
    principles: list[ConstitutionPrinciple] = []
    current_section: str | None = None

    for index, line in enumerate(lines):
        heading = parse_heading(line)
        if heading is None:
            continue

        if heading.level == 2:
            current_section = strip_emphasis(heading.text)
            sections.append(
                ConstitutionSection(name=current_section, content=_body_until(lines, index, 2))
            )

        in_principles = (
            heading.level == 3
            and current_section is not None
            and "principle" in current_section.lower()
        )
        numbered = heading.level >= 2 and NUMBERED_HEADING_PATTERN.match(
            strip_emphasis(heading.text)
        )
        if in_principles or numbered:
            principles.append(
                ConstitutionPrinciple(
                    name=_principle_name(heading.text),
                    description=_body_until(lines, index, heading.level),
                )
            )

    constitution = Constitution(
        raw_content=content,
        principles=principles,
        sections=sections,
        version=_metadata_value(metadata, FRONTMATTER_KEYS["version"])
        or _inline_value(VERSION_PATTERN, body),
        ratified_date=_metadata_value(metadata, FRONTMATTER_KEYS["ratified_date"])
        or _inline_value(RATIFIED_PATTERN, body),
        last_amended_date=_metadata_value(metadata, FRONTMATTER_KEYS["last_amended_date"])
        or _inline_value(AMENDED_PATTERN, body),
    )
    logger.debug(
        f"Parsed constitution: {len(sections)} sections, {len(principles)} principles"
    )
    return constitution
