"""
Checkbox toggling for markdown checklist files.

Line-oriented mutation of ``- [ ]`` / ``- [x]`` / ``- [X]`` items. Only the
state character changes; indentation and trailing text are kept verbatim.
Content is split on ``\\n`` alone so ``\\r\\n`` files round-trip unchanged.

The only write path is toggle_checkbox_in_file(), which rewrites the whole
file. There is no locking: the last writer wins.
"""

import logging
import re
from pathlib import Path

from specboard.core.speckit.models import FileToggleResult, ToggleResult

logger = logging.getLogger(__name__)

# Groups: (1) prefix through "[", (2) state character, (3) "]" and the rest
CHECKBOX_PATTERN = re.compile(r"^(\s*-\s*\[)([ xX])(\]\s*.*)$")


def is_valid_checkbox_line(line: str) -> bool:
    """Return True if the line is a markdown checkbox item."""
    return CHECKBOX_PATTERN.match(line) is not None


def get_checkbox_state(line: str) -> bool | None:
    """
    Get the checked state of a checkbox line.

    Args:
        line: Line to inspect

    Returns:
        True if checked, False if unchecked, None if not a checkbox line
    """
    match = CHECKBOX_PATTERN.match(line)
    if not match:
        return None
    return match.group(2).lower() == "x"


def toggle_checkbox_line(line: str) -> str:
    """
    Flip the state of a checkbox line.

    Args:
        line: Line to toggle

    Returns:
        The toggled line, or the input unchanged if it is not a checkbox line
    """
    match = CHECKBOX_PATTERN.match(line)
    if not match:
        return line

    prefix, state, suffix = match.groups()
    new_state = " " if state.lower() == "x" else "x"
    return f"{prefix}{new_state}{suffix}"


def toggle_checkbox_in_content(content: str, line_index: int) -> ToggleResult:
    """
    Toggle the checkbox on one line of a document.

    Every other line is left byte-identical. Failures are returned as
    results, never raised.

    Args:
        content: Full file content
        line_index: 0-based index of the line to toggle

    Returns:
        ToggleResult with the new content and state on success, or the
        original content and an error message on failure

    Example:
        >>> result = toggle_checkbox_in_content("- [ ] one\\n- [x] two", 0)
        >>> result.content
        '- [x] one\\n- [x] two'
    """
    lines = content.split("\n")

    if line_index < 0 or line_index >= len(lines):
        return ToggleResult(
            success=False,
            content=content,
            new_state=None,
            error=f"Line index {line_index} is out of bounds (0-{len(lines) - 1})",
        )

    line = lines[line_index]
    if not is_valid_checkbox_line(line):
        return ToggleResult(
            success=False,
            content=content,
            new_state=None,
            error=f"Line {line_index} is not a valid checkbox line",
        )

    lines[line_index] = toggle_checkbox_line(line)
    return ToggleResult(
        success=True,
        content="\n".join(lines),
        new_state=get_checkbox_state(lines[line_index]),
    )


def toggle_checkbox_in_file(file_path: Path | str, line_index: int) -> FileToggleResult:
    """
    Toggle a checkbox in a file on disk and write the file back.

    Args:
        file_path: Path to a markdown checklist file
        line_index: 0-based line index to toggle

    Returns:
        FileToggleResult with the new state, or an error message
    """
    path = Path(file_path)
    try:
        # newline="" keeps \r\n intact
        with path.open(encoding="utf-8", newline="") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Cannot read checklist {path}: {e}")
        return FileToggleResult(success=False, error=f"Failed to read file: {e}")

    result = toggle_checkbox_in_content(content, line_index)
    if not result.success:
        return FileToggleResult(success=False, error=result.error)

    try:
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(result.content)
    except OSError as e:
        logger.error(f"Cannot write checklist {path}: {e}")
        return FileToggleResult(success=False, error=f"Failed to write file: {e}")

    logger.debug(f"Toggled {path}:{line_index} -> {result.new_state}")
    return FileToggleResult(success=True, new_state=result.new_state)
