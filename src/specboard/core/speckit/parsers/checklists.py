"""Checklist item counting for quality-gate checklist files."""

from specboard.core.speckit.checkbox import get_checkbox_state
from specboard.core.speckit.parsers.markdown import split_lines


def count_checklist_items(content: str) -> tuple[int, int]:
    """
    Count checkbox items in a checklist file.

    Args:
        content: Raw markdown

    Returns:
        Tuple of (total items, checked items)
    """
    total = 0
    completed = 0
    for line in split_lines(content):
        state = get_checkbox_state(line)
        if state is None:
            continue
        total += 1
        if state:
            completed += 1
    return total, completed
