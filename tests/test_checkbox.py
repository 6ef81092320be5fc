"""
Tests for markdown checkbox toggling.

Tests validate:
- Line recognition and state detection
- Toggling a single line, in content, and in a file
- Out-of-bounds and non-checkbox errors
- Byte-identical preservation of untouched lines
"""

from specboard.core.speckit.checkbox import (
    get_checkbox_state,
    is_valid_checkbox_line,
    toggle_checkbox_in_content,
    toggle_checkbox_in_file,
    toggle_checkbox_line,
)


class TestCheckboxLines:
    """Tests for single-line helpers."""

    def test_recognizes_checkbox_variants(self):
        """Test unchecked, checked and upper-case checked lines are valid."""
        assert is_valid_checkbox_line("- [ ] todo")
        assert is_valid_checkbox_line("- [x] done")
        assert is_valid_checkbox_line("  - [X] nested")
        assert is_valid_checkbox_line("-[ ]tight")

    def test_rejects_non_checkbox_lines(self):
        """Test plain text, bullets and other markers are not checkboxes."""
        assert not is_valid_checkbox_line("plain text")
        assert not is_valid_checkbox_line("- item")
        assert not is_valid_checkbox_line("* [ ] star bullet")
        assert not is_valid_checkbox_line("- [~] partial")

    def test_get_state(self):
        """Test state detection for each form."""
        assert get_checkbox_state("- [ ] a") is False
        assert get_checkbox_state("- [x] a") is True
        assert get_checkbox_state("- [X] a") is True
        assert get_checkbox_state("not a checkbox") is None

    def test_toggle_line_preserves_text(self):
        """Test toggling changes only the state character."""
        assert toggle_checkbox_line("  - [ ] keep  spacing ") == "  - [x] keep  spacing "
        assert toggle_checkbox_line("- [X] Done") == "- [ ] Done"

    def test_toggle_non_checkbox_is_identity(self):
        """Test a non-checkbox line comes back unchanged."""
        assert toggle_checkbox_line("# Heading") == "# Heading"


class TestToggleInContent:
    """Tests for toggle_checkbox_in_content()."""

    def test_worked_example(self):
        """Test toggling line 1 of a three-line document."""
        content = "# Checklist\n- [ ] Item 1\n- [x] Item 2"

        result = toggle_checkbox_in_content(content, 1)

        assert result.success is True
        assert result.content == "# Checklist\n- [x] Item 1\n- [x] Item 2"
        assert result.new_state is True
        assert result.error is None

    def test_uncheck(self):
        """Test toggling a checked item unchecks it."""
        result = toggle_checkbox_in_content("- [x] Item", 0)
        assert result.content == "- [ ] Item"
        assert result.new_state is False

    def test_out_of_bounds(self):
        """Test an index past the end returns an error and the original content."""
        content = "# Checklist\n- [ ] Item 1\n- [x] Item 2"

        result = toggle_checkbox_in_content(content, 10)

        assert result.success is False
        assert result.content == content
        assert result.new_state is None
        assert result.error == "Line index 10 is out of bounds (0-2)"

    def test_negative_index(self):
        """Test a negative index is out of bounds."""
        result = toggle_checkbox_in_content("- [ ] a", -1)
        assert result.success is False
        assert "out of bounds" in result.error

    def test_not_a_checkbox(self):
        """Test toggling a heading line fails with a clear message."""
        result = toggle_checkbox_in_content("# Checklist\n- [ ] Item", 0)
        assert result.success is False
        assert result.error == "Line 0 is not a valid checkbox line"

    def test_double_toggle_restores_content(self):
        """Test toggling the same line twice restores the original bytes."""
        content = "intro\n  - [ ] nested item\r\ntrailer"
        once = toggle_checkbox_in_content(content, 1)
        twice = toggle_checkbox_in_content(once.content, 1)
        assert twice.content == content

    def test_crlf_preserved(self):
        """Test \\r\\n line endings survive a toggle."""
        content = "- [ ] a\r\n- [ ] b\r\n"
        result = toggle_checkbox_in_content(content, 1)
        assert result.content == "- [ ] a\r\n- [x] b\r\n"


class TestToggleInFile:
    """Tests for toggle_checkbox_in_file()."""

    def test_toggles_and_writes(self, tmp_path):
        """Test the file on disk is rewritten with the toggled line."""
        path = tmp_path / "checklist.md"
        path.write_text("# Review\n- [ ] Spec reviewed\n- [x] Plan reviewed\n")

        result = toggle_checkbox_in_file(path, 1)

        assert result.success is True
        assert result.new_state is True
        assert path.read_text() == "# Review\n- [x] Spec reviewed\n- [x] Plan reviewed\n"

    def test_crlf_file_round_trips(self, tmp_path):
        """Test Windows line endings are written back unchanged."""
        path = tmp_path / "checklist.md"
        path.write_bytes(b"- [ ] a\r\n- [ ] b\r\n")

        toggle_checkbox_in_file(path, 0)

        assert path.read_bytes() == b"- [x] a\r\n- [ ] b\r\n"

    def test_missing_file(self, tmp_path):
        """Test a missing file yields a read error result."""
        result = toggle_checkbox_in_file(tmp_path / "missing.md", 0)
        assert result.success is False
        assert result.error.startswith("Failed to read file")

    def test_invalid_line_leaves_file_untouched(self, tmp_path):
        """Test a failed toggle does not rewrite the file."""
        path = tmp_path / "checklist.md"
        path.write_text("# Title\n")

        result = toggle_checkbox_in_file(path, 0)

        assert result.success is False
        assert path.read_text() == "# Title\n"
