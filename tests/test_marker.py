"""Tests for placeholder padding and conflict marking."""

import pytest

from diffmark.core.merge.marker import DiffMarker, is_replace_pair
from diffmark.core.merge.three_way import ThreeWayMerger
from diffmark.core.models import AlignmentPatch, EditOp, EditType


def placeholder(old_pos, new_pos):
    return EditOp(type=EditType.ADD, old_pos=old_pos, new_pos=new_pos, items=("",))


class TestIsReplacePair:
    """Tests for replace pair detection."""

    def test_remove_followed_by_anchored_add(self):
        script = [
            EditOp(EditType.REMOVE, 1, 1, ("b",)),
            EditOp(EditType.ADD, 2, 1, ("x",)),
        ]
        assert is_replace_pair(script, 0)
        assert not is_replace_pair(script, 1)

    def test_add_not_anchored_after_remove(self):
        script = [
            EditOp(EditType.REMOVE, 1, 1, ("b",)),
            EditOp(EditType.ADD, 3, 2, ("x",)),
        ]
        assert not is_replace_pair(script, 0)

    def test_add_first_is_not_a_pair(self):
        script = [
            EditOp(EditType.ADD, 0, 0, ("x",)),
            EditOp(EditType.REMOVE, 0, 1, ("a",)),
        ]
        assert not is_replace_pair(script, 0)


class TestPatchNewLines:
    """Tests for padding pure additions with placeholder lines."""

    def test_addition(self, marker):
        patch = marker.patch_new_lines("line1", "line1\nline2\nline3")
        assert patch == AlignmentPatch(steps=[placeholder(1, 1)], result="line1\n")

    def test_addition_from_empty(self, marker):
        """The empty text is one empty line, replaced rather than padded."""
        patch = marker.patch_new_lines("", "line1\nline2\nline3")
        assert patch == AlignmentPatch(steps=[], result="")

    def test_addition_from_whitespace_line(self, marker):
        patch = marker.patch_new_lines("   ", "line1\nline2\nline3")
        assert patch == AlignmentPatch(steps=[], result="   ")

    def test_add_after_add(self, marker):
        """Each addition reserves one line, whatever its size."""
        original = "line1\nline2\nline3\nline4\nline5\nline6"
        modified = "line1\nline2\nline3\na\nb\nline4\nc\nline5\nline6"
        patch = marker.patch_new_lines(original, modified)
        assert patch.steps == [placeholder(3, 3), placeholder(4, 5)]
        assert patch.result == "line1\nline2\nline3\n\nline4\n\nline5\nline6"

    def test_replacement_with_trailing_addition(self, marker):
        original = "line1\nline2\nline3"
        modified = "line1\nline2 modified\nline3\nline4"
        patch = marker.patch_new_lines(original, modified)
        assert patch.steps == [placeholder(3, 3)]
        assert patch.result == "line1\nline2\nline3\n"

    def test_multiple_replacements_leave_text_untouched(self, marker):
        original = "line1\nline2\nline3\nline4\nline5\nline6"
        modified = "line1\na\nb\nline3\nc\nline6"
        patch = marker.patch_new_lines(original, modified)
        assert patch == AlignmentPatch(steps=[], result=original)

    def test_deletion(self, marker):
        patch = marker.patch_new_lines("line1\nline2\nline3", "line1\nline3")
        assert patch == AlignmentPatch(steps=[], result="line1\nline2\nline3")

    def test_delete_all(self, marker):
        patch = marker.patch_new_lines("line1\nline2\nline3", "")
        assert patch == AlignmentPatch(steps=[], result="line1\nline2\nline3")

    def test_deletion_and_addition(self, marker):
        patch = marker.patch_new_lines("line1\nline2\nline3\nline4", "line1\nline4\nline5")
        assert patch.steps == [placeholder(4, 4)]
        assert patch.result == "line1\nline2\nline3\nline4\n"

    def test_reordered_lines(self, marker):
        patch = marker.patch_new_lines("line1\nline2\nline3", "line3\nline1\nline2")
        assert patch.steps == [placeholder(0, 0)]
        assert patch.result == "\nline1\nline2\nline3"

    def test_leading_add(self, marker):
        patch = marker.patch_new_lines("b", "a\nb")
        assert patch.steps == [placeholder(0, 0)]
        assert patch.result == "\nb"

    def test_remove_after_add(self, marker):
        """A lone removal following an addition pads nothing itself."""
        patch = marker.patch_new_lines("a\nb\nc", "x\na\nc")
        assert patch.steps == [placeholder(0, 0)]
        assert patch.result == "\na\nb\nc"

    def test_add_after_remove_shifts_target_position(self, marker):
        """Removed lines stay in the padded text, so later adds move down."""
        patch = marker.patch_new_lines("a\nb\nc", "a\nc\nx\ny")
        assert patch.steps == [placeholder(3, 3)]
        assert patch.result == "a\nb\nc\n"

    def test_replace_after_remove(self, marker):
        patch = marker.patch_new_lines("a\nb\nc\nd", "a\nc\nx")
        assert patch == AlignmentPatch(steps=[], result="a\nb\nc\nd")

    def test_placeholder_count(self, marker):
        patch = marker.patch_new_lines("b\nd", "a\nb\nc\nd\ne")
        assert patch.placeholder_count == 3
        assert patch.result == "\nb\n\nd\n"


class TestMark:
    """Tests for marking differences between two texts."""

    def test_identical(self, marker):
        content = "line1\nline2\nline3"
        result = marker.mark(content, content)
        assert result.content == content
        assert not result.has_conflicts

    def test_simple_addition(self, marker):
        result = marker.mark("line1", "line1\nline2")
        assert result.has_conflicts
        assert result.content == "line1\n<<<<<<<\n\n=======\nline2\n>>>>>>>"

    def test_simple_deletion(self, marker):
        result = marker.mark("line1\nline2\nline3", "line1\nline3")
        assert result.has_conflicts
        assert result.content == "line1\n<<<<<<<\nline2\n=======\n\n>>>>>>>\nline3"

    def test_simple_modification(self, marker):
        result = marker.mark("line1\nline2\nline3", "line1\nline2 modified\nline3")
        assert result.has_conflicts
        assert result.content == (
            "line1\n<<<<<<<\nline2\n=======\nline2 modified\n>>>>>>>\nline3"
        )

    def test_empty_original(self, marker):
        result = marker.mark("", "line1\nline2")
        assert result.has_conflicts
        assert result.content == "<<<<<<<\n\n\n=======\nline1\nline2\n>>>>>>>"

    def test_empty_modified(self, marker):
        result = marker.mark("line1\nline2", "")
        assert result.has_conflicts
        assert result.content == "<<<<<<<\nline1\nline2\n=======\n\n\n>>>>>>>"

    def test_both_empty(self, marker):
        result = marker.mark("", "")
        assert result.content == "\n"
        assert not result.has_conflicts

    def test_reordered_lines(self, marker):
        result = marker.mark("line1\nline2\nline3", "line3\nline1\nline2")
        assert result.has_conflicts
        assert result.conflict_count == 2
        assert result.content == (
            "<<<<<<<\n\n=======\nline3\n>>>>>>>\n"
            "line1\nline2\n"
            "<<<<<<<\nline3\n=======\n\n>>>>>>>"
        )

    def test_duplicate_lines_addition(self, marker):
        result = marker.mark("line1\nline2\nline1", "line1\nline2\nline1\nline3")
        assert result.has_conflicts
        assert result.content == "line1\nline2\nline1\n<<<<<<<\n\n=======\nline3\n>>>>>>>"

    def test_left_side_is_original(self, marker):
        result = marker.mark("old", "new")
        conflict = result.get_conflict(0)
        assert conflict is not None
        assert conflict.left_lines == ["old"]
        assert conflict.right_lines == ["new"]

    def test_labelled_markers(self):
        marker = DiffMarker(ThreeWayMerger.with_labels("ORIGINAL", "MODIFIED"))
        result = marker.mark("a\nb", "a\nc")
        assert result.content == "a\n<<<<<<< ORIGINAL\nb\n=======\nc\n>>>>>>> MODIFIED"

    @pytest.mark.parametrize("text", ["x", "a\nb\n", "\n\n", "  indented\n\tline"])
    def test_mark_same_text_is_identity(self, marker, text):
        result = marker.mark(text, text)
        assert result.content == text
        assert not result.has_conflicts
