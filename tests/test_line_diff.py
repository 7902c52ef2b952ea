"""Tests for the line sequence diff engine."""

import pytest

from diffmark.core.diff.line_diff import LineSequenceDiff, join_lines, split_lines
from diffmark.core.models import EditOp, EditType


def add(old_pos, new_pos, *items):
    return EditOp(type=EditType.ADD, old_pos=old_pos, new_pos=new_pos, items=tuple(items))


def remove(old_pos, new_pos, *items):
    return EditOp(type=EditType.REMOVE, old_pos=old_pos, new_pos=new_pos, items=tuple(items))


class TestSplitLines:
    """Tests for splitting text into lines."""

    def test_keeps_empty_lines(self):
        """Blank lines are never collapsed."""
        assert split_lines("a\n\nb") == ["a", "", "b"]

    def test_trailing_newline(self):
        """A trailing newline yields a trailing empty line."""
        assert split_lines("a\n") == ["a", ""]

    def test_empty_text_is_one_empty_line(self):
        assert split_lines("") == [""]

    def test_carriage_return_is_content(self):
        """Only \\n separates lines."""
        assert split_lines("a\r\nb") == ["a\r", "b"]

    def test_join_inverts_split(self):
        text = "line1\n\nline3\n"
        assert join_lines(split_lines(text)) == text


class TestCommonSubsequence:
    """Tests for longest common subsequence extraction."""

    def test_empty_inputs(self, differ):
        assert differ.common_subsequence([], []) == []
        assert differ.common_subsequence(["a"], []) == []
        assert differ.common_subsequence([], ["a"]) == []

    def test_partial_overlap(self, differ):
        a = ["line1", "line2", "line3", "line4"]
        b = ["line2", "line3", "line5", "line6"]
        assert differ.common_subsequence(a, b) == ["line2", "line3"]

    def test_disjoint(self, differ):
        assert differ.common_subsequence(["a", "b"], ["c", "d"]) == []

    def test_identical(self, differ):
        lines = ["line1", "line2", "line3"]
        assert differ.common_subsequence(lines, list(lines)) == lines

    def test_duplicates_preserved(self, differ):
        """Not a set intersection: duplicates count as often as matched."""
        a = ["x", "y", "x", "x"]
        b = ["x", "x", "y", "x"]
        assert differ.common_subsequence(a, b) == ["x", "y", "x"]

    def test_reversed_lines_prefers_earliest_deletion(self, differ):
        """
        Of the equally long candidates the deletion-first path wins.

        This gives ["line4"]; a dynamic-programming LCS table walk would
        return ["line2"] for the same input.
        """
        a = ["line1", "line2", "line3", "line4"]
        b = ["line4", "line3", "line2", "line1"]
        assert differ.common_subsequence(a, b) == ["line4"]

    def test_matches_are_ascending_pairs(self, differ):
        a = ["a", "b", "c", "d"]
        b = ["b", "x", "d"]
        assert differ.matches(a, b) == [(1, 0), (3, 2)]


class TestDiff:
    """Tests for edit script computation."""

    def test_identical_has_no_edits(self, differ):
        assert differ.diff(["a", "b"], ["a", "b"]) == []

    def test_modification_is_remove_then_add(self, differ):
        script = differ.diff(["a", "b", "c"], ["a", "x", "c"])
        assert script == [remove(1, 1, "b"), add(2, 1, "x")]

    def test_pure_addition(self, differ):
        script = differ.diff(["a", "c"], ["a", "b", "c"])
        assert script == [add(1, 1, "b")]

    def test_pure_deletion(self, differ):
        script = differ.diff(["a", "b", "c"], ["a", "c"])
        assert script == [remove(1, 1, "b")]

    def test_from_empty_sequence(self, differ):
        assert differ.diff([], ["a", "b"]) == [add(0, 0, "a", "b")]

    def test_to_empty_sequence(self, differ):
        assert differ.diff(["a", "b"], []) == [remove(0, 0, "a", "b")]

    def test_region_groups_deletions_before_insertions(self, differ):
        """A change region yields at most one remove followed by one add."""
        script = differ.diff(["a", "b", "c", "d"], ["a", "x", "y", "d"])
        assert [op.type for op in script] == [EditType.REMOVE, EditType.ADD]
        assert script[0].items == ("b", "c")
        assert script[1].items == ("x", "y")
        assert script[1].old_pos == script[0].old_pos + script[0].count

    def test_to_dict(self):
        assert add(1, 2, "x").to_dict() == {
            'type': 'add', 'old_pos': 1, 'new_pos': 2, 'items': ['x']
        }


class TestApplyPatch:
    """Tests for applying edit scripts."""

    def test_diff_then_apply_reproduces_target(self, differ):
        source = ["a", "b", "c", "d", "e"]
        target = ["x", "a", "c", "d", "y", "z"]
        assert differ.apply_patch(source, differ.diff(source, target)) == target

    def test_placement_uses_old_pos_only(self, differ):
        """new_pos is ignored when applying."""
        result = differ.apply_patch(["a", "b"], [add(1, 99, "")])
        assert result == ["a", "", "b"]

    def test_add_at_end(self, differ):
        assert differ.apply_patch(["a"], [add(1, 1, "")]) == ["a", ""]

    def test_out_of_order_script_raises(self, differ):
        with pytest.raises(ValueError):
            differ.apply_patch(["a", "b", "c"], [remove(1, 1, "b"), add(0, 0, "x")])


class TestDiffRegions:
    """Tests for the base-relative region view."""

    def test_regions(self, differ):
        regions = differ.diff_regions(["a", "b", "c"], ["a", "x", "y", "c", "d"])
        assert len(regions) == 2

        first, second = regions
        assert (first.base_start, first.base_end) == (1, 2)
        assert first.other_lines == ["x", "y"]
        assert first.is_modification
        assert first.delta == 1

        assert (second.base_start, second.base_end) == (3, 3)
        assert second.is_addition
        assert second.other_lines == ["d"]
