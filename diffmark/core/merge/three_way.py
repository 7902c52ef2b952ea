"""
Three-way merge engine for text.

Implements the diff3 merge used to mark conflicts:
1. Synthesizes a common ancestor (base) when none is given
2. Computes diffs from base to left and base to right
3. Groups overlapping or touching changes into regions
4. Automatically merges changes made on one side only
5. Wraps regions where both sides changed differently in conflict markers
"""

from __future__ import annotations

from typing import Optional, Sequence

from diffmark.core.diff.line_diff import LineSequenceDiff, join_lines, split_lines
from diffmark.core.models import (
    DiffRegion,
    MergeConflict,
    MergeRegion,
    MergeRegionType,
    MergeResult,
)


CONFLICT_MARKER_LEFT = "<<<<<<<"
CONFLICT_MARKER_SEP = "======="
CONFLICT_MARKER_RIGHT = ">>>>>>>"

_LEFT = 0
_RIGHT = 1


class ThreeWayMerger:
    """
    Three-way merge engine.

    Uses the diff3 algorithm to merge two versions of a text that diverged
    from a common base. Conflict blocks look like::

        <<<<<<<
        ...left lines...
        =======
        ...right lines...
        >>>>>>>

    Use :meth:`with_labels` for ``<<<<<<< LEFT`` / ``>>>>>>> RIGHT`` style
    markers.
    """

    def __init__(
        self,
        conflict_marker_left: str = CONFLICT_MARKER_LEFT,
        conflict_marker_sep: str = CONFLICT_MARKER_SEP,
        conflict_marker_right: str = CONFLICT_MARKER_RIGHT,
        differ: Optional[LineSequenceDiff] = None
    ):
        self.conflict_marker_left = conflict_marker_left
        self.conflict_marker_sep = conflict_marker_sep
        self.conflict_marker_right = conflict_marker_right
        self.differ = differ or LineSequenceDiff()

    @classmethod
    def with_labels(
        cls,
        left_label: str = "LEFT",
        right_label: str = "RIGHT",
        differ: Optional[LineSequenceDiff] = None
    ) -> ThreeWayMerger:
        """Create a merger whose markers carry the given side labels."""
        return cls(
            conflict_marker_left=_labelled(CONFLICT_MARKER_LEFT, left_label),
            conflict_marker_sep=CONFLICT_MARKER_SEP,
            conflict_marker_right=_labelled(CONFLICT_MARKER_RIGHT, right_label),
            differ=differ
        )

    def find_common(self, input1: str, input2: str) -> list[str]:
        """
        Find the common lines of two texts, preserving order and duplicates.

        Args:
            input1: The first text
            input2: The second text

        Returns:
            Longest common subsequence of the lines, empty if either text is
        """
        if not input1 or not input2:
            return []

        return self.differ.common_subsequence(split_lines(input1), split_lines(input2))

    def merge(
        self,
        left: Optional[str],
        base: Optional[str],
        right: str
    ) -> MergeResult:
        """
        Merge three versions of a text.

        Args:
            left: Left version; when absent or empty the right is returned
            base: Common ancestor; synthesized with find_common when absent
            right: Right version (required)

        Returns:
            MergeResult with the merged content and conflict information

        Raises:
            ValueError: If right is None
        """
        if right is None:
            raise ValueError("Right content is required for a three-way merge")

        if not left:
            return MergeResult(content=right, has_conflicts=False)

        if base is None:
            base = join_lines(self.find_common(left, right))

        return self.merge_lines(split_lines(base), split_lines(left), split_lines(right))

    def merge_lines(
        self,
        base_lines: Sequence[str],
        left_lines: Sequence[str],
        right_lines: Sequence[str]
    ) -> MergeResult:
        """
        Perform three-way merge on line sequences.

        Args:
            base_lines: Common ancestor lines
            left_lines: Left version lines
            right_lines: Right version lines

        Returns:
            MergeResult with merged content and conflict information
        """
        base = list(base_lines)
        left = list(left_lines)
        right = list(right_lines)

        left_diffs = self.differ.diff_regions(base, left)
        right_diffs = self.differ.diff_regions(base, right)

        regions = self._merge_diff_regions(base, left, right, left_diffs, right_diffs)

        conflicts: list[MergeConflict] = []
        merged_lines: list[str] = []

        for region in regions:
            if region.is_conflict:
                conflicts.append(self._create_conflict(region, len(conflicts)))
                merged_lines.extend(self._conflict_block(region))
            else:
                merged_lines.extend(region.lines)

        return MergeResult(
            content=join_lines(merged_lines),
            has_conflicts=len(conflicts) > 0,
            conflicts=conflicts,
            regions=regions
        )

    def _merge_diff_regions(
        self,
        base: list[str],
        left: list[str],
        right: list[str],
        left_diffs: list[DiffRegion],
        right_diffs: list[DiffRegion]
    ) -> list[MergeRegion]:
        """
        Merge diff regions from both sides.

        Hunks are visited in base order (left before right on ties). A hunk
        that starts at or before the end of the current group joins it, so
        touching changes from both sides end up in one region.
        """
        hunks: list[tuple[DiffRegion, int]] = (
            [(diff, _LEFT) for diff in left_diffs] +
            [(diff, _RIGHT) for diff in right_diffs]
        )
        hunks.sort(key=lambda hunk: hunk[0].base_start)

        regions: list[MergeRegion] = []
        base_pos = 0
        # Index shift of each side relative to base outside changed regions
        left_offset = 0
        right_offset = 0

        i = 0
        while i < len(hunks):
            hunk_start = hunks[i][0].base_start
            hunk_end = hunks[i][0].base_end
            group = [hunks[i]]
            i += 1

            while i < len(hunks) and hunks[i][0].base_start <= hunk_end:
                hunk_end = max(hunk_end, hunks[i][0].base_end)
                group.append(hunks[i])
                i += 1

            if hunk_start > base_pos:
                regions.append(self._unchanged_region(
                    base, base_pos, hunk_start, left_offset, right_offset
                ))

            has_left = any(side == _LEFT for _, side in group)
            has_right = any(side == _RIGHT for _, side in group)
            left_delta = sum(diff.delta for diff, side in group if side == _LEFT)
            right_delta = sum(diff.delta for diff, side in group if side == _RIGHT)

            l_start = hunk_start + left_offset
            l_end = hunk_end + left_offset + left_delta
            r_start = hunk_start + right_offset
            r_end = hunk_end + right_offset + right_delta

            l_lines = left[l_start:l_end]
            r_lines = right[r_start:r_end]

            if has_left and not has_right:
                region_type = MergeRegionType.LEFT_CHANGED
                lines = l_lines
            elif has_right and not has_left:
                region_type = MergeRegionType.RIGHT_CHANGED
                lines = r_lines
            elif l_lines == r_lines:
                region_type = MergeRegionType.BOTH_CHANGED_SAME
                lines = l_lines
            else:
                region_type = MergeRegionType.CONFLICT
                lines = []

            regions.append(MergeRegion(
                region_type=region_type,
                base_start=hunk_start,
                base_end=hunk_end,
                left_start=l_start,
                left_end=l_end,
                right_start=r_start,
                right_end=r_end,
                lines=list(lines),
                base_lines=base[hunk_start:hunk_end],
                left_lines=l_lines,
                right_lines=r_lines
            ))

            left_offset += left_delta
            right_offset += right_delta
            base_pos = hunk_end

        if base_pos < len(base):
            regions.append(self._unchanged_region(
                base, base_pos, len(base), left_offset, right_offset
            ))

        return regions

    def _unchanged_region(
        self,
        base: list[str],
        start: int,
        end: int,
        left_offset: int,
        right_offset: int
    ) -> MergeRegion:
        return MergeRegion(
            region_type=MergeRegionType.UNCHANGED,
            base_start=start,
            base_end=end,
            left_start=start + left_offset,
            left_end=end + left_offset,
            right_start=start + right_offset,
            right_end=end + right_offset,
            lines=base[start:end]
        )

    def _create_conflict(self, region: MergeRegion, index: int) -> MergeConflict:
        """Create a MergeConflict from a conflict region."""
        return MergeConflict(
            conflict_id=index,
            base_start=region.base_start,
            base_end=region.base_end,
            left_start=region.left_start,
            left_end=region.left_end,
            right_start=region.right_start,
            right_end=region.right_end,
            base_lines=list(region.base_lines),
            left_lines=list(region.left_lines),
            right_lines=list(region.right_lines)
        )

    def _conflict_block(self, region: MergeRegion) -> list[str]:
        lines = [self.conflict_marker_left]
        lines.extend(region.left_lines)
        lines.append(self.conflict_marker_sep)
        lines.extend(region.right_lines)
        lines.append(self.conflict_marker_right)
        return lines


def _labelled(marker: str, label: str) -> str:
    return f"{marker} {label}" if label else marker
