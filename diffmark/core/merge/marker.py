"""
Conflict marking of two versions of a text.

Turns an original and a modified rendering of the same document into one
text with conflict blocks wherever they disagree:
1. The common ancestor is synthesized from the two inputs (their LCS)
2. Both inputs are padded with blank placeholder lines so that pure
   additions on one side keep the other side aligned
3. The padded texts are merged three-way against the synthesized base
"""

from __future__ import annotations

from typing import Optional, Sequence

from diffmark.core.diff.line_diff import LineSequenceDiff, join_lines, split_lines
from diffmark.core.merge.three_way import ThreeWayMerger
from diffmark.core.models import AlignmentPatch, EditOp, EditType, MergeResult


PLACEHOLDER_LINE = ""


def is_replace_pair(script: Sequence[EditOp], index: int) -> bool:
    """
    Check whether ``script[index]`` and the next operation form a replace.

    A replace is a REMOVE immediately followed by an ADD anchored right
    after the removed lines.
    """
    if index + 1 >= len(script):
        return False

    current = script[index]
    following = script[index + 1]
    return (
        current.is_remove and
        following.is_add and
        current.old_pos + current.count == following.old_pos
    )


class DiffMarker:
    """Marks the differences between two texts with conflict markers."""

    def __init__(
        self,
        merger: Optional[ThreeWayMerger] = None,
        differ: Optional[LineSequenceDiff] = None
    ):
        self.merger = merger or ThreeWayMerger()
        self.differ = differ or self.merger.differ

    def patch_new_lines(self, original: str, modified: str) -> AlignmentPatch:
        """
        Pad original with a blank line wherever modified adds lines.

        Every pure addition reserves exactly one placeholder line, whatever
        its size. Lines that replace removed lines, and plain removals, are
        not padded.

        Args:
            original: Text to pad
            modified: Text to align against

        Returns:
            AlignmentPatch with the synthesized adds and the padded text
        """
        original_lines = split_lines(original)
        steps = self.differ.diff(original_lines, split_lines(modified))

        new_steps: list[EditOp] = []
        # Shift from target positions to positions in the padded original
        offset = 0
        index = 0

        while index < len(steps):
            step = steps[index]

            if step.is_add:
                new_steps.append(EditOp(
                    type=EditType.ADD,
                    old_pos=step.old_pos,
                    new_pos=step.new_pos + offset,
                    items=(PLACEHOLDER_LINE,)
                ))
                offset -= step.count - 1
            elif is_replace_pair(steps, index):
                added = steps[index + 1]
                offset -= added.count - step.count
                index += 1
            else:
                offset += step.count

            index += 1

        result = self.differ.apply_patch(original_lines, new_steps)

        return AlignmentPatch(steps=new_steps, result=join_lines(result))

    def mark(self, original: str, modified: str) -> MergeResult:
        """
        Merge original and modified into one text with conflict blocks.

        The left side of each block holds the original lines and the right
        side the modified lines.
        """
        common = join_lines(self.merger.find_common(original, modified))

        patched_original = _normalized(self.patch_new_lines(original, modified).result)
        patched_modified = _normalized(
            self.patch_new_lines(modified, patched_original).result
        )

        return self.merger.merge(patched_original, common, patched_modified)


def _normalized(text: str) -> str:
    # An empty side still has to take part in the merge
    if text == "":
        return "\n"
    return text
