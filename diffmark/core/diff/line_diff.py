"""
Line sequence diff engine.

Provides the diff primitives the merge layer is built on:
- Myers O(ND) shortest edit script between two line sequences
- Longest common subsequence extraction (order and duplicate preserving)
- Edit scripts grouped into add/remove operations
- Patch application
- Change regions for three-way merging
"""

from __future__ import annotations

from typing import Iterator, Sequence

from diffmark.core.models import DiffRegion, EditOp, EditType


LINE_SEPARATOR = "\n"


def split_lines(text: str) -> list[str]:
    """
    Split text into lines on ``\\n``.

    Empty lines are kept, a trailing newline yields a trailing empty line
    and the empty string is a single empty line.
    """
    return text.split(LINE_SEPARATOR)


def join_lines(lines: Sequence[str]) -> str:
    """Join lines back into text."""
    return LINE_SEPARATOR.join(lines)


class LineSequenceDiff:
    """
    Diff engine for ordered line sequences.

    Lines are compared by exact equality. When several shortest edit
    scripts exist, the path that deletes from the source first is taken,
    so within a change region removals always precede additions.
    """

    @classmethod
    def matches(
        cls,
        a: Sequence[str],
        b: Sequence[str]
    ) -> list[tuple[int, int]]:
        """
        Compute the aligned index pairs of a longest common subsequence.

        Args:
            a: Source lines
            b: Target lines

        Returns:
            Ascending list of ``(index_in_a, index_in_b)`` pairs
        """
        pairs = [
            (prev_x, prev_y)
            for prev_x, prev_y, x, y in cls._backtrack(a, b)
            if x != prev_x and y != prev_y
        ]
        pairs.reverse()
        return pairs

    @classmethod
    def common_subsequence(
        cls,
        a: Sequence[str],
        b: Sequence[str]
    ) -> list[str]:
        """
        Longest order-preserving common subsequence of two sequences.

        Duplicates are kept as often as the alignment matches them, so this
        is not a set intersection.
        """
        if not a or not b:
            return []
        return [a[i] for i, _ in cls.matches(a, b)]

    @classmethod
    def diff(
        cls,
        source: Sequence[str],
        target: Sequence[str]
    ) -> list[EditOp]:
        """
        Compute the edit script transforming source into target.

        Each change region (maximal run between two matched lines) yields
        at most one REMOVE followed by at most one ADD. The ADD is anchored
        in the source right after the removed lines.

        Args:
            source: Original lines
            target: New lines

        Returns:
            Edit script in ascending position order
        """
        script: list[EditOp] = []

        for old_start, old_end, new_start, new_end in cls._change_regions(source, target):
            if old_end > old_start:
                script.append(EditOp(
                    type=EditType.REMOVE,
                    old_pos=old_start,
                    new_pos=new_start,
                    items=tuple(source[old_start:old_end])
                ))
            if new_end > new_start:
                script.append(EditOp(
                    type=EditType.ADD,
                    old_pos=old_end,
                    new_pos=new_start,
                    items=tuple(target[new_start:new_end])
                ))

        return script

    @classmethod
    def diff_regions(
        cls,
        base: Sequence[str],
        other: Sequence[str]
    ) -> list[DiffRegion]:
        """Compute the change regions between base and other."""
        return [
            DiffRegion(
                base_start=old_start,
                base_end=old_end,
                other_start=new_start,
                other_end=new_end,
                base_lines=list(base[old_start:old_end]),
                other_lines=list(other[new_start:new_end])
            )
            for old_start, old_end, new_start, new_end in cls._change_regions(base, other)
        ]

    @staticmethod
    def apply_patch(source: Sequence[str], script: Sequence[EditOp]) -> list[str]:
        """
        Apply an edit script to source lines.

        Operations are placed by ``old_pos`` only: a REMOVE skips its lines,
        an ADD inserts its items at its anchor.

        Raises:
            ValueError: If the script is not in ascending order
        """
        result: list[str] = []
        cursor = 0

        for op in script:
            if op.old_pos < cursor:
                raise ValueError(
                    f"Edit script out of order at position {op.old_pos} (cursor {cursor})"
                )
            result.extend(source[cursor:op.old_pos])

            if op.is_add:
                result.extend(op.items)
                cursor = op.old_pos
            else:
                cursor = op.old_pos + op.count

        result.extend(source[cursor:])
        return result

    @classmethod
    def _change_regions(
        cls,
        a: Sequence[str],
        b: Sequence[str]
    ) -> Iterator[tuple[int, int, int, int]]:
        """Yield ``(a_start, a_end, b_start, b_end)`` for every unmatched run."""
        a_start = b_start = 0

        for i, j in cls.matches(a, b) + [(len(a), len(b))]:
            if i > a_start or j > b_start:
                yield a_start, i, b_start, j
            a_start, b_start = i + 1, j + 1

    @staticmethod
    def _shortest_edit(a: Sequence[str], b: Sequence[str]) -> list[dict[int, int]]:
        """
        Forward greedy pass of the Myers algorithm.

        Returns the furthest reaching x per diagonal, recorded before each
        edit distance step, for backtracking.
        """
        n, m = len(a), len(b)
        v: dict[int, int] = {1: 0}
        trace: list[dict[int, int]] = []

        for d in range(n + m + 1):
            trace.append(v.copy())

            for k in range(-d, d + 1, 2):
                if k == -d or (k != d and v[k - 1] < v[k + 1]):
                    x = v[k + 1]
                else:
                    x = v[k - 1] + 1

                y = x - k

                while x < n and y < m and a[x] == b[y]:
                    x += 1
                    y += 1

                v[k] = x

                if x >= n and y >= m:
                    return trace

        return trace

    @classmethod
    def _backtrack(
        cls,
        a: Sequence[str],
        b: Sequence[str]
    ) -> Iterator[tuple[int, int, int, int]]:
        """Walk the shortest edit path from the end, one move at a time."""
        trace = cls._shortest_edit(a, b)
        x, y = len(a), len(b)

        for d in range(len(trace) - 1, -1, -1):
            v = trace[d]
            k = x - y

            if k == -d or (k != d and v[k - 1] < v[k + 1]):
                prev_k = k + 1
            else:
                prev_k = k - 1

            prev_x = v[prev_k]
            prev_y = prev_x - prev_k

            while x > prev_x and y > prev_y:
                yield x - 1, y - 1, x, y
                x -= 1
                y -= 1

            if d > 0:
                yield prev_x, prev_y, x, y

            x, y = prev_x, prev_y
