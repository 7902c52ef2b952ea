"""
Core data models for the conflict marker.

This module defines the data structures shared by the core algorithms:
- Edit script models (line diff output)
- Alignment patch models (placeholder padding)
- Merge region and conflict models (three-way merge output)

All models are:
- Free of I/O (the service layer owns files and repositories)
- Plain values produced and consumed within a single call
- Type-hinted for IDE support
- Immutable where practical
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Enumerations
# =============================================================================

class EditType(Enum):
    """Type of operation in an edit script."""
    ADD = "add"        # Lines inserted into the target
    REMOVE = "remove"  # Lines dropped from the source


class MergeRegionType(Enum):
    """Type of region in a three-way merge."""
    UNCHANGED = auto()          # Same in all three versions
    LEFT_CHANGED = auto()       # Changed only in left
    RIGHT_CHANGED = auto()      # Changed only in right
    BOTH_CHANGED_SAME = auto()  # Both changed identically
    CONFLICT = auto()           # Both changed differently (conflict)


# =============================================================================
# Diff Models
# =============================================================================

@dataclass(frozen=True)
class EditOp:
    """
    A single add or remove operation of an edit script.

    For a REMOVE, ``old_pos`` is the index of the first removed line in
    the source and ``new_pos`` the index in the target where the change
    region starts.

    For an ADD, ``new_pos`` is the index of the first inserted line in the
    target and ``old_pos`` the anchor in the source: the index right after
    any lines removed in the same change region.
    """
    type: EditType
    old_pos: int
    new_pos: int
    items: tuple[str, ...]

    @property
    def is_add(self) -> bool:
        return self.type == EditType.ADD

    @property
    def is_remove(self) -> bool:
        return self.type == EditType.REMOVE

    @property
    def count(self) -> int:
        """Number of lines added or removed."""
        return len(self.items)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'type': self.type.value,
            'old_pos': self.old_pos,
            'new_pos': self.new_pos,
            'items': list(self.items),
        }


@dataclass
class DiffRegion:
    """A region of difference between base and another version."""
    base_start: int
    base_end: int
    other_start: int
    other_end: int
    base_lines: list[str]
    other_lines: list[str]

    @property
    def is_addition(self) -> bool:
        """True if lines were added (no base lines)."""
        return len(self.base_lines) == 0

    @property
    def is_deletion(self) -> bool:
        """True if lines were deleted (no other lines)."""
        return len(self.other_lines) == 0

    @property
    def is_modification(self) -> bool:
        """True if lines were modified."""
        return len(self.base_lines) > 0 and len(self.other_lines) > 0

    @property
    def delta(self) -> int:
        """Change in line count from base to other."""
        return len(self.other_lines) - len(self.base_lines)


@dataclass
class AlignmentPatch:
    """
    Result of padding a text against another one.

    ``steps`` only holds synthesized single blank line adds; ``result`` is
    the padded text.
    """
    steps: list[EditOp]
    result: str

    @property
    def placeholder_count(self) -> int:
        return len(self.steps)


# =============================================================================
# Merge Models
# =============================================================================

@dataclass
class MergeRegion:
    """
    A region in a three-way merge result.

    Represents a contiguous section of the merge with a specific type.
    """
    region_type: MergeRegionType
    base_start: int           # Start line in base
    base_end: int             # End line in base (exclusive)
    left_start: int           # Start line in left
    left_end: int             # End line in left
    right_start: int          # Start line in right
    right_end: int            # End line in right
    lines: list[str]          # Resulting lines for this region
    base_lines: list[str] = field(default_factory=list)
    left_lines: list[str] = field(default_factory=list)
    right_lines: list[str] = field(default_factory=list)

    @property
    def is_conflict(self) -> bool:
        return self.region_type == MergeRegionType.CONFLICT

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass
class MergeConflict:
    """
    A divergent hunk of a three-way merge.

    Contains the conflicting content from all three versions.
    """
    conflict_id: int
    base_start: int
    base_end: int
    left_start: int
    left_end: int
    right_start: int
    right_end: int
    base_lines: list[str]
    left_lines: list[str]
    right_lines: list[str]


@dataclass
class MergeResult:
    """
    Result of a three-way merge or marking operation.

    ``content`` is the merged text with inline conflict blocks and
    ``has_conflicts`` is set iff at least one block was emitted.
    """
    content: str
    has_conflicts: bool
    conflicts: list[MergeConflict] = field(default_factory=list, compare=False)
    regions: list[MergeRegion] = field(default_factory=list, compare=False)

    @property
    def conflict_count(self) -> int:
        return len(self.conflicts)

    def get_conflict(self, conflict_id: int) -> Optional[MergeConflict]:
        """Get a conflict by ID."""
        for conflict in self.conflicts:
            if conflict.conflict_id == conflict_id:
                return conflict
        return None
