"""
Diff module for line sequence comparison.

Provides the LCS-based line diff used by the merge layer:
- Edit scripts (grouped add/remove operations)
- Longest common subsequences
- Change regions for three-way merging
"""

from diffmark.core.diff.line_diff import (
    LineSequenceDiff,
    join_lines,
    split_lines,
)

__all__ = [
    'LineSequenceDiff',
    'join_lines',
    'split_lines',
]
