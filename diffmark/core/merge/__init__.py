"""
Merge module for three-way merging and conflict marking.
"""

from diffmark.core.merge.three_way import ThreeWayMerger
from diffmark.core.merge.marker import DiffMarker, is_replace_pair

__all__ = [
    'ThreeWayMerger',
    'DiffMarker',
    'is_replace_pair',
]
