"""
diffmark - diff a file against its original and add merge conflict markers.
"""

__version__ = "0.1.1"
