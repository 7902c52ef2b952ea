"""
Core algorithms: line diff, three-way merge and conflict marking.

Everything in this package is synchronous and free of I/O.
"""
