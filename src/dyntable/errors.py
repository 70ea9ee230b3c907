"""Exception hierarchy shared by the builder and the record protocol."""

from __future__ import annotations


class TableError(Exception):
    """Base class for every error raised by dyntable."""


class OutOfRangeError(TableError, IndexError):
    """A row or column index lies outside ``0 <= index < limit``."""

    def __init__(self, kind: str, index: int, limit: int) -> None:
        self.kind = kind
        self.index = index
        self.limit = limit
        super().__init__(f"{kind} index {index} out of range (expected 0 <= index < {limit})")


class ShapeMismatchError(TableError, ValueError):
    """Headers and fields of a record do not have the same length."""
