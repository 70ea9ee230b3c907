"""Incremental table builder — rows of any width in, rectangular grid out."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from enum import Enum
from numbers import Integral
from typing import Any

from dyntable.errors import OutOfRangeError
from dyntable.records import rows_of

logger = logging.getLogger(__name__)

Row = list[str]
Grid = list[list[str]]


class Shape(str, Enum):
    """Whether padding is owed before the grid can be trusted."""

    DIRTY = "dirty"
    NORMALIZED = "normalized"


# ── Helpers ──────────────────────────────────────────────────────


def _texts(cells: Iterable[Any]) -> Iterator[str]:
    if isinstance(cells, (str, bytes, bytearray)):
        raise TypeError(
            f"cells must be an iterable of values, not a single string ({type(cells).__name__})"
        )
    return (str(cell) for cell in cells)


def _pad(row: Row, width: int, fill: str) -> None:
    if len(row) < width:
        row.extend([fill] * (width - len(row)))


def _check_index(kind: str, index: Any, limit: int) -> int:
    if isinstance(index, bool) or not isinstance(index, Integral):
        raise TypeError(f"{kind} index must be an integer")
    index = int(index)
    if not 0 <= index < limit:
        raise OutOfRangeError(kind, index, limit)
    return index


# ── Builder ──────────────────────────────────────────────────────


class Builder:
    """Accumulates rows of unknown width and an optional header.

    Short rows are not padded when they arrive. The builder only records
    that padding is owed (``Shape.DIRTY``) and pays it before anything that
    indexes columns: column edits, :meth:`clean` and :meth:`build`.

    >>> builder = Builder()
    >>> builder.set_header(["index", "measure", "value"]).push_record(["0", "weight", "0.443"])
    Builder(records=1, columns=3, header=True, state='normalized')
    >>> builder.build()
    [['index', 'measure', 'value'], ['0', 'weight', '0.443']]
    """

    def __init__(self) -> None:
        self._rows: list[Row] = []
        self._header: Row | None = None
        self._count_columns = 0
        self._state = Shape.NORMALIZED
        self._fill = ""

    # ── Constructors ─────────────────────────────────────────────

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Any]]) -> Builder:
        """Create a builder holding *rows* as records (no header)."""
        builder = cls()
        for row in rows:
            builder.push_record(row)
        return builder

    @classmethod
    def from_records(cls, values: Iterable[Any], kind: Any = None) -> Builder:
        """Create a builder from typed values; the record kind supplies the header.

        See :mod:`dyntable.records` for the supported kinds.
        """
        headers, rows = rows_of(values, kind)
        builder = cls()
        # Any resolved kind sets a header, even a zero-width one.
        if kind is not None or rows:
            builder.set_header(headers)
        for row in rows:
            builder.push_record(row)
        return builder

    def copy(self) -> Builder:
        other = type(self)()
        other._rows = [list(row) for row in self._rows]
        other._header = None if self._header is None else list(self._header)
        other._count_columns = self._count_columns
        other._state = self._state
        other._fill = self._fill
        return other

    # ── Header ───────────────────────────────────────────────────

    def set_header(self, cells: Iterable[Any]) -> Builder:
        """Replace the header row."""
        header = list(_texts(cells))
        self._admit(len(header), has_others=bool(self._rows))
        self._header = header
        return self

    def remove_header(self) -> Builder:
        """Drop the header without truncating any data.

        The column count becomes the wider of the old header and the
        longest record.
        """
        previous = len(self._header) if self._header is not None else 0
        self._header = None
        width = max([previous, *(len(row) for row in self._rows)])
        self._count_columns = width
        if all(len(row) == width for row in self._rows):
            self._state = Shape.NORMALIZED
        else:
            self._state = Shape.DIRTY
        logger.debug("header removed; column count recomputed as %d", width)
        return self

    # ── Records ──────────────────────────────────────────────────

    def push_record(self, cells: Iterable[Any]) -> Builder:
        """Append a row."""
        row = list(_texts(cells))
        self._admit(len(row), has_others=bool(self._rows) or self._header is not None)
        self._rows.append(row)
        return self

    def extend(self, cells: Iterable[Any]) -> Builder:
        return self.push_record(cells)

    def insert_record(self, index: int, cells: Iterable[Any]) -> Builder:
        """Insert a row before position *index*.

        Raises
        ------
        OutOfRangeError
            If ``index > count_records()``.
        """
        index = _check_index("row", index, len(self._rows) + 1)
        row = list(_texts(cells))
        self._admit(len(row), has_others=bool(self._rows) or self._header is not None)
        self._rows.insert(index, row)
        return self

    def remove_record(self, index: int) -> Builder:
        """Delete the row at *index*; the column count is left unchanged."""
        index = _check_index("row", index, len(self._rows))
        del self._rows[index]
        return self

    # ── Columns ──────────────────────────────────────────────────

    def push_column(self, cells: Iterable[Any]) -> Builder:
        """Append a column.

        When a header is set the first value becomes its cell. Remaining
        values fill the records top to bottom; missing ones are ``""`` and
        extra ones are dropped.
        """
        return self.insert_column(cells, self._count_columns)

    def insert_column(self, cells: Iterable[Any], index: int) -> Builder:
        """Insert a column at *index*, with the same filling rules as :meth:`push_column`.

        Raises
        ------
        OutOfRangeError
            If ``index > count_columns()``.
        """
        index = _check_index("column", index, self._count_columns + 1)
        self._normalize()

        values = _texts(cells)
        if self._header is not None:
            self._header.insert(index, next(values, ""))
        for row in self._rows:
            row.insert(index, next(values, ""))

        self._count_columns += 1
        return self

    def remove_column(self, index: int) -> Builder:
        """Remove column *index* from the header and every record."""
        index = _check_index("column", index, self._count_columns)
        self._normalize()

        if self._header is not None:
            del self._header[index]
        for row in self._rows:
            del row[index]

        self._count_columns -= 1
        return self

    # ── Settings ─────────────────────────────────────────────────

    def set_default_text(self, text: Any) -> Builder:
        """Set the text used for padding from now on.

        Cells that were already padded keep their text.
        """
        self._fill = str(text)
        return self

    def hint_column_size(self, size: int) -> Builder:
        """Force the column count and mark the rows as consistent.

        Nothing is padded or checked: the caller vouches that every row
        already has *size* cells.
        """
        if isinstance(size, bool) or not isinstance(size, Integral):
            raise TypeError("size must be an integer")
        if size < 0:
            raise ValueError("size must be >= 0")
        logger.debug("column count hinted: %d -> %d", self._count_columns, size)
        self._count_columns = int(size)
        self._state = Shape.NORMALIZED
        return self

    # ── Bulk edits ───────────────────────────────────────────────

    def clean(self) -> Builder:
        """Remove empty columns, then empty records.

        A column is empty when every record has ``""`` in it (the header is
        not consulted). A record is empty when all of its surviving cells
        are ``""``.
        """
        self._normalize()

        width = self._count_columns
        keep_columns = [c for c in range(width) if any(row[c] for row in self._rows)]
        keep_rows = [row for row in self._rows if any(row[c] for c in keep_columns)]

        logger.debug(
            "clean dropped %d columns and %d records",
            width - len(keep_columns),
            len(self._rows) - len(keep_rows),
        )

        self._rows = [[row[c] for c in keep_columns] for row in keep_rows]
        if self._header is not None:
            header = self._header
            self._header = [header[c] for c in keep_columns if c < len(header)]
        self._count_columns = len(keep_columns)
        return self

    def clear(self) -> Builder:
        """Drop all records; the header stays and defines the column count."""
        self._rows = []
        self._state = Shape.NORMALIZED
        self._count_columns = len(self._header) if self._header is not None else 0
        return self

    # ── Accessors ────────────────────────────────────────────────

    def count_columns(self) -> int:
        return self._count_columns

    def count_records(self) -> int:
        """Number of records, not counting the header."""
        return len(self._rows)

    def has_header(self) -> bool:
        return self._header is not None

    @property
    def header(self) -> Row | None:
        return None if self._header is None else list(self._header)

    @property
    def default_text(self) -> str:
        return self._fill

    @property
    def state(self) -> Shape:
        return self._state

    @property
    def is_consistent(self) -> bool:
        return self._state is Shape.NORMALIZED

    # ── Export ───────────────────────────────────────────────────

    def build(self) -> Grid:
        """Return the ``rows x count_columns`` grid, header first when set.

        The returned lists are fresh copies.
        """
        self._normalize()
        grid: Grid = []
        if self._header is not None:
            grid.append(list(self._header))
        grid.extend(list(row) for row in self._rows)
        return grid

    # ── Internals ────────────────────────────────────────────────

    def _admit(self, width: int, *, has_others: bool) -> None:
        if width > self._count_columns:
            self._count_columns = width
            if has_others:
                self._state = Shape.DIRTY
        elif width < self._count_columns:
            self._state = Shape.DIRTY

    def _normalize(self) -> None:
        if self._state is Shape.NORMALIZED:
            return
        width = self._count_columns
        if self._header is not None:
            _pad(self._header, width, self._fill)
        for row in self._rows:
            _pad(row, width, self._fill)
        self._state = Shape.NORMALIZED

    # ── Dunder ───────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Builder):
            return NotImplemented
        return (
            self._rows == other._rows
            and self._header == other._header
            and self._count_columns == other._count_columns
            and self._state is other._state
            and self._fill == other._fill
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(records={len(self._rows)}, "
            f"columns={self._count_columns}, header={self._header is not None}, "
            f"state={self._state.value!r})"
        )
