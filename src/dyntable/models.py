"""Validated dataclasses describing grids and load settings."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dyntable.builder import Builder


def _to_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    result = int(value)
    if result < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return result


def _to_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{field_name} must be a boolean")
    return value


@dataclass
class GridShape:
    """Shape of the grid a builder would export.

    ``rows`` counts records only; the header is reported by ``has_header``.
    """

    rows: int = 0
    columns: int = 0
    has_header: bool = False
    consistent: bool = True

    def __post_init__(self) -> None:
        self.rows = _to_non_negative_int(self.rows, "rows")
        self.columns = _to_non_negative_int(self.columns, "columns")
        self.has_header = _to_bool(self.has_header, "has_header")
        self.consistent = _to_bool(self.consistent, "consistent")

    @classmethod
    def of(cls, builder: Builder) -> GridShape:
        return cls(
            rows=builder.count_records(),
            columns=builder.count_columns(),
            has_header=builder.has_header(),
            consistent=builder.is_consistent,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows": self.rows,
            "columns": self.columns,
            "has_header": self.has_header,
            "consistent": self.consistent,
        }


@dataclass
class LoadOptions:
    """How raw input rows are turned into a builder."""

    header: bool = True
    clean: bool = False
    default_text: str = ""
    delimiter: str | None = None

    def __post_init__(self) -> None:
        self.header = _to_bool(self.header, "header")
        self.clean = _to_bool(self.clean, "clean")
        if not isinstance(self.default_text, str):
            raise TypeError("default_text must be a string")
        if self.delimiter is not None:
            if not isinstance(self.delimiter, str):
                raise TypeError("delimiter must be a string")
            if len(self.delimiter) != 1:
                raise ValueError("delimiter must be a single character")
