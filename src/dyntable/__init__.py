"""dyntable — build rectangular text grids from rows of any width."""

from dyntable.builder import Builder, Grid, Row, Shape
from dyntable.errors import OutOfRangeError, ShapeMismatchError, TableError
from dyntable.records import (
    MAX_TUPLE_ARITY,
    Array,
    Tabled,
    fields_of,
    headers_of,
    infer_kind,
    length_of,
    record_of,
    rows_of,
)

__version__ = "0.1.0"

__all__ = [
    "MAX_TUPLE_ARITY",
    "Array",
    "Builder",
    "Grid",
    "OutOfRangeError",
    "Row",
    "Shape",
    "ShapeMismatchError",
    "TableError",
    "Tabled",
    "__version__",
    "fields_of",
    "headers_of",
    "infer_kind",
    "length_of",
    "record_of",
    "rows_of",
]
