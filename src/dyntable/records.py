"""Record conversion — turn typed values into header/field pairs.

A *kind* describes the shape of a record: a scalar type (``str``, ``int``,
``numpy.float64``...), a fixed-size :class:`Array`, a ``tuple[...]`` of up
to :data:`MAX_TUPLE_ARITY` member kinds, a dataclass, a ``NamedTuple`` or
any class implementing the :class:`Tabled` protocol.  Every value of a kind
yields the same headers and the same number of fields, which is what lets a
collection of records feed a :class:`~dyntable.builder.Builder` without
per-field mapping.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from numbers import Integral
from typing import Annotated, Any, ClassVar, Protocol, get_args, get_origin, runtime_checkable

import numpy as np

from dyntable.errors import ShapeMismatchError

MAX_TUPLE_ARITY = 6
SCALAR_TYPES: tuple[type, ...] = (str, bool, int, float, complex, Decimal, np.generic)


@runtime_checkable
class Tabled(Protocol):
    """Anything that knows its own column names and cell texts.

    Contract: ``len(cls.headers()) == len(obj.fields()) == cls.LENGTH``.
    """

    LENGTH: ClassVar[int]

    def fields(self) -> list[str]: ...

    @classmethod
    def headers(cls) -> list[str]: ...


@dataclass(frozen=True)
class Array:
    """Fixed-size homogeneous sequence kind: ``Array(int, 3)``."""

    item: Any
    size: int

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, Integral):
            raise TypeError("size must be an integer")
        if self.size < 0:
            raise ValueError("size must be >= 0")


# ── Kind classification ─────────────────────────────────────────


def _kind_name(kind: Any) -> str:
    return getattr(kind, "__name__", repr(kind))


def _is_tabled_class(kind: Any) -> bool:
    return (
        isinstance(kind, type)
        and callable(getattr(kind, "headers", None))
        and callable(getattr(kind, "fields", None))
    )


def _is_scalar_kind(kind: Any) -> bool:
    return isinstance(kind, type) and issubclass(kind, SCALAR_TYPES)


def _is_dataclass_kind(kind: Any) -> bool:
    return isinstance(kind, type) and dataclasses.is_dataclass(kind)


def _is_namedtuple_kind(kind: Any) -> bool:
    return isinstance(kind, type) and issubclass(kind, tuple) and hasattr(kind, "_fields")


def _unwrap(kind: Any) -> Any:
    # Annotated[T, ...] is T as far as records are concerned.
    while get_origin(kind) is Annotated:
        kind = get_args(kind)[0]
    return kind


def _check_arity(count: int) -> None:
    if not 1 <= count <= MAX_TUPLE_ARITY:
        raise TypeError(f"tuple records take 1 to {MAX_TUPLE_ARITY} members, got {count}")


def _tuple_members(kind: Any) -> tuple[Any, ...] | None:
    if get_origin(kind) is not tuple:
        return None
    members = get_args(kind)
    if len(members) == 2 and members[1] is Ellipsis:
        raise TypeError(f"{kind!r} has no fixed width; use Array(item, size) instead")
    _check_arity(len(members))
    return members


def infer_kind(value: Any) -> Any:
    """Return the record kind of *value*.

    Lists and other plain sequences are ambiguous and need an explicit
    :class:`Array` kind.
    """
    value_type = type(value)
    if _is_tabled_class(value_type):
        return value_type
    if _is_dataclass_kind(value_type):
        return value_type
    if _is_namedtuple_kind(value_type):
        return value_type
    if isinstance(value, SCALAR_TYPES):
        return value_type
    if isinstance(value, tuple):
        _check_arity(len(value))
        return tuple[tuple(infer_kind(member) for member in value)]  # type: ignore[misc]
    raise TypeError(
        f"Cannot infer a record kind for {value_type.__name__}; pass kind= explicitly"
    )


# ── Protocol operations ─────────────────────────────────────────


def headers_of(kind: Any) -> list[str]:
    """Return the ordered column names for records of *kind*."""
    kind = _unwrap(kind)
    if isinstance(kind, Array):
        return [str(i) for i in range(kind.size)]
    members = _tuple_members(kind)
    if members is not None:
        headers: list[str] = []
        for member in members:
            headers.extend(headers_of(member))
        return headers
    if _is_tabled_class(kind):
        return list(kind.headers())
    if _is_dataclass_kind(kind):
        return [f.name for f in dataclasses.fields(kind)]
    if _is_namedtuple_kind(kind):
        return list(kind._fields)
    if _is_scalar_kind(kind):
        return [kind.__name__]
    raise TypeError(f"Unsupported record kind: {_kind_name(kind)}")


def fields_of(value: Any, kind: Any = None) -> list[str]:
    """Return the ordered cell texts of *value*.

    Header/field length agreement is not checked here; see :func:`record_of`.
    """
    kind = infer_kind(value) if kind is None else _unwrap(kind)
    if isinstance(kind, Array):
        items = [str(item) for item in value]
        if len(items) != kind.size:
            raise ShapeMismatchError(
                f"Array of size {kind.size} got a value with {len(items)} items"
            )
        return items
    members = _tuple_members(kind)
    if members is not None:
        if not isinstance(value, tuple) or len(value) != len(members):
            raise ShapeMismatchError(
                f"{kind!r} expects a {len(members)}-tuple, got {value!r}"
            )
        fields: list[str] = []
        for member_value, member_kind in zip(value, members):
            fields.extend(fields_of(member_value, member_kind))
        return fields
    if _is_tabled_class(kind):
        return list(value.fields())
    if _is_dataclass_kind(kind):
        return [str(getattr(value, f.name)) for f in dataclasses.fields(kind)]
    if _is_namedtuple_kind(kind):
        return [str(item) for item in value]
    if _is_scalar_kind(kind):
        return [str(value)]
    raise TypeError(f"Unsupported record kind: {_kind_name(kind)}")


def length_of(kind: Any) -> int:
    """Return the number of columns a record of *kind* occupies."""
    kind = _unwrap(kind)
    if _is_tabled_class(kind) and hasattr(kind, "LENGTH"):
        return int(kind.LENGTH)
    return len(headers_of(kind))


def record_of(value: Any, kind: Any = None) -> tuple[list[str], list[str]]:
    """Return ``(headers, fields)`` for *value*, checking they line up.

    Raises
    ------
    ShapeMismatchError
        If the kind produces a different number of headers and fields.
    TypeError
        If the kind is unsupported or cannot be inferred.
    """
    if kind is None:
        kind = infer_kind(value)
    headers = headers_of(kind)
    fields = fields_of(value, kind)
    if len(headers) != len(fields):
        raise ShapeMismatchError(
            f"{_kind_name(_unwrap(kind))} produced {len(headers)} headers "
            f"but {len(fields)} fields"
        )
    return headers, fields


def rows_of(values: Iterable[Any], kind: Any = None) -> tuple[list[str], list[list[str]]]:
    """Convert *values* of a single kind into ``(headers, rows)``.

    When *kind* is omitted it is inferred from the first value; an empty
    input without a kind yields ``([], [])``.
    """
    headers: list[str] = [] if kind is None else headers_of(kind)
    rows: list[list[str]] = []
    for value in values:
        if kind is None:
            kind = infer_kind(value)
            headers = headers_of(kind)
        _, fields = record_of(value, kind)
        rows.append(fields)
    return headers, rows
