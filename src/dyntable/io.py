"""I/O helpers — load jagged rows from CSV or Excel, dump JSON."""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable
from io import StringIO
from pathlib import Path
from typing import Any, Callable, cast

import pandas as pd

_CSV_SUFFIXES = (".csv", ".tsv", ".txt")
_EXCEL_SUFFIXES = (".xlsx", ".xlsm", ".xltx", ".xltm")
_CSV_ENCODINGS = ("utf-8-sig", "utf-8", "latin-1")
_SNIFF_DELIMITERS = ",;\t|"
_SNIFF_SAMPLE = 8192

# ── Loading ──────────────────────────────────────────────────────


def _parse_csv(text: str, delimiter: str | None) -> list[list[str]]:
    # str.splitlines() also breaks on \x0c, \x85 and U+2028; csv only on \r and \n.
    stream = StringIO(text, newline="")
    if delimiter:
        return list(csv.reader(stream, delimiter=delimiter))
    try:
        dialect: Any = csv.Sniffer().sniff(text[:_SNIFF_SAMPLE], delimiters=_SNIFF_DELIMITERS)
    except csv.Error:
        dialect = csv.excel
    return list(csv.reader(stream, dialect))


def _trim_trailing_empty(cells: list[str]) -> list[str]:
    end = len(cells)
    while end and cells[end - 1] == "":
        end -= 1
    return cells[:end]


def _excel_cells(record: Iterable[Any]) -> list[str]:
    return _trim_trailing_empty(["" if pd.isna(value) else str(value) for value in record])


def load_rows(path: Path, delimiter: str | None = None) -> list[list[str]]:
    """Load *path* and return its rows as lists of strings, widths untouched.

    CSV-like files keep whatever width each line has. Excel sheets are read
    without a header row and lose trailing empty cells, so rows come back
    as jagged as they were typed.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the extension is not supported, or decoding fails.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in _CSV_SUFFIXES:
        last_exc: Exception | None = None
        for encoding in _CSV_ENCODINGS:
            try:
                text = path.read_text(encoding=encoding)
            except UnicodeDecodeError as exc:
                last_exc = exc
                continue
            try:
                return _parse_csv(text, delimiter)
            except csv.Error as exc:
                raise ValueError(f"Could not parse {path}: {exc}") from exc
        raise ValueError(f"Could not decode {path}") from last_exc

    if suffix in _EXCEL_SUFFIXES:
        read_excel = cast(Callable[..., pd.DataFrame], getattr(pd, "read_excel"))
        frame = read_excel(path, engine="openpyxl", header=None, dtype="string")
        return [_excel_cells(record) for record in frame.itertuples(index=False, name=None)]

    raise ValueError(
        f"Unsupported file type: {suffix!r}. Use .csv, .tsv, .txt or .xlsx"
    )


# ── Writing ──────────────────────────────────────────────────────


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    item = getattr(obj, "item", None)
    if callable(item):
        converted = item()
        if isinstance(converted, (str, int, float, bool)) or converted is None:
            return converted
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps_json(data: Any) -> str:
    """Return *data* as deterministic pretty-printed JSON with a trailing newline."""
    return json.dumps(
        data,
        indent=2,
        sort_keys=True,
        ensure_ascii=False,
        default=_json_default,
    ) + "\n"
