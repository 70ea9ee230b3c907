"""pandas interop — builders from DataFrames, DataFrames from grids."""

from __future__ import annotations

from typing import Any, cast

import pandas as pd

from dyntable.builder import Builder, Grid


def _cell_text(value: object) -> str:
    try:
        if pd.isna(cast(Any, value)):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


def builder_from_frame(df: pd.DataFrame, *, header: bool = True) -> Builder:
    """Load *df* into a new builder; missing values become ``""``.

    With *header* the column labels become the header row.
    """
    builder = Builder()
    if header:
        builder.set_header(str(label) for label in df.columns)
    for record in df.itertuples(index=False, name=None):
        builder.push_record(_cell_text(value) for value in record)
    return builder


def grid_to_frame(grid: Grid, *, header: bool = True) -> pd.DataFrame:
    """Turn a built grid into a ``string``-typed DataFrame.

    With *header* the first grid row supplies the column labels, otherwise
    columns are labelled ``0..n-1``.
    """
    if not grid:
        return pd.DataFrame()
    if header:
        columns: list[Any] = list(grid[0])
        body = grid[1:]
    else:
        columns = list(range(len(grid[0])))
        body = grid
    return pd.DataFrame(body, columns=pd.Index(columns), dtype="string")
