"""Hand a built grid to rich for display."""

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from dyntable.builder import Grid


def to_rich_table(grid: Grid, *, header: bool = True, title: str | None = None) -> Table:
    """Wrap *grid* in a :class:`rich.table.Table`.

    Cells are passed as plain :class:`~rich.text.Text`, so markup inside the
    data is shown verbatim. Layout is left entirely to rich.
    """
    table = Table(title=title, show_header=header and bool(grid), show_lines=True)
    if not grid:
        return table

    labels = grid[0] if header else [""] * len(grid[0])
    for label in labels:
        table.add_column(Text(label))

    body = grid[1:] if header else grid
    for row in body:
        table.add_row(*(Text(cell) for cell in row))
    return table
