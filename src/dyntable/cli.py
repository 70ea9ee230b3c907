"""CLI entry point for dyntable."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table as RichTable

from dyntable import __version__
from dyntable.builder import Builder
from dyntable.io import dumps_json, load_rows
from dyntable.models import GridShape, LoadOptions
from dyntable.render import to_rich_table

app = typer.Typer(
    name="dyntable",
    help="dyntable — Normalize jagged rows into a rectangular table.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def _printer(quiet: bool) -> Callable[..., None]:
    return _noop if quiet else console.print


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {msg}")


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"dyntable v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route ``dyntable`` debug logs to the console; the root logger is left alone."""
    package_logger = logging.getLogger("dyntable")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    if not verbose:
        package_logger.setLevel(logging.NOTSET)
        package_logger.propagate = True
        return
    handler = RichHandler(console=console, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
    package_logger.propagate = False


def _load_options(
    header: bool, clean: bool, fill: str, delimiter: str | None
) -> LoadOptions:
    try:
        return LoadOptions(header=header, clean=clean, default_text=fill, delimiter=delimiter)
    except (TypeError, ValueError) as exc:
        _err(str(exc))
        raise typer.Exit(code=2)


def _build_from_rows(rows: list[list[str]], options: LoadOptions) -> Builder:
    """Push *rows* into a new builder according to *options*."""
    builder = Builder().set_default_text(options.default_text)
    if options.header and rows:
        builder.set_header(rows[0])
        rows = rows[1:]
    for row in rows:
        builder.push_record(row)
    logger.debug("loaded %r", builder)
    if options.clean:
        builder.clean()
    return builder


def _load_builder(input_file: Path, options: LoadOptions) -> Builder:
    try:
        rows = load_rows(input_file, delimiter=options.delimiter)
    except (FileNotFoundError, ValueError, OSError) as exc:
        _err(str(exc))
        raise typer.Exit(code=2)
    return _build_from_rows(rows, options)


# ── Callbacks ────────────────────────────────────────────────────


@app.callback()
def main(
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log builder operations.",
    ),
) -> None:
    """dyntable CLI."""
    _configure_logging(verbose)


# ── show command ─────────────────────────────────────────────────


@app.command()
def show(
    input_file: Path = typer.Option(
        ..., "--input", "-i",
        help="Path to a CSV/TSV/TXT or XLSX file.",
        exists=True, readable=True,
    ),
    header: bool = typer.Option(
        True, "--header/--no-header",
        help="Treat the first row as the header.",
    ),
    clean: bool = typer.Option(
        False, "--clean",
        help="Drop empty columns and empty rows.",
    ),
    fill: str = typer.Option(
        "", "--fill",
        help="Text used to pad short rows.",
    ),
    delimiter: str | None = typer.Option(
        None, "--delimiter", "-d",
        help="CSV delimiter (sniffed when omitted).",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Print only the table.",
    ),
) -> None:
    """Normalize a file's rows and print them as a table."""
    echo = _printer(quiet)
    options = _load_options(header, clean, fill, delimiter)
    builder = _load_builder(input_file, options)

    try:
        grid_shape = GridShape.of(builder)
        grid = builder.build()
        console.print(to_rich_table(grid, header=builder.has_header(), title=input_file.name))
        echo(f"  {grid_shape.rows} records x {grid_shape.columns} columns")
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1)


# ── shape command ────────────────────────────────────────────────


@app.command()
def shape(
    input_file: Path = typer.Option(
        ..., "--input", "-i",
        help="Path to a CSV/TSV/TXT or XLSX file.",
        exists=True, readable=True,
    ),
    header: bool = typer.Option(
        True, "--header/--no-header",
        help="Treat the first row as the header.",
    ),
    clean: bool = typer.Option(
        False, "--clean",
        help="Drop empty columns and empty rows before measuring.",
    ),
    delimiter: str | None = typer.Option(
        None, "--delimiter", "-d",
        help="CSV delimiter (sniffed when omitted).",
    ),
    as_json: bool = typer.Option(
        False, "--json",
        help="Print the shape as JSON.",
    ),
) -> None:
    """Report how many records and columns a file normalizes to.

    ``consistent`` tells whether short rows are still waiting to be padded.
    """
    options = _load_options(header, clean, "", delimiter)
    builder = _load_builder(input_file, options)

    try:
        grid_shape = GridShape.of(builder)
        if as_json:
            typer.echo(dumps_json(grid_shape.to_dict()), nl=False)
            return

        console.print(Panel(
            f"[bold]dyntable[/bold] v{__version__}\nInput: {input_file}",
            title="Shape", border_style="cyan",
        ))
        tbl = RichTable(title="Grid Shape", show_lines=True)
        tbl.add_column("Check", style="bold")
        tbl.add_column("Result")
        tbl.add_row("Records", str(grid_shape.rows))
        tbl.add_row("Columns", str(grid_shape.columns))
        tbl.add_row("Header", "yes" if grid_shape.has_header else "no")
        tbl.add_row(
            "Consistent",
            "[green]yes[/green]" if grid_shape.consistent else "[yellow]padding owed[/yellow]",
        )
        console.print(tbl)
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1)
