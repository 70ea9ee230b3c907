"""CLI integration tests for dyntable."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from rich.logging import RichHandler
from typer.testing import CliRunner

import dyntable.cli as cli_mod
from dyntable import __version__
from dyntable.cli import app
from dyntable.models import LoadOptions

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    cli_mod._configure_logging(False)


def _write_csv(tmp_path: Path, name: str, rows: str) -> Path:
    path = tmp_path / name
    path.write_text(rows)
    return path


def test_version_flag_prints_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"dyntable v{__version__}" in result.stdout


def test_shape_json_reports_padded_width(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "a,b,c\n1,2\n3\n")

    result = runner.invoke(app, ["shape", "--input", str(csv_path), "--json", "-d", ","])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "rows": 2,
        "columns": 3,
        "has_header": True,
        "consistent": False,
    }


def test_shape_json_no_header_counts_first_row_as_record(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "a,b\n1,2\n")

    result = runner.invoke(
        app, ["shape", "--input", str(csv_path), "--json", "--no-header", "-d", ","]
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["rows"] == 2
    assert payload["has_header"] is False


def test_shape_json_with_clean_drops_empty_rows_and_columns(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "a,b,c\n1,,x\n,,\n2\n")

    result = runner.invoke(
        app, ["shape", "--input", str(csv_path), "--json", "--clean", "-d", ","]
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["rows"] == 2
    assert payload["columns"] == 2
    assert payload["consistent"] is True


def test_shape_table_output(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "a,b\n1,2\n")

    result = runner.invoke(app, ["shape", "--input", str(csv_path), "-d", ","])

    assert result.exit_code == 0
    assert "Grid Shape" in result.stdout
    assert "Records" in result.stdout


def test_show_prints_padded_table(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "name,city\nAda,London\nGrace\n")

    result = runner.invoke(
        app, ["show", "--input", str(csv_path), "--fill", "n/a", "-d", ","]
    )

    assert result.exit_code == 0
    assert "Ada" in result.stdout
    assert "n/a" in result.stdout
    assert "2 records x 2 columns" in result.stdout


def test_show_quiet_prints_only_table(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "name\nAda\n")

    result = runner.invoke(app, ["show", "--input", str(csv_path), "--quiet", "-d", ","])

    assert result.exit_code == 0
    assert "Ada" in result.stdout
    assert "records x" not in result.stdout


def test_show_unsupported_file_exits_2(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_text("{}")

    result = runner.invoke(app, ["show", "--input", str(path)])

    assert result.exit_code == 2
    assert "Unsupported file type" in result.stdout


def test_show_bad_delimiter_exits_2(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "a\n")

    result = runner.invoke(app, ["show", "--input", str(csv_path), "-d", ";;"])

    assert result.exit_code == 2
    assert "delimiter" in result.stdout


def test_missing_input_is_rejected_by_typer(tmp_path: Path) -> None:
    result = runner.invoke(app, ["show", "--input", str(tmp_path / "nope.csv")])

    assert result.exit_code == 2


def test_unexpected_error_exits_1(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "a\n1\n")

    def _boom(*_args: object, **_kwargs: object) -> object:
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_mod, "to_rich_table", _boom)

    result = runner.invoke(app, ["show", "--input", str(csv_path)])

    assert result.exit_code == 1
    assert "Unexpected internal error: boom" in result.stdout


def test_build_from_rows_uses_first_row_as_header() -> None:
    builder = cli_mod._build_from_rows(
        [["a", "b"], ["1"]], LoadOptions(header=True, default_text="-")
    )

    assert builder.build() == [["a", "b"], ["1", "-"]]


def test_verbose_logs_builder_operations(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "a,b\n1,\n,\n")

    result = runner.invoke(
        app, ["--verbose", "shape", "--input", str(csv_path), "--clean", "-d", ","]
    )

    assert result.exit_code == 0
    assert "clean dropped" in result.stdout


def test_cli_leaves_root_logging_handlers_alone(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "a,b\n1,2\n")
    root = logging.getLogger()
    marker = logging.NullHandler()
    root.addHandler(marker)
    try:
        for args in (["shape"], ["--verbose", "shape"]):
            result = runner.invoke(app, [*args, "--input", str(csv_path), "-d", ","])
            assert result.exit_code == 0
            assert marker in root.handlers
            assert not any(isinstance(h, RichHandler) for h in root.handlers)
    finally:
        root.removeHandler(marker)


def test_repeated_verbose_runs_keep_one_handler(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, "rows.csv", "a\n1\n")

    for _ in range(3):
        runner.invoke(app, ["--verbose", "shape", "--input", str(csv_path), "-d", ","])

    package_logger = logging.getLogger("dyntable")
    assert sum(isinstance(h, RichHandler) for h in package_logger.handlers) == 1

    runner.invoke(app, ["shape", "--input", str(csv_path), "-d", ","])

    assert not package_logger.handlers
    assert package_logger.propagate
