from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from premium_leave.cli import __main__ as cli
from premium_leave.cli.__main__ import (
    EXIT_FATAL,
    EXIT_SUCCESS_ALL,
    ProcessingError,
    main,
    scan_input_files,
)


def test_parse_args_defaults():
    args = cli._parse_args([])
    assert args.paths == ["data"]
    assert args.config is None
    assert args.output is None
    assert not args.problems_log
    assert not args.inspect_data
    assert not args.debug


def test_scan_input_files_filters_and_sorts(temp_workdir: Path):
    data = temp_workdir / "data"
    for name in ("b.xlsx", "a.csv", "~$a.xlsx", "notes.txt"):
        (data / name).write_text("x", encoding="utf-8")
    (data / "sub").mkdir()

    files = scan_input_files(["data"])
    assert [f.name for f in files] == ["a.csv", "b.xlsx"]


def test_scan_input_files_accepts_explicit_files(temp_workdir: Path):
    f = temp_workdir / "one.xlsx"
    f.write_text("x", encoding="utf-8")
    assert scan_input_files([str(f)]) == [f]


def test_scan_input_files_missing_path(temp_workdir: Path):
    with pytest.raises(ProcessingError):
        scan_input_files(["missing"])


def test_reference_date_from_flag_and_env(temp_workdir: Path, monkeypatch):
    args = cli._parse_args(["--reference-date", "19/10/2026"])
    assert cli._resolve_reference_date(args) == date(2026, 10, 19)

    monkeypatch.setenv(cli.ENV_REFERENCE_DATE, "2026-01-31")
    assert cli._resolve_reference_date(cli._parse_args([])) == date(2026, 1, 31)

    with pytest.raises(ValueError):
        cli._resolve_reference_date(cli._parse_args(["--reference-date", "ontem"]))


def test_config_resolution_order(temp_workdir: Path, write_config: Path, monkeypatch):
    assert cli._resolve_config(cli._parse_args([])).thresholds.mandatory_retirement_age == 75

    other = temp_workdir / "other.yml"
    other.write_text("thresholds:\n  mandatory_retirement_age: 70\n", encoding="utf-8")
    monkeypatch.setenv(cli.ENV_CONFIG_PATH, str(other))
    assert cli._resolve_config(cli._parse_args([])).thresholds.mandatory_retirement_age == 70


def test_defaults_without_config_file(temp_workdir: Path):
    cfg = cli._resolve_config(cli._parse_args([]))
    assert cfg.header_row == 1


def test_env_file_is_loaded(temp_workdir: Path, monkeypatch):
    # registra a variável no monkeypatch para que seja removida no teardown
    monkeypatch.setenv(cli.ENV_REFERENCE_DATE, "placeholder")
    monkeypatch.delenv(cli.ENV_REFERENCE_DATE)
    (temp_workdir / ".env").write_text(f"{cli.ENV_REFERENCE_DATE}=2026-10-19\n", encoding="utf-8")

    cli._load_env_file(Path(".env"))
    assert cli._resolve_reference_date(cli._parse_args([])) == date(2026, 10, 19)


def test_main_without_files_is_fatal(temp_workdir: Path, clean_logging, capsys):
    assert main([]) == EXIT_FATAL
    assert "ERROR no spreadsheet files found in: data" in capsys.readouterr().out


def test_main_missing_explicit_config_is_fatal(temp_workdir: Path, clean_logging, capsys):
    assert main(["--config", "nope.yml"]) == EXIT_FATAL
    assert "ERROR config: config file not found" in capsys.readouterr().out


def test_main_inspect_data(temp_workdir: Path, clean_logging, capsys, make_excel):
    make_excel(temp_workdir / "data" / "s.xlsx", [["NOME", "CRONOGRAMA 2026"], ["Ana", "3 meses 01/03"]])
    assert main(["--inspect-data"]) == EXIT_SUCCESS_ALL
    out = capsys.readouterr().out
    assert "FILE: s.xlsx" in out
    assert "format=generic" in out
    assert "header_years={1: 2026}" in out
