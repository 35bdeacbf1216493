from __future__ import annotations

from pathlib import Path

from premium_leave.cli.__main__ import EXIT_FATAL, EXIT_PROBLEMS_FOUND, EXIT_SUCCESS_ALL, main

"""Exit code contract: 0 clean, 2 problems found, 1 fatal."""


def test_exit_code_values():
    assert (EXIT_SUCCESS_ALL, EXIT_FATAL, EXIT_PROBLEMS_FOUND) == (0, 1, 2)


def test_exit_code_all_clean(temp_workdir: Path, clean_logging, make_excel, capsys):
    make_excel(temp_workdir / "data" / "ok.xlsx", [
        ["NOME", "IDADE", "CRONOGRAMA"],
        ["Ana", 60, "jan/2030 uma por ano"],
        ["Bruno", 45, ""],
    ])
    assert main(["--reference-date", "2026-10-19"]) == EXIT_SUCCESS_ALL
    assert "ERROR" not in capsys.readouterr().out


def test_exit_code_problems_found(temp_workdir: Path, clean_logging, make_excel):
    make_excel(temp_workdir / "data" / "review.xlsx", [
        ["NOME", "CRONOGRAMA"],
        ["Carla", "um mês a cada ano"],
    ])
    assert main(["--reference-date", "2026-10-19"]) == EXIT_PROBLEMS_FOUND


def test_exit_code_unreadable_file(temp_workdir: Path, clean_logging, capsys):
    (temp_workdir / "data" / "broken.xlsx").write_text("not a workbook", encoding="utf-8")
    assert main([]) == EXIT_PROBLEMS_FOUND
    assert "ERROR broken.xlsx: cannot read" in capsys.readouterr().out


def test_exit_code_fatal_bad_config(temp_workdir: Path, clean_logging, capsys):
    (temp_workdir / "config" / "premium_leave.yml").write_text("unknown: 1\n", encoding="utf-8")
    assert main([]) == EXIT_FATAL
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_fatal_bad_reference_date(temp_workdir: Path, clean_logging):
    assert main(["--reference-date", "31/02/2026"]) == EXIT_FATAL


def test_exit_code_fatal_missing_path(temp_workdir: Path, clean_logging, capsys):
    assert main(["nowhere"]) == EXIT_FATAL
    assert "ERROR path not found: nowhere" in capsys.readouterr().out
