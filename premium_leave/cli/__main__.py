from __future__ import annotations

import argparse
import json
import os
import sys
import zipfile
from datetime import date
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from premium_leave.config.loader import DEFAULT_CONFIG_PATH, AppConfig, ConfigError, default_config, load_config
from premium_leave.dates.normalizer import parse_date
from premium_leave.excel.reader import SUPPORTED_SUFFIXES, SheetHeaderError, read_table
from premium_leave.logging.init import log_summary, set_debug, setup_logging
from premium_leave.logging.problem_log import ProblemLogBuffer
from premium_leave.models.problem import FILE_READ_ERROR, DataQualityProblem
from premium_leave.services.batch import BatchResult, process_table
from premium_leave.services.progress import ProgressTracker
from premium_leave.services.statistics import aggregate
from premium_leave.services.summary import render_summary_line
from premium_leave.services.table_format import detect_format

"""CLI entrypoint.

Flow:
- Load ``.env`` (python-dotenv) and the YAML config
- Collect input files (directories are scanned non-recursively)
- Read each sheet, classify it, log per-file results
- Emit the SUMMARY line, optionally the JSON export and the problem log

Exit codes:
- 0: every row processed without data-quality problems
- 2: problems were found (rows flagged, unreadable files)
- 1: fatal (config error, missing input, bad arguments)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PROBLEMS_FOUND = 2
EXIT_FATAL = 1

ENV_CONFIG_PATH = "PREMIUM_LEAVE_CONFIG"
ENV_REFERENCE_DATE = "PREMIUM_LEAVE_REFERENCE_DATE"

# ImportError: .xls without the optional xlrd engine
_READ_ERRORS = (SheetHeaderError, OSError, ValueError, zipfile.BadZipFile, ImportError)


class ProcessingError(Exception):
    """Raised when the input paths cannot be scanned."""


def _load_env_file(path: Path, override: bool = False) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="premium-leave",
        description="Classify premium-leave spreadsheets by retirement urgency",
    )
    p.add_argument("paths", nargs="*", default=["data"], help="Spreadsheet files or directories (default: ./data)")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--reference-date", default=None, help="Evaluate as of this date (YYYY-MM-DD)")
    p.add_argument("--output", type=Path, default=None, help="Write records and statistics as JSON")
    p.add_argument("--problems-log", action="store_true", help="Write data-quality problems to logs/ as JSON Lines")
    p.add_argument("--inspect-data", action="store_true", help="Print headers, detected format & first rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def scan_input_files(paths: list[str]) -> list[Path]:
    """Expand the given paths into spreadsheet files (non-recursive).

    Raises:
        ProcessingError: If a path does not exist or a directory cannot be read
    """
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise ProcessingError(f"path not found: {path}")
        if path.is_dir():
            try:
                found = sorted(
                    p for p in path.iterdir()
                    if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES and not p.name.startswith("~$")
                )
            except OSError as e:
                raise ProcessingError(f"error reading directory {path}: {e}") from e
            files.extend(found)
        else:
            files.append(path)
    return files


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    explicit = args.config or (Path(os.environ[ENV_CONFIG_PATH]) if os.getenv(ENV_CONFIG_PATH) else None)
    if explicit is not None:
        return load_config(explicit)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return default_config()


def _resolve_reference_date(args: argparse.Namespace) -> date:
    raw = args.reference_date or os.getenv(ENV_REFERENCE_DATE)
    if not raw:
        return date.today()
    parsed = parse_date(raw)
    if parsed is None:
        raise ValueError(f"invalid reference date: {raw!r}")
    return parsed


def _inspect_data(files: list[Path], cfg: AppConfig) -> int:
    for f in files:
        print(f"FILE: {f.name}")
        try:
            table = read_table(f, cfg.sheet_name, cfg.header_row)
        except _READ_ERRORS as e:
            print(f"  read_error: {e}")
            continue
        fmt = detect_format(table.headers)
        print(f"  SHEET: {table.sheet_name} format={fmt.value} cols={table.headers}")
        if table.header_years:
            print(f"    header_years={table.header_years}")
        for row in table.rows[:3]:
            print("    sample_row=", [c.isoformat() if hasattr(c, "isoformat") else c for c in row])
    return EXIT_SUCCESS_ALL


def _write_output(path: Path, entries: list[tuple[Path, BatchResult]], cfg: AppConfig, today: date) -> None:
    payload: dict[str, Any] = {
        "reference_date": today.isoformat(),
        "thresholds": cfg.thresholds.to_dict(),
        "files": [{"file": f.name, **result.to_dict()} for f, result in entries],
        "statistics": aggregate(r for _, result in entries for r in result.records).to_dict(),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # só lê sys.argv quando argv é None (testes chamam main([]))
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        today = _resolve_reference_date(args)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_FATAL

    try:
        files = scan_input_files(args.paths)
    except ProcessingError as e:
        logger.error(str(e))
        return EXIT_FATAL
    if not files:
        logger.error(f"no spreadsheet files found in: {', '.join(args.paths)}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(files, cfg)

    logger.info(f"reference_date={today.isoformat()} files={len(files)}")
    problem_log = ProblemLogBuffer()
    entries: list[tuple[Path, BatchResult]] = []
    file_problems = 0

    with ProgressTracker(len(files)) as progress:
        for f in files:
            progress.start_file(f)
            try:
                table = read_table(f, cfg.sheet_name, cfg.header_row)
            except _READ_ERRORS as e:
                logger.error(f"{f.name}: cannot read: {e}")
                problem_log.append(
                    DataQualityProblem.create(
                        None, f"cannot read file: {e}", row=-1, problem_type=FILE_READ_ERROR, source=f.name
                    )
                )
                file_problems += 1
                progress.finish_file()
                continue

            result = process_table(table.headers, table.rows, cfg.thresholds, table.header_years, today=today)
            entries.append((f, result))
            problem_log.extend([p.with_source(f.name) for p in result.problems])
            logger.info(
                f"{f.name}: format={result.table_format.value} "
                f"employees={result.statistics.total_employees} problems={len(result.problems)}"
            )
            if result.problems:
                logger.warning(f"{f.name}: {len(result.problems)} row(s) need review")
            progress.finish_file(employees=result.statistics.total_employees)

    if args.output is not None:
        _write_output(args.output, entries, cfg, today)
        logger.info(f"output written: {args.output}")

    total_problems = len(problem_log)
    if args.problems_log and total_problems:
        path = problem_log.flush()
        logger.info(f"problems log: {path}")

    summary_line = render_summary_line(len(files), [r for _, r in entries], file_problems)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    return EXIT_PROBLEMS_FOUND if total_problems else EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
