from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd

from ..services.table_format import extract_header_years

"""Spreadsheet reader.

Reads ``.xlsx`` / ``.xls`` (openpyxl / xlrd engines via pandas) and ``.csv``
(delimiter sniffed, so ``;``-separated exports work) without letting pandas
guess dtypes. The configured header row becomes the header; every following
row is a data row. Fully empty rows are dropped.

Cell normalization:
- NaN / NaT -> ''
- Timestamp -> date
- integral float -> int (CPF and day-serial cells come back as floats)
- strings are trimmed
"""

__all__ = [
    "SUPPORTED_SUFFIXES",
    "SheetHeaderError",
    "TableData",
    "read_raw_frame",
    "normalize_frame",
    "read_table",
]

SUPPORTED_SUFFIXES = (".xlsx", ".xls", ".csv")


class SheetHeaderError(Exception):
    """Raised when the header row is missing or the sheet does not exist."""


@dataclass
class TableData:
    source: str
    sheet_name: str
    headers: list[str]
    rows: list[list[Any]]  # alinhadas com headers
    header_years: dict[int, int] = field(default_factory=dict)


def _normalize_cell(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, float):
        if pd.isna(value):
            return ""
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, datetime):
        return value.date()
    return value


def _header_text(value: Any) -> str:
    cell = _normalize_cell(value)
    if cell == "":
        return ""
    if hasattr(cell, "strftime"):
        return cell.strftime("%d/%m/%Y")
    return str(cell).strip()


def _dedupe(headers: list[str]) -> list[str]:
    seen: dict[str, int] = {}
    result = []
    for h in headers:
        if h in seen:
            seen[h] += 1
            result.append(f"{h}.{seen[h]}")
        else:
            seen[h] = 0
            result.append(h)
    return result


def read_raw_frame(path: Path, sheet_name: str | None = None) -> tuple[str, pd.DataFrame]:
    """Read a file without header inference.

    Returns:
        ``(sheet name, raw DataFrame)``; CSV files report their file stem

    Raises:
        SheetHeaderError: If the requested sheet does not exist
        ValueError: If the file type is not supported
    """
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(
            path,
            header=None,
            dtype=object,
            sep=None,
            engine="python",
            encoding="utf-8-sig",
            skip_blank_lines=False,
        )
        return path.stem, df
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"unsupported file type: {path.name}")

    with pd.ExcelFile(path) as xls:
        names = [str(n) for n in xls.sheet_names]
        if sheet_name is None:
            target = names[0]
        elif sheet_name in names:
            target = sheet_name
        else:
            raise SheetHeaderError(f"sheet '{sheet_name}' not found in {path.name}")
        df = xls.parse(target, header=None, dtype=object)
    return target, df


def normalize_frame(df: pd.DataFrame, sheet_name: str, header_row: int = 1, source: str = "") -> TableData:
    """Split a raw frame into headers and normalized data rows.

    Args:
        df: Frame read with ``header=None``
        sheet_name: Sheet name (for messages)
        header_row: 1-based row holding the headers
        source: File name the frame came from

    Raises:
        SheetHeaderError: If the frame has fewer rows than ``header_row``
    """
    if header_row < 1 or df.shape[0] < header_row:
        raise SheetHeaderError(f"sheet '{sheet_name}' lacks header row {header_row}")

    headers = _dedupe([_header_text(v) for v in df.iloc[header_row - 1].tolist()])
    rows: list[list[Any]] = []
    for _, raw in df.iloc[header_row:].iterrows():
        if raw.isna().all():
            continue
        cells = [_normalize_cell(v) for v in raw.tolist()]
        if all(c == "" for c in cells):
            continue
        rows.append(cells)

    return TableData(
        source=source,
        sheet_name=sheet_name,
        headers=headers,
        rows=rows,
        header_years=extract_header_years(headers),
    )


def read_table(path: Path, sheet_name: str | None = None, header_row: int = 1) -> TableData:
    """Read one spreadsheet into headers and row mappings.

    Args:
        path: .xlsx, .xls or .csv file
        sheet_name: Sheet to read (first sheet when None)
        header_row: 1-based row holding the headers

    Returns:
        TableData with the per-column header years already extracted

    Raises:
        SheetHeaderError: If the sheet or its header row is missing
        ValueError: If the file type is not supported
    """
    name, df = read_raw_frame(path, sheet_name)
    return normalize_frame(df, name, header_row=header_row, source=path.name)
