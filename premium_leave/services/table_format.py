from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from ..models.employee_record import TableFormat
from .field_resolver import normalize_key

"""Sheet format detection and per-column year hints.

Detection order matters: the process-oriented ("new") columns may coexist
with legacy-looking header text, so the NEW check runs first.
"""

__all__ = [
    "TableFormat",
    "detect_format",
    "extract_header_years",
]

_NON_ALNUM_RE = re.compile(r"[^A-Z0-9]")
_HEADER_YEAR_RE = re.compile(r"\b(20\d{2}|19\d{2})\b")

# nº do processo + emissão, ou data inicial + dias de gozo
_NEW_FORMAT_SIGNATURES: tuple[tuple[str, str], ...] = (
    ("NUMERO", "EMISSAO"),
    ("APARTIR", "GOZO"),
)
_PREMIUM_LEAVE_MARKERS = ("INICIO DE LICENCA", "FINAL DE LICENCA")


def _compact(header: Any) -> str:
    return _NON_ALNUM_RE.sub("", normalize_key(header))


def detect_format(headers: Iterable[Any]) -> TableFormat:
    """Classify a sheet by its header row.

    The process-oriented check runs first: its columns can sit next to
    header text that also looks like the legacy layout.

    Args:
        headers: Header cells in sheet order

    Returns:
        TableFormat.NEW, TableFormat.PREMIUM_LEAVE or TableFormat.GENERIC
    """
    header_list = list(headers)
    compact = [_compact(h) for h in header_list]
    for first, second in _NEW_FORMAT_SIGNATURES:
        if any(first in c for c in compact) and any(second in c for c in compact):
            return TableFormat.NEW

    joined = " | ".join(normalize_key(h) for h in header_list)
    if any(marker in joined for marker in _PREMIUM_LEAVE_MARKERS):
        return TableFormat.PREMIUM_LEAVE
    return TableFormat.GENERIC


def extract_header_years(headers: Iterable[Any]) -> dict[int, int]:
    """Map header position -> year for headers that carry a 4-digit year.

    Example: ``["NOME", "LICENÇA 2026"] -> {1: 2026}``.
    """
    years: dict[int, int] = {}
    for pos, header in enumerate(headers):
        if header is None:
            continue
        m = _HEADER_YEAR_RE.search(str(header))
        if m:
            years[pos] = int(m.group(1))
    return years
