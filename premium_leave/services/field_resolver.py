from __future__ import annotations

import math
import re
import unicodedata
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from ..models.fields import FIELD_ALIASES, SCHEDULE_COLUMN_ALIASES, CanonicalField, CanonicalFields

"""Header alias resolution.

Spreadsheet headers arrive with arbitrary casing, accents and spacing
("Lotação", "LOTACAO ", "lotacao_atual"). Every header and alias is
normalized (accents stripped, uppercase, underscores and repeated spaces
collapsed) and matched in two passes:

1. exact match, trying aliases in their declared order
2. containment in either direction, on word boundaries

Headers and aliases shorter than three characters only ever match exactly,
so that a stray "A" column cannot swallow "MATRICULA"; the word boundary
keeps "IDADE" from matching "UNIDADE" or "IDENTIDADE".

Resolution never raises; an unresolved field yields ''.
"""

__all__ = [
    "normalize_key",
    "cell_text",
    "locate_column",
    "find_column",
    "get_value",
    "get_field",
    "resolve",
]

_SPACES_RE = re.compile(r"\s+")
_MIN_CONTAINED_LEN = 3


def normalize_key(text: Any) -> str:
    """Normalize a header or alias for comparison."""
    if text is None:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _SPACES_RE.sub(" ", stripped.replace("_", " ")).strip().upper()


def cell_text(value: Any) -> str:
    """Render a cell as trimmed text ('' for empty / NaN)."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    return str(value).strip()


def _contains_words(text: str, part: str) -> bool:
    return re.search(rf"\b{re.escape(part)}\b", text) is not None


def _header_index(headers: Iterable[Any]) -> list[tuple[str, int]]:
    return [(normalize_key(h), pos) for pos, h in enumerate(headers)]


def locate_column(headers: Iterable[Any], aliases: Iterable[str]) -> int | None:
    """Return the position of the first header matching ``aliases``.

    Args:
        headers: Header names in sheet order
        aliases: Candidate names, most specific first

    Returns:
        0-based header position, or None when nothing matches
    """
    index = [(key, pos) for key, pos in _header_index(headers) if key]
    keys = [normalize_key(a) for a in aliases]
    keys = [k for k in keys if k]

    for alias in keys:
        for key, pos in index:
            if key == alias:
                return pos

    for alias in keys:
        for key, pos in index:
            if len(alias) >= _MIN_CONTAINED_LEN and _contains_words(key, alias):
                return pos
            if len(key) >= _MIN_CONTAINED_LEN and _contains_words(alias, key):
                return pos
    return None


def find_column(row: Mapping[str, Any], aliases: Iterable[str]) -> str | None:
    """Original header name of the column matching ``aliases``."""
    headers = list(row.keys())
    pos = locate_column(headers, aliases)
    if pos is None:
        return None
    return headers[pos]


def get_value(row: Mapping[str, Any], aliases: Iterable[str]) -> Any:
    """Raw cell value for ``aliases`` (None when the column is absent)."""
    column = find_column(row, aliases)
    if column is None:
        return None
    return row[column]


def get_field(row: Mapping[str, Any], aliases: Iterable[str]) -> str:
    return cell_text(get_value(row, aliases))


def resolve(
    row: Mapping[str, Any],
    alias_groups: Mapping[CanonicalField, Iterable[str]] | None = None,
) -> CanonicalFields:
    """Extract the canonical identity fields of one row.

    Args:
        row: Header name -> cell value, in sheet column order
        alias_groups: Optional per-field alias override; fields not listed
            fall back to the built-in aliases

    Returns:
        CanonicalFields with '' for every unresolved field and the header
        position of the schedule column in ``raw_column_index`` (-1 if none)
    """
    groups = dict(FIELD_ALIASES)
    if alias_groups:
        groups.update(alias_groups)

    values = {field.value: get_field(row, groups[field]) for field in CanonicalField}
    schedule_pos = locate_column(list(row.keys()), SCHEDULE_COLUMN_ALIASES)
    return CanonicalFields(
        raw_column_index=-1 if schedule_pos is None else schedule_pos,
        **values,
    )
