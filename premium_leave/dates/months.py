from __future__ import annotations

import unicodedata

"""Portuguese month table shared by the date normalizer, the schedule parser
and the period generator.

The system is locale-fixed: only Portuguese month names and their 3-letter
abbreviations are recognized. Lookups are accent-insensitive ("março" and
"marco" resolve to the same month).
"""

__all__ = [
    "MONTH_NAMES",
    "MONTH_ABBREVIATIONS",
    "normalize_month_key",
    "month_from_text",
    "month_name",
    "describe_month",
    "month_name_pattern",
]

# índice 0 = janeiro
MONTH_NAMES: tuple[str, ...] = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
)


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


_LOOKUP: dict[str, int] = {}
for _index, (_name, _abbr) in enumerate(zip(MONTH_NAMES, MONTH_ABBREVIATIONS), start=1):
    _LOOKUP[_name] = _index
    _LOOKUP[_strip_accents(_name)] = _index
    _LOOKUP[_abbr] = _index


def normalize_month_key(text: str) -> str:
    """Lowercase, strip accents, surrounding whitespace and a trailing dot."""
    return _strip_accents(text).strip().lower().rstrip(".").strip()


def month_from_text(text: str | None) -> int | None:
    """Resolve a month name or abbreviation to its number (1-12).

    Accepts the full name with or without accents ("março", "marco"), the
    3-letter abbreviation with or without a trailing dot ("jan", "jan.") and,
    as a last resort, any word whose first three letters form a known
    abbreviation ("setem" -> 9).

    Returns:
        Month number, or None when the text names no month.
    """
    if not text:
        return None
    key = normalize_month_key(text)
    if not key:
        return None
    if key in _LOOKUP:
        return _LOOKUP[key]
    if len(key) >= 3 and key.isalpha():
        return _LOOKUP.get(key[:3])
    return None


def month_name(month: int) -> str:
    """Capitalized Portuguese month name, e.g. ``month_name(3) == "Março"``."""
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")
    return MONTH_NAMES[month - 1].capitalize()


def describe_month(year: int, month: int) -> str:
    return f"{month_name(month)} de {year}"


def month_name_pattern(*, include_abbreviations: bool = True) -> str:
    """Regex alternation matching every month spelling (full names first)."""
    names: list[str] = []
    for name in MONTH_NAMES:
        names.append(name)
        plain = _strip_accents(name)
        if plain != name:
            names.append(plain)
    if include_abbreviations:
        names.extend(MONTH_ABBREVIATIONS)
    return "|".join(names)
