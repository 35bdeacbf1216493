from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

"""Canonical employee fields and their spreadsheet header aliases.

Each canonical field carries an ordered alias list. Aliases are written in
normalized form (no accents, uppercase, single spaces) because header lookup
compares normalized text on both sides.
"""

__all__ = [
    "CanonicalField",
    "CanonicalFields",
    "FIELD_ALIASES",
    "SCHEDULE_COLUMN_ALIASES",
]


class CanonicalField(Enum):
    NAME = "name"
    CPF = "cpf"
    RG = "rg"
    CARGO = "cargo"
    LOTACAO = "lotacao"
    UNIDADE = "unidade"
    REF = "ref"


FIELD_ALIASES: dict[CanonicalField, tuple[str, ...]] = {
    CanonicalField.NAME: ("NOME", "SERVIDOR", "NOME DO SERVIDOR", "NOME COMPLETO", "FUNCIONARIO"),
    CanonicalField.CPF: ("CPF",),
    CanonicalField.RG: ("RG", "IDENTIDADE", "REGISTRO GERAL"),
    CanonicalField.CARGO: ("CARGO", "FUNCAO", "CARGO/FUNCAO"),
    CanonicalField.LOTACAO: ("LOTACAO", "SETOR", "DEPARTAMENTO"),
    CanonicalField.UNIDADE: ("UNIDADE", "UNIDADE ADMINISTRATIVA", "ORGAO"),
    CanonicalField.REF: ("REF", "REFERENCIA", "MATRICULA", "MAT"),
}

# coluna com o texto livre do cronograma (formato genérico)
SCHEDULE_COLUMN_ALIASES: tuple[str, ...] = (
    "CRONOGRAMA",
    "INICIO",
    "PREVISAO DE GOZO",
    "PREVISAO",
    "PERIODO DE GOZO",
    "LICENCA",
)


@dataclass(frozen=True)
class CanonicalFields:
    """Identity fields extracted from one spreadsheet row.

    Absent values are empty strings, never None.
    """
    name: str = ""
    cpf: str = ""
    rg: str = ""
    cargo: str = ""
    lotacao: str = ""
    unidade: str = ""
    ref: str = ""
    raw_column_index: int = -1  # posição do cabeçalho da coluna de cronograma; -1 se ausente

    def get(self, field: CanonicalField) -> str:
        return getattr(self, field.value)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
