from __future__ import annotations

from datetime import date, datetime

from premium_leave.models.fields import CanonicalField
from premium_leave.services.field_resolver import (
    cell_text,
    find_column,
    get_field,
    get_value,
    locate_column,
    normalize_key,
    resolve,
)


def test_normalize_key():
    assert normalize_key(" Lotação_Atual ") == "LOTACAO ATUAL"
    assert normalize_key("Nome   do  Servidor") == "NOME DO SERVIDOR"
    assert normalize_key(None) == ""


def test_cell_text_renders_spreadsheet_values():
    assert cell_text(None) == ""
    assert cell_text(float("nan")) == ""
    assert cell_text(12.0) == "12"
    assert cell_text(12.5) == "12.5"
    assert cell_text(" Ana ") == "Ana"
    assert cell_text(datetime(2026, 1, 2, 8, 0)) == "02/01/2026"
    assert cell_text(date(2026, 1, 2)) == "02/01/2026"


def test_exact_match_beats_containment():
    headers = ["NOME DA MÃE", "Nome"]
    assert locate_column(headers, ["NOME"]) == 1


def test_containment_in_either_direction():
    assert locate_column(["Lotação atual"], ["LOTACAO"]) == 0
    assert locate_column(["CPF"], ["CPF DO SERVIDOR"]) == 0
    assert locate_column(["IDADE"], ["SEXO"]) is None


def test_short_aliases_only_match_exactly():
    assert locate_column(["CARGO"], ["RG"]) is None
    assert locate_column(["CARGO", "RG"], ["RG"]) == 1
    assert locate_column(["A", "MATRICULA ATUAL"], ["MATRICULA"]) == 1


def test_alias_order_decides_between_columns():
    headers = ["SETOR", "LOTAÇÃO"]
    assert locate_column(headers, ["LOTACAO", "SETOR"]) == 1


def test_find_and_get_value():
    row = {"Nome": "Ana", "Idade": 60.0}
    assert find_column(row, ["NOME"]) == "Nome"
    assert get_value(row, ["IDADE"]) == 60.0
    assert get_field(row, ["IDADE"]) == "60"
    assert get_value(row, ["CPF"]) is None
    assert get_field(row, ["CPF"]) == ""


def test_resolve_extracts_identity_and_schedule_column():
    row = {
        "Servidor": "Ana Souza",
        "CPF": "111.222.333-44",
        "Cargo": "Professora",
        "Lotação": "SEDUC",
        "Matrícula": 123456.0,
        "Cronograma": "jan/2030 uma por ano",
    }
    fields = resolve(row)
    assert fields.name == "Ana Souza"
    assert fields.cpf == "111.222.333-44"
    assert fields.cargo == "Professora"
    assert fields.lotacao == "SEDUC"
    assert fields.ref == "123456"
    assert fields.rg == ""
    assert fields.unidade == ""
    assert fields.raw_column_index == 5


def test_resolve_without_schedule_column():
    fields = resolve({"NOME": "Ana"})
    assert fields.raw_column_index == -1


def test_resolve_alias_override():
    row = {"COLABORADOR": "Ana", "NOME": "ignored"}
    fields = resolve(row, {CanonicalField.NAME: ("COLABORADOR",)})
    assert fields.name == "Ana"


def test_containment_respects_word_boundaries():
    assert locate_column(["UNIDADE"], ["IDADE"]) is None
    assert locate_column(["IDADE"], ["IDENTIDADE"]) is None
    assert locate_column(["Nº CPF/MF"], ["CPF"]) == 0
