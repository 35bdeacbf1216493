from __future__ import annotations

from premium_leave.services.table_format import TableFormat, detect_format, extract_header_years


def test_new_format_by_process_columns():
    headers = ["SERVIDOR", "CPF", "Nº PROCESSO (NÚMERO)", "EMISSÃO", "A PARTIR", "TÉRMINO"]
    assert detect_format(headers) is TableFormat.NEW


def test_new_format_by_start_and_leave_days():
    headers = ["NOME", "A PARTIR DE", "DIAS DE GOZO"]
    assert detect_format(headers) is TableFormat.NEW


def test_premium_leave_format():
    headers = ["NOME", "DN", "SEXO", "Início de Licença", "Final de Licença"]
    assert detect_format(headers) is TableFormat.PREMIUM_LEAVE


def test_new_format_checked_before_premium_leave():
    headers = ["NOME", "INICIO DE LICENCA", "NUMERO", "EMISSAO"]
    assert detect_format(headers) is TableFormat.NEW


def test_generic_format_is_the_fallback():
    assert detect_format(["NOME", "CRONOGRAMA"]) is TableFormat.GENERIC
    assert detect_format([]) is TableFormat.GENERIC


def test_extract_header_years():
    headers = ["NOME", "LICENÇA 2026", None, "PREVISÃO 1999", "2026X", "COD 12026"]
    assert extract_header_years(headers) == {1: 2026, 3: 1999}
