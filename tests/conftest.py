# Shared pytest fixtures
from __future__ import annotations
import tempfile
from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from premium_leave.logging.init import reset_logging
from premium_leave.models.thresholds import UrgencyThresholds

REFERENCE_DATE = date(2026, 10, 19)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("PREMIUM_LEAVE_CONFIG", raising=False)
        monkeypatch.delenv("PREMIUM_LEAVE_REFERENCE_DATE", raising=False)
        yield p


@pytest.fixture()
def today() -> date:
    return REFERENCE_DATE


@pytest.fixture()
def thresholds() -> UrgencyThresholds:
    return UrgencyThresholds()


@pytest.fixture()
def clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """thresholds:
  mandatory_retirement_age: 75
  min_points_male: 102
  min_points_female: 92
  min_age_male: 63
  min_age_female: 58
  critical_max_months: 24
  high_max_months: 60
  moderate_max_months: 84
reader:
  sheet_name: null
  header_row: 1
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "premium_leave.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def generic_headers() -> list[str]:
    return ["NOME", "CPF", "CARGO", "LOTAÇÃO", "IDADE", "SEXO", "ADMISSÃO", "MESES", "CRONOGRAMA"]


@pytest.fixture()
def generic_rows() -> list[list[object]]:
    return [
        ["Ana Souza", "111.222.333-44", "Professora", "SEDUC", 60, "F", "01/02/1995", 6,
         "Início em 01/2027 (3 meses consecutivos)"],
        ["Bruno Lima", "222.333.444-55", "Analista", "SEFAZ", 45, "M", "15/03/2010", 3,
         "jan/2030 uma por ano"],
        ["Carla Dias", "333.444.555-66", "Técnica", "SESAU", 52, "F", "10/10/2001", 2,
         "um mês a cada ano"],
        ["Diego Alves", "444.555.666-77", "Motorista", "SEINF", 38, "M", "01/06/2015", 0, ""],
    ]


@pytest.fixture()
def make_excel():
    """Write rows (first one is the header) to an xlsx file without pandas headers."""
    def _make(path: Path, rows: list[list[object]], sheet: str = "Plan1") -> Path:
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _make
