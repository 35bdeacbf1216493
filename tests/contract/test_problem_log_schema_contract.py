from __future__ import annotations

import json

import jsonschema
import pytest
from jsonschema.exceptions import ValidationError

from premium_leave.logging.problem_log import SCHEMA_PATH, ProblemLogBuffer
from premium_leave.models.problem import (
    FILE_READ_ERROR,
    INVALID_DATE,
    MISSING_NAME,
    SCHEDULE_AMBIGUOUS,
    DataQualityProblem,
)

"""Problem log JSON Lines contract: fixed key set, one record per line."""

EXPECTED_KEYS = {"timestamp", "employee_name", "message", "field", "row", "problem_type", "source"}


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_valid_example():
    record = {
        "timestamp": "2026-10-19T12:00:00Z",
        "employee_name": "Carla Dias",
        "message": "ambiguous yearly schedule without a base year: 'um mês a cada ano'",
        "field": "CRONOGRAMA",
        "row": 3,
        "problem_type": SCHEDULE_AMBIGUOUS,
        "source": "servidores.xlsx",
    }
    jsonschema.validate(record, _schema())


def test_schema_rejects_extra_key():
    record = {
        "timestamp": "2026-10-19T12:00:00Z",
        "employee_name": None,
        "message": "x",
        "field": None,
        "row": -1,
        "problem_type": FILE_READ_ERROR,
        "source": "",
        "extra": "not allowed",
    }
    with pytest.raises(ValidationError):
        jsonschema.validate(record, _schema())


def test_schema_rejects_lowercase_problem_type():
    record = {
        "timestamp": "2026-10-19T12:00:00Z",
        "employee_name": None,
        "message": "x",
        "field": None,
        "row": 1,
        "problem_type": "invalid_date",
        "source": "",
    }
    with pytest.raises(ValidationError):
        jsonschema.validate(record, _schema())


def test_flushed_lines_match_schema(tmp_path):
    buf = ProblemLogBuffer(tmp_path)
    buf.extend([
        DataQualityProblem.create("Carla", "ambígua", field="CRONOGRAMA", row=3, problem_type=SCHEDULE_AMBIGUOUS),
        DataQualityProblem.create(None, "nome ausente", field="name", row=5, problem_type=MISSING_NAME),
        DataQualityProblem.create("Ana", "data inválida", row=2, problem_type=INVALID_DATE, source="a.csv"),
        DataQualityProblem.create(None, "cannot read", problem_type=FILE_READ_ERROR, source="b.xlsx"),
    ])
    schema = _schema()
    for line in buf.flush().read_text(encoding="utf-8").splitlines():
        record = json.loads(line)
        assert set(record) == EXPECTED_KEYS
        jsonschema.validate(record, schema)
