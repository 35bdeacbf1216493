from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""DataQualityProblem model for the problem log.

A problem is raised for every row that failed canonical-field extraction or
schedule interpretation. It supports ``row=-1`` for file-level problems where
no specific data row applies (unreadable file, missing header row).

Serialized as one JSON Lines record with a fixed key set.
"""

__all__ = [
    "DataQualityProblem",
    "MISSING_NAME",
    "SCHEDULE_AMBIGUOUS",
    "SCHEDULE_UNRECOGNIZED",
    "INVALID_PERIOD",
    "INVALID_DATE",
    "FILE_READ_ERROR",
    "UNEXPECTED_ERROR",
]

MISSING_NAME = "MISSING_NAME"
SCHEDULE_AMBIGUOUS = "SCHEDULE_AMBIGUOUS"
SCHEDULE_UNRECOGNIZED = "SCHEDULE_UNRECOGNIZED"
INVALID_PERIOD = "INVALID_PERIOD"
INVALID_DATE = "INVALID_DATE"
FILE_READ_ERROR = "FILE_READ_ERROR"
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


@dataclass(frozen=True)
class DataQualityProblem:
    """Structured data-quality problem.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        employee_name: Name of the affected employee, None when unknown
        message: Human-readable description
        field: Column or field involved, None when not field-specific
        row: Data row number (1-based). Use -1 for file-level problems
        problem_type: Classification in UPPER_SNAKE_CASE format
        source: File the row came from ('' when processing in memory)
    """
    timestamp: str  # ISO8601 UTC
    employee_name: str | None
    message: str
    field: str | None
    row: int  # -1 para problemas do arquivo inteiro
    problem_type: str  # UPPER_SNAKE
    source: str = ""

    @staticmethod
    def create(
        employee_name: str | None,
        message: str,
        *,
        field: str | None = None,
        row: int = -1,
        problem_type: str = UNEXPECTED_ERROR,
        source: str = "",
    ) -> DataQualityProblem:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return DataQualityProblem(
            timestamp=ts,
            employee_name=employee_name,
            message=message,
            field=field,
            row=row,
            problem_type=problem_type,
            source=source,
        )

    def with_source(self, source: str) -> DataQualityProblem:
        return DataQualityProblem(
            timestamp=self.timestamp,
            employee_name=self.employee_name,
            message=self.message,
            field=self.field,
            row=self.row,
            problem_type=self.problem_type,
            source=source,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
