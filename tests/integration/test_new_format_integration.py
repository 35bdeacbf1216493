from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

from premium_leave.excel.reader import read_table
from premium_leave.models.employee_record import TableFormat, UrgencyTier
from premium_leave.models.leave_period import ScheduleStatus
from premium_leave.services.batch import process_table

"""Process-oriented workbook: one leave block per row, grouped per employee."""

HEADERS = ["SERVIDOR", "CPF", "NÚMERO", "EMISSÃO", "A PARTIR", "TÉRMINO", "GOZO", "IDADE", "SEXO", "DN"]


def test_new_format_workbook(tmp_path: Path, make_excel, thresholds, today):
    path = make_excel(tmp_path / "processos.xlsx", [
        HEADERS,
        # serial 46082 = 01/03/2026, 46111 = 30/03/2026
        ["Ana Souza", "111.222.333-44", "P-2026/001", datetime(2026, 2, 1), 46082, 46111, 30, 60, "F", None],
        ["Ana Souza", "111.222.333-44", "P-2026/002", datetime(2026, 8, 1), datetime(2026, 11, 1), None, 90, 60,
         "F", None],
        ["Bruno Lima", "222.333.444-55", None, None, "29/12/1899", "29/12/1899", None, 50, "M", None],
        ["Eva Rocha", "555.666.777-88", "P-2026/003", None, datetime(2027, 1, 4), datetime(2027, 2, 2), 30, None,
         "F", datetime(1952, 1, 1)],
    ])

    table = read_table(path)
    result = process_table(table.headers, table.rows, thresholds, table.header_years, today=today)

    assert result.table_format is TableFormat.NEW
    assert not result.problems
    ana, bruno, eva = result.records

    first, second = ana.periods
    assert (first.start, first.end) == (date(2026, 3, 1), date(2026, 3, 30))
    assert first.process_number == "P-2026/001"
    assert first.issue_date == date(2026, 2, 1)
    assert (second.start, second.end) == (date(2026, 11, 1), date(2027, 1, 29))
    assert (ana.used_months, ana.scheduled_months, ana.total_accrued_months) == (1, 3, 4)
    assert ana.urgency_tier is UrgencyTier.LOW

    assert bruno.periods == ()
    assert bruno.schedule_status is ScheduleStatus.EMPTY

    assert eva.age_years == 74
    assert eva.birth_date == date(1952, 1, 1)
    assert eva.urgency_tier is UrgencyTier.CRITICAL

    assert result.statistics.total_by_tier == {"Critical": 1, "High": 0, "Moderate": 0, "Low": 2}
