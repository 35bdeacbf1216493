from __future__ import annotations

from premium_leave.services.batch import process_table
from premium_leave.services.summary import render_summary_line


def test_render_empty_run():
    assert render_summary_line(0, []) == (
        "SUMMARY files=0 employees=0 problems=0 critical=0 high=0 moderate=0 low=0 parse_failures=0"
    )


def test_render_adds_up_batches_and_file_problems(generic_headers, generic_rows, thresholds, today):
    first = process_table(generic_headers, generic_rows, thresholds, today=today)
    second = process_table(["NOME", "IDADE"], [["Eva", 74]], thresholds, today=today)

    line = render_summary_line(3, [first, second], file_problems=1)
    assert line == (
        "SUMMARY files=3 employees=5 problems=2 critical=1 high=0 moderate=0 low=4 parse_failures=1"
    )
