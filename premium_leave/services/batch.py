from __future__ import annotations

import logging
import math
import numbers
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from ..dates.normalizer import coerce_date, is_empty_marker
from ..models.employee_record import EmployeeRecord, Sex, TableFormat
from ..models.fields import CanonicalFields
from ..models.leave_period import LeavePeriod, PeriodKind, ScheduleStatus
from ..models.problem import (
    INVALID_DATE,
    INVALID_PERIOD,
    MISSING_NAME,
    SCHEDULE_AMBIGUOUS,
    SCHEDULE_UNRECOGNIZED,
    UNEXPECTED_ERROR,
    DataQualityProblem,
)
from ..models.statistics import LeaveStatistics
from ..models.thresholds import UrgencyThresholds
from .field_resolver import cell_text, find_column, get_field, get_value, resolve
from .period_generator import expand_range
from .schedule_parser import interpret_schedule, interpret_schedule_with_year
from .statistics import aggregate
from .table_format import detect_format, extract_header_years
from .urgency import UrgencyInputs, age_from_birth_date, classify, tenure_years

logger = logging.getLogger(__name__)

"""Batch processing of one sheet: rows in, classified records out.

The sheet format decides how a row becomes leave periods:
- GENERIC: free schedule text, one record per row
- PREMIUM_LEAVE: start-month / end-month columns, one record per row
- NEW: one leave block per row, rows grouped by CPF (or name when the CPF is
  blank) into one record per employee

Processing is a sequential fold. Every row is isolated: a failure becomes a
data-quality problem and the batch moves on. Only a row without an employee
name is dropped; rows whose schedule cannot be read still produce a record,
flagged ``schedule_parse_failed``.
"""

__all__ = [
    "BatchResult",
    "process_table",
]

AGE_ALIASES = ("IDADE",)
SEX_ALIASES = ("SEXO", "GENERO")
ADMISSION_ALIASES = ("ADMISSAO", "DATA DE ADMISSAO", "DT ADMISSAO", "EXERCICIO")
BIRTH_ALIASES = ("DN", "DATA DE NASCIMENTO", "NASCIMENTO", "DT NASC")
ACCRUED_ALIASES = ("MESES", "TOTAL DE MESES", "MESES DE LICENCA")

PREMIUM_START_ALIASES = ("INICIO DE LICENCA", "INICIO DA LICENCA")
PREMIUM_END_ALIASES = ("FINAL DE LICENCA", "FINAL DA LICENCA", "FIM DA LICENCA")

NEW_START_ALIASES = ("A PARTIR", "A PARTIR DE", "APARTIR", "INICIO")
NEW_END_ALIASES = ("TERMINO", "FINAL", "FIM")
LEAVE_DAYS_ALIASES = ("GOZO", "DIAS DE GOZO")
PROCESS_ALIASES = ("NUMERO", "NUMERO DO PROCESSO", "PROCESSO")
ISSUE_ALIASES = ("EMISSAO", "DATA DE EMISSAO")
ACQUISITIVE_START_ALIASES = ("AQUISITIVO INICIO", "INICIO AQUISITIVO")
ACQUISITIVE_END_ALIASES = ("AQUISITIVO FIM", "FIM AQUISITIVO")

DAYS_PER_LEAVE_MONTH = 30

_LEADING_NUMBER_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)")


@dataclass
class BatchResult:
    table_format: TableFormat
    records: list[EmployeeRecord]
    problems: list[DataQualityProblem]
    statistics: LeaveStatistics

    @property
    def has_problems(self) -> bool:
        return bool(self.problems)

    def to_dict(self) -> dict[str, Any]:
        return {
            "table_format": self.table_format.value,
            "records": [r.to_dict() for r in self.records],
            "problems": [
                {
                    "employee_name": p.employee_name,
                    "message": p.message,
                    "field": p.field,
                    "row": p.row,
                    "problem_type": p.problem_type,
                }
                for p in self.problems
            ],
            "statistics": self.statistics.to_dict(),
        }


@dataclass(frozen=True)
class _BatchContext:
    thresholds: UrgencyThresholds
    today: date
    header_years: Mapping[int, int]


@dataclass(frozen=True)
class _Profile:
    age_years: int
    sex: Sex
    admission_date: date | None
    birth_date: date | None


@dataclass
class _EmployeeGroup:
    fields: CanonicalFields
    profile: _Profile
    row: int
    accrued: int | None
    periods: list[LeavePeriod] = field(default_factory=list)
    invalid_rows: int = 0


RowBuilder = Callable[
    [Mapping[str, Any], int, _BatchContext],
    tuple[EmployeeRecord | None, list[DataQualityProblem]],
]


def _to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
        return None if math.isnan(number) else number
    # "45 anos", "30 dias", "'12,5'": só o número inicial conta
    text = cell_text(value).strip("\"'").replace(",", ".")
    m = _LEADING_NUMBER_RE.match(text)
    if not m:
        return None
    return float(m.group(1))


def _to_int(value: Any) -> int:
    number = _to_number(value)
    if number is None or number <= 0:
        return 0
    return math.floor(number)


def _accrued_months(row: Mapping[str, Any]) -> int | None:
    if find_column(row, ACCRUED_ALIASES) is None:
        return None
    number = _to_number(get_value(row, ACCRUED_ALIASES))
    if number is None:
        return None
    return max(0, math.floor(number))


def _as_mapping(headers: Sequence[Any], row: Any) -> dict[str, Any]:
    if isinstance(row, Mapping):
        # ordem dos cabeçalhos: header_years é indexado por posição
        ordered = {h: row.get(h) for h in headers}
        ordered.update((k, v) for k, v in row.items() if k not in ordered)
        return ordered
    cells = list(row)
    return {h: (cells[i] if i < len(cells) else None) for i, h in enumerate(headers)}


def _profile(row: Mapping[str, Any], today: date) -> _Profile:
    birth = coerce_date(get_value(row, BIRTH_ALIASES))
    age = _to_int(get_value(row, AGE_ALIASES))
    if age == 0:
        age = age_from_birth_date(birth, today)
    return _Profile(
        age_years=age,
        sex=Sex.parse(get_field(row, SEX_ALIASES)),
        admission_date=coerce_date(get_value(row, ADMISSION_ALIASES)),
        birth_date=birth,
    )


def _finish_record(
    fields: CanonicalFields,
    profile: _Profile,
    periods: list[LeavePeriod],
    *,
    schedule_text: str,
    status: ScheduleStatus,
    accrued: int | None,
    table_format: TableFormat,
    row: int,
    ctx: _BatchContext,
) -> EmployeeRecord:
    periods = sorted(periods, key=lambda p: p.start)
    used = sum(p.leave_months for p in periods if p.end < ctx.today)
    scheduled = sum(p.leave_months for p in periods if p.end >= ctx.today)
    total = accrued if accrued is not None else used + scheduled

    inputs = UrgencyInputs(
        age_years=profile.age_years,
        tenure_years=tenure_years(profile.admission_date, ctx.today),
        used_months=used,
        scheduled_months=scheduled,
        total_accrued_months=total,
        sex=profile.sex,
        birth_date=profile.birth_date,
    )
    return EmployeeRecord(
        fields=fields,
        age_years=profile.age_years,
        sex=profile.sex,
        admission_date=profile.admission_date,
        birth_date=profile.birth_date,
        total_accrued_months=total,
        periods=tuple(periods),
        schedule_text=schedule_text,
        schedule_status=status,
        schedule_parse_failed=status.is_failure,
        used_months=used,
        scheduled_months=scheduled,
        table_format=table_format,
        urgency_tier=classify(inputs, ctx.thresholds, ctx.today),
        row=row,
    )


def _missing_name(row_number: int) -> DataQualityProblem:
    return DataQualityProblem.create(
        None,
        "employee name is missing; row skipped",
        field="name",
        row=row_number,
        problem_type=MISSING_NAME,
    )


def _build_generic(
    row: Mapping[str, Any], row_number: int, ctx: _BatchContext
) -> tuple[EmployeeRecord | None, list[DataQualityProblem]]:
    fields = resolve(row)
    if not fields.name:
        return None, [_missing_name(row_number)]

    column: str | None = None
    text = ""
    if fields.raw_column_index >= 0:
        column = list(row.keys())[fields.raw_column_index]
        text = cell_text(row[column])

    header_year = ctx.header_years.get(fields.raw_column_index)
    if header_year is not None:
        interpretation = interpret_schedule_with_year(text, header_year)
    else:
        interpretation = interpret_schedule(text)

    problems: list[DataQualityProblem] = []
    if interpretation.failed:
        ambiguous = interpretation.status is ScheduleStatus.AMBIGUOUS
        reason = "ambiguous yearly schedule without a base year" if ambiguous else "schedule not recognized"
        logger.warning("row %d: %s for %s: %r", row_number, reason, fields.name, text)
        problems.append(
            DataQualityProblem.create(
                fields.name,
                f"{reason}: {text!r}",
                field=column,
                row=row_number,
                problem_type=SCHEDULE_AMBIGUOUS if ambiguous else SCHEDULE_UNRECOGNIZED,
            )
        )

    record = _finish_record(
        fields,
        _profile(row, ctx.today),
        list(interpretation.periods),
        schedule_text=text,
        status=interpretation.status,
        accrued=_accrued_months(row),
        table_format=TableFormat.GENERIC,
        row=row_number,
        ctx=ctx,
    )
    return record, problems


def _build_premium_leave(
    row: Mapping[str, Any], row_number: int, ctx: _BatchContext
) -> tuple[EmployeeRecord | None, list[DataQualityProblem]]:
    fields = resolve(row)
    if not fields.name:
        return None, [_missing_name(row_number)]

    start_text = get_field(row, PREMIUM_START_ALIASES)
    end_text = get_field(row, PREMIUM_END_ALIASES)
    problems: list[DataQualityProblem] = []
    periods: list[LeavePeriod] = []
    if not start_text and not end_text:
        status = ScheduleStatus.EMPTY
    else:
        periods = expand_range(start_text, end_text, today=ctx.today)
        status = ScheduleStatus.PARSED if periods else ScheduleStatus.INVALID

    if status is ScheduleStatus.INVALID:
        logger.warning(
            "row %d: unreadable leave range for %s: %r - %r", row_number, fields.name, start_text, end_text
        )
        problems.append(
            DataQualityProblem.create(
                fields.name,
                f"unreadable leave range: {start_text!r} - {end_text!r}",
                field=find_column(row, PREMIUM_START_ALIASES),
                row=row_number,
                problem_type=INVALID_PERIOD,
            )
        )

    record = _finish_record(
        fields,
        _profile(row, ctx.today),
        periods,
        schedule_text=f"{start_text} - {end_text}" if (start_text or end_text) else "",
        status=status,
        accrued=_accrued_months(row),
        table_format=TableFormat.PREMIUM_LEAVE,
        row=row_number,
        ctx=ctx,
    )
    return record, problems


def _new_format_period(
    row: Mapping[str, Any], row_number: int, name: str
) -> tuple[LeavePeriod | None, DataQualityProblem | None]:
    start_raw = get_value(row, NEW_START_ALIASES)
    end_raw = get_value(row, NEW_END_ALIASES)
    if is_empty_marker(start_raw) or is_empty_marker(end_raw):
        # 29/12/1899: linha sem licença
        return None, None
    if not cell_text(start_raw) and not cell_text(end_raw):
        return None, None

    start = coerce_date(start_raw)
    end = coerce_date(end_raw)
    days = _to_number(get_value(row, LEAVE_DAYS_ALIASES))
    if start is not None and end is None and days is not None and days >= 1:
        end = start + timedelta(days=int(days) - 1)

    if start is None or end is None or end < start:
        problem = DataQualityProblem.create(
            name,
            f"invalid leave dates: start={cell_text(start_raw)!r} end={cell_text(end_raw)!r}",
            field=find_column(row, NEW_START_ALIASES),
            row=row_number,
            problem_type=INVALID_DATE,
        )
        return None, problem

    process_number = get_field(row, PROCESS_ALIASES)
    period = LeavePeriod(
        start=start,
        end=end,
        kind=PeriodKind.PREMIUM_LEAVE,
        months_count=round(days / DAYS_PER_LEAVE_MONTH) if days is not None else None,
        source_text=f"{start:%d/%m/%Y} - {end:%d/%m/%Y}",
        process_number=process_number or None,
        issue_date=coerce_date(get_value(row, ISSUE_ALIASES)),
        acquisitive_start=coerce_date(get_value(row, ACQUISITIVE_START_ALIASES)),
        acquisitive_end=coerce_date(get_value(row, ACQUISITIVE_END_ALIASES)),
    )
    return period, None


def _process_rows(
    headers: Sequence[Any],
    rows: Sequence[Any],
    ctx: _BatchContext,
    builder: RowBuilder,
) -> tuple[list[EmployeeRecord], list[DataQualityProblem]]:
    records: list[EmployeeRecord] = []
    problems: list[DataQualityProblem] = []
    for row_number, raw in enumerate(rows, start=1):
        try:
            record, row_problems = builder(_as_mapping(headers, raw), row_number, ctx)
        except Exception as e:
            logger.warning("row %d: unexpected error: %s", row_number, e)
            problems.append(
                DataQualityProblem.create(
                    None, f"unexpected error: {e}", row=row_number, problem_type=UNEXPECTED_ERROR
                )
            )
            continue
        if record is not None:
            records.append(record)
        problems.extend(row_problems)
    return records, problems


def _process_grouped(
    headers: Sequence[Any],
    rows: Sequence[Any],
    ctx: _BatchContext,
) -> tuple[list[EmployeeRecord], list[DataQualityProblem]]:
    groups: dict[str, _EmployeeGroup] = {}
    problems: list[DataQualityProblem] = []

    for row_number, raw in enumerate(rows, start=1):
        try:
            row = _as_mapping(headers, raw)
            fields = resolve(row)
            if not fields.name:
                problems.append(_missing_name(row_number))
                continue
            key = fields.cpf or fields.name.upper()
            group = groups.get(key)
            if group is None:
                group = _EmployeeGroup(
                    fields=fields,
                    profile=_profile(row, ctx.today),
                    row=row_number,
                    accrued=_accrued_months(row),
                )
                groups[key] = group
            period, problem = _new_format_period(row, row_number, fields.name)
        except Exception as e:
            logger.warning("row %d: unexpected error: %s", row_number, e)
            problems.append(
                DataQualityProblem.create(
                    None, f"unexpected error: {e}", row=row_number, problem_type=UNEXPECTED_ERROR
                )
            )
            continue
        if problem is not None:
            logger.warning("row %d: %s", row_number, problem.message)
            group.invalid_rows += 1
            problems.append(problem)
        if period is not None:
            group.periods.append(period)

    records: list[EmployeeRecord] = []
    for group in groups.values():
        if group.periods:
            status = ScheduleStatus.PARSED
        elif group.invalid_rows:
            status = ScheduleStatus.INVALID
        else:
            status = ScheduleStatus.EMPTY
        try:
            records.append(
                _finish_record(
                    group.fields,
                    group.profile,
                    group.periods,
                    schedule_text="; ".join(p.source_text or "" for p in sorted(group.periods, key=lambda p: p.start)),
                    status=status,
                    accrued=group.accrued,
                    table_format=TableFormat.NEW,
                    row=group.row,
                    ctx=ctx,
                )
            )
        except Exception as e:
            logger.warning("employee %s: unexpected error: %s", group.fields.name, e)
            problems.append(
                DataQualityProblem.create(
                    group.fields.name, f"unexpected error: {e}", row=group.row, problem_type=UNEXPECTED_ERROR
                )
            )
    return records, problems


def process_table(
    headers: Sequence[Any],
    rows: Sequence[Any],
    thresholds: UrgencyThresholds,
    header_years: Mapping[int, int] | None = None,
    today: date | None = None,
) -> BatchResult:
    """Classify every employee of one sheet.

    Args:
        headers: Header names in sheet order
        rows: Data rows, either cell sequences aligned with ``headers`` or
            header -> value mappings
        thresholds: Eligibility rules for this batch (mandatory)
        header_years: Header position -> year hints; detected from the
            headers when None, pass ``{}`` to disable
        today: Reference date (defaults to today)

    Returns:
        BatchResult with records, data-quality problems and statistics

    Raises:
        TypeError: If thresholds is None
    """
    if thresholds is None:
        raise TypeError("urgency thresholds are required")
    header_list = list(headers)
    today = today or date.today()
    table_format = detect_format(header_list)
    if header_years is None:
        header_years = extract_header_years(header_list)
    ctx = _BatchContext(thresholds=thresholds, today=today, header_years=header_years)
    logger.debug("table format=%s rows=%d header_years=%s", table_format.value, len(rows), dict(header_years))

    if table_format is TableFormat.NEW:
        records, problems = _process_grouped(header_list, rows, ctx)
    elif table_format is TableFormat.PREMIUM_LEAVE:
        records, problems = _process_rows(header_list, rows, ctx, _build_premium_leave)
    else:
        records, problems = _process_rows(header_list, rows, ctx, _build_generic)

    return BatchResult(
        table_format=table_format,
        records=records,
        problems=problems,
        statistics=aggregate(records),
    )
