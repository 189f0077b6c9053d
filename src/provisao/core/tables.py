"""Regulatory provisioning tables (BCB 352/2023 Annexes I and II)."""

from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
import pandas as pd
import logging

from .contract import ClassificationRisk

logger = logging.getLogger(__name__)

# Five cells, C1..C5 order. None marks a cell the data owner left unset.
PercentRow = Tuple[
    Optional[float], Optional[float], Optional[float], Optional[float], Optional[float]
]

EXPECTED_LOSS_DOMAIN_DAYS = (0, 90)
INCURRED_LOSS_DOMAIN_DAYS = (91, 630)
INCURRED_LOSS_DOMAIN_MONTHS = (3.0, 21.0)


def _check_percent_row(row: PercentRow) -> PercentRow:
    for value in row:
        if value is not None and not (0.0 <= value <= 100.0):
            raise ValueError(f"Provision percentages must be within [0, 100], got {value}")
    return row


class IncurredLossCriterion(str, Enum):
    """Unit in which an incurred-loss row expresses its range."""

    DAYS_OVERDUE = "days_overdue"
    MONTHS_OVERDUE = "months_overdue"


class ExpectedLossRule(BaseModel):
    """One row of the expected-loss table (Annex II), in days overdue."""

    model_config = ConfigDict(frozen=True)

    days_range_start: int = Field(ge=0)
    days_range_end: int = Field(ge=0)
    percent_by_classification: PercentRow
    label: Optional[str] = None

    @field_validator("percent_by_classification")
    @classmethod
    def validate_percents(cls, v: PercentRow) -> PercentRow:
        return _check_percent_row(v)

    @model_validator(mode="after")
    def validate_range(self) -> "ExpectedLossRule":
        if self.days_range_end < self.days_range_start:
            raise ValueError("days_range_end must not precede days_range_start")
        return self

    def contains(self, days_overdue: float) -> bool:
        return self.days_range_start <= days_overdue <= self.days_range_end

    @property
    def display_name(self) -> str:
        return self.label or f"{self.days_range_start}-{self.days_range_end} days"


class IncurredLossRule(BaseModel):
    """One row of the incurred-loss table (Annex I).

    Day-criterion rows are closed integer ranges (91-120, 121-150, ...).
    Month-criterion rows are half-open, (3, 4], (4, 5], ..., so consecutive
    rows chain on a shared end and every month value falls in exactly one
    row. Set start_inclusive to close the lower bound of a month row.
    """

    model_config = ConfigDict(frozen=True)

    criterion: IncurredLossCriterion
    range_start: float = Field(ge=0)
    range_end: float = Field(ge=0)
    percent_by_classification: PercentRow
    label: Optional[str] = None
    start_inclusive: Optional[bool] = None

    @field_validator("percent_by_classification")
    @classmethod
    def validate_percents(cls, v: PercentRow) -> PercentRow:
        return _check_percent_row(v)

    @model_validator(mode="after")
    def validate_range(self) -> "IncurredLossRule":
        if self.range_end < self.range_start:
            raise ValueError("range_end must not precede range_start")
        if self.criterion == IncurredLossCriterion.DAYS_OVERDUE:
            if not (float(self.range_start).is_integer() and float(self.range_end).is_integer()):
                raise ValueError("Day-criterion bounds must be whole days")
            if self.start_inclusive is False:
                raise ValueError("Day-criterion rows are closed ranges")
        return self

    @property
    def includes_start(self) -> bool:
        if self.start_inclusive is not None:
            return self.start_inclusive
        return self.criterion == IncurredLossCriterion.DAYS_OVERDUE

    def contains(self, value: float) -> bool:
        if self.includes_start:
            return self.range_start <= value <= self.range_end
        return self.range_start < value <= self.range_end

    @property
    def display_name(self) -> str:
        if self.label:
            return self.label
        unit = "days" if self.criterion == IncurredLossCriterion.DAYS_OVERDUE else "months"
        return f"{self.range_start:g}-{self.range_end:g} {unit}"


class RegulatoryTables(BaseModel):
    """Versioned pair of regulatory tables, read-only for a calculation."""

    model_config = ConfigDict(frozen=True)

    version: str = "unversioned"
    expected_loss: Tuple[ExpectedLossRule, ...] = ()
    incurred_loss: Tuple[IncurredLossRule, ...] = ()

    def incurred_rows(self, criterion: IncurredLossCriterion) -> List[IncurredLossRule]:
        """Incurred-loss rows for one criterion, in table order."""
        return [row for row in self.incurred_loss if row.criterion == criterion]

    def validate_tables(self, include_incurred_monotonicity: bool = False) -> List[str]:
        """Check coverage and ordering of both tables and return a list of issues.

        Expected-loss rows must tile [0, 90] days. Incurred-loss rows must tile
        91-630 days (day criterion) or (3, 21] months (month criterion, half-open
        rows chaining on their ends). Percentages must not decrease from
        C1 to C5 within an expected-loss row; the published Annex I data is
        not monotone between C3 and C4, so that check is opt-in there.
        """
        issues = []

        if not self.expected_loss:
            issues.append("Expected-loss table is empty")
        else:
            issues.extend(_discrete_coverage_issues(
                "Expected-loss",
                [(r.days_range_start, r.days_range_end) for r in self.expected_loss],
                EXPECTED_LOSS_DOMAIN_DAYS,
            ))
            for row in self.expected_loss:
                issues.extend(_monotonicity_issues("Expected-loss", row.display_name,
                                                   row.percent_by_classification))

        if not self.incurred_loss:
            issues.append("Incurred-loss table is empty")

        day_rows = self.incurred_rows(IncurredLossCriterion.DAYS_OVERDUE)
        if day_rows:
            issues.extend(_discrete_coverage_issues(
                "Incurred-loss (days)",
                [(int(r.range_start), int(r.range_end)) for r in day_rows],
                INCURRED_LOSS_DOMAIN_DAYS,
            ))

        month_rows = self.incurred_rows(IncurredLossCriterion.MONTHS_OVERDUE)
        if month_rows:
            issues.extend(_continuous_coverage_issues(
                "Incurred-loss (months)",
                [(r.range_start, r.range_end, r.includes_start) for r in month_rows],
                INCURRED_LOSS_DOMAIN_MONTHS,
            ))

        if include_incurred_monotonicity:
            for row in self.incurred_loss:
                issues.extend(_monotonicity_issues("Incurred-loss", row.display_name,
                                                   row.percent_by_classification))

        if issues:
            logger.debug(f"Table version {self.version} has {len(issues)} issue(s)")
        return issues

    def to_frame(self) -> pd.DataFrame:
        """Flatten both tables into a DataFrame for reporting."""
        records = []
        for row in self.expected_loss:
            records.append({
                "table": "expected_loss",
                "criterion": IncurredLossCriterion.DAYS_OVERDUE.value,
                "range_start": row.days_range_start,
                "range_end": row.days_range_end,
                "label": row.display_name,
                **_percent_columns(row.percent_by_classification),
            })
        for row in self.incurred_loss:
            records.append({
                "table": "incurred_loss",
                "criterion": row.criterion.value,
                "range_start": row.range_start,
                "range_end": row.range_end,
                "label": row.display_name,
                **_percent_columns(row.percent_by_classification),
            })

        columns = ["table", "criterion", "range_start", "range_end", "label"] + [
            c.value for c in ClassificationRisk
        ]
        return pd.DataFrame.from_records(records, columns=columns)


def _percent_columns(row: PercentRow) -> dict:
    return {c.value: row[c.position] for c in ClassificationRisk}


def _discrete_coverage_issues(name: str, ranges: List[Tuple[int, int]],
                              domain: Tuple[int, int]) -> List[str]:
    """Integer ranges must follow each other with no gap and no shared day."""
    issues = []
    start, end = domain
    cursor = start

    for range_start, range_end in ranges:
        if range_start > cursor:
            issues.append(f"{name} table has a gap at {cursor}-{range_start - 1}")
        elif range_start < cursor:
            issues.append(f"{name} table rows overlap at {range_start}-{min(cursor - 1, range_end)}")
        cursor = max(cursor, range_end + 1)

    if cursor <= end:
        issues.append(f"{name} table does not cover {cursor}-{end}")
    return issues


def _continuous_coverage_issues(name: str, ranges: List[Tuple[float, float, bool]],
                                domain: Tuple[float, float]) -> List[str]:
    """Rows must chain end-to-start over (start, end] of the domain.

    Row ends are closed. A row whose start is closed and equals the previous
    row's end shares that point with it and is reported as an overlap.
    """
    issues = []
    start, end = domain
    cursor = start
    cursor_covered = False

    for range_start, range_end, includes_start in ranges:
        if range_start > cursor:
            issues.append(f"{name} table has a gap at {cursor:g}-{range_start:g}")
        elif range_start < cursor:
            issues.append(f"{name} table rows overlap at {range_start:g}-{min(cursor, range_end):g}")
        elif includes_start and cursor_covered:
            issues.append(f"{name} table rows overlap at {range_start:g}")
        if range_end >= cursor:
            cursor = range_end
            cursor_covered = True

    if cursor < end:
        issues.append(f"{name} table does not cover {cursor:g}-{end:g}")
    return issues


def _monotonicity_issues(name: str, row_name: str, row: PercentRow) -> List[str]:
    issues = []
    classifications = list(ClassificationRisk)
    for lower, higher in zip(classifications, classifications[1:]):
        low_value = row[lower.position]
        high_value = row[higher.position]
        if low_value is None or high_value is None:
            continue
        if high_value < low_value:
            issues.append(
                f"{name} row {row_name}: {higher.value} ({high_value}) "
                f"below {lower.value} ({low_value})"
            )
    return issues
