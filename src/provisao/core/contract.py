"""Contract snapshot definitions for the provisioning engine."""

import math
from enum import Enum, IntEnum
from typing import Optional
from datetime import date
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClassificationRisk(str, Enum):
    """BCB 352 portfolio classification, C1 (lowest risk) to C5 (highest)."""

    C1 = "C1"
    C2 = "C2"
    C3 = "C3"
    C4 = "C4"
    C5 = "C5"

    @property
    def severity(self) -> int:
        """Ordinal severity, 1 for C1 up to 5 for C5."""
        return int(self.value[1])

    @property
    def position(self) -> int:
        """Column of the tier in fixed-size percentage rows."""
        return self.severity - 1


class RiskStage(IntEnum):
    """CMN 4.966 credit-risk stage."""

    STAGE_1 = 1  # No significant increase in credit risk
    STAGE_2 = 2  # Significant increase in credit risk
    STAGE_3 = 3  # Credit-impaired (problem asset)


class OperationType(str, Enum):
    """Credit operation types as recorded on the contract."""

    CREDIT_CARD = "credit_card"
    OVERDRAFT = "overdraft"
    PERSONAL_LOAN = "personal_loan"
    PAYROLL_LOAN = "payroll_loan"
    WORKING_CAPITAL = "working_capital"
    BUSINESS_CCB = "business_ccb"
    VEHICLE_FINANCING = "vehicle_financing"
    LEASING = "leasing"
    OTHER = "other"


OPERATION_CLASSIFICATION = {
    OperationType.CREDIT_CARD: ClassificationRisk.C1,
    OperationType.OVERDRAFT: ClassificationRisk.C1,
    OperationType.PERSONAL_LOAN: ClassificationRisk.C1,
    OperationType.PAYROLL_LOAN: ClassificationRisk.C2,
    OperationType.WORKING_CAPITAL: ClassificationRisk.C3,
    OperationType.BUSINESS_CCB: ClassificationRisk.C3,
    OperationType.VEHICLE_FINANCING: ClassificationRisk.C4,
    OperationType.LEASING: ClassificationRisk.C4,
    OperationType.OTHER: ClassificationRisk.C5,
}


def classification_for_operation(operation_type: OperationType) -> ClassificationRisk:
    """Assign the BCB 352 portfolio for an operation type."""
    return OPERATION_CLASSIFICATION[OperationType(operation_type)]


def days_overdue_from_due_date(due_date: date, today: Optional[date] = None) -> int:
    """Days elapsed since the due date, never negative."""
    today = today or date.today()
    return max(0, (today - due_date).days)


def days_to_months(days: int) -> float:
    """Convert days overdue to months, rounded to one decimal for display."""
    return round(days / 30, 1)


class ContractSnapshot(BaseModel):
    """Immutable view of a contract as needed by the calculators."""

    model_config = ConfigDict(frozen=True)

    contract_id: Optional[str] = None

    outstanding_amount: float = Field(ge=0, description="Outstanding balance")
    days_overdue: int = Field(ge=0, description="Days past due")
    classification: ClassificationRisk

    # Restructuring
    is_restructured: bool = False
    restructuring_date: Optional[date] = None

    # Collateral
    has_real_collateral: bool = False
    collateral_value: Optional[float] = Field(None, ge=0)

    # Carried through from the contract record, not used in provisioning
    effective_annual_rate: Optional[float] = None

    @field_validator("outstanding_amount")
    @classmethod
    def validate_amount(cls, v: float) -> float:
        """Reject non-finite balances."""
        if not math.isfinite(v):
            raise ValueError("Outstanding amount must be a finite number")
        return v

    @property
    def months_overdue(self) -> float:
        """Unrounded months overdue (days / 30)."""
        return self.days_overdue / 30

    @classmethod
    def from_operation(cls, operation_type: OperationType, **fields) -> "ContractSnapshot":
        """Build a snapshot whose classification comes from the operation type."""
        return cls(classification=classification_for_operation(operation_type), **fields)
