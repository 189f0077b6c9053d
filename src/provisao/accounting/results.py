"""Provision calculation outcomes."""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from ..core.contract import ClassificationRisk, RiskStage
from ..core.exceptions import ProvisionRuleNotFoundError


class Methodology(str, Enum):
    """Provisioning methodology applied to a contract."""

    EXPECTED_LOSS = "expected_loss"  # Annex II, up to 90 days
    INCURRED_LOSS = "incurred_loss"  # Annex I, beyond 90 days
    REGULATORY_MARK = "regulatory_mark"
    EXPECTED_CREDIT_LOSS = "expected_credit_loss"  # PD x LGD refinement


class ProvisionResult(BaseModel):
    """Provision for a single contract."""

    model_config = ConfigDict(frozen=True)

    percent: float = Field(ge=0, le=100, description="Provision as % of outstanding")
    amount: float = Field(ge=0, description="Provision amount")
    stage: RiskStage
    applied_rule_label: str
    observation_window_active: bool = False
    days_remaining_in_observation: int = Field(default=0, ge=0)

    methodology: Methodology
    contract_id: Optional[str] = None

    # Populated by the expected-credit-loss refinement
    probability_of_default: Optional[float] = Field(None, ge=0, le=100)
    loss_given_default: Optional[float] = Field(None, ge=0, le=100)
    baseline_percent: Optional[float] = Field(None, ge=0, le=100)

    @property
    def is_full_provision(self) -> bool:
        return self.percent >= 100.0


class NoRuleFound(BaseModel):
    """No table row covers the contract; returned instead of a silent 0%."""

    model_config = ConfigDict(frozen=True)

    methodology: Methodology
    days_overdue: int
    months_overdue: float
    classification: ClassificationRisk
    reason: str
    contract_id: Optional[str] = None

    def raise_for_absence(self) -> None:
        raise ProvisionRuleNotFoundError(self)


ProvisionOutcome = Union[ProvisionResult, NoRuleFound]


def unwrap(outcome: ProvisionOutcome) -> ProvisionResult:
    """Return the result, raising ProvisionRuleNotFoundError for the absence variant."""
    if isinstance(outcome, NoRuleFound):
        outcome.raise_for_absence()
    return outcome


def calculate_amount(outstanding_amount: float, percent: float) -> float:
    """Provision amount for a percentage of the outstanding balance, never above it."""
    if percent >= 100:
        return outstanding_amount
    return outstanding_amount * percent / 100
