"""Provisioning milestone alerts.

A contract's provision climbs through milestones (50%, 60%, ... 100%) as it
ages. Reporting collaborators compare the latest percent with the previous
snapshot they stored and surface an alert when a milestone is crossed.

The same percent places the contract in a negotiation moment and sizes a
settlement proposal: the unprovisioned balance below 90%, a flat 10% of the
balance from there on.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict
import logging

logger = logging.getLogger(__name__)

PROVISIONING_MILESTONES = (50, 60, 70, 80, 90, 100)
PREMIUM_THRESHOLD = 90.0
TOTAL_THRESHOLD = 100.0
SETTLEMENT_FLOOR_SHARE = 0.10


class AlertType(str, Enum):
    """Kinds of provisioning alerts, least to most severe."""

    MILESTONE_CHANGE = "milestone_change"
    PREMIUM_MOMENT = "premium_moment"
    TOTAL_PROVISION = "total_provision"


class NegotiationMoment(str, Enum):
    """Negotiation leverage given how much of a balance is already provisioned."""

    INITIAL = "inicial"
    FAVORABLE = "favoravel"
    VERY_FAVORABLE = "muito_favoravel"
    OPTIMAL = "otimo"
    PREMIUM = "premium"
    TOTAL = "total"


# Lower bound of each moment, highest first
NEGOTIATION_THRESHOLDS = (
    (TOTAL_THRESHOLD, NegotiationMoment.TOTAL),
    (PREMIUM_THRESHOLD, NegotiationMoment.PREMIUM),
    (70.0, NegotiationMoment.OPTIMAL),
    (50.0, NegotiationMoment.VERY_FAVORABLE),
    (30.0, NegotiationMoment.FAVORABLE),
)


class ProvisionAlert(BaseModel):
    """Alert raised when a contract's provision crosses a milestone."""

    model_config = ConfigDict(frozen=True)

    alert_type: AlertType
    previous_percent: float
    current_percent: float
    previous_milestone: Optional[int] = None
    current_milestone: Optional[int] = None
    contract_id: Optional[str] = None

    @property
    def message(self) -> str:
        subject = f"Contract {self.contract_id}" if self.contract_id else "Contract"
        if self.alert_type == AlertType.TOTAL_PROVISION:
            return f"{subject} reached 100% provision"
        if self.alert_type == AlertType.PREMIUM_MOMENT:
            return f"{subject} reached {self.current_percent:.0f}% provision"
        return (
            f"{subject} moved from the {self.previous_milestone or 0}% "
            f"to the {self.current_milestone}% provisioning milestone"
        )


def provisioning_milestone(percent: float) -> Optional[int]:
    """Highest milestone reached by a provision percent, or None below 50%."""
    reached = [m for m in PROVISIONING_MILESTONES if percent >= m]
    return reached[-1] if reached else None


def check_provision_alert(previous_percent: Optional[float], current_percent: float,
                          contract_id: Optional[str] = None) -> Optional[ProvisionAlert]:
    """Compare two provision snapshots and return the most severe alert, if any."""
    if previous_percent is None:
        return None

    previous_milestone = provisioning_milestone(previous_percent)
    current_milestone = provisioning_milestone(current_percent)

    if current_percent >= TOTAL_THRESHOLD > previous_percent:
        alert_type = AlertType.TOTAL_PROVISION
    elif current_percent >= PREMIUM_THRESHOLD > previous_percent:
        alert_type = AlertType.PREMIUM_MOMENT
    elif current_milestone is not None and current_milestone != previous_milestone:
        alert_type = AlertType.MILESTONE_CHANGE
    else:
        return None

    logger.debug(f"Alert {alert_type.value} for contract {contract_id}: "
                 f"{previous_percent:.1f}% -> {current_percent:.1f}%")

    return ProvisionAlert(
        alert_type=alert_type,
        previous_percent=previous_percent,
        current_percent=current_percent,
        previous_milestone=previous_milestone,
        current_milestone=current_milestone,
        contract_id=contract_id,
    )


def negotiation_moment(percent: float) -> NegotiationMoment:
    """Negotiation moment for a provision percent."""
    for threshold, moment in NEGOTIATION_THRESHOLDS:
        if percent >= threshold:
            return moment
    return NegotiationMoment.INITIAL


def settlement_proposal(outstanding_amount: float, percent: float) -> float:
    """Settlement amount to propose for a balance provisioned at percent.

    Below the premium threshold the proposal is the part of the balance the
    creditor has not provisioned yet. From 90% on it is a flat 10% of the
    balance.
    """
    if outstanding_amount < 0:
        raise ValueError("outstanding_amount must be non-negative")
    if percent >= PREMIUM_THRESHOLD:
        return outstanding_amount * SETTLEMENT_FLOOR_SHARE
    return outstanding_amount - outstanding_amount * percent / 100
