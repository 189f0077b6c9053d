"""Regulatory 100% provisioning marks (CMN 4.966 Art. 49, BCB 352 Annex I)."""

from pydantic import BaseModel, ConfigDict

from ..core.contract import ClassificationRisk

# Months overdue at which each classification must be provisioned in full.
FULL_PROVISION_MONTHS = {
    ClassificationRisk.C1: 21,
    ClassificationRisk.C2: 21,
    ClassificationRisk.C3: 15,
    ClassificationRisk.C4: 15,
    ClassificationRisk.C5: 15,
}


class MarkOverride(BaseModel):
    """Outcome of the regulatory mark check."""

    model_config = ConfigDict(frozen=True)

    applies: bool
    detail: str = ""


def check_regulatory_mark(days_overdue: int, classification: ClassificationRisk) -> MarkOverride:
    """Check whether the contract has reached its full-provision mark.

    The mark takes precedence over every other rule: once it applies the
    provision is 100% whatever the tables or the expected-loss model say.
    """
    classification = ClassificationRisk(classification)
    months = days_overdue / 30
    threshold = FULL_PROVISION_MONTHS[classification]

    if months >= threshold:
        return MarkOverride(
            applies=True,
            detail=(
                f"Regulatory mark: {classification.value} at {months:.1f} months overdue "
                f"(>= {threshold} months) requires 100% provision"
            ),
        )
    return MarkOverride(applies=False)
