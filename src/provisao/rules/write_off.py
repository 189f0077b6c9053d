"""Write-off eligibility by delinquency age."""

from ..core.contract import ClassificationRisk

WRITE_OFF_MONTHS = {
    ClassificationRisk.C1: 36,
    ClassificationRisk.C2: 36,
    ClassificationRisk.C3: 24,
    ClassificationRisk.C4: 24,
    ClassificationRisk.C5: 18,
}


def advise_write_off(days_overdue: int, classification: ClassificationRisk) -> bool:
    """Advisory flag for full write-off; has no effect on the provision."""
    return days_overdue / 30 >= WRITE_OFF_MONTHS[ClassificationRisk(classification)]


def months_until_write_off(days_overdue: int, classification: ClassificationRisk) -> float:
    """Months left before the contract becomes eligible for write-off (0 when eligible)."""
    remaining = WRITE_OFF_MONTHS[ClassificationRisk(classification)] - days_overdue / 30
    return max(0.0, remaining)
