"""CMN 4.966 stage classification."""

from ..core.contract import RiskStage


def classify_stage(days_overdue: int, is_restructured: bool = False,
                   observation_active: bool = False) -> RiskStage:
    """Stage from delinquency age, pinned to at least stage 2 under observation."""
    if days_overdue <= 30:
        stage = RiskStage.STAGE_1
    elif days_overdue <= 90:
        stage = RiskStage.STAGE_2
    else:
        stage = RiskStage.STAGE_3

    if is_restructured and observation_active:
        return max(stage, RiskStage.STAGE_2)
    return stage
