"""Expected credit loss refinement (PD x LGD) over the tabular provision."""

from datetime import date
from typing import Dict, Optional
import logging

from ..core.config import ProvisioningConfig, REGULATION_VERSION
from ..core.contract import ClassificationRisk, ContractSnapshot, RiskStage
from ..core.tables import RegulatoryTables
from ..rules.observation import (
    OBSERVATION_LABEL,
    apply_observation_floor,
    check_observation_window,
)
from ..rules.override import check_regulatory_mark
from ..rules.staging import classify_stage
from .basic import BasicProvisionCalculator
from .results import (
    Methodology,
    NoRuleFound,
    ProvisionOutcome,
    ProvisionResult,
    calculate_amount,
)

logger = logging.getLogger(__name__)

# Calibration constants, in percent. Changing them is a data update tagged
# with PARAMETERS_VERSION, not a change to the calculation.
PARAMETERS_VERSION = REGULATION_VERSION

# Base PD (%) by stage and classification
PD_BASE_MATRIX: Dict[RiskStage, Dict[ClassificationRisk, float]] = {
    RiskStage.STAGE_1: {
        ClassificationRisk.C1: 1.4,
        ClassificationRisk.C2: 1.6,
        ClassificationRisk.C3: 2.0,
        ClassificationRisk.C4: 2.4,
        ClassificationRisk.C5: 3.0,
    },
    RiskStage.STAGE_2: {
        ClassificationRisk.C1: 10.5,
        ClassificationRisk.C2: 12.0,
        ClassificationRisk.C3: 15.0,
        ClassificationRisk.C4: 18.0,
        ClassificationRisk.C5: 22.5,
    },
    RiskStage.STAGE_3: {
        ClassificationRisk.C1: 63.0,
        ClassificationRisk.C2: 72.0,
        ClassificationRisk.C3: 90.0,
        ClassificationRisk.C4: 100.0,
        ClassificationRisk.C5: 100.0,
    },
}

# Base recovery rate (%) by classification
BASE_RECOVERY_RATE: Dict[ClassificationRisk, float] = {
    ClassificationRisk.C1: 65.0,
    ClassificationRisk.C2: 55.0,
    ClassificationRisk.C3: 45.0,
    ClassificationRisk.C4: 35.0,
    ClassificationRisk.C5: 25.0,
}

MAX_COLLATERAL_RECOVERY_BONUS = 30.0
MIN_RECOVERY_RATE = 10.0
MAX_RECOVERY_RATE = 95.0


def probability_of_default(stage: RiskStage, classification: ClassificationRisk,
                           override_applies: bool = False) -> float:
    """PD (%) from the base matrix; 100 once the regulatory mark applies."""
    if override_applies:
        return 100.0
    return PD_BASE_MATRIX[RiskStage(stage)][ClassificationRisk(classification)]


def recovery_rate(snapshot: ContractSnapshot) -> float:
    """Recovery rate (%) adjusted for real collateral and clamped to [10, 95]."""
    recovery = BASE_RECOVERY_RATE[snapshot.classification]

    collateral_value = snapshot.collateral_value or 0.0
    if snapshot.has_real_collateral and collateral_value > 0:
        if snapshot.outstanding_amount > 0:
            coverage = min(1.0, collateral_value / snapshot.outstanding_amount)
        else:
            coverage = 1.0
        recovery += min(MAX_COLLATERAL_RECOVERY_BONUS, coverage * MAX_COLLATERAL_RECOVERY_BONUS)

    return max(MIN_RECOVERY_RATE, min(MAX_RECOVERY_RATE, recovery))


def loss_given_default(snapshot: ContractSnapshot) -> float:
    """LGD (%) = 100 - recovery rate."""
    return 100.0 - recovery_rate(snapshot)


class AdvancedProvisionCalculator:
    """
    Expected credit loss calculator.

    Estimates EL = PD x LGD and keeps the larger of the estimate and the
    tabular provision, so the refinement can only add to the regulatory
    minimum. The regulatory 100% mark still short-circuits everything.
    """

    def __init__(self, config: Optional[ProvisioningConfig] = None,
                 basic_calculator: Optional[BasicProvisionCalculator] = None):
        """Initialize calculator."""
        self.config = config or ProvisioningConfig.load_default()
        self.basic_calculator = basic_calculator or BasicProvisionCalculator(self.config)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def calculate(self, snapshot: ContractSnapshot, tables: Optional[RegulatoryTables] = None,
                  now: Optional[date] = None) -> ProvisionOutcome:
        """Calculate the expected-credit-loss provision for one contract."""
        tables = tables if tables is not None else self.config.get_tables()
        now = now or date.today()

        guard = check_observation_window(
            snapshot.is_restructured,
            snapshot.restructuring_date,
            now,
            self.config.observation_window_days,
        )

        override = check_regulatory_mark(snapshot.days_overdue, snapshot.classification)
        if override.applies:
            self.logger.debug(f"Contract {snapshot.contract_id}: {override.detail}")
            return ProvisionResult(
                percent=100.0,
                amount=snapshot.outstanding_amount,
                stage=RiskStage.STAGE_3,
                applied_rule_label=override.detail,
                observation_window_active=guard.active,
                days_remaining_in_observation=guard.days_remaining,
                methodology=Methodology.REGULATORY_MARK,
                contract_id=snapshot.contract_id,
                probability_of_default=100.0,
            )

        stage = classify_stage(snapshot.days_overdue, snapshot.is_restructured, guard.active)

        pd_percent = probability_of_default(stage, snapshot.classification, override.applies)
        lgd_percent = loss_given_default(snapshot)
        expected_loss_percent = (pd_percent / 100) * (lgd_percent / 100) * 100

        baseline = self.basic_calculator.calculate(snapshot, tables, now)
        if isinstance(baseline, NoRuleFound):
            return baseline

        final_percent = max(expected_loss_percent, baseline.percent)
        final_percent = apply_observation_floor(
            final_percent, guard, self.config.observation_floor_percent
        )
        amount = calculate_amount(snapshot.outstanding_amount, final_percent)

        label = (
            f"Expected credit loss (stage {stage.value}): PD {pd_percent:.2f}% x "
            f"LGD {lgd_percent:.2f}% = {expected_loss_percent:.2f}%; "
            f"tabular baseline {baseline.percent:.2f}%"
        )
        if expected_loss_percent < baseline.percent:
            label = f"{label}; baseline retained"
        if guard.active:
            label = f"{label} {OBSERVATION_LABEL}"

        self.logger.debug(
            f"Contract {snapshot.contract_id}: EL {expected_loss_percent:.2f}% vs "
            f"baseline {baseline.percent:.2f}% -> {final_percent:.2f}%"
        )

        return ProvisionResult(
            percent=final_percent,
            amount=amount,
            stage=stage,
            applied_rule_label=label,
            observation_window_active=guard.active,
            days_remaining_in_observation=guard.days_remaining,
            methodology=Methodology.EXPECTED_CREDIT_LOSS,
            contract_id=snapshot.contract_id,
            probability_of_default=pd_percent,
            loss_given_default=lgd_percent,
            baseline_percent=baseline.percent,
        )
