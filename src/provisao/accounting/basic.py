"""Tabular provisioning under BCB 352/2023 Annexes I and II."""

from datetime import date
from typing import Optional
import logging

from ..core.config import ProvisioningConfig
from ..core.contract import ContractSnapshot
from ..core.tables import RegulatoryTables
from ..rules.lookup import percent_for, resolve_expected_loss, resolve_incurred_loss
from ..rules.observation import (
    OBSERVATION_LABEL,
    apply_observation_floor,
    check_observation_window,
)
from ..rules.override import check_regulatory_mark
from ..rules.staging import classify_stage
from .results import (
    Methodology,
    NoRuleFound,
    ProvisionOutcome,
    ProvisionResult,
    calculate_amount,
)

logger = logging.getLogger(__name__)


class BasicProvisionCalculator:
    """
    Tabular provision calculator.

    Order of precedence:
    1. Regulatory 100% mark (15 months for C3-C5, 21 months for C1-C2)
    2. Annex II expected-loss table up to 90 days overdue, Annex I
       incurred-loss table beyond
    3. Observation floor for restructured contracts inside the window
    """

    def __init__(self, config: Optional[ProvisioningConfig] = None):
        """Initialize calculator."""
        self.config = config or ProvisioningConfig.load_default()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def calculate(self, snapshot: ContractSnapshot, tables: Optional[RegulatoryTables] = None,
                  now: Optional[date] = None) -> ProvisionOutcome:
        """Calculate the tabular provision for one contract."""
        tables = tables if tables is not None else self.config.get_tables()
        now = now or date.today()

        guard = check_observation_window(
            snapshot.is_restructured,
            snapshot.restructuring_date,
            now,
            self.config.observation_window_days,
        )
        stage = classify_stage(snapshot.days_overdue, snapshot.is_restructured, guard.active)

        override = check_regulatory_mark(snapshot.days_overdue, snapshot.classification)
        if override.applies:
            self.logger.debug(f"Contract {snapshot.contract_id}: {override.detail}")
            return ProvisionResult(
                percent=100.0,
                amount=snapshot.outstanding_amount,
                stage=stage,
                applied_rule_label=override.detail,
                observation_window_active=guard.active,
                days_remaining_in_observation=guard.days_remaining,
                methodology=Methodology.REGULATORY_MARK,
                contract_id=snapshot.contract_id,
            )

        months_overdue = snapshot.months_overdue

        if snapshot.days_overdue > self.config.expected_loss_threshold_days:
            methodology = Methodology.INCURRED_LOSS
            criterion = self.config.incurred_loss_criterion
            row = resolve_incurred_loss(months_overdue, criterion, tables.incurred_loss)
            label = f"Incurred loss (Annex I, {criterion.value})"
        else:
            methodology = Methodology.EXPECTED_LOSS
            row = resolve_expected_loss(snapshot.days_overdue, tables.expected_loss)
            label = "Expected loss (Annex II)"

        percent = percent_for(row, snapshot.classification)
        if percent is None:
            reason = (
                f"No {methodology.value} rule for {snapshot.classification.value} at "
                f"{snapshot.days_overdue} days ({months_overdue:.2f} months) "
                f"in tables {tables.version}"
            )
            if row is not None:
                reason += f"; row {row.display_name} has no value for this classification"
            self.logger.warning(reason)
            return NoRuleFound(
                methodology=methodology,
                days_overdue=snapshot.days_overdue,
                months_overdue=months_overdue,
                classification=snapshot.classification,
                reason=reason,
                contract_id=snapshot.contract_id,
            )

        label = f"{label} {row.display_name}: {snapshot.classification.value} {percent:g}%"

        floored = apply_observation_floor(percent, guard, self.config.observation_floor_percent)
        if guard.active:
            label = f"{label} {OBSERVATION_LABEL}"
            if floored > percent:
                label = f"{label}, floor {floored:g}%"

        amount = calculate_amount(snapshot.outstanding_amount, floored)

        self.logger.debug(
            f"Contract {snapshot.contract_id}: {methodology.value} {floored:.2f}% "
            f"of {snapshot.outstanding_amount:,.2f} = {amount:,.2f} (stage {stage.value})"
        )

        return ProvisionResult(
            percent=floored,
            amount=amount,
            stage=stage,
            applied_rule_label=label,
            observation_window_active=guard.active,
            days_remaining_in_observation=guard.days_remaining,
            methodology=methodology,
            contract_id=snapshot.contract_id,
        )
