"""Portfolio-level provisioning."""

from datetime import date
from typing import Dict, Iterable, List, Optional, Union
from pydantic import BaseModel, Field
import pandas as pd
import logging

from ..core.contract import ContractSnapshot, RiskStage
from ..core.tables import RegulatoryTables
from ..rules.write_off import advise_write_off
from .advanced import AdvancedProvisionCalculator
from .basic import BasicProvisionCalculator
from .results import NoRuleFound, ProvisionResult

logger = logging.getLogger(__name__)


class PortfolioProvisionReport(BaseModel):
    """Provisioning results for a set of contracts."""

    results: List[ProvisionResult] = Field(default_factory=list)
    failures: List[NoRuleFound] = Field(default_factory=list)
    write_off_candidates: List[str] = Field(default_factory=list)

    total_outstanding: float = Field(default=0.0, ge=0)
    total_provisions: float = Field(default=0.0, ge=0)
    stage_1_provisions: float = Field(default=0.0, ge=0)
    stage_2_provisions: float = Field(default=0.0, ge=0)
    stage_3_provisions: float = Field(default=0.0, ge=0)
    provision_coverage_ratio: float = Field(default=0.0, ge=0)

    tables_version: Optional[str] = None

    def provisions_by_stage(self) -> Dict[RiskStage, float]:
        return {
            RiskStage.STAGE_1: self.stage_1_provisions,
            RiskStage.STAGE_2: self.stage_2_provisions,
            RiskStage.STAGE_3: self.stage_3_provisions,
        }

    def to_frame(self) -> pd.DataFrame:
        """Per-contract results as a DataFrame."""
        columns = [
            "contract_id", "methodology", "stage", "percent", "amount",
            "observation_window_active", "days_remaining_in_observation",
            "applied_rule_label",
        ]
        records = [
            {
                "contract_id": r.contract_id,
                "methodology": r.methodology.value,
                "stage": int(r.stage),
                "percent": r.percent,
                "amount": r.amount,
                "observation_window_active": r.observation_window_active,
                "days_remaining_in_observation": r.days_remaining_in_observation,
                "applied_rule_label": r.applied_rule_label,
            }
            for r in self.results
        ]
        return pd.DataFrame.from_records(records, columns=columns)

    def stage_summary(self) -> pd.DataFrame:
        """Count, provisions and average percent per stage."""
        frame = self.to_frame()
        if frame.empty:
            return pd.DataFrame(columns=["count", "amount", "mean_percent"])
        return frame.groupby("stage").agg(
            count=("percent", "size"),
            amount=("amount", "sum"),
            mean_percent=("percent", "mean"),
        )


class ProvisioningEngine:
    """Engine for running a provision calculator across many contracts."""

    def __init__(self, calculator: Union[BasicProvisionCalculator, AdvancedProvisionCalculator]):
        """Initialize provisioning engine."""
        self.calculator = calculator
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def run(self, snapshots: Iterable[ContractSnapshot], now: Optional[date] = None,
            tables: Optional[RegulatoryTables] = None) -> PortfolioProvisionReport:
        """Calculate provisions for every snapshot with one table version."""
        tables = tables if tables is not None else self.calculator.config.get_tables()
        now = now or date.today()

        results = []
        failures = []
        write_off_candidates = []
        stage_provisions = {stage: 0.0 for stage in RiskStage}
        total_outstanding = 0.0

        for snapshot in snapshots:
            outcome = self.calculator.calculate(snapshot, tables, now)
            if isinstance(outcome, NoRuleFound):
                failures.append(outcome)
                continue

            results.append(outcome)
            stage_provisions[outcome.stage] += outcome.amount
            total_outstanding += snapshot.outstanding_amount

            if advise_write_off(snapshot.days_overdue, snapshot.classification):
                write_off_candidates.append(snapshot.contract_id or f"#{len(results) - 1}")

        total_provisions = sum(stage_provisions.values())

        self.logger.info(
            f"Provisioned {len(results)} contracts ({len(failures)} without a matching rule): "
            f"{total_provisions:,.2f} on {total_outstanding:,.2f} outstanding"
        )

        return PortfolioProvisionReport(
            results=results,
            failures=failures,
            write_off_candidates=write_off_candidates,
            total_outstanding=total_outstanding,
            total_provisions=total_provisions,
            stage_1_provisions=stage_provisions[RiskStage.STAGE_1],
            stage_2_provisions=stage_provisions[RiskStage.STAGE_2],
            stage_3_provisions=stage_provisions[RiskStage.STAGE_3],
            provision_coverage_ratio=total_provisions / total_outstanding if total_outstanding > 0 else 0,
            tables_version=tables.version,
        )
