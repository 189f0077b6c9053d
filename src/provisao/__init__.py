"""Provisao - Regulatory loss-provisioning and risk-staging engine (CMN 4.966 / BCB 352)."""

# Core data model
from .core.contract import (
    ClassificationRisk,
    RiskStage,
    OperationType,
    ContractSnapshot,
    classification_for_operation,
    days_overdue_from_due_date,
)
from .core.tables import RegulatoryTables, ExpectedLossRule, IncurredLossRule, IncurredLossCriterion
from .core.config import ProvisioningConfig

# Calculators
from .accounting.basic import BasicProvisionCalculator
from .accounting.advanced import AdvancedProvisionCalculator
from .accounting.results import ProvisionResult, NoRuleFound, unwrap
from .accounting.provisions import ProvisioningEngine, PortfolioProvisionReport

# Advisory
from .rules.write_off import advise_write_off
from .reporting.alerts import check_provision_alert, ProvisionAlert, settlement_proposal

# Simulation
from .simulator.portfolio import PortfolioGenerator, PortfolioProfile

__version__ = "0.1.0"
__author__ = "Provisao Contributors"

__all__ = [
    # Core
    "ClassificationRisk",
    "RiskStage",
    "OperationType",
    "ContractSnapshot",
    "classification_for_operation",
    "days_overdue_from_due_date",
    "RegulatoryTables",
    "ExpectedLossRule",
    "IncurredLossRule",
    "IncurredLossCriterion",
    "ProvisioningConfig",

    # Calculators
    "BasicProvisionCalculator",
    "AdvancedProvisionCalculator",
    "ProvisionResult",
    "NoRuleFound",
    "unwrap",
    "ProvisioningEngine",
    "PortfolioProvisionReport",

    # Advisory
    "advise_write_off",
    "check_provision_alert",
    "ProvisionAlert",
    "settlement_proposal",

    # Simulation
    "PortfolioGenerator",
    "PortfolioProfile",
]
