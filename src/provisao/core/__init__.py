"""Core components of the provisioning engine."""

from .contract import (
    ClassificationRisk,
    RiskStage,
    OperationType,
    ContractSnapshot,
    classification_for_operation,
    days_overdue_from_due_date,
    days_to_months,
)
from .tables import (
    ExpectedLossRule,
    IncurredLossRule,
    IncurredLossCriterion,
    RegulatoryTables,
)
from .config import ProvisioningConfig, REGULATION_VERSION
from .exceptions import ProvisioningError, ProvisionRuleNotFoundError

__all__ = [
    "ClassificationRisk",
    "RiskStage",
    "OperationType",
    "ContractSnapshot",
    "classification_for_operation",
    "days_overdue_from_due_date",
    "days_to_months",
    "ExpectedLossRule",
    "IncurredLossRule",
    "IncurredLossCriterion",
    "RegulatoryTables",
    "ProvisioningConfig",
    "REGULATION_VERSION",
    "ProvisioningError",
    "ProvisionRuleNotFoundError",
]
