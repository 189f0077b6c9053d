"""Provision calculators for BCB 352/2023 and CMN 4.966/2021."""

from .results import (
    Methodology,
    ProvisionResult,
    NoRuleFound,
    ProvisionOutcome,
    unwrap,
)
from .basic import BasicProvisionCalculator
from .advanced import AdvancedProvisionCalculator
from .provisions import ProvisioningEngine, PortfolioProvisionReport

__all__ = [
    "Methodology",
    "ProvisionResult",
    "NoRuleFound",
    "ProvisionOutcome",
    "unwrap",
    "BasicProvisionCalculator",
    "AdvancedProvisionCalculator",
    "ProvisioningEngine",
    "PortfolioProvisionReport",
]
