"""Synthetic contract portfolios for testing and demonstrations."""

from typing import Dict, List, Optional, Tuple
from enum import Enum
from datetime import date, timedelta
import random
import uuid
import numpy as np
import logging

from ..core.contract import ContractSnapshot, OperationType

logger = logging.getLogger(__name__)


class PortfolioProfile(str, Enum):
    """Delinquency profile of a generated portfolio."""

    HEALTHY = "healthy"         # Mostly current contracts
    STRESSED = "stressed"       # Meaningful short-term delinquency
    DISTRESSED = "distressed"   # Large problem-asset share


# Share of contracts per delinquency bucket (days overdue, inclusive)
DELINQUENCY_BUCKETS: Tuple[Tuple[int, int], ...] = (
    (0, 0),
    (1, 30),
    (31, 90),
    (91, 450),
    (451, 1200),
)

BUCKET_WEIGHTS: Dict[PortfolioProfile, Tuple[float, ...]] = {
    PortfolioProfile.HEALTHY: (0.80, 0.12, 0.05, 0.02, 0.01),
    PortfolioProfile.STRESSED: (0.55, 0.20, 0.12, 0.09, 0.04),
    PortfolioProfile.DISTRESSED: (0.30, 0.20, 0.15, 0.20, 0.15),
}

# Typical balance (BRL) per operation type
AVERAGE_BALANCE: Dict[OperationType, float] = {
    OperationType.CREDIT_CARD: 4000,
    OperationType.OVERDRAFT: 2500,
    OperationType.PERSONAL_LOAN: 15000,
    OperationType.PAYROLL_LOAN: 20000,
    OperationType.WORKING_CAPITAL: 150000,
    OperationType.BUSINESS_CCB: 250000,
    OperationType.VEHICLE_FINANCING: 60000,
    OperationType.LEASING: 120000,
    OperationType.OTHER: 30000,
}

SECURED_OPERATIONS = (OperationType.VEHICLE_FINANCING, OperationType.LEASING)

RESTRUCTURING_PROBABILITY = 0.1


class PortfolioGenerator:
    """Generator for synthetic credit portfolios with realistic delinquency."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize generator with optional random seed for reproducibility."""
        if seed is not None:
            random.seed(seed)
            np.random.seed(seed)

        self.seed = seed

    def generate_portfolio(self, num_contracts: int = 100,
                           profile: PortfolioProfile = PortfolioProfile.HEALTHY,
                           as_of: Optional[date] = None) -> List[ContractSnapshot]:
        """Generate contract snapshots as of a reference date."""
        as_of = as_of or date.today()
        weights = BUCKET_WEIGHTS[PortfolioProfile(profile)]
        operation_types = list(AVERAGE_BALANCE)

        buckets = np.random.choice(len(DELINQUENCY_BUCKETS), size=num_contracts, p=weights)

        snapshots = []
        for bucket in buckets:
            operation_type = random.choice(operation_types)
            low, high = DELINQUENCY_BUCKETS[bucket]
            snapshots.append(self._generate_contract(operation_type, random.randint(low, high), as_of))

        logger.info(f"Generated {len(snapshots)} {PortfolioProfile(profile).value} contracts")
        return snapshots

    def _generate_contract(self, operation_type: OperationType, days_overdue: int,
                           as_of: date) -> ContractSnapshot:
        """Generate a single contract snapshot."""
        average = AVERAGE_BALANCE[operation_type]
        outstanding = round(max(100.0, np.random.lognormal(np.log(average), 0.6)), 2)

        is_restructured = random.random() < RESTRUCTURING_PROBABILITY
        restructuring_date = None
        if is_restructured:
            restructuring_date = as_of - timedelta(days=random.randint(0, 365))

        has_real_collateral = operation_type in SECURED_OPERATIONS
        collateral_value = None
        if has_real_collateral:
            collateral_value = round(outstanding * random.uniform(0.5, 1.3), 2)

        return ContractSnapshot.from_operation(
            operation_type,
            contract_id=f"{operation_type.value}_{uuid.uuid4().hex[:8]}",
            outstanding_amount=outstanding,
            days_overdue=days_overdue,
            is_restructured=is_restructured,
            restructuring_date=restructuring_date,
            has_real_collateral=has_real_collateral,
            collateral_value=collateral_value,
            effective_annual_rate=round(random.uniform(0.12, 0.9), 4),
        )
