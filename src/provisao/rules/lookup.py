"""Row lookups in the regulatory percentage tables."""

from typing import Iterable, Optional, Union
import logging

from ..core.contract import ClassificationRisk
from ..core.tables import ExpectedLossRule, IncurredLossCriterion, IncurredLossRule

logger = logging.getLogger(__name__)

# months * 30 picks up float noise (91 / 30 * 30 == 90.99999999999999).
_DAY_PRECISION = 9


def resolve_expected_loss(days_overdue: int,
                          table: Iterable[ExpectedLossRule]) -> Optional[ExpectedLossRule]:
    """First expected-loss row whose day range contains days_overdue."""
    for row in table:
        if row.contains(days_overdue):
            return row
    logger.debug(f"No expected-loss row covers {days_overdue} days")
    return None


def resolve_incurred_loss(months_overdue: float, criterion: IncurredLossCriterion,
                          table: Iterable[IncurredLossRule]) -> Optional[IncurredLossRule]:
    """First incurred-loss row of the given criterion containing months_overdue.

    Day-criterion rows are matched on months_overdue * 30, so both criteria
    resolve the same bucket for the same delinquency.
    """
    criterion = IncurredLossCriterion(criterion)
    if criterion == IncurredLossCriterion.DAYS_OVERDUE:
        value = round(months_overdue * 30, _DAY_PRECISION)
    else:
        value = months_overdue

    for row in table:
        if row.criterion == criterion and row.contains(value):
            return row
    logger.debug(f"No incurred-loss row covers {value:g} ({criterion.value})")
    return None


def percent_for(row: Optional[Union[ExpectedLossRule, IncurredLossRule]],
                classification: ClassificationRisk) -> Optional[float]:
    """Percentage for a classification, or None when the row or the cell is missing."""
    if row is None:
        return None
    return row.percent_by_classification[ClassificationRisk(classification).position]
