"""Post-restructuring observation window."""

from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from ..core.config import DEFAULT_OBSERVATION_WINDOW_DAYS

OBSERVATION_LABEL = "(restructured, under observation)"


class ObservationStatus(BaseModel):
    """Whether a restructured contract is still inside its observation window."""

    model_config = ConfigDict(frozen=True)

    active: bool = False
    days_remaining: int = Field(default=0, ge=0)


def check_observation_window(
    is_restructured: bool,
    restructuring_date: Optional[date],
    now: date,
    window_days: int = DEFAULT_OBSERVATION_WINDOW_DAYS,
) -> ObservationStatus:
    """Evaluate the observation window; the last day of the window is still inside it."""
    if not is_restructured or restructuring_date is None:
        return ObservationStatus()

    elapsed = max(0, (now - restructuring_date).days)
    return ObservationStatus(
        active=elapsed <= window_days,
        days_remaining=max(0, window_days - elapsed),
    )


def apply_observation_floor(percent: float, status: ObservationStatus, floor_percent: float) -> float:
    """Raise the percent to the floor while the window is active."""
    if status.active:
        return max(percent, floor_percent)
    return percent
