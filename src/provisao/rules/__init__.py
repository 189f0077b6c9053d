"""Regulatory rules applied by the provisioning calculators."""

from .override import MarkOverride, check_regulatory_mark, FULL_PROVISION_MONTHS
from .observation import (
    ObservationStatus,
    check_observation_window,
    apply_observation_floor,
    OBSERVATION_LABEL,
)
from .staging import classify_stage
from .lookup import resolve_expected_loss, resolve_incurred_loss, percent_for
from .write_off import advise_write_off, months_until_write_off, WRITE_OFF_MONTHS

__all__ = [
    "MarkOverride",
    "check_regulatory_mark",
    "FULL_PROVISION_MONTHS",
    "ObservationStatus",
    "check_observation_window",
    "apply_observation_floor",
    "OBSERVATION_LABEL",
    "classify_stage",
    "resolve_expected_loss",
    "resolve_incurred_loss",
    "percent_for",
    "advise_write_off",
    "months_until_write_off",
    "WRITE_OFF_MONTHS",
]
