"""Reporting helpers built on provisioning results."""

from .alerts import (
    AlertType,
    NegotiationMoment,
    ProvisionAlert,
    provisioning_milestone,
    check_provision_alert,
    negotiation_moment,
    settlement_proposal,
    PROVISIONING_MILESTONES,
)

__all__ = [
    "AlertType",
    "NegotiationMoment",
    "ProvisionAlert",
    "provisioning_milestone",
    "check_provision_alert",
    "negotiation_moment",
    "settlement_proposal",
    "PROVISIONING_MILESTONES",
]
