"""Exceptions raised by the provisioning engine."""


class ProvisioningError(Exception):
    """Base class for provisioning failures."""


class ProvisionRuleNotFoundError(ProvisioningError):
    """Raised when a caller unwraps a calculation that matched no table row."""

    def __init__(self, outcome):
        self.outcome = outcome
        super().__init__(outcome.reason)
