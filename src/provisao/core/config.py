"""Configuration management for the provisioning engine."""

from pathlib import Path
from typing import Any, Dict, Tuple
import yaml
from pydantic import BaseModel, ConfigDict, Field

from .tables import (
    ExpectedLossRule,
    IncurredLossCriterion,
    IncurredLossRule,
    RegulatoryTables,
)

REGULATION_VERSION = "CMN-4966/2021+BCB-352/2023"
DEFAULT_OBSERVATION_WINDOW_DAYS = 180
DEFAULT_OBSERVATION_FLOOR_PERCENT = 3.0
EXPECTED_LOSS_THRESHOLD_DAYS = 90


class TablesConfig(BaseModel):
    """Raw table data as stored in the configuration file."""

    model_config = ConfigDict(frozen=True)

    version: str = "unversioned"
    expected_loss: Tuple[ExpectedLossRule, ...] = ()
    incurred_loss: Tuple[IncurredLossRule, ...] = ()


class ProvisioningConfig(BaseModel):
    """Provisioning engine configuration."""

    model_config = ConfigDict(frozen=True)

    regulation_version: str = REGULATION_VERSION
    observation_window_days: int = Field(default=DEFAULT_OBSERVATION_WINDOW_DAYS, ge=0)
    observation_floor_percent: float = Field(default=DEFAULT_OBSERVATION_FLOOR_PERCENT, ge=0, le=100)
    expected_loss_threshold_days: int = Field(default=EXPECTED_LOSS_THRESHOLD_DAYS, ge=0)
    incurred_loss_criterion: IncurredLossCriterion = IncurredLossCriterion.MONTHS_OVERDUE
    tables: TablesConfig = Field(default_factory=TablesConfig)

    @classmethod
    def load_default(cls) -> "ProvisioningConfig":
        """Load default configuration from package yaml file."""
        config_path = Path(__file__).parent.parent / "config.yaml"
        return cls.load_from_file(config_path)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "ProvisioningConfig":
        """Load configuration from YAML file."""
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
        return cls(**config_data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, default_flow_style=False,
                           indent=2, sort_keys=False)

    def get_tables(self) -> RegulatoryTables:
        """Frozen snapshot of the configured tables."""
        return RegulatoryTables(
            version=self.tables.version,
            expected_loss=tuple(self.tables.expected_loss),
            incurred_loss=tuple(self.tables.incurred_loss),
        )

    def with_overrides(self, **overrides: Any) -> "ProvisioningConfig":
        """Copy of this configuration with selected fields replaced."""
        data: Dict[str, Any] = self.model_dump()
        data.update(overrides)
        return ProvisioningConfig(**data)
