"""Tests for core provisioning components."""

import pytest
from datetime import date
from pydantic import ValidationError

from src.provisao.core.contract import (
    ClassificationRisk, RiskStage, OperationType, ContractSnapshot,
    classification_for_operation, days_overdue_from_due_date, days_to_months
)
from src.provisao.core.tables import (
    ExpectedLossRule, IncurredLossRule, IncurredLossCriterion, RegulatoryTables
)
from src.provisao.core.config import ProvisioningConfig


class TestContractSnapshot:
    """Test ContractSnapshot class."""

    def test_snapshot_creation(self):
        """Test basic snapshot creation."""
        snapshot = ContractSnapshot(
            contract_id="test_001",
            outstanding_amount=100000,
            days_overdue=45,
            classification=ClassificationRisk.C2,
        )

        assert snapshot.contract_id == "test_001"
        assert snapshot.outstanding_amount == 100000
        assert snapshot.is_restructured is False
        assert snapshot.months_overdue == pytest.approx(1.5)

    def test_snapshot_validation(self):
        """Test snapshot validation."""
        with pytest.raises(ValidationError):
            ContractSnapshot(outstanding_amount=-1000, days_overdue=0,
                             classification=ClassificationRisk.C1)

        with pytest.raises(ValidationError):
            ContractSnapshot(outstanding_amount=1000, days_overdue=-1,
                             classification=ClassificationRisk.C1)

        with pytest.raises(ValidationError):
            ContractSnapshot(outstanding_amount=float("inf"), days_overdue=0,
                             classification=ClassificationRisk.C1)

        with pytest.raises(ValidationError):
            ContractSnapshot(outstanding_amount=1000, days_overdue=0, classification="C6")

    def test_snapshot_is_immutable(self):
        snapshot = ContractSnapshot(outstanding_amount=1000, days_overdue=0,
                                    classification=ClassificationRisk.C1)
        with pytest.raises(ValidationError):
            snapshot.days_overdue = 10

    def test_from_operation(self):
        snapshot = ContractSnapshot.from_operation(
            OperationType.VEHICLE_FINANCING,
            outstanding_amount=50000,
            days_overdue=0,
        )
        assert snapshot.classification == ClassificationRisk.C4

    @pytest.mark.parametrize("operation,classification", [
        (OperationType.CREDIT_CARD, ClassificationRisk.C1),
        (OperationType.OVERDRAFT, ClassificationRisk.C1),
        (OperationType.PERSONAL_LOAN, ClassificationRisk.C1),
        (OperationType.PAYROLL_LOAN, ClassificationRisk.C2),
        (OperationType.WORKING_CAPITAL, ClassificationRisk.C3),
        (OperationType.BUSINESS_CCB, ClassificationRisk.C3),
        (OperationType.VEHICLE_FINANCING, ClassificationRisk.C4),
        (OperationType.LEASING, ClassificationRisk.C4),
        (OperationType.OTHER, ClassificationRisk.C5),
    ])
    def test_classification_for_operation(self, operation, classification):
        assert classification_for_operation(operation) == classification

    def test_classification_ordering(self):
        assert [c.severity for c in ClassificationRisk] == [1, 2, 3, 4, 5]
        assert ClassificationRisk.C1.position == 0
        assert ClassificationRisk.C5.position == 4

    def test_stage_ordering(self):
        assert RiskStage.STAGE_1 < RiskStage.STAGE_2 < RiskStage.STAGE_3


class TestDelinquencyHelpers:
    """Test day and month conversions."""

    def test_days_overdue_from_due_date(self):
        assert days_overdue_from_due_date(date(2025, 1, 1), date(2025, 4, 1)) == 90

    def test_future_due_date_is_not_overdue(self):
        assert days_overdue_from_due_date(date(2025, 5, 1), date(2025, 4, 1)) == 0

    def test_days_to_months(self):
        assert days_to_months(95) == 3.2
        assert days_to_months(450) == 15.0
        assert days_to_months(0) == 0.0


class TestRegulatoryTables:
    """Test table rows and validation."""

    def test_default_tables_are_valid(self, tables):
        assert tables.version == "BCB-352/2023"
        assert len(tables.expected_loss) == 4
        assert len(tables.incurred_rows(IncurredLossCriterion.MONTHS_OVERDUE)) == 18
        assert len(tables.incurred_rows(IncurredLossCriterion.DAYS_OVERDUE)) == 18
        assert tables.validate_tables() == []

    def test_incurred_monotonicity_is_opt_in(self, tables):
        issues = tables.validate_tables(include_incurred_monotonicity=True)
        assert issues
        assert any("C4" in issue and "below C3" in issue for issue in issues)

    def test_rule_rejects_out_of_range_percent(self):
        with pytest.raises(ValidationError):
            ExpectedLossRule(days_range_start=0, days_range_end=14,
                             percent_by_classification=(1.0, 2.0, 3.0, 4.0, 120.0))

    def test_rule_rejects_inverted_range(self):
        with pytest.raises(ValidationError):
            ExpectedLossRule(days_range_start=30, days_range_end=15,
                             percent_by_classification=(1.0, 2.0, 3.0, 4.0, 5.0))

        with pytest.raises(ValidationError):
            IncurredLossRule(criterion=IncurredLossCriterion.MONTHS_OVERDUE, range_start=5,
                             range_end=4, percent_by_classification=(1.0, 2.0, 3.0, 4.0, 5.0))

    def test_rule_requires_five_cells(self):
        with pytest.raises(ValidationError):
            ExpectedLossRule(days_range_start=0, days_range_end=14,
                             percent_by_classification=(1.0, 2.0, 3.0))

    def test_display_names(self):
        row = IncurredLossRule(criterion=IncurredLossCriterion.MONTHS_OVERDUE, range_start=3,
                               range_end=4, percent_by_classification=(1, 2, 3, 4, 5))
        assert row.display_name == "3-4 months"

        row = ExpectedLossRule(days_range_start=0, days_range_end=14,
                               percent_by_classification=(1, 2, 3, 4, 5))
        assert row.display_name == "0-14 days"

    def _expected_rows(self, ranges):
        return tuple(
            ExpectedLossRule(days_range_start=s, days_range_end=e,
                             percent_by_classification=(1, 2, 3, 4, 5))
            for s, e in ranges
        )

    def test_detects_gap(self, tables):
        broken = RegulatoryTables(
            expected_loss=self._expected_rows([(0, 14), (16, 90)]),
            incurred_loss=tables.incurred_loss,
        )
        issues = broken.validate_tables()
        assert issues == ["Expected-loss table has a gap at 15-15"]

    def test_detects_overlap(self, tables):
        broken = RegulatoryTables(
            expected_loss=self._expected_rows([(0, 14), (14, 90)]),
            incurred_loss=tables.incurred_loss,
        )
        assert any("overlap" in issue for issue in broken.validate_tables())

    def test_detects_short_coverage(self, tables):
        broken = RegulatoryTables(
            expected_loss=self._expected_rows([(0, 60)]),
            incurred_loss=tables.incurred_loss,
        )
        assert broken.validate_tables() == ["Expected-loss table does not cover 61-90"]

    def test_detects_decreasing_expected_loss_row(self, tables):
        broken = RegulatoryTables(
            expected_loss=(
                ExpectedLossRule(days_range_start=0, days_range_end=90,
                                 percent_by_classification=(5, 4, 3, 2, 1)),
            ),
            incurred_loss=tables.incurred_loss,
        )
        assert len(broken.validate_tables()) == 4

    def test_detects_month_gap(self, tables):
        month_rows = tables.incurred_rows(IncurredLossCriterion.MONTHS_OVERDUE)
        broken = RegulatoryTables(
            expected_loss=tables.expected_loss,
            incurred_loss=tuple(month_rows[:5] + month_rows[6:]),
        )
        assert broken.validate_tables() == ["Incurred-loss (months) table has a gap at 8-9"]

    def _month_rows(self, ranges, start_inclusive=None):
        return tuple(
            IncurredLossRule(criterion=IncurredLossCriterion.MONTHS_OVERDUE, range_start=s,
                             range_end=e, percent_by_classification=(1, 2, 3, 4, 5),
                             start_inclusive=start_inclusive)
            for s, e in ranges
        )

    def test_chained_month_rows_do_not_overlap(self, tables):
        valid = RegulatoryTables(
            expected_loss=tables.expected_loss,
            incurred_loss=self._month_rows([(3, 4), (4, 21)]),
        )
        assert valid.validate_tables() == []

    def test_detects_shared_closed_month_boundary(self, tables):
        broken = RegulatoryTables(
            expected_loss=tables.expected_loss,
            incurred_loss=self._month_rows([(3, 4), (4, 21)], start_inclusive=True),
        )
        assert broken.validate_tables() == ["Incurred-loss (months) table rows overlap at 4"]

    def test_closed_month_row_matches_its_start(self):
        row = self._month_rows([(3, 4)], start_inclusive=True)[0]
        assert row.contains(3.0)
        assert not self._month_rows([(3, 4)])[0].contains(3.0)

    def test_day_rows_reject_fractional_bounds(self):
        with pytest.raises(ValidationError):
            IncurredLossRule(criterion=IncurredLossCriterion.DAYS_OVERDUE, range_start=90.5,
                             range_end=120, percent_by_classification=(1, 2, 3, 4, 5))

    def test_day_rows_are_closed(self):
        with pytest.raises(ValidationError):
            IncurredLossRule(criterion=IncurredLossCriterion.DAYS_OVERDUE, range_start=91,
                             range_end=120, percent_by_classification=(1, 2, 3, 4, 5),
                             start_inclusive=False)

    def test_empty_tables(self):
        issues = RegulatoryTables().validate_tables()
        assert "Expected-loss table is empty" in issues
        assert "Incurred-loss table is empty" in issues

    def test_to_frame(self, tables):
        frame = tables.to_frame()

        assert len(frame) == 40
        assert list(frame.columns[-5:]) == ["C1", "C2", "C3", "C4", "C5"]
        first_incurred = frame[frame["table"] == "incurred_loss"].iloc[0]
        assert first_incurred["C3"] == 56.1


class TestProvisioningConfig:
    """Test ProvisioningConfig class."""

    def test_default_config_loading(self):
        """Test loading default configuration."""
        config = ProvisioningConfig.load_default()

        assert config.regulation_version == "CMN-4966/2021+BCB-352/2023"
        assert config.observation_window_days == 180
        assert config.observation_floor_percent == 3.0
        assert config.expected_loss_threshold_days == 90
        assert config.incurred_loss_criterion == IncurredLossCriterion.MONTHS_OVERDUE

    def test_tables_are_frozen_snapshots(self, test_config):
        tables = test_config.get_tables()

        assert isinstance(tables, RegulatoryTables)
        assert isinstance(tables.expected_loss, tuple)
        with pytest.raises(ValidationError):
            tables.version = "changed"

    def test_config_save_load(self, test_config, temp_dir):
        """Test saving and loading configuration."""
        config_path = temp_dir / "provisioning.yaml"
        test_config.save_to_file(config_path)

        assert config_path.exists()

        loaded = ProvisioningConfig.load_from_file(config_path)
        assert loaded.observation_floor_percent == test_config.observation_floor_percent
        assert loaded.get_tables() == test_config.get_tables()

    def test_with_overrides(self, test_config):
        config = test_config.with_overrides(observation_window_days=90)

        assert config.observation_window_days == 90
        assert test_config.observation_window_days == 180
        assert config.get_tables() == test_config.get_tables()

    def test_invalid_override(self, test_config):
        with pytest.raises(ValidationError):
            test_config.with_overrides(observation_floor_percent=150)

    def test_config_is_immutable(self, test_config):
        with pytest.raises(ValidationError):
            test_config.observation_floor_percent = 0

        with pytest.raises(ValidationError):
            test_config.tables.version = "changed"
