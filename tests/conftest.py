"""Pytest configuration and shared fixtures."""

import pytest
import tempfile
from datetime import date, timedelta
from pathlib import Path

from src.provisao.core.config import ProvisioningConfig
from src.provisao.core.contract import ClassificationRisk, ContractSnapshot
from src.provisao.accounting.basic import BasicProvisionCalculator
from src.provisao.accounting.advanced import AdvancedProvisionCalculator


TODAY = date(2025, 6, 30)


@pytest.fixture(scope="session")
def test_config():
    """Default configuration fixture."""
    return ProvisioningConfig.load_default()


@pytest.fixture(scope="session")
def tables(test_config):
    """Default regulatory tables fixture."""
    return test_config.get_tables()


@pytest.fixture
def today():
    """Fixed calculation date."""
    return TODAY


@pytest.fixture
def temp_dir():
    """Temporary directory fixture."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def basic_calculator(test_config):
    """Tabular calculator fixture."""
    return BasicProvisionCalculator(test_config)


@pytest.fixture
def advanced_calculator(test_config):
    """Expected credit loss calculator fixture."""
    return AdvancedProvisionCalculator(test_config)


@pytest.fixture
def incurred_loss_contract():
    """95 days overdue, C3, not restructured."""
    return ContractSnapshot(
        contract_id="scenario_a",
        outstanding_amount=100000,
        days_overdue=95,
        classification=ClassificationRisk.C3,
    )


@pytest.fixture
def marked_contract():
    """Past the 21-month mark for C1."""
    return ContractSnapshot(
        contract_id="scenario_b",
        outstanding_amount=250000,
        days_overdue=650,
        classification=ClassificationRisk.C1,
    )


@pytest.fixture
def performing_contract():
    """20 days overdue, C2."""
    return ContractSnapshot(
        contract_id="scenario_c",
        outstanding_amount=40000,
        days_overdue=20,
        classification=ClassificationRisk.C2,
    )


@pytest.fixture
def restructured_contract():
    """Restructured 100 days ago, 10 days overdue, C1."""
    return ContractSnapshot(
        contract_id="scenario_d",
        outstanding_amount=80000,
        days_overdue=10,
        classification=ClassificationRisk.C1,
        is_restructured=True,
        restructuring_date=TODAY - timedelta(days=100),
    )


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "property: marks tests as property-based tests"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Mark property-based tests
        if "test_properties" in item.nodeid:
            item.add_marker(pytest.mark.property)

        # Mark integration tests
        if "integration" in item.nodeid or "test_portfolio" in item.nodeid:
            item.add_marker(pytest.mark.integration)
