"""Pytest configuration and shared fixtures."""

import pytest
import tempfile
from datetime import date
from pathlib import Path

from regstress.core.assets import AssetClass, LiquidityClass, PortfolioAsset
from regstress.core.capital import CapitalBase
from regstress.core.config import EngineConfig
from regstress.core.funding import FundingProfile
from regstress.core.parameters import RegulatoryParameters
from regstress.simulator.portfolio import BankSize, PortfolioGenerator


@pytest.fixture(scope="session")
def test_config():
    """Test configuration fixture."""
    return EngineConfig.load_default()


@pytest.fixture
def temp_dir():
    """Temporary directory fixture."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def default_parameters():
    """Basel III default parameters."""
    return RegulatoryParameters()


@pytest.fixture
def level1_asset():
    """Single Level 1 asset worth 100."""
    return PortfolioAsset(
        asset_id="gilt_001",
        asset_class=AssetClass.SOVEREIGN,
        market_value=100,
        credit_rating="AAA",
        liquidity_classification=LiquidityClass.HQLA_L1,
    )


@pytest.fixture
def retail_funding():
    """Retail deposits of 1000 and nothing else."""
    return FundingProfile(retail_deposits=1000)


@pytest.fixture
def simple_capital():
    """Simple capital structure fixture."""
    return CapitalBase(tier1_capital=150_000_000, tier2_capital=35_000_000)


@pytest.fixture
def diversified_assets():
    """Diversified portfolio with every asset class and HQLA level."""
    return [
        PortfolioAsset(
            asset_id="cash_001",
            asset_class=AssetClass.CASH,
            market_value=80_000_000,
            liquidity_classification=LiquidityClass.HQLA_L1,
        ),
        PortfolioAsset(
            asset_id="sovereign_001",
            asset_class=AssetClass.SOVEREIGN,
            market_value=250_000_000,
            credit_rating="AA+",
            jurisdiction="UK",
            maturity_date=date(2034, 3, 7),
            liquidity_classification=LiquidityClass.HQLA_L1,
        ),
        PortfolioAsset(
            asset_id="corp_bond_001",
            asset_class=AssetClass.CORPORATE,
            market_value=120_000_000,
            credit_rating="A",
            counterparty="corp_alpha",
            liquidity_classification=LiquidityClass.HQLA_L2A,
        ),
        PortfolioAsset(
            asset_id="corp_loan_001",
            asset_class=AssetClass.CORPORATE,
            market_value=600_000_000,
            credit_rating="BBB",
            counterparty="corp_beta",
            sector="manufacturing",
        ),
        PortfolioAsset(
            asset_id="equity_001",
            asset_class=AssetClass.EQUITY,
            market_value=60_000_000,
            counterparty="listed_gamma",
            liquidity_classification=LiquidityClass.HQLA_L2B,
        ),
        PortfolioAsset(
            asset_id="mortgage_001",
            asset_class=AssetClass.PROPERTY,
            market_value=700_000_000,
            sector="residential",
        ),
        PortfolioAsset(
            asset_id="cre_001",
            asset_class=AssetClass.PROPERTY,
            market_value=150_000_000,
            sector="commercial",
            counterparty="cre_delta",
        ),
        PortfolioAsset(
            asset_id="swap_001",
            asset_class=AssetClass.DERIVATIVE,
            market_value=40_000_000,
            counterparty="bank_epsilon",
        ),
    ]


@pytest.fixture
def diversified_funding():
    """Funding profile for the diversified portfolio."""
    return FundingProfile(
        retail_deposits=1_100_000_000,
        corporate_deposits=400_000_000,
        wholesale_funding=150_000_000,
        secured_funding=100_000_000,
    )


@pytest.fixture
def medium_bank_snapshot():
    """Medium bank snapshot using generator."""
    generator = PortfolioGenerator(seed=42, as_of=date(2024, 12, 31))
    return generator.generate_bank_snapshot(BankSize.MEDIUM, "Test Medium Bank")


@pytest.fixture
def small_bank_snapshot():
    """Small bank snapshot using generator."""
    generator = PortfolioGenerator(seed=123, as_of=date(2024, 12, 31))
    return generator.generate_bank_snapshot(BankSize.SMALL, "Test Small Bank")


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
        if "integration" in item.nodeid or "test_api" in item.nodeid:
            item.add_marker(pytest.mark.integration)

        # Mark slow tests
        if any(marker in item.nodeid for marker in ["catalog", "large", "concurrent"]):
            item.add_marker(pytest.mark.slow)


# Custom assertion helpers
def assert_capital_hierarchy(result):
    """Assert that Tier 1 ratio never exceeds total capital ratio."""
    assert result.tier1_ratio <= result.total_capital_ratio + 1e-12, (
        f"Tier 1 ratio ({result.tier1_ratio}) should not exceed total ({result.total_capital_ratio})"
    )
