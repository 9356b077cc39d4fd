"""Tests for core records: assets, funding, capital and regulatory parameters."""

import pytest
from datetime import date
from pydantic import ValidationError

from regstress.core.assets import (
    AssetClass, LiquidityClass, PortfolioAsset,
    aggregate_by_counterparty, assets_by_class, total_market_value, value_by_liquidity_class
)
from regstress.core.capital import CapitalBase
from regstress.core.exceptions import ConfigurationError, RegStressError, ScenarioNotFoundError
from regstress.core.funding import FundingProfile, FundingType
from regstress.core.parameters import RegulatoryChangeSet, RegulatoryParameters


class TestPortfolioAsset:
    """Test portfolio asset records."""

    def test_asset_creation(self):
        """Test basic asset creation."""
        asset = PortfolioAsset(
            asset_id="test_001",
            asset_class=AssetClass.CORPORATE,
            market_value=1_000_000,
            credit_rating="BBB",
            counterparty="corp_001",
        )

        assert asset.asset_id == "test_001"
        assert asset.asset_class == AssetClass.CORPORATE
        assert asset.liquidity_classification == LiquidityClass.NON_HQLA
        assert asset.risk_weight is None
        assert not asset.is_hqla()

    def test_revaluation_keeps_classifiers(self, level1_asset):
        """Revaluing an asset returns a copy with the same classifiers."""
        stressed = level1_asset.with_market_value(95)

        assert stressed.market_value == 95
        assert level1_asset.market_value == 100
        assert stressed.liquidity_classification == LiquidityClass.HQLA_L1
        assert stressed.credit_rating == "AAA"
        assert stressed.asset_id == level1_asset.asset_id

    def test_asset_is_immutable(self, level1_asset):
        """Assets cannot be mutated in place."""
        with pytest.raises(ValidationError):
            level1_asset.market_value = 50

    def test_negative_risk_weight_rejected(self):
        """Explicit risk weights must be non-negative."""
        with pytest.raises(ValidationError):
            PortfolioAsset(asset_id="x", asset_class=AssetClass.EQUITY, market_value=1, risk_weight=-0.5)

    def test_hqla_levels(self):
        """Every HQLA level counts as HQLA."""
        for level in (LiquidityClass.HQLA_L1, LiquidityClass.HQLA_L2A, LiquidityClass.HQLA_L2B):
            asset = PortfolioAsset(
                asset_id="x", asset_class=AssetClass.SOVEREIGN, market_value=1, liquidity_classification=level
            )
            assert asset.is_hqla()


class TestPortfolioHelpers:
    """Test portfolio aggregation helpers."""

    def test_total_market_value(self, diversified_assets):
        assert total_market_value(diversified_assets) == pytest.approx(2_000_000_000)

    def test_value_by_liquidity_class(self, diversified_assets):
        assert value_by_liquidity_class(diversified_assets, LiquidityClass.HQLA_L1) == pytest.approx(330_000_000)
        assert value_by_liquidity_class(diversified_assets, LiquidityClass.HQLA_L2B) == pytest.approx(60_000_000)

    def test_aggregate_by_counterparty_skips_unattributed(self):
        """Exposures aggregate per counterparty; assets without one are ignored."""
        assets = [
            PortfolioAsset(asset_id="a", asset_class=AssetClass.CORPORATE, market_value=10, counterparty="cp1"),
            PortfolioAsset(asset_id="b", asset_class=AssetClass.CORPORATE, market_value=15, counterparty="cp1"),
            PortfolioAsset(asset_id="c", asset_class=AssetClass.EQUITY, market_value=5, counterparty="cp2"),
            PortfolioAsset(asset_id="d", asset_class=AssetClass.CASH, market_value=100),
        ]

        exposures = aggregate_by_counterparty(assets)

        assert exposures == {"cp1": 25, "cp2": 5}

    def test_assets_by_class(self, diversified_assets):
        corporates = assets_by_class(diversified_assets, AssetClass.CORPORATE)

        assert {a.asset_id for a in corporates} == {"corp_bond_001", "corp_loan_001"}


class TestFundingProfile:
    """Test funding profile behaviour."""

    def test_total_funding(self, diversified_funding):
        assert diversified_funding.total_funding() == pytest.approx(1_750_000_000)

    def test_amount_by_type(self, diversified_funding):
        assert diversified_funding.amount(FundingType.WHOLESALE_FUNDING) == 150_000_000
        assert diversified_funding.amount(FundingType.SECURED_FUNDING) == 100_000_000

    def test_negative_balance_rejected(self):
        with pytest.raises(ValidationError):
            FundingProfile(retail_deposits=-1)

    def test_apply_shocks(self):
        """Shocked buckets scale by (1 + shock); unlisted buckets are unchanged."""
        funding = FundingProfile(retail_deposits=1000, corporate_deposits=400, wholesale_funding=200)

        stressed = funding.apply_shocks({
            FundingType.RETAIL_DEPOSITS: -0.10,
            FundingType.WHOLESALE_FUNDING: -0.50,
        })

        assert stressed.retail_deposits == pytest.approx(900)
        assert stressed.corporate_deposits == 400
        assert stressed.wholesale_funding == pytest.approx(100)
        assert funding.retail_deposits == 1000

    def test_apply_shocks_floor(self):
        """Stressed balances never fall below the floor."""
        funding = FundingProfile(wholesale_funding=200)

        stressed = funding.apply_shocks({FundingType.WHOLESALE_FUNDING: -1.5})

        assert stressed.wholesale_funding == 0

    def test_apply_shocks_positive_floor(self):
        """A shock stops at the floor; buckets already below it are left alone."""
        funding = FundingProfile(retail_deposits=1000, wholesale_funding=200, secured_funding=5)

        stressed = funding.apply_shocks({
            FundingType.RETAIL_DEPOSITS: -0.10,
            FundingType.WHOLESALE_FUNDING: -0.99,
            FundingType.SECURED_FUNDING: -0.50,
        }, floor=10)

        assert stressed.retail_deposits == pytest.approx(900)
        assert stressed.wholesale_funding == 10
        assert stressed.secured_funding == 5
        assert stressed.corporate_deposits == 0

    def test_unshocked_profile_unchanged_with_floor(self):
        funding = FundingProfile(retail_deposits=1000)

        assert funding.apply_shocks({}, floor=10) == funding


class TestCapitalBase:
    """Test capital base behaviour."""

    def test_total_capital(self, simple_capital):
        assert simple_capital.total_capital == 185_000_000

    def test_losses_absorbed_by_tier1(self, simple_capital):
        stressed = simple_capital.after_losses(50_000_000)

        assert stressed.tier1_capital == 100_000_000
        assert stressed.tier2_capital == 35_000_000

    def test_losses_floor_tier1_at_zero(self, simple_capital):
        stressed = simple_capital.after_losses(500_000_000)

        assert stressed.tier1_capital == 0
        assert stressed.tier2_capital == simple_capital.tier2_capital

    def test_negative_losses_ignored(self, simple_capital):
        assert simple_capital.after_losses(-10).tier1_capital == simple_capital.tier1_capital

    def test_capital_summary(self):
        summary = CapitalBase(tier1_capital=80, tier2_capital=20).get_capital_summary()

        assert summary["total_capital"] == 100
        assert summary["tier2_share"] == pytest.approx(0.2)

    def test_validate_capital_structure(self):
        """Capital structure validation flags missing Tier 1 and excess Tier 2."""
        assert CapitalBase(tier1_capital=100, tier2_capital=20).validate_capital_structure() == []

        issues = CapitalBase(tier1_capital=0, tier2_capital=20).validate_capital_structure()
        assert "Tier 1 capital is zero" in issues
        assert any("exceeds Tier 1" in issue for issue in issues)


class TestRegulatoryParameters:
    """Test regulatory parameter validation."""

    def test_basel_defaults(self, default_parameters):
        assert default_parameters.get_minimums() == {
            "lcr": 1.00,
            "tier1": 0.06,
            "total_capital": 0.08,
            "leverage": 0.03,
            "large_exposure": 0.25,
        }
        assert default_parameters.countercyclical_buffer is None

    @pytest.mark.parametrize("field,value", [
        ("lcr_requirement", 0),
        ("lcr_requirement", -1.0),
        ("tier1_minimum", 1.5),
        ("leverage_minimum", -0.01),
        ("large_exposure_limit", 2.0),
        ("countercyclical_buffer", 0.05),
    ])
    def test_out_of_range_values_rejected(self, field, value):
        """Out-of-range parameters are rejected at construction."""
        with pytest.raises(ValueError):
            RegulatoryParameters(**{field: value})

    def test_from_mapping_raises_configuration_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            RegulatoryParameters.from_mapping({"tier1_minimum": 1.5})

        assert exc_info.value.field == "tier1_minimum"
        assert exc_info.value.code == "CONFIGURATION_ERROR"

    def test_jurisdiction_upper_cased(self):
        assert RegulatoryParameters(jurisdiction="uk").jurisdiction == "UK"

    def test_with_changes_returns_new_instance(self, default_parameters):
        proposed = default_parameters.with_changes({"lcr_requirement": 1.10, "tier1_minimum": 0.07})

        assert proposed.lcr_requirement == 1.10
        assert proposed.tier1_minimum == 0.07
        assert default_parameters.lcr_requirement == 1.00

    def test_with_changes_rejects_unknown_fields(self, default_parameters):
        with pytest.raises(ConfigurationError) as exc_info:
            default_parameters.with_changes({"nsfr_requirement": 1.0})

        assert "nsfr_requirement" in exc_info.value.message

    def test_with_changes_validates_values(self, default_parameters):
        with pytest.raises(ConfigurationError):
            default_parameters.with_changes({"lcr_requirement": 0})

    def test_parameters_are_immutable(self, default_parameters):
        with pytest.raises(ValidationError):
            default_parameters.lcr_requirement = 1.2

    def test_change_set(self):
        change_set = RegulatoryChangeSet(
            regulation_name="Basel 3.1",
            jurisdiction="UK",
            parameter_changes={"tier1_minimum": 0.07},
            implementation_date=date(2027, 1, 1),
        )

        assert change_set.mandatory is True
        assert change_set.parameter_changes == {"tier1_minimum": 0.07}


class TestExceptions:
    """Test the exception hierarchy."""

    def test_configuration_error_is_value_error(self):
        error = ConfigurationError("bad input", field="lcr_requirement")

        assert isinstance(error, RegStressError)
        assert isinstance(error, ValueError)
        assert error.field == "lcr_requirement"

    def test_scenario_not_found_message(self):
        error = ScenarioNotFoundError("unknown-2030")

        assert isinstance(error, KeyError)
        assert error.scenario_id == "unknown-2030"
        assert str(error) == "Scenario unknown-2030 not found"
        assert error.code == "SCENARIO_NOT_FOUND"
