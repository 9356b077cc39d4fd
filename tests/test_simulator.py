"""Tests for synthetic bank snapshot generation."""

from datetime import date
import pytest

from regstress.core.assets import AssetClass, LiquidityClass, total_market_value
from regstress.simulator.portfolio import BankSize, PortfolioGenerator


class TestPortfolioGenerator:
    """Test synthetic bank snapshots."""

    def test_same_seed_same_snapshot(self):
        as_of = date(2024, 12, 31)
        first = PortfolioGenerator(seed=7, as_of=as_of).generate_bank_snapshot(BankSize.SMALL, "Bank A")
        second = PortfolioGenerator(seed=7, as_of=as_of).generate_bank_snapshot(BankSize.SMALL, "Bank A")

        assert first == second

    def test_different_seeds_differ(self):
        as_of = date(2024, 12, 31)
        first = PortfolioGenerator(seed=1, as_of=as_of).generate_bank_snapshot(BankSize.SMALL, "Bank A")
        second = PortfolioGenerator(seed=2, as_of=as_of).generate_bank_snapshot(BankSize.SMALL, "Bank A")

        assert first != second

    @pytest.mark.parametrize("size,low,high", [
        (BankSize.SMALL, 500e6, 5e9),
        (BankSize.MEDIUM, 5e9, 50e9),
        (BankSize.LARGE, 50e9, 500e9),
    ])
    def test_balance_sheet_size(self, size, low, high):
        snapshot = PortfolioGenerator(seed=42).generate_bank_snapshot(size)

        assert snapshot.size == size
        assert low * 0.999 <= total_market_value(snapshot.assets) <= high * 1.001

    def test_snapshot_structure(self, medium_bank_snapshot):
        snapshot = medium_bank_snapshot
        ids = [a.asset_id for a in snapshot.assets]

        assert snapshot.bank_name == "Test Medium Bank"
        assert len(ids) == len(set(ids))
        assert {a.asset_class for a in snapshot.assets} == set(AssetClass)
        assert all(a.market_value > 0 for a in snapshot.assets)
        assert snapshot.funding.total_funding() < total_market_value(snapshot.assets)
        assert snapshot.capital_base.tier1_capital > snapshot.capital_base.tier2_capital > 0

    def test_cash_and_sovereigns_have_no_counterparty(self, medium_bank_snapshot):
        for asset in medium_bank_snapshot.assets:
            if asset.asset_class in (AssetClass.CASH, AssetClass.SOVEREIGN):
                assert asset.counterparty is None

    def test_cash_is_level1(self, small_bank_snapshot):
        cash = [a for a in small_bank_snapshot.assets if a.asset_class == AssetClass.CASH]

        assert len(cash) == 1
        assert cash[0].liquidity_classification == LiquidityClass.HQLA_L1
        assert cash[0].asset_id.startswith("cash_")

    def test_maturities_after_as_of(self, medium_bank_snapshot):
        for asset in medium_bank_snapshot.assets:
            if asset.maturity_date is not None:
                assert asset.maturity_date >= date(2024, 12, 31)

    def test_default_bank_name(self):
        snapshot = PortfolioGenerator(seed=3).generate_bank_snapshot()

        assert snapshot.bank_name.startswith("Synthetic Bank ")
        assert snapshot.size == BankSize.MEDIUM
