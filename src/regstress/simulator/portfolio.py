"""Synthetic bank snapshots for testing and demonstrations."""

from datetime import date, timedelta
from enum import Enum
from typing import List, Optional
import logging

import numpy as np
from pydantic import BaseModel, ConfigDict

from ..core.assets import AssetClass, LiquidityClass, PortfolioAsset
from ..core.capital import CapitalBase
from ..core.funding import FundingProfile

logger = logging.getLogger(__name__)


class BankSize(str, Enum):
    """Bank size categories for portfolio generation."""

    SMALL = "small"           # Community bank
    MEDIUM = "medium"         # Regional bank
    LARGE = "large"           # Large commercial bank


class BankSnapshot(BaseModel):
    """Portfolio, funding and capital of one synthetic bank."""

    model_config = ConfigDict(frozen=True)

    bank_name: str
    size: BankSize
    assets: List[PortfolioAsset]
    funding: FundingProfile
    capital_base: CapitalBase


# Balance sheet ranges (total assets)
_TOTAL_ASSETS = {
    BankSize.SMALL: (500e6, 5e9),      # €500M - €5B
    BankSize.MEDIUM: (5e9, 50e9),      # €5B - €50B
    BankSize.LARGE: (50e9, 500e9),     # €50B - €500B
}

# Share of total assets per book
_ASSET_MIX = {
    BankSize.SMALL: {
        "cash": 0.06, "sovereign": 0.14, "corporate_bonds": 0.05,
        "corporate_loans": 0.30, "property": 0.43, "equity": 0.02, "derivatives": 0.00,
    },
    BankSize.MEDIUM: {
        "cash": 0.05, "sovereign": 0.15, "corporate_bonds": 0.08,
        "corporate_loans": 0.35, "property": 0.30, "equity": 0.04, "derivatives": 0.03,
    },
    BankSize.LARGE: {
        "cash": 0.05, "sovereign": 0.15, "corporate_bonds": 0.10,
        "corporate_loans": 0.33, "property": 0.22, "equity": 0.07, "derivatives": 0.08,
    },
}

# Share of total funding per bucket
_FUNDING_MIX = {
    BankSize.SMALL: {"retail": 0.70, "corporate": 0.20, "wholesale": 0.05, "secured": 0.05},
    BankSize.MEDIUM: {"retail": 0.55, "corporate": 0.25, "wholesale": 0.12, "secured": 0.08},
    BankSize.LARGE: {"retail": 0.40, "corporate": 0.25, "wholesale": 0.20, "secured": 0.15},
}

# Sovereign issuers are recorded by jurisdiction only (exempt from large exposure limits)
_SOVEREIGNS = ["DE", "FR", "UK", "US", "IT"]


class PortfolioGenerator:
    """Generator for synthetic bank snapshots with realistic characteristics.

    All randomness flows through one seeded numpy generator, so the same
    seed and ``as_of`` date always give the same snapshot.
    """

    def __init__(self, seed: Optional[int] = None, as_of: Optional[date] = None):
        """Initialize generator with optional random seed for reproducibility."""
        self.seed = seed
        self.as_of = as_of or date.today()
        self.rng = np.random.default_rng(seed)
        self._counter = 0

    def generate_bank_snapshot(self, size: BankSize = BankSize.MEDIUM,
                               bank_name: Optional[str] = None) -> BankSnapshot:
        """Generate a complete synthetic bank: assets, funding and capital."""
        bank_name = bank_name or f"Synthetic Bank {int(self.rng.integers(1000, 10000))}"
        low, high = _TOTAL_ASSETS[size]
        total_assets = float(self.rng.uniform(low, high))
        mix = _ASSET_MIX[size]

        assets: List[PortfolioAsset] = []
        assets += self._add_cash_assets(total_assets * mix["cash"])
        assets += self._add_government_securities(total_assets * mix["sovereign"])
        assets += self._add_corporate_bonds(total_assets * mix["corporate_bonds"])
        assets += self._add_corporate_loans(total_assets * mix["corporate_loans"])
        assets += self._add_property_loans(total_assets * mix["property"])
        assets += self._add_equities(total_assets * mix["equity"])
        assets += self._add_derivatives(total_assets * mix["derivatives"])

        funding = self._generate_funding(size, total_assets)
        capital_base = self._generate_capital(total_assets)

        logger.info(f"Generated {size.value} bank snapshot '{bank_name}' with {len(assets)} assets")
        return BankSnapshot(
            bank_name=bank_name,
            size=size,
            assets=assets,
            funding=funding,
            capital_base=capital_base,
        )

    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}_{self._counter:05d}"

    def _split(self, total_amount: float, count: int, sigma: float) -> np.ndarray:
        """Split an amount into ``count`` lognormal-sized positions summing to it."""
        if total_amount <= 0 or count <= 0:
            return np.zeros(0)
        weights = self.rng.lognormal(mean=0.0, sigma=sigma, size=count)
        return total_amount * weights / weights.sum()

    def _maturity(self, min_years: float, max_years: float) -> date:
        days = int(self.rng.uniform(min_years, max_years) * 365)
        return self.as_of + timedelta(days=days)

    def _add_cash_assets(self, total_amount: float) -> List[PortfolioAsset]:
        """Add cash and central bank reserves."""
        if total_amount <= 0:
            return []
        return [PortfolioAsset(
            asset_id=self._next_id("cash"),
            asset_class=AssetClass.CASH,
            market_value=total_amount,
            notional_value=total_amount,
            liquidity_classification=LiquidityClass.HQLA_L1,
        )]

    def _add_government_securities(self, total_amount: float) -> List[PortfolioAsset]:
        """Add government securities."""
        assets = []
        for size in self._split(total_amount, int(self.rng.integers(5, 15)), 0.5):
            rating = str(self.rng.choice(["AAA", "AA", "A"], p=[0.5, 0.35, 0.15]))
            assets.append(PortfolioAsset(
                asset_id=self._next_id("govt_bond"),
                asset_class=AssetClass.SOVEREIGN,
                market_value=float(size),
                notional_value=float(size * self.rng.uniform(0.98, 1.02)),
                maturity_date=self._maturity(1, 30),
                credit_rating=rating,
                jurisdiction=str(self.rng.choice(_SOVEREIGNS)),
                sector="sovereign",
                liquidity_classification=LiquidityClass.HQLA_L1 if rating in ("AAA", "AA") else LiquidityClass.HQLA_L2A,
            ))
        return assets

    def _add_corporate_bonds(self, total_amount: float) -> List[PortfolioAsset]:
        """Add corporate bond securities."""
        assets = []
        for size in self._split(total_amount, int(self.rng.integers(10, 30)), 0.6):
            rating = str(self.rng.choice(["AA", "A", "BBB", "BB"], p=[0.2, 0.35, 0.35, 0.1]))
            if rating in ("AA", "A"):
                level = LiquidityClass.HQLA_L2A
            elif rating == "BBB":
                level = LiquidityClass.HQLA_L2B
            else:
                level = LiquidityClass.NON_HQLA
            assets.append(PortfolioAsset(
                asset_id=self._next_id("corp_bond"),
                asset_class=AssetClass.CORPORATE,
                market_value=float(size),
                notional_value=float(size * self.rng.uniform(0.95, 1.05)),
                maturity_date=self._maturity(2, 15),
                credit_rating=rating,
                counterparty=f"corp_{int(self.rng.integers(100, 1000))}",
                sector=str(self.rng.choice(["manufacturing", "utilities", "technology", "retail"])),
                liquidity_classification=level,
            ))
        return assets

    def _add_corporate_loans(self, total_amount: float) -> List[PortfolioAsset]:
        """Add corporate loans (not HQLA eligible)."""
        assets = []
        for size in self._split(total_amount, int(self.rng.integers(20, 60)), 0.8):
            assets.append(PortfolioAsset(
                asset_id=self._next_id("corp_loan"),
                asset_class=AssetClass.CORPORATE,
                market_value=float(size),
                notional_value=float(size),
                maturity_date=self._maturity(1, 7),
                credit_rating=str(self.rng.choice(["A", "BBB", "BB", "B"], p=[0.15, 0.4, 0.3, 0.15])),
                counterparty=f"corp_{int(self.rng.integers(100, 1000))}",
                sector=str(self.rng.choice(["manufacturing", "construction", "services", "energy"])),
            ))
        return assets

    def _add_property_loans(self, total_amount: float) -> List[PortfolioAsset]:
        """Add residential and commercial property lending."""
        assets = []
        for size in self._split(total_amount, int(self.rng.integers(10, 40)), 0.4):
            sector = "residential" if self.rng.random() < 0.7 else "commercial"
            assets.append(PortfolioAsset(
                asset_id=self._next_id("property"),
                asset_class=AssetClass.PROPERTY,
                market_value=float(size),
                notional_value=float(size),
                maturity_date=self._maturity(10, 30),
                sector=sector,
                # Pooled mortgage books have no single counterparty
                counterparty=None if sector == "residential" else f"cre_{int(self.rng.integers(100, 1000))}",
            ))
        return assets

    def _add_equities(self, total_amount: float) -> List[PortfolioAsset]:
        """Add listed equity holdings."""
        assets = []
        for size in self._split(total_amount, int(self.rng.integers(5, 20)), 0.7):
            assets.append(PortfolioAsset(
                asset_id=self._next_id("equity"),
                asset_class=AssetClass.EQUITY,
                market_value=float(size),
                counterparty=f"listed_{int(self.rng.integers(100, 1000))}",
                liquidity_classification=LiquidityClass.HQLA_L2B,
            ))
        return assets

    def _add_derivatives(self, total_amount: float) -> List[PortfolioAsset]:
        """Add derivative positions at replacement cost."""
        assets = []
        for size in self._split(total_amount, int(self.rng.integers(5, 15)), 1.0):
            assets.append(PortfolioAsset(
                asset_id=self._next_id("derivative"),
                asset_class=AssetClass.DERIVATIVE,
                market_value=float(size),
                notional_value=float(size * self.rng.uniform(10, 50)),
                maturity_date=self._maturity(0.5, 10),
                counterparty=f"bank_{int(self.rng.integers(10, 100))}",
            ))
        return assets

    def _generate_funding(self, size: BankSize, total_assets: float) -> FundingProfile:
        """Generate the liability side; funding covers most of the balance sheet."""
        total_funding = total_assets * float(self.rng.uniform(0.85, 0.92))
        mix = _FUNDING_MIX[size]
        return FundingProfile(
            retail_deposits=total_funding * mix["retail"],
            corporate_deposits=total_funding * mix["corporate"],
            wholesale_funding=total_funding * mix["wholesale"],
            secured_funding=total_funding * mix["secured"],
            stable_funding_ratio=float(self.rng.uniform(1.0, 1.3)),
        )

    def _generate_capital(self, total_assets: float) -> CapitalBase:
        tier1 = total_assets * float(self.rng.uniform(0.06, 0.09))
        return CapitalBase(
            tier1_capital=tier1,
            tier2_capital=tier1 * float(self.rng.uniform(0.15, 0.30)),
        )
