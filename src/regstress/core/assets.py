"""Portfolio asset definitions for the regulatory stress engine."""

from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class AssetClass(str, Enum):
    """Asset classes used for risk weights and stress shocks."""

    SOVEREIGN = "SOVEREIGN"
    CORPORATE = "CORPORATE"
    EQUITY = "EQUITY"
    DERIVATIVE = "DERIVATIVE"
    CASH = "CASH"
    PROPERTY = "PROPERTY"


class LiquidityClass(str, Enum):
    """Regulatory liquidity classification for HQLA."""

    HQLA_L1 = "HQLA_L1"      # 0% haircut (cash, central bank reserves, top sovereigns)
    HQLA_L2A = "HQLA_L2A"    # 15% haircut
    HQLA_L2B = "HQLA_L2B"    # 25% haircut, capped
    NON_HQLA = "NON_HQLA"


HQLA_CLASSES = (LiquidityClass.HQLA_L1, LiquidityClass.HQLA_L2A, LiquidityClass.HQLA_L2B)


class PortfolioAsset(BaseModel):
    """Individual exposure held by the bank.

    ``market_value`` is the single source of truth for valuation. The risk
    weight and liquidity classification are independent classifiers and are
    left untouched when the value is shocked.
    """

    model_config = ConfigDict(frozen=True)

    # Identification
    asset_id: str
    asset_class: AssetClass

    # Valuation
    market_value: float = Field(description="Market value in reporting currency")
    notional_value: Optional[float] = None
    maturity_date: Optional[date] = None

    # Classification
    credit_rating: Optional[str] = None
    jurisdiction: Optional[str] = None
    sector: Optional[str] = None
    counterparty: Optional[str] = None
    risk_weight: Optional[float] = Field(None, ge=0, description="Explicit risk weight override")
    liquidity_classification: LiquidityClass = LiquidityClass.NON_HQLA

    def with_market_value(self, market_value: float) -> "PortfolioAsset":
        """Return a copy revalued at ``market_value``; classifiers are kept."""
        return self.model_copy(update={"market_value": market_value})

    def is_hqla(self) -> bool:
        """Check if asset counts towards HQLA."""
        return self.liquidity_classification in HQLA_CLASSES


def total_market_value(assets: Iterable[PortfolioAsset]) -> float:
    """Unweighted sum of market values."""
    return sum(asset.market_value for asset in assets)


def value_by_liquidity_class(assets: Iterable[PortfolioAsset], level: LiquidityClass) -> float:
    """Total market value of assets with a given liquidity classification."""
    return sum(asset.market_value for asset in assets if asset.liquidity_classification == level)


def aggregate_by_counterparty(assets: Iterable[PortfolioAsset]) -> Dict[str, float]:
    """Aggregate market value per counterparty, skipping unattributed assets."""
    exposures: Dict[str, float] = {}
    for asset in assets:
        if asset.counterparty:
            exposures[asset.counterparty] = exposures.get(asset.counterparty, 0.0) + asset.market_value
    return exposures


def assets_by_class(assets: Iterable[PortfolioAsset], asset_class: AssetClass) -> List[PortfolioAsset]:
    """Get all assets of a specific class."""
    return [asset for asset in assets if asset.asset_class == asset_class]
