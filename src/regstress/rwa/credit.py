"""Credit risk RWA calculations under the standardised approach."""

from typing import Iterable, Optional
import logging

from ..core.assets import AssetClass, PortfolioAsset
from ..core.config import EngineConfig

logger = logging.getLogger(__name__)


def normalise_rating(rating: Optional[str]) -> Optional[str]:
    """Upper-case a rating and drop notch modifiers (``AA-`` -> ``AA``)."""
    if not rating:
        return None
    cleaned = rating.strip().upper().rstrip("+-")
    return cleaned or None


class CreditRiskCalculator:
    """Calculator for credit risk RWA using the standardised approach."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def calculate_total_rwa(self, assets: Iterable[PortfolioAsset]) -> float:
        """Calculate total credit RWA for a portfolio."""
        total_rwa = 0.0

        for asset in assets:
            total_rwa += self.calculate_asset_rwa(asset)

        logger.debug(f"Calculated standardised credit RWA: {total_rwa:,.0f}")
        return total_rwa

    def calculate_asset_rwa(self, asset: PortfolioAsset) -> float:
        """Calculate RWA for a single asset."""
        return asset.market_value * self.get_risk_weight(asset)

    def get_risk_weight(self, asset: PortfolioAsset) -> float:
        """Get risk weight for an asset; an explicit weight on the asset wins."""
        if asset.risk_weight is not None:
            return asset.risk_weight

        asset_class = asset.asset_class
        rating = normalise_rating(asset.credit_rating)

        if asset_class == AssetClass.CASH:
            return self.config.get_risk_weight("cash")
        elif asset_class == AssetClass.SOVEREIGN:
            return self._get_sovereign_risk_weight(rating)
        elif asset_class == AssetClass.CORPORATE:
            return self._get_corporate_risk_weight(rating)
        elif asset_class == AssetClass.EQUITY:
            return self.config.get_risk_weight("equity")
        elif asset_class == AssetClass.PROPERTY:
            return self.config.get_risk_weight("property")
        elif asset_class == AssetClass.DERIVATIVE:
            return self.config.get_risk_weight("derivative")
        else:
            return self.config.get_risk_weight("other_assets")

    def _get_sovereign_risk_weight(self, rating: Optional[str]) -> float:
        """Get sovereign risk weight based on rating."""
        if rating == "AAA":
            return self.config.get_risk_weight("sovereign_aaa")
        return self.config.get_risk_weight("sovereign")

    def _get_corporate_risk_weight(self, rating: Optional[str]) -> float:
        """Get corporate risk weight based on rating."""
        if rating in ("AAA", "AA"):
            return self.config.get_risk_weight("corporate_aaa_aa")
        elif rating == "A":
            return self.config.get_risk_weight("corporate_a")
        return self.config.get_risk_weight("corporate")
