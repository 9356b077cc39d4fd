"""Stressed credit losses applied during scenario runs.

Loss rates by asset class and rating (or sector for property):

    CORPORATE  AAA/AA 2%, A 4%, BBB 8%, BB 15%, anything else or unrated 20%
    PROPERTY   residential 5%, other 12%

A rate only applies to classes the scenario shocks adversely, so a
scenario with no negative shocks produces no loss.
"""

from typing import Dict, Iterable, Optional
import logging

from ..core.assets import AssetClass, PortfolioAsset
from ..core.config import EngineConfig
from ..rwa.credit import normalise_rating
from .scenarios import StressScenario

logger = logging.getLogger(__name__)


class CreditLossModel:
    """Deterministic class x rating loss table."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def get_loss_rate(self, asset: PortfolioAsset) -> float:
        """Loss rate for an asset, ignoring whether its class is shocked."""
        if asset.asset_class == AssetClass.PROPERTY:
            sector = (asset.sector or "").strip().lower()
            return self.config.get_credit_loss_rate(AssetClass.PROPERTY, sector or None)
        if asset.asset_class == AssetClass.CORPORATE:
            return self.config.get_credit_loss_rate(AssetClass.CORPORATE, normalise_rating(asset.credit_rating))
        return self.config.get_credit_loss_rate(asset.asset_class, None)

    def calculate_losses(self, stressed_assets: Iterable[PortfolioAsset],
                         scenario: StressScenario) -> float:
        """Total credit loss over already-stressed assets."""
        return sum(self.losses_by_class(stressed_assets, scenario).values())

    def losses_by_class(self, stressed_assets: Iterable[PortfolioAsset],
                        scenario: StressScenario) -> Dict[AssetClass, float]:
        """Credit loss per asset class over already-stressed assets."""
        losses: Dict[AssetClass, float] = {}
        for asset in stressed_assets:
            if not scenario.is_adverse(asset.asset_class):
                continue
            rate = self.get_loss_rate(asset)
            if rate <= 0:
                continue
            loss = max(0.0, asset.market_value) * rate
            losses[asset.asset_class] = losses.get(asset.asset_class, 0.0) + loss

        logger.debug(f"Credit losses for {scenario.scenario_id}: {losses}")
        return losses
