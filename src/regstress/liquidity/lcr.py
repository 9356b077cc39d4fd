"""Liquidity Coverage Ratio (LCR) calculation for the Basel III liquidity framework."""

from enum import Enum
from typing import Dict, Iterable, Optional
from pydantic import BaseModel, ConfigDict, Field
import logging

from ..core.assets import LiquidityClass, PortfolioAsset
from ..core.config import EngineConfig
from ..core.funding import FundingProfile, FundingType
from ..core.parameters import RegulatoryParameters

logger = logging.getLogger(__name__)


class ComplianceStatus(str, Enum):
    """Verdict against a regulatory threshold."""

    COMPLIANT = "COMPLIANT"
    NON_COMPLIANT = "NON_COMPLIANT"


class OutflowBreakdown(BaseModel):
    """Stressed 30-day outflows per funding bucket."""

    model_config = ConfigDict(frozen=True)

    retail: float = 0.0
    corporate: float = 0.0
    wholesale: float = 0.0
    secured: float = 0.0

    @property
    def total(self) -> float:
        return self.retail + self.corporate + self.wholesale + self.secured


class LCRResult(BaseModel):
    """LCR calculation result."""

    # HQLA components (post-haircut)
    hqla_value: float = Field(ge=0)
    level1_assets: float = Field(ge=0)
    level2a_assets: float = Field(ge=0)
    level2b_assets: float = Field(ge=0, description="Level 2B after haircut, before the cap")
    level2b_allowed: float = Field(ge=0)
    level2b_excluded: float = Field(ge=0)

    # Cash flow components
    gross_outflows: float = Field(ge=0)
    capped_inflows: float = Field(ge=0)
    net_cash_outflows: float = Field(ge=0)
    outflow_breakdown: OutflowBreakdown

    # Final ratio
    lcr_ratio: float = Field(ge=0)
    requirement: float
    compliance_status: ComplianceStatus
    buffer_or_deficit: float
    degenerate_denominator: bool = False

    # Run-off rates applied
    retail_outflow_rate: float
    corporate_outflow_rate: float
    wholesale_outflow_rate: float
    secured_outflow_rate: float

    @property
    def is_compliant(self) -> bool:
        return self.compliance_status == ComplianceStatus.COMPLIANT

    @property
    def deficit(self) -> float:
        """HQLA needed to reach the requirement (zero when compliant)."""
        return max(0.0, -self.buffer_or_deficit)


class LiquidityCoverageRatioCalculator:
    """
    Liquidity Coverage Ratio calculator following Basel III liquidity standards.

    LCR = High Quality Liquid Assets / Net Cash Outflows (30 days) >= requirement

    Haircuts, the Level 2B cap, run-off rates, the inflow cap and the
    net-outflow floor all come from ``EngineConfig.liquidity``.
    """

    def __init__(self, parameters: Optional[RegulatoryParameters] = None,
                 config: Optional[EngineConfig] = None):
        """Initialize LCR calculator."""
        self.parameters = parameters or RegulatoryParameters()
        self.config = config or EngineConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def calculate_lcr(self, assets: Iterable[PortfolioAsset], funding: FundingProfile) -> LCRResult:
        """Calculate LCR for given assets and funding profile."""

        self.logger.info("Calculating LCR")
        calibration = self.config.liquidity

        # Calculate HQLA
        hqla = self._calculate_hqla(assets)

        # Calculate cash outflows and inflows
        outflows = self._calculate_cash_outflows(funding)
        gross_outflows = outflows.total
        capped_inflows = min(funding.contractual_inflows, calibration.inflow_cap * gross_outflows)
        net_outflows = max(gross_outflows - capped_inflows,
                           calibration.net_outflow_floor * gross_outflows)

        requirement = self.parameters.lcr_requirement
        degenerate = net_outflows == 0
        if degenerate:
            # No stressed outflows: compliant by definition
            lcr_ratio = float("inf")
            compliant = True
            self.logger.warning("Net cash outflows are zero; LCR reported as unbounded")
        else:
            lcr_ratio = hqla["total"] / net_outflows
            compliant = lcr_ratio >= requirement

        buffer_or_deficit = hqla["total"] - net_outflows * requirement
        if not compliant:
            self.logger.warning(
                f"LCR {lcr_ratio:.2%} below requirement {requirement:.0%}, deficit {-buffer_or_deficit:,.0f}"
            )

        return LCRResult(
            hqla_value=hqla["total"],
            level1_assets=hqla["level_1"],
            level2a_assets=hqla["level_2a"],
            level2b_assets=hqla["level_2b"],
            level2b_allowed=hqla["level_2b_allowed"],
            level2b_excluded=hqla["level_2b"] - hqla["level_2b_allowed"],
            gross_outflows=gross_outflows,
            capped_inflows=capped_inflows,
            net_cash_outflows=net_outflows,
            outflow_breakdown=outflows,
            lcr_ratio=lcr_ratio,
            requirement=requirement,
            compliance_status=ComplianceStatus.COMPLIANT if compliant else ComplianceStatus.NON_COMPLIANT,
            buffer_or_deficit=buffer_or_deficit,
            degenerate_denominator=degenerate,
            retail_outflow_rate=self.config.get_outflow_rate(FundingType.RETAIL_DEPOSITS),
            corporate_outflow_rate=self.config.get_outflow_rate(FundingType.CORPORATE_DEPOSITS),
            wholesale_outflow_rate=self.config.get_outflow_rate(FundingType.WHOLESALE_FUNDING),
            secured_outflow_rate=self.config.get_outflow_rate(FundingType.SECURED_FUNDING),
        )

    def _calculate_hqla(self, assets: Iterable[PortfolioAsset]) -> Dict[str, float]:
        """Calculate High Quality Liquid Assets."""

        hqla_breakdown = {
            'level_1': 0.0,
            'level_2a': 0.0,
            'level_2b': 0.0,
        }
        keys = {
            LiquidityClass.HQLA_L1: 'level_1',
            LiquidityClass.HQLA_L2A: 'level_2a',
            LiquidityClass.HQLA_L2B: 'level_2b',
        }

        for asset in assets:
            key = keys.get(asset.liquidity_classification)
            if key is None:
                continue
            # A negative stressed valuation contributes nothing
            value = max(0.0, asset.market_value)
            hqla_breakdown[key] += value * (1 - self.config.get_haircut(asset.liquidity_classification))

        # Level 2B cannot exceed the cap share of final HQLA, anchored on L1 + L2A
        cap = self.config.liquidity.level2b_cap
        anchor = max(0.0, hqla_breakdown['level_1'] + hqla_breakdown['level_2a'])
        max_level_2b = cap / (1 - cap) * anchor
        hqla_breakdown['level_2b_allowed'] = min(hqla_breakdown['level_2b'], max_level_2b)

        hqla_breakdown['total'] = (
            hqla_breakdown['level_1'] + hqla_breakdown['level_2a'] + hqla_breakdown['level_2b_allowed']
        )

        self.logger.debug(f"HQLA calculated: {hqla_breakdown}")
        return hqla_breakdown

    def _calculate_cash_outflows(self, funding: FundingProfile) -> OutflowBreakdown:
        """Calculate 30-day stressed cash outflows."""
        outflows = OutflowBreakdown(
            retail=funding.retail_deposits * self.config.get_outflow_rate(FundingType.RETAIL_DEPOSITS),
            corporate=funding.corporate_deposits * self.config.get_outflow_rate(FundingType.CORPORATE_DEPOSITS),
            wholesale=funding.wholesale_funding * self.config.get_outflow_rate(FundingType.WHOLESALE_FUNDING),
            secured=funding.secured_funding * self.config.get_outflow_rate(FundingType.SECURED_FUNDING),
        )
        self.logger.debug(f"Outflows calculated: {outflows.model_dump()}")
        return outflows


def calculate_lcr(assets: Iterable[PortfolioAsset], funding: FundingProfile,
                  parameters: RegulatoryParameters,
                  config: Optional[EngineConfig] = None) -> LCRResult:
    """Calculate the LCR of a portfolio under ``parameters``."""
    return LiquidityCoverageRatioCalculator(parameters, config).calculate_lcr(assets, funding)
