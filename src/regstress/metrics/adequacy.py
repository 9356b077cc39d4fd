"""Capital adequacy, leverage and large exposure calculations."""

from enum import Enum
from typing import Iterable, List, Optional
from pydantic import BaseModel, ConfigDict, Field
import logging

from ..core.assets import PortfolioAsset, aggregate_by_counterparty, total_market_value
from ..core.buffers import BufferRequirements
from ..core.capital import CapitalBase
from ..core.config import EngineConfig
from ..core.parameters import RegulatoryParameters
from ..liquidity.lcr import ComplianceStatus
from ..rwa.credit import CreditRiskCalculator

logger = logging.getLogger(__name__)


class LargeExposureStatus(str, Enum):
    """Large exposure reporting status."""

    MONITOR = "MONITOR"     # reportable, within limit
    BREACH = "BREACH"


class LargeExposure(BaseModel):
    """Aggregated exposure to a single counterparty."""

    model_config = ConfigDict(frozen=True)

    counterparty: str
    exposure: float
    limit: float = Field(ge=0)
    utilisation: float = Field(description="Exposure as a fraction of the limit")
    status: LargeExposureStatus


class CapitalRequirements(BaseModel):
    """Minimum capital amounts implied by the regulatory minima."""

    model_config = ConfigDict(frozen=True)

    tier1_requirement: float
    total_capital_requirement: float
    leverage_requirement: float


class CapitalAdequacyResult(BaseModel):
    """Capital adequacy calculation result."""

    # Amounts
    risk_weighted_assets: float
    total_exposure: float
    tier1_capital: float = Field(ge=0)
    tier2_capital: float = Field(ge=0)

    # Ratios
    tier1_ratio: float
    total_capital_ratio: float
    leverage_ratio: float

    requirements: CapitalRequirements
    buffers: BufferRequirements
    large_exposures: List[LargeExposure] = Field(default_factory=list)

    # Verdicts
    tier1_compliant: bool
    total_capital_compliant: bool
    leverage_compliant: bool
    large_exposures_compliant: bool
    compliance_status: ComplianceStatus

    # Shortfalls (zero when compliant)
    tier1_shortfall: float = Field(ge=0)
    total_capital_shortfall: float = Field(ge=0)

    degenerate_rwa: bool = False
    degenerate_exposure: bool = False

    @property
    def is_compliant(self) -> bool:
        return self.compliance_status == ComplianceStatus.COMPLIANT

    @property
    def capital_shortfall(self) -> float:
        """Capital needed to clear every capital threshold."""
        return max(self.tier1_shortfall, self.total_capital_shortfall)


class CapitalAdequacyCalculator:
    """Calculator for capital adequacy ratios and concentration limits."""

    def __init__(self, parameters: Optional[RegulatoryParameters] = None,
                 config: Optional[EngineConfig] = None):
        self.parameters = parameters or RegulatoryParameters()
        self.config = config or EngineConfig()
        self.credit_calculator = CreditRiskCalculator(self.config)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def calculate_capital_adequacy(self, assets: Iterable[PortfolioAsset],
                                   capital_base: CapitalBase) -> CapitalAdequacyResult:
        """Calculate capital, leverage and large exposure compliance."""
        assets = list(assets)
        params = self.parameters

        self.logger.info(f"Calculating capital adequacy for {len(assets)} assets")

        rwa = self.credit_calculator.calculate_total_rwa(assets)
        total_exposure = total_market_value(assets)
        tier1 = capital_base.tier1_capital
        total_capital = capital_base.total_capital

        degenerate_rwa = rwa == 0
        degenerate_exposure = total_exposure == 0

        if degenerate_rwa:
            self.logger.warning("Risk-weighted assets are zero; capital ratios reported as unbounded")
            tier1_ratio = float("inf")
            total_ratio = float("inf")
        else:
            tier1_ratio = tier1 / rwa
            total_ratio = total_capital / rwa

        if degenerate_exposure:
            self.logger.warning("Total exposure is zero; leverage ratio reported as unbounded")
            leverage_ratio = float("inf")
        else:
            leverage_ratio = tier1 / total_exposure

        requirements = CapitalRequirements(
            tier1_requirement=rwa * params.tier1_minimum,
            total_capital_requirement=rwa * params.total_capital_minimum,
            leverage_requirement=total_exposure * params.leverage_minimum,
        )
        buffers = BufferRequirements.for_rwa(rwa, self.config, params)
        large_exposures = self.calculate_large_exposures(assets, tier1)

        tier1_compliant = degenerate_rwa or tier1_ratio >= params.tier1_minimum
        total_compliant = degenerate_rwa or total_ratio >= params.total_capital_minimum
        leverage_compliant = degenerate_exposure or leverage_ratio >= params.leverage_minimum
        large_exposures_compliant = all(
            exposure.status != LargeExposureStatus.BREACH for exposure in large_exposures
        )
        compliant = tier1_compliant and total_compliant and leverage_compliant and large_exposures_compliant

        tier1_shortfall = max(
            0.0,
            requirements.tier1_requirement - tier1,
            requirements.leverage_requirement - tier1,
        )
        total_shortfall = max(0.0, requirements.total_capital_requirement - total_capital)

        if not compliant:
            self.logger.warning(
                f"Capital thresholds breached: tier1={tier1_compliant}, total={total_compliant}, "
                f"leverage={leverage_compliant}, large_exposures={large_exposures_compliant}"
            )
        self.logger.debug(
            f"RWA {rwa:,.0f}, exposure {total_exposure:,.0f}, Tier 1 ratio {tier1_ratio:.4f}, "
            f"total ratio {total_ratio:.4f}, leverage {leverage_ratio:.4f}"
        )

        return CapitalAdequacyResult(
            risk_weighted_assets=rwa,
            total_exposure=total_exposure,
            tier1_capital=tier1,
            tier2_capital=capital_base.tier2_capital,
            tier1_ratio=tier1_ratio,
            total_capital_ratio=total_ratio,
            leverage_ratio=leverage_ratio,
            requirements=requirements,
            buffers=buffers,
            large_exposures=large_exposures,
            tier1_compliant=tier1_compliant,
            total_capital_compliant=total_compliant,
            leverage_compliant=leverage_compliant,
            large_exposures_compliant=large_exposures_compliant,
            compliance_status=ComplianceStatus.COMPLIANT if compliant else ComplianceStatus.NON_COMPLIANT,
            tier1_shortfall=tier1_shortfall,
            total_capital_shortfall=total_shortfall,
            degenerate_rwa=degenerate_rwa,
            degenerate_exposure=degenerate_exposure,
        )

    def calculate_large_exposures(self, assets: Iterable[PortfolioAsset], tier1_capital: float) -> List[LargeExposure]:
        """Report counterparties above the reporting threshold, largest first."""
        limit = self.parameters.large_exposure_limit * tier1_capital
        reporting_threshold = self.config.capital.large_exposure_reporting_fraction * limit

        reported = []
        for counterparty, exposure in aggregate_by_counterparty(assets).items():
            if exposure <= reporting_threshold:
                continue
            status = LargeExposureStatus.BREACH if exposure > limit else LargeExposureStatus.MONITOR
            reported.append(LargeExposure(
                counterparty=counterparty,
                exposure=exposure,
                limit=limit,
                utilisation=exposure / limit if limit > 0 else float("inf"),
                status=status,
            ))

        reported.sort(key=lambda e: e.exposure, reverse=True)
        return reported


def calculate_capital_adequacy(assets: Iterable[PortfolioAsset], parameters: RegulatoryParameters,
                               capital_base: CapitalBase,
                               config: Optional[EngineConfig] = None) -> CapitalAdequacyResult:
    """Calculate capital adequacy of a portfolio under ``parameters``."""
    return CapitalAdequacyCalculator(parameters, config).calculate_capital_adequacy(assets, capital_base)
