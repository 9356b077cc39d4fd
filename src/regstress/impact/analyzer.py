"""Regulatory change impact analysis.

Compares the bank's position under its current regulatory parameters with
the position under a proposed set, over the same unstressed portfolio and
funding. Compliance costs are financing-cost proxies, not accounting
figures.
"""

from datetime import date
from enum import Enum
from typing import Iterable, List, Optional, Tuple
import logging

from pydantic import BaseModel, ConfigDict, Field

from ..core.assets import PortfolioAsset
from ..core.capital import CapitalBase
from ..core.config import EngineConfig
from ..core.funding import FundingProfile
from ..core.parameters import RegulatoryChangeSet, RegulatoryParameters
from ..liquidity.lcr import LCRResult, LiquidityCoverageRatioCalculator
from ..metrics.adequacy import CapitalAdequacyCalculator, CapitalAdequacyResult, LargeExposureStatus

logger = logging.getLogger(__name__)


class ImpactSeverity(str, Enum):
    """Overall severity of a regulatory change."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


IMPLEMENTATION_TIMELINES = {
    ImpactSeverity.LOW: "3-6 months",
    ImpactSeverity.MEDIUM: "6-9 months",
    ImpactSeverity.HIGH: "9-12 months",
    ImpactSeverity.CRITICAL: "12-18 months",
}


class ThresholdType(str, Enum):
    """Regulatory thresholds tracked across regimes."""

    LCR = "LCR"
    TIER1 = "TIER1"
    TOTAL_CAPITAL = "TOTAL_CAPITAL"
    LEVERAGE = "LEVERAGE"
    LARGE_EXPOSURES = "LARGE_EXPOSURES"


THRESHOLD_LABELS = {
    ThresholdType.LCR: "LCR",
    ThresholdType.TIER1: "Tier 1 ratio",
    ThresholdType.TOTAL_CAPITAL: "Total capital ratio",
    ThresholdType.LEVERAGE: "Leverage ratio",
    ThresholdType.LARGE_EXPOSURES: "Large exposures",
}


class ThresholdSnapshot(BaseModel):
    """Before/after view of one threshold."""

    model_config = ConfigDict(frozen=True)

    threshold: ThresholdType
    current_requirement: float
    proposed_requirement: float
    current_value: Optional[float] = None
    proposed_value: Optional[float] = None
    current_compliant: bool
    proposed_compliant: bool

    @property
    def newly_non_compliant(self) -> bool:
        return self.current_compliant and not self.proposed_compliant

    @property
    def newly_compliant(self) -> bool:
        return not self.current_compliant and self.proposed_compliant


class StrategicRecommendation(BaseModel):
    """Ranked action in response to a regulatory change (priority 1 is most urgent)."""

    model_config = ConfigDict(frozen=True)

    priority: int = Field(ge=1)
    category: str
    action: str
    amount: float = Field(default=0, ge=0)


class RegulatoryImpactResult(BaseModel):
    """Comparison of current and proposed regulatory regimes."""

    regulation_name: Optional[str] = None
    implementation_date: Optional[date] = None

    current_lcr: LCRResult
    proposed_lcr: LCRResult
    current_capital: CapitalAdequacyResult
    proposed_capital: CapitalAdequacyResult

    # Ratio deltas (proposed - current)
    lcr_ratio_delta: float
    tier1_ratio_delta: float
    total_capital_ratio_delta: float
    leverage_ratio_delta: float

    # Requirement deltas
    lcr_requirement_delta: float
    tier1_minimum_delta: float
    total_capital_minimum_delta: float
    leverage_minimum_delta: float
    large_exposure_limit_delta: float

    # Minimum capital amount deltas
    tier1_requirement_delta: float
    total_capital_requirement_delta: float
    buffer_requirement_delta: float

    thresholds: List[ThresholdSnapshot]
    newly_non_compliant: List[str] = Field(default_factory=list)
    newly_compliant: List[str] = Field(default_factory=list)

    # Cost estimate
    additional_liquidity_required: float = Field(ge=0)
    additional_capital_required: float = Field(ge=0)
    annual_compliance_cost: float = Field(ge=0)
    implementation_cost: float = Field(ge=0)
    total_cost: float = Field(ge=0)

    severity: ImpactSeverity
    implementation_timeline: str
    recommendations: List[StrategicRecommendation] = Field(default_factory=list)


def _delta(proposed: float, current: float) -> float:
    """Difference that is zero for equal values, including two unbounded ratios."""
    if proposed == current:
        return 0.0
    return proposed - current


class RegulatoryImpactAnalyzer:
    """Analyzer for the impact of a proposed regulatory regime."""

    def __init__(self, assets: Iterable[PortfolioAsset], funding: FundingProfile,
                 current_parameters: Optional[RegulatoryParameters] = None,
                 config: Optional[EngineConfig] = None):
        self.assets = tuple(assets)
        self.funding = funding
        self.current_parameters = current_parameters or RegulatoryParameters()
        self.config = config or EngineConfig.load_default()

        self.lcr_calculator = LiquidityCoverageRatioCalculator(self.current_parameters, self.config)
        self.capital_calculator = CapitalAdequacyCalculator(self.current_parameters, self.config)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def analyze_change(self, proposed_parameters: RegulatoryParameters, capital_base: CapitalBase,
                       regulation_name: Optional[str] = None,
                       implementation_date: Optional[date] = None) -> RegulatoryImpactResult:
        """Compare the current regime with ``proposed_parameters``."""
        self.logger.info(f"Analyzing regulatory change: {regulation_name or 'unnamed proposal'}")

        current_lcr = self.lcr_calculator.calculate_lcr(self.assets, self.funding)
        current_capital = self.capital_calculator.calculate_capital_adequacy(self.assets, capital_base)

        proposed_lcr = LiquidityCoverageRatioCalculator(proposed_parameters, self.config).calculate_lcr(
            self.assets, self.funding
        )
        proposed_capital = CapitalAdequacyCalculator(proposed_parameters, self.config).calculate_capital_adequacy(
            self.assets, capital_base
        )

        thresholds = self._build_thresholds(
            proposed_parameters, current_lcr, proposed_lcr, current_capital, proposed_capital
        )
        newly_non_compliant = [
            f"{THRESHOLD_LABELS[t.threshold]} will become non-compliant" for t in thresholds if t.newly_non_compliant
        ]
        newly_compliant = [
            f"{THRESHOLD_LABELS[t.threshold]} will become compliant" for t in thresholds if t.newly_compliant
        ]

        additional_liquidity = max(0.0, proposed_lcr.deficit - current_lcr.deficit)
        additional_tier1 = max(0.0, proposed_capital.tier1_shortfall - current_capital.tier1_shortfall)
        additional_total = max(0.0, proposed_capital.total_capital_shortfall - current_capital.total_capital_shortfall)
        additional_capital = max(additional_tier1, additional_total)

        calibration = self.config.impact
        annual_cost = (
            additional_liquidity * calibration.liquidity_cost_bps / 10_000 +
            additional_capital * calibration.capital_cost_bps / 10_000
        )
        implementation_cost = (additional_capital + additional_liquidity) * calibration.implementation_cost_rate
        total_cost = annual_cost + implementation_cost

        severity = self._assess_severity(total_cost, len(newly_non_compliant))
        current = self.current_parameters

        result = RegulatoryImpactResult(
            regulation_name=regulation_name,
            implementation_date=implementation_date,
            current_lcr=current_lcr,
            proposed_lcr=proposed_lcr,
            current_capital=current_capital,
            proposed_capital=proposed_capital,
            lcr_ratio_delta=_delta(proposed_lcr.lcr_ratio, current_lcr.lcr_ratio),
            tier1_ratio_delta=_delta(proposed_capital.tier1_ratio, current_capital.tier1_ratio),
            total_capital_ratio_delta=_delta(proposed_capital.total_capital_ratio, current_capital.total_capital_ratio),
            leverage_ratio_delta=_delta(proposed_capital.leverage_ratio, current_capital.leverage_ratio),
            lcr_requirement_delta=_delta(proposed_parameters.lcr_requirement, current.lcr_requirement),
            tier1_minimum_delta=_delta(proposed_parameters.tier1_minimum, current.tier1_minimum),
            total_capital_minimum_delta=_delta(proposed_parameters.total_capital_minimum, current.total_capital_minimum),
            leverage_minimum_delta=_delta(proposed_parameters.leverage_minimum, current.leverage_minimum),
            large_exposure_limit_delta=_delta(proposed_parameters.large_exposure_limit, current.large_exposure_limit),
            tier1_requirement_delta=_delta(
                proposed_capital.requirements.tier1_requirement, current_capital.requirements.tier1_requirement
            ),
            total_capital_requirement_delta=_delta(
                proposed_capital.requirements.total_capital_requirement,
                current_capital.requirements.total_capital_requirement,
            ),
            buffer_requirement_delta=_delta(
                proposed_capital.buffers.total_buffer, current_capital.buffers.total_buffer
            ),
            thresholds=thresholds,
            newly_non_compliant=newly_non_compliant,
            newly_compliant=newly_compliant,
            additional_liquidity_required=additional_liquidity,
            additional_capital_required=additional_capital,
            annual_compliance_cost=annual_cost,
            implementation_cost=implementation_cost,
            total_cost=total_cost,
            severity=severity,
            implementation_timeline=IMPLEMENTATION_TIMELINES[severity],
            recommendations=[],
        )
        result = result.model_copy(update={
            "recommendations": self._generate_recommendations(result, additional_tier1, additional_total)
        })

        if newly_non_compliant:
            self.logger.warning(f"Proposed regime creates new breaches: {', '.join(newly_non_compliant)}")
        self.logger.info(f"Impact severity {severity.value}, total cost {total_cost:,.0f}")
        return result

    def analyze_change_set(self, change_set: RegulatoryChangeSet,
                           capital_base: CapitalBase) -> RegulatoryImpactResult:
        """Apply a change set to the current parameters and analyze the result."""
        proposed = self.current_parameters.with_changes(change_set.parameter_changes)
        return self.analyze_change(
            proposed,
            capital_base,
            regulation_name=change_set.regulation_name,
            implementation_date=change_set.implementation_date,
        )

    def _build_thresholds(self, proposed: RegulatoryParameters,
                          current_lcr: LCRResult, proposed_lcr: LCRResult,
                          current_capital: CapitalAdequacyResult,
                          proposed_capital: CapitalAdequacyResult) -> List[ThresholdSnapshot]:
        current = self.current_parameters
        return [
            ThresholdSnapshot(
                threshold=ThresholdType.LCR,
                current_requirement=current.lcr_requirement,
                proposed_requirement=proposed.lcr_requirement,
                current_value=current_lcr.lcr_ratio,
                proposed_value=proposed_lcr.lcr_ratio,
                current_compliant=current_lcr.is_compliant,
                proposed_compliant=proposed_lcr.is_compliant,
            ),
            ThresholdSnapshot(
                threshold=ThresholdType.TIER1,
                current_requirement=current.tier1_minimum,
                proposed_requirement=proposed.tier1_minimum,
                current_value=current_capital.tier1_ratio,
                proposed_value=proposed_capital.tier1_ratio,
                current_compliant=current_capital.tier1_compliant,
                proposed_compliant=proposed_capital.tier1_compliant,
            ),
            ThresholdSnapshot(
                threshold=ThresholdType.TOTAL_CAPITAL,
                current_requirement=current.total_capital_minimum,
                proposed_requirement=proposed.total_capital_minimum,
                current_value=current_capital.total_capital_ratio,
                proposed_value=proposed_capital.total_capital_ratio,
                current_compliant=current_capital.total_capital_compliant,
                proposed_compliant=proposed_capital.total_capital_compliant,
            ),
            ThresholdSnapshot(
                threshold=ThresholdType.LEVERAGE,
                current_requirement=current.leverage_minimum,
                proposed_requirement=proposed.leverage_minimum,
                current_value=current_capital.leverage_ratio,
                proposed_value=proposed_capital.leverage_ratio,
                current_compliant=current_capital.leverage_compliant,
                proposed_compliant=proposed_capital.leverage_compliant,
            ),
            ThresholdSnapshot(
                threshold=ThresholdType.LARGE_EXPOSURES,
                current_requirement=current.large_exposure_limit,
                proposed_requirement=proposed.large_exposure_limit,
                current_compliant=current_capital.large_exposures_compliant,
                proposed_compliant=proposed_capital.large_exposures_compliant,
            ),
        ]

    def _assess_severity(self, total_cost: float, new_breaches: int) -> ImpactSeverity:
        """Grade the change by cost and by the number of newly breached thresholds."""
        bands = self.config.impact
        if total_cost > bands.critical_cost or new_breaches >= bands.critical_breaches:
            return ImpactSeverity.CRITICAL
        if total_cost > bands.high_cost or new_breaches >= bands.high_breaches:
            return ImpactSeverity.HIGH
        if total_cost > bands.medium_cost or new_breaches >= bands.medium_breaches:
            return ImpactSeverity.MEDIUM
        return ImpactSeverity.LOW

    def _generate_recommendations(self, result: RegulatoryImpactResult, additional_tier1: float,
                                  additional_total: float) -> List[StrategicRecommendation]:
        """Derive ranked recommendations from the sign and size of each delta."""
        recommendations = []

        if result.additional_liquidity_required > 0:
            recommendations.append(StrategicRecommendation(
                priority=1,
                category="LIQUIDITY",
                action=f"Increase HQLA by {result.additional_liquidity_required:,.0f} before implementation date",
                amount=result.additional_liquidity_required,
            ))
        if additional_tier1 > 0:
            recommendations.append(StrategicRecommendation(
                priority=1,
                category="CAPITAL",
                action=f"Raise {additional_tier1:,.0f} in Tier 1 capital before implementation date",
                amount=additional_tier1,
            ))
        if additional_total > additional_tier1:
            recommendations.append(StrategicRecommendation(
                priority=2,
                category="CAPITAL",
                action=f"Raise {additional_total:,.0f} in total capital, Tier 2 instruments eligible",
                amount=additional_total,
            ))

        current_breaches = {
            e.counterparty for e in result.current_capital.large_exposures if e.status == LargeExposureStatus.BREACH
        }
        for exposure in result.proposed_capital.large_exposures:
            if exposure.status == LargeExposureStatus.BREACH and exposure.counterparty not in current_breaches:
                recommendations.append(StrategicRecommendation(
                    priority=2,
                    category="CONCENTRATION",
                    action=f"Reduce concentration to counterparty {exposure.counterparty}",
                    amount=max(0.0, exposure.exposure - exposure.limit),
                ))

        if result.lcr_requirement_delta > 0 and result.additional_liquidity_required == 0:
            recommendations.append(StrategicRecommendation(
                priority=3,
                category="LIQUIDITY",
                action="Review deposit mix to reduce outflow rates",
            ))
        if result.buffer_requirement_delta > 0:
            recommendations.append(StrategicRecommendation(
                priority=3,
                category="CAPITAL",
                action=f"Plan for {result.buffer_requirement_delta:,.0f} of additional buffer capital",
                amount=result.buffer_requirement_delta,
            ))

        requirement_deltas = self._requirement_deltas(result)
        if not recommendations and any(d < 0 for d in requirement_deltas) and all(d <= 0 for d in requirement_deltas):
            recommendations.append(StrategicRecommendation(
                priority=4,
                category="STRATEGY",
                action="Proposed regime loosens requirements; reassess buffers held above minimums",
            ))

        if not recommendations:
            recommendations.append(StrategicRecommendation(
                priority=5,
                category="MONITORING",
                action="No action required; continue monitoring regulatory developments",
            ))

        recommendations.sort(key=lambda r: (r.priority, -r.amount))
        return recommendations

    @staticmethod
    def _requirement_deltas(result: RegulatoryImpactResult) -> Tuple[float, ...]:
        return (
            result.lcr_requirement_delta,
            result.tier1_minimum_delta,
            result.total_capital_minimum_delta,
            result.leverage_minimum_delta,
            result.buffer_requirement_delta,
            # A higher large exposure limit is a loosening
            -result.large_exposure_limit_delta,
        )


def analyze_regulatory_change(proposed_parameters: RegulatoryParameters, capital_base: CapitalBase,
                              assets: Iterable[PortfolioAsset], funding: FundingProfile,
                              current_parameters: Optional[RegulatoryParameters] = None,
                              config: Optional[EngineConfig] = None) -> RegulatoryImpactResult:
    """Compare ``current_parameters`` with ``proposed_parameters`` for one portfolio."""
    analyzer = RegulatoryImpactAnalyzer(assets, funding, current_parameters, config)
    return analyzer.analyze_change(proposed_parameters, capital_base)
