"""Stress testing engine for the regulatory stress engine."""

from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from ..core.assets import AssetClass, PortfolioAsset, total_market_value
from ..core.capital import CapitalBase
from ..core.config import EngineConfig
from ..core.funding import FundingProfile
from ..core.parameters import RegulatoryParameters
from ..liquidity.lcr import LCRResult, LiquidityCoverageRatioCalculator
from ..metrics.adequacy import CapitalAdequacyCalculator, CapitalAdequacyResult, LargeExposureStatus
from .credit_loss import CreditLossModel
from .scenarios import PREDEFINED_SCENARIOS, ScenarioSeverity, StressScenario, get_scenario

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Outcome grading of a stress run."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ActionPriority(str, Enum):
    """Urgency of a management action."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ManagementAction(BaseModel):
    """Remedial action sized to a stress outcome."""

    model_config = ConfigDict(frozen=True)

    category: str
    action: str
    amount: float = Field(default=0, ge=0)
    timeline: str
    priority: ActionPriority


class StressTestResult(BaseModel):
    """Results from a single scenario run."""

    scenario_id: str
    scenario_name: str
    scenario_severity: ScenarioSeverity

    # Stressed inputs
    stressed_assets: List[PortfolioAsset]
    stressed_funding: FundingProfile
    stressed_capital: CapitalBase
    credit_losses: float = Field(ge=0)
    credit_losses_by_class: Dict[AssetClass, float] = Field(default_factory=dict)

    # Recomputed metrics
    lcr_result: LCRResult
    capital_result: CapitalAdequacyResult

    # Outcome
    severity: Severity
    passed: bool
    risk_factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    capital_shortfall: float = Field(ge=0)
    liquidity_shortfall: float = Field(ge=0)
    lending_capacity_reduction: float = Field(ge=0)
    management_actions: List[ManagementAction] = Field(default_factory=list)

    @property
    def lcr_ratio(self) -> float:
        return self.lcr_result.lcr_ratio

    @property
    def tier1_ratio(self) -> float:
        return self.capital_result.tier1_ratio

    @property
    def total_capital_ratio(self) -> float:
        return self.capital_result.total_capital_ratio

    @property
    def leverage_ratio(self) -> float:
        return self.capital_result.leverage_ratio

    @property
    def stressed_asset_value(self) -> float:
        return total_market_value(self.stressed_assets)


def _finite_mean(values: Sequence[float]) -> float:
    """Mean over finite values; unbounded when every value is unbounded."""
    data = np.asarray(values, dtype=float)
    finite = data[np.isfinite(data)]
    if finite.size == 0:
        return float("inf")
    return float(finite.mean())


class BatchStressResult(BaseModel):
    """Aggregated results from running several scenarios."""

    results: List[StressTestResult]

    min_lcr: float
    max_lcr: float
    average_lcr: float
    min_tier1_ratio: float
    max_tier1_ratio: float
    average_tier1_ratio: float

    worst_case: StressTestResult
    worst_case_scenario: str

    passed_count: int = Field(ge=0)
    failed_count: int = Field(ge=0)
    pass_rate: float = Field(ge=0, le=1)

    max_capital_shortfall: float = Field(ge=0)
    max_liquidity_shortfall: float = Field(ge=0)

    @classmethod
    def from_results(cls, results: Sequence[StressTestResult]) -> "BatchStressResult":
        """Aggregate scenario results; ``results`` must not be empty."""
        if not results:
            raise ValueError("Cannot aggregate an empty batch of stress results")

        lcr = np.array([r.lcr_ratio for r in results], dtype=float)
        tier1 = np.array([r.tier1_ratio for r in results], dtype=float)

        # Lowest LCR, then lowest Tier 1 ratio, then input order
        worst_index = min(range(len(results)), key=lambda i: (lcr[i], tier1[i], i))
        worst = results[worst_index]

        passed = sum(1 for r in results if r.passed)

        return cls(
            results=list(results),
            min_lcr=float(lcr.min()),
            max_lcr=float(lcr.max()),
            average_lcr=_finite_mean(lcr),
            min_tier1_ratio=float(tier1.min()),
            max_tier1_ratio=float(tier1.max()),
            average_tier1_ratio=_finite_mean(tier1),
            worst_case=worst,
            worst_case_scenario=worst.scenario_name,
            passed_count=passed,
            failed_count=len(results) - passed,
            pass_rate=passed / len(results),
            max_capital_shortfall=max(r.capital_shortfall for r in results),
            max_liquidity_shortfall=max(r.liquidity_shortfall for r in results),
        )

    def to_frame(self) -> pd.DataFrame:
        """One summary row per scenario, in run order."""
        rows = []
        for result in self.results:
            rows.append({
                "scenario_id": result.scenario_id,
                "scenario_name": result.scenario_name,
                "severity": result.severity.value,
                "passed": result.passed,
                "lcr_ratio": result.lcr_ratio,
                "tier1_ratio": result.tier1_ratio,
                "total_capital_ratio": result.total_capital_ratio,
                "leverage_ratio": result.leverage_ratio,
                "credit_losses": result.credit_losses,
                "capital_shortfall": result.capital_shortfall,
                "liquidity_shortfall": result.liquidity_shortfall,
                "lending_capacity_reduction": result.lending_capacity_reduction,
            })
        return pd.DataFrame(rows).set_index("scenario_id")


class StressTestingEngine:
    """Engine for running supervisory and custom stress scenarios.

    The base portfolio, funding profile and parameters are read-only. Each
    run works on its own stressed copies, so scenarios can run concurrently.
    """

    def __init__(self, assets: Iterable[PortfolioAsset], funding: FundingProfile,
                 parameters: Optional[RegulatoryParameters] = None,
                 config: Optional[EngineConfig] = None,
                 max_workers: Optional[int] = None):
        """Initialize stress testing engine."""
        self.assets = tuple(assets)
        self.funding = funding
        self.parameters = parameters or RegulatoryParameters()
        self.config = config or EngineConfig.load_default()
        self.max_workers = max_workers

        self.lcr_calculator = LiquidityCoverageRatioCalculator(self.parameters, self.config)
        self.capital_calculator = CapitalAdequacyCalculator(self.parameters, self.config)
        self.credit_loss_model = CreditLossModel(self.config)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def run_scenario(self, scenario: StressScenario) -> StressTestResult:
        """Run complete stress test for given scenario."""
        self.logger.info(f"Running stress test: {scenario.name}")

        stressed_assets = self._apply_asset_stress(scenario)
        stressed_funding = self.funding.apply_shocks(scenario.funding_shocks, floor=self.config.stress.funding_floor)

        losses_by_class = self.credit_loss_model.losses_by_class(stressed_assets, scenario)
        credit_losses = sum(losses_by_class.values())
        stressed_capital = scenario.capital_base.after_losses(credit_losses)

        lcr_result = self.lcr_calculator.calculate_lcr(stressed_assets, stressed_funding)
        capital_result = self.capital_calculator.calculate_capital_adequacy(stressed_assets, stressed_capital)

        liquidity_shortfall = lcr_result.deficit
        capital_shortfall = capital_result.capital_shortfall
        stress_calibration = self.config.stress
        lending_capacity_reduction = (
            capital_shortfall * stress_calibration.capital_lending_multiplier +
            liquidity_shortfall * stress_calibration.liquidity_lending_multiplier
        )

        severity, risk_factors = self._assess_severity(lcr_result, capital_result, credit_losses)
        passed = lcr_result.is_compliant and self._capital_ratios_met(capital_result)

        result = StressTestResult(
            scenario_id=scenario.scenario_id,
            scenario_name=scenario.name,
            scenario_severity=scenario.severity,
            stressed_assets=stressed_assets,
            stressed_funding=stressed_funding,
            stressed_capital=stressed_capital,
            credit_losses=credit_losses,
            credit_losses_by_class=losses_by_class,
            lcr_result=lcr_result,
            capital_result=capital_result,
            severity=severity,
            passed=passed,
            risk_factors=risk_factors,
            recommendations=self._generate_recommendations(severity, lcr_result, capital_result),
            capital_shortfall=capital_shortfall,
            liquidity_shortfall=liquidity_shortfall,
            lending_capacity_reduction=lending_capacity_reduction,
            management_actions=self._generate_management_actions(
                lcr_result, capital_result, credit_losses
            ),
        )

        self.logger.info(
            f"Completed stress test {scenario.scenario_id}: severity={severity.value}, passed={passed}"
        )
        return result

    def run_scenario_by_id(self, scenario_id: str) -> StressTestResult:
        """Run a predefined scenario; unknown ids fail before any computation."""
        return self.run_scenario(get_scenario(scenario_id))

    def run_multiple(self, scenarios: Iterable[StressScenario]) -> BatchStressResult:
        """Run stress tests for multiple scenarios, preserving input order."""
        scenarios = list(scenarios)
        if not scenarios:
            raise ValueError("At least one scenario is required for a batch run")

        if self.max_workers and self.max_workers > 1 and len(scenarios) > 1:
            self.logger.info(f"Running {len(scenarios)} scenarios on {self.max_workers} workers")
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(self.run_scenario, scenarios))
        else:
            results = [self.run_scenario(scenario) for scenario in scenarios]

        batch = BatchStressResult.from_results(results)
        self.logger.info(
            f"Batch complete: {batch.passed_count}/{len(results)} passed, worst case {batch.worst_case_scenario}"
        )
        return batch

    def run_catalog(self) -> BatchStressResult:
        """Run every predefined supervisory scenario."""
        return self.run_multiple(factory() for factory in PREDEFINED_SCENARIOS.values())

    def _apply_asset_stress(self, scenario: StressScenario) -> List[PortfolioAsset]:
        """Revalue each asset by its class shock; classifiers are untouched."""
        return [
            asset.with_market_value(asset.market_value * (1 + scenario.get_asset_shock(asset.asset_class)))
            for asset in self.assets
        ]

    def _capital_ratios_met(self, capital_result: CapitalAdequacyResult) -> bool:
        return (
            capital_result.tier1_compliant and
            capital_result.total_capital_compliant and
            capital_result.leverage_compliant
        )

    def _assess_severity(self, lcr_result: LCRResult, capital_result: CapitalAdequacyResult,
                         credit_losses: float) -> Tuple[Severity, List[str]]:
        """Grade the outcome and list the factors behind the grade."""
        params = self.parameters
        risk_factors = []

        if not lcr_result.is_compliant:
            risk_factors.append(
                f"LCR {lcr_result.lcr_ratio:.1%} below requirement {params.lcr_requirement:.0%}"
            )
        if not capital_result.tier1_compliant:
            risk_factors.append(
                f"Tier 1 ratio {capital_result.tier1_ratio:.2%} below minimum {params.tier1_minimum:.2%}"
            )
        if not capital_result.total_capital_compliant:
            risk_factors.append(
                f"Total capital ratio {capital_result.total_capital_ratio:.2%} below minimum "
                f"{params.total_capital_minimum:.2%}"
            )
        if not capital_result.leverage_compliant:
            risk_factors.append(
                f"Leverage ratio {capital_result.leverage_ratio:.2%} below minimum {params.leverage_minimum:.2%}"
            )

        if risk_factors:
            severity = Severity.HIGH
        else:
            warning_level = params.lcr_requirement + self.config.stress.lcr_warning_margin
            buffer_level = params.tier1_minimum + capital_result.buffers.conservation_rate
            if not lcr_result.degenerate_denominator and lcr_result.lcr_ratio < warning_level:
                risk_factors.append(f"LCR {lcr_result.lcr_ratio:.1%} within {warning_level:.0%} warning level")
            if not capital_result.degenerate_rwa and capital_result.tier1_ratio < buffer_level:
                risk_factors.append(
                    f"Tier 1 ratio {capital_result.tier1_ratio:.2%} inside the conservation buffer"
                )
            severity = Severity.MEDIUM if risk_factors else Severity.LOW

        for exposure in capital_result.large_exposures:
            if exposure.status == LargeExposureStatus.BREACH:
                risk_factors.append(f"Large exposure limit breached for {exposure.counterparty}")
        if credit_losses > 0:
            risk_factors.append(f"Credit losses of {credit_losses:,.0f} absorbed by Tier 1 capital")

        if severity == Severity.HIGH:
            self.logger.warning(f"Stress breaches regulatory thresholds: {'; '.join(risk_factors)}")
        return severity, risk_factors

    def _generate_recommendations(self, severity: Severity, lcr_result: LCRResult,
                                  capital_result: CapitalAdequacyResult) -> List[str]:
        """Generate recommendations based on stress test results."""
        recommendations = []

        if lcr_result.deficit > 0:
            recommendations.append(f"Increase HQLA by {lcr_result.deficit:,.0f} to meet the LCR requirement")
        if capital_result.tier1_shortfall > 0:
            recommendations.append(f"Raise {capital_result.tier1_shortfall:,.0f} in Tier 1 capital")
        if capital_result.total_capital_shortfall > 0:
            recommendations.append(f"Raise {capital_result.total_capital_shortfall:,.0f} in total capital")
        for exposure in capital_result.large_exposures:
            if exposure.status == LargeExposureStatus.BREACH:
                recommendations.append(f"Reduce concentration to counterparty {exposure.counterparty}")

        if not recommendations and severity == Severity.MEDIUM:
            recommendations.append("Rebuild headroom above regulatory minimums before further stress")
            recommendations.append("Review distributions while operating inside the buffer zone")

        if not recommendations:
            recommendations.append("Maintain current liquidity and capital position")
            recommendations.append("Continue monitoring against regulatory thresholds")

        return recommendations

    def _generate_management_actions(self, lcr_result: LCRResult, capital_result: CapitalAdequacyResult,
                                     credit_losses: float) -> List[ManagementAction]:
        actions = []

        if capital_result.capital_shortfall > 0:
            actions.append(ManagementAction(
                category="CAPITAL",
                action="Immediate capital raise",
                amount=capital_result.capital_shortfall,
                timeline="Immediate",
                priority=ActionPriority.CRITICAL,
            ))

        if lcr_result.deficit > 0:
            actions.append(ManagementAction(
                category="LIQUIDITY",
                action="Increase HQLA holdings",
                amount=lcr_result.deficit,
                timeline="30 days",
                priority=ActionPriority.HIGH,
            ))

        for exposure in capital_result.large_exposures:
            if exposure.status == LargeExposureStatus.BREACH:
                actions.append(ManagementAction(
                    category="CONCENTRATION",
                    action=f"Reduce exposure to {exposure.counterparty}",
                    amount=exposure.exposure - exposure.limit,
                    timeline="90 days",
                    priority=ActionPriority.HIGH,
                ))

        if credit_losses > 0:
            actions.append(ManagementAction(
                category="ASSET_QUALITY",
                action="Enhanced credit monitoring",
                timeline="Immediate",
                priority=ActionPriority.MEDIUM,
            ))

        return actions


def run_stress_scenario(scenario: StressScenario, assets: Iterable[PortfolioAsset], funding: FundingProfile,
                        parameters: Optional[RegulatoryParameters] = None,
                        config: Optional[EngineConfig] = None) -> StressTestResult:
    """Run one scenario against a portfolio and funding profile."""
    return StressTestingEngine(assets, funding, parameters, config).run_scenario(scenario)


def run_stress_batch(scenarios: Iterable[StressScenario], assets: Iterable[PortfolioAsset],
                     funding: FundingProfile, parameters: Optional[RegulatoryParameters] = None,
                     config: Optional[EngineConfig] = None,
                     max_workers: Optional[int] = None) -> BatchStressResult:
    """Run several scenarios against a portfolio and funding profile."""
    return StressTestingEngine(assets, funding, parameters, config, max_workers).run_multiple(scenarios)
