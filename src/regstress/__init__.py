"""RegStress Engine - regulatory liquidity and capital stress testing framework."""

# Core records
from .core.assets import AssetClass, LiquidityClass, PortfolioAsset
from .core.funding import FundingType, FundingProfile
from .core.capital import CapitalBase
from .core.parameters import RegulatoryParameters, RegulatoryChangeSet
from .core.config import EngineConfig
from .core.exceptions import RegStressError, ConfigurationError, ScenarioNotFoundError

# Liquidity
from .liquidity.lcr import LiquidityCoverageRatioCalculator, LCRResult, ComplianceStatus, calculate_lcr

# Capital adequacy
from .metrics.adequacy import CapitalAdequacyCalculator, CapitalAdequacyResult, calculate_capital_adequacy

# Stress testing
from .stress.scenarios import StressScenario, get_scenario, list_available_scenarios, create_custom_scenario
from .stress.engine import (
    StressTestingEngine,
    StressTestResult,
    BatchStressResult,
    run_stress_scenario,
    run_stress_batch,
)

# Regulatory change impact
from .impact.analyzer import RegulatoryImpactAnalyzer, RegulatoryImpactResult, analyze_regulatory_change

# Synthetic data
from .simulator.portfolio import PortfolioGenerator, BankSize

__version__ = "0.1.0"

__all__ = [
    # Core records
    "AssetClass",
    "LiquidityClass",
    "PortfolioAsset",
    "FundingType",
    "FundingProfile",
    "CapitalBase",
    "RegulatoryParameters",
    "RegulatoryChangeSet",
    "EngineConfig",
    "RegStressError",
    "ConfigurationError",
    "ScenarioNotFoundError",

    # Liquidity
    "LiquidityCoverageRatioCalculator",
    "LCRResult",
    "ComplianceStatus",
    "calculate_lcr",

    # Capital adequacy
    "CapitalAdequacyCalculator",
    "CapitalAdequacyResult",
    "calculate_capital_adequacy",

    # Stress testing
    "StressScenario",
    "get_scenario",
    "list_available_scenarios",
    "create_custom_scenario",
    "StressTestingEngine",
    "StressTestResult",
    "BatchStressResult",
    "run_stress_scenario",
    "run_stress_batch",

    # Regulatory change impact
    "RegulatoryImpactAnalyzer",
    "RegulatoryImpactResult",
    "analyze_regulatory_change",

    # Simulation
    "PortfolioGenerator",
    "BankSize",
]
