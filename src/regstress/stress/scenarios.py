"""Supervisory stress scenarios for the regulatory stress engine."""

from enum import Enum
from typing import Dict, List, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..core.assets import AssetClass
from ..core.capital import CapitalBase
from ..core.exceptions import ScenarioNotFoundError
from ..core.funding import FundingType


class ScenarioSeverity(str, Enum):
    """Severity grading of a scenario."""

    MILD = "MILD"
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"
    EXTREME = "EXTREME"


class StressScenario(BaseModel):
    """Named set of proportional shocks to asset values and funding sources.

    A shock of ``-0.25`` means a 25% fall. Asset classes and funding buckets
    missing from the maps are left unchanged.
    """

    model_config = ConfigDict(frozen=True)

    scenario_id: str
    name: str
    description: str = ""
    severity: ScenarioSeverity = ScenarioSeverity.MODERATE
    regulatory_basis: Optional[str] = None

    asset_shocks: Dict[AssetClass, float] = Field(default_factory=dict)
    funding_shocks: Dict[FundingType, float] = Field(default_factory=dict)
    capital_base: CapitalBase = Field(default_factory=CapitalBase)

    def get_asset_shock(self, asset_class: AssetClass) -> float:
        """Get the shock for an asset class (0 when not shocked)."""
        return self.asset_shocks.get(asset_class, 0.0)

    def is_adverse(self, asset_class: AssetClass) -> bool:
        """Check if the scenario pushes an asset class down."""
        return self.get_asset_shock(asset_class) < 0


# Capital position used by every supervisory scenario in the library
SUPERVISORY_CAPITAL_BASE = CapitalBase(tier1_capital=150_000_000, tier2_capital=35_000_000)


def create_boe_2024_scenario() -> StressScenario:
    """Create Bank of England 2024 Annual Cyclical Scenario."""
    return StressScenario(
        scenario_id="boe-2024-acs",
        name="Bank of England 2024 ACS",
        description="Bank of England Annual Cyclical Scenario: deep UK recession with sharp "
                    "falls in property and equity prices",
        severity=ScenarioSeverity.SEVERE,
        regulatory_basis="PRA Supervisory Statement SS31/15 - Bank Stress Testing",
        asset_shocks={
            AssetClass.SOVEREIGN: -0.05,
            AssetClass.CORPORATE: -0.25,
            AssetClass.EQUITY: -0.35,
            AssetClass.PROPERTY: -0.31,
        },
        funding_shocks={
            FundingType.RETAIL_DEPOSITS: -0.08,
            FundingType.CORPORATE_DEPOSITS: -0.25,
            FundingType.WHOLESALE_FUNDING: -1.00,
        },
        capital_base=SUPERVISORY_CAPITAL_BASE,
    )


def create_ecb_2024_scenario() -> StressScenario:
    """Create ECB 2024 adverse scenario."""
    return StressScenario(
        scenario_id="ecb-2024-adverse",
        name="ECB 2024 Adverse",
        description="EU-wide adverse scenario with a prolonged euro area recession and "
                    "severe equity market correction",
        severity=ScenarioSeverity.SEVERE,
        regulatory_basis="EBA Guidelines EBA/GL/2018/04 - Stress Testing",
        asset_shocks={
            AssetClass.SOVEREIGN: -0.03,
            AssetClass.CORPORATE: -0.22,
            AssetClass.EQUITY: -0.45,
            AssetClass.PROPERTY: -0.20,
        },
        funding_shocks={
            FundingType.RETAIL_DEPOSITS: -0.06,
            FundingType.CORPORATE_DEPOSITS: -0.20,
            FundingType.WHOLESALE_FUNDING: -0.75,
        },
        capital_base=SUPERVISORY_CAPITAL_BASE,
    )


def create_fed_2024_scenario() -> StressScenario:
    """Create Federal Reserve 2024 CCAR severely adverse scenario."""
    return StressScenario(
        scenario_id="fed-2024-ccar",
        name="Fed 2024 CCAR Severely Adverse",
        description="Severe global recession with a 55% equity decline and a 40% fall in "
                    "commercial real estate prices",
        severity=ScenarioSeverity.EXTREME,
        regulatory_basis="Federal Reserve CCAR 2024 - Comprehensive Capital Analysis and Review",
        asset_shocks={
            AssetClass.SOVEREIGN: -0.02,
            AssetClass.CORPORATE: -0.30,
            AssetClass.EQUITY: -0.55,
            AssetClass.PROPERTY: -0.40,
        },
        funding_shocks={
            FundingType.RETAIL_DEPOSITS: -0.05,
            FundingType.CORPORATE_DEPOSITS: -0.15,
            FundingType.WHOLESALE_FUNDING: -0.50,
        },
        capital_base=SUPERVISORY_CAPITAL_BASE,
    )


def create_basel_minimum_scenario() -> StressScenario:
    """Create Basel III minimum requirements scenario."""
    return StressScenario(
        scenario_id="basel-iii-minimum",
        name="Basel III Minimum Requirements",
        description="Moderate stress calibrated to test the Basel III minimum capital and "
                    "liquidity requirements",
        severity=ScenarioSeverity.MODERATE,
        regulatory_basis="Basel III Final Rule - BIS BCBS 424",
        asset_shocks={
            AssetClass.SOVEREIGN: -0.01,
            AssetClass.CORPORATE: -0.15,
            AssetClass.EQUITY: -0.20,
            AssetClass.PROPERTY: -0.15,
        },
        funding_shocks={
            FundingType.RETAIL_DEPOSITS: -0.03,
            FundingType.CORPORATE_DEPOSITS: -0.10,
            FundingType.WHOLESALE_FUNDING: -0.25,
        },
        capital_base=SUPERVISORY_CAPITAL_BASE,
    )


def create_custom_scenario(name: str,
                           asset_shocks: Optional[Mapping[AssetClass, float]] = None,
                           funding_shocks: Optional[Mapping[FundingType, float]] = None,
                           capital_base: Optional[CapitalBase] = None,
                           severity: ScenarioSeverity = ScenarioSeverity.MODERATE,
                           description: Optional[str] = None) -> StressScenario:
    """Create custom stress scenario from shock dictionaries."""
    return StressScenario(
        scenario_id=f"custom_{name.lower().replace(' ', '_')}",
        name=name,
        description=description or f"Custom scenario: {name}",
        severity=severity,
        asset_shocks=dict(asset_shocks or {}),
        funding_shocks=dict(funding_shocks or {}),
        capital_base=capital_base or SUPERVISORY_CAPITAL_BASE,
    )


# Scenario library
PREDEFINED_SCENARIOS = {
    "boe-2024-acs": create_boe_2024_scenario,
    "ecb-2024-adverse": create_ecb_2024_scenario,
    "fed-2024-ccar": create_fed_2024_scenario,
    "basel-iii-minimum": create_basel_minimum_scenario,
}


def get_scenario(scenario_id: str) -> StressScenario:
    """Get predefined scenario by id."""
    if scenario_id in PREDEFINED_SCENARIOS:
        return PREDEFINED_SCENARIOS[scenario_id]()
    raise ScenarioNotFoundError(scenario_id)


def list_available_scenarios() -> List[str]:
    """List all available predefined scenarios."""
    return list(PREDEFINED_SCENARIOS.keys())
