"""Pydantic models for the RegStress Engine API."""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, model_validator

from regstress.core.assets import PortfolioAsset
from regstress.core.capital import CapitalBase
from regstress.core.funding import FundingProfile
from regstress.core.parameters import RegulatoryChangeSet, RegulatoryParameters
from regstress.stress.scenarios import StressScenario


class RegimeSelection(BaseModel):
    """Explicit parameters, or the name of a configured regime (e.g. ``UK_PRA``)."""

    parameters: RegulatoryParameters = Field(default_factory=RegulatoryParameters)
    regime: Optional[str] = Field(None, description="Named regime; overrides parameters")


class LCRRequest(RegimeSelection):
    """Request for an LCR calculation."""

    assets: List[PortfolioAsset]
    funding: FundingProfile


class CapitalRequest(RegimeSelection):
    """Request for a capital adequacy calculation."""

    assets: List[PortfolioAsset]
    capital_base: CapitalBase


class StressRequest(RegimeSelection):
    """Request for a single stress scenario run."""

    assets: List[PortfolioAsset]
    funding: FundingProfile
    scenario: Optional[StressScenario] = None
    scenario_id: Optional[str] = None

    @model_validator(mode="after")
    def check_scenario(self) -> "StressRequest":
        if (self.scenario is None) == (self.scenario_id is None):
            raise ValueError("Provide exactly one of 'scenario' or 'scenario_id'")
        return self


class BatchStressRequest(RegimeSelection):
    """Request for a batch of scenarios; the full catalog runs when none are given."""

    assets: List[PortfolioAsset]
    funding: FundingProfile
    scenarios: List[StressScenario] = Field(default_factory=list)
    scenario_ids: List[str] = Field(default_factory=list)
    max_workers: Optional[int] = Field(None, ge=1, le=16)


class ImpactRequest(BaseModel):
    """Request for a regulatory change impact analysis."""

    assets: List[PortfolioAsset]
    funding: FundingProfile
    capital_base: CapitalBase
    current_parameters: RegulatoryParameters = Field(default_factory=RegulatoryParameters)
    proposed_parameters: Optional[RegulatoryParameters] = None
    change_set: Optional[RegulatoryChangeSet] = None

    @model_validator(mode="after")
    def check_proposal(self) -> "ImpactRequest":
        if (self.proposed_parameters is None) == (self.change_set is None):
            raise ValueError("Provide exactly one of 'proposed_parameters' or 'change_set'")
        return self


class ScenarioInfo(BaseModel):
    """Catalog entry for a predefined scenario."""

    scenario_id: str
    name: str
    severity: str
    description: str
    regulatory_basis: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    checks: Dict[str, str]
