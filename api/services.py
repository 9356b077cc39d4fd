"""Services for the RegStress Engine API."""

from typing import Any, Dict, List, Optional
import logging
import math

from pydantic import BaseModel

from regstress.core.config import EngineConfig
from regstress.core.parameters import RegulatoryParameters
from regstress.impact.analyzer import RegulatoryImpactAnalyzer
from regstress.liquidity.lcr import calculate_lcr
from regstress.metrics.adequacy import calculate_capital_adequacy
from regstress.simulator.portfolio import BankSize, PortfolioGenerator
from regstress.stress.engine import StressTestingEngine
from regstress.stress.scenarios import PREDEFINED_SCENARIOS, get_scenario
from .models import (
    BatchStressRequest, CapitalRequest, ImpactRequest, LCRRequest,
    RegimeSelection, ScenarioInfo, StressRequest
)

logger = logging.getLogger(__name__)


def to_payload(value: Any) -> Any:
    """Convert a result into JSON-safe data; unbounded ratios become ``None``."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    if isinstance(value, dict):
        return {key: to_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_payload(item) for item in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class CalculationService:
    """Service for LCR and capital adequacy calculations."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig.load_default()

    def resolve_parameters(self, request: RegimeSelection) -> RegulatoryParameters:
        """Named regime wins over inline parameters."""
        if request.regime:
            return self.config.get_regime(request.regime)
        return request.parameters

    async def calculate_lcr(self, request: LCRRequest) -> Dict[str, Any]:
        """Calculate LCR for the request portfolio."""
        parameters = self.resolve_parameters(request)
        result = calculate_lcr(request.assets, request.funding, parameters, self.config)
        return to_payload(result)

    async def calculate_capital(self, request: CapitalRequest) -> Dict[str, Any]:
        """Calculate capital adequacy for the request portfolio."""
        parameters = self.resolve_parameters(request)
        result = calculate_capital_adequacy(request.assets, parameters, request.capital_base, self.config)
        return to_payload(result)

    def smoke_check(self) -> bool:
        """Run a small synthetic calculation end to end."""
        snapshot = PortfolioGenerator(seed=42).generate_bank_snapshot(BankSize.SMALL)
        result = calculate_lcr(snapshot.assets, snapshot.funding, RegulatoryParameters(), self.config)
        return result.hqla_value > 0


class StressTestService:
    """Service for stress testing."""

    def __init__(self, calculation_service: CalculationService):
        self.calculation_service = calculation_service
        self.config = calculation_service.config

    def list_scenarios(self) -> List[ScenarioInfo]:
        """Describe every predefined scenario."""
        scenarios = []
        for factory in PREDEFINED_SCENARIOS.values():
            scenario = factory()
            scenarios.append(ScenarioInfo(
                scenario_id=scenario.scenario_id,
                name=scenario.name,
                severity=scenario.severity.value,
                description=scenario.description,
                regulatory_basis=scenario.regulatory_basis,
            ))
        return scenarios

    async def run_stress_test(self, request: StressRequest) -> Dict[str, Any]:
        """Run one scenario, inline or from the catalog."""
        engine = self._build_engine(request)
        if request.scenario_id is not None:
            result = engine.run_scenario_by_id(request.scenario_id)
        else:
            result = engine.run_scenario(request.scenario)
        return to_payload(result)

    async def run_batch(self, request: BatchStressRequest) -> Dict[str, Any]:
        """Run a batch of scenarios and return the aggregate with a per-scenario summary."""
        engine = self._build_engine(request, request.max_workers)

        # Resolve ids first so an unknown id fails before any run
        scenarios = [get_scenario(scenario_id) for scenario_id in request.scenario_ids]
        scenarios += request.scenarios

        batch = engine.run_multiple(scenarios) if scenarios else engine.run_catalog()
        payload = to_payload(batch)
        payload["summary"] = to_payload(batch.to_frame().reset_index().to_dict(orient="records"))
        return payload

    def _build_engine(self, request, max_workers: Optional[int] = None) -> StressTestingEngine:
        parameters = self.calculation_service.resolve_parameters(request)
        return StressTestingEngine(request.assets, request.funding, parameters, self.config, max_workers)


class ImpactAnalysisService:
    """Service for regulatory change impact analysis."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig.load_default()

    async def analyze(self, request: ImpactRequest) -> Dict[str, Any]:
        """Compare the current regime with the proposal in the request."""
        analyzer = RegulatoryImpactAnalyzer(
            request.assets, request.funding, request.current_parameters, self.config
        )
        if request.change_set is not None:
            result = analyzer.analyze_change_set(request.change_set, request.capital_base)
        else:
            result = analyzer.analyze_change(request.proposed_parameters, request.capital_base)
        return to_payload(result)
