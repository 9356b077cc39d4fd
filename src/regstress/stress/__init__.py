"""Stress testing framework for the regulatory stress engine."""

from .scenarios import (
    ScenarioSeverity,
    StressScenario,
    create_custom_scenario,
    get_scenario,
    list_available_scenarios,
)
from .credit_loss import CreditLossModel
from .engine import (
    BatchStressResult,
    ManagementAction,
    Severity,
    StressTestingEngine,
    StressTestResult,
    run_stress_batch,
    run_stress_scenario,
)

__all__ = [
    "ScenarioSeverity",
    "StressScenario",
    "create_custom_scenario",
    "get_scenario",
    "list_available_scenarios",
    "CreditLossModel",
    "BatchStressResult",
    "ManagementAction",
    "Severity",
    "StressTestingEngine",
    "StressTestResult",
    "run_stress_batch",
    "run_stress_scenario",
]
