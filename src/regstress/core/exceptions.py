"""Typed exceptions for the regulatory stress engine.

    RegStressError (base)
    |
    +-- ConfigurationError     invalid regulatory parameters or engine config
    +-- ScenarioNotFoundError  unknown stress scenario identifier

Degenerate denominators (zero outflows, zero RWA, zero exposure) are not
errors: calculators return flagged sentinel results for them.
"""

from typing import Optional


class RegStressError(Exception):
    """Base class for all engine errors."""

    code: str = "REGSTRESS_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(RegStressError, ValueError):
    """Regulatory parameters or calibration are missing or out of range."""

    code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class ScenarioNotFoundError(RegStressError, KeyError):
    """A stress scenario identifier is not in the catalog."""

    code = "SCENARIO_NOT_FOUND"

    def __init__(self, scenario_id: str):
        self.scenario_id = scenario_id
        super().__init__(f"Scenario {scenario_id} not found")

    def __str__(self) -> str:
        return self.message
