"""Capital adequacy metrics."""

from .adequacy import (
    CapitalAdequacyCalculator,
    CapitalAdequacyResult,
    CapitalRequirements,
    LargeExposure,
    LargeExposureStatus,
    calculate_capital_adequacy,
)

__all__ = [
    "CapitalAdequacyCalculator",
    "CapitalAdequacyResult",
    "CapitalRequirements",
    "LargeExposure",
    "LargeExposureStatus",
    "calculate_capital_adequacy",
]
