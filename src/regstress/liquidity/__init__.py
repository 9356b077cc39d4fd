"""Liquidity risk calculations for the regulatory stress engine."""

from .lcr import (
    ComplianceStatus,
    LCRResult,
    LiquidityCoverageRatioCalculator,
    OutflowBreakdown,
    calculate_lcr,
)

__all__ = [
    "ComplianceStatus",
    "LCRResult",
    "LiquidityCoverageRatioCalculator",
    "OutflowBreakdown",
    "calculate_lcr",
]
