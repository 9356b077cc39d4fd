"""Regulatory change impact analysis."""

from .analyzer import (
    ImpactSeverity,
    RegulatoryImpactAnalyzer,
    RegulatoryImpactResult,
    StrategicRecommendation,
    ThresholdSnapshot,
    ThresholdType,
    analyze_regulatory_change,
)

__all__ = [
    "ImpactSeverity",
    "RegulatoryImpactAnalyzer",
    "RegulatoryImpactResult",
    "StrategicRecommendation",
    "ThresholdSnapshot",
    "ThresholdType",
    "analyze_regulatory_change",
]
