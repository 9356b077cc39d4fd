"""Risk-weighted asset calculations."""

from .credit import CreditRiskCalculator, normalise_rating

__all__ = [
    "CreditRiskCalculator",
    "normalise_rating",
]
