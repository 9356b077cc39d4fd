"""Capital base definitions for the regulatory stress engine."""

from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field


class CapitalBase(BaseModel):
    """Regulatory capital of the institution."""

    model_config = ConfigDict(frozen=True)

    tier1_capital: float = Field(default=0, ge=0, description="Tier 1 capital in base currency")
    tier2_capital: float = Field(default=0, ge=0, description="Tier 2 capital in base currency")

    @property
    def total_capital(self) -> float:
        """Tier 1 plus Tier 2 capital."""
        return self.tier1_capital + self.tier2_capital

    def after_losses(self, losses: float) -> "CapitalBase":
        """Absorb modeled losses in Tier 1, floored at zero. Tier 2 is unchanged."""
        stressed_tier1 = max(0.0, self.tier1_capital - max(0.0, losses))
        return self.model_copy(update={"tier1_capital": stressed_tier1})

    def get_capital_summary(self) -> Dict[str, Any]:
        """Get summary of capital amounts."""
        return {
            "tier1_capital": self.tier1_capital,
            "tier2_capital": self.tier2_capital,
            "total_capital": self.total_capital,
            "tier2_share": self.tier2_capital / self.total_capital if self.total_capital > 0 else 0.0,
        }

    def validate_capital_structure(self) -> List[str]:
        """Validate capital structure and return list of issues."""
        issues = []

        if self.tier1_capital == 0:
            issues.append("Tier 1 capital is zero")

        # Tier 2 recognition is limited to Tier 1 under Basel III
        if self.tier2_capital > self.tier1_capital:
            issues.append("Tier 2 capital exceeds Tier 1 capital (regulatory limit)")

        return issues
