"""Funding profile (liability structure) for LCR outflow calculations."""

from enum import Enum
from typing import Dict, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field


class FundingType(str, Enum):
    """Funding buckets with distinct run-off behaviour."""

    RETAIL_DEPOSITS = "RETAIL_DEPOSITS"
    CORPORATE_DEPOSITS = "CORPORATE_DEPOSITS"
    WHOLESALE_FUNDING = "WHOLESALE_FUNDING"
    SECURED_FUNDING = "SECURED_FUNDING"


_FIELD_BY_TYPE = {
    FundingType.RETAIL_DEPOSITS: "retail_deposits",
    FundingType.CORPORATE_DEPOSITS: "corporate_deposits",
    FundingType.WHOLESALE_FUNDING: "wholesale_funding",
    FundingType.SECURED_FUNDING: "secured_funding",
}


class FundingProfile(BaseModel):
    """Aggregate liability structure of the bank."""

    model_config = ConfigDict(frozen=True)

    retail_deposits: float = Field(default=0, ge=0)
    corporate_deposits: float = Field(default=0, ge=0)
    wholesale_funding: float = Field(default=0, ge=0)
    secured_funding: float = Field(default=0, ge=0)

    stable_funding_ratio: Optional[float] = Field(None, ge=0)
    counterparty_concentration: Dict[str, float] = Field(default_factory=dict)

    # Zero in the base case; capped against outflows by the LCR calculator
    contractual_inflows: float = Field(default=0, ge=0)

    def amount(self, funding_type: FundingType) -> float:
        """Get the balance of one funding bucket."""
        return getattr(self, _FIELD_BY_TYPE[funding_type])

    def total_funding(self) -> float:
        """Sum of all funding buckets."""
        return sum(self.amount(funding_type) for funding_type in FundingType)

    def apply_shocks(self, shocks: Mapping[FundingType, float], floor: float = 0.0) -> "FundingProfile":
        """Return a stressed copy with each bucket scaled by ``1 + shock``.

        Buckets missing from ``shocks`` are unchanged. A shock never takes a
        balance below ``floor``; a bucket already below the floor keeps its
        balance.
        """
        update = {}
        for funding_type, field_name in _FIELD_BY_TYPE.items():
            shock = shocks.get(funding_type, 0.0)
            amount = self.amount(funding_type)
            update[field_name] = max(amount * (1 + shock), min(floor, amount))
        return self.model_copy(update=update)
