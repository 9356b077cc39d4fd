"""Regulatory parameter sets and proposed regulatory changes."""

from datetime import date
from typing import Any, Dict, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError


class RegulatoryParameters(BaseModel):
    """Jurisdiction/date-scoped rule set.

    Immutable during a calculation. Comparing a current and a proposed regime
    means constructing a second instance, never mutating the first.
    """

    model_config = ConfigDict(frozen=True)

    lcr_requirement: float = Field(default=1.00, gt=0, description="Minimum LCR")
    tier1_minimum: float = Field(default=0.06, ge=0, le=1, description="Minimum Tier 1 ratio")
    total_capital_minimum: float = Field(default=0.08, ge=0, le=1, description="Minimum total capital ratio")
    leverage_minimum: float = Field(default=0.03, ge=0, le=1, description="Minimum leverage ratio")
    large_exposure_limit: float = Field(default=0.25, ge=0, le=1, description="Large exposure limit as fraction of Tier 1")

    # None falls back to the calibrated default rate
    countercyclical_buffer: Optional[float] = Field(None, ge=0, le=0.025)

    jurisdiction: Optional[str] = None
    applicable_date: Optional[date] = None

    @field_validator("jurisdiction")
    @classmethod
    def normalise_jurisdiction(cls, v: Optional[str]) -> Optional[str]:
        """Store jurisdiction codes upper-cased."""
        return v.upper() if v else v

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RegulatoryParameters":
        """Build a validated parameter set, raising ConfigurationError on bad input."""
        try:
            return cls(**dict(data))
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            raise ConfigurationError(
                f"Invalid regulatory parameter {field or '<root>'}: {first.get('msg')}", field=field or None
            ) from e

    def with_changes(self, changes: Mapping[str, Any]) -> "RegulatoryParameters":
        """Return a new parameter set with ``changes`` applied."""
        unknown = sorted(set(changes) - set(type(self).model_fields))
        if unknown:
            raise ConfigurationError(f"Unknown regulatory parameters: {', '.join(unknown)}", field=unknown[0])

        data = self.model_dump()
        data.update(changes)
        return type(self).from_mapping(data)

    def get_minimums(self) -> Dict[str, float]:
        """Get the threshold values keyed by threshold name."""
        return {
            "lcr": self.lcr_requirement,
            "tier1": self.tier1_minimum,
            "total_capital": self.total_capital_minimum,
            "leverage": self.leverage_minimum,
            "large_exposure": self.large_exposure_limit,
        }


class RegulatoryChangeSet(BaseModel):
    """A proposed regulation expressed as parameter changes."""

    model_config = ConfigDict(frozen=True)

    regulation_name: str
    jurisdiction: Optional[str] = None
    parameter_changes: Dict[str, float] = Field(default_factory=dict)
    implementation_date: Optional[date] = None
    mandatory: bool = True
