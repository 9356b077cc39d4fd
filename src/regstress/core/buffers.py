"""Regulatory capital buffers for the regulatory stress engine."""

from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

from .config import EngineConfig
from .parameters import RegulatoryParameters


class BufferType(str, Enum):
    """Types of regulatory capital buffers."""

    CONSERVATION = "conservation"           # Capital Conservation Buffer (2.5%)
    COUNTERCYCLICAL = "countercyclical"     # Countercyclical Buffer (0-2.5%)
    SYSTEMIC = "systemic"                   # Systemic Risk Buffer


class BufferRequirements(BaseModel):
    """Buffer rates and the capital amounts they require over a given RWA."""

    model_config = ConfigDict(frozen=True)

    conservation_rate: float = Field(ge=0)
    countercyclical_rate: float = Field(ge=0)
    systemic_rate: float = Field(ge=0)

    conservation_buffer: float = Field(ge=0, description="Conservation buffer amount")
    countercyclical_buffer: float = Field(ge=0, description="Countercyclical buffer amount")
    systemic_buffer: float = Field(ge=0, description="Systemic risk buffer amount")

    @property
    def total_rate(self) -> float:
        return self.conservation_rate + self.countercyclical_rate + self.systemic_rate

    @property
    def total_buffer(self) -> float:
        """Combined buffer requirement in currency terms."""
        return self.conservation_buffer + self.countercyclical_buffer + self.systemic_buffer

    @classmethod
    def for_rwa(cls, rwa: float, config: EngineConfig,
                parameters: Optional[RegulatoryParameters] = None) -> "BufferRequirements":
        """Size the buffers against ``rwa``.

        A countercyclical rate set on ``parameters`` overrides the calibrated
        default.
        """
        calibration = config.capital
        ccyb_rate = calibration.countercyclical_buffer
        if parameters is not None and parameters.countercyclical_buffer is not None:
            ccyb_rate = parameters.countercyclical_buffer

        base = max(rwa, 0.0)
        return cls(
            conservation_rate=calibration.conservation_buffer,
            countercyclical_rate=ccyb_rate,
            systemic_rate=calibration.systemic_buffer,
            conservation_buffer=base * calibration.conservation_buffer,
            countercyclical_buffer=base * ccyb_rate,
            systemic_buffer=base * calibration.systemic_buffer,
        )

    def get_buffer_breakdown(self) -> Dict[str, float]:
        """Get breakdown of buffer requirements."""
        return {
            BufferType.CONSERVATION.value: self.conservation_buffer,
            BufferType.COUNTERCYCLICAL.value: self.countercyclical_buffer,
            BufferType.SYSTEMIC.value: self.systemic_buffer,
            "total": self.total_buffer,
        }
