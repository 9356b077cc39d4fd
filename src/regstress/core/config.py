"""Configuration management for the regulatory stress engine."""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional
import logging

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .assets import AssetClass, LiquidityClass
from .exceptions import ConfigurationError
from .funding import FundingType
from .parameters import RegulatoryParameters

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"


class LiquidityCalibration(BaseModel):
    """LCR haircuts, caps and run-off rates."""

    model_config = ConfigDict(frozen=True)

    hqla_haircuts: Dict[LiquidityClass, float] = Field(default_factory=lambda: {
        LiquidityClass.HQLA_L1: 0.00,
        LiquidityClass.HQLA_L2A: 0.15,
        LiquidityClass.HQLA_L2B: 0.25,
    })
    level2b_cap: float = Field(default=0.40, ge=0, lt=1, description="Max L2B share of final HQLA")
    outflow_rates: Dict[FundingType, float] = Field(default_factory=lambda: {
        FundingType.RETAIL_DEPOSITS: 0.05,      # stable retail
        FundingType.CORPORATE_DEPOSITS: 0.25,   # operational corporate
        FundingType.WHOLESALE_FUNDING: 1.00,
        FundingType.SECURED_FUNDING: 0.25,
    })
    inflow_cap: float = Field(default=0.75, ge=0, le=1)
    net_outflow_floor: float = Field(default=0.25, ge=0, le=1)


class CapitalCalibration(BaseModel):
    """Standardised risk weights and capital buffer rates."""

    model_config = ConfigDict(frozen=True)

    risk_weights: Dict[str, float] = Field(default_factory=lambda: {
        "cash": 0.0,
        "sovereign_aaa": 0.0,
        "sovereign": 0.2,
        "corporate_aaa_aa": 0.2,
        "corporate_a": 0.5,
        "corporate": 1.0,
        "equity": 2.5,
        "property": 1.0,
        "derivative": 1.0,
        "other_assets": 1.0,
    })
    conservation_buffer: float = Field(default=0.025, ge=0)
    countercyclical_buffer: float = Field(default=0.01, ge=0)
    systemic_buffer: float = Field(default=0.005, ge=0)
    large_exposure_reporting_fraction: float = Field(default=0.10, ge=0, le=1)


class StressCalibration(BaseModel):
    """Stress propagation settings."""

    model_config = ConfigDict(frozen=True)

    funding_floor: float = Field(default=0.0, ge=0)
    credit_loss_rates: Dict[str, Dict[str, float]] = Field(default_factory=lambda: {
        "corporate": {"AAA": 0.02, "AA": 0.02, "A": 0.04, "BBB": 0.08, "BB": 0.15, "default": 0.20},
        "property": {"residential": 0.05, "default": 0.12},
    })
    lcr_warning_margin: float = Field(default=0.10, ge=0)
    capital_lending_multiplier: float = Field(default=12.5, ge=0)
    liquidity_lending_multiplier: float = Field(default=4.0, ge=0)


class ImpactCalibration(BaseModel):
    """Financing-cost proxies and severity bands for regulatory change analysis."""

    model_config = ConfigDict(frozen=True)

    liquidity_cost_bps: float = Field(default=25, ge=0)
    capital_cost_bps: float = Field(default=1200, ge=0)
    implementation_cost_rate: float = Field(default=0.02, ge=0)

    critical_cost: float = 100_000_000
    high_cost: float = 50_000_000
    medium_cost: float = 10_000_000
    critical_breaches: int = 3
    high_breaches: int = 2
    medium_breaches: int = 1


class EngineConfig(BaseModel):
    """Regulatory stress engine configuration.

    Defaults mirror ``config.yaml`` so ``EngineConfig()`` is usable without
    touching the filesystem.
    """

    model_config = ConfigDict(frozen=True)

    liquidity: LiquidityCalibration = Field(default_factory=LiquidityCalibration)
    capital: CapitalCalibration = Field(default_factory=CapitalCalibration)
    stress: StressCalibration = Field(default_factory=StressCalibration)
    impact: ImpactCalibration = Field(default_factory=ImpactCalibration)
    regimes: Dict[str, RegulatoryParameters] = Field(default_factory=dict)

    @classmethod
    def load_default(cls) -> "EngineConfig":
        """Load default configuration from package yaml file."""
        return _load_default_config()

    @classmethod
    def load_from_file(cls, config_path: Path) -> "EngineConfig":
        """Load configuration from YAML file."""
        with open(config_path, "r", encoding="utf-8") as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Malformed configuration file {config_path}: {e}") from e

        try:
            config = cls(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

        logger.debug(f"Loaded engine configuration from {config_path}")
        return config

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, indent=2)

    def get_regime(self, name: str) -> RegulatoryParameters:
        """Get a named regulatory parameter set."""
        try:
            return self.regimes[name.upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown regulatory regime: {name}", field="regimes") from None

    def get_risk_weight(self, key: str) -> float:
        """Get risk weight for a calibration key such as ``corporate_a``."""
        weights = self.capital.risk_weights
        if key in weights:
            return weights[key]
        return weights.get("other_assets", 1.0)

    def get_haircut(self, level: LiquidityClass) -> float:
        """Get HQLA haircut for a liquidity level (non-HQLA is fully excluded)."""
        return self.liquidity.hqla_haircuts.get(level, 1.0)

    def get_outflow_rate(self, funding_type: FundingType) -> float:
        """Get run-off rate for a funding bucket (unlisted buckets run off fully)."""
        return self.liquidity.outflow_rates.get(funding_type, 1.0)

    def get_credit_loss_rate(self, asset_class: AssetClass, key: Optional[str]) -> float:
        """Get stressed credit loss rate for an asset class and rating/sector key."""
        table = self.stress.credit_loss_rates.get(asset_class.value.lower())
        if not table:
            return 0.0
        if key and key in table:
            return table[key]
        return table.get("default", 0.0)


@lru_cache(maxsize=1)
def _load_default_config() -> EngineConfig:
    return EngineConfig.load_from_file(DEFAULT_CONFIG_PATH)
