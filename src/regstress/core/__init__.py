"""Core components of the regulatory stress engine."""

from .assets import AssetClass, LiquidityClass, PortfolioAsset
from .funding import FundingType, FundingProfile
from .capital import CapitalBase
from .parameters import RegulatoryParameters, RegulatoryChangeSet
from .buffers import BufferRequirements, BufferType
from .config import EngineConfig
from .exceptions import RegStressError, ConfigurationError, ScenarioNotFoundError

__all__ = [
    "AssetClass",
    "LiquidityClass",
    "PortfolioAsset",
    "FundingType",
    "FundingProfile",
    "CapitalBase",
    "RegulatoryParameters",
    "RegulatoryChangeSet",
    "BufferRequirements",
    "BufferType",
    "EngineConfig",
    "RegStressError",
    "ConfigurationError",
    "ScenarioNotFoundError",
]
