"""Tests for engine configuration loading and lookups."""

import pytest

from regstress.core.assets import AssetClass, LiquidityClass
from regstress.core.config import DEFAULT_CONFIG_PATH, EngineConfig
from regstress.core.exceptions import ConfigurationError
from regstress.core.funding import FundingType


class TestEngineConfig:
    """Test configuration loading."""

    def test_default_file_exists(self):
        assert DEFAULT_CONFIG_PATH.exists()

    def test_load_default_is_cached(self):
        assert EngineConfig.load_default() is EngineConfig.load_default()

    def test_defaults_match_packaged_file(self, test_config):
        """Model defaults and the packaged YAML describe the same calibration."""
        defaults = EngineConfig()

        assert defaults.liquidity == test_config.liquidity
        assert defaults.capital == test_config.capital
        assert defaults.stress == test_config.stress
        assert defaults.impact == test_config.impact

    def test_calibrated_values(self, test_config):
        assert test_config.get_haircut(LiquidityClass.HQLA_L2A) == pytest.approx(0.15)
        assert test_config.get_haircut(LiquidityClass.NON_HQLA) == 1.0
        assert test_config.get_outflow_rate(FundingType.SECURED_FUNDING) == pytest.approx(0.25)
        assert test_config.liquidity.level2b_cap == pytest.approx(0.40)
        assert test_config.stress.capital_lending_multiplier == pytest.approx(12.5)

    def test_credit_loss_lookup(self, test_config):
        assert test_config.get_credit_loss_rate(AssetClass.CORPORATE, "BBB") == pytest.approx(0.08)
        assert test_config.get_credit_loss_rate(AssetClass.CORPORATE, "CCC") == pytest.approx(0.20)
        assert test_config.get_credit_loss_rate(AssetClass.PROPERTY, None) == pytest.approx(0.12)
        assert test_config.get_credit_loss_rate(AssetClass.EQUITY, None) == 0.0

    def test_round_trip(self, test_config, temp_dir):
        path = temp_dir / "engine.yaml"

        test_config.save_to_file(path)
        loaded = EngineConfig.load_from_file(path)

        assert loaded == test_config

    def test_malformed_yaml(self, temp_dir):
        path = temp_dir / "broken.yaml"
        path.write_text("liquidity: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            EngineConfig.load_from_file(path)

    def test_invalid_values(self, temp_dir):
        path = temp_dir / "invalid.yaml"
        path.write_text("liquidity:\n  level2b_cap: 1.5\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            EngineConfig.load_from_file(path)

    def test_negative_funding_floor(self, temp_dir):
        path = temp_dir / "floor.yaml"
        path.write_text("stress:\n  funding_floor: -500\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            EngineConfig.load_from_file(path)

    def test_invalid_regime(self, temp_dir):
        path = temp_dir / "regime.yaml"
        path.write_text("regimes:\n  BROKEN:\n    lcr_requirement: 0\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            EngineConfig.load_from_file(path)

    def test_empty_file_uses_defaults(self, temp_dir):
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert EngineConfig.load_from_file(path) == EngineConfig()

    def test_missing_file(self, temp_dir):
        with pytest.raises(OSError):
            EngineConfig.load_from_file(temp_dir / "missing.yaml")


class TestRegimes:
    """Test named regulatory regimes."""

    def test_configured_regimes(self, test_config):
        assert set(test_config.regimes) == {"BASEL_III", "UK_PRA", "EU_CRR", "US_FED"}

    @pytest.mark.parametrize("name,leverage", [
        ("BASEL_III", 0.03),
        ("uk_pra", 0.0325),
        ("EU_CRR", 0.03),
        ("us_fed", 0.04),
    ])
    def test_regime_lookup(self, test_config, name, leverage):
        parameters = test_config.get_regime(name)

        assert parameters.leverage_minimum == pytest.approx(leverage)
        assert parameters.lcr_requirement == pytest.approx(1.0)

    def test_regime_jurisdiction(self, test_config):
        assert test_config.get_regime("UK_PRA").jurisdiction == "UK"
        assert test_config.get_regime("BASEL_III").countercyclical_buffer is None

    def test_unknown_regime(self, test_config):
        with pytest.raises(ConfigurationError) as exc_info:
            test_config.get_regime("MARS")

        assert exc_info.value.field == "regimes"
