"""
Test suite for package configuration.

Tests cover:
- Defaults and reset
- temp_config restoration, including after exceptions
- Settings flowing into derivation and the solver
"""

import pytest
import orrery
from orrery import config, temp_config, OrreryConfig


@pytest.fixture(autouse=True)
def clean_config():
    """Each test starts and ends with default settings."""
    config.reset()
    yield
    config.reset()


class TestDefaults:
    """Package defaults."""

    def test_values(self):
        assert config.KEPLER_TOLERANCE == 1e-10
        assert config.KEPLER_MAX_ITER == 30
        assert config.PLACEHOLDER_ECCENTRICITY == 0.01
        assert config.STAR_DENSITY == 1400.0
        assert config.BODY_DENSITY == 5500.0
        assert config.TRANSITION_DURATION == 1.5
        assert config.MIN_DISTANCE_FACTOR == 1.1
        assert config.STRICT_VALIDATION is True

    def test_hash_decimals(self):
        assert config.HASH_DECIMALS == 7
        assert OrreryConfig(EQUALITY_ATOL=1.0).HASH_DECIMALS == 0

    def test_reset(self):
        config.ZOOM_BASE_SPEED = 1.0
        config.reset()
        assert config.ZOOM_BASE_SPEED == 5.0

    def test_repr_lists_settings(self):
        text = repr(config)
        assert "OrreryConfig:" in text
        assert "PLACEHOLDER_ECCENTRICITY = 0.01" in text
        assert "SYSTEM_EXTENT = 150.0" in text

    def test_package_exposes_singleton(self):
        assert orrery.config is config


class TestTempConfig:
    """Temporary overrides."""

    def test_restores(self):
        with temp_config(KEPLER_MAX_ITER=5) as cfg:
            assert cfg.KEPLER_MAX_ITER == 5
            assert config.KEPLER_MAX_ITER == 5
        assert config.KEPLER_MAX_ITER == 30

    def test_restores_after_exception(self):
        with pytest.raises(RuntimeError):
            with temp_config(OVERVIEW_HEIGHT=10.0):
                raise RuntimeError("boom")
        assert config.OVERVIEW_HEIGHT == 90.0

    def test_unknown_key(self):
        with pytest.raises(AttributeError, match="NOT_A_SETTING"):
            with temp_config(NOT_A_SETTING=1):
                pass

    def test_derivation_uses_settings(self):
        graph = orrery.load_graph({
            "name": "Sun", "type": "star", "diameter": 1e9,
            "children": [{"name": "Rock", "type": "planet",
                          "position": [1e10, 0.0, 0.0]}],
        })
        with temp_config(PLACEHOLDER_ECCENTRICITY=0.2):
            assert orrery.derive_all(graph)["Rock"].eccentricity == 0.2
        assert orrery.derive_all(graph)["Rock"].eccentricity == 0.01
