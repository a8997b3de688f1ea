"""
Tests for engine configuration and logging setup.
"""

import logging

import pytest

from frog_geometry.core import DEFAULT_MAX_DT, DEFAULT_SPEED
from frog_geometry.utils import EngineConfig, load_config, save_config, setup_logging


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self, config):
        assert config.speed == DEFAULT_SPEED
        assert config.max_dt == DEFAULT_MAX_DT
        assert config.turn_duration == pytest.approx(0.35)
        assert config.hyperbolic_line_samples == 520
        assert config.extra == {}

    def test_from_dict_collects_unknown_keys(self):
        config = EngineConfig.from_dict({"speed": 1.5, "theme": "dark", "extra": {"grid": True}})
        assert config.speed == 1.5
        assert config.extra == {"theme": "dark", "grid": True}

    def test_update_returns_new_config(self, config):
        updated = config.update(speed=2.0)
        assert updated.speed == 2.0
        assert config.speed == DEFAULT_SPEED

    @pytest.mark.parametrize("field", ["turn_duration", "max_dt"])
    def test_non_positive_durations_rejected(self, field):
        with pytest.raises(ValueError, match=field):
            EngineConfig(**{field: 0.0})

    def test_save_and_load(self, tmp_path):
        config = EngineConfig(speed=0.9, trace_color="#ff0000", extra={"label": "demo"})
        filepath = tmp_path / "nested" / "config.json"
        save_config(config, str(filepath))
        loaded = load_config(str(filepath))
        assert loaded.speed == 0.9
        assert loaded.trace_color == "#ff0000"
        assert loaded.extra == {"label": "demo"}


class TestSetupLogging:
    """Tests for the package logger."""

    def test_configures_package_logger(self):
        logger = setup_logging(logging.DEBUG)
        assert logger.name == "frog_geometry"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_no_duplicate_handlers(self, tmp_path):
        setup_logging()
        logger = setup_logging(log_file=str(tmp_path / "run.log"))
        assert len(logger.handlers) == 2
        logging.getLogger("frog_geometry.engine").info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "run.log").read_text()
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
