"""
Tests for EngineSettings, load_settings and setup_logging.
"""

import json
import logging

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from referral_core.config import EngineSettings, load_settings, settings_from_dict
from referral_core.domain.enums import AnalyticsMode, LayoutMode
from referral_core.logging_config import setup_logging


class TestEngineSettings:
    """Defaults and validation."""

    def test_defaults(self):
        settings = EngineSettings()
        assert settings.layout_mode is LayoutMode.HIERARCHICAL
        assert settings.analytics_mode is AnalyticsMode.METRICS
        assert settings.show_labels is True
        assert settings.animation_duration_ms == 300
        assert (settings.canvas_width, settings.canvas_height) == (800.0, 600.0)
        assert (settings.min_zoom, settings.max_zoom, settings.zoom_step) == (0.3, 3.0, 1.2)
        assert settings.growth_window_days == 30

    def test_duration_clamped(self):
        assert EngineSettings(animation_duration_ms=10_000).animation_duration_ms == 5000
        assert EngineSettings(animation_duration_ms=-5).animation_duration_ms == 0

    def test_enum_from_string(self):
        settings = EngineSettings(layout_mode="circular", analytics_mode="heatmap")
        assert settings.layout_mode is LayoutMode.CIRCULAR
        assert settings.analytics_mode is AnalyticsMode.HEATMAP

    def test_invalid_enum(self):
        with pytest.raises(ValueError):
            EngineSettings(layout_mode="spiral")

    def test_with_changes(self):
        settings = EngineSettings().with_changes(show_labels=False)
        assert settings.show_labels is False
        assert settings.layout_mode is LayoutMode.HIERARCHICAL


class TestLoadSettings:
    """JSON overrides."""

    def test_none_gives_defaults(self):
        assert load_settings(None) == EngineSettings()

    def test_overrides(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({
            "layout_mode": "circular",
            "animation_duration_ms": 600,
            "hierarchical": {"min_spacing": 90},
        }), encoding="utf-8")
        settings = load_settings(path)
        assert settings.layout_mode is LayoutMode.CIRCULAR
        assert settings.animation_duration_ms == 600
        assert settings.hierarchical.min_spacing == 90
        assert settings.hierarchical.correction_passes == 3

    def test_unknown_keys_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="referral_core.config"):
            settings = settings_from_dict({"colour": "red", "circular": {"spin": 1}})
        assert settings == EngineSettings()
        assert "colour" in caplog.text
        assert "spin" in caplog.text

    def test_invalid_value_raises(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"analytics_mode": "pie"}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings(path)

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.json")


@pytest.fixture
def restore_loggers():
    """Put package loggers back the way they were after setup_logging."""
    saved = {}
    for name in ("referral_core", "referral_app"):
        logger = logging.getLogger(name)
        saved[name] = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for name, (handlers, level, propagate) in saved.items():
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers = handlers
        logger.setLevel(level)
        logger.propagate = propagate


class TestSetupLogging:
    """Package logger configuration."""

    def test_writes_log_file(self, tmp_path, restore_loggers):
        log_file = tmp_path / "run.log"
        setup_logging(logging.DEBUG, str(log_file))
        logging.getLogger("referral_core.services.layout").debug("layout message")
        logging.getLogger("referral_app.views").info("view message")
        for name in ("referral_core", "referral_app"):
            for handler in logging.getLogger(name).handlers:
                handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "Logging initialized." in text
        assert "referral_core.services.layout - DEBUG - layout message" in text
        assert "view message" in text

    def test_no_duplicate_handlers(self, restore_loggers):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("referral_core").handlers) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
