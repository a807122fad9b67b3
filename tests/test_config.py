"""Tests for settings validation and the logging schema."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from wodstrat.config import Settings
from wodstrat.logging_config import LOG_FILENAME, build_logging_config


class TestSettings:
    def test_levels_are_normalized(self, monkeypatch):
        monkeypatch.setenv("WODSTRAT_LOG_LEVEL", "debug")
        monkeypatch.setenv("WODSTRAT_PACKAGE_LOG_LEVEL", "warning")

        settings = Settings(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.package_log_level == "WARNING"

    def test_package_level_defaults_to_none(self, monkeypatch):
        monkeypatch.delenv("WODSTRAT_PACKAGE_LOG_LEVEL", raising=False)
        assert Settings(_env_file=None).package_log_level is None

    def test_invalid_level_rejected(self, monkeypatch):
        monkeypatch.setenv("WODSTRAT_LOG_LEVEL", "loud")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestLoggingConfig:
    def test_package_logger_has_its_own_level(self):
        config = build_logging_config("WARNING", "DEBUG")

        assert config["root"]["level"] == "WARNING"
        assert config["loggers"]["wodstrat"]["level"] == "DEBUG"
        assert config["root"]["handlers"] == ["console"]
        assert "level" not in config["handlers"]["console"]

    def test_package_level_falls_back_to_root(self):
        config = build_logging_config("INFO")
        assert config["loggers"]["wodstrat"]["level"] == "INFO"

    def test_file_handler_only_with_log_dir(self, tmp_path: Path):
        config = build_logging_config("INFO", log_dir=tmp_path)

        assert config["root"]["handlers"] == ["console", "file"]
        assert config["handlers"]["file"]["filename"] == str(tmp_path / LOG_FILENAME)
