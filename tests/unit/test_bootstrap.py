"""Unit tests for server bootstrap and logging helpers"""

import logging
from argparse import Namespace
from unittest.mock import Mock

import pytest

from trackpad.common.settings import settings
from trackpad.common.types import Platform
from trackpad.input.null import NullInputCapability
from trackpad.server.bootstrap import (
    configWithSettings_load,
    dispatcher_create,
    loggingWithConfig_setup,
)
from trackpad.server.server_logging import logFormatWithVersion_get, logging_setup


class TestConfigWithSettings:
    """Test config loading at startup"""

    def test_loads_and_initializes_settings(self, reset_settings, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("server:\n  port: 5000\n")
        args = Namespace(config=str(config_file), port=None, host="127.0.0.1")

        config = configWithSettings_load(args)

        assert config.server.port == 5000
        assert config.server.host == "127.0.0.1"
        assert settings.config is config

    def test_missing_file_exits(self, reset_settings, tmp_path, capsys):
        args = Namespace(config=str(tmp_path / "absent.yml"))

        with pytest.raises(SystemExit) as exc_info:
            configWithSettings_load(args)

        assert exc_info.value.code == 1
        assert "--config" in capsys.readouterr().err

    def test_invalid_value_exits(self, reset_settings, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("server:\n  cooldown_ms: -1\n")

        with pytest.raises(SystemExit):
            configWithSettings_load(Namespace(config=str(config_file)))


class TestLoggingSetup:
    """Test logging configuration"""

    def test_cli_level_wins(self, sample_config):
        calls = []
        args = Namespace(log_level="DEBUG")

        loggingWithConfig_setup(args, sample_config, lambda *a: calls.append(a))

        assert calls == [("DEBUG", sample_config.logging.format, None)]

    def test_config_level_used_without_override(self, sample_config):
        calls = []

        loggingWithConfig_setup(Namespace(), sample_config, lambda *a: calls.append(a))

        assert calls[0][0] == "INFO"

    def test_unknown_level_exits(self, sample_config):
        with pytest.raises(SystemExit):
            loggingWithConfig_setup(Namespace(log_level="LOUD"), sample_config, logging_setup)

    def test_version_tag_in_format(self):
        enhanced = logFormatWithVersion_get("%(asctime)s - %(message)s")
        assert enhanced.startswith("%(asctime)s [v")

    def test_logging_setup_sets_level(self, monkeypatch):
        basic_config = Mock()
        monkeypatch.setattr(logging, "basicConfig", basic_config)

        logging_setup("warning", "%(message)s", None)

        kwargs = basic_config.call_args.kwargs
        assert kwargs["level"] == logging.WARNING
        assert kwargs["force"] is True
        assert len(kwargs["handlers"]) == 1

    def test_logging_setup_adds_file_handler(self, monkeypatch, tmp_path):
        basic_config = Mock()
        monkeypatch.setattr(logging, "basicConfig", basic_config)

        logging_setup("INFO", "%(message)s", str(tmp_path / "trackpad.log"))

        handlers = basic_config.call_args.kwargs["handlers"]
        assert isinstance(handlers[-1], logging.FileHandler)
        handlers[-1].close()


class TestDispatcherCreate:
    """Test capability selection"""

    def test_other_platform_uses_null_capability(self, caplog):
        dispatcher = dispatcher_create(Platform.OTHER)

        assert dispatcher.platform is Platform.OTHER
        assert isinstance(dispatcher.capability, NullInputCapability)
        assert any("not supported" in r.getMessage() for r in caplog.records)
