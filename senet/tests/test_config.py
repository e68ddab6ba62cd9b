"""
Tests for configuration from the environment.
"""

import logging
from pathlib import Path

from ..config import SenetConfig
from ..persistence import DEFAULT_STATE_PATH


class TestFromEnv:

    def test_defaults(self, monkeypatch):
        for name in ("SENET_STATE_PATH", "SENET_SEED", "SENET_AUTOSAVE", "SENET_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        config = SenetConfig.from_env()

        assert config.state_path == DEFAULT_STATE_PATH
        assert config.seed is None
        assert config.autosave is True
        assert config.log_level == "WARNING"

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SENET_STATE_PATH", str(tmp_path / "match.json"))
        monkeypatch.setenv("SENET_SEED", "42")
        monkeypatch.setenv("SENET_AUTOSAVE", "false")
        monkeypatch.setenv("SENET_LOG_LEVEL", "debug")
        config = SenetConfig.from_env()

        assert config.state_path == Path(tmp_path / "match.json")
        assert config.seed == 42
        assert config.autosave is False
        assert config.log_level == "DEBUG"

    def test_non_integer_seed_is_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("SENET_SEED", "not-a-number")
        with caplog.at_level(logging.WARNING, logger="senet.config"):
            config = SenetConfig.from_env()

        assert config.seed is None
        assert "SENET_SEED" in caplog.text
