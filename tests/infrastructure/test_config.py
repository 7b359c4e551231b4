"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from pricing_engine.infrastructure.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("PRICING_CATALOG_FILE", "PRICING_ACTOR", "PRICING_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        s = Settings(_env_file=None)
        assert s.actor == "Admin"
        assert s.log_level == "WARNING"
        assert s.catalog_file.name == "catalog.json"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PRICING_CATALOG_FILE", str(tmp_path / "x.json"))
        monkeypatch.setenv("PRICING_ACTOR", "Maya")
        monkeypatch.setenv("PRICING_LOG_LEVEL", "debug")
        s = Settings(_env_file=None)
        assert s.catalog_file == Path(tmp_path / "x.json")
        assert s.actor == "Maya"
        assert s.log_level == "DEBUG"

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("PRICING_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
