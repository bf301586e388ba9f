"""Tests for configuration loading and logging setup."""

import json
import logging

import pytest
import yaml

from impactlens.core.config import Config
from impactlens.core.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep user and project config files out of the tests."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    return home


def test_defaults():
    config = Config.load()
    assert config.model == "gemini-2.5-flash"
    assert config.temperature == 0.7
    assert config.language == "en"
    assert config.prompt_version == "v1.1"
    assert config.viewer == "recruiter"


def test_hierarchy(isolated_home, tmp_path):
    user_dir = isolated_home / ".impactlens"
    user_dir.mkdir()
    (user_dir / "config.yaml").write_text(
        yaml.safe_dump({"model": "user-model", "viewer": "self", "temperature": 0.2}), encoding="utf-8"
    )
    (tmp_path / "work" / ".impactlens.yaml").write_text(
        yaml.safe_dump({"viewer": "client"}), encoding="utf-8"
    )
    explicit = tmp_path / "explicit.json"
    explicit.write_text(json.dumps({"temperature": 0.4}), encoding="utf-8")

    config = Config.load({"model": None, "output_dir": "reports"}, explicit)

    assert config.model == "user-model"
    assert config.viewer == "client"
    assert config.temperature == 0.4
    assert config.output_dir == "reports"


def test_unreadable_config_is_skipped(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("model: [unclosed", encoding="utf-8")

    config = Config.load(config_file=broken)

    assert config.model == "gemini-2.5-flash"


def test_api_key_from_environment(monkeypatch):
    monkeypatch.setenv("API_KEY", "fallback")
    assert Config.load().resolve_api_key() == "fallback"

    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    assert Config.load().resolve_api_key() == "primary"
    assert Config.load({"api_key": "cli"}).resolve_api_key() == "cli"


def test_save_never_writes_api_key(tmp_path):
    config = Config.load({"api_key": "secret", "viewer": "founder"})
    path = tmp_path / "saved.yaml"

    config.save(path)

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert "api_key" not in data
    assert data["viewer"] == "founder"


def test_configure_logging_updates_existing_loggers(tmp_path):
    logger = get_logger("impactlens.test")
    log_file = tmp_path / "impactlens.log"

    configure_logging(level="DEBUG", json_output=True, log_file=str(log_file))
    logger.info("hello", stage="unit")

    assert logger.logger.level == logging.DEBUG
    for handler in logger.logger.handlers:
        handler.flush()
    record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert record["message"] == "hello"
    assert record["stage"] == "unit"

    configure_logging(level="WARNING")
