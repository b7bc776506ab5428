"""Tests for configuration and logging setup."""
# pylint: disable=missing-function-docstring  # test names are self-documenting

import json
import logging

import pytest

from restkv.config import ClientConfig
from restkv.logging_config import log_init


def test_defaults():
    config = ClientConfig()
    assert config.base_url == "http://localhost:8000"
    assert config.api_key == ""
    assert config.parallel is True
    assert config.http_hook is None


def test_from_env(monkeypatch):
    monkeypatch.setenv("RESTKV_BASE_URL", "https://kv.example.com")
    monkeypatch.setenv("RESTKV_API_KEY", "abc")
    monkeypatch.setenv("RESTKV_TIMEOUT", "5")
    monkeypatch.setenv("RESTKV_PARALLEL", "false")
    config = ClientConfig.from_env()
    assert config.base_url == "https://kv.example.com"
    assert config.api_key == "abc"
    assert config.timeout == 5.0
    assert config.parallel is False


def test_from_env_overrides(monkeypatch):
    monkeypatch.setenv("RESTKV_API_KEY", "from-env")
    config = ClientConfig.from_env(api_key="explicit")
    assert config.api_key == "explicit"


def test_config_is_immutable():
    config = ClientConfig()
    with pytest.raises(AttributeError):
        config.api_key = "changed"


def test_log_init_from_file(tmp_path):
    path = tmp_path / "logging.json"
    path.write_text(json.dumps({
        "version": 1,
        "disable_existing_loggers": False,
        "loggers": {"restkv.test_config": {"level": "ERROR"}},
    }))
    log_init(str(path))
    assert logging.getLogger("restkv.test_config").level == logging.ERROR


def test_log_init_level_override(tmp_path):
    log_init(str(tmp_path / "missing.json"), level=logging.DEBUG)
    assert logging.getLogger("restkv").level == logging.DEBUG
    logging.getLogger("restkv").setLevel(logging.NOTSET)
