"""
Configuration tests.
"""

import pytest

from nexavalid.core.config import Config, apply_logging, get_config, reset_config
from nexavalid.utils.logger import LogLevel, get_logger


def test_defaults():
    config = Config(load_env=False)

    assert config.get_bool("validation.strict") is False
    assert config.get("logging.level") == "WARNING"
    assert config.get("logging.format") == "text"
    assert config.get_float("http.timeout") == 10.0


def test_missing_key_returns_default():
    config = Config(load_env=False)

    assert config.get("no.such.key") is None
    assert config.get("no.such.key", "fallback") == "fallback"
    assert "no.such.key" not in config
    with pytest.raises(KeyError):
        config["no.such.key"]


def test_runtime_set_overrides_everything(monkeypatch):
    monkeypatch.setenv("NEXAVALID_HTTP_TIMEOUT", "3")
    config = Config()

    assert config.get_float("http.timeout") == 3.0

    config.set("http.timeout", 1.5)
    assert config.get_float("http.timeout") == 1.5


def test_set_after_get_is_visible():
    config = Config(load_env=False)
    assert config.get("validation.strict") is False

    config["validation.strict"] = True
    assert config.get("validation.strict") is True


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("true", True),
        ("off", False),
        ("12", 12),
        ("2.5", 2.5),
        ('{"a": 1}', {"a": 1}),
        ("DEBUG", "DEBUG"),
    ],
)
def test_environment_values_are_parsed(monkeypatch, raw, expected):
    monkeypatch.setenv("NEXAVALID_CUSTOM_VALUE", raw)

    assert Config().get("custom.value") == expected


def test_add_source_priority():
    config = Config(load_env=False)
    config.add_source("low", {"validation": {"strict": True}}, priority=-10)
    config.add_source("high", {"logging": {"level": "ERROR"}}, priority=50)

    assert config.get_bool("validation.strict") is False
    assert config.get("logging.level") == "ERROR"
    assert config.section("logging") == {"level": "ERROR", "format": "text"}


def test_sources_are_not_mutated():
    config = Config(load_env=False)
    config.add_source("extra", {"logging": {"level": "INFO"}}, priority=10)
    config.get("logging.level")

    assert Config(load_env=False).get("logging.level") == "WARNING"


def test_global_config_is_a_singleton():
    assert get_config() is get_config()

    first = get_config()
    reset_config()
    assert get_config() is not first


def test_apply_logging():
    config = Config(load_env=False)
    config.set("logging.level", "debug")

    try:
        apply_logging(config)
        assert get_logger("nexavalid.validator").level == LogLevel.DEBUG
    finally:
        apply_logging(Config(load_env=False))

    assert get_logger("nexavalid.validator").level == LogLevel.WARNING
