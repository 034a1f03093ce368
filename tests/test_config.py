# tests/test_config.py
from __future__ import annotations

import pytest

from ashstudio.config import PARSER_CHOICES, Settings
from ashstudio.errors import ConfigurationError


def test_defaults():
    s = Settings()
    assert (s.log_level, s.parsers, s.cache_size, s.max_trees) == ("WARNING", PARSER_CHOICES, 64, 16)
    assert Settings.from_mapping({}) == s


def test_from_mapping():
    s = Settings.from_mapping({"log_level": "debug", "parsers": "simple, grammar", "cache_size": "0", "max_trees": 4})
    assert s == Settings(log_level="DEBUG", parsers=("simple", "grammar"), cache_size=0, max_trees=4)


def test_from_env():
    env = {"ASHSTUDIO_PARSERS": "configuration", "ASHSTUDIO_MAX_TREES": "2", "OTHER": "x"}
    s = Settings.from_env(env)
    assert s.parsers == ("configuration",)
    assert s.max_trees == 2
    assert s.cache_size == 64


def test_from_env_prefix():
    assert Settings.from_env({"X_LOG_LEVEL": "error"}, prefix="X_").log_level == "ERROR"


@pytest.mark.parametrize("values, fragment", [
    ({"log_level": "LOUD"}, "log_level"),
    ({"parsers": "regex"}, "unknown parser 'regex'"),
    ({"parsers": ""}, "at least one parser"),
    ({"cache_size": "many"}, "expected an integer"),
    ({"cache_size": -1}, "must be >= 0"),
    ({"max_trees": 0}, "must be >= 1"),
])
def test_invalid_values(values, fragment):
    with pytest.raises(ConfigurationError) as exc:
        Settings.from_mapping(values)
    assert fragment in str(exc.value)
