import json
from pathlib import Path

import pytest

from src.poolcheck.core.capacity_policy import ConfigurationError
from src.poolcheck.core.config_loader import (
    DEFAULT_HOST,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_SERVER_PORT,
    clear_config_cache,
    load_config_file,
    load_settings,
    resolve_config_path,
)


def _write_json(path: Path, payload) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_config_cache()
    yield
    clear_config_cache()


def test_defaults_when_nothing_configured():
    settings = load_settings(environ={})
    assert settings.capacity.max_pool_size == DEFAULT_MAX_POOL_SIZE
    assert settings.server_port == DEFAULT_SERVER_PORT
    assert settings.host == DEFAULT_HOST


def test_resolve_config_path_none_without_arg_or_env():
    assert resolve_config_path(environ={}) is None


def test_resolve_config_path_uses_env_var(tmp_path: Path):
    config_path = tmp_path / "custom.json"
    _write_json(config_path, {})

    resolved = resolve_config_path(environ={"POOLCHECK_CONFIG_PATH": str(config_path)})
    assert resolved == config_path.resolve()


def test_file_values_override_defaults(tmp_path: Path):
    config_path = tmp_path / "config.json"
    _write_json(config_path, {"max_pool_size": 40, "server_port": 9090, "host": "0.0.0.0"})

    settings = load_settings(config_path, environ={})
    assert settings.capacity.max_pool_size == 40
    assert settings.server_port == 9090
    assert settings.host == "0.0.0.0"


def test_env_overrides_file(tmp_path: Path):
    config_path = tmp_path / "config.json"
    _write_json(config_path, {"max_pool_size": 40, "server_port": 9090})

    settings = load_settings(config_path, environ={"MAX_QUEUE_LENGTH": "5", "SERVER_PORT": "8081"})
    assert settings.capacity.max_pool_size == 5
    assert settings.server_port == 8081


def test_prefixed_env_names_take_precedence():
    settings = load_settings(
        environ={
            "MAX_QUEUE_LENGTH": "5",
            "POOLCHECK_MAX_POOL_SIZE": "7",
            "SERVER_PORT": "8081",
            "POOLCHECK_SERVER_PORT": "8082",
            "POOLCHECK_HOST": " 10.0.0.1 ",
        }
    )
    assert settings.capacity.max_pool_size == 7
    assert settings.server_port == 8082
    assert settings.host == "10.0.0.1"


def test_blank_env_value_is_ignored():
    settings = load_settings(environ={"MAX_QUEUE_LENGTH": "  "})
    assert settings.capacity.max_pool_size == DEFAULT_MAX_POOL_SIZE


@pytest.mark.parametrize("value", ["0", "-3"])
def test_non_positive_pool_size_rejected(value):
    with pytest.raises(ConfigurationError, match="max_pool_size"):
        load_settings(environ={"MAX_QUEUE_LENGTH": value})


@pytest.mark.parametrize("value", ["abc", "1.5", ""])
def test_non_integer_pool_size_in_file_rejected(tmp_path: Path, value):
    config_path = tmp_path / "config.json"
    _write_json(config_path, {"max_pool_size": value})

    with pytest.raises(ConfigurationError, match="max_pool_size"):
        load_settings(config_path, environ={})


def test_boolean_pool_size_rejected(tmp_path: Path):
    config_path = tmp_path / "config.json"
    _write_json(config_path, {"max_pool_size": True})

    with pytest.raises(ConfigurationError, match="must be an integer"):
        load_settings(config_path, environ={})


@pytest.mark.parametrize("value", ["0", "65536", "http"])
def test_bad_port_rejected(value):
    with pytest.raises(ConfigurationError, match="server_port"):
        load_settings(environ={"SERVER_PORT": value})


def test_missing_named_file_raises(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="Config file not found"):
        load_settings(tmp_path / "missing.json", environ={})


def test_invalid_json_raises(tmp_path: Path):
    config_path = tmp_path / "config.json"
    config_path.write_text("{ invalid", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid JSON in config file"):
        load_config_file(config_path, use_cache=False)


def test_non_object_root_raises(tmp_path: Path):
    config_path = tmp_path / "config.json"
    _write_json(config_path, [1, 2])

    with pytest.raises(ConfigurationError, match="must be a JSON object"):
        load_config_file(config_path, use_cache=False)
