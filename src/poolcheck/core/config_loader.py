"""Load poolcheck settings from defaults, an optional JSON file, and the environment."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .capacity_policy import ConfigurationError, PoolCapacityConfig

DEFAULT_MAX_POOL_SIZE = 100
DEFAULT_SERVER_PORT = 8080
DEFAULT_HOST = "127.0.0.1"

CONFIG_PATH_ENV = "POOLCHECK_CONFIG_PATH"

# Earlier names win.
_ENV_KEYS: dict[str, tuple[str, ...]] = {
    "max_pool_size": ("POOLCHECK_MAX_POOL_SIZE", "MAX_QUEUE_LENGTH"),
    "server_port": ("POOLCHECK_SERVER_PORT", "SERVER_PORT"),
    "host": ("POOLCHECK_HOST",),
}

_CONFIG_CACHE: dict[Path, tuple[int, dict[str, Any]]] = {}


@dataclass(frozen=True, slots=True)
class ServiceSettings:
    capacity: PoolCapacityConfig
    server_port: int = DEFAULT_SERVER_PORT
    host: str = DEFAULT_HOST


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[3]


def resolve_config_path(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Resolve the optional JSON config path against repo root.

    Priority:
    1. explicit function argument
    2. `POOLCHECK_CONFIG_PATH` environment variable

    Returns None when neither is set; the file layer is then skipped.
    """
    env = os.environ if environ is None else environ
    raw_path: str | Path | None = config_path or env.get(CONFIG_PATH_ENV)
    if not raw_path:
        return None
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        candidate = _repo_root() / candidate
    return candidate.resolve()


def load_config_file(config_path: Path, *, use_cache: bool = True) -> dict[str, Any]:
    """Load a JSON config object as a dictionary."""
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    mtime_ns = config_path.stat().st_mtime_ns
    if use_cache and config_path in _CONFIG_CACHE:
        cached_mtime_ns, cached_payload = _CONFIG_CACHE[config_path]
        if cached_mtime_ns == mtime_ns:
            return cached_payload

    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in config file: {config_path}") from exc

    if not isinstance(payload, dict):
        raise ConfigurationError(f"Config root must be a JSON object: {config_path}")

    _CONFIG_CACHE[config_path] = (mtime_ns, payload)
    return payload


def clear_config_cache() -> None:
    """Clear in-memory config cache."""
    _CONFIG_CACHE.clear()


def _coerce_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"`{key}` must be an integer, got {value!r}.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ConfigurationError(f"`{key}` must be an integer, got {value!r}.")


def _merge_env(raw: dict[str, Any], env: Mapping[str, str]) -> None:
    for key, names in _ENV_KEYS.items():
        for name in names:
            value = env.get(name)
            if value is not None and value.strip():
                raw[key] = value
                break


def load_settings(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    use_cache: bool = True,
) -> ServiceSettings:
    """Build validated settings; raises ConfigurationError on any bad value."""
    env = os.environ if environ is None else environ
    raw: dict[str, Any] = {
        "max_pool_size": DEFAULT_MAX_POOL_SIZE,
        "server_port": DEFAULT_SERVER_PORT,
        "host": DEFAULT_HOST,
    }

    resolved = resolve_config_path(config_path, environ=env)
    if resolved is not None:
        payload = load_config_file(resolved, use_cache=use_cache)
        for key in raw:
            if key in payload:
                raw[key] = payload[key]

    _merge_env(raw, env)

    max_pool_size = _coerce_int("max_pool_size", raw["max_pool_size"])
    if max_pool_size <= 0:
        raise ConfigurationError(f"`max_pool_size` must be positive, got {max_pool_size}.")

    server_port = _coerce_int("server_port", raw["server_port"])
    if not 1 <= server_port <= 65535:
        raise ConfigurationError(f"`server_port` must be in 1..65535, got {server_port}.")

    host = raw["host"]
    if not isinstance(host, str) or not host.strip():
        raise ConfigurationError("`host` must be a non-empty string.")

    return ServiceSettings(
        capacity=PoolCapacityConfig(max_pool_size=max_pool_size),
        server_port=server_port,
        host=host.strip(),
    )
