"""Core capacity evaluation for poolcheck."""

from .capacity_policy import (
    READY_THRESHOLD,
    ConfigurationError,
    PoolCapacityConfig,
    PoolObservation,
    ReadinessVerdict,
    evaluate,
)
from .config_loader import (
    ServiceSettings,
    clear_config_cache,
    load_config_file,
    load_settings,
    resolve_config_path,
)
from .pool_status import (
    PassengerStatusSource,
    PoolStatusError,
    PoolStatusSource,
    StaticPoolStatusSource,
    parse_queue_length,
)

__all__ = [
    "READY_THRESHOLD",
    "ConfigurationError",
    "PassengerStatusSource",
    "PoolCapacityConfig",
    "PoolObservation",
    "PoolStatusError",
    "PoolStatusSource",
    "ReadinessVerdict",
    "ServiceSettings",
    "StaticPoolStatusSource",
    "clear_config_cache",
    "evaluate",
    "load_config_file",
    "load_settings",
    "parse_queue_length",
    "resolve_config_path",
]
