"""Readiness verdict for a bounded request-processing pool."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

READY_THRESHOLD = 0.80
_READY_FRACTION = Fraction(4, 5)


class ConfigurationError(ValueError):
    """Raised when pool-capacity configuration is unusable."""


@dataclass(frozen=True, slots=True)
class PoolCapacityConfig:
    max_pool_size: int


@dataclass(frozen=True, slots=True)
class PoolObservation:
    """Pool depth at the moment of a single check."""

    current_size: int

    def __post_init__(self) -> None:
        if isinstance(self.current_size, bool) or not isinstance(self.current_size, int):
            raise ValueError(f"PoolObservation.current_size must be an integer, got {self.current_size!r}.")
        if self.current_size < 0:
            raise ValueError("PoolObservation.current_size must be non-negative.")


@dataclass(frozen=True, slots=True)
class ReadinessVerdict:
    ready: bool
    utilization_ratio: float


def evaluate(config: PoolCapacityConfig, observation: PoolObservation) -> ReadinessVerdict:
    """Return whether the pool can take more traffic.

    The pool stops being ready once utilization reaches `READY_THRESHOLD`,
    so exactly 80% full is already not ready.
    """
    if config.max_pool_size <= 0:
        raise ConfigurationError(f"max_pool_size must be positive, got {config.max_pool_size}.")
    ready = Fraction(observation.current_size, config.max_pool_size) < _READY_FRACTION
    try:
        ratio = observation.current_size / config.max_pool_size
    except OverflowError:
        ratio = float("inf")
    return ReadinessVerdict(ready=ready, utilization_ratio=ratio)
