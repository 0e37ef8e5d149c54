"""Readiness probe handling shared by the daemon and the HTTP app."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Any

from src.poolcheck.core.capacity_policy import ReadinessVerdict, evaluate
from src.poolcheck.core.config_loader import ServiceSettings, load_settings
from src.poolcheck.core.pool_status import PassengerStatusSource, PoolStatusError, PoolStatusSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProbeResult:
    ready: bool
    verdict: ReadinessVerdict | None = None
    current_size: int | None = None
    error: str | None = None


class HealthService:
    """Observes the pool and evaluates readiness once per probe."""

    def __init__(self, settings: ServiceSettings, source: PoolStatusSource) -> None:
        self._settings = settings
        self._source = source

    @property
    def settings(self) -> ServiceSettings:
        return self._settings

    def check(self) -> ProbeResult:
        try:
            observation = self._source.observe()
        except PoolStatusError as exc:
            logger.warning("Pool status unavailable, reporting not ready: %s", exc)
            return ProbeResult(ready=False, error=str(exc))

        verdict = evaluate(self._settings.capacity, observation)
        logger.debug(
            "Pool depth %d/%d (ratio %.2f) ready=%s",
            observation.current_size,
            self._settings.capacity.max_pool_size,
            verdict.utilization_ratio,
            verdict.ready,
        )
        return ProbeResult(ready=verdict.ready, verdict=verdict, current_size=observation.current_size)

    def health(self) -> dict[str, Any]:
        result = self.check()
        return {
            "ready": result.ready,
            "utilization_ratio": result.verdict.utilization_ratio if result.verdict is not None else None,
            "current_size": result.current_size,
            "max_pool_size": self._settings.capacity.max_pool_size,
            "error": result.error,
        }


_HEALTH_SERVICE: HealthService | None = None
_HEALTH_SERVICE_LOCK = RLock()


def get_health_service() -> HealthService:
    global _HEALTH_SERVICE
    with _HEALTH_SERVICE_LOCK:
        if _HEALTH_SERVICE is None:
            _HEALTH_SERVICE = HealthService(load_settings(), PassengerStatusSource())
        return _HEALTH_SERVICE


def set_health_service(service: HealthService | None) -> None:
    global _HEALTH_SERVICE
    with _HEALTH_SERVICE_LOCK:
        _HEALTH_SERVICE = service
