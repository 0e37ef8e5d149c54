"""Runtime facade for daemon/app integration."""

from .service import HealthService, ProbeResult, get_health_service, set_health_service

__all__ = [
    "HealthService",
    "ProbeResult",
    "get_health_service",
    "set_health_service",
]
