"""Process entrypoint: load settings, then serve the readiness endpoint."""

from __future__ import annotations

import argparse
import logging

from src.poolcheck.core.capacity_policy import ConfigurationError
from src.poolcheck.core.config_loader import ServiceSettings, load_settings
from src.poolcheck.core.pool_status import DEFAULT_TIMEOUT_SEC, PassengerStatusSource
from src.poolcheck.runtime.service import HealthService, set_health_service

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
EXIT_CONFIG_ERROR = 2
# Names uvicorn accepts for its own log_level.
LOG_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    name = "DEBUG" if level.lower() == "trace" else level.upper()
    root.setLevel(getattr(logging, name, logging.INFO))
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def run_server(
    settings: ServiceSettings,
    *,
    status_timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    log_level: str = "info",
) -> int:
    set_health_service(HealthService(settings, PassengerStatusSource(timeout_sec=status_timeout_sec)))
    try:
        import uvicorn
    except Exception as exc:  # pragma: no cover - dependency error guard
        raise RuntimeError("uvicorn is required to serve the readiness endpoint") from exc

    from app.main import app

    logger.info("Starting server on %s:%d", settings.host, settings.server_port)
    uvicorn.run(app, host=settings.host, port=settings.server_port, log_level=log_level.lower())
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve pool readiness for load balancer health checks.")
    parser.add_argument("--host", default=None, help="Bind host; overrides config and POOLCHECK_HOST.")
    parser.add_argument("--port", type=int, default=None, help="Bind port; overrides config and SERVER_PORT.")
    parser.add_argument("--config", default=None, help="Optional JSON config file.")
    parser.add_argument(
        "--status-timeout-sec",
        type=float,
        default=DEFAULT_TIMEOUT_SEC,
        help="Timeout for each passenger-status call.",
    )
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=LOG_LEVELS,
        default="info",
        help="Root and uvicorn log level.",
    )
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    try:
        settings = load_settings(args.config)
        if args.host is not None or args.port is not None:
            settings = ServiceSettings(
                capacity=settings.capacity,
                server_port=args.port if args.port is not None else settings.server_port,
                host=args.host if args.host is not None else settings.host,
            )
            if not 1 <= settings.server_port <= 65535:
                raise ConfigurationError(f"`server_port` must be in 1..65535, got {settings.server_port}.")
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR

    return run_server(settings, status_timeout_sec=args.status_timeout_sec, log_level=args.log_level)


if __name__ == "__main__":
    raise SystemExit(main())
