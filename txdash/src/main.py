"""
Dashboard entrypoint: logging setup, config summary, HTTP server.

Configures structured JSON logging on the root logger, loads
DashboardSettings, logs a config summary (community strings masked), and
serves the FastAPI app with uvicorn. Polling itself is owned by the app
lifespan (see api/main.py).

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import hashlib
import json
import logging
import sys
from datetime import UTC, datetime

import uvicorn

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


class _JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging for the dashboard.

    Sets up the root logger with a JSON-formatted handler writing to stderr.
    Unknown level names fall back to INFO.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))


def _masked(value: str | None) -> str:
    """Return a short non-reversible fingerprint for diagnostics."""
    if not value:
        return "empty"
    digest = hashlib.sha256(value.encode("utf-8")).hexdigest()[:10]
    return f"len={len(value)} sha256={digest}"


def log_config_summary(settings: object) -> None:
    """Log a config summary at startup, masking community strings.

    Args:
        settings: A DashboardSettings instance (or any object with the same
            attributes).
    """
    logger.info(
        "Dashboard starting with config: "
        "http=%s:%s, default_target=%s:%s, default_poll_time_sec=%s, "
        "auto_start=%s, snmp_get_timeout_s=%s, snmp_set_timeout_s=%s, "
        "snmpget_bin=%s, snmpset_bin=%s, read_community=%s, write_community=%s",
        settings.dashboard_host,  # type: ignore[attr-defined]
        settings.dashboard_port,  # type: ignore[attr-defined]
        settings.dashboard_default_ip,  # type: ignore[attr-defined]
        settings.dashboard_default_snmp_port,  # type: ignore[attr-defined]
        settings.dashboard_default_poll_time_sec,  # type: ignore[attr-defined]
        settings.dashboard_auto_start,  # type: ignore[attr-defined]
        settings.snmp_get_timeout_s,  # type: ignore[attr-defined]
        settings.snmp_set_timeout_s,  # type: ignore[attr-defined]
        settings.snmpget_bin,  # type: ignore[attr-defined]
        settings.snmpset_bin,  # type: ignore[attr-defined]
        _masked(settings.snmp_read_community),  # type: ignore[attr-defined]
        _masked(settings.snmp_write_community),  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    """Synchronous entrypoint for the dashboard server."""
    from txdash.src.api.main import create_app
    from txdash.src.config import DashboardSettings

    settings = DashboardSettings()
    configure_logging(settings.log_level)
    log_config_summary(settings)

    uvicorn.run(
        create_app(settings),
        host=settings.dashboard_host,
        port=settings.dashboard_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
