"""
Dashboard configuration loaded from environment variables.

Uses Pydantic BaseSettings for env var and ``.env`` loading. Defaults for
the polling target come from here; the operator can override them at
runtime through ``POST /api/start``.

Integer and boolean variables that fail to parse, or fall outside their
allowed range, are replaced by their default and a warning is logged.

CHANGELOG:
- 2026-10-19: Fall back to defaults on malformed numeric/boolean values
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from txdash.src.models import MAX_POLL_INTERVAL_S, MIN_POLL_INTERVAL_S, PollConfig

logger = logging.getLogger(__name__)

_INT_BOUNDS: dict[str, tuple[int, int]] = {
    "dashboard_port": (1, 65535),
    "dashboard_default_snmp_port": (1, 65535),
    "dashboard_default_poll_time_sec": (int(MIN_POLL_INTERVAL_S), int(MAX_POLL_INTERVAL_S)),
}

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


class DashboardSettings(BaseSettings):
    """Dashboard configuration.

    Attributes:
        dashboard_host: Address the HTTP server binds to.
        dashboard_port: HTTP server port.
        dashboard_default_ip: Default transmitter host.
        dashboard_default_snmp_port: Default transmitter SNMP port.
        dashboard_default_poll_time_sec: Default poll interval (5-10000).
        dashboard_auto_start: Start polling the default target at startup.
        snmp_read_community: Community string for GET requests.
        snmp_write_community: Community string for SET requests.
        snmp_get_timeout_s: Timeout for one ``snmpget`` invocation.
        snmp_set_timeout_s: Timeout for one ``snmpset`` invocation.
        snmpget_bin: ``snmpget`` executable.
        snmpset_bin: ``snmpset`` executable.
        log_level: Root log level name.
    """

    dashboard_host: str = "0.0.0.0"
    dashboard_port: int = 8080
    dashboard_default_ip: str = "192.168.1.140"
    dashboard_default_snmp_port: int = 161
    dashboard_default_poll_time_sec: int = 5
    dashboard_auto_start: bool = False
    snmp_read_community: str = "public"
    snmp_write_community: str = "private"
    snmp_get_timeout_s: float = 15.0
    snmp_set_timeout_s: float = 10.0
    snmpget_bin: str = "snmpget"
    snmpset_bin: str = "snmpset"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator(
        "dashboard_port",
        "dashboard_default_snmp_port",
        "dashboard_default_poll_time_sec",
        mode="before",
    )
    @classmethod
    def int_in_range_or_default(cls, v: Any, info: ValidationInfo) -> Any:
        """Replace a malformed or out-of-range integer with the default."""
        default = cls.model_fields[info.field_name].default
        lo, hi = _INT_BOUNDS[info.field_name]
        try:
            n = int(str(v).strip())
        except ValueError:
            n = None
        if n is None or not lo <= n <= hi:
            logger.warning(
                "%s=%r is not an integer in %d..%d, using default %d",
                info.field_name.upper(),
                v,
                lo,
                hi,
                default,
            )
            return default
        return n

    @field_validator("dashboard_auto_start", mode="before")
    @classmethod
    def bool_or_default(cls, v: Any) -> Any:
        """Accept 1/0, true/false, yes/no, on/off; otherwise the default."""
        if isinstance(v, bool):
            return v
        word = str(v).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS or not word:
            return False
        logger.warning("DASHBOARD_AUTO_START=%r is not a boolean, using default False", v)
        return False

    @field_validator("dashboard_default_ip")
    @classmethod
    def default_ip_or_fallback(cls, v: str) -> str:
        """Blank default IP falls back to the factory address."""
        return v.strip() or "192.168.1.140"

    @field_validator("snmp_get_timeout_s", "snmp_set_timeout_s")
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        """Validate that SNMP timeouts are positive."""
        if v <= 0:
            raise ValueError("SNMP timeouts must be > 0")
        return v

    def default_poll_config(self) -> PollConfig:
        """Build the default polling target from these settings."""
        return PollConfig(
            host=self.dashboard_default_ip,
            port=self.dashboard_default_snmp_port,
            poll_interval_s=self.dashboard_default_poll_time_sec,
        )
