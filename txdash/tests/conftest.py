"""
Shared test fixtures for dashboard tests.

Provides env isolation for DashboardSettings, a canned set of raw SNMP
replies for a healthy transmitter, an in-memory QueryAgent fake, and a
FastAPI TestClient wired to that fake.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from txdash.src.agent import AgentError
from txdash.src.api.main import create_app
from txdash.src.config import DashboardSettings
from txdash.src.oids import ALL_OIDS

# All DashboardSettings environment variable names, used for cleanup.
_ALL_DASHBOARD_ENV_VARS = (
    "DASHBOARD_HOST",
    "DASHBOARD_PORT",
    "DASHBOARD_DEFAULT_IP",
    "DASHBOARD_DEFAULT_SNMP_PORT",
    "DASHBOARD_DEFAULT_POLL_TIME_SEC",
    "DASHBOARD_AUTO_START",
    "SNMP_READ_COMMUNITY",
    "SNMP_WRITE_COMMUNITY",
    "SNMP_GET_TIMEOUT_S",
    "SNMP_SET_TIMEOUT_S",
    "SNMPGET_BIN",
    "SNMPSET_BIN",
    "LOG_LEVEL",
)

RAW_VALUES: dict[str, str] = {
    "sys_uptime": "36000",
    "frequency": "97900",
    "forward_power": "1234",
    "reflected_power": "56",
    "power_percent": "80",
    "exciter_voltage": "130",
    "pa_voltage": "480",
    "pa2_voltage": "475",
    "exciter_current": "15",
    "pa_current": "52",
    "audio_input_source": "1",
    "audio_gain": "3",
    "level_left": "100",
    "level_right": "200",
    "internal_temp": "352",
    "external_temp": "401",
    "alarm_bits": "0",
    "pa_connected": "1",
    "alarm_code_now": "0",
    "alarm_code_latched": "2",
}
"""Raw replies of a healthy transmitter, keyed by OID name."""


class FakeAgent:
    """In-memory QueryAgent.

    Attributes:
        values: Raw reply per numeric OID.
        reads: OID list of every batch_read call, in call order.
        writes: ``(oid, value)`` of every write call.
        fail_reads: When True, every batch_read raises AgentError.
        write_error: Exception raised by write, if set.
    """

    def __init__(self, values: dict[str, str] | None = None) -> None:
        raw = values if values is not None else RAW_VALUES
        self.values: dict[str, str] = {ALL_OIDS[name].oid: v for name, v in raw.items()}
        self.reads: list[list[str]] = []
        self.writes: list[tuple[str, int]] = []
        self.fail_reads = False
        self.write_error: Exception | None = None

    def set(self, name: str, raw: str) -> None:
        self.values[ALL_OIDS[name].oid] = raw

    async def batch_read(self, *, host: str, port: int, oids: Sequence[str]) -> list[str]:
        self.reads.append(list(oids))
        if self.fail_reads:
            raise AgentError(f"Timeout: No Response from {host}:{port}.")
        return [self.values.get(oid, "") for oid in oids]

    async def write(self, *, host: str, port: int, oid: str, value: int) -> str:
        self.writes.append((oid, value))
        if self.write_error is not None:
            raise self.write_error
        self.values[oid] = str(value)
        return f"INTEGER: {value}"


@pytest.fixture(autouse=True)
def _clean_dashboard_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Remove all dashboard env vars and isolate from .env files.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_DASHBOARD_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def fake_agent() -> FakeAgent:
    """A FakeAgent answering with :data:`RAW_VALUES`."""
    return FakeAgent()


@pytest.fixture()
def raw_values() -> dict[str, str]:
    """A fresh copy of :data:`RAW_VALUES`."""
    return dict(RAW_VALUES)


@pytest.fixture()
def settings() -> DashboardSettings:
    """Default settings; auto-start off."""
    return DashboardSettings()


@pytest.fixture()
def client(settings: DashboardSettings, fake_agent: FakeAgent) -> Iterator[TestClient]:
    """TestClient with the lifespan running against *fake_agent*."""
    app = create_app(settings, agent=fake_agent)
    with TestClient(app) as test_client:
        yield test_client
