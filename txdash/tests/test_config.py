"""
Tests for DashboardSettings environment loading.

Verifies defaults, environment overrides, and that malformed integer or
boolean values fall back to their defaults instead of failing startup.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError
from txdash.src.config import DashboardSettings
from txdash.src.models import PollConfig


class TestDefaults:
    """All settings have working defaults."""

    def test_defaults(self) -> None:
        settings = DashboardSettings()
        assert settings.dashboard_host == "0.0.0.0"
        assert settings.dashboard_port == 8080
        assert settings.dashboard_default_ip == "192.168.1.140"
        assert settings.dashboard_default_snmp_port == 161
        assert settings.dashboard_default_poll_time_sec == 5
        assert settings.dashboard_auto_start is False
        assert settings.snmp_read_community == "public"
        assert settings.snmp_write_community == "private"
        assert settings.snmp_get_timeout_s == 15.0
        assert settings.snmp_set_timeout_s == 10.0

    def test_default_poll_config(self) -> None:
        config = DashboardSettings().default_poll_config()
        assert config == PollConfig(host="192.168.1.140", port=161, poll_interval_s=5)


class TestEnvOverrides:
    """Environment variables override defaults."""

    def test_values_loaded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DASHBOARD_PORT", "9000")
        monkeypatch.setenv("DASHBOARD_DEFAULT_IP", " 10.1.2.3 ")
        monkeypatch.setenv("DASHBOARD_DEFAULT_SNMP_PORT", "1161")
        monkeypatch.setenv("DASHBOARD_DEFAULT_POLL_TIME_SEC", "30")
        monkeypatch.setenv("DASHBOARD_AUTO_START", "true")
        monkeypatch.setenv("SNMP_READ_COMMUNITY", "ro-secret")

        settings = DashboardSettings()

        assert settings.dashboard_port == 9000
        assert settings.dashboard_default_ip == "10.1.2.3"
        assert settings.dashboard_auto_start is True
        assert settings.snmp_read_community == "ro-secret"
        assert settings.default_poll_config() == PollConfig(
            host="10.1.2.3", port=1161, poll_interval_s=30
        )

    def test_dotenv_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".env").write_text("DASHBOARD_DEFAULT_IP=172.16.0.9\n")
        assert DashboardSettings().dashboard_default_ip == "172.16.0.9"

    def test_blank_ip_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DASHBOARD_DEFAULT_IP", "   ")
        assert DashboardSettings().dashboard_default_ip == "192.168.1.140"


class TestFallbacks:
    """Malformed values are replaced by defaults with a warning."""

    @pytest.mark.parametrize(
        ("var", "value", "attr", "default"),
        [
            ("DASHBOARD_PORT", "http", "dashboard_port", 8080),
            ("DASHBOARD_PORT", "70000", "dashboard_port", 8080),
            ("DASHBOARD_DEFAULT_SNMP_PORT", "0", "dashboard_default_snmp_port", 161),
            ("DASHBOARD_DEFAULT_POLL_TIME_SEC", "2", "dashboard_default_poll_time_sec", 5),
            ("DASHBOARD_DEFAULT_POLL_TIME_SEC", "99999", "dashboard_default_poll_time_sec", 5),
            ("DASHBOARD_DEFAULT_POLL_TIME_SEC", "7.5", "dashboard_default_poll_time_sec", 5),
        ],
    )
    def test_int_fallback(
        self,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
        var: str,
        value: str,
        attr: str,
        default: int,
    ) -> None:
        monkeypatch.setenv(var, value)
        with caplog.at_level(logging.WARNING, logger="txdash.src.config"):
            settings = DashboardSettings()
        assert getattr(settings, attr) == default
        assert var in caplog.text

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("1", True), ("YES", True), ("on", True), ("0", False), ("off", False), ("", False)],
    )
    def test_bool_words(
        self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool
    ) -> None:
        monkeypatch.setenv("DASHBOARD_AUTO_START", value)
        assert DashboardSettings().dashboard_auto_start is expected

    def test_bool_garbage(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("DASHBOARD_AUTO_START", "maybe")
        with caplog.at_level(logging.WARNING, logger="txdash.src.config"):
            assert DashboardSettings().dashboard_auto_start is False
        assert "DASHBOARD_AUTO_START" in caplog.text

    def test_nonpositive_timeout_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNMP_GET_TIMEOUT_S", "0")
        with pytest.raises(ValidationError):
            DashboardSettings()
