"""
Pydantic models for transmitter telemetry and polling state.

Defines the decoded ``Snapshot`` (grouped, unit-converted device view), the
``HistoryPoint`` kept by the history store, the validated ``PollConfig``
target, and the ``PollState`` / ``StateView`` read models exposed to the
HTTP layer.

Every numeric telemetry field is independently optional: a value that
could not be parsed is ``None`` and only that field (and its unit-converted
sibling) is affected.

CHANGELOG:
- 2026-10-19: Add StateView for the /api/state read model
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = int | float

MIN_POLL_INTERVAL_S: float = 5
MAX_POLL_INTERVAL_S: float = 10000


# ---------------------------------------------------------------------------
# Polling target
# ---------------------------------------------------------------------------


class PollConfig(BaseModel):
    """Validated polling target.

    Frozen so that a cycle in flight always sees the configuration it was
    started with; replacing the config means building a new instance.

    Attributes:
        host: Transmitter IP address or hostname (non-empty, stripped).
        port: SNMP UDP port.
        poll_interval_s: Seconds between scheduled poll cycles.
    """

    model_config = ConfigDict(frozen=True)

    host: str
    port: int = Field(default=161, ge=1, le=65535)
    poll_interval_s: float = Field(
        default=5, ge=MIN_POLL_INTERVAL_S, le=MAX_POLL_INTERVAL_S
    )

    @field_validator("host")
    @classmethod
    def host_must_not_be_blank(cls, v: str) -> str:
        """Strip whitespace and reject an empty host."""
        v = v.strip()
        if not v:
            raise ValueError("IP address is required")
        return v


# ---------------------------------------------------------------------------
# Decoded snapshot groups
# ---------------------------------------------------------------------------


class SystemInfo(BaseModel):
    """MIB-II system group: identity strings and uptime."""

    descr: str = ""
    uptime_ticks: int | None = None
    uptime_s: int | None = None
    name: str = ""
    location: str = ""
    device_object_id: str = ""


class RfInfo(BaseModel):
    """RF output: carrier frequency, forward/reflected power, setpoint."""

    frequency_khz: Number | None = None
    frequency_mhz: float | None = None
    forward_power_raw: Number | None = None
    forward_power_w: float | None = None
    reflected_power_raw: Number | None = None
    reflected_power_w: float | None = None
    power_percent: Number | None = None


class ThermalInfo(BaseModel):
    """Exciter (internal) and PA (external) temperatures."""

    internal_temp_raw: Number | None = None
    internal_temp_c: float | None = None
    external_temp_raw: Number | None = None
    external_temp_c: float | None = None


class AlarmInfo(BaseModel):
    """Alarm bitmask, current and latched alarm codes, PA presence."""

    alarm_bits: Number | None = None
    pa_connected: bool | None = None
    alarm_code_now: Number | None = None
    alarm_code_now_text: str | None = None
    alarm_code_latched: Number | None = None
    alarm_code_latched_text: str | None = None


class PowerRailInfo(BaseModel):
    """Supply voltages and currents of the exciter and PA stages."""

    exciter_voltage_raw: Number | None = None
    exciter_voltage_v: float | None = None
    pa_voltage_raw: Number | None = None
    pa_voltage_v: float | None = None
    pa2_voltage_raw: Number | None = None
    pa2_voltage_v: float | None = None
    exciter_current_raw: Number | None = None
    exciter_current_a: float | None = None
    pa_current_raw: Number | None = None
    pa_current_a: float | None = None


class AudioInfo(BaseModel):
    """Audio input selection, gain, and the two 0-255 level meters."""

    input_source: Number | None = None
    input_source_text: str | None = None
    gain_db: Number | None = None
    level_left: Number | None = None
    level_right: Number | None = None


class Snapshot(BaseModel):
    """Fully decoded, unit-converted state of the transmitter at one poll.

    Every group is always present; per-field ``None`` is the only absence
    signal.
    """

    system: SystemInfo = Field(default_factory=SystemInfo)
    rf: RfInfo = Field(default_factory=RfInfo)
    thermal: ThermalInfo = Field(default_factory=ThermalInfo)
    alarms: AlarmInfo = Field(default_factory=AlarmInfo)
    power_rail: PowerRailInfo = Field(default_factory=PowerRailInfo)
    audio: AudioInfo = Field(default_factory=AudioInfo)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class HistoryPoint(BaseModel):
    """One chart sample taken from a successful poll cycle.

    Attributes:
        ts_ms: Poll completion time, epoch milliseconds.
        forward_power_w: Forward power in watts.
        reflected_power_w: Reflected power in watts.
        level_left: Left audio level, 0-255.
        level_right: Right audio level, 0-255.
    """

    model_config = ConfigDict(frozen=True)

    ts_ms: int
    forward_power_w: float | None = None
    reflected_power_w: float | None = None
    level_left: Number | None = None
    level_right: Number | None = None

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, *, ts_ms: int) -> HistoryPoint | None:
        """Build a point from the chart-relevant fields of *snapshot*.

        Returns ``None`` when all four values are missing.
        """
        values = {
            "forward_power_w": snapshot.rf.forward_power_w,
            "reflected_power_w": snapshot.rf.reflected_power_w,
            "level_left": snapshot.audio.level_left,
            "level_right": snapshot.audio.level_right,
        }
        if all(v is None for v in values.values()):
            return None
        return cls(ts_ms=ts_ms, **values)


# ---------------------------------------------------------------------------
# Poll state read models
# ---------------------------------------------------------------------------


class PollState(BaseModel):
    """Scheduler and last-cycle outcome.

    Attributes:
        running: True while the scheduler timer is armed.
        config: Target of the current (or last) polling run.
        last_poll_ms: Completion time of the last cycle, 0 if never polled.
        last_error: Description of the last failure, cleared on success.
        snapshot: Last successfully decoded snapshot (kept across failures).
    """

    running: bool = False
    config: PollConfig
    last_poll_ms: int = 0
    last_error: str | None = None
    snapshot: Snapshot | None = None


class StateView(PollState):
    """PollState plus a copy of the history, as served by ``/api/state``."""

    history: list[HistoryPoint] = Field(default_factory=list)
