"""
PCS Electronics transmitter SNMP OID map -- single source of truth.

Defines every OID the dashboard reads or writes, the value kind of each one,
the divisor that converts the raw integer into engineering units, and the
closed lookup tables for enumerated values (alarm codes, audio sources).

The poll list is ordered: the decoder aligns replies positionally with
:data:`POLL_OIDS`, so the order here is part of the contract with the
normalizer.

CHANGELOG:
- 2026-10-19: Add identity OIDs (not polled by default)
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Data definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OidDef:
    """Definition of a single SNMP object.

    Attributes:
        name: Unique identifier used as dict key by the normalizer.
        oid: Numeric dotted OID, instance suffix included.
        kind: Value kind -- one of ``"number"``, ``"ticks"``, ``"text"``.
        unit: Engineering unit string after conversion (e.g. ``"W"``).
        divisor: Raw value is divided by this to obtain the engineering
            value. ``1`` means the raw value is already in *unit*.
        description: Free-text description of the object.
    """

    name: str
    oid: str
    kind: str
    unit: str = ""
    divisor: int = 1
    description: str = ""


_PCS_ROOT = "1.3.6.1.4.1.65081.1"

# ---------------------------------------------------------------------------
# MIB-II system group (identity strings and uptime)
# ---------------------------------------------------------------------------

SYS_DESCR = OidDef("sys_descr", "1.3.6.1.2.1.1.1.0", "text", description="System description")
SYS_UPTIME = OidDef(
    "sys_uptime",
    "1.3.6.1.2.1.1.3.0",
    "ticks",
    unit="s",
    divisor=100,
    description="Agent uptime in hundredths of a second",
)
SYS_NAME = OidDef("sys_name", "1.3.6.1.2.1.1.5.0", "text", description="System name")
SYS_LOCATION = OidDef("sys_location", "1.3.6.1.2.1.1.6.0", "text", description="System location")
DEVICE_OBJECT_ID = OidDef(
    "device_object_id", f"{_PCS_ROOT}.1.0", "text", description="PCS device object identifier"
)

# ---------------------------------------------------------------------------
# RF output
# ---------------------------------------------------------------------------

FORWARD_POWER = OidDef(
    "forward_power", f"{_PCS_ROOT}.2.1.0", "number", unit="W", divisor=10,
    description="Forward RF power in tenths of a watt",
)
REFLECTED_POWER = OidDef(
    "reflected_power", f"{_PCS_ROOT}.2.2.0", "number", unit="W", divisor=10,
    description="Reflected RF power in tenths of a watt",
)
POWER_PERCENT = OidDef(
    "power_percent", f"{_PCS_ROOT}.2.3.0", "number", unit="%",
    description="Output power setpoint",
)
FREQUENCY = OidDef(
    "frequency", f"{_PCS_ROOT}.8.1.0", "number", unit="MHz", divisor=1000,
    description="Carrier frequency in kHz",
)

# ---------------------------------------------------------------------------
# Thermal
# ---------------------------------------------------------------------------

INTERNAL_TEMP = OidDef(
    "internal_temp", f"{_PCS_ROOT}.3.1.0", "number", unit="C", divisor=10,
    description="Exciter temperature in tenths of a degree",
)
EXTERNAL_TEMP = OidDef(
    "external_temp", f"{_PCS_ROOT}.3.2.0", "number", unit="C", divisor=10,
    description="PA temperature in tenths of a degree",
)

# ---------------------------------------------------------------------------
# Alarms
# ---------------------------------------------------------------------------

ALARM_BITS = OidDef("alarm_bits", f"{_PCS_ROOT}.4.1.0", "number", description="Alarm bitmask")
PA_CONNECTED = OidDef(
    "pa_connected", f"{_PCS_ROOT}.4.2.0", "number", description="Non-zero when a PA is attached"
)
ALARM_CODE_NOW = OidDef(
    "alarm_code_now", f"{_PCS_ROOT}.4.3.0", "number", description="Current alarm code"
)
ALARM_CODE_LATCHED = OidDef(
    "alarm_code_latched", f"{_PCS_ROOT}.4.4.0", "number",
    description="Latched alarm code; writing 0 clears it",
)

# ---------------------------------------------------------------------------
# Power rail
# ---------------------------------------------------------------------------

EXCITER_VOLTAGE = OidDef(
    "exciter_voltage", f"{_PCS_ROOT}.5.1.0", "number", unit="V", divisor=10,
    description="Exciter supply voltage in tenths of a volt",
)
PA_VOLTAGE = OidDef(
    "pa_voltage", f"{_PCS_ROOT}.5.2.0", "number", unit="V", divisor=10,
    description="PA supply voltage in tenths of a volt",
)
PA2_VOLTAGE = OidDef(
    "pa2_voltage", f"{_PCS_ROOT}.5.3.0", "number", unit="V", divisor=10,
    description="Second PA stage supply voltage in tenths of a volt",
)
EXCITER_CURRENT = OidDef(
    "exciter_current", f"{_PCS_ROOT}.6.1.0", "number", unit="A", divisor=10,
    description="Exciter current in tenths of an ampere",
)
PA_CURRENT = OidDef(
    "pa_current", f"{_PCS_ROOT}.6.2.0", "number", unit="A", divisor=10,
    description="PA current in tenths of an ampere",
)

# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------

AUDIO_INPUT_SOURCE = OidDef(
    "audio_input_source", f"{_PCS_ROOT}.7.1.0", "number", description="Audio input selector"
)
AUDIO_GAIN = OidDef("audio_gain", f"{_PCS_ROOT}.7.2.0", "number", unit="dB", description="Input gain")
LEVEL_LEFT = OidDef("level_left", f"{_PCS_ROOT}.7.3.0", "number", description="Left VU meter 0-255")
LEVEL_RIGHT = OidDef("level_right", f"{_PCS_ROOT}.7.4.0", "number", description="Right VU meter 0-255")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

MAX_OIDS_PER_REQUEST: int = 5
"""Upper bound on OIDs per SNMP GET. Longer lists are chunked, never widened."""

POLL_OIDS: list[OidDef] = [
    SYS_UPTIME,
    FREQUENCY,
    FORWARD_POWER,
    REFLECTED_POWER,
    POWER_PERCENT,
    EXCITER_VOLTAGE,
    PA_VOLTAGE,
    PA2_VOLTAGE,
    EXCITER_CURRENT,
    PA_CURRENT,
    AUDIO_INPUT_SOURCE,
    AUDIO_GAIN,
    LEVEL_LEFT,
    LEVEL_RIGHT,
    INTERNAL_TEMP,
    EXTERNAL_TEMP,
    ALARM_BITS,
    PA_CONNECTED,
    ALARM_CODE_NOW,
    ALARM_CODE_LATCHED,
]
"""OIDs read on every poll cycle, in request order."""

IDENTITY_OIDS: list[OidDef] = [SYS_DESCR, SYS_NAME, SYS_LOCATION, DEVICE_OBJECT_ID]
"""Identity strings. Known to the decoder but not part of the default poll."""

ALL_OIDS: dict[str, OidDef] = {o.name: o for o in [*POLL_OIDS, *IDENTITY_OIDS]}
"""Flat lookup of every OID definition by name."""

ALARM_CODE_TEXT: dict[int, str] = {
    0: "No alarm",
    1: "External temperature alarm",
    2: "High SWR alarm",
    3: "Internal temperature alarm",
    4: "High current alarm",
    5: "High voltage alarm",
    6: "No exciter communication",
}

AUDIO_SOURCE_TEXT: dict[int, str] = {
    0: "Analog input",
    1: "AES/EBU",
    2: "I2S #1",
    3: "I2S #2",
}
