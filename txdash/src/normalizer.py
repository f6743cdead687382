"""
Pure normalizer that converts raw SNMP reply strings into a Snapshot.

Takes the ordered list of raw values returned by the batch reader (one per
requested OID), parses each one independently, applies the unit divisors
from oids.py and the closed enum lookups, and returns a Snapshot pydantic
model.

A field that cannot be parsed becomes ``None``; it never prevents any other
field from decoding. Only the field itself and its unit-converted sibling
are affected.

Uptime values arrive in several shapes depending on the agent's output
options. They are handled by a fixed, ordered list of parse strategies:

1. bare integer hundredths (``"36000"``)
2. parenthesised hundredths (``"Timeticks: (36000) 0:06:00.00"``)
3. clock form (``"1 day, 0:00:00.00"``, ``"6:56:07.89"``)

This is a pure function: no side effects, no I/O, no clock.

CHANGELOG:
- 2026-10-19: Reject underscore digit separators in numeric replies
- 2026-10-19: Ordered uptime parse strategies
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Sequence

from txdash.src.models import (
    AlarmInfo,
    AudioInfo,
    Number,
    PowerRailInfo,
    RfInfo,
    Snapshot,
    SystemInfo,
    ThermalInfo,
)
from txdash.src.oids import ALARM_CODE_TEXT, ALL_OIDS, AUDIO_SOURCE_TEXT, POLL_OIDS, OidDef

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Scalar parsing
# ---------------------------------------------------------------------------


def _clean(raw: object) -> str:
    """Strip whitespace and one pair of surrounding double quotes."""
    s = str(raw).strip()
    if len(s) >= 2 and s.startswith('"') and s.endswith('"'):
        s = s[1:-1].strip()
    return s


def parse_number(raw: object) -> Number | None:
    """Parse a raw reply into an int or finite float.

    Integer text stays ``int`` so that enum codes and counters keep their
    exact value; anything else numeric becomes ``float``.

    Returns:
        The parsed number, or ``None`` for empty, non-numeric, or
        non-finite input.
    """
    if raw is None:
        return None
    s = _clean(raw)
    # Reject Python digit separators such as "1_000".
    if not s or "_" in s:
        return None
    try:
        return int(s)
    except ValueError:
        pass
    try:
        value = float(s)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _ticks_from_number(s: str) -> int | None:
    value = parse_number(s)
    if value is None:
        return None
    return int(value)


_PAREN_RE = re.compile(r"\((\d+)\)")


def _ticks_from_parenthesized(s: str) -> int | None:
    match = _PAREN_RE.search(s)
    return int(match.group(1)) if match else None


_CLOCK_RE = re.compile(
    r"^(?:(\d+)\s+days?,\s*)?(\d+):(\d+):(\d+)(?:\.(\d+))?$",
    re.IGNORECASE,
)


def _ticks_from_clock(s: str) -> int | None:
    match = _CLOCK_RE.match(s)
    if match is None:
        return None
    days, hours, minutes, seconds, frac = match.groups()
    # Fraction is hundredths: "7" -> 70, "891" -> 89.
    hundredths = int((frac or "0").ljust(2, "0")[:2])
    total_s = ((int(days or 0) * 24 + int(hours)) * 60 + int(minutes)) * 60 + int(seconds)
    return total_s * 100 + hundredths


_TICK_STRATEGIES: tuple[tuple[str, Callable[[str], int | None]], ...] = (
    ("number", _ticks_from_number),
    ("parenthesized", _ticks_from_parenthesized),
    ("clock", _ticks_from_clock),
)
"""Uptime parse strategies in priority order; the first non-None wins."""


def parse_time_ticks(raw: object) -> int | None:
    """Parse an uptime value into hundredths of a second.

    Returns:
        Tick count, or ``None`` if no strategy recognises the input.
    """
    if raw is None:
        return None
    s = _clean(raw)
    if not s:
        return None
    for _name, strategy in _TICK_STRATEGIES:
        ticks = strategy(s)
        if ticks is not None:
            return ticks
    return None


# ---------------------------------------------------------------------------
# Enum lookups
# ---------------------------------------------------------------------------


def _code_label(code: Number) -> str:
    return str(int(code)) if float(code).is_integer() else str(code)


def alarm_code_to_text(code: Number | None) -> str | None:
    """Map an alarm code to its description, ``None`` for a missing code."""
    if code is None:
        return None
    if float(code).is_integer() and int(code) in ALARM_CODE_TEXT:
        return ALARM_CODE_TEXT[int(code)]
    return f"Unknown alarm code ({_code_label(code)})"


def audio_source_to_text(source: Number | None) -> str | None:
    """Map an audio input selector to its description."""
    if source is None:
        return None
    if float(source).is_integer() and int(source) in AUDIO_SOURCE_TEXT:
        return AUDIO_SOURCE_TEXT[int(source)]
    return f"Unknown source ({_code_label(source)})"


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _scaled(raw: Number | None, oid_def: OidDef) -> float | None:
    """Apply the OID's divisor, propagating ``None``."""
    if raw is None:
        return None
    return raw / oid_def.divisor


def _number(raw_map: dict[str, str], name: str) -> Number | None:
    value = parse_number(raw_map.get(name))
    if value is None and name in raw_map:
        logger.debug("OID '%s': unparseable value %r", name, raw_map[name])
    return value


def _text(raw_map: dict[str, str], name: str) -> str:
    raw = raw_map.get(name)
    return "" if raw is None else _clean(raw)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(
    values: Sequence[str],
    entries: Sequence[OidDef] = POLL_OIDS,
) -> Snapshot:
    """Convert ordered raw SNMP replies into a Snapshot.

    This is a **pure function**: it performs no I/O and has no side
    effects.

    Args:
        values: Raw reply strings, aligned 1:1 with *entries*. A shorter
            list leaves the trailing fields ``None``.
        entries: OID definitions the values were requested for.

    Returns:
        A :class:`Snapshot` with every group present.
    """
    raw_map: dict[str, str] = {
        entry.name: value for entry, value in zip(entries, values, strict=False)
    }

    uptime_ticks = parse_time_ticks(raw_map.get("sys_uptime"))
    if uptime_ticks is None and "sys_uptime" in raw_map:
        logger.debug("OID 'sys_uptime': unparseable value %r", raw_map["sys_uptime"])

    frequency_khz = _number(raw_map, "frequency")
    forward_power = _number(raw_map, "forward_power")
    reflected_power = _number(raw_map, "reflected_power")
    internal_temp = _number(raw_map, "internal_temp")
    external_temp = _number(raw_map, "external_temp")
    exciter_voltage = _number(raw_map, "exciter_voltage")
    pa_voltage = _number(raw_map, "pa_voltage")
    pa2_voltage = _number(raw_map, "pa2_voltage")
    exciter_current = _number(raw_map, "exciter_current")
    pa_current = _number(raw_map, "pa_current")
    pa_connected = _number(raw_map, "pa_connected")
    alarm_code_now = _number(raw_map, "alarm_code_now")
    alarm_code_latched = _number(raw_map, "alarm_code_latched")
    input_source = _number(raw_map, "audio_input_source")

    return Snapshot(
        system=SystemInfo(
            descr=_text(raw_map, "sys_descr"),
            uptime_ticks=uptime_ticks,
            uptime_s=None if uptime_ticks is None else uptime_ticks // 100,
            name=_text(raw_map, "sys_name"),
            location=_text(raw_map, "sys_location"),
            device_object_id=_text(raw_map, "device_object_id"),
        ),
        rf=RfInfo(
            frequency_khz=frequency_khz,
            frequency_mhz=_scaled(frequency_khz, ALL_OIDS["frequency"]),
            forward_power_raw=forward_power,
            forward_power_w=_scaled(forward_power, ALL_OIDS["forward_power"]),
            reflected_power_raw=reflected_power,
            reflected_power_w=_scaled(reflected_power, ALL_OIDS["reflected_power"]),
            power_percent=_number(raw_map, "power_percent"),
        ),
        thermal=ThermalInfo(
            internal_temp_raw=internal_temp,
            internal_temp_c=_scaled(internal_temp, ALL_OIDS["internal_temp"]),
            external_temp_raw=external_temp,
            external_temp_c=_scaled(external_temp, ALL_OIDS["external_temp"]),
        ),
        alarms=AlarmInfo(
            alarm_bits=_number(raw_map, "alarm_bits"),
            pa_connected=None if pa_connected is None else pa_connected != 0,
            alarm_code_now=alarm_code_now,
            alarm_code_now_text=alarm_code_to_text(alarm_code_now),
            alarm_code_latched=alarm_code_latched,
            alarm_code_latched_text=alarm_code_to_text(alarm_code_latched),
        ),
        power_rail=PowerRailInfo(
            exciter_voltage_raw=exciter_voltage,
            exciter_voltage_v=_scaled(exciter_voltage, ALL_OIDS["exciter_voltage"]),
            pa_voltage_raw=pa_voltage,
            pa_voltage_v=_scaled(pa_voltage, ALL_OIDS["pa_voltage"]),
            pa2_voltage_raw=pa2_voltage,
            pa2_voltage_v=_scaled(pa2_voltage, ALL_OIDS["pa2_voltage"]),
            exciter_current_raw=exciter_current,
            exciter_current_a=_scaled(exciter_current, ALL_OIDS["exciter_current"]),
            pa_current_raw=pa_current,
            pa_current_a=_scaled(pa_current, ALL_OIDS["pa_current"]),
        ),
        audio=AudioInfo(
            input_source=input_source,
            input_source_text=audio_source_to_text(input_source),
            gain_db=_number(raw_map, "audio_gain"),
            level_left=_number(raw_map, "level_left"),
            level_right=_number(raw_map, "level_right"),
        ),
    )
