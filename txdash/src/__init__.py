"""
Transmitter telemetry dashboard package.

Polls a PCS Electronics FM transmitter over SNMP, normalizes the raw OID
values into engineering units, keeps a bounded rolling history in memory,
and renders that history as power and audio level charts served over HTTP.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""
