"""
SNMP query agent: batch GET and single integer SET against the transmitter.

The dashboard never speaks SNMP itself. It shells out to the Net-SNMP
command line tools (``snmpget`` / ``snmpset``) and treats them as a
request/response capability. Anything that implements :class:`QueryAgent`
can be substituted (tests use in-memory fakes).

Every call is bounded by a timeout. A timeout, a non-zero exit status, a
missing binary, or a reply with fewer values than requested all raise
:class:`AgentError`; callers treat that as a normal, recoverable failure.

CHANGELOG:
- 2026-10-19: Kill the child process on timeout
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

GET_TIMEOUT_S: float = 15.0
"""Default timeout for one ``snmpget`` invocation."""

SET_TIMEOUT_S: float = 10.0
"""Default timeout for one ``snmpset`` invocation."""


class AgentError(Exception):
    """Transport or format failure while talking to the SNMP agent."""


class QueryAgent(Protocol):
    """Request/response capability used by the acquisition pipeline."""

    async def batch_read(self, *, host: str, port: int, oids: Sequence[str]) -> list[str]:
        """Read *oids* in one request and return one raw value per OID."""
        ...

    async def write(self, *, host: str, port: int, oid: str, value: int) -> str:
        """Set *oid* to the integer *value* and return the agent's ack."""
        ...


# ---------------------------------------------------------------------------
# Net-SNMP command line implementation
# ---------------------------------------------------------------------------


class NetSnmpAgent:
    """QueryAgent backed by the Net-SNMP ``snmpget`` / ``snmpset`` tools.

    Uses SNMP v2c with MIB loading disabled and value-only output
    (``-Oqv -Ot``) so each reply line is exactly one raw value.

    Args:
        read_community: Community string for GET requests.
        write_community: Community string for SET requests.
        get_timeout_s: Timeout per ``snmpget`` invocation.
        set_timeout_s: Timeout per ``snmpset`` invocation.
        snmpget_bin: Path or name of the ``snmpget`` executable.
        snmpset_bin: Path or name of the ``snmpset`` executable.
    """

    def __init__(
        self,
        *,
        read_community: str = "public",
        write_community: str = "private",
        get_timeout_s: float = GET_TIMEOUT_S,
        set_timeout_s: float = SET_TIMEOUT_S,
        snmpget_bin: str = "snmpget",
        snmpset_bin: str = "snmpset",
    ) -> None:
        self._read_community = read_community
        self._write_community = write_community
        self._get_timeout_s = get_timeout_s
        self._set_timeout_s = set_timeout_s
        self._snmpget_bin = snmpget_bin
        self._snmpset_bin = snmpset_bin

    async def batch_read(self, *, host: str, port: int, oids: Sequence[str]) -> list[str]:
        """Run one ``snmpget`` for *oids* and return their raw values.

        Raises:
            AgentError: On timeout, tool failure, or a short reply.
        """
        if not oids:
            return []
        args = [
            "-m", "",
            "-v2c",
            "-c", self._read_community,
            "-Oqv",
            "-Ot",
            f"{host}:{port}",
            *oids,
        ]
        stdout = await self._run(self._snmpget_bin, args, timeout_s=self._get_timeout_s)
        values = [line.strip() for line in stdout.splitlines() if line.strip()]
        if len(values) < len(oids):
            raise AgentError(f"Expected {len(oids)} values, got {len(values)}")
        return values[: len(oids)]

    async def write(self, *, host: str, port: int, oid: str, value: int) -> str:
        """Run one ``snmpset`` of an INTEGER value.

        Raises:
            AgentError: On timeout or tool failure.
        """
        args = [
            "-m", "",
            "-v2c",
            "-c", self._write_community,
            f"{host}:{port}",
            oid,
            "i",
            str(int(value)),
        ]
        stdout = await self._run(self._snmpset_bin, args, timeout_s=self._set_timeout_s)
        return stdout.strip()

    async def _run(self, program: str, args: list[str], *, timeout_s: float) -> str:
        """Execute *program* and return its stdout.

        The child is killed when *timeout_s* elapses.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                program,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise AgentError(f"Cannot execute {program}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_s)
        except TimeoutError:
            proc.kill()
            await proc.wait()
            raise AgentError(f"{program} timed out after {timeout_s:g}s") from None

        if proc.returncode != 0:
            message = stderr.decode(errors="replace").strip()
            raise AgentError(message or f"{program} exited with status {proc.returncode}")

        return stdout.decode(errors="replace")
