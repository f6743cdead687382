"""
Tests for the chunked batch reader.

Verifies chunk sizes, strict ordering of requests and results, and the
all-or-nothing failure behaviour.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest
from txdash.src.agent import AgentError
from txdash.src.poller import iter_chunks, read_chunked

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _EchoAgent:
    """Answers each OID with ``"v:<oid>"``; optionally fails on one call."""

    def __init__(self, *, fail_on_call: int | None = None, short_on_call: int | None = None):
        self.calls: list[list[str]] = []
        self._fail_on_call = fail_on_call
        self._short_on_call = short_on_call

    async def batch_read(self, *, host: str, port: int, oids: Sequence[str]) -> list[str]:
        self.calls.append(list(oids))
        idx = len(self.calls) - 1
        if idx == self._fail_on_call:
            raise AgentError("Timeout: No Response")
        reply = [f"v:{oid}" for oid in oids]
        if idx == self._short_on_call:
            return reply[:-1]
        return reply

    async def write(self, *, host: str, port: int, oid: str, value: int) -> str:
        raise NotImplementedError


def _oids(n: int) -> list[str]:
    return [f"1.3.6.1.4.1.65081.1.9.{i}.0" for i in range(n)]


# ===========================================================================
# iter_chunks
# ===========================================================================


class TestIterChunks:
    """Consecutive slices with at most *size* elements."""

    @pytest.mark.parametrize("n", [0, 1, 4, 5, 6, 10, 11, 20, 23])
    @pytest.mark.parametrize("size", [1, 3, 5])
    def test_chunk_property(self, n: int, size: int) -> None:
        items = list(range(n))
        chunks = list(iter_chunks(items, size))
        assert [x for c in chunks for x in c] == items
        assert all(1 <= len(c) <= size for c in chunks)
        assert len(chunks) == -(-n // size)

    def test_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="chunk size"):
            list(iter_chunks([1, 2], 0))


# ===========================================================================
# read_chunked
# ===========================================================================


class TestReadChunked:
    """Ordered chunked reads, aligned 1:1 with the input."""

    @pytest.mark.asyncio
    async def test_twenty_oids_four_requests(self) -> None:
        agent = _EchoAgent()
        oids = _oids(20)

        values = await read_chunked(agent, host="10.0.0.1", port=161, oids=oids)

        assert [len(c) for c in agent.calls] == [5, 5, 5, 5]
        assert values == [f"v:{o}" for o in oids]

    @pytest.mark.asyncio
    async def test_requests_issued_in_input_order(self) -> None:
        agent = _EchoAgent()
        oids = _oids(12)

        await read_chunked(agent, host="h", port=161, oids=oids, max_per_request=5)

        assert agent.calls == [oids[0:5], oids[5:10], oids[10:12]]

    @pytest.mark.asyncio
    async def test_empty_input_makes_no_request(self) -> None:
        agent = _EchoAgent()
        assert await read_chunked(agent, host="h", port=161, oids=[]) == []
        assert agent.calls == []

    @pytest.mark.asyncio
    async def test_failure_discards_partial_results(self) -> None:
        agent = _EchoAgent(fail_on_call=2)

        with pytest.raises(AgentError, match="Timeout"):
            await read_chunked(agent, host="h", port=161, oids=_oids(20))

        # Chunks after the failing one are never requested.
        assert len(agent.calls) == 3

    @pytest.mark.asyncio
    async def test_short_reply_is_an_error(self) -> None:
        agent = _EchoAgent(short_on_call=1)

        with pytest.raises(AgentError, match="Expected 5 values, got 4"):
            await read_chunked(agent, host="h", port=161, oids=_oids(10))

    @pytest.mark.asyncio
    async def test_long_reply_is_truncated(self) -> None:
        class _Chatty(_EchoAgent):
            async def batch_read(self, *, host, port, oids):  # type: ignore[override]
                return [*await super().batch_read(host=host, port=port, oids=oids), "extra"]

        values = await read_chunked(_Chatty(), host="h", port=161, oids=_oids(7))
        assert len(values) == 7
        assert "extra" not in values

    @pytest.mark.asyncio
    async def test_invalid_chunk_size(self) -> None:
        with pytest.raises(ValueError):
            await read_chunked(_EchoAgent(), host="h", port=161, oids=_oids(3), max_per_request=0)
