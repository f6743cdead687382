"""
Chunked SNMP batch reader.

Splits an ordered OID list into consecutive chunks of at most
``max_per_request`` OIDs, issues one agent request per chunk strictly in
input order, and concatenates the replies so that the output is aligned 1:1
with the input.

The operation is all-or-nothing: if any chunk fails (transport error,
timeout, short reply) the partial results are discarded and
:class:`~txdash.src.agent.AgentError` propagates to the caller.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, TypeVar

from txdash.src.agent import AgentError
from txdash.src.oids import MAX_OIDS_PER_REQUEST

if TYPE_CHECKING:
    from txdash.src.agent import QueryAgent

logger = logging.getLogger(__name__)

T = TypeVar("T")


def iter_chunks(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of *items* with at most *size* elements.

    Raises:
        ValueError: If *size* is less than 1.
    """
    if size < 1:
        raise ValueError(f"chunk size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


async def read_chunked(
    agent: QueryAgent,
    *,
    host: str,
    port: int,
    oids: Sequence[str],
    max_per_request: int = MAX_OIDS_PER_REQUEST,
) -> list[str]:
    """Read *oids* in order-preserving chunks.

    Args:
        agent: The query agent used for each chunk request.
        host: Transmitter address.
        port: SNMP port.
        oids: OIDs to read; order is significant.
        max_per_request: Maximum OIDs per agent request.

    Returns:
        One raw value per input OID, in input order.

    Raises:
        AgentError: If any chunk fails or returns fewer values than asked.
        ValueError: If *max_per_request* is less than 1.
    """
    chunks = list(iter_chunks(oids, max_per_request))
    values: list[str] = []

    for idx, chunk in enumerate(chunks):
        reply = await agent.batch_read(host=host, port=port, oids=list(chunk))
        if len(reply) < len(chunk):
            raise AgentError(f"Expected {len(chunk)} values, got {len(reply)}")
        values.extend(reply[: len(chunk)])
        logger.debug(
            "Chunk %d/%d read from %s:%d (%d OIDs)",
            idx + 1,
            len(chunks),
            host,
            port,
            len(chunk),
        )

    return values
