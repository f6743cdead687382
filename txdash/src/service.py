"""
Polling service: poll cycle, scheduler, and the read model for one device.

One :class:`PollingService` instance owns everything that changes while the
dashboard runs for a single transmitter: the current :class:`PollConfig`,
the last decoded :class:`Snapshot`, the :class:`HistoryStore`, and the
timer task that drives poll cycles.

Scheduling model:

- ``start()`` cancels any previous timer, optionally clears the history,
  runs one cycle immediately, then repeats at a fixed rate of
  ``clamp(poll_interval_s, 5, 10000)`` seconds. Ticks missed because a cycle
  overran are skipped, not queued.
- ``stop()`` cancels the timer. Both are idempotent.
- A failed cycle records ``last_error`` and keeps the previous snapshot. It
  never stops the timer.

Overlap policy: cycles are serialized with an ``asyncio.Lock``. The agent
request is the only awaited step; all state updates happen afterwards in a
single synchronous block, so a reader never observes a half-applied cycle.
Cancelling the timer does not cancel a cycle that is already in flight (it
is shielded); that cycle finishes and applies its result before any cycle
started later can run. ``close()`` returns only after it has applied.

CHANGELOG:
- 2026-10-19: close() waits for the in-flight cycle
- 2026-10-19: Serialize cycles and shield in-flight cycles from stop()
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from txdash.src.history import HistoryStore
from txdash.src.models import (
    MAX_POLL_INTERVAL_S,
    MIN_POLL_INTERVAL_S,
    HistoryPoint,
    PollConfig,
    PollState,
    StateView,
)
from txdash.src.normalizer import normalize
from txdash.src.oids import ALARM_CODE_LATCHED, MAX_OIDS_PER_REQUEST, POLL_OIDS
from txdash.src.poller import read_chunked

if TYPE_CHECKING:
    from txdash.src.agent import QueryAgent

logger = logging.getLogger(__name__)

READ_OIDS: list[str] = [o.oid for o in POLL_OIDS]


def _now_ms() -> int:
    return int(time.time() * 1000)


def clamp_interval(seconds: float) -> float:
    """Clamp a poll interval to the supported range."""
    return max(MIN_POLL_INTERVAL_S, min(MAX_POLL_INTERVAL_S, float(seconds)))


class PollingService:
    """Owns polling state for one transmitter.

    Args:
        agent: Query agent used for reads and the alarm reset write.
        config: Initial target; used until the first ``start()``.
        history: History store; a fresh bounded store by default.
        clock_ms: Wall clock returning epoch milliseconds.
        max_per_request: OIDs per SNMP request.
    """

    def __init__(
        self,
        *,
        agent: QueryAgent,
        config: PollConfig,
        history: HistoryStore | None = None,
        clock_ms: Callable[[], int] = _now_ms,
        max_per_request: int = MAX_OIDS_PER_REQUEST,
    ) -> None:
        self._agent = agent
        self._history = history if history is not None else HistoryStore()
        self._clock_ms = clock_ms
        self._max_per_request = max_per_request
        self._state = PollState(config=config)
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self._inflight: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------

    @property
    def config(self) -> PollConfig:
        return self._state.config

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def history(self) -> HistoryStore:
        return self._history

    def get_state(self) -> StateView:
        """Return a copy of the poll state together with the history."""
        return StateView(**dict(self._state), history=self._history.snapshot())

    # ------------------------------------------------------------------
    # Poll cycle
    # ------------------------------------------------------------------

    async def poll_once(self) -> bool:
        """Run one poll cycle against the current config.

        Returns:
            True if the device was read and decoded, False otherwise.
        """
        async with self._lock:
            return await self._cycle(self._state.config)

    async def _cycle(self, config: PollConfig) -> bool:
        """Read, decode, and apply one cycle. Caller holds the lock."""
        try:
            values = await read_chunked(
                self._agent,
                host=config.host,
                port=config.port,
                oids=READ_OIDS,
                max_per_request=self._max_per_request,
            )
        except Exception as exc:
            error = str(exc) or type(exc).__name__
            self._state = self._state.model_copy(
                update={"last_error": error, "last_poll_ms": self._clock_ms()}
            )
            logger.warning("Poll of %s:%d failed: %s", config.host, config.port, error)
            return False

        snapshot = normalize(values, POLL_OIDS)
        ts_ms = self._clock_ms()
        last = self._history.last_ts_ms
        if last is not None and ts_ms < last:
            ts_ms = last

        point = HistoryPoint.from_snapshot(snapshot, ts_ms=ts_ms)
        if point is not None:
            self._history.append(point)
        self._state = self._state.model_copy(
            update={"snapshot": snapshot, "last_error": None, "last_poll_ms": ts_ms}
        )
        logger.debug("Poll of %s:%d succeeded", config.host, config.port)
        return True

    # ------------------------------------------------------------------
    # Scheduler
    # ------------------------------------------------------------------

    def start(self, config: PollConfig, *, reset_history: bool = False) -> None:
        """Start (or restart) polling *config*.

        Must be called from within the running event loop.
        """
        self._cancel_timer()
        self._state = self._state.model_copy(update={"config": config, "running": True})
        self._task = asyncio.get_running_loop().create_task(
            self._run(config, reset_history=reset_history),
            name=f"poll-{config.host}:{config.port}",
        )
        logger.info(
            "Polling started: host=%s port=%d interval=%ss reset_history=%s",
            config.host,
            config.port,
            clamp_interval(config.poll_interval_s),
            reset_history,
        )

    def stop(self) -> None:
        """Stop scheduling new cycles. Idempotent."""
        was_running = self._state.running
        self._cancel_timer()
        self._state = self._state.model_copy(update={"running": False})
        if was_running:
            logger.info("Polling stopped")

    async def close(self) -> None:
        """Stop polling and wait for the timer and any in-flight cycle."""
        task = self._task
        self.stop()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        inflight = self._inflight
        if inflight is not None:
            await inflight
            self._inflight = None

    def _cancel_timer(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _tick(self, config: PollConfig, *, reset_history: bool) -> None:
        async with self._lock:
            if reset_history:
                self._history.clear()
                logger.info("History cleared")
            await self._cycle(config)

    async def _run(self, config: PollConfig, *, reset_history: bool) -> None:
        """Timer body: immediate cycle, then fixed-rate repeats."""
        loop = asyncio.get_running_loop()
        interval = clamp_interval(config.poll_interval_s)
        next_tick = loop.time()
        first = True

        while True:
            tick = loop.create_task(
                self._tick(config, reset_history=reset_history and first),
                name=f"cycle-{config.host}:{config.port}",
            )
            self._inflight = tick
            await asyncio.shield(tick)
            first = False

            next_tick += interval
            now = loop.time()
            if next_tick <= now:
                skipped = int((now - next_tick) // interval) + 1
                next_tick += skipped * interval
                logger.warning("Poll cycle overran; skipped %d tick(s)", skipped)
            await asyncio.sleep(next_tick - now)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def reset_latched_alarm(self) -> bool:
        """Clear the latched alarm code, then refresh immediately.

        Returns:
            Outcome of the refresh cycle (True if it succeeded).

        Raises:
            AgentError: If the write fails. Polling state is untouched.
        """
        config = self._state.config
        await self._agent.write(
            host=config.host, port=config.port, oid=ALARM_CODE_LATCHED.oid, value=0
        )
        logger.info("Latched alarm reset on %s:%d", config.host, config.port)
        return await self.poll_once()
