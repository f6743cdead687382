"""
Bounded in-memory history of chart samples.

Append-only FIFO with a fixed capacity. Appending beyond capacity evicts
from the oldest end. Readers get a copied list so they never alias the
store's internal state. Nothing here survives a restart.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from collections import deque

from txdash.src.models import HistoryPoint

HISTORY_CAPACITY: int = 1000
"""Maximum number of points retained."""


class HistoryStore:
    """Bounded, ordered sequence of :class:`HistoryPoint`.

    Timestamps must be non-decreasing; the single producer (the poll cycle)
    guarantees this and :meth:`append` enforces it.

    Args:
        capacity: Maximum number of retained points.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._points: deque[HistoryPoint] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen or 0

    def __len__(self) -> int:
        return len(self._points)

    @property
    def last_ts_ms(self) -> int | None:
        """Timestamp of the newest point, or ``None`` when empty."""
        return self._points[-1].ts_ms if self._points else None

    def append(self, point: HistoryPoint) -> None:
        """Add *point* at the newest end, evicting the oldest if full.

        Raises:
            ValueError: If *point* is older than the newest stored point.
        """
        last = self.last_ts_ms
        if last is not None and point.ts_ms < last:
            raise ValueError(
                f"history point at {point.ts_ms} is older than newest point at {last}"
            )
        self._points.append(point)

    def clear(self) -> None:
        """Drop every point."""
        self._points.clear()

    def snapshot(self) -> list[HistoryPoint]:
        """Return the points oldest-first as a new list."""
        return list(self._points)
