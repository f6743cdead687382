"""
Shared geometry types for chart plans.

A chart plan is plain data in canvas pixel coordinates (origin top-left, Y
growing downwards): gridlines, polylines, polygons, and text labels. The
planners compute plans from history; the renderer only draws them.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

XY = tuple[float, float]

NO_DATA_MESSAGE = "No history yet"


@dataclass(frozen=True, slots=True)
class Padding:
    """Margins between the canvas edge and the plot area, in pixels."""

    left: float = 55
    right: float = 16
    top: float = 16
    bottom: float = 28


DEFAULT_PADDING = Padding()


@dataclass(frozen=True, slots=True)
class PlotArea:
    """Canvas size and the plot rectangle inside it."""

    width: float
    height: float
    padding: Padding = DEFAULT_PADDING

    @property
    def left(self) -> float:
        return self.padding.left

    @property
    def right(self) -> float:
        return self.width - self.padding.right

    @property
    def top(self) -> float:
        return self.padding.top

    @property
    def bottom(self) -> float:
        return self.height - self.padding.bottom

    @property
    def plot_width(self) -> float:
        return self.width - self.padding.left - self.padding.right

    @property
    def plot_height(self) -> float:
        return self.height - self.padding.top - self.padding.bottom

    def gridlines(self, intervals: int = 4) -> list[float]:
        """Y coordinates of horizontal gridlines splitting the plot evenly."""
        return [self.top + self.plot_height * i / intervals for i in range(intervals + 1)]


@dataclass(frozen=True, slots=True)
class TextLabel:
    """A text item anchored at (x, y).

    Attributes:
        text: Label text.
        x: Anchor X in pixels.
        y: Text baseline Y in pixels.
        align: ``"left"`` or ``"right"`` horizontal alignment.
        role: Style key used by the renderer (e.g. ``"axis"``).
    """

    text: str
    x: float
    y: float
    align: str = "left"
    role: str = "axis"


@dataclass(frozen=True, slots=True)
class NoDataPlan:
    """Placeholder frame: a single message, no axes."""

    width: float
    height: float
    message: str = NO_DATA_MESSAGE


def finite(value: object) -> float | None:
    """Return *value* as a float if it is a finite number, else ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def time_scale(first_ts: float, last_ts: float, area: PlotArea) -> Callable[[float], float]:
    """Linear timestamp -> X mapping over the plot width.

    A zero or negative span is treated as one millisecond.
    """
    span = max(1.0, last_ts - first_ts)

    def to_x(ts: float) -> float:
        return area.left + (ts - first_ts) / span * area.plot_width

    return to_x


def format_time(ts_ms: float) -> str:
    """Format an epoch-millisecond timestamp as local ``HH:MM:SS``."""
    return datetime.fromtimestamp(ts_ms / 1000).strftime("%H:%M:%S")


def time_labels(first_ts: float, last_ts: float, area: PlotArea) -> list[TextLabel]:
    """Start and end time labels under the plot."""
    y = area.height - 8
    return [
        TextLabel(format_time(first_ts), area.left, y),
        TextLabel(format_time(last_ts), area.right, y, align="right"),
    ]
