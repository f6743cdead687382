"""
Forward/reflected power line chart planner.

Builds a :class:`LineChartPlan` (pure geometry) from history points:

- Y range autoscaled over the finite values of both series. A span below
  0.2 W is widened by 0.5 W on each side; otherwise 10 % padding is added
  above and below, with the lower bound floored at zero.
- X maps timestamps linearly from the first to the last point.
- Each series is split into polylines at every missing value. Segments with
  fewer than two points are dropped.
- The forward series also gets one filled area down to the plot bottom,
  traced through every finite forward sample so that it bridges gaps.

Returns a :class:`~txdash.src.charts.plan.NoDataPlan` when there is
nothing meaningful to draw.

CHANGELOG:
- 2026-10-19: Forward fill bridges gaps (one polygon through all finite samples)
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from txdash.src.charts.plan import (
    XY,
    NoDataPlan,
    PlotArea,
    TextLabel,
    finite,
    time_labels,
    time_scale,
)
from txdash.src.models import HistoryPoint

MIN_Y_SPAN: float = 0.2
"""Below this span the Y range is widened instead of padded."""

FLAT_WIDEN: float = 0.5
"""Amount added above and below a flat Y range."""

Y_PAD_RATIO: float = 0.1


@dataclass(frozen=True, slots=True)
class Series:
    """One named series split into drawable polylines."""

    name: str
    label: str
    segments: list[list[XY]]


@dataclass(frozen=True, slots=True)
class LineChartPlan:
    """Geometry of the power chart in canvas pixels."""

    area: PlotArea
    y_min: float
    y_max: float
    first_ts: float
    last_ts: float
    gridlines: list[float]
    series: list[Series]
    fill_polygons: list[list[XY]]
    labels: list[TextLabel] = field(default_factory=list)


def y_range(values: Sequence[float]) -> tuple[float, float]:
    """Autoscaled ``(y_min, y_max)`` for non-empty finite *values*."""
    lo = min(values)
    hi = max(values)
    if abs(hi - lo) < MIN_Y_SPAN:
        return lo - FLAT_WIDEN, hi + FLAT_WIDEN
    pad = (hi - lo) * Y_PAD_RATIO
    return max(0.0, lo - pad), hi + pad


def split_segments(
    samples: Sequence[tuple[float, float | None]],
    to_x: Callable[[float], float],
    to_y: Callable[[float], float],
) -> list[list[XY]]:
    """Split ``(ts, value)`` samples into polylines at missing values.

    Segments shorter than two points are discarded.
    """
    segments: list[list[XY]] = []
    current: list[XY] = []
    for ts, value in samples:
        if value is None:
            if len(current) >= 2:
                segments.append(current)
            current = []
            continue
        current.append((to_x(ts), to_y(value)))
    if len(current) >= 2:
        segments.append(current)
    return segments


def forward_fill(
    samples: Sequence[tuple[float, float | None]],
    to_x: Callable[[float], float],
    to_y: Callable[[float], float],
    bottom: float,
) -> list[list[XY]]:
    """Fill polygon through every present sample, closed down to *bottom*.

    Missing values are skipped rather than breaking the outline. Returns an
    empty list when fewer than two samples are present.
    """
    outline = [(to_x(ts), to_y(value)) for ts, value in samples if value is not None]
    if len(outline) < 2:
        return []
    return [[*outline, (outline[-1][0], bottom), (outline[0][0], bottom)]]


def plan_line_chart(
    points: Sequence[HistoryPoint],
    *,
    width: float,
    height: float,
) -> LineChartPlan | NoDataPlan:
    """Compute the power chart geometry for *points*."""
    rows = []
    for p in points:
        ts = finite(p.ts_ms)
        if ts is None:
            continue
        rows.append((ts, finite(p.forward_power_w), finite(p.reflected_power_w)))

    if len(rows) < 2:
        return NoDataPlan(width, height)

    values = [v for _, fwd, ref in rows for v in (fwd, ref) if v is not None]
    if not values:
        return NoDataPlan(width, height)

    area = PlotArea(width, height)
    y_min, y_max = y_range(values)
    first_ts = rows[0][0]
    last_ts = rows[-1][0]
    to_x = time_scale(first_ts, last_ts, area)

    def to_y(value: float) -> float:
        return area.top + (y_max - value) / (y_max - y_min) * area.plot_height

    forward = split_segments([(ts, fwd) for ts, fwd, _ in rows], to_x, to_y)
    reflected = split_segments([(ts, ref) for ts, _, ref in rows], to_x, to_y)

    fills = forward_fill([(ts, fwd) for ts, fwd, _ in rows], to_x, to_y, area.bottom)

    labels = [
        TextLabel(f"{y_max:.1f} W", 8, area.top + 4),
        TextLabel(f"{y_min:.1f} W", 8, area.bottom),
        TextLabel("Forward", width - 204, 16, role="legend:forward"),
        TextLabel("Reflected", width - 114, 16, role="legend:reflected"),
        *time_labels(first_ts, last_ts, area),
    ]

    return LineChartPlan(
        area=area,
        y_min=y_min,
        y_max=y_max,
        first_ts=first_ts,
        last_ts=last_ts,
        gridlines=area.gridlines(),
        series=[
            Series("forward", "Forward", forward),
            Series("reflected", "Reflected", reflected),
        ],
        fill_polygons=fills,
        labels=labels,
    )
