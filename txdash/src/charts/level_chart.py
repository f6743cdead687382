"""
Split left/right audio level chart planner.

The plot is split by a horizontal zero baseline. The left channel grows
upwards from it and the right channel downwards, each scaled so that 255
reaches the edge of its half.

Each sample owns a contiguous horizontal block. Block boundaries sit at the
rounded midpoint between neighbouring sample X coordinates, except the
outermost ones, which are the plot edges. Within a run of consecutive
non-null samples the height at an interior boundary is the mean of the two
adjacent samples, while the run's two end boundaries take the adjacent
sample's own height. A null sample ends the run, so the fill drops back to
the baseline and the gap stays empty.

CHANGELOG:
- 2026-10-19: Round boundary midpoints and levels half up
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import math
from collections.abc import Sequence
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

LEVEL_MAX: int = 255


@dataclass(frozen=True, slots=True)
class Channel:
    """Filled polygons for one channel.

    Attributes:
        name: ``"left"`` or ``"right"``.
        direction: ``"up"`` (above the baseline) or ``"down"``.
        polygons: One closed polygon per run of non-null samples.
    """

    name: str
    direction: str
    polygons: list[list[XY]]


@dataclass(frozen=True, slots=True)
class LevelChartPlan:
    """Geometry of the split level chart in canvas pixels."""

    area: PlotArea
    baseline_y: float
    half_height: float
    first_ts: float
    last_ts: float
    boundaries: list[float]
    gridlines: list[float]
    channels: list[Channel]
    labels: list[TextLabel] = field(default_factory=list)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return math.floor(value + 0.5)


def clamp_level(value: float) -> int:
    """Round a level reading and clamp it to 0..255."""
    return max(0, min(LEVEL_MAX, round_half_up(value)))


def block_boundaries(xs: Sequence[float], left: float, right: float) -> list[float]:
    """Boundaries between per-sample blocks.

    Returns ``len(xs) + 1`` values: *left*, the rounded midpoints between
    consecutive X coordinates, then *right*.
    """
    inner = [round_half_up((xs[i - 1] + xs[i]) / 2) for i in range(1, len(xs))]
    return [left, *inner, right]


def run_heights(levels: Sequence[int], half_height: float) -> list[float]:
    """Heights at the ``len(levels) + 1`` boundaries of one run.

    End boundaries use the neighbouring sample exactly; interior boundaries
    average the two samples they separate.
    """
    scaled = [lvl / LEVEL_MAX * half_height for lvl in levels]
    interior = [(scaled[i - 1] + scaled[i]) / 2 for i in range(1, len(scaled))]
    return [scaled[0], *interior, scaled[-1]]


def channel_polygons(
    levels: Sequence[int | None],
    boundaries: Sequence[float],
    *,
    baseline_y: float,
    half_height: float,
    direction: str,
) -> list[list[XY]]:
    """Closed polygons for every maximal run of non-null *levels*."""
    sign = -1 if direction == "up" else 1
    polygons: list[list[XY]] = []
    start: int | None = None

    for i in range(len(levels) + 1):
        valid = i < len(levels) and levels[i] is not None
        if valid and start is None:
            start = i
        if not valid and start is not None:
            run = [lvl for lvl in levels[start:i] if lvl is not None]
            heights = run_heights(run, half_height)
            edge = [
                (boundaries[start + k], baseline_y + sign * h)
                for k, h in enumerate(heights)
            ]
            polygons.append(
                [(boundaries[start], baseline_y), *edge, (boundaries[i], baseline_y)]
            )
            start = None

    return polygons


def plan_level_chart(
    points: Sequence[HistoryPoint],
    *,
    width: float,
    height: float,
) -> LevelChartPlan | NoDataPlan:
    """Compute the split level chart geometry for *points*."""
    rows = []
    for p in points:
        ts = finite(p.ts_ms)
        if ts is None:
            continue
        rows.append((ts, finite(p.level_left), finite(p.level_right)))

    if len(rows) < 2:
        return NoDataPlan(width, height)
    if sum(1 for _, left, right in rows if left is not None or right is not None) < 2:
        return NoDataPlan(width, height)

    area = PlotArea(width, height)
    half_height = area.plot_height / 2
    baseline_y = area.top + half_height
    first_ts = rows[0][0]
    last_ts = rows[-1][0]
    to_x = time_scale(first_ts, last_ts, area)

    boundaries = block_boundaries([to_x(ts) for ts, _, _ in rows], area.left, area.right)
    left = [None if v is None else clamp_level(v) for _, v, _ in rows]
    right = [None if v is None else clamp_level(v) for _, _, v in rows]

    labels = [
        TextLabel("Left", 12, area.top + 4),
        TextLabel("0", 20, baseline_y + 4),
        TextLabel("Right", 12, area.bottom),
        *time_labels(first_ts, last_ts, area),
    ]

    return LevelChartPlan(
        area=area,
        baseline_y=baseline_y,
        half_height=half_height,
        first_ts=first_ts,
        last_ts=last_ts,
        boundaries=boundaries,
        gridlines=area.gridlines(),
        channels=[
            Channel(
                "left",
                "up",
                channel_polygons(
                    left, boundaries, baseline_y=baseline_y, half_height=half_height, direction="up"
                ),
            ),
            Channel(
                "right",
                "down",
                channel_polygons(
                    right, boundaries, baseline_y=baseline_y, half_height=half_height, direction="down"
                ),
            ),
        ],
        labels=labels,
    )
