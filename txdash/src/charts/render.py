"""
Matplotlib adapter that draws chart plans to PNG or SVG bytes.

The axes are set up in canvas pixel coordinates (origin top-left, Y down)
so the plan geometry is drawn as-is. Vertical gradient fills are images
clipped to the plan's polygons.

Only the Agg/SVG canvases are used; nothing here needs a display.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import io
from collections.abc import Sequence

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.figure import Figure
from matplotlib.patches import Polygon, Rectangle

from txdash.src.charts.level_chart import LevelChartPlan, plan_level_chart
from txdash.src.charts.line_chart import LineChartPlan, plan_line_chart
from txdash.src.charts.plan import XY, NoDataPlan, TextLabel
from txdash.src.models import HistoryPoint

DPI: int = 100
SUPPORTED_FORMATS = ("png", "svg")

RGBA = tuple[float, float, float, float]


def _rgba(r: int, g: int, b: int, a: float = 1.0) -> RGBA:
    return (r / 255, g / 255, b / 255, a)


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

TEXT_COLOR = _rgba(184, 202, 216)
FORWARD_COLOR = _rgba(57, 255, 159)
REFLECTED_COLOR = _rgba(255, 209, 102)
POWER_BACKGROUND = _rgba(255, 255, 255, 0.04)
POWER_GRID = _rgba(255, 255, 255, 0.16)
LEVEL_GRID = _rgba(139, 176, 210, 0.20)
LEVEL_BASELINE = _rgba(170, 205, 236, 0.70)
LEVEL_LABEL = _rgba(182, 207, 230)

FORWARD_FILL_STOPS: list[tuple[float, RGBA]] = [
    (0.0, _rgba(57, 255, 159, 0.25)),
    (1.0, _rgba(57, 255, 159, 0.01)),
]
LEVEL_BACKGROUND_STOPS: list[tuple[float, RGBA]] = [
    (0.0, _rgba(16, 33, 47)),
    (1.0, _rgba(12, 24, 36)),
]
LEFT_FILL_STOPS: list[tuple[float, RGBA]] = [
    (0.0, _rgba(128, 220, 255, 0.98)),
    (0.35, _rgba(74, 181, 236, 0.95)),
    (1.0, _rgba(26, 108, 171, 0.88)),
]
RIGHT_FILL_STOPS: list[tuple[float, RGBA]] = [
    (0.0, _rgba(26, 108, 171, 0.88)),
    (0.65, _rgba(74, 181, 236, 0.95)),
    (1.0, _rgba(128, 220, 255, 0.98)),
]

SERIES_COLORS: dict[str, RGBA] = {"forward": FORWARD_COLOR, "reflected": REFLECTED_COLOR}


# ---------------------------------------------------------------------------
# Drawing primitives
# ---------------------------------------------------------------------------


def _new_canvas(width: float, height: float):
    """Figure with one full-bleed axes in pixel coordinates."""
    fig = Figure(figsize=(width / DPI, height / DPI), dpi=DPI)
    fig.patch.set_alpha(0.0)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_axis_off()
    ax.set_autoscale_on(False)
    return fig, ax


def _gradient(ax, stops, *, x0: float, x1: float, y_top: float, y_bottom: float, clip=None) -> None:
    """Paint a top-to-bottom gradient over a box, optionally clipped."""
    cmap = LinearSegmentedColormap.from_list("gradient", stops)
    column = np.linspace(0.0, 1.0, 256).reshape(-1, 1)
    image = ax.imshow(
        column,
        cmap=cmap,
        aspect="auto",
        origin="upper",
        extent=(x0, x1, y_bottom, y_top),
        interpolation="bilinear",
        zorder=1,
    )
    if clip is not None:
        image.set_clip_path(clip)


def _hlines(ax, ys: Sequence[float], x0: float, x1: float, color: RGBA, width: float = 1.0) -> None:
    for y in ys:
        ax.plot([x0, x1], [y, y], color=color, linewidth=width, zorder=2)


def _polygon_patch(ax, vertices: Sequence[XY]) -> Polygon:
    patch = Polygon(vertices, closed=True, facecolor="none", edgecolor="none")
    ax.add_patch(patch)
    return patch


def _text(ax, label: TextLabel, color: RGBA, size: float = 9) -> None:
    ax.text(
        label.x,
        label.y,
        label.text,
        color=color,
        fontsize=size,
        ha=label.align,
        va="baseline",
        zorder=4,
    )


def _encode(fig: Figure, fmt: str) -> bytes:
    buf = io.BytesIO()
    FigureCanvasAgg(fig)
    fig.savefig(buf, format=fmt, dpi=DPI, transparent=True)
    return buf.getvalue()


def _check_format(fmt: str) -> str:
    fmt = fmt.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported chart format '{fmt}', expected one of {SUPPORTED_FORMATS}")
    return fmt


# ---------------------------------------------------------------------------
# Plan drawing
# ---------------------------------------------------------------------------


def draw_no_data(plan: NoDataPlan, fmt: str = "png") -> bytes:
    fig, ax = _new_canvas(plan.width, plan.height)
    ax.text(20, 30, plan.message, color=TEXT_COLOR, fontsize=10.5, va="baseline")
    return _encode(fig, fmt)


def draw_line_chart(plan: LineChartPlan, fmt: str = "png") -> bytes:
    """Draw a power chart plan."""
    area = plan.area
    fig, ax = _new_canvas(area.width, area.height)
    ax.add_patch(
        Rectangle((0, 0), area.width, area.height, facecolor=POWER_BACKGROUND, zorder=0)
    )
    _hlines(ax, plan.gridlines, area.left, area.right, POWER_GRID)

    for polygon in plan.fill_polygons:
        clip = _polygon_patch(ax, polygon)
        _gradient(
            ax,
            FORWARD_FILL_STOPS,
            x0=area.left,
            x1=area.right,
            y_top=area.top,
            y_bottom=area.bottom,
            clip=clip,
        )

    for series in plan.series:
        color = SERIES_COLORS.get(series.name, TEXT_COLOR)
        for segment in series.segments:
            xs, ys = zip(*segment, strict=True)
            ax.plot(xs, ys, color=color, linewidth=2, solid_joinstyle="round", zorder=3)

    for label in plan.labels:
        if label.role.startswith("legend:"):
            swatch = SERIES_COLORS.get(label.role.split(":", 1)[1], TEXT_COLOR)
            ax.add_patch(Rectangle((label.x - 16, label.y - 2), 10, 3, facecolor=swatch, zorder=4))
            _text(ax, TextLabel(label.text, label.x, label.y + 4), TEXT_COLOR)
        else:
            _text(ax, label, TEXT_COLOR)

    return _encode(fig, fmt)


def draw_level_chart(plan: LevelChartPlan, fmt: str = "png") -> bytes:
    """Draw a split level chart plan."""
    area = plan.area
    fig, ax = _new_canvas(area.width, area.height)
    _gradient(ax, LEVEL_BACKGROUND_STOPS, x0=0, x1=area.width, y_top=0, y_bottom=area.height)
    _hlines(ax, plan.gridlines, area.left, area.right, LEVEL_GRID)
    _hlines(ax, [plan.baseline_y], area.left, area.right, LEVEL_BASELINE, width=1.5)

    for channel in plan.channels:
        if channel.direction == "up":
            stops, y_top, y_bottom = LEFT_FILL_STOPS, area.top, plan.baseline_y
        else:
            stops, y_top, y_bottom = RIGHT_FILL_STOPS, plan.baseline_y, area.bottom
        for polygon in channel.polygons:
            clip = _polygon_patch(ax, polygon)
            _gradient(ax, stops, x0=area.left, x1=area.right, y_top=y_top, y_bottom=y_bottom, clip=clip)

    for label in plan.labels:
        color = LEVEL_LABEL if label.x < area.left else TEXT_COLOR
        _text(ax, label, color)

    return _encode(fig, fmt)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_line_chart(
    points: Sequence[HistoryPoint],
    *,
    width: int = 900,
    height: int = 260,
    fmt: str = "png",
) -> bytes:
    """Render the forward/reflected power chart for *points*.

    Raises:
        ValueError: If *fmt* is not ``"png"`` or ``"svg"``.
    """
    fmt = _check_format(fmt)
    plan = plan_line_chart(points, width=width, height=height)
    if isinstance(plan, NoDataPlan):
        return draw_no_data(plan, fmt)
    return draw_line_chart(plan, fmt)


def render_level_chart(
    points: Sequence[HistoryPoint],
    *,
    width: int = 900,
    height: int = 220,
    fmt: str = "png",
) -> bytes:
    """Render the split left/right level chart for *points*.

    Raises:
        ValueError: If *fmt* is not ``"png"`` or ``"svg"``.
    """
    fmt = _check_format(fmt)
    plan = plan_level_chart(points, width=width, height=height)
    if isinstance(plan, NoDataPlan):
        return draw_no_data(plan, fmt)
    return draw_level_chart(plan, fmt)
