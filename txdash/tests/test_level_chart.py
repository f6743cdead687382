"""
Tests for the split audio level chart planner.

On a 900x220 canvas the plot spans x 55..884 and y 16..192, so the
baseline sits at y=104 and each half is 88 px tall.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import pytest
from txdash.src.charts.level_chart import (
    LevelChartPlan,
    block_boundaries,
    clamp_level,
    plan_level_chart,
    round_half_up,
    run_heights,
)
from txdash.src.charts.plan import NoDataPlan
from txdash.src.models import HistoryPoint

WIDTH = 900
HEIGHT = 220
BASELINE = 104
HALF = 88


def _points(
    left: list[float | None], right: list[float | None] | None = None
) -> list[HistoryPoint]:
    right = right if right is not None else [None] * len(left)
    return [
        HistoryPoint(ts_ms=1_000 * i, level_left=lv, level_right=rv)
        for i, (lv, rv) in enumerate(zip(left, right, strict=True))
    ]


def _plan(points: list[HistoryPoint]) -> LevelChartPlan:
    plan = plan_level_chart(points, width=WIDTH, height=HEIGHT)
    assert isinstance(plan, LevelChartPlan)
    return plan


def _h(level: float) -> float:
    return level / 255 * HALF


class TestNoData:
    """Fewer than two usable samples yields the placeholder."""

    def test_empty(self) -> None:
        assert isinstance(plan_level_chart([], width=WIDTH, height=HEIGHT), NoDataPlan)

    def test_single_point(self) -> None:
        assert isinstance(plan_level_chart(_points([10]), width=WIDTH, height=HEIGHT), NoDataPlan)

    def test_only_one_point_with_levels(self) -> None:
        points = _points([None, 10, None])
        assert isinstance(plan_level_chart(points, width=WIDTH, height=HEIGHT), NoDataPlan)


class TestHelpers:
    """Clamping, boundaries, and run heights."""

    @pytest.mark.parametrize(
        ("raw", "level"),
        [(-5, 0), (0, 0), (126.5, 127), (127.5, 128), (127.6, 128), (255, 255), (300, 255)],
    )
    def test_clamp_level(self, raw: float, level: int) -> None:
        assert clamp_level(raw) == level

    def test_block_boundaries(self) -> None:
        assert block_boundaries([55, 469.5, 884], 55, 884) == [55, 262, 677, 884]

    def test_half_midpoints_round_up(self) -> None:
        assert block_boundaries([100, 101, 200, 201], 55, 884) == [55, 101, 151, 201, 884]

    @pytest.mark.parametrize(("value", "expected"), [(0.5, 1), (2.5, 3), (101.5, 102), (-0.5, 0)])
    def test_round_half_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected

    def test_single_sample_boundaries(self) -> None:
        assert block_boundaries([100], 55, 884) == [55, 884]

    def test_run_heights(self) -> None:
        heights = run_heights([100, 200, 100], HALF)
        assert heights == pytest.approx([_h(100), _h(150), _h(150), _h(100)])


class TestGeometry:
    """Baseline, directions, and per-run polygons."""

    def test_layout(self) -> None:
        plan = _plan(_points([100, 200, 100]))
        assert plan.baseline_y == BASELINE
        assert plan.half_height == HALF
        assert plan.boundaries == [55, 262, 677, 884]
        assert len(plan.gridlines) == 5

    def test_left_polygon_grows_up(self) -> None:
        plan = _plan(_points([100, 200, 100]))
        left = plan.channels[0]
        assert (left.name, left.direction) == ("left", "up")

        (polygon,) = left.polygons
        assert polygon[0] == (55, BASELINE)
        assert polygon[-1] == (884, BASELINE)
        edge = polygon[1:-1]
        assert [x for x, _ in edge] == [55, 262, 677, 884]
        assert [y for _, y in edge] == pytest.approx(
            [BASELINE - _h(100), BASELINE - _h(150), BASELINE - _h(150), BASELINE - _h(100)]
        )

    def test_right_polygon_grows_down(self) -> None:
        plan = _plan(_points([0, 0], [255, 255]))
        right = plan.channels[1]
        assert right.direction == "down"
        (polygon,) = right.polygons
        assert [y for _, y in polygon[1:-1]] == pytest.approx([192, 192, 192])

    def test_full_scale_reaches_top(self) -> None:
        plan = _plan(_points([255, 300]))
        (polygon,) = plan.channels[0].polygons
        assert [y for _, y in polygon[1:-1]] == pytest.approx([16, 16, 16])

    def test_null_breaks_run(self) -> None:
        plan = _plan(_points([100, None, 50, 60]))
        first, second = plan.channels[0].polygons
        b = plan.boundaries

        assert first == [
            (b[0], BASELINE),
            (b[0], pytest.approx(BASELINE - _h(100))),
            (b[1], pytest.approx(BASELINE - _h(100))),
            (b[1], BASELINE),
        ]
        assert second[0] == (b[2], BASELINE)
        assert second[-1] == (b[4], BASELINE)
        assert [y for _, y in second[1:-1]] == pytest.approx(
            [BASELINE - _h(50), BASELINE - _h(55), BASELINE - _h(60)]
        )

    def test_missing_channel_has_no_polygons(self) -> None:
        plan = _plan(_points([10, 20, 30]))
        assert plan.channels[1].polygons == []

    def test_labels(self) -> None:
        plan = _plan(_points([10, 20]))
        texts = [label.text for label in plan.labels]
        assert texts[:3] == ["Left", "0", "Right"]
        assert len(texts) == 5
