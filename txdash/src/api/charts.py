"""
Chart image endpoints.

- ``GET /api/charts/power.{png,svg}``   forward/reflected power.
- ``GET /api/charts/levels.{png,svg}``  split left/right audio levels.

Charts are rendered on request from a copy of the history, in a worker
thread so matplotlib never blocks the event loop. Rendering only reads the
history; it never triggers or waits for a poll.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from txdash.src.api.deps import Service
from txdash.src.charts import render_level_chart, render_line_chart

router = APIRouter(prefix="/api/charts", tags=["charts"])

ChartFormat = Literal["png", "svg"]

_MEDIA_TYPES: dict[str, str] = {"png": "image/png", "svg": "image/svg+xml"}

Width = Annotated[int, Query(ge=200, le=4000)]
Height = Annotated[int, Query(ge=120, le=2000)]


def _image(content: bytes, fmt: str) -> Response:
    return Response(
        content=content,
        media_type=_MEDIA_TYPES[fmt],
        headers={"Cache-Control": "no-store"},
    )


@router.get("/power.{fmt}")
async def power_chart(
    fmt: ChartFormat,
    service: Service,
    width: Width = 900,
    height: Height = 260,
) -> Response:
    """Render the forward/reflected power history."""
    points = service.history.snapshot()
    content = await run_in_threadpool(
        render_line_chart, points, width=width, height=height, fmt=fmt
    )
    return _image(content, fmt)


@router.get("/levels.{fmt}")
async def levels_chart(
    fmt: ChartFormat,
    service: Service,
    width: Width = 900,
    height: Height = 220,
) -> Response:
    """Render the left/right audio level history."""
    points = service.history.snapshot()
    content = await run_in_threadpool(
        render_level_chart, points, width=width, height=height, fmt=fmt
    )
    return _image(content, fmt)
