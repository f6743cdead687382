"""
Chart planning and rendering for the telemetry history.

Planners (``line_chart``, ``level_chart``) turn history points into pure
geometry; ``render`` draws those plans with matplotlib.
"""

from txdash.src.charts.render import render_level_chart, render_line_chart

__all__ = ["render_level_chart", "render_line_chart"]
