"""
spiral_lib.render — Plotly figure assembly for spiral render data.
"""

from spiral_lib.render.figure import build_figure

__all__ = ["build_figure"]
