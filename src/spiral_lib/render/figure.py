"""
Plotly adapter — draws a ``SpiralRender`` as an interactive 3D figure.

One ``Scatter3d`` line per point group (a single group unless cycle
overlay is on), dashed circles for the price-level rings with
``format_price`` labels, and a hover-able marker trace at the selected
marker indices.

Usage:
    from spiral_lib.render.figure import build_figure

    fig = build_figure(build_spiral(series, config), title="BTC-USD")
    fig.show()
"""

import math
from typing import Optional

import plotly.graph_objects as go

from spiral_lib.engine import SpiralRender
from spiral_lib.geometry.rings import format_price

RING_SEGMENTS = 64
RING_COLOR = "#555555"
MARKER_COLOR = "#ffffff"


def _ring_trace(price: float, radius: float, y: float) -> go.Scatter3d:
    angles = [2 * math.pi * i / RING_SEGMENTS for i in range(RING_SEGMENTS + 1)]
    return go.Scatter3d(
        x=[radius * math.cos(a) for a in angles],
        y=[y] * len(angles),
        z=[radius * math.sin(a) for a in angles],
        mode="lines",
        line=dict(color=RING_COLOR, width=1, dash="dash"),
        name=format_price(price),
        hoverinfo="name",
        showlegend=False,
    )


def build_figure(render: SpiralRender, title: Optional[str] = None) -> go.Figure:
    """Assemble the figure; an empty render yields an empty dark scene."""
    fig = go.Figure()

    for group, colors in zip(render.groups, render.color_groups):
        fig.add_trace(
            go.Scatter3d(
                x=[p.x for p in group.points],
                y=[p.y for p in group.points],
                z=[p.z for p in group.points],
                mode="lines",
                line=dict(color=[c.to_rgb_string() for c in colors], width=4),
                name=f"cycle {group.cycle_index}",
                customdata=[
                    [p.timestamp.strftime("%Y-%m-%d %H:%M"), format_price(p.price)]
                    for p in group.points
                ],
                hovertemplate="%{customdata[0]}<br>%{customdata[1]}<extra></extra>",
                showlegend=len(render.groups) > 1,
            )
        )

    for ring in render.rings:
        fig.add_trace(_ring_trace(ring.price, ring.radius, y=0.0))

    if render.markers:
        # Overlay mode re-stacks Y, so read positions from the groups
        by_index = {
            group.start + offset: point
            for group in render.groups
            for offset, point in enumerate(group.points)
        }
        marked = [by_index[i] for i in render.markers if i in by_index]
        fig.add_trace(
            go.Scatter3d(
                x=[p.x for p in marked],
                y=[p.y for p in marked],
                z=[p.z for p in marked],
                mode="markers",
                marker=dict(size=3, color=MARKER_COLOR),
                text=[
                    f"{p.timestamp:%Y-%m-%d}<br>{format_price(p.price)}" for p in marked
                ],
                hoverinfo="text",
                name="markers",
                showlegend=False,
            )
        )

    fig.update_layout(
        template="plotly_dark",
        title=title,
        margin=dict(l=0, r=0, t=40 if title else 5, b=0),
        scene=dict(
            xaxis=dict(visible=False),
            yaxis=dict(title="time"),
            zaxis=dict(visible=False),
            aspectmode="data",
        ),
    )
    return fig
