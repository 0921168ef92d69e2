"""
spiral_lib — Price spiral geometry and coloring engine.

Turns a time-ordered price series into a 3D spiral (time on the vertical
axis and the angle, price on the radius) with per-point colors, price
rings and marker indices.

    # Value types and config
    from spiral_lib.core import PricePoint, SpiralConfig, CycleDuration, ColorMode

    # One-call pipeline
    from spiral_lib.engine import build_spiral, SpiralRender

    # Individual components
    from spiral_lib.geometry import project_series, estimate_scaling, generate_rings
    from spiral_lib.analysis import compute_analytics, colors_for_series

    # Session state, data loading, plotting
    from spiral_lib.core.state import SpiralState
    from spiral_lib.data import fetch_price_series
    from spiral_lib.render import build_figure

Install in editable mode for development:

    pip install -e ".[test]"
"""

__version__ = "0.1.0"
