"""
spiral_lib.analysis — Series analytics and color mapping.

Re-exports the public API from each sub-module so callers can do:

    from spiral_lib.analysis import compute_analytics, colors_for_series
"""

from spiral_lib.analysis.colors import (
    DEFAULT_COLOR,
    Color,
    color_for_point,
    colors_for_series,
)
from spiral_lib.analysis.series import (
    AnalyticsBundle,
    CyclePositionBucket,
    compute_analytics,
    compute_cycle_position_returns,
    compute_cycle_positions,
    compute_drawdowns,
    compute_returns,
    compute_volatility,
)

__all__ = [
    # colors
    "DEFAULT_COLOR",
    "Color",
    "color_for_point",
    "colors_for_series",
    # series
    "AnalyticsBundle",
    "CyclePositionBucket",
    "compute_analytics",
    "compute_cycle_position_returns",
    "compute_cycle_positions",
    "compute_drawdowns",
    "compute_returns",
    "compute_volatility",
]
