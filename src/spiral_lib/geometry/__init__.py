"""
spiral_lib.geometry — Spiral coordinates, scaling, rings, markers, overlay.

Re-exports the public API so callers can do:

    from spiral_lib.geometry import project_series, estimate_scaling, generate_rings
"""

from spiral_lib.geometry.cycles import (
    cycle_index,
    cycle_position,
    days_elapsed,
    resolve_cycle_days,
)
from spiral_lib.geometry.markers import select_marker_indices
from spiral_lib.geometry.overlay import apply_cycle_overlay, slice_colors
from spiral_lib.geometry.projection import (
    estimate_scaling,
    price_to_radius,
    project_point,
    project_series,
)
from spiral_lib.geometry.rings import format_price, generate_rings

__all__ = [
    # cycles
    "cycle_index",
    "cycle_position",
    "days_elapsed",
    "resolve_cycle_days",
    # markers
    "select_marker_indices",
    # overlay
    "apply_cycle_overlay",
    "slice_colors",
    # projection
    "estimate_scaling",
    "price_to_radius",
    "project_point",
    "project_series",
    # rings
    "format_price",
    "generate_rings",
]
