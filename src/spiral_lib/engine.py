"""
Spiral pipeline — runs the full (series, config) -> render-data flow.

    series + config
      -> estimate_scaling
      -> project_series
      -> apply_cycle_overlay     (grouping; re-stacks Y in overlay mode)
      -> generate_rings          (same radius scaling)
      -> compute_analytics       (once, or from the caller's cache)
      -> colors_for_series
      -> select_marker_indices

The result is a plain ``SpiralRender`` value that a renderer consumes
without calling back into the engine.

Usage:
    from spiral_lib.engine import build_spiral

    render = build_spiral(series, SpiralConfig(color_mode="drawdown"))
    for group, colors in zip(render.groups, render.color_groups):
        draw_line(group.points, colors)
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from spiral_lib.analysis.colors import Color, colors_for_series
from spiral_lib.analysis.series import AnalyticsBundle, compute_analytics
from spiral_lib.core import settings
from spiral_lib.core.cache import AnalyticsCache
from spiral_lib.core.logging_config import get_logger
from spiral_lib.core.models import (
    PointGroup,
    PricePoint,
    RingDescriptor,
    ScalingFactors,
    SpiralConfig,
    SpiralPoint,
)
from spiral_lib.geometry.markers import select_marker_indices
from spiral_lib.geometry.overlay import apply_cycle_overlay, slice_colors
from spiral_lib.geometry.projection import estimate_scaling, project_series
from spiral_lib.geometry.rings import generate_rings

logger = get_logger("spiral.engine")


@dataclass(frozen=True)
class SpiralRender:
    """Everything the render layer needs for one frame."""

    config: SpiralConfig
    scaling: ScalingFactors
    points: tuple[SpiralPoint, ...] = ()
    groups: tuple[PointGroup, ...] = ()
    colors: tuple[Color, ...] = ()
    color_groups: tuple[tuple[Color, ...], ...] = ()
    rings: tuple[RingDescriptor, ...] = ()
    markers: tuple[int, ...] = ()
    analytics: Optional[AnalyticsBundle] = field(default=None, compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.points


def build_spiral(
    series: Sequence[PricePoint],
    config: SpiralConfig,
    *,
    target_height: float = settings.TARGET_HEIGHT,
    target_max_radius: float = settings.TARGET_MAX_RADIUS,
    min_radius: float = settings.MIN_RADIUS,
    cycle_height: float = settings.OVERLAY_CYCLE_HEIGHT,
    cycle_offset: float = settings.OVERLAY_OFFSET,
    window: int = settings.VOLATILITY_WINDOW,
    buckets: int = settings.CYCLE_BUCKETS,
    analytics: Optional[AnalyticsBundle] = None,
    cache: Optional[AnalyticsCache] = None,
) -> SpiralRender:
    """Compute points, groups, colors, rings and markers for *series*.

    An explicit *analytics* bundle wins over *cache*; with neither, the
    bundle is computed once for this call.
    """
    scaling = estimate_scaling(series, config, target_height, target_max_radius)

    if not series:
        logger.debug("spiral_empty_series")
        return SpiralRender(config=config, scaling=scaling)

    points = project_series(series, config, scaling, min_radius=min_radius)
    groups = apply_cycle_overlay(
        points, series, config, cycle_height=cycle_height, cycle_offset=cycle_offset
    )

    prices = [p.price for p in series]
    rings = generate_rings(min(prices), max(prices), config, scaling.radius_scale)

    if analytics is None:
        if cache is not None:
            analytics = cache.get_or_compute(series, config, window, buckets)
        else:
            analytics = compute_analytics(series, config, window=window, buckets=buckets)

    colors = colors_for_series(series, config, analytics)
    markers = select_marker_indices(series, config.cycle_duration, config.custom_days)

    render = SpiralRender(
        config=config,
        scaling=scaling,
        points=tuple(points),
        groups=tuple(groups),
        colors=tuple(colors),
        color_groups=tuple(tuple(c) for c in slice_colors(colors, groups)),
        rings=tuple(rings),
        markers=tuple(markers),
        analytics=analytics,
    )

    logger.info(
        "spiral_built",
        points=len(points),
        groups=len(groups),
        rings=len(rings),
        markers=len(markers),
        cycle=config.cycle_duration.value,
        color_mode=getattr(config.color_mode, "value", config.color_mode),
        overlay=config.cycle_overlay,
    )
    return render
