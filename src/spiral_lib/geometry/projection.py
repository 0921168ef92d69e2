"""
Spiral projection — maps a price series onto 3D spiral coordinates.

Geometry:
  - Y axis (vertical) = time elapsed since the first point
  - Angle around Y    = position within the cycle (one turn per cycle)
  - Radius            = price (linear or log10)

Equal calendar time always advances the same angle regardless of price,
so the same seasonal moment in different cycles sits at the same angle and
prices can be compared radially.

Usage:
    from spiral_lib.geometry.projection import estimate_scaling, project_series

    scaling = estimate_scaling(series, config, target_height=10, target_max_radius=5)
    points = project_series(series, config, scaling, min_radius=0.3)
"""

import logging
import math
from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from spiral_lib.core.models import (
    PricePoint,
    ScalingFactors,
    SpiralConfig,
    SpiralPoint,
)
from spiral_lib.geometry.cycles import days_elapsed, resolve_cycle_days

logger = logging.getLogger("spiral.projection")

DEFAULT_VERTICAL_SCALE = 0.01
DEFAULT_RADIUS_SCALE = 1.0
DEFAULT_MIN_RADIUS = 0.5


def price_to_radius(price: float, config: SpiralConfig, radius_scale: float) -> float:
    """Unclamped radius for *price* under the configured price scale.

    Log scale floors the price at 1 so sub-dollar prices never produce a
    negative radius.
    """
    if config.is_logarithmic:
        return math.log10(max(price, 1.0)) * radius_scale
    return price * radius_scale


def project_point(
    point: PricePoint,
    config: SpiralConfig,
    base_date: datetime,
    vertical_scale: float = DEFAULT_VERTICAL_SCALE,
    radius_scale: float = DEFAULT_RADIUS_SCALE,
    min_radius: float = DEFAULT_MIN_RADIUS,
) -> SpiralPoint:
    """Project a single price point relative to *base_date*."""
    days = days_elapsed(point.timestamp, base_date)
    cycle_days = resolve_cycle_days(config.cycle_duration, config.custom_days)

    angle = (days / cycle_days) * 2.0 * math.pi
    y = days * vertical_scale

    radius = max(price_to_radius(point.price, config, radius_scale), min_radius)

    return SpiralPoint(
        x=radius * math.cos(angle),
        y=y,
        z=radius * math.sin(angle),
        price=point.price,
        timestamp=point.timestamp,
    )


def project_series(
    series: Sequence[PricePoint],
    config: SpiralConfig,
    scaling: Optional[ScalingFactors] = None,
    min_radius: float = DEFAULT_MIN_RADIUS,
) -> list[SpiralPoint]:
    """Project every point of *series*; the first timestamp is the base date."""
    if not series:
        return []

    if scaling is None:
        scaling = ScalingFactors()
    base_date = series[0].timestamp

    return [
        project_point(
            point,
            config,
            base_date,
            vertical_scale=scaling.vertical_scale,
            radius_scale=scaling.radius_scale,
            min_radius=min_radius,
        )
        for point in series
    ]


def estimate_scaling(
    series: Sequence[PricePoint],
    config: SpiralConfig,
    target_height: float = 10.0,
    target_max_radius: float = 5.0,
) -> ScalingFactors:
    """Scale factors that fit the projected series into the target box.

    Falls back to (0.01, 1.0) for an empty series, a zero day span or a
    non-positive price ceiling instead of raising.
    """
    if not series:
        return ScalingFactors(DEFAULT_VERTICAL_SCALE, DEFAULT_RADIUS_SCALE)

    total_days = days_elapsed(series[-1].timestamp, series[0].timestamp)
    vertical_scale = (
        target_height / total_days if total_days > 0 else DEFAULT_VERTICAL_SCALE
    )

    max_price = max(p.price for p in series)
    if config.is_logarithmic:
        max_log_radius = math.log10(max(max_price, 1.0))
        radius_scale = (
            target_max_radius / max_log_radius
            if max_log_radius > 0
            else DEFAULT_RADIUS_SCALE
        )
    else:
        radius_scale = (
            target_max_radius / max_price if max_price > 0 else DEFAULT_RADIUS_SCALE
        )

    return ScalingFactors(vertical_scale=vertical_scale, radius_scale=radius_scale)
