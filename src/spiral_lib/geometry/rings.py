"""
Background price-level rings and price label formatting.
"""

import logging
import math

from spiral_lib.core.models import RingDescriptor, SpiralConfig
from spiral_lib.geometry.projection import price_to_radius

logger = logging.getLogger("spiral.rings")

# Upper bound on linear rings; a narrow range at a high price level would
# otherwise yield one ring per step all the way up to max_price * 1.1
MAX_LINEAR_RINGS = 50


def generate_rings(
    min_price: float,
    max_price: float,
    config: SpiralConfig,
    radius_scale: float,
) -> list[RingDescriptor]:
    """Reference price levels for the grid rings around the spiral.

    Logarithmic scale: one ring per power of ten covering the price range,
    kept only if it lies within ``[min_price * 0.5, max_price * 2]``.

    Linear scale: rings at multiples of ``10 ** floor(log10(range))``
    starting at or below ``min_price`` and running up to ``max_price * 1.1``,
    at most ``MAX_LINEAR_RINGS`` of them (lowest first).
    """
    if math.isnan(min_price) or math.isnan(max_price):
        return []

    rings: list[RingDescriptor] = []

    if config.is_logarithmic:
        min_power = math.floor(math.log10(max(min_price, 1.0)))
        max_power = math.ceil(math.log10(max(max_price, 1.0)))
        for power in range(min_power, max_power + 1):
            price = 10.0**power
            if min_price * 0.5 <= price <= max_price * 2:
                _append_ring(rings, price, config, radius_scale)
        return rings

    price_range = max_price - min_price
    step = 10.0 ** math.floor(math.log10(price_range)) if price_range > 0 else 1.0

    # Integer multiples avoid accumulating float error across steps
    k = math.floor(min_price / step)
    ceiling = max_price * 1.1
    while k * step <= ceiling and len(rings) < MAX_LINEAR_RINGS:
        price = k * step
        if price > 0:
            _append_ring(rings, price, config, radius_scale)
        k += 1
    if k * step <= ceiling:
        logger.debug("linear rings capped at %d (step %g)", MAX_LINEAR_RINGS, step)
    return rings


def _append_ring(
    rings: list[RingDescriptor], price: float, config: SpiralConfig, radius_scale: float
) -> None:
    radius = price_to_radius(price, config, radius_scale)
    # log10(1) == 0, and a zero-radius ring is invisible and not a valid descriptor
    if radius > 0:
        rings.append(RingDescriptor(price=price, radius=radius))


def format_price(price: float) -> str:
    """Compact dollar label: ``$0.1234``, ``$12.34``, ``$1.2K``, ``$3.4M``, ``$5.6B``."""
    if price >= 1_000_000_000:
        return f"${price / 1_000_000_000:.1f}B"
    if price >= 1_000_000:
        return f"${price / 1_000_000:.1f}M"
    if price >= 1_000:
        return f"${price / 1_000:.1f}K"
    if price >= 1:
        return f"${price:.2f}"
    return f"${price:.4f}"
