"""
Per-point color mapping for the spiral line.

Each color mode turns one analytic into a normalized intensity in [0, 1]
and blends linearly between two endpoint colors:

    price          (p - min) / (max - min)          PRICE_LOW -> PRICE_HIGH
    return         |r| / max|r|                     NEUTRAL -> GAIN / LOSS
    drawdown       dd / max dd                      NO_DRAWDOWN -> MAX_DRAWDOWN
    volatility     vol / max vol                    CALM -> VOLATILE
    cyclePosition  |bucket avg| / max|bucket avg|   NEUTRAL -> GAIN / LOSS

Denominators are floored at small epsilons so flat series never divide by
zero. Unknown modes get ``DEFAULT_COLOR``.

Pass one precomputed ``AnalyticsBundle`` through a whole color pass;
``colors_for_series`` does this for you.
"""

import logging
from collections.abc import Callable, Sequence
from typing import NamedTuple, Optional

from spiral_lib.analysis.series import AnalyticsBundle, compute_analytics
from spiral_lib.core.models import ColorMode, PricePoint, SpiralConfig

logger = logging.getLogger("spiral.colors")


class Color(NamedTuple):
    """RGB color with float channels in [0, 1]."""

    r: float
    g: float
    b: float

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        value = value.lstrip("#")
        if len(value) != 6:
            raise ValueError(f"expected #rrggbb, got {value!r}")
        return cls(*(int(value[i : i + 2], 16) / 255.0 for i in (0, 2, 4)))

    def to_hex(self) -> str:
        return "#" + "".join(
            f"{round(min(max(c, 0.0), 1.0) * 255):02x}" for c in self
        )

    def to_rgb_string(self) -> str:
        """``rgb(r,g,b)`` form accepted by plotly."""
        r, g, b = (round(min(max(c, 0.0), 1.0) * 255) for c in self)
        return f"rgb({r},{g},{b})"

    def lerp(self, other: "Color", t: float) -> "Color":
        t = min(max(t, 0.0), 1.0)
        return Color(
            self.r + (other.r - self.r) * t,
            self.g + (other.g - self.g) * t,
            self.b + (other.b - self.b) * t,
        )


# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

PRICE_LOW = Color.from_hex("#3b82f6")
PRICE_HIGH = Color.from_hex("#f59e0b")
NEUTRAL = Color.from_hex("#9ca3af")
GAIN = Color.from_hex("#22c55e")
LOSS = Color.from_hex("#ef4444")
NO_DRAWDOWN = Color.from_hex("#22c55e")
MAX_DRAWDOWN = Color.from_hex("#7f1d1d")
CALM = Color.from_hex("#3b82f6")
VOLATILE = Color.from_hex("#ef4444")
DEFAULT_COLOR = Color.from_hex("#ff6600")

# Denominator floors
PRICE_RANGE_EPSILON = 0.01
RETURN_EPSILON = 0.001
DRAWDOWN_EPSILON = 0.01
VOLATILITY_EPSILON = 0.001
CYCLE_RETURN_EPSILON = 0.001


# ---------------------------------------------------------------------------
# Per-mode mappers
# ---------------------------------------------------------------------------


def _price_color(index: int, series: Sequence[PricePoint], a: AnalyticsBundle) -> Color:
    span = max(a.max_price - a.min_price, PRICE_RANGE_EPSILON)
    return PRICE_LOW.lerp(PRICE_HIGH, (series[index].price - a.min_price) / span)


def _return_color(index: int, series: Sequence[PricePoint], a: AnalyticsBundle) -> Color:
    r = float(a.returns[index])
    intensity = abs(r) / max(a.max_abs_return, RETURN_EPSILON)
    return NEUTRAL.lerp(GAIN if r >= 0 else LOSS, intensity)


def _drawdown_color(index: int, series: Sequence[PricePoint], a: AnalyticsBundle) -> Color:
    intensity = float(a.drawdowns[index]) / max(a.max_drawdown, DRAWDOWN_EPSILON)
    return NO_DRAWDOWN.lerp(MAX_DRAWDOWN, intensity)


def _volatility_color(index: int, series: Sequence[PricePoint], a: AnalyticsBundle) -> Color:
    intensity = float(a.volatilities[index]) / max(a.max_volatility, VOLATILITY_EPSILON)
    return CALM.lerp(VOLATILE, intensity)


def _cycle_position_color(
    index: int, series: Sequence[PricePoint], a: AnalyticsBundle
) -> Color:
    avg = a.cycle_position_returns[int(a.bucket_indices[index])].avg_return
    intensity = abs(avg) / max(a.max_abs_bucket_return, CYCLE_RETURN_EPSILON)
    return NEUTRAL.lerp(GAIN if avg >= 0 else LOSS, intensity)


_MAPPERS: dict[ColorMode, Callable[[int, Sequence[PricePoint], AnalyticsBundle], Color]] = {
    ColorMode.PRICE: _price_color,
    ColorMode.RETURN: _return_color,
    ColorMode.DRAWDOWN: _drawdown_color,
    ColorMode.VOLATILITY: _volatility_color,
    ColorMode.CYCLE_POSITION: _cycle_position_color,
}


def _resolve_mode(mode: ColorMode | str) -> Optional[ColorMode]:
    try:
        return ColorMode(mode)
    except ValueError:
        logger.debug("unknown color mode %r, using default color", mode)
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def color_for_point(
    index: int,
    series: Sequence[PricePoint],
    mode: ColorMode | str,
    config: SpiralConfig,
    analytics: Optional[AnalyticsBundle] = None,
) -> Color:
    """Color of ``series[index]`` under *mode*.

    When *analytics* is omitted it is computed here, which costs O(n) per
    call. Callers coloring a whole series should compute the bundle once
    and pass it in (or use ``colors_for_series``).
    """
    mapper = _MAPPERS.get(_resolve_mode(mode))  # type: ignore[arg-type]
    if mapper is None:
        return DEFAULT_COLOR
    if analytics is None:
        analytics = compute_analytics(series, config)
    return mapper(index, series, analytics)


def colors_for_series(
    series: Sequence[PricePoint],
    config: SpiralConfig,
    analytics: Optional[AnalyticsBundle] = None,
) -> list[Color]:
    """Colors for every point, computing analytics at most once."""
    if not series:
        return []

    mapper = _MAPPERS.get(_resolve_mode(config.color_mode))  # type: ignore[arg-type]
    if mapper is None:
        return [DEFAULT_COLOR] * len(series)

    if analytics is None:
        analytics = compute_analytics(series, config)
    if len(analytics) != len(series):
        raise ValueError(
            f"analytics length {len(analytics)} does not match series length {len(series)}"
        )
    return [mapper(i, series, analytics) for i in range(len(series))]
