"""
Core value types for the price spiral engine.

Everything here is an immutable value object: the engine's pure functions
take these in and hand fresh ones back. Nothing in this module holds state
across calls.

Usage:
    from spiral_lib.core.models import PricePoint, SpiralConfig, CycleDuration

    cfg = SpiralConfig(cycle_duration=CycleDuration.WEEKLY, color_mode="volatility")
    pts = [PricePoint(timestamp=ts, price=p) for ts, p in rows]
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class CycleDuration(str, Enum):
    """Calendar period mapped to one full 360° turn of the spiral."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"
    CUSTOM = "custom"


class PriceScale(str, Enum):
    LINEAR = "linear"
    LOGARITHMIC = "logarithmic"


class ColorMode(str, Enum):
    """Per-point coloring strategy."""

    PRICE = "price"
    RETURN = "return"
    DRAWDOWN = "drawdown"
    VOLATILITY = "volatility"
    CYCLE_POSITION = "cyclePosition"


class DataInterval(str, Enum):
    """Sampling interval accepted by the upstream price feed."""

    ONE_MIN = "1m"
    FIVE_MIN = "5m"
    FIFTEEN_MIN = "15m"
    THIRTY_MIN = "30m"
    ONE_HOUR = "1h"
    ONE_DAY = "1d"


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

CYCLE_DAYS: dict[CycleDuration, int] = {
    CycleDuration.DAILY: 1,
    CycleDuration.WEEKLY: 7,
    CycleDuration.MONTHLY: 30,
    CycleDuration.QUARTERLY: 91,
    CycleDuration.ANNUAL: 365,
}

DEFAULT_CUSTOM_DAYS = 365

# Yahoo only serves intraday bars for a limited look-back window.
INTERVAL_MAX_DAYS: dict[DataInterval, int] = {
    DataInterval.ONE_MIN: 7,
    DataInterval.FIVE_MIN: 60,
    DataInterval.FIFTEEN_MIN: 60,
    DataInterval.THIRTY_MIN: 60,
    DataInterval.ONE_HOUR: 60,
    DataInterval.ONE_DAY: 7300,
}

# Finest useful sampling for each named cycle (custom keeps the current one).
CYCLE_TO_INTERVAL: dict[CycleDuration, DataInterval] = {
    CycleDuration.DAILY: DataInterval.FIVE_MIN,
    CycleDuration.WEEKLY: DataInterval.ONE_HOUR,
    CycleDuration.MONTHLY: DataInterval.ONE_DAY,
    CycleDuration.QUARTERLY: DataInterval.ONE_DAY,
    CycleDuration.ANNUAL: DataInterval.ONE_DAY,
}


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PricePoint:
    """One observation of the input series."""

    timestamp: datetime
    price: float
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    volume: Optional[float] = None


@dataclass(frozen=True)
class SpiralConfig:
    """Visualization parameters for a single engine computation.

    String values are accepted for the enum fields and normalised on
    construction, so ``SpiralConfig(color_mode="drawdown")`` works.
    An unknown ``color_mode`` string is kept as-is; the color mapper
    falls back to its default color for it.
    """

    cycle_duration: CycleDuration = CycleDuration.ANNUAL
    custom_days: Optional[int] = DEFAULT_CUSTOM_DAYS
    price_scale: PriceScale = PriceScale.LOGARITHMIC
    color_mode: ColorMode | str = ColorMode.RETURN
    cycle_overlay: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "cycle_duration", CycleDuration(self.cycle_duration))
        object.__setattr__(self, "price_scale", PriceScale(self.price_scale))
        try:
            object.__setattr__(self, "color_mode", ColorMode(self.color_mode))
        except ValueError:
            pass

    @property
    def is_logarithmic(self) -> bool:
        return self.price_scale is PriceScale.LOGARITHMIC


@dataclass(frozen=True)
class SpiralPoint:
    x: float
    y: float
    z: float
    price: float
    timestamp: datetime


@dataclass(frozen=True)
class ScalingFactors:
    """Vertical (per day) and radial (per price unit) scale factors."""

    vertical_scale: float = 0.01
    radius_scale: float = 1.0


@dataclass(frozen=True)
class RingDescriptor:
    """Background guide ring at a reference price level."""

    price: float
    radius: float


@dataclass(frozen=True)
class PointGroup:
    """Contiguous run of spiral points rendered as one line.

    ``start`` is the index of the first point in the original series, so
    parallel arrays (colors, tooltips) can be sliced with
    ``[start:start + len(points)]``.
    """

    cycle_index: int
    start: int
    points: tuple[SpiralPoint, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def stop(self) -> int:
        return self.start + len(self.points)


class AssetType(str, Enum):
    STOCK = "stock"
    CRYPTO = "crypto"
    FOREX = "forex"
    COMMODITY = "commodity"
    BOND = "bond"


@dataclass(frozen=True)
class Asset:
    """Instrument selected in the UI; ``symbol`` is the Yahoo ticker."""

    symbol: str
    name: str = ""
    type: AssetType = AssetType.STOCK
