"""
Descriptive time-series analytics that feed the spiral color mapping.

Four derivations over a price series, each a pure function:
  - Simple returns (first value 0 by convention)
  - Drawdown from the running peak, as a fraction in [0, 1]
  - Rolling volatility: population std of the previous ``window`` returns
  - Cycle position: fractional progress through the current cycle, plus
    average return per cycle-position bucket (seasonality profile)

``compute_analytics`` computes all of them once and packs them into an
``AnalyticsBundle`` together with the normalization extrema the color
mapper needs, so a full color pass over n points stays O(n).

Usage:
    from spiral_lib.analysis.series import compute_analytics

    bundle = compute_analytics(series, config)
    bundle.returns[-1], bundle.drawdowns.max(), bundle.cycle_position_returns[0]
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from spiral_lib.core.models import PricePoint, SpiralConfig
from spiral_lib.geometry.cycles import days_elapsed, resolve_cycle_days

logger = logging.getLogger("spiral.analytics")

DEFAULT_VOLATILITY_WINDOW = 20
DEFAULT_CYCLE_BUCKETS = 36  # 10° resolution


@dataclass(frozen=True)
class CyclePositionBucket:
    """Average return of every point whose cycle position falls in the bucket."""

    position: float  # bucket start, in [0, 1)
    avg_return: float
    count: int


@dataclass(frozen=True)
class AnalyticsBundle:
    """All per-point analytics for one (series, config) pair.

    Arrays are read-only; build a new bundle instead of editing one.
    """

    returns: np.ndarray
    drawdowns: np.ndarray
    volatilities: np.ndarray
    cycle_positions: np.ndarray
    bucket_indices: np.ndarray
    cycle_position_returns: tuple[CyclePositionBucket, ...]
    cycle_days: int
    window: int
    buckets: int

    # Normalization extrema
    min_price: float = 0.0
    max_price: float = 0.0
    max_abs_return: float = 0.0
    max_drawdown: float = 0.0
    max_volatility: float = 0.0
    max_abs_bucket_return: float = 0.0

    def __len__(self) -> int:
        return len(self.returns)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _prices(series: Sequence[PricePoint]) -> np.ndarray:
    return np.fromiter((p.price for p in series), dtype=np.float64, count=len(series))


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


# ---------------------------------------------------------------------------
# Individual derivations
# ---------------------------------------------------------------------------


def compute_returns(series: Sequence[PricePoint]) -> np.ndarray:
    """Simple period returns; ``returns[0] == 0``.

    A zero previous price yields a 0 return rather than inf.
    """
    prices = _prices(series)
    returns = np.zeros(len(prices), dtype=np.float64)
    if len(prices) < 2:
        return returns

    prev = prices[:-1]
    np.divide(prices[1:] - prev, prev, out=returns[1:], where=prev != 0)
    return returns


def compute_drawdowns(series: Sequence[PricePoint]) -> np.ndarray:
    """Fractional decline from the running peak (peak starts at 0)."""
    prices = _prices(series)
    if len(prices) == 0:
        return prices

    running_peak = np.maximum.accumulate(np.maximum(prices, 0.0))
    drawdowns = np.zeros(len(prices), dtype=np.float64)
    np.divide(running_peak - prices, running_peak, out=drawdowns, where=running_peak > 0)
    return drawdowns


def compute_volatility(
    returns: np.ndarray, window: int = DEFAULT_VOLATILITY_WINDOW
) -> np.ndarray:
    """Rolling population std of the *previous* ``window`` returns.

    ``volatility[i]`` uses ``returns[i - window : i]``; the first ``window``
    values are 0.
    """
    if window < 1:
        raise ValueError(f"volatility window must be >= 1, got {window}")
    if len(returns) == 0:
        return np.zeros(0, dtype=np.float64)

    rolling = (
        pd.Series(returns, dtype="float64")
        .rolling(window=window, min_periods=window)
        .std(ddof=0)
        .shift(1)
    )
    return rolling.fillna(0.0).clip(lower=0.0).to_numpy(dtype=np.float64)


def compute_cycle_positions(
    series: Sequence[PricePoint], config: SpiralConfig
) -> np.ndarray:
    """Fractional progress of each point through its cycle, in [0, 1)."""
    if not series:
        return np.zeros(0, dtype=np.float64)

    cycle_days = resolve_cycle_days(config.cycle_duration, config.custom_days)
    base = series[0].timestamp
    days = np.fromiter(
        (days_elapsed(p.timestamp, base) for p in series),
        dtype=np.float64,
        count=len(series),
    )
    positions = np.mod(days / cycle_days, 1.0)
    positions[positions >= 1.0] = 0.0
    return positions


def _bucket_indices(positions: np.ndarray, buckets: int) -> np.ndarray:
    return np.floor(positions * buckets).astype(np.int64) % buckets


def compute_cycle_position_returns(
    returns: np.ndarray,
    positions: np.ndarray,
    buckets: int = DEFAULT_CYCLE_BUCKETS,
) -> tuple[CyclePositionBucket, ...]:
    """Average return per equal-width cycle-position bucket.

    Empty buckets report ``avg_return=0`` and ``count=0``.
    """
    if buckets < 1:
        raise ValueError(f"bucket count must be >= 1, got {buckets}")

    idx = _bucket_indices(positions, buckets)
    sums = np.bincount(idx, weights=returns, minlength=buckets)
    counts = np.bincount(idx, minlength=buckets)
    averages = np.zeros(buckets, dtype=np.float64)
    np.divide(sums, counts, out=averages, where=counts > 0)

    return tuple(
        CyclePositionBucket(
            position=b / buckets,
            avg_return=float(averages[b]),
            count=int(counts[b]),
        )
        for b in range(buckets)
    )


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


def compute_analytics(
    series: Sequence[PricePoint],
    config: SpiralConfig,
    window: int = DEFAULT_VOLATILITY_WINDOW,
    buckets: int = DEFAULT_CYCLE_BUCKETS,
) -> AnalyticsBundle:
    """Compute every analytic once for a (series, config) pair."""
    prices = _prices(series)
    returns = compute_returns(series)
    drawdowns = compute_drawdowns(series)
    volatilities = compute_volatility(returns, window)
    positions = compute_cycle_positions(series, config)
    bucket_idx = _bucket_indices(positions, buckets)
    profile = compute_cycle_position_returns(returns, positions, buckets)

    positive_vol = volatilities[volatilities > 0]

    bundle = AnalyticsBundle(
        returns=_frozen(returns),
        drawdowns=_frozen(drawdowns),
        volatilities=_frozen(volatilities),
        cycle_positions=_frozen(positions),
        bucket_indices=_frozen(bucket_idx),
        cycle_position_returns=profile,
        cycle_days=resolve_cycle_days(config.cycle_duration, config.custom_days),
        window=window,
        buckets=buckets,
        min_price=float(prices.min()) if len(prices) else 0.0,
        max_price=float(prices.max()) if len(prices) else 0.0,
        max_abs_return=float(np.abs(returns).max()) if len(returns) else 0.0,
        max_drawdown=float(drawdowns.max()) if len(drawdowns) else 0.0,
        max_volatility=float(positive_vol.max()) if len(positive_vol) else 0.0,
        max_abs_bucket_return=max((abs(b.avg_return) for b in profile), default=0.0),
    )
    logger.debug(
        "analytics computed: n=%d window=%d buckets=%d", len(bundle), window, buckets
    )
    return bundle
