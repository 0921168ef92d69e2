"""
Shared pytest fixtures for the spiral engine test suite.

Provides synthetic price series (random walks, flat series, intraday
bars) so every test module can exercise projection, analytics and color
mapping without hitting the network.
"""

from collections.abc import Sequence
from datetime import datetime

import numpy as np
import pandas as pd
import pytest

from spiral_lib.core.models import PricePoint

# ---------------------------------------------------------------------------
# Synthetic data generators
# ---------------------------------------------------------------------------


def _make_timestamps(
    n: int, freq: str = "1D", start: str = "2024-01-01"
) -> pd.DatetimeIndex:
    """Generate a naive DatetimeIndex for *n* bars."""
    return pd.date_range(start=start, periods=n, freq=freq)


def _series_from_prices(
    prices: Sequence[float], freq: str = "1D", start: str = "2024-01-01"
) -> list[PricePoint]:
    """Wrap plain prices in ``PricePoint``s on a regular calendar."""
    idx = _make_timestamps(len(prices), freq=freq, start=start)
    return [
        PricePoint(timestamp=ts.to_pydatetime(), price=float(p))
        for ts, p in zip(idx, prices)
    ]


def _series_from_dates(
    dates: Sequence[datetime], price: float = 100.0
) -> list[PricePoint]:
    """Constant-price series on arbitrary (possibly irregular) dates."""
    return [PricePoint(timestamp=d, price=price) for d in dates]


def _random_walk_series(
    n: int = 500,
    start_price: float = 100.0,
    volatility: float = 0.02,
    freq: str = "1D",
    seed: int = 42,
    start: str = "2020-01-01",
) -> list[PricePoint]:
    """Geometric random walk with OHLCV fields filled in."""
    rng = np.random.default_rng(seed)
    returns = rng.normal(0, volatility, n)
    close = start_price * np.exp(np.cumsum(returns))
    spread = close * rng.uniform(0.001, 0.01, n)
    volume = rng.poisson(1000, n).astype(float)

    idx = _make_timestamps(n, freq=freq, start=start)
    return [
        PricePoint(
            timestamp=ts.to_pydatetime(),
            price=float(c),
            open=float(c - s / 2),
            high=float(c + s),
            low=float(c - s),
            volume=float(v),
        )
        for ts, c, s, v in zip(idx, close, spread, volume)
    ]


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def daily_series() -> list[PricePoint]:
    """500 daily bars of a random walk starting at 100."""
    return _random_walk_series(n=500, seed=42)


@pytest.fixture()
def crypto_like_series() -> list[PricePoint]:
    """3 years of daily bars at Bitcoin-like price levels."""
    return _random_walk_series(n=3 * 365, start_price=30_000.0, volatility=0.035, seed=7)


@pytest.fixture()
def intraday_series() -> list[PricePoint]:
    """300 five-minute bars."""
    return _random_walk_series(n=300, freq="5min", seed=11, start="2024-03-04 09:30")


@pytest.fixture()
def flat_series() -> list[PricePoint]:
    """100 daily bars at a constant price (zero variance)."""
    return _series_from_prices([100.0] * 100)


@pytest.fixture()
def empty_series() -> list[PricePoint]:
    return []
