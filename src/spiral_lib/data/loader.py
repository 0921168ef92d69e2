"""
Price-data boundary: OHLCV DataFrames in, ``PricePoint`` sequences out.

The engine never fetches data. This module is the thin collaborator that
does: ``fetch_price_series`` downloads daily or intraday bars with
yfinance and converts them; ``price_points_from_dataframe`` converts any
DataFrame shaped like a yfinance download (DatetimeIndex plus
Open/High/Low/Close/Volume columns).

Date-range legality per interval is enforced by ``SpiralState`` before
calling in; failures here surface as ``PriceDataError`` and are never
interpreted by the engine.

Usage:
    from spiral_lib.data.loader import fetch_price_series

    series = fetch_price_series("BTC-USD", start, end, interval="1d")
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

import pandas as pd
import yfinance as yf

from spiral_lib.core.models import INTERVAL_MAX_DAYS, DataInterval, PricePoint

logger = logging.getLogger("spiral.data")

_OPTIONAL_COLUMNS = {"Open": "open", "High": "high", "Low": "low", "Volume": "volume"}


class PriceDataError(RuntimeError):
    """Raised when price data cannot be fetched or is empty."""


def _flatten_columns(df: Optional[pd.DataFrame]) -> pd.DataFrame:
    """Flatten the (field, ticker) MultiIndex columns newer yfinance returns."""
    if df is None or df.empty:
        return pd.DataFrame()
    result: pd.DataFrame = df.copy()
    if isinstance(result.columns, pd.MultiIndex):
        result.columns = pd.Index(
            [col[0] if isinstance(col, tuple) else col for col in result.columns]
        )
    mask = ~pd.Index(result.columns).duplicated(keep="first")
    result = result.loc[:, mask]
    result.columns = pd.Index([str(c) for c in result.columns])
    return result


def _optional_float(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def price_points_from_dataframe(
    df: Optional[pd.DataFrame], price_column: str = "Close"
) -> list[PricePoint]:
    """Convert an OHLCV DataFrame to an ascending list of ``PricePoint``.

    Rows without a positive price are dropped. The index must be
    datetime-like; tz-aware indexes keep their timezone.
    """
    df = _flatten_columns(df)
    if df.empty:
        return []
    if price_column not in df.columns:
        raise KeyError(f"price column {price_column!r} not in {list(df.columns)}")

    df = df[pd.to_numeric(df[price_column], errors="coerce") > 0]
    df = df.sort_index()
    index = pd.DatetimeIndex(df.index)

    present = {col: attr for col, attr in _OPTIONAL_COLUMNS.items() if col in df.columns}
    points: list[PricePoint] = []
    for ts, (_, row) in zip(index, df.iterrows()):
        extras = {attr: _optional_float(row[col]) for col, attr in present.items()}
        points.append(
            PricePoint(
                timestamp=ts.to_pydatetime(),
                price=float(row[price_column]),
                **extras,
            )
        )
    return points


def download_window(
    start: datetime, end: datetime, interval: DataInterval | str
) -> tuple[date, date]:
    """Whole-day ``[start, end)`` bounds to request from yfinance.

    ``end`` is exclusive upstream, so the last requested day is padded by
    one. The start is then measured back from the padded end so the
    request never spans more than the interval's look-back limit (Yahoo
    rejects intraday requests reaching further back).
    """
    interval = DataInterval(interval)
    end_day = end.date() + timedelta(days=1)
    earliest = end_day - timedelta(days=INTERVAL_MAX_DAYS[interval])
    return max(start.date(), earliest), end_day


def fetch_price_series(
    symbol: str,
    start: datetime,
    end: datetime,
    interval: DataInterval | str = DataInterval.ONE_DAY,
) -> list[PricePoint]:
    """Download *symbol* between *start* and *end* and convert it.

    Raises ``PriceDataError`` if the download fails or returns no rows.
    """
    interval = DataInterval(interval)
    symbol = symbol.strip().upper()
    if not symbol:
        raise PriceDataError("symbol is required")

    start_day, end_day = download_window(start, end, interval)
    logger.info("fetching %s %s from %s to %s", symbol, interval.value, start_day, end_day)
    try:
        raw = yf.download(
            symbol,
            interval=interval.value,
            start=str(start_day),
            end=str(end_day),
            auto_adjust=True,
            progress=False,
        )
    except Exception as exc:
        logger.error("yfinance download failed for %s: %s", symbol, exc)
        raise PriceDataError(f"failed to fetch price data for {symbol}") from exc

    points = price_points_from_dataframe(raw)
    if not points:
        raise PriceDataError(f"no price data returned for {symbol}")

    logger.info("fetched %d bars for %s", len(points), symbol)
    return points
