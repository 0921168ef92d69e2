"""
Application state container for a spiral viewer session.

The engine takes an immutable ``SpiralConfig`` per call and keeps no state.
Everything that *does* change over a session — selected asset, config,
date range, sampling interval, loaded price data, loading/error flags —
lives here, owned by the host application. Mutations go through explicit
setters, and subscribers are notified after every change with the name of
the field that changed.

Date-range rules mirror the upstream feed: each interval has a maximum
look-back (``INTERVAL_MAX_DAYS``). Whenever the interval or range changes,
the start date is pulled forward so the range fits.

Usage:
    from spiral_lib.core.state import SpiralState

    state = SpiralState()
    state.subscribe(lambda field, st: print("changed", field))
    state.set_asset(Asset("BTC-USD", "Bitcoin USD", AssetType.CRYPTO))
    state.load()
    render = state.render()
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Optional

from spiral_lib.core.cache import AnalyticsCache
from spiral_lib.core.logging_config import get_logger
from spiral_lib.core.models import (
    CYCLE_TO_INTERVAL,
    INTERVAL_MAX_DAYS,
    Asset,
    ColorMode,
    CycleDuration,
    DataInterval,
    PricePoint,
    PriceScale,
    SpiralConfig,
)

logger = get_logger("spiral.state")

DEFAULT_LOOKBACK_DAYS = 5 * 365

Listener = Callable[[str, "SpiralState"], None]
Fetcher = Callable[[str, datetime, datetime, DataInterval], Sequence[PricePoint]]


def clamp_date_range(
    start: datetime, end: datetime, interval: DataInterval
) -> tuple[datetime, datetime]:
    """Pull *start* forward so the range fits the interval's look-back limit."""
    max_days = INTERVAL_MAX_DAYS[interval]
    requested_days = math.ceil((end - start).total_seconds() / 86_400)
    if requested_days > max_days:
        start = end - timedelta(days=max_days)
    return start, end


class SpiralState:
    """Mutable session state with explicit update methods.

    Not thread-safe: all reads and writes are expected from the UI thread.
    """

    def __init__(
        self,
        config: Optional[SpiralConfig] = None,
        now_fn: Optional[Callable[[], datetime]] = None,
        cache: Optional[AnalyticsCache] = None,
    ) -> None:
        self._now_fn = now_fn or datetime.now
        now = self._now_fn()

        self.asset: Optional[Asset] = None
        self.config: SpiralConfig = config or SpiralConfig()
        self.start_date: datetime = now - timedelta(days=DEFAULT_LOOKBACK_DAYS)
        self.end_date: datetime = now
        self.interval: DataInterval = DataInterval.ONE_DAY
        self.price_data: list[PricePoint] = []
        self.is_loading: bool = False
        self.error: Optional[str] = None

        self.analytics_cache = cache or AnalyticsCache()
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, field_name: str) -> None:
        for listener in list(self._listeners):
            listener(field_name, self)

    # ------------------------------------------------------------------
    # Asset / data / flags
    # ------------------------------------------------------------------

    def set_asset(self, asset: Optional[Asset]) -> None:
        self.asset = asset
        self._notify("asset")

    def set_price_data(self, data: Sequence[PricePoint]) -> None:
        self.price_data = list(data)
        self._notify("price_data")

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading
        self._notify("is_loading")

    def set_error(self, error: Optional[str]) -> None:
        self.error = error
        self._notify("error")

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------

    def set_config(self, **changes: Any) -> None:
        """Replace any subset of config fields (``set_config(cycle_overlay=True)``)."""
        self.config = replace(self.config, **changes)
        self._notify("config")

    def set_cycle_duration(self, duration: CycleDuration | str) -> None:
        """Switch cycle and auto-select the matching data interval.

        Custom cycles keep the current interval. Subscribers get
        ``"config"`` and, when they changed as a consequence, ``"interval"``
        and ``"date_range"``.
        """
        duration = CycleDuration(duration)
        changed = self._apply_interval(CYCLE_TO_INTERVAL.get(duration, self.interval))
        self.config = replace(self.config, cycle_duration=duration)
        self._notify("config")
        for field_name in changed:
            self._notify(field_name)

    def set_custom_days(self, days: int) -> None:
        self.set_config(custom_days=days)

    def set_price_scale(self, scale: PriceScale | str) -> None:
        self.set_config(price_scale=PriceScale(scale))

    def set_color_mode(self, mode: ColorMode | str) -> None:
        self.set_config(color_mode=mode)

    def set_cycle_overlay(self, enabled: bool) -> None:
        self.set_config(cycle_overlay=enabled)

    # ------------------------------------------------------------------
    # Date range / interval
    # ------------------------------------------------------------------

    def _apply_interval(self, interval: DataInterval) -> list[str]:
        """Set *interval*, clamp the range, and return the fields that changed."""
        changed: list[str] = []
        start, end = clamp_date_range(self.start_date, self.end_date, interval)
        if interval is not self.interval:
            self.interval = interval
            changed.append("interval")
        if (start, end) != (self.start_date, self.end_date):
            self.start_date, self.end_date = start, end
            changed.append("date_range")
        return changed

    def set_date_range(self, start: datetime, end: datetime) -> None:
        self.start_date, self.end_date = clamp_date_range(start, end, self.interval)
        self._notify("date_range")

    def set_interval(self, interval: DataInterval | str) -> None:
        changed = self._apply_interval(DataInterval(interval))
        self._notify("interval")
        if "date_range" in changed:
            self._notify("date_range")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def load(self, fetcher: Optional[Fetcher] = None) -> bool:
        """Fetch price data for the selected asset.

        Errors are recorded in ``self.error`` for the UI to display; the
        previously loaded data is kept. Returns True on success.
        """
        if self.asset is None:
            self.set_error("No asset selected")
            return False

        if fetcher is None:
            from spiral_lib.data.loader import fetch_price_series

            fetcher = fetch_price_series

        self.set_loading(True)
        self.set_error(None)
        try:
            data = fetcher(self.asset.symbol, self.start_date, self.end_date, self.interval)
        except Exception as exc:
            logger.warning("price_load_failed", symbol=self.asset.symbol, error=str(exc))
            self.set_error(str(exc))
            return False
        finally:
            self.set_loading(False)

        self.set_price_data(data)
        logger.info(
            "price_data_loaded",
            symbol=self.asset.symbol,
            points=len(self.price_data),
            interval=self.interval.value,
        )
        return True

    def render(self, **kwargs: Any):
        """Build render data for the current series and config.

        Reuses this session's analytics cache; keyword arguments are
        forwarded to ``build_spiral``.
        """
        from spiral_lib.engine import build_spiral

        return build_spiral(
            self.price_data, self.config, cache=self.analytics_cache, **kwargs
        )
