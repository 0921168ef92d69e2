"""
In-memory cache for analytics bundles.

The engine itself is stateless; this cache is owned by the caller (usually
``SpiralState``) so a render pass can reuse one ``AnalyticsBundle`` per
(series, cycle configuration) pair instead of recomputing it for every
color query or re-render.

Keys are MD5 digests over the series contents and the settings that
change the analytics (cycle length, volatility window, bucket count).
Price scale and color mode do not affect analytics and are not part of
the key, so switching color mode hits the cache.
"""

import hashlib
import logging
import time
from collections.abc import Callable, Sequence
from typing import Optional

import numpy as np

from spiral_lib.analysis.series import AnalyticsBundle, compute_analytics
from spiral_lib.core.models import PricePoint, SpiralConfig
from spiral_lib.core.settings import ANALYTICS_TTL, CYCLE_BUCKETS, VOLATILITY_WINDOW
from spiral_lib.geometry.cycles import resolve_cycle_days

logger = logging.getLogger("spiral.cache")


def series_fingerprint(series: Sequence[PricePoint]) -> str:
    """Stable digest of the timestamps and prices of *series*."""
    h = hashlib.md5()
    h.update(str(len(series)).encode())
    if series:
        stamps = np.fromiter(
            (p.timestamp.timestamp() for p in series), dtype=np.float64, count=len(series)
        )
        prices = np.fromiter((p.price for p in series), dtype=np.float64, count=len(series))
        h.update(stamps.tobytes())
        h.update(prices.tobytes())
    return h.hexdigest()


def _cache_key(*parts: object) -> str:
    raw = ":".join(str(p) for p in parts)
    return "spiral:" + hashlib.md5(raw.encode()).hexdigest()


class AnalyticsCache:
    """TTL-bounded analytics cache.

    Not thread-safe; each owner (UI session, worker) keeps its own.
    """

    def __init__(
        self,
        ttl: float = ANALYTICS_TTL,
        max_entries: int = 32,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._ttl = ttl
        self._max_entries = max_entries
        self._clock = clock or time.monotonic
        self._entries: dict[str, tuple[float, AnalyticsBundle]] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def key_for(
        self,
        series: Sequence[PricePoint],
        config: SpiralConfig,
        window: int = VOLATILITY_WINDOW,
        buckets: int = CYCLE_BUCKETS,
    ) -> str:
        cycle_days = resolve_cycle_days(config.cycle_duration, config.custom_days)
        return _cache_key(
            "analytics", series_fingerprint(series), cycle_days, window, buckets
        )

    def get(self, key: str) -> Optional[AnalyticsBundle]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires, bundle = entry
        if self._clock() > expires:
            del self._entries[key]
            return None
        return bundle

    def set(self, key: str, bundle: AnalyticsBundle) -> None:
        if key not in self._entries and len(self._entries) >= self._max_entries:
            # Drop the entry closest to expiry
            oldest = min(self._entries, key=lambda k: self._entries[k][0])
            del self._entries[oldest]
        self._entries[key] = (self._clock() + self._ttl, bundle)

    def get_or_compute(
        self,
        series: Sequence[PricePoint],
        config: SpiralConfig,
        window: int = VOLATILITY_WINDOW,
        buckets: int = CYCLE_BUCKETS,
    ) -> AnalyticsBundle:
        """Return the cached bundle for (series, config) or compute and store it."""
        key = self.key_for(series, config, window, buckets)
        bundle = self.get(key)
        if bundle is not None:
            self.hits += 1
            return bundle

        self.misses += 1
        bundle = compute_analytics(series, config, window=window, buckets=buckets)
        self.set(key, bundle)
        logger.debug("analytics cache miss (%d entries)", len(self._entries))
        return bundle

    def flush_all(self) -> None:
        self._entries.clear()
