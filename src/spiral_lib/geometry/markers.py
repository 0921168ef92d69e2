"""
Marker selection — picks a sparse set of series indices for interactive
overlay markers (hover targets / tooltips).

Granularity follows the cycle length so each spiral turn keeps a legible
number of markers:

  - annual, or custom >= 90 days -> last index of each calendar month
  - quarterly / monthly          -> last index of each ISO week
  - weekly                       -> every second index
  - daily, or custom < 90 days   -> ~10 evenly spaced samples

The first and last index are always included.
"""

import logging
from collections.abc import Callable, Hashable, Sequence
from datetime import datetime
from typing import Optional

from spiral_lib.core.models import CycleDuration, PricePoint
from spiral_lib.geometry.cycles import resolve_cycle_days

logger = logging.getLogger("spiral.markers")

# Custom cycles at least this long get month-end markers
_LONG_CUSTOM_CYCLE_DAYS = 90
_EVEN_SAMPLES = 10


def _month_key(ts: datetime) -> Hashable:
    return (ts.year, ts.month)


def _iso_week_key(ts: datetime) -> Hashable:
    iso = ts.isocalendar()
    return (iso[0], iso[1])


def _period_end_indices(
    series: Sequence[PricePoint], key_fn: Callable[[datetime], Hashable]
) -> list[int]:
    """Index of the last point of each calendar period.

    A period is only closed when the next point falls into a different
    period or the series ends.
    """
    indices: list[int] = []
    last = len(series) - 1
    for i, point in enumerate(series):
        if i == last or key_fn(series[i + 1].timestamp) != key_fn(point.timestamp):
            indices.append(i)
    return indices


def select_marker_indices(
    series: Sequence[PricePoint],
    cycle_duration: CycleDuration | str,
    custom_days: Optional[int] = None,
) -> list[int]:
    """Return sorted, de-duplicated marker indices into *series*."""
    n = len(series)
    if n == 0:
        return []

    duration = CycleDuration(cycle_duration)

    if duration is CycleDuration.ANNUAL or (
        duration is CycleDuration.CUSTOM
        and resolve_cycle_days(duration, custom_days) >= _LONG_CUSTOM_CYCLE_DAYS
    ):
        indices = _period_end_indices(series, _month_key)
    elif duration in (CycleDuration.QUARTERLY, CycleDuration.MONTHLY):
        indices = _period_end_indices(series, _iso_week_key)
    elif duration is CycleDuration.WEEKLY:
        indices = list(range(0, n, 2))
    else:
        step = max(1, n // _EVEN_SAMPLES)
        indices = list(range(0, n, step))

    selected = sorted({0, n - 1, *indices})
    logger.debug("selected %d markers from %d points (%s)", len(selected), n, duration.value)
    return selected
