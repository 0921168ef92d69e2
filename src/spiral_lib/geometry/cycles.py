"""
Cycle resolution helpers shared by every other component.

A *cycle* is the calendar period that maps to one full turn of the spiral.
"""

import logging
import math
from datetime import datetime
from typing import Optional

from spiral_lib.core.models import CYCLE_DAYS, DEFAULT_CUSTOM_DAYS, CycleDuration

logger = logging.getLogger("spiral.cycles")

SECONDS_PER_DAY = 86_400.0


def resolve_cycle_days(
    duration: CycleDuration | str, custom_days: Optional[int] = None
) -> int:
    """Return the number of days in one cycle.

    Named durations come from ``CYCLE_DAYS``. For ``custom`` the caller's
    ``custom_days`` is used when it is a positive number, otherwise the
    cycle silently falls back to 365 days.
    """
    duration = CycleDuration(duration)
    if duration is CycleDuration.CUSTOM:
        if custom_days is not None and custom_days > 0:
            return int(custom_days)
        logger.debug("custom cycle length %r invalid, using %d", custom_days, DEFAULT_CUSTOM_DAYS)
        return DEFAULT_CUSTOM_DAYS
    return CYCLE_DAYS[duration]


def days_elapsed(timestamp: datetime, base: datetime) -> float:
    """Fractional days between *base* and *timestamp* (negative if earlier)."""
    return (timestamp - base).total_seconds() / SECONDS_PER_DAY


def cycle_index(days: float, cycle_days: int) -> int:
    """Zero-based number of the cycle that *days* falls into."""
    return math.floor(days / cycle_days)


def cycle_position(days: float, cycle_days: int) -> float:
    """Fractional progress through the current cycle, in [0, 1)."""
    position = (days / cycle_days) % 1.0
    # float modulo can round up to exactly 1.0 for tiny negative inputs
    return 0.0 if position >= 1.0 else position
