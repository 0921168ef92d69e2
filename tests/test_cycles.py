"""
Tests for cycle resolution helpers.

Covers:
  - resolve_cycle_days(): named table, custom values, silent 365 fallback
  - days_elapsed(): fractional days for sub-day spacing
  - cycle_index() / cycle_position(): ranges and negative inputs
"""

from datetime import datetime, timedelta

import pytest

from spiral_lib.core.models import CycleDuration
from spiral_lib.geometry.cycles import (
    cycle_index,
    cycle_position,
    days_elapsed,
    resolve_cycle_days,
)


class TestResolveCycleDays:
    @pytest.mark.parametrize(
        "duration, expected",
        [
            (CycleDuration.DAILY, 1),
            (CycleDuration.WEEKLY, 7),
            (CycleDuration.MONTHLY, 30),
            (CycleDuration.QUARTERLY, 91),
            (CycleDuration.ANNUAL, 365),
        ],
    )
    def test_named_durations(self, duration, expected):
        assert resolve_cycle_days(duration) == expected

    def test_accepts_string_values(self):
        assert resolve_cycle_days("weekly") == 7
        assert resolve_cycle_days("custom", 45) == 45

    def test_named_duration_ignores_custom_days(self):
        assert resolve_cycle_days(CycleDuration.MONTHLY, 12) == 30

    def test_custom_uses_positive_days(self):
        assert resolve_cycle_days(CycleDuration.CUSTOM, 28) == 28

    @pytest.mark.parametrize("custom_days", [None, 0, -5])
    def test_custom_falls_back_to_365(self, custom_days):
        assert resolve_cycle_days(CycleDuration.CUSTOM, custom_days) == 365

    def test_unknown_duration_raises(self):
        with pytest.raises(ValueError):
            resolve_cycle_days("fortnightly")


class TestDaysElapsed:
    def test_whole_days(self):
        base = datetime(2024, 1, 1)
        assert days_elapsed(datetime(2024, 1, 11), base) == pytest.approx(10.0)

    def test_fractional_days(self):
        base = datetime(2024, 1, 1)
        assert days_elapsed(base + timedelta(hours=12), base) == pytest.approx(0.5)

    def test_before_base_is_negative(self):
        base = datetime(2024, 1, 2)
        assert days_elapsed(datetime(2024, 1, 1), base) == pytest.approx(-1.0)


class TestCyclePosition:
    def test_cycle_start_is_zero(self):
        assert cycle_position(0.0, 7) == 0.0
        assert cycle_position(14.0, 7) == pytest.approx(0.0)

    def test_midway(self):
        assert cycle_position(3.5, 7) == pytest.approx(0.5)

    def test_negative_days_wrap_into_range(self):
        pos = cycle_position(-1.0, 7)
        assert pos == pytest.approx(6 / 7)
        assert 0.0 <= pos < 1.0

    def test_cycle_index(self):
        assert cycle_index(0.0, 7) == 0
        assert cycle_index(6.99, 7) == 0
        assert cycle_index(7.0, 7) == 1
        assert cycle_index(-0.5, 7) == -1
