"""
Tests for per-point color mapping.

Covers:
  - Color hex / rgb-string conversion and clamped lerp
  - every color mode's endpoint colors on hand-built series
  - flat series never divide by zero (neutral / calm colors)
  - unknown color modes fall back to DEFAULT_COLOR
  - analytics are computed at most once per colors_for_series() pass
"""

import pytest

from conftest import _series_from_prices

import spiral_lib.analysis.colors as colors_mod
from spiral_lib.analysis.colors import (
    CALM,
    DEFAULT_COLOR,
    GAIN,
    LOSS,
    MAX_DRAWDOWN,
    NEUTRAL,
    NO_DRAWDOWN,
    PRICE_HIGH,
    PRICE_LOW,
    VOLATILE,
    Color,
    color_for_point,
    colors_for_series,
)
from spiral_lib.analysis.series import compute_analytics
from spiral_lib.core.models import ColorMode, CycleDuration, SpiralConfig


def _cfg(mode, **kwargs) -> SpiralConfig:
    kwargs.setdefault("cycle_duration", CycleDuration.WEEKLY)
    return SpiralConfig(color_mode=mode, **kwargs)


def _hex(colors) -> list[str]:
    return [c.to_hex() for c in colors]


# ---------------------------------------------------------------------------
# Color value type
# ---------------------------------------------------------------------------


class TestColor:
    def test_hex_round_trip(self):
        assert Color.from_hex("#22c55e").to_hex() == "#22c55e"
        assert Color.from_hex("ff6600").to_hex() == "#ff6600"

    def test_invalid_hex(self):
        with pytest.raises(ValueError):
            Color.from_hex("#fff")

    def test_rgb_string(self):
        assert Color(1.0, 0.0, 0.5).to_rgb_string() == "rgb(255,0,128)"

    def test_lerp_endpoints_and_midpoint(self):
        black, white = Color(0.0, 0.0, 0.0), Color(1.0, 1.0, 1.0)
        assert black.lerp(white, 0.0) == black
        assert black.lerp(white, 1.0) == white
        assert black.lerp(white, 0.5) == Color(0.5, 0.5, 0.5)

    def test_lerp_clamps(self):
        black, white = Color(0.0, 0.0, 0.0), Color(1.0, 1.0, 1.0)
        assert black.lerp(white, -2.0) == black
        assert black.lerp(white, 7.0) == white


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


class TestPriceMode:
    def test_endpoints(self):
        series = _series_from_prices([10.0, 20.0, 15.0])
        result = colors_for_series(series, _cfg(ColorMode.PRICE))
        assert result[0] == PRICE_LOW
        assert result[1].to_hex() == PRICE_HIGH.to_hex()

    def test_midpoint(self):
        series = _series_from_prices([10.0, 20.0, 15.0])
        result = colors_for_series(series, _cfg("price"))
        assert result[2] == pytest.approx(PRICE_LOW.lerp(PRICE_HIGH, 0.5))

    def test_flat_series_stays_low(self, flat_series):
        result = colors_for_series(flat_series, _cfg(ColorMode.PRICE))
        assert set(result) == {PRICE_LOW}


class TestReturnMode:
    def test_gain_and_loss(self):
        series = _series_from_prices([100.0, 110.0, 99.0])
        result = colors_for_series(series, _cfg(ColorMode.RETURN))
        assert result[0] == NEUTRAL
        assert result[1].to_hex() == GAIN.to_hex()
        assert result[2].to_hex() == LOSS.to_hex()

    def test_flat_series_is_neutral(self, flat_series):
        result = colors_for_series(flat_series, _cfg(ColorMode.RETURN))
        assert len(result) == len(flat_series)
        assert all(c == NEUTRAL for c in result)

    def test_tiny_moves_stay_near_neutral(self):
        # max |r| below the epsilon floor: intensity is r / 0.001, not r / max|r|
        series = _series_from_prices([100.0, 100.005])
        result = colors_for_series(series, _cfg(ColorMode.RETURN))
        assert result[1] == pytest.approx(NEUTRAL.lerp(GAIN, 0.05), abs=1e-6)


class TestDrawdownMode:
    def test_endpoints(self):
        series = _series_from_prices([100.0, 120.0, 90.0, 150.0])
        result = colors_for_series(series, _cfg(ColorMode.DRAWDOWN))
        assert result[0] == NO_DRAWDOWN
        assert result[2].to_hex() == MAX_DRAWDOWN.to_hex()
        assert result[3] == NO_DRAWDOWN

    def test_rising_series_has_no_drawdown_color(self):
        series = _series_from_prices([1.0, 2.0, 3.0])
        assert set(colors_for_series(series, _cfg("drawdown"))) == {NO_DRAWDOWN}


class TestVolatilityMode:
    def test_warm_up_is_calm(self, daily_series):
        result = colors_for_series(daily_series, _cfg(ColorMode.VOLATILITY))
        assert all(c == CALM for c in result[:20])

    def test_peak_volatility_is_volatile(self, daily_series):
        cfg = _cfg(ColorMode.VOLATILITY)
        bundle = compute_analytics(daily_series, cfg)
        peak = int(bundle.volatilities.argmax())
        result = colors_for_series(daily_series, cfg, bundle)
        assert result[peak].to_hex() == VOLATILE.to_hex()

    def test_flat_series_is_calm(self, flat_series):
        result = colors_for_series(flat_series, _cfg(ColorMode.VOLATILITY))
        assert set(result) == {CALM}


class TestCyclePositionMode:
    def test_flat_series_is_neutral(self, flat_series):
        result = colors_for_series(flat_series, _cfg(ColorMode.CYCLE_POSITION))
        assert set(result) == {NEUTRAL}

    def test_strongest_bucket_hits_endpoint(self, daily_series):
        cfg = _cfg("cyclePosition")
        bundle = compute_analytics(daily_series, cfg)
        buckets = bundle.cycle_position_returns
        strongest = max(range(len(buckets)), key=lambda b: abs(buckets[b].avg_return))
        index = int(list(bundle.bucket_indices).index(strongest))
        avg = buckets[strongest].avg_return
        target = GAIN if avg >= 0 else LOSS
        intensity = abs(avg) / max(bundle.max_abs_bucket_return, 0.001)

        result = colors_for_series(daily_series, cfg, bundle)
        assert result[index] == pytest.approx(NEUTRAL.lerp(target, intensity))

    def test_same_bucket_same_color(self, daily_series):
        cfg = _cfg(ColorMode.CYCLE_POSITION)
        bundle = compute_analytics(daily_series, cfg)
        result = colors_for_series(daily_series, cfg, bundle)
        # weekly cycle on daily bars: index i and i + 7 share a bucket
        for i in range(0, 50):
            assert bundle.bucket_indices[i] == bundle.bucket_indices[i + 7]
            assert result[i] == result[i + 7]


class TestUnknownMode:
    def test_config_keeps_unknown_string(self):
        cfg = _cfg("rainbow")
        assert cfg.color_mode == "rainbow"

    def test_series_gets_default_color(self, daily_series):
        result = colors_for_series(daily_series, _cfg("rainbow"))
        assert len(result) == len(daily_series)
        assert set(result) == {DEFAULT_COLOR}

    def test_single_point_default(self, daily_series):
        assert color_for_point(3, daily_series, "rainbow", _cfg("rainbow")) == DEFAULT_COLOR

    def test_unknown_mode_skips_analytics(self, daily_series, monkeypatch):
        def _boom(*args, **kwargs):
            raise AssertionError("analytics should not be computed")

        monkeypatch.setattr(colors_mod, "compute_analytics", _boom)
        colors_for_series(daily_series, _cfg("rainbow"))


# ---------------------------------------------------------------------------
# Analytics reuse
# ---------------------------------------------------------------------------


class TestAnalyticsReuse:
    @pytest.mark.parametrize("mode", list(ColorMode))
    def test_point_matches_series(self, daily_series, mode):
        cfg = _cfg(mode)
        bundle = compute_analytics(daily_series, cfg)
        full = colors_for_series(daily_series, cfg, bundle)
        for i in (0, 25, 250, len(daily_series) - 1):
            assert color_for_point(i, daily_series, mode, cfg, bundle) == full[i]
            assert color_for_point(i, daily_series, mode, cfg) == full[i]

    def test_computes_once_without_bundle(self, daily_series, monkeypatch):
        calls = []
        real = colors_mod.compute_analytics

        def _counting(*args, **kwargs):
            calls.append(1)
            return real(*args, **kwargs)

        monkeypatch.setattr(colors_mod, "compute_analytics", _counting)
        colors_for_series(daily_series, _cfg(ColorMode.VOLATILITY))
        assert len(calls) == 1

    def test_never_computes_with_bundle(self, daily_series, monkeypatch):
        cfg = _cfg(ColorMode.DRAWDOWN)
        bundle = compute_analytics(daily_series, cfg)
        calls = []
        monkeypatch.setattr(
            colors_mod, "compute_analytics", lambda *a, **k: calls.append(1)
        )
        colors_for_series(daily_series, cfg, bundle)
        assert calls == []

    def test_length_mismatch_raises(self, daily_series):
        cfg = _cfg(ColorMode.RETURN)
        bundle = compute_analytics(daily_series[:10], cfg)
        with pytest.raises(ValueError):
            colors_for_series(daily_series, cfg, bundle)

    def test_empty_series(self):
        assert colors_for_series([], _cfg(ColorMode.RETURN)) == []
