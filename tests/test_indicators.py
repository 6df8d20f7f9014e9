"""Tests for moving averages and Wilder oscillators."""

import pytest

from perpsnap.data.models import Candle
from perpsnap.indicators.moving_average import ema, sma
from perpsnap.indicators.oscillators import atr, macd, rsi, true_range

# 27 flat closes then a step up: EMA seeded from the first `period` closes is
# exactly 10 before the step, so after three 20s it is 20 - 10 * (1 - k) ** 3.
STEP_CLOSES = [10.0] * 27 + [20.0] * 3


def _bar(h: float, l: float, c: float, o: float = 0.0) -> Candle:
    return Candle(open_time=0, o=o or c, h=h, l=l, c=c, v=1.0, close_time=1)


@pytest.mark.parametrize("period", [1, 2, 3, 5, 14, 21, 50])
def test_sma_returns_zero_when_history_too_short(make_candles, period: int) -> None:
    candles = make_candles([100.0] * (period - 1)) if period > 1 else []
    assert sma(candles, period) == 0.0


def test_sma_uses_last_window(make_candles) -> None:
    candles = make_candles([1, 2, 3, 4, 5, 6])
    assert sma(candles, 3) == pytest.approx(5.0)
    assert sma(candles, 6) == pytest.approx(3.5)


def test_ema_returns_zero_when_history_too_short(make_candles) -> None:
    assert ema(make_candles([1, 2, 3]), 4) == 0.0


def test_ema_golden_values_on_step_fixture(make_candles) -> None:
    candles = make_candles(STEP_CLOSES)
    assert len(candles) == 30

    assert ema(candles, 3) == pytest.approx(18.75)
    assert ema(candles, 10) == pytest.approx(14.5229151014275)
    assert ema(candles, 12) == pytest.approx(20 - 10 * (11 / 13) ** 3)
    assert ema(candles, 26) == pytest.approx(20 - 10 * (25 / 27) ** 3)


def test_ema_seeds_from_first_candles_not_latest(make_candles) -> None:
    candles = make_candles(STEP_CLOSES)
    # period == len: the seed over the whole slice is the result, no walk
    assert ema(candles, 30) == pytest.approx(11.0)
    # a trailing SMA seed over the last 3 closes would give 20.0
    assert ema(candles, 3) != pytest.approx(20.0)


def test_ema_short_walk(make_candles) -> None:
    # seed = mean(1, 2, 3) = 2, k = 0.5 -> 3 -> 4
    assert ema(make_candles([1, 2, 3, 4, 5]), 3) == pytest.approx(4.0)


def test_macd_is_difference_of_emas_over_same_slice(make_candles) -> None:
    candles = make_candles(STEP_CLOSES)
    expected = 10 * ((25 / 27) ** 3 - (11 / 13) ** 3)
    assert macd(candles) == pytest.approx(expected)
    assert macd(candles) == pytest.approx(ema(candles, 12) - ema(candles, 26))


def test_macd_needs_26_candles(make_candles) -> None:
    assert macd(make_candles(STEP_CLOSES[:25])) == 0.0
    assert macd(make_candles([10.0] * 26)) == pytest.approx(0.0)


def test_rsi_strictly_increasing_is_100(make_candles) -> None:
    assert rsi(make_candles([float(i) for i in range(1, 31)]), 14) == 100.0


def test_rsi_strictly_decreasing_is_0(make_candles) -> None:
    assert rsi(make_candles([float(i) for i in range(30, 0, -1)]), 14) == pytest.approx(0.0)


def test_rsi_needs_more_than_period_candles(make_candles) -> None:
    assert rsi(make_candles([float(i) for i in range(1, 15)]), 14) == 0.0


def test_rsi_wilder_update(make_candles) -> None:
    # period 2: seed gain = loss = 0.5; +1 -> gain 0.75, loss 0.25 -> rs 3 -> 75
    assert rsi(make_candles([1, 2, 1, 2]), 2) == pytest.approx(75.0)


def test_rsi_flat_series_counts_as_no_loss() -> None:
    flat = [_bar(11, 9, 10) for _ in range(20)]
    assert rsi(flat, 14) == 100.0


def test_true_range_takes_largest_term() -> None:
    assert true_range(_bar(11, 9, 10), prev_close=10) == pytest.approx(2.0)
    # gap up: |high - prev_close| dominates
    assert true_range(_bar(15, 14, 14.5), prev_close=10) == pytest.approx(5.0)
    # gap down: |low - prev_close| dominates
    assert true_range(_bar(8, 7, 7.5), prev_close=10) == pytest.approx(3.0)


def test_true_range_ignores_open_and_tie_order() -> None:
    a = _bar(12, 12, 12, o=11)
    b = _bar(12, 12, 12, o=13)
    assert true_range(a, 10) == true_range(b, 10) == pytest.approx(2.0)


def test_atr_seed_and_wilder_smoothing() -> None:
    candles = [_bar(11, 9, 10) for _ in range(4)] + [_bar(15, 14, 14.5)]
    # TRs 1..4 = [2, 2, 2, 5]; seed over 1..3 = 2; then (2 * 2 + 5) / 3
    assert atr(candles, 3) == pytest.approx(3.0)


def test_atr_needs_more_than_period_candles() -> None:
    candles = [_bar(11, 9, 10) for _ in range(3)]
    assert atr(candles, 3) == 0.0
    assert atr(candles + [_bar(11, 9, 10)], 3) == pytest.approx(2.0)


def test_atr_unchanged_when_only_opens_differ() -> None:
    base = [_bar(11, 9, 10, o=10) for _ in range(6)]
    other = [_bar(11, 9, 10, o=9.5 if i % 2 else 10.5) for i in range(6)]
    assert atr(base, 3) == pytest.approx(atr(other, 3))
