from __future__ import annotations

from typing import Sequence

RISING = "rising"
FALLING = "falling"
FLAT = "flat"


def is_rising(series: Sequence[float]) -> bool:
    if len(series) < 2:
        return False
    return all(series[i] > series[i - 1] for i in range(1, len(series)))


def is_falling(series: Sequence[float]) -> bool:
    if len(series) < 2:
        return False
    return all(series[i] < series[i - 1] for i in range(1, len(series)))


def classify_trend(series: Sequence[float]) -> str:
    """Strictly up at every step -> rising, strictly down -> falling, anything else -> flat."""
    if is_rising(series):
        return RISING
    if is_falling(series):
        return FALLING
    return FLAT
