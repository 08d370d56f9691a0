"""
Easing

Curves mapping normalized time [0, 1] onto normalized progress [0, 1].
"""

import math
from enum import Enum
from typing import Callable, Dict


class Easing(Enum):
    """Supported easing curves."""
    LINEAR = "linear"
    QUADRATIC_IN_OUT = "quadratic_in_out"
    CUBIC_IN_OUT = "cubic_in_out"
    SINE_IN_OUT = "sine_in_out"

    def __call__(self, t: float) -> float:
        return _CURVES[self](_clamp01(t))


def _clamp01(t: float) -> float:
    return 0.0 if t < 0.0 else 1.0 if t > 1.0 else t


def linear(t: float) -> float:
    return t


def quadratic_in_out(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - 2.0 * (1.0 - t) * (1.0 - t)


def cubic_in_out(t: float) -> float:
    if t < 0.5:
        return 4.0 * t * t * t
    u = 1.0 - t
    return 1.0 - 4.0 * u * u * u


def sine_in_out(t: float) -> float:
    return 0.5 - 0.5 * math.cos(math.pi * t)


_CURVES: Dict[Easing, Callable[[float], float]] = {
    Easing.LINEAR: linear,
    Easing.QUADRATIC_IN_OUT: quadratic_in_out,
    Easing.CUBIC_IN_OUT: cubic_in_out,
    Easing.SINE_IN_OUT: sine_in_out,
}
