"""
Relative Strength Index (RSI) indicator.
"""

from typing import List, Sequence

from .moving_average import require_positive

NEUTRAL_RSI = 50.0


def differences(values: Sequence[float]) -> List[float]:
    """
    Successive backward differences ``values[i] - values[i + 1]``.

    Args:
        values: Input values, newest first

    Returns:
        Differences, newest first, one shorter than the input
    """
    if len(values) <= 1:
        return []
    return [values[i] - values[i + 1] for i in range(len(values) - 1)]


def rsi(values: Sequence[float], periods: int = 14) -> List[float]:
    """
    Compute Wilder's RSI.

    Average gain and loss are seeded over the oldest ``periods``
    differences and smoothed toward index 0. When both averages are zero
    the previous RSI value is repeated (50.0 if there is none yet).

    Args:
        values: Input values, newest first
        periods: RSI period (default 14)

    Returns:
        RSI values, newest first, of length ``len(values) - 1 - periods``
    """
    require_positive(periods)
    diff = differences(values)
    length = len(diff)
    if length - periods <= 0:
        return []

    gain = 0.0
    loss = 0.0
    for i in range(1, periods + 1):
        val = diff[length - i]
        if val > 0:
            gain += val
        else:
            loss -= val
    gain /= periods
    loss /= periods

    result = [0.0] * (length - periods)
    prev = NEUTRAL_RSI
    for i in range(length - periods - 1, -1, -1):
        val = diff[i]
        up = val if val > 0 else 0.0
        down = -val if val < 0 else 0.0
        gain = (gain * (periods - 1) + up) / periods
        loss = (loss * (periods - 1) + down) / periods
        if gain + loss != 0:
            prev = 100.0 * gain / (gain + loss)
        result[i] = prev
    return result
