"""
Moving average recurrences.

All functions take values in reverse-chronological order (index 0 is the
most recent value) and return results in the same order. A window that
cannot be filled yields an empty list.
"""

from typing import List, Sequence


def require_positive(periods: int) -> None:
    """
    Validate an indicator period.

    Raises:
        ValueError: If periods is not a positive integer
    """
    if periods <= 0:
        raise ValueError(f"The periods argument must be a positive integer, got {periods}")


def sma(values: Sequence[float], periods: int) -> List[float]:
    """
    Simple moving average.

    The window sum is seeded over the oldest ``periods`` values and then
    slid toward index 0, so the cost is linear in the input length.

    Args:
        values: Input values, newest first
        periods: Averaging window

    Returns:
        Averages, newest first, of length ``len(values) - periods + 1``
    """
    require_positive(periods)
    if periods == 1:
        return list(values)
    new_length = len(values) - periods + 1
    if new_length <= 0:
        return []

    result = [0.0] * new_length
    i = new_length - 1
    coeff = 1.0 / periods
    value = sum(values[i:i + periods]) * coeff
    result[i] = value
    for i in range(new_length - 2, -1, -1):
        value += (values[i] - values[i + periods]) * coeff
        result[i] = value
    return result


def _smoothed(values: Sequence[float], periods: int, alpha: float) -> List[float]:
    new_length = len(values) - periods + 1
    if new_length <= 0:
        return []

    result = [0.0] * new_length
    i = new_length - 1
    value = sum(values[i:i + periods]) / periods
    result[i] = value
    for i in range(new_length - 2, -1, -1):
        value += (values[i] - value) * alpha
        result[i] = value
    return result


def ema(values: Sequence[float], periods: int) -> List[float]:
    """
    Exponential moving average with ``alpha = 2 / (periods + 1)``.

    Seeded with the simple average of the oldest ``periods`` values.
    """
    require_positive(periods)
    return _smoothed(values, periods, 2.0 / (periods + 1))


def wilders(values: Sequence[float], periods: int) -> List[float]:
    """Wilder smoothing, an EMA with ``alpha = 1 / periods``."""
    require_positive(periods)
    return _smoothed(values, periods, 1.0 / periods)
