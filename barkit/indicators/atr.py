"""
True range, the input of the Average True Range (ATR) indicator.
"""

from typing import List, Sequence

from ..models.bar import Bar


def true_range(bars: Sequence[Bar]) -> List[float]:
    """
    Compute true ranges.

    Each bar is paired with the close of the chronologically preceding bar:
    ``max(high, prev_close) - min(low, prev_close)``.

    Args:
        bars: Bars in reverse-chronological order (index 0 is the latest)

    Returns:
        True ranges, newest first, one shorter than the input
    """
    new_length = len(bars) - 1
    if new_length <= 0:
        return []

    result = [0.0] * new_length
    prev_close = bars[new_length].close
    for i in range(new_length - 1, -1, -1):
        bar = bars[i]
        result[i] = max(bar.high, prev_close) - min(bar.low, prev_close)
        prev_close = bar.close
    return result
