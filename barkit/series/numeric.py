"""
Immutable numeric time series.

Values are stored in reverse-chronological order: index 0 is the most
recent value and index ``length - 1`` the oldest. Every operation returns
a new series.
"""

import math
import operator
from numbers import Real
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Union

import pandas as pd

from ..indicators import moving_average, rsi as rsi_indicator
from ..models.granularity import Granularity, require_same

Operand = Union["NumericSeries", float]


def divide(x: float, y: float) -> float:
    """IEEE 754 division: a zero divisor yields a signed infinity, or NaN for 0/0."""
    if y == 0:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


class NumericSeries:
    """Fixed-length series of floats tagged with a granularity."""

    def __init__(self, granularity: Granularity, values: Iterable[float] = ()):
        """
        Initialize series.

        Args:
            granularity: Granularity of every value
            values: Values, newest first
        """
        self._granularity = granularity
        self._values = tuple(float(v) for v in values)

    @classmethod
    def empty(cls, granularity: Granularity) -> "NumericSeries":
        return cls(granularity)

    @classmethod
    def generate(cls, granularity: Granularity, length: int,
                 generator: Callable[[int], float]) -> "NumericSeries":
        """Series whose value at index ``i`` is ``generator(i)``."""
        return cls(granularity, (generator(i) for i in range(length)))

    @property
    def granularity(self) -> Granularity:
        return self._granularity

    @property
    def length(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __eq__(self, other):
        if not isinstance(other, NumericSeries):
            return NotImplemented
        return self._granularity == other._granularity and self._values == other._values

    def __hash__(self):
        return hash((self._granularity, self._values))

    def __repr__(self) -> str:
        return f"NumericSeries({self._granularity.code}, {list(self._values)})"

    # ---- access ----

    def get(self, i: int) -> float:
        """
        Value at index ``i`` (0 is the most recent).

        Raises:
            IndexError: If ``i`` is outside ``[0, length)``
        """
        if i < 0 or i >= len(self._values):
            raise IndexError(f"Index {i} out of range for series of length {len(self._values)}")
        return self._values[i]

    def get_or_default(self, i: int, default: float) -> float:
        if self.is_undefined(i):
            return default
        return self._values[i]

    def get_first(self) -> float:
        """Chronologically oldest value."""
        return self.get(len(self._values) - 1)

    def get_last(self) -> float:
        """Chronologically newest value."""
        return self.get(0)

    def is_undefined(self, i: int) -> bool:
        return i < 0 or i >= len(self._values)

    def to_list(self, start: int = 0, end: Optional[int] = None) -> List[float]:
        return list(self._values[start:end])

    def to_pandas(self, times: Optional[Sequence[int]] = None,
                  name: Optional[str] = None) -> pd.Series:
        """
        Export as a pandas Series, newest first.

        Args:
            times: Optional epoch-microsecond timestamps aligned with the values
            name: Optional series name

        Returns:
            pandas Series, indexed by UTC timestamps when ``times`` is given

        Raises:
            ValueError: If fewer timestamps than values are given
        """
        index = None
        if times is not None:
            times = list(times)
            if len(times) < len(self._values):
                raise ValueError(
                    f"Expected at least {len(self._values)} timestamps, got {len(times)}"
                )
            index = pd.to_datetime(times[:len(self._values)], unit="us", utc=True)
        return pd.Series(list(self._values), index=index, name=name, dtype="float64")

    # ---- elementwise ----

    def _derive(self, values: Iterable[float]) -> "NumericSeries":
        return NumericSeries(self._granularity, values)

    def combine(self, func: Callable[[float, float], float], other: Operand) -> "NumericSeries":
        """
        Apply a binary function elementwise.

        Against another series the result has the length of the shorter
        operand, matched index for index from 0. Against a scalar every
        value is combined with it.

        Raises:
            ValueError: If the other series has a different granularity
        """
        if isinstance(other, NumericSeries):
            require_same(self._granularity, other._granularity)
            return self._derive(map(func, self._values, other._values))
        return self._derive(func(v, other) for v in self._values)

    def map(self, func: Callable[[float], float]) -> "NumericSeries":
        return self._derive(func(v) for v in self._values)

    def add(self, other: Operand) -> "NumericSeries":
        return self.combine(operator.add, other)

    def sub(self, other: Operand) -> "NumericSeries":
        return self.combine(operator.sub, other)

    def mul(self, other: Operand) -> "NumericSeries":
        return self.combine(operator.mul, other)

    def div(self, other: Operand) -> "NumericSeries":
        return self.combine(divide, other)

    def minimum(self, other: Operand) -> "NumericSeries":
        return self.combine(min, other)

    def maximum(self, other: Operand) -> "NumericSeries":
        return self.combine(max, other)

    def rsub(self, value: float) -> "NumericSeries":
        """``value - self`` for every element."""
        return self.map(lambda v: value - v)

    def rdiv(self, value: float) -> "NumericSeries":
        """``value / self`` for every element."""
        return self.map(lambda v: divide(value, v))

    def _dispatch(self, method, other):
        if isinstance(other, (NumericSeries, Real)):
            return method(other)
        return NotImplemented

    def __add__(self, other):
        return self._dispatch(self.add, other)

    def __sub__(self, other):
        return self._dispatch(self.sub, other)

    def __mul__(self, other):
        return self._dispatch(self.mul, other)

    def __truediv__(self, other):
        return self._dispatch(self.div, other)

    def __radd__(self, other):
        return self._dispatch(self.add, other)

    def __rmul__(self, other):
        return self._dispatch(self.mul, other)

    def __rsub__(self, other):
        return self._dispatch(self.rsub, other)

    def __rtruediv__(self, other):
        return self._dispatch(self.rdiv, other)

    def __neg__(self):
        return self.map(operator.neg)

    # ---- shifting ----

    def ref(self, periods: int) -> "NumericSeries":
        """
        Shift the index window toward the oldest end.

        ``ref(0)`` is ``self``; ``ref(-k)`` drops the ``k`` most recent values.

        Raises:
            ValueError: If ``periods`` is positive
        """
        if periods > 0:
            raise ValueError(f"The periods argument cannot be positive, got {periods}")
        if periods == 0:
            return self
        if len(self._values) + periods <= 0:
            return self.empty(self._granularity)
        return NumericSeries(self._granularity, self._values[-periods:])

    # ---- indicators ----

    def sma(self, periods: int) -> "NumericSeries":
        """Simple moving average, length ``length - periods + 1``."""
        return self._derive(moving_average.sma(self._values, periods))

    def ema(self, periods: int) -> "NumericSeries":
        """Exponential moving average, length ``length - periods + 1``."""
        return self._derive(moving_average.ema(self._values, periods))

    def wilders(self, periods: int) -> "NumericSeries":
        """Wilder moving average, length ``length - periods + 1``."""
        return self._derive(moving_average.wilders(self._values, periods))

    def dema(self, periods: int) -> "NumericSeries":
        """Double exponential moving average, length ``length - 2*periods + 2``."""
        ema1 = self.ema(periods)
        ema2 = ema1.ema(periods)
        return ema1.combine(lambda v, w: 2 * v - w, ema2)

    def tema(self, periods: int) -> "NumericSeries":
        """Triple exponential moving average, length ``length - 3*periods + 3``."""
        ema1 = self.ema(periods)
        ema2 = ema1.ema(periods)
        ema3 = ema2.ema(periods)
        return ema1.combine(lambda v, w: 3 * v - 3 * w, ema2).add(ema3)

    def tma(self, periods: int) -> "NumericSeries":
        """Triangular (double smoothed simple) moving average."""
        return self.sma(periods).sma(periods)

    def differences(self) -> "NumericSeries":
        """Successive differences, length ``length - 1``."""
        return self._derive(rsi_indicator.differences(self._values))

    def rsi(self, periods: int) -> "NumericSeries":
        """Wilder RSI, length ``length - 1 - periods``."""
        return self._derive(rsi_indicator.rsi(self._values, periods))
