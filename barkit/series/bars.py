"""
Bar series for a single instrument.

Bars are stored newest first (index 0 is the latest bar). Field projections
are computed on first access and memoized; the cache may be evicted at any
time and is rebuilt on demand.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Iterator, List, Sequence, Union

import pandas as pd

from ..indicators.atr import true_range
from ..models.bar import Bar
from ..models.granularity import Granularity
from ..utils.time import as_epoch_micro
from .numeric import NumericSeries

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ("time", "open", "high", "low", "close", "volume", "open_interest")


class OpenSeries(NumericSeries):
    """
    Opening prices whose one-step forward shift is look-ahead free.

    ``ref(-1)`` pairs each bar with the open of the following bar; the
    latest position, whose next bar has not opened yet, takes the latest
    close instead.
    """

    def __init__(self, granularity: Granularity, values: Iterable[float], latest_close: float):
        super().__init__(granularity, values)
        self._latest_close = latest_close

    def ref(self, periods: int) -> NumericSeries:
        if periods == -1:
            if not self._values:
                return NumericSeries.empty(self.granularity)
            return NumericSeries(self.granularity, (self._latest_close,) + self._values[:-1])
        return super().ref(periods)


class BarSeries:
    """Immutable reverse-chronological sequence of bars."""

    def __init__(self, symbol: Any, granularity: Granularity, bars: Sequence[Bar]):
        """
        Initialize bar series.

        Args:
            symbol: Instrument identity
            granularity: Granularity of the bars
            bars: Bars, newest first
        """
        self.symbol = symbol
        self.granularity = granularity
        self._bars = tuple(bars)
        self._cache: Dict[str, NumericSeries] = {}

    @classmethod
    def of(cls, symbol: Any, granularity: Granularity, bars: Iterable[Bar]) -> "BarSeries":
        """
        Build a series from bars given oldest first.

        Args:
            symbol: Instrument identity
            granularity: Granularity of the bars
            bars: Bars in chronological order (list or iterator)

        Returns:
            BarSeries with the latest bar at index 0
        """
        ordered = list(bars)
        ordered.reverse()
        return cls(symbol, granularity, ordered)

    @classmethod
    def from_frame(cls, symbol: Any, granularity: Granularity, frame: pd.DataFrame) -> "BarSeries":
        """
        Build a series from a DataFrame with one row per bar, oldest first.

        The ``time`` column holds epoch microseconds or datetimes; ``volume``
        and ``open_interest`` are optional.
        """
        times = frame["time"]
        if pd.api.types.is_datetime64_any_dtype(times):
            stamps = pd.to_datetime(times, utc=True)
            times = (stamps - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(microseconds=1)
        volumes = frame["volume"] if "volume" in frame else [0.0] * len(frame)
        interests = frame["open_interest"] if "open_interest" in frame else [0] * len(frame)

        bars = [
            Bar(int(t), o, h, lo, c, v, int(oi))
            for t, o, h, lo, c, v, oi in zip(
                times, frame["open"], frame["high"], frame["low"], frame["close"],
                volumes, interests,
            )
        ]
        return cls.of(symbol, granularity, bars)

    # ---- access ----

    @property
    def length(self) -> int:
        return len(self._bars)

    def __len__(self) -> int:
        return len(self._bars)

    def __iter__(self) -> Iterator[Bar]:
        return iter(self._bars)

    def __eq__(self, other):
        if not isinstance(other, BarSeries):
            return NotImplemented
        return (self.symbol == other.symbol
                and self.granularity == other.granularity
                and self._bars == other._bars)

    def __hash__(self):
        return hash((self.symbol, self.granularity, self._bars))

    def __repr__(self) -> str:
        return f"BarSeries[{self.symbol}, {self.granularity.code}, {len(self._bars)} bars]"

    def get(self, index: int) -> Bar:
        """
        Bar at ``index`` (0 is the latest).

        Raises:
            IndexError: If ``index`` is outside ``[0, length)``
        """
        if index < 0 or index >= len(self._bars):
            raise IndexError(f"Bar index {index} out of range for series of length {len(self._bars)}")
        return self._bars[index]

    def get_first(self) -> Bar:
        """Chronologically oldest bar."""
        return self.get(len(self._bars) - 1)

    def get_last(self) -> Bar:
        """Chronologically newest bar."""
        return self.get(0)

    def time_at(self, index: int) -> int:
        return self.get(index).time

    def is_undefined(self, index: int) -> bool:
        return index < 0 or index >= len(self._bars)

    def to_list(self) -> List[Bar]:
        return list(self._bars)

    def find_index(self, time: Union[int, datetime]) -> int:
        """
        Binary search for a bar by closing time.

        Args:
            time: Epoch microseconds or datetime (naive means UTC)

        Returns:
            Index of a bar with exactly this time, otherwise
            ``-(insertion_point) - 1`` where ``insertion_point`` keeps the
            descending time order
        """
        key = as_epoch_micro(time)
        low, high = 0, len(self._bars) - 1
        while low <= high:
            mid = (low + high) // 2
            mid_time = self._bars[mid].time
            if mid_time > key:
                low = mid + 1
            elif mid_time < key:
                high = mid - 1
            else:
                return mid
        return -(low + 1)

    def trim_to_length(self, length: int) -> "BarSeries":
        """
        Keep only the ``length`` most recent bars.

        Raises:
            ValueError: If ``length`` is negative
        """
        if length < 0:
            raise ValueError(f"Length must be non-negative, got {length}")
        if length >= len(self._bars):
            return self
        return BarSeries(self.symbol, self.granularity, self._bars[:length])

    # ---- projections ----

    def _projection(self, name: str, compute: Callable[[], NumericSeries]) -> NumericSeries:
        series = self._cache.get(name)
        if series is None:
            series = compute()
            self._cache[name] = series
        return series

    def evict_cache(self) -> None:
        """Drop memoized projections; they are recomputed on next access."""
        if self._cache:
            logger.debug("projection_cache_evicted", extra={
                "symbol": str(self.symbol),
                "entries": len(self._cache)
            })
        self._cache = {}

    def map(self, func: Callable[[Bar], float]) -> NumericSeries:
        return NumericSeries(self.granularity, (func(bar) for bar in self._bars))

    def opens(self) -> NumericSeries:
        def compute():
            latest_close = self._bars[0].close if self._bars else 0.0
            return OpenSeries(self.granularity, (bar.open for bar in self._bars), latest_close)
        return self._projection("open", compute)

    def highs(self) -> NumericSeries:
        return self._projection("high", lambda: self.map(lambda bar: bar.high))

    def lows(self) -> NumericSeries:
        return self._projection("low", lambda: self.map(lambda bar: bar.low))

    def closes(self) -> NumericSeries:
        return self._projection("close", lambda: self.map(lambda bar: bar.close))

    def volumes(self) -> NumericSeries:
        return self._projection("volume", lambda: self.map(lambda bar: bar.volume))

    def open_interests(self) -> NumericSeries:
        return self._projection("open_interest", lambda: self.map(lambda bar: bar.open_interest))

    def weighted_close(self) -> NumericSeries:
        return self.map(lambda bar: bar.weighted_close)

    def average_price(self) -> NumericSeries:
        return self.map(lambda bar: bar.average_price)

    def typical_price(self) -> NumericSeries:
        return self.map(lambda bar: bar.typical_price)

    def median_price(self) -> NumericSeries:
        return self.map(lambda bar: bar.median_price)

    # ---- indicators ----

    def true_range(self) -> NumericSeries:
        """True range against the previous close, length ``length - 1``."""
        return NumericSeries(self.granularity, true_range(self._bars))

    def atr(self, periods: int) -> NumericSeries:
        """Average true range (Wilder smoothing of the true range)."""
        return self.true_range().wilders(periods)

    def sma(self, periods: int) -> NumericSeries:
        return self.closes().sma(periods)

    def ema(self, periods: int) -> NumericSeries:
        return self.closes().ema(periods)

    def dema(self, periods: int) -> NumericSeries:
        return self.closes().dema(periods)

    def tema(self, periods: int) -> NumericSeries:
        return self.closes().tema(periods)

    def tma(self, periods: int) -> NumericSeries:
        return self.closes().tma(periods)

    def wilders(self, periods: int) -> NumericSeries:
        return self.closes().wilders(periods)

    def rsi(self, periods: int) -> NumericSeries:
        return self.closes().rsi(periods)

    # ---- export ----

    def to_frame(self) -> pd.DataFrame:
        """
        Export as a DataFrame, oldest row first, indexed by UTC datetime.

        The result round-trips through :meth:`from_frame`.
        """
        chronological = self._bars[::-1]
        frame = pd.DataFrame(
            [[getattr(bar, column) for column in FRAME_COLUMNS] for bar in chronological],
            columns=list(FRAME_COLUMNS),
        )
        frame["time"] = frame["time"].astype("int64")
        frame.index = pd.DatetimeIndex(pd.to_datetime(frame["time"], unit="us", utc=True),
                                       name="datetime")
        return frame
