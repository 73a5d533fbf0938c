"""
OHLCV bar value type.
"""

from dataclasses import dataclass
from datetime import datetime

from ..utils.time import to_datetime


@dataclass(frozen=True)
class Bar:
    """
    Single OHLCV bar (immutable).

    ``time`` is the closing instant of the bar in UTC microseconds since the
    epoch. Bars compare equal field by field and sort by ``time``.
    """
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    open_interest: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'time', int(self.time))
        for name in ('open', 'high', 'low', 'close', 'volume'):
            object.__setattr__(self, name, float(getattr(self, name)))
        object.__setattr__(self, 'open_interest', int(self.open_interest))

        if self.high < self.low:
            raise ValueError("High must be >= Low")
        if self.high < self.open or self.high < self.close:
            raise ValueError("High must be >= Open and Close")
        if self.low > self.open or self.low > self.close:
            raise ValueError("Low must be <= Open and Close")

    @classmethod
    def of_price(cls, time: int, price: float, volume: float = 0.0) -> "Bar":
        """Flat bar where all four prices are equal."""
        return cls(time, price, price, price, price, volume)

    def __lt__(self, other):
        if not isinstance(other, Bar):
            return NotImplemented
        return self.time < other.time

    @property
    def datetime(self) -> datetime:
        """Closing instant as an aware UTC datetime."""
        return to_datetime(self.time)

    @property
    def is_bullish(self) -> bool:
        return self.open < self.close

    @property
    def is_bearish(self) -> bool:
        return self.open > self.close

    @property
    def is_doji(self) -> bool:
        return self.open == self.close

    @property
    def weighted_close(self) -> float:
        return (2 * self.close + self.high + self.low) / 4

    @property
    def average_price(self) -> float:
        return (self.open + self.high + self.low + self.close) / 4

    @property
    def typical_price(self) -> float:
        return (self.close + self.high + self.low) / 3

    @property
    def median_price(self) -> float:
        return (self.high + self.low) / 2

    @property
    def year(self) -> int:
        return self.datetime.year

    @property
    def month(self) -> int:
        return self.datetime.month

    @property
    def day(self) -> int:
        return self.datetime.day

    @property
    def hour(self) -> int:
        return self.datetime.hour

    @property
    def minute(self) -> int:
        return self.datetime.minute

    @property
    def second(self) -> int:
        return self.datetime.second

    @property
    def day_of_week(self) -> int:
        """ISO day of week, Monday is 1."""
        return self.datetime.isoweekday()

    @property
    def day_of_year(self) -> int:
        return self.datetime.timetuple().tm_yday

    def __str__(self) -> str:
        text = (f'"{self.datetime.replace(tzinfo=None).isoformat()}": '
                f'{{OHLC: [{self.open},{self.high},{self.low},{self.close}]')
        if self.volume != 0.0:
            text += f", V: {self.volume}"
        if self.open_interest != 0:
            text += f", OI: {self.open_interest}"
        return text + "}"
