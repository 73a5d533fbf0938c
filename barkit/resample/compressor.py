"""
Granularity compression (resampling) of bar series.

Bars are folded oldest to newest into buckets of the target granularity.
Bar times are closing instants, so a bar ending exactly on a bucket
boundary belongs to the bucket that just closed.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from configs import config_loader
from ..models.bar import Bar
from ..models.granularity import DAILY, Granularity
from ..series.bars import BarSeries
from ..utils.time import MICROS_PER_DAY, MICROS_PER_SECOND, to_datetime, to_epoch_micro

logger = logging.getLogger(__name__)

# Monday, January 1st, 2001 00:00 UTC
REFERENCE_EPOCH = to_epoch_micro(datetime(2001, 1, 1, tzinfo=timezone.utc))
DEFAULT_REFERENCE_YEAR = 2001


@dataclass
class _Aggregate:
    """Bar under construction for the currently open bucket."""
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    open_interest: int

    @classmethod
    def start(cls, bar: Bar) -> "_Aggregate":
        return cls(bar.time, bar.open, bar.high, bar.low, bar.close, bar.volume, bar.open_interest)

    def update(self, bar: Bar) -> None:
        if bar.high > self.high:
            self.high = bar.high
        if bar.low < self.low:
            self.low = bar.low
        self.close = bar.close
        self.volume += bar.volume
        self.open_interest = bar.open_interest
        self.time = bar.time

    def to_bar(self, time: Optional[int] = None) -> Bar:
        return Bar(self.time if time is None else time, self.open, self.high, self.low,
                   self.close, self.volume, self.open_interest)


class Compressor:
    """Compresses bar series into coarser granularities."""

    def __init__(self, reference_year: int = DEFAULT_REFERENCE_YEAR, midnight_adjustment: bool = True):
        """
        Initialize compressor.

        Args:
            reference_year: Anchor year of month-based buckets
            midnight_adjustment: Move intraday-to-daily closing times that land
                exactly on midnight back by one microsecond
        """
        if reference_year < 1:
            raise ValueError(f"reference_year must be positive, got {reference_year}")
        self.reference_year = reference_year
        self.midnight_adjustment = midnight_adjustment

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Compressor":
        """Build from a ``resampling`` configuration dict, defaulting missing keys."""
        return cls(
            reference_year=int(config.get("reference_year", DEFAULT_REFERENCE_YEAR)),
            midnight_adjustment=bool(config.get("midnight_adjustment", True)),
        )

    def compress(self, target: Granularity, source: BarSeries) -> BarSeries:
        """
        Compress ``source`` into the ``target`` granularity.

        Args:
            target: Target granularity
            source: Bar series to compress

        Returns:
            Bar series at the target granularity (``source`` itself when
            the granularities already match)

        Raises:
            ValueError: If ``target`` is not reachable from the source granularity
        """
        frame = source.granularity
        if target.seconds == frame.seconds and target.months == frame.months:
            return source
        if not target.is_reachable_from(frame):
            raise ValueError(f"Granularity {frame} is not compressible to {target}")

        if target.is_month_based:
            daily = source
            if frame.is_intraday and DAILY.is_reachable_from(frame):
                daily = self.compress(DAILY, source)
            result = self._compress_months(target, daily)
        else:
            result = self._compress_duration(target, source)

        logger.debug("bars_compressed", extra={
            "symbol": str(source.symbol),
            "source": frame.code,
            "target": target.code,
            "source_bars": len(source),
            "target_bars": len(result)
        })
        return result

    def _compress_duration(self, target: Granularity, source: BarSeries) -> BarSeries:
        frame = source.granularity
        micros = target.seconds * MICROS_PER_SECOND
        offset = 1 if frame.is_intraday else 0
        to_daily = self.midnight_adjustment and frame.is_intraday and not target.is_intraday

        def close(aggregate: _Aggregate) -> Bar:
            if to_daily and (aggregate.time - REFERENCE_EPOCH) % MICROS_PER_DAY == 0:
                return aggregate.to_bar(aggregate.time - 1)
            return aggregate.to_bar()

        return self._aggregate(
            target, source, lambda t: (t - REFERENCE_EPOCH - offset) // micros, close
        )

    def _compress_months(self, target: Granularity, source: BarSeries) -> BarSeries:
        months = target.months

        def bucket(t: int) -> int:
            dt = to_datetime(t)
            return (12 * (dt.year - self.reference_year) + dt.month - 1) // months

        return self._aggregate(target, source, bucket, lambda aggregate: aggregate.to_bar())

    def _aggregate(self, target: Granularity, source: BarSeries,
                   bucket: Callable[[int], int],
                   close: Callable[[_Aggregate], Bar]) -> BarSeries:
        buffer: List[Bar] = []
        aggregate: Optional[_Aggregate] = None
        key = None
        skipped = 0
        for index in range(len(source) - 1, -1, -1):
            bar = source.get(index)
            if aggregate is not None and bar.time < aggregate.time:
                skipped += 1
                continue
            bar_key = bucket(bar.time)
            if aggregate is None or bar_key != key:
                if aggregate is not None:
                    buffer.append(close(aggregate))
                aggregate = _Aggregate.start(bar)
                key = bar_key
            else:
                aggregate.update(bar)
        if aggregate is not None:
            buffer.append(close(aggregate))

        if skipped:
            logger.debug("out_of_order_bars_skipped", extra={
                "symbol": str(source.symbol),
                "target": target.code,
                "skipped": skipped
            })
        buffer.reverse()
        return BarSeries(source.symbol, target, buffer)


_default_compressor: Optional[Compressor] = None


def get_default_compressor() -> Compressor:
    """Compressor configured from the ``resampling`` configuration."""
    global _default_compressor
    if _default_compressor is None:
        _default_compressor = Compressor.from_config(config_loader.get_config('resampling'))
    return _default_compressor


def compress(target: Granularity, source: BarSeries) -> BarSeries:
    """
    Compress ``source`` into the ``target`` granularity with the default compressor.

    Raises:
        ValueError: If ``target`` is not reachable from the source granularity
    """
    return get_default_compressor().compress(target, source)
