"""
Bar granularity (time frame) model.

A granularity is either duration based (``seconds > 0``), month based
(``months > 0``) or the unspecified placeholder (both zero). The named
periods are plain instances of the same value type.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Dict, Iterator, Optional, Tuple

SECONDS_PER_DAY = 86_400


class Unit(Enum):
    """Duration units used to build custom granularities."""
    SECONDS = 1
    MINUTES = 60
    HOURS = 3_600
    DAYS = SECONDS_PER_DAY
    WEEKS = 7 * SECONDS_PER_DAY
    MONTHS = 0

    def seconds(self, n: int) -> int:
        """Number of seconds in ``n`` units (zero for months)."""
        return self.value * n

    def months(self, n: int) -> int:
        """Number of months in ``n`` units (zero unless MONTHS)."""
        return n if self is Unit.MONTHS else 0


@total_ordering
@dataclass(frozen=True, eq=True)
class Granularity:
    """Granularity of bars (immutable, hashable by seconds and months)."""
    seconds: int
    months: int = 0
    code: str = field(default="", compare=False)
    name: str = field(default="", compare=False)

    def __post_init__(self):
        if self.seconds < 0:
            raise ValueError(f"Granularity seconds must be non-negative, got {self.seconds}")
        if self.months < 0:
            raise ValueError(f"Granularity months must be non-negative, got {self.months}")
        if self.seconds > 0 and self.months > 0:
            raise ValueError(
                f"Either seconds or months must be zero, got {self.seconds}s and {self.months}m"
            )
        if not self.code:
            object.__setattr__(self, 'code', self._default_code())
        if not self.name:
            object.__setattr__(self, 'name', self.code)

    def _default_code(self) -> str:
        if self.months:
            return f"MN{self.months}"
        if self.seconds:
            return f"S{self.seconds}"
        return "CURRENT"

    @classmethod
    def custom(cls, duration: int, unit: Unit, code: Optional[str] = None,
               name: Optional[str] = None) -> "Granularity":
        """
        Build a custom granularity.

        Args:
            duration: Number of units
            unit: Duration unit
            code: Optional short code
            name: Optional display name

        Returns:
            Granularity instance
        """
        return cls(unit.seconds(duration), unit.months(duration), code or "", name or "")

    @classmethod
    def from_code(cls, code: str) -> "Granularity":
        """Resolve a named period by code, e.g. ``"H1"``."""
        return _BY_CODE[code.upper()]

    @classmethod
    def descending(cls) -> Iterator["Granularity"]:
        """Named periods from the largest (YEARLY) to the smallest (S1)."""
        return iter(sorted(PERIODS, reverse=True))

    @property
    def is_intraday(self) -> bool:
        return self.months == 0 and self.seconds < SECONDS_PER_DAY

    @property
    def is_duration_based(self) -> bool:
        return self.seconds > 0

    @property
    def is_month_based(self) -> bool:
        return self.months > 0

    def is_reachable_from(self, source: "Granularity") -> bool:
        """
        Whether bars of ``source`` granularity can be compressed into ``self``.

        Month-based targets accept month-based sources dividing them and
        duration-based sources aligned on a calendar day. Duration-based
        targets accept duration-based sources dividing them.
        """
        if self.months > 0:
            if source.months == 0:
                return source.seconds > 0 and SECONDS_PER_DAY % source.seconds == 0
            return self.months % source.months == 0
        if not source.is_duration_based:
            return not self.is_duration_based and source.months == 0
        return self.is_duration_based and self.seconds % source.seconds == 0

    def _sort_key(self) -> Tuple[int, int]:
        return self.months, self.seconds

    def __lt__(self, other):
        if not isinstance(other, Granularity):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return self.name


def require_same(first: Granularity, second: Granularity) -> None:
    """
    Check that two granularities match by duration.

    Raises:
        ValueError: If the seconds of both granularities differ
    """
    if first.seconds != second.seconds:
        raise ValueError(f"Granularity mismatch: {first} vs {second}")


CURRENT = Granularity(0, 0, "CURRENT", "Current")

DAILY = Granularity(86_400, 0, "DAILY", "Daily")
WEEKLY = Granularity(604_800, 0, "WEEKLY", "Weekly")
MONTHLY = Granularity(0, 1, "MONTHLY", "Monthly")
QUARTERLY = Granularity(0, 3, "QUARTERLY", "Quarterly")
YEARLY = Granularity(0, 12, "YEARLY", "Yearly")
S1 = Granularity(1, 0, "S1")
S5 = Granularity(5, 0, "S5")
S10 = Granularity(10, 0, "S10")
S15 = Granularity(15, 0, "S15")
S30 = Granularity(30, 0, "S30")
M1 = Granularity(60, 0, "M1")
M2 = Granularity(120, 0, "M2")
M3 = Granularity(180, 0, "M3")
M4 = Granularity(240, 0, "M4")
M5 = Granularity(300, 0, "M5")
M6 = Granularity(360, 0, "M6")
M10 = Granularity(600, 0, "M10")
M12 = Granularity(720, 0, "M12")
M15 = Granularity(900, 0, "M15")
M20 = Granularity(1_200, 0, "M20")
M30 = Granularity(1_800, 0, "M30")
M45 = Granularity(2_700, 0, "M45")
H1 = Granularity(3_600, 0, "H1")
M90 = Granularity(5_400, 0, "M90")
H2 = Granularity(7_200, 0, "H2")
H3 = Granularity(10_800, 0, "H3")
H4 = Granularity(14_400, 0, "H4")
H6 = Granularity(21_600, 0, "H6")
H8 = Granularity(28_800, 0, "H8")
H12 = Granularity(43_200, 0, "H12")

# Daily-based partition first, then intraday ascending
PERIODS: Tuple[Granularity, ...] = (
    DAILY, WEEKLY, MONTHLY, QUARTERLY, YEARLY,
    S1, S5, S10, S15, S30,
    M1, M2, M3, M4, M5, M6, M10, M12, M15, M20, M30, M45,
    H1, M90, H2, H3, H4, H6, H8, H12,
)

# Intraday periods tiling a 24h day
INTRADAY_GRANULARITIES: Tuple[Granularity, ...] = (
    M1, M2, M3, M4, M5, M6, M10, M12, M15, M20, M30, M45,
    H1, M90, H2, H3, H4, H6, H8, H12,
)

_BY_CODE: Dict[str, Granularity] = {g.code: g for g in PERIODS + (CURRENT,)}
