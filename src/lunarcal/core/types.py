# src/lunarcal/core/types.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CalendarDate:
    """
    year/month/day の組。公暦・農暦の両方に使う。

    A date is valid only when all three fields are non-zero; month == 0 is the
    "not yet known" sentinel used while scanning.
    """
    year: int
    month: int
    day: int

    @classmethod
    def from_date(cls, d: date) -> "CalendarDate":
        return cls(year=d.year, month=d.month, day=d.day)

    def to_date(self) -> date:
        """Only meaningful for solar dates."""
        return date(self.year, self.month, self.day)

    def is_valid(self) -> bool:
        return self.year != 0 and self.month != 0 and self.day != 0

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return f"{self.year:04d}{self.month:02d}{self.day:02d}"


@dataclass(frozen=True)
class DayRecord:
    """
    One parsed line of a calendar file.

    weekday: 0..6, Sunday = 0
    solar_term: "" when the line carries no term
    is_leap_month: True for every day of a month introduced by 閏
      (informational; not part of the lunar lookup key). Days before the
      first month marker of a file are always False, even when the file
      starts inside a leap month (T2034c.txt opens in 2033's 閏十一月).
    """
    solar_date: CalendarDate
    lunar_date: CalendarDate
    weekday: int
    weekday_raw: str
    solar_term: str = ""
    is_leap_month: bool = False
