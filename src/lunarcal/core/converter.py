# src/lunarcal/core/converter.py
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .config import LunarCalConfig
from .errors import DateNotFoundError
from .scan import YearTable, scan_lines
from .sources import FileSource, source_from_config
from .types import CalendarDate, DayRecord

log = logging.getLogger(__name__)

DateLike = Union[CalendarDate, date]


def _as_calendar_date(d: DateLike, name: str) -> CalendarDate:
    if isinstance(d, CalendarDate):
        cd = d
    elif isinstance(d, date):
        cd = CalendarDate.from_date(d)
    else:
        raise TypeError(f"{name} must be CalendarDate or datetime.date (got {type(d).__name__})")
    if not cd.is_valid():
        raise ValueError(f"{name} must have non-zero year/month/day (got {cd!r})")
    return cd


class LunarConverter:
    """
    公暦 <-> 農暦 conversion backed by the per-year observatory tables.

    Each file-year is scanned at most once per instance and then served from
    memory. Not thread-safe: serialize calls, or use one instance per thread.

    A lunar year spans two files (T{Y}c.txt holds the tail of lunar year Y-1
    and most of Y; T{Y+1}c.txt holds the rest of Y), so lunar lookups try
    file-year Y and then Y+1.
    """

    def __init__(self, source: Optional[FileSource] = None, *, config: Optional[LunarCalConfig] = None) -> None:
        self.config = config or LunarCalConfig()
        self.source = source if source is not None else source_from_config(self.config.source)
        self._tables: Dict[int, YearTable] = {}

    # ------------------------------------------------------------
    # cache
    # ------------------------------------------------------------
    def load_year(self, file_year: int) -> YearTable:
        """
        Return the table for file_year, scanning the file on first use.
        A failed scan caches nothing; the next call reads the file again.
        """
        y = int(file_year)
        table = self._tables.get(y)
        if table is not None:
            return table

        log.info("scanning calendar file for %s", y)
        with self.source.open(y) as lines:
            table = scan_lines(lines, y, config=self.config.parse)

        self._tables[y] = table
        return table

    def loaded_years(self) -> Tuple[int, ...]:
        return tuple(sorted(self._tables))

    def clear(self) -> None:
        self._tables.clear()

    # ------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------
    def date_to_lunar_date(self, solar: DateLike) -> DayRecord:
        """
        公暦 -> 農暦. Raises DateNotFoundError when the date is not in its year file.
        """
        d = _as_calendar_date(solar, "solar")
        r = self.load_year(d.year).by_solar_date(d)
        if r is None:
            raise DateNotFoundError(f"solar date not found: {d.isoformat()}")
        return r

    def lunar_date_to_date(self, lunar: CalendarDate) -> DayRecord:
        """
        農暦 -> 公暦. Tries file-year lunar.year, then lunar.year + 1.
        """
        d = _as_calendar_date(lunar, "lunar")
        for file_year in (d.year, d.year + 1):
            r = self.load_year(file_year).by_lunar_date(d)
            if r is not None:
                return r
        raise DateNotFoundError(f"lunar date not found: {d.year}/{d.month}/{d.day}")

    def solar_terms(self, lunar_year: int, names: Optional[Iterable[str]] = None) -> List[DayRecord]:
        """
        Days of lunar year `lunar_year` that carry a solar term, in solar-date order.
        names: restrict to these term labels (None or empty => all).
        """
        wanted = set(names) if names else None
        y = int(lunar_year)

        out: List[DayRecord] = []
        for file_year in (y, y + 1):
            for r in self.load_year(file_year).records():
                if not r.solar_term or r.lunar_date.year != y:
                    continue
                if wanted is not None and r.solar_term not in wanted:
                    continue
                out.append(r)
        return out
