# src/lunarcal/core/scan.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from .config import ParseConfig
from .errors import FileFormatError
from .parser import ScanState, parse_line
from .types import CalendarDate, DayRecord

log = logging.getLogger(__name__)


@dataclass
class YearTable:
    """
    All records of one file-year, indexed both ways.

    by_lunar keeps the later record when a leap month repeats a month number
    (閏四月 vs 四月); by_solar is always complete.
    """
    file_year: int
    by_solar: Dict[CalendarDate, DayRecord] = field(default_factory=dict)
    by_lunar: Dict[CalendarDate, DayRecord] = field(default_factory=dict)
    dropped: int = 0

    def add(self, r: DayRecord) -> None:
        if not (1 <= r.lunar_date.month <= 12):
            raise ValueError(f"refusing to cache a record without a month number: {r}")
        self.by_solar[r.solar_date] = r
        self.by_lunar[r.lunar_date] = r

    def by_solar_date(self, d: CalendarDate) -> Optional[DayRecord]:
        return self.by_solar.get(d)

    def by_lunar_date(self, d: CalendarDate) -> Optional[DayRecord]:
        return self.by_lunar.get(d)

    def records(self) -> List[DayRecord]:
        """Records in solar-date order."""
        return [self.by_solar[k] for k in sorted(self.by_solar, key=lambda d: (d.year, d.month, d.day))]

    def __len__(self) -> int:
        return len(self.by_solar)


def _skip_header(it: Iterator[str], n: int, file_year: int) -> int:
    for i in range(n):
        try:
            next(it)
        except StopIteration:
            raise FileFormatError(
                f"file ended inside the {n}-line header",
                file_year=file_year,
                line_no=i + 1,
            ) from None
    return n


def scan_lines(
    lines: Iterable[str],
    file_year: int,
    *,
    config: ParseConfig = ParseConfig(),
) -> YearTable:
    """
    Parse a whole file-year and return its table.

    The table is only returned when every line parsed; a FileFormatError
    propagates with nothing cached. Records still waiting for their month at
    end of input are dropped.
    """
    it = iter(lines)
    line_no = _skip_header(it, config.header_lines, file_year)

    table = YearTable(file_year=int(file_year))
    state = ScanState.start(file_year)

    for line in it:
        line_no += 1
        try:
            step = parse_line(line, file_year, state, config=config)
        except FileFormatError as e:
            raise FileFormatError(e.reason, file_year=file_year, line_no=line_no, line=line) from e
        for r in step.committed:
            table.add(r)
        state = step.state

    if state.pending:
        table.dropped = len(state.pending)
        log.warning(
            "file_year=%s: %d record(s) at end of file never got a month number; dropped (first=%s)",
            file_year, len(state.pending), state.pending[0].solar_date,
        )

    log.debug("file_year=%s: scanned %d record(s)", file_year, len(table))
    return table
