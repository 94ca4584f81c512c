# src/lunarcal/core/parser.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Tuple

from .config import ParseConfig
from .errors import FileFormatError
from .numerals import decode_numeral, decode_weekday
from .types import CalendarDate, DayRecord

log = logging.getLogger(__name__)

_PADDED_DATE_RE = re.compile(r"^(\d{4})年(\d{2})月(\d{2})日$")
_PLAIN_DATE_RE = re.compile(r"^(\d{4})年(\d{1,2})月(\d{1,2})日$")


# ============================================================
# Scan state (fold value)
# ============================================================

@dataclass(frozen=True)
class ScanState:
    """
    Running state carried from one line to the next.

    lunar_month == 0 until the first 月 line of the file; records parsed
    before that wait in `pending` with month 0.
    """
    lunar_year: int
    lunar_month: int = 0
    is_leap_month: bool = False
    pending: Tuple[DayRecord, ...] = ()

    @classmethod
    def start(cls, file_year: int) -> "ScanState":
        # T{Y}c.txt begins inside lunar year Y-1
        return cls(lunar_year=int(file_year) - 1)


@dataclass(frozen=True)
class ParseStep:
    """
    record:    the record built from this line (None for a blank line)
    state:     state to feed into the next line
    committed: records whose month is now known, in file order
               (flushed pending records first, then `record` if resolved)
    """
    record: Optional[DayRecord]
    state: ScanState
    committed: Tuple[DayRecord, ...] = ()


def previous_month(month: int) -> int:
    m = int(month) - 1
    return 12 if m == 0 else m


def resolve_pending(pending: Tuple[DayRecord, ...], month: int) -> Tuple[DayRecord, ...]:
    """
    Give every queued record the month number `month`.
    """
    return tuple(
        replace(r, lunar_date=replace(r.lunar_date, month=int(month)))
        for r in pending
    )


# ============================================================
# Field parsers
# ============================================================

def parse_solar_date(text: str, file_year: int, *, config: ParseConfig = ParseConfig()) -> CalendarDate:
    """
    "2020年1月25日" -> CalendarDate(2020, 1, 25)

    file_year <= config.zero_pad_cutoff_year requires "2009年01月05日".
    """
    pattern = _PADDED_DATE_RE if int(file_year) <= config.zero_pad_cutoff_year else _PLAIN_DATE_RE
    m = pattern.match(text)
    if m is None:
        raise FileFormatError(f"unexpected solar date text: {text!r}", file_year=file_year)

    y, mo, d = (int(x) for x in m.groups())
    try:
        date(y, mo, d)
    except ValueError as e:
        raise FileFormatError(f"invalid solar date: {text!r}", file_year=file_year) from e
    return CalendarDate(year=y, month=mo, day=d)


# ============================================================
# Line parser
# ============================================================

def parse_line(
    line: str,
    file_year: int,
    state: ScanState,
    *,
    config: ParseConfig = ParseConfig(),
) -> ParseStep:
    """
    Decode one data line.

      fields[0]  solar date   2020年1月25日
      fields[1]  lunar text   正月 / 初二 / 廿三 / 閏四月
      fields[2]  weekday      星期六
      fields[3]  solar term   立春 (optional)

    A 月 line starts a new lunar month (day 1). If records are still waiting
    for their month, they belong to the month right before it.
    """
    fields = line.split()
    if not fields:
        return ParseStep(record=None, state=state)

    if len(fields) < 3:
        raise FileFormatError(f"expected at least 3 fields, got {len(fields)}: {line.strip()!r}", file_year=file_year)

    solar = parse_solar_date(fields[0], file_year, config=config)

    num = decode_numeral(fields[1])
    lunar_year = state.lunar_year + 1 if num.new_year else state.lunar_year
    lunar_month = state.lunar_month
    is_leap = state.is_leap_month
    lunar_day = num.value

    flushed: Tuple[DayRecord, ...] = ()
    pending = state.pending
    if num.is_month and num.value == 0:
        raise FileFormatError(f"unreadable month marker: {fields[1]!r}", file_year=file_year)

    if num.is_month:
        lunar_month = num.value
        lunar_day = 1
        is_leap = num.is_leap
        if pending:
            prev = previous_month(lunar_month)
            log.debug(
                "file_year=%s: month %s announced at %s, resolving %d pending record(s) as month %s",
                file_year, lunar_month, solar, len(pending), prev,
            )
            flushed = resolve_pending(pending, prev)
            pending = ()

    record = DayRecord(
        solar_date=solar,
        lunar_date=CalendarDate(year=lunar_year, month=lunar_month, day=lunar_day),
        weekday=decode_weekday(fields[2]),
        weekday_raw=fields[2],
        solar_term=fields[3] if len(fields) > 3 else "",
        is_leap_month=is_leap if lunar_month != 0 else False,
    )

    if lunar_month == 0:
        pending = pending + (record,)
        committed = flushed
    else:
        committed = flushed + (record,)

    new_state = ScanState(
        lunar_year=lunar_year,
        lunar_month=lunar_month,
        is_leap_month=is_leap,
        pending=pending,
    )
    return ParseStep(record=record, state=new_state, committed=committed)
