# src/lunarcal/core/numerals.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

LEAP_MARKER = "閏"
MONTH_MARKER = "月"
NEW_YEAR_CHAR = "正"

# 農暦の日・月の数字。天/初 は 0 扱い（"初一" の tens）
NUMERAL_VALUE: Dict[str, int] = {
    "天": 0,
    "初": 0,
    "正": 1,
    "一": 1,
    "二": 2,
    "廿": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
    "十": 10,
}

# 星期X の末尾 1 文字 → 0..6 (Sunday = 0)
# Kept apart from NUMERAL_VALUE even though the digits coincide.
WEEKDAY_INDEX: Dict[str, int] = {
    "日": 0,
    "天": 0,
    "一": 1,
    "二": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
}


@dataclass(frozen=True)
class DecodedNumeral:
    """
    value:    day-of-month, or month number when is_month
    is_month: text ended with 月 (first day of that month)
    is_leap:  text started with 閏
    new_year: units character was 正 (first month of a new lunar year)

    value == 0 means "unknown" (character outside the table).
    """
    value: int
    is_month: bool = False
    is_leap: bool = False
    new_year: bool = False


def decode_numeral(text: str) -> DecodedNumeral:
    """
    "廿三" -> 23, "初一" -> 1, "三十" -> 30, "十一月" -> month 11, "閏四月" -> leap month 4.
    """
    rs = text.strip()

    is_leap = False
    if rs.startswith(LEAP_MARKER):
        is_leap = True
        rs = rs[len(LEAP_MARKER):]

    is_month = False
    if rs.endswith(MONTH_MARKER):
        is_month = True
        rs = rs[: -len(MONTH_MARKER)]

    if not rs:
        return DecodedNumeral(value=0, is_month=is_month, is_leap=is_leap)

    last = rs[-1]
    units = NUMERAL_VALUE.get(last, 0)
    new_year = last == NEW_YEAR_CHAR

    tens = 0
    if len(rs) > 1:
        tens = NUMERAL_VALUE.get(rs[0], 0)
        # "十X" => 1X
        if tens == 10:
            tens = 1
        # "二十" => 20, not 30
        if tens != 0 and units == 10:
            tens -= 1

    return DecodedNumeral(
        value=tens * 10 + units,
        is_month=is_month,
        is_leap=is_leap,
        new_year=new_year,
    )


def decode_weekday(text: str) -> int:
    """星期三 -> 3, 星期日 -> 0. Unknown characters decode to 0."""
    rs = text.strip()
    if not rs:
        return 0
    return WEEKDAY_INDEX.get(rs[-1], 0)
