# src/lunarcal/features/config.py
from __future__ import annotations

"""
Feature-level constants.

- 二十四節氣: names as printed in the observatory tables (traditional
  characters), with the solar longitude each one marks
- 農曆月名: month number (+ leap flag) => display name (正月, 閏四月, 十二月)
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

# ============================================================
# 二十四節氣 (24 solar terms)
#   Listed in calendar-year order starting from 小寒 (285 deg).
#   n even -> 節, n odd -> 中氣
# ============================================================

SOLAR_TERMS: List[Tuple[int, str]] = [
    (285, "小寒"),
    (300, "大寒"),
    (315, "立春"),
    (330, "雨水"),
    (345, "驚蟄"),
    (0,   "春分"),
    (15,  "清明"),
    (30,  "穀雨"),
    (45,  "立夏"),
    (60,  "小滿"),
    (75,  "芒種"),
    (90,  "夏至"),
    (105, "小暑"),
    (120, "大暑"),
    (135, "立秋"),
    (150, "處暑"),
    (165, "白露"),
    (180, "秋分"),
    (195, "寒露"),
    (210, "霜降"),
    (225, "立冬"),
    (240, "小雪"),
    (255, "大雪"),
    (270, "冬至"),
]

SOLAR_TERM_NAMES: Tuple[str, ...] = tuple(name for _, name in SOLAR_TERMS)
SOLAR_TERM_DEG_BY_NAME: Dict[str, int] = {name: deg for deg, name in SOLAR_TERMS}

LUNAR_MONTH_NAME_BY_MONTH_NO: Dict[int, str] = {
    1:  "正月",
    2:  "二月",
    3:  "三月",
    4:  "四月",
    5:  "五月",
    6:  "六月",
    7:  "七月",
    8:  "八月",
    9:  "九月",
    10: "十月",
    11: "十一月",
    12: "十二月",
}


def lunar_month_name_from_month_no(month_no: int) -> str:
    m = int(month_no)
    try:
        return LUNAR_MONTH_NAME_BY_MONTH_NO[m]
    except KeyError as e:
        raise ValueError(f"invalid lunar month_no: {month_no}") from e


def lunar_month_display_name(month_no: int, is_leap: bool) -> str:
    base = lunar_month_name_from_month_no(month_no)
    return f"閏{base}" if is_leap else base


def unknown_solar_term_names(names: Iterable[str]) -> List[str]:
    """
    Names not among the 24 terms, in input order (duplicates removed).
    """
    out: List[str] = []
    for n in names:
        if n not in SOLAR_TERM_DEG_BY_NAME and n not in out:
            out.append(n)
    return out


@dataclass(frozen=True)
class SolarTermInfo:
    n: int
    deg: int
    kind: str
    name: str


def solar_term_info(name: str) -> SolarTermInfo:
    """
    Structured info for a term name; n is the 0-based position from 小寒.
    """
    try:
        deg = SOLAR_TERM_DEG_BY_NAME[name]
    except KeyError as e:
        raise KeyError(f"Unknown solar term: {name}") from e
    n = SOLAR_TERM_NAMES.index(name)
    kind = "節" if n % 2 == 0 else "中氣"
    return SolarTermInfo(n=n, deg=deg, kind=kind, name=name)
