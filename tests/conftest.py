from __future__ import annotations

import io
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Dict, Iterator, List

import pytest

WEEKDAY_CHARS = ["日", "一", "二", "三", "四", "五", "六"]

HEADER = [
    "2020(庚子 - 肖鼠)年公曆與農曆日期對照表",
    "",
    "公曆日期         農曆日期     星期     節氣",
]


def day_line(y: int, m: int, d: int, lunar: str, term: str = "", *, padded: bool = False) -> str:
    """
    One data line as printed in the observatory tables.
    Weekday text is derived from the real date (Sunday = 日).
    """
    wd = (date(y, m, d).weekday() + 1) % 7
    solar = f"{y}年{m:02d}月{d:02d}日" if padded else f"{y}年{m}月{d}日"
    cols = [solar, lunar, f"星期{WEEKDAY_CHARS[wd]}"]
    if term:
        cols.append(term)
    return "      ".join(cols)


def file_text(lines: List[str]) -> str:
    return "\n".join(HEADER + lines) + "\n"


# Excerpts of the real 2020 / 2021 tables (gaps are fine for the scanner).
LINES_2020 = [
    day_line(2020, 1, 1, "初七"),
    day_line(2020, 1, 2, "初八"),
    day_line(2020, 1, 6, "十二", "小寒"),
    day_line(2020, 1, 20, "廿六", "大寒"),
    day_line(2020, 1, 24, "三十"),
    day_line(2020, 1, 25, "正月"),
    day_line(2020, 1, 26, "初二"),
    day_line(2020, 2, 4, "十一", "立春"),
    day_line(2020, 2, 23, "二月"),
    day_line(2020, 2, 24, "初二"),
    day_line(2020, 4, 23, "四月"),
    day_line(2020, 4, 24, "初二"),
    day_line(2020, 5, 23, "閏四月"),
    day_line(2020, 5, 24, "初二"),
    day_line(2020, 12, 15, "十一月"),
    day_line(2020, 12, 21, "初七", "冬至"),
    day_line(2020, 12, 31, "十七"),
]

LINES_2021 = [
    day_line(2021, 1, 1, "十八"),
    day_line(2021, 1, 5, "廿二", "小寒"),
    day_line(2021, 1, 13, "十二月"),
    day_line(2021, 1, 20, "初八", "大寒"),
    day_line(2021, 2, 3, "廿二", "立春"),
    day_line(2021, 2, 11, "三十"),
    day_line(2021, 2, 12, "正月"),
    day_line(2021, 2, 13, "初二"),
]


class CountingSource:
    """
    In-memory FileSource that counts opens and remembers whether each stream
    was closed.
    """

    def __init__(self, texts: Dict[int, str]) -> None:
        self.texts = dict(texts)
        self.opens: Dict[int, int] = {}
        self.streams: List[io.StringIO] = []

    @contextmanager
    def open(self, file_year: int) -> Iterator[io.StringIO]:
        self.opens[file_year] = self.opens.get(file_year, 0) + 1
        if file_year not in self.texts:
            raise FileNotFoundError(f"T{file_year}c.txt")
        f = io.StringIO(self.texts[file_year])
        self.streams.append(f)
        with f:
            yield f


@pytest.fixture
def texts() -> Dict[int, str]:
    return {2020: file_text(LINES_2020), 2021: file_text(LINES_2021)}


@pytest.fixture
def source(texts) -> CountingSource:
    return CountingSource(texts)


@pytest.fixture
def files_dir(tmp_path: Path, texts) -> Path:
    d = tmp_path / "files"
    d.mkdir()
    for y, text in texts.items():
        (d / f"T{y}c.txt").write_text(text, encoding="utf-8")
    return d
