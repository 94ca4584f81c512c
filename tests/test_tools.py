from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pytest

from lunarcal.core.config import DEFAULT_SOURCE_URL
from lunarcal.core.converter import LunarConverter
from lunarcal.core.sources import DirectorySource, HttpSource
from lunarcal.core.types import CalendarDate
from tools import convert_check
from tools.common import build_converter


def test_round_trip_accepts_month_shadowed_by_leap_month(source):
    conv = LunarConverter(source)
    for d in (CalendarDate(2020, 4, 23), CalendarDate(2020, 4, 24), CalendarDate(2020, 5, 23), CalendarDate(2020, 5, 24)):
        assert convert_check.round_trip_ok(conv, conv.date_to_lunar_date(d))


def test_round_trip_across_file_years(source):
    conv = LunarConverter(source)
    assert convert_check.round_trip_ok(conv, conv.date_to_lunar_date(CalendarDate(2021, 1, 20)))


def test_round_trip_range_reports_no_mismatch(files_dir: Path, monkeypatch, capsys):
    monkeypatch.setattr(
        sys, "argv",
        ["convert_check", "--files-dir", str(files_dir), "--start", "2020-04-23", "--end", "2020-04-24", "--round-trip"],
    )
    convert_check.main()
    out = capsys.readouterr().out
    assert "MISMATCH" not in out
    assert "round-trip mismatches: 0" in out


def test_missing_previous_year_fails_cleanly(files_dir: Path, monkeypatch, capsys):
    # lunar 2019 days need T2019c.txt, which is not there
    monkeypatch.setattr(
        sys, "argv",
        ["convert_check", "--files-dir", str(files_dir), "--date", "2020-01-01", "--round-trip"],
    )
    with pytest.raises(SystemExit) as ei:
        convert_check.main()
    assert ei.value.code == 1
    assert "ERROR: 2020-01-01" in capsys.readouterr().err


def _args(**kw):
    base = dict(files_dir="", source_url="", download=False, verbose=False)
    base.update(kw)
    return argparse.Namespace(**base)


def test_build_converter_sources(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("LUNARCAL_SOURCE_URL", raising=False)

    conv = build_converter(_args(files_dir=str(tmp_path)))
    assert isinstance(conv.source, DirectorySource)

    conv = build_converter(_args(files_dir=str(tmp_path), download=True))
    assert isinstance(conv.source, HttpSource)
    assert conv.source.base_url == DEFAULT_SOURCE_URL
    assert conv.source.cache_dir == tmp_path

    conv = build_converter(_args(files_dir=str(tmp_path), download=True, source_url="https://mirror.example/files"))
    assert conv.source.base_url == "https://mirror.example/files"
