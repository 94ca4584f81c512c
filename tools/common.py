from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, Optional, Tuple

from lunarcal.core.config import DEFAULT_SOURCE_URL, LunarCalConfig
from lunarcal.core.converter import LunarConverter
from lunarcal.core.types import DayRecord


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--date", help="YYYY-MM-DD")
    parser.add_argument("--start", help="YYYY-MM-DD")
    parser.add_argument("--end", help="YYYY-MM-DD")
    parser.add_argument("--files-dir", default="", help="directory holding T{year}c.txt (UTF-8)")
    parser.add_argument("--source-url", default="", help="download missing years from this base URL")
    parser.add_argument("--download", action="store_true", help=f"download missing years from {DEFAULT_SOURCE_URL}")
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")


def parse_date(s: str) -> date:
    return date.fromisoformat(s)


def iter_dates(start: date, end: date) -> Iterable[date]:
    cur = start
    while cur <= end:
        yield cur
        cur = cur + timedelta(days=1)


def resolve_date_range(args: argparse.Namespace) -> Tuple[Optional[date], Optional[date]]:
    if args.start and args.end:
        return parse_date(args.start), parse_date(args.end)
    if args.date:
        d = parse_date(args.date)
        return d, d
    return None, None


def build_converter(args: argparse.Namespace) -> LunarConverter:
    """
    LUNARCAL_* env => config, then --files-dir / --source-url / --download override.
    """
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg = LunarCalConfig.from_env()
    src = cfg.source
    if args.files_dir:
        src = replace(src, files_dir=Path(args.files_dir).expanduser())
    if args.source_url:
        src = replace(src, source_url=args.source_url)
    elif args.download and not src.source_url:
        src = replace(src, source_url=DEFAULT_SOURCE_URL)
    return LunarConverter(config=replace(cfg, source=src))


def record_to_dict(r: DayRecord) -> dict:
    return {
        "solar": r.solar_date.isoformat(),
        "lunar": {
            "year": r.lunar_date.year,
            "month": r.lunar_date.month,
            "day": r.lunar_date.day,
            "leap": r.is_leap_month,
        },
        "weekday": r.weekday,
        "weekday_raw": r.weekday_raw,
        "solar_term": r.solar_term or None,
    }


def dump_json(obj: object) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def fail(msg: str) -> None:
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)
