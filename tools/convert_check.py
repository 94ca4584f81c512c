from __future__ import annotations

"""
Solar -> lunar check script.

Uses:
- lunarcal.core.converter.LunarConverter.date_to_lunar_date
- lunarcal.core.converter.LunarConverter.lunar_date_to_date (--round-trip)
"""

import argparse

from lunarcal.core.converter import LunarConverter
from lunarcal.core.errors import DateNotFoundError, FileFormatError
from lunarcal.core.types import DayRecord
from lunarcal.features.config import lunar_month_display_name

from tools.common import add_common_args, build_converter, dump_json, fail, iter_dates, record_to_dict, resolve_date_range


def round_trip_ok(conv: LunarConverter, r: DayRecord) -> bool:
    """
    lunar -> solar を引き直して同じ日に戻るか。

    四月 and 閏四月 share lunar keys and the lookup returns the leap month, so
    a hit on the other month of the pair only has to agree on the lunar date.
    """
    back = conv.lunar_date_to_date(r.lunar_date)
    if back.lunar_date != r.lunar_date:
        return False
    if back.is_leap_month != r.is_leap_month:
        return True
    return back.solar_date == r.solar_date


def main() -> None:
    parser = argparse.ArgumentParser(description="公暦 -> 農暦 check")
    add_common_args(parser)
    parser.add_argument("--round-trip", action="store_true", help="convert back and compare")
    args = parser.parse_args()

    start, end = resolve_date_range(args)
    if start is None or end is None:
        parser.error("--date or --start/--end required")

    conv = build_converter(args)

    rows = []
    mismatches = 0
    for cur in iter_dates(start, end):
        ok = True
        try:
            r = conv.date_to_lunar_date(cur)
            if args.round_trip:
                ok = round_trip_ok(conv, r)
        except (DateNotFoundError, FileFormatError, OSError) as e:
            fail(f"{cur.isoformat()}: {e}")

        if not ok:
            mismatches += 1

        if args.json:
            row = record_to_dict(r)
            if args.round_trip:
                row["round_trip_ok"] = ok
            rows.append(row)
            continue

        lunar = r.lunar_date
        label = lunar_month_display_name(lunar.month, r.is_leap_month)
        line = f"{cur.isoformat()}  {lunar.year} {label}{lunar.day:02d}日  {r.weekday_raw}"
        if r.solar_term:
            line += f"  {r.solar_term}"
        if not ok:
            line += "  ROUND-TRIP MISMATCH"
        print(line)

    if args.json:
        dump_json({"rows": rows, "mismatches": mismatches})
    elif args.round_trip:
        print(f"round-trip mismatches: {mismatches}")


if __name__ == "__main__":
    main()
