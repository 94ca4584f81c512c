from __future__ import annotations

"""
Solar terms (二十四節氣) check script.

Uses:
- lunarcal.core.converter.LunarConverter.solar_terms
- lunarcal.features.config.solar_term_info
"""

import argparse

from lunarcal.core.errors import FileFormatError
from lunarcal.features.config import solar_term_info, unknown_solar_term_names

from tools.common import add_common_args, build_converter, dump_json, fail, record_to_dict


def main() -> None:
    parser = argparse.ArgumentParser(description="Solar terms (二十四節氣) check")
    add_common_args(parser)
    parser.add_argument("--year", type=int, required=True, help="lunar year")
    parser.add_argument("--name", action="append", default=[], help="term name (repeatable)")
    args = parser.parse_args()

    unknown = unknown_solar_term_names(args.name)
    if unknown:
        parser.error(f"unknown solar term name(s): {', '.join(unknown)}")

    conv = build_converter(args)
    try:
        rows = conv.solar_terms(args.year, args.name)
    except (FileFormatError, OSError) as e:
        fail(str(e))

    if args.json:
        dump_json({"year": args.year, "terms": [record_to_dict(r) for r in rows]})
        return

    for r in rows:
        info = solar_term_info(r.solar_term)
        if args.verbose:
            print(f"{r.solar_date.isoformat()}  {info.name}  kind={info.kind} deg={info.deg:03d}  lunar={r.lunar_date.month:02d}/{r.lunar_date.day:02d}")
        else:
            print(f"{r.solar_date.isoformat()}  {info.name}")


if __name__ == "__main__":
    main()
