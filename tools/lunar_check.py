from __future__ import annotations

"""
Solar -> lunar check script.

Uses:
- amlich.core.converter.lunar_dates_between
- tools.common.lunar_row (labels, month name, Can Chi year)
"""

import argparse
from datetime import timedelta

from amlich.core.converter import lunar_dates_between

from tools.common import add_range_args, resolve_date_range, dump_json, lunar_row


def main() -> None:
    parser = argparse.ArgumentParser(description="Solar -> lunar (âm lịch) check")
    add_range_args(parser)
    args = parser.parse_args()

    try:
        span = resolve_date_range(args)
    except ValueError as e:
        parser.error(str(e))
    if span is None:
        parser.error("--date or --start/--end required")
    start, end = span

    rows = []
    for d, l in lunar_dates_between(start, end + timedelta(days=1)):
        row = lunar_row(d, l)
        if args.json:
            rows.append(row)
        else:
            sep = "\n" if (d != start and l.day == 1) else ""
            print(f"{sep}{row['date']}  L={row['label']}  {row['month_name']} {row['year_name']}")

    if args.json:
        dump_json({"rows": rows})


if __name__ == "__main__":
    main()
