from __future__ import annotations

"""
Table vs astronomy check script.

Uses:
- amlich.core.newmoon.check_year_against_new_moons
- amlich.core.providers.skyfield_provider.SkyfieldProvider
"""

import argparse

from amlich.core.newmoon import check_year_against_new_moons
from amlich.core.providers.skyfield_provider import SkyfieldProvider
from amlich.core.year_table import FIRST_YEAR, LAST_YEAR
from amlich.features.config import lunar_month_display_name

from tools.common import add_ephemeris_args, resolve_ephemeris, dump_json, skip


def main() -> None:
    parser = argparse.ArgumentParser(description="Packed table month starts vs new moons (UTC+8)")
    add_ephemeris_args(parser)
    parser.add_argument("--year", type=int, help="single lunar year")
    parser.add_argument("--from-year", type=int, default=FIRST_YEAR)
    parser.add_argument("--to-year", type=int, default=LAST_YEAR)
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    eph = resolve_ephemeris(args.ephemeris, args.ephemeris_path)
    if eph.skip_reason:
        skip(eph.skip_reason)

    provider = SkyfieldProvider(ephemeris_path=eph.path)
    cov0, cov1 = provider.coverage_years()

    years = [args.year] if args.year else list(range(args.from_year, args.to_year + 1))
    years = [y for y in years if cov0 <= y <= cov1]

    out_rows = []
    for year in years:
        checks = check_year_against_new_moons(provider, year)
        bad = [c for c in checks if not c.ok]
        out_rows.append(
            {
                "year": year,
                "months": len(checks),
                "mismatches": [
                    {
                        "month": c.month,
                        "leap": c.is_leap,
                        "table_start": c.table_start.isoformat(),
                        "new_moon_local": c.new_moon_local.isoformat() if c.new_moon_local else None,
                        "delta_days": c.delta_days,
                    }
                    for c in bad
                ],
            }
        )

        if not args.json and (bad or args.verbose):
            print(f"{year}: months={len(checks)} mismatches={len(bad)}")
            for c in bad:
                print(
                    f"  {lunar_month_display_name(c.month, c.is_leap)}: table={c.table_start} "
                    f"new_moon={c.new_moon_local} delta={c.delta_days}"
                )

    if args.json:
        dump_json({"years": out_rows})


if __name__ == "__main__":
    main()
