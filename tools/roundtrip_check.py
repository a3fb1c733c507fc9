from __future__ import annotations

"""
Round-trip / table consistency check script.

Uses:
- amlich.core.verify.sweep
"""

import argparse
import sys

from amlich.core.verify import sweep

from tools.common import add_range_args, resolve_date_range, dump_json


def main() -> None:
    parser = argparse.ArgumentParser(description="solar -> lunar -> solar round-trip check")
    add_range_args(parser)
    args = parser.parse_args()

    try:
        start, end = resolve_date_range(args, whole_table=True)
    except ValueError as e:
        parser.error(str(e))

    violations = sweep(start, end)

    if args.json:
        dump_json(
            {
                "range": {"start": start.isoformat(), "end": end.isoformat()},
                "violations": [
                    {
                        "kind": v.kind,
                        "solar": v.solar.isoformat(),
                        "lunar": list(v.lunar.as_tuple()),
                        "detail": v.detail,
                    }
                    for v in violations
                ],
            }
        )
    else:
        print(f"{start.isoformat()} .. {end.isoformat()}: violations={len(violations)}")
        shown = violations if args.verbose else violations[:20]
        for v in shown:
            print(f"  {v.kind:12s} {v.solar.isoformat()}  L={v.lunar.as_tuple()}  {v.detail}")

    sys.exit(1 if violations else 0)


if __name__ == "__main__":
    main()
