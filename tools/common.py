from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from amlich.core.converter import LunarDate, supported_solar_range
from amlich.features.config import can_chi_year, lunar_month_display_name
from amlich.features.date_hint import format_lunar_label

ENV_EPHEMERIS = "AMLICH_EPHEMERIS"
ENV_EPHEMERIS_PATH = "AMLICH_EPHEMERIS_PATH"


@dataclass(frozen=True)
class EphemerisConfig:
    path: Optional[Path]
    skip_reason: Optional[str]


def parse_date(s: str) -> date:
    try:
        return date.fromisoformat(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {s!r}") from e


def add_range_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--date", type=parse_date, help="YYYY-MM-DD (single solar day)")
    parser.add_argument("--start", type=parse_date, help="YYYY-MM-DD (inclusive)")
    parser.add_argument("--end", type=parse_date, help="YYYY-MM-DD (inclusive)")
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")


def add_ephemeris_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--ephemeris", default="", help=f"file name under data/ (env {ENV_EPHEMERIS})")
    parser.add_argument("--ephemeris-path", default="", help=f"explicit .bsp path (env {ENV_EPHEMERIS_PATH})")


def resolve_date_range(args: argparse.Namespace, *, whole_table: bool = False) -> Optional[Tuple[date, date]]:
    """
    Inclusive solar range from --start/--end or --date.

    A missing bound falls back to the table edge when whole_table is set
    (so --start alone runs to the last supported day); otherwise a range
    needs --date or both bounds and None is returned.
    Raises ValueError when start > end.
    """
    if args.date is not None:
        return args.date, args.date

    first, last = supported_solar_range()
    if whole_table:
        start = args.start if args.start is not None else first
        end = args.end if args.end is not None else last
    elif args.start is not None and args.end is not None:
        start, end = args.start, args.end
    else:
        return None

    if start > end:
        raise ValueError(f"start {start.isoformat()} is after end {end.isoformat()}")
    return start, end


def resolve_ephemeris(name_arg: str, path_arg: str) -> EphemerisConfig:
    """
    CLI/env front of skyfield_provider.resolve_ephemeris_path; reports a skip
    reason instead of raising when the file is missing.
    """
    from amlich.core.providers.skyfield_provider import resolve_ephemeris_path

    name = (name_arg or "").strip() or os.environ.get(ENV_EPHEMERIS, "").strip() or None
    path_raw = (path_arg or "").strip() or os.environ.get(ENV_EPHEMERIS_PATH, "").strip()

    p = resolve_ephemeris_path(
        ephemeris_path=Path(path_raw).expanduser() if path_raw else None,
        ephemeris=name,
    )
    if p.exists():
        return EphemerisConfig(path=p, skip_reason=None)
    return EphemerisConfig(
        path=None,
        skip_reason=(
            f"ephemeris not found: {p}. set {ENV_EPHEMERIS_PATH} or provide --ephemeris-path, "
            "or place data/de440s.bsp."
        ),
    )


def lunar_row(d: date, ld: LunarDate) -> Dict[str, Any]:
    return {
        "date": d.isoformat(),
        "year": ld.year,
        "month": ld.month,
        "day": ld.day,
        "leap": ld.is_leap,
        "label": format_lunar_label(ld),
        "month_name": lunar_month_display_name(ld.month, ld.is_leap),
        "year_name": can_chi_year(ld.year),
    }


def dump_json(obj: object) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def skip(msg: str) -> None:
    print(f"SKIP: {msg}")
    sys.exit(0)
