# src/amlich/core/verify.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Tuple

from .converter import LunarDate, lunar_month_length, lunar_to_solar, solar_date_to_lunar, supported_solar_range
from .year_table import leap_month


@dataclass(frozen=True)
class Violation:
    kind: str  # roundtrip | month_length | order | leap
    solar: date
    lunar: LunarDate
    detail: str


def _order_key(ld: LunarDate) -> Tuple[int, int, int]:
    # leap month sorts right after its ordinary sibling
    return (ld.month, 1 if ld.is_leap else 0, ld.day)


def sweep(start: Optional[date] = None, end: Optional[date] = None) -> List[Violation]:
    """
    Check every solar day in [start, end] (defaults: the whole supported range):

      - roundtrip:    lunar_to_solar(solar_to_lunar(d)) == d
      - month_length: 1 <= day <= tabulated length of the month
      - leap:         is_leap only in years with a leap month of that number
      - order:        (month, is_leap, day) strictly increases within a lunar year
    """
    first, last = supported_solar_range()
    s = start or first
    e = end or last

    out: List[Violation] = []
    prev: Optional[LunarDate] = None
    d = s
    while d <= e:
        ld = solar_date_to_lunar(d)

        if ld.is_leap and leap_month(ld.year) != ld.month:
            out.append(Violation("leap", d, ld, f"year {ld.year} leap_month={leap_month(ld.year)}"))
        else:
            length = lunar_month_length(ld.year, ld.month, ld.is_leap)
            if not (1 <= ld.day <= length):
                out.append(Violation("month_length", d, ld, f"month_days={length}"))

            back = lunar_to_solar(ld.year, ld.month, ld.day, ld.is_leap).to_date()
            if back != d:
                out.append(Violation("roundtrip", d, ld, f"back={back.isoformat()}"))

        if prev is not None and prev.year == ld.year and not (_order_key(prev) < _order_key(ld)):
            out.append(Violation("order", d, ld, f"prev={prev}"))

        prev = ld
        d += timedelta(days=1)
    return out
