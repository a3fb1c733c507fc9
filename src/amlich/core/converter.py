# src/amlich/core/converter.py
from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, NamedTuple, Optional, Tuple

from .config import ConverterConfig, debug_from_env, default_config, normalize_leap_policy
from .errors import (
    InconsistentLeapRequestError,
    InvalidCalendarFieldError,
    OutOfRangeYearError,
)
from .year_table import (
    EPOCH,
    FIRST_YEAR,
    LAST_YEAR,
    check_int_field,
    check_month,
    check_year,
    leap_month,
    leap_month_days,
    lunar_months,
    month_days,
    year_start_offsets,
)

log = logging.getLogger(__name__)


# ============================================================
# Public types
# ============================================================

class SolarDate(NamedTuple):
    """
    Gregorian calendar date. Unpacks as (year, month, day).
    """
    year: int
    month: int
    day: int

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)


@dataclass(frozen=True)
class LunarDate:
    """
    Lunar date (year / month / day / leap).
    is_leap=True means the inserted leap month, not the ordinary month of the same number.
    """
    year: int
    month: int
    day: int
    is_leap: bool = False

    def as_tuple(self) -> Tuple[int, int, int, bool]:
        return (self.year, self.month, self.day, self.is_leap)


# ============================================================
# Range helpers
# ============================================================

def _table_span_days() -> int:
    return year_start_offsets()[-1]


def supported_solar_range() -> Tuple[date, date]:
    """
    First and last solar date (both inclusive) that solar_to_lunar accepts.
    """
    return EPOCH, EPOCH + timedelta(days=_table_span_days() - 1)


def _solar_offset(year: int, month: int, day: int) -> int:
    y = check_int_field(year, "year")
    m = check_int_field(month, "month")
    d = check_int_field(day, "day")
    if not (1 <= m <= 12):
        raise InvalidCalendarFieldError(f"solar month out of range: {m}", {"month": m})
    first, last = supported_solar_range()
    if not (first.year <= y <= last.year):
        raise OutOfRangeYearError(
            f"solar year out of supported range: {y}",
            {"first": first.isoformat(), "last": last.isoformat()},
        )
    try:
        target = date(y, m, d)
    except ValueError as e:
        raise InvalidCalendarFieldError(
            f"invalid solar date: {y:04d}-{m:02d}-{d:02d}", {"reason": str(e)}
        ) from e
    offset = (target - EPOCH).days
    if offset < 0 or offset >= _table_span_days():
        raise OutOfRangeYearError(
            f"solar date out of supported range: {target.isoformat()}",
            {"first": first.isoformat(), "last": last.isoformat()},
        )
    return offset


def _resolve_policy(leap_policy: Optional[str], config: Optional[ConverterConfig]) -> str:
    if leap_policy is not None:
        return normalize_leap_policy(leap_policy)
    cfg = config if config is not None else default_config()
    return normalize_leap_policy(cfg.leap_policy)


def _debug_on(config: Optional[ConverterConfig]) -> bool:
    if config is not None:
        return bool(config.debug)
    return debug_from_env()


# ============================================================
# solar -> lunar
# ============================================================

def _lunar_from_offset(offset: int, *, debug: bool = False) -> LunarDate:
    starts = year_start_offsets()
    i = bisect_right(starts, offset) - 1
    if i < 0 or i >= LAST_YEAR - FIRST_YEAR + 1:
        raise OutOfRangeYearError(f"day offset out of table: {offset}")

    lunar_year = FIRST_YEAR + i
    rem = offset - starts[i]

    if debug:
        log.debug(
            "solar_to_lunar walk: offset=%d year=%d year_start=%d rem=%d leap_month=%d",
            offset, lunar_year, starts[i], rem, leap_month(lunar_year),
        )

    for m, is_leap, days in lunar_months(lunar_year):
        if rem < days:
            return LunarDate(year=lunar_year, month=m, day=rem + 1, is_leap=is_leap)
        rem -= days

    # year_start_offsets and lunar_months are built from the same table
    raise RuntimeError(f"month walk overran lunar year {lunar_year} (offset={offset})")


def solar_to_lunar(
    year: int,
    month: int,
    day: int,
    *,
    config: Optional[ConverterConfig] = None,
) -> LunarDate:
    """
    Gregorian date -> lunar date.

    Raises
    ------
    InvalidCalendarFieldError
        month/day is not a valid Gregorian date.
    OutOfRangeYearError
        date is before 1900-01-31 or past the last tabulated lunar year.
    """
    offset = _solar_offset(year, month, day)
    return _lunar_from_offset(offset, debug=_debug_on(config))


def solar_date_to_lunar(d: date, *, config: Optional[ConverterConfig] = None) -> LunarDate:
    return solar_to_lunar(d.year, d.month, d.day, config=config)


# ============================================================
# lunar -> solar
# ============================================================

def lunar_month_length(year: int, month: int, is_leap: bool = False) -> int:
    """
    Days in the addressed lunar month.
    Raises InconsistentLeapRequestError when is_leap is set for a month that is not the leap month.
    """
    y = check_year(year)
    m = check_month(month)
    if not is_leap:
        return month_days(y, m)
    if leap_month(y) != m:
        raise InconsistentLeapRequestError(
            f"lunar year {y} has no leap month {m}",
            {"year": y, "month": m, "leap_month": leap_month(y)},
        )
    return leap_month_days(y)


def lunar_to_solar(
    year: int,
    month: int,
    day: int,
    is_leap_month: bool = False,
    *,
    leap_policy: Optional[str] = None,
    config: Optional[ConverterConfig] = None,
) -> SolarDate:
    """
    Lunar date -> Gregorian date as (year, month, day).

    leap_policy (falls back to config, then AMLICH_LEAP_POLICY):
      - "strict": is_leap_month for a year/month without that leap month raises
                  InconsistentLeapRequestError
      - "ignore": the flag is dropped and the ordinary month is converted
    """
    if leap_policy is not None:
        leap_policy = normalize_leap_policy(leap_policy)

    y = check_year(year)
    m = check_month(month)
    want_leap = bool(is_leap_month)

    if want_leap and leap_month(y) != m:
        policy = _resolve_policy(leap_policy, config)
        if policy == "strict":
            raise InconsistentLeapRequestError(
                f"lunar year {y} has no leap month {m}",
                {"year": y, "month": m, "leap_month": leap_month(y)},
            )
        log.debug("lunar_to_solar: leap flag ignored year=%d month=%d leap_month=%d", y, m, leap_month(y))
        want_leap = False

    d = check_int_field(day, "day")
    length = lunar_month_length(y, m, want_leap)
    if not (1 <= d <= length):
        raise InvalidCalendarFieldError(
            f"lunar day out of range: {d}",
            {"year": y, "month": m, "is_leap": want_leap, "month_days": length},
        )

    offset = year_start_offsets()[y - FIRST_YEAR]
    for mm, is_leap, days in lunar_months(y):
        if mm == m and is_leap == want_leap:
            break
        offset += days
    offset += d - 1

    if _debug_on(config):
        log.debug("lunar_to_solar: %04d-%02d-%02d leap=%s -> offset=%d", y, m, d, want_leap, offset)

    t = EPOCH + timedelta(days=offset)
    return SolarDate(t.year, t.month, t.day)


def lunar_to_solar_date(
    year: int,
    month: int,
    day: int,
    is_leap_month: bool = False,
    *,
    leap_policy: Optional[str] = None,
    config: Optional[ConverterConfig] = None,
) -> date:
    return lunar_to_solar(
        year, month, day, is_leap_month, leap_policy=leap_policy, config=config
    ).to_date()


# ============================================================
# Bulk
# ============================================================

def lunar_dates_between(start: date, end: date) -> Iterable[Tuple[date, LunarDate]]:
    """
    Convert [start, end) day by day.
    Only the first day is located in the table; later days step through the month layout.
    """
    if not (start < end):
        return

    first = solar_date_to_lunar(start)
    lunar_year = first.year
    months = lunar_months(lunar_year)
    idx = next(i for i, (m, is_leap, _) in enumerate(months) if (m, is_leap) == (first.month, first.is_leap))
    day_no = first.day

    d = start
    while d < end:
        m, is_leap, days = months[idx]
        yield d, LunarDate(year=lunar_year, month=m, day=day_no, is_leap=is_leap)

        d += timedelta(days=1)
        day_no += 1
        if day_no <= days:
            continue
        day_no = 1
        idx += 1
        if idx < len(months) or d >= end:
            continue
        if lunar_year + 1 > LAST_YEAR:
            raise OutOfRangeYearError(
                f"solar date out of supported range: {d.isoformat()}",
                {"last_year": LAST_YEAR},
            )
        lunar_year += 1
        months = lunar_months(lunar_year)
        idx = 0
