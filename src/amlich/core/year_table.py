# src/amlich/core/year_table.py
"""
Packed lunar year table (lunar years 1900..2049) and its decoders.

Encoding per year:
  - bits 0..3  (0x0000f): leap month number (0 means no leap month)
  - bit 16     (0x10000): leap month length (1 -> 30 days, 0 -> 29 days)
  - bits 15..4 (0x0fff0): month lengths for months 1..12, month 1 at bit 15
                          (1 -> 30 days, 0 -> 29 days)

The constants are astronomically derived; do not edit them by hand.
"""
from __future__ import annotations

import operator
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import List, Tuple

from .errors import InvalidCalendarFieldError, OutOfRangeYearError

# lunar new year of 1900
EPOCH = date(1900, 1, 31)

# fmt: off
LUNAR_INFO: Tuple[int, ...] = (
    0x04bd8, 0x04ae0, 0x0a570, 0x054d5, 0x0d260, 0x0d950, 0x16554, 0x056a0, 0x09ad0, 0x055d2,  # 1900-1909
    0x04ae0, 0x0a5b6, 0x0a4d0, 0x0d250, 0x1d255, 0x0b540, 0x0d6a0, 0x0ada2, 0x095b0, 0x14977,  # 1910-1919
    0x04970, 0x0a4b0, 0x0b4b5, 0x06a50, 0x06d40, 0x1ab54, 0x02b60, 0x09570, 0x052f2, 0x04970,  # 1920-1929
    0x06566, 0x0d4a0, 0x0ea50, 0x06e95, 0x05ad0, 0x02b60, 0x186e3, 0x092e0, 0x1c8d7, 0x0c950,  # 1930-1939
    0x0d4a0, 0x1d8a6, 0x0b550, 0x056a0, 0x1a5b4, 0x025d0, 0x092d0, 0x0d2b2, 0x0a950, 0x0b557,  # 1940-1949
    0x06ca0, 0x0b550, 0x15355, 0x04da0, 0x0a5d0, 0x14573, 0x052d0, 0x0a9a8, 0x0e950, 0x06aa0,  # 1950-1959
    0x0aea6, 0x0ab50, 0x04b60, 0x0aae4, 0x0a570, 0x05260, 0x0f263, 0x0d950, 0x05b57, 0x056a0,  # 1960-1969
    0x096d0, 0x04dd5, 0x04ad0, 0x0a4d0, 0x0d4d4, 0x0d250, 0x0d558, 0x0b540, 0x0b5a0, 0x195a6,  # 1970-1979
    0x095b0, 0x049b0, 0x0a974, 0x0a4b0, 0x0b27a, 0x06a50, 0x06d40, 0x0af46, 0x0ab60, 0x09570,  # 1980-1989
    0x04af5, 0x04970, 0x064b0, 0x074a3, 0x0ea50, 0x06b58, 0x055c0, 0x0ab60, 0x096d5, 0x092e0,  # 1990-1999
    0x0c960, 0x0d954, 0x0d4a0, 0x0da50, 0x07552, 0x056a0, 0x0abb7, 0x025d0, 0x092d0, 0x0cab5,  # 2000-2009
    0x0a950, 0x0b4a0, 0x0baa4, 0x0ad50, 0x055d9, 0x04ba0, 0x0a5b0, 0x15176, 0x052b0, 0x0a930,  # 2010-2019
    0x07954, 0x06aa0, 0x0ad50, 0x05b52, 0x04b60, 0x0a6e6, 0x0a4e0, 0x0d260, 0x0ea65, 0x0d530,  # 2020-2029
    0x05aa0, 0x076a3, 0x096d0, 0x04bd7, 0x04ad0, 0x0a4d0, 0x1d0b6, 0x0d250, 0x0d520, 0x0dd45,  # 2030-2039
    0x0b5a0, 0x056d0, 0x055b2, 0x049b0, 0x0a577, 0x0a4b0, 0x0aa50, 0x1b255, 0x06d20, 0x0ada0,  # 2040-2049
)
# fmt: on

FIRST_YEAR = 1900
LAST_YEAR = FIRST_YEAR + len(LUNAR_INFO) - 1

BASE_YEAR_DAYS = 12 * 29
LEAP_LONG_BIT = 0x10000
MONTH_BITS_TOP = 0x8000


def check_int_field(value: int, name: str) -> int:
    """
    Calendar fields must be real integers; 2.9, "2" and True are rejected, not truncated.
    """
    if isinstance(value, bool):
        raise InvalidCalendarFieldError(f"{name} must be an integer, got bool", {name: value})
    try:
        return operator.index(value)
    except TypeError as e:
        raise InvalidCalendarFieldError(
            f"{name} must be an integer, got {type(value).__name__}", {name: value}
        ) from e


def check_year(year: int) -> int:
    y = check_int_field(year, "year")
    if not (FIRST_YEAR <= y <= LAST_YEAR):
        raise OutOfRangeYearError(
            f"lunar year out of supported range: {y}",
            {"first_year": FIRST_YEAR, "last_year": LAST_YEAR},
        )
    return y


def check_month(month: int) -> int:
    m = check_int_field(month, "month")
    if not (1 <= m <= 12):
        raise InvalidCalendarFieldError(f"lunar month out of range: {m}", {"month": m})
    return m


def year_info(year: int) -> int:
    return LUNAR_INFO[check_year(year) - FIRST_YEAR]


def leap_month(year: int) -> int:
    """Leap month number of the lunar year, 0 if the year has none."""
    return year_info(year) & 0xF


def leap_month_days(year: int) -> int:
    if leap_month(year) == 0:
        return 0
    return 30 if (year_info(year) & LEAP_LONG_BIT) else 29


def month_days(year: int, month: int) -> int:
    """Length of the ordinary (non-leap) month."""
    m = check_month(month)
    return 30 if (year_info(year) & (MONTH_BITS_TOP >> (m - 1))) else 29


def year_days(year: int) -> int:
    info = year_info(year)
    days = BASE_YEAR_DAYS
    bit = MONTH_BITS_TOP
    for _ in range(12):
        if info & bit:
            days += 1
        bit >>= 1
    return days + leap_month_days(year)


# ============================================================
# Decoded view
# ============================================================

@dataclass(frozen=True)
class YearInfo:
    """
    Unpacked form of one LUNAR_INFO entry.
    """
    year: int
    leap_month: int
    leap_is_long: bool
    month_lengths: Tuple[int, ...]  # 12 entries, months 1..12

    @property
    def leap_days(self) -> int:
        if self.leap_month == 0:
            return 0
        return 30 if self.leap_is_long else 29

    @property
    def total_days(self) -> int:
        return sum(self.month_lengths) + self.leap_days


def decode_year(year: int) -> YearInfo:
    return _decode_year(check_year(year))


@lru_cache(maxsize=None)
def _decode_year(y: int) -> YearInfo:
    info = LUNAR_INFO[y - FIRST_YEAR]
    return YearInfo(
        year=y,
        leap_month=info & 0xF,
        leap_is_long=bool(info & LEAP_LONG_BIT),
        month_lengths=tuple(month_days(y, m) for m in range(1, 13)),
    )


def lunar_months(year: int) -> Tuple[Tuple[int, bool, int], ...]:
    """
    Months of the lunar year in calendar order as (month, is_leap, days).
    The leap month follows its ordinary sibling.
    """
    return _lunar_months(check_year(year))


@lru_cache(maxsize=None)
def _lunar_months(y: int) -> Tuple[Tuple[int, bool, int], ...]:
    yi = _decode_year(y)
    out: List[Tuple[int, bool, int]] = []
    for m, days in enumerate(yi.month_lengths, start=1):
        out.append((m, False, days))
        if m == yi.leap_month:
            out.append((m, True, yi.leap_days))
    return tuple(out)


@lru_cache(maxsize=1)
def year_start_offsets() -> Tuple[int, ...]:
    """
    Day offset from EPOCH of each lunar new year, FIRST_YEAR..LAST_YEAR,
    followed by the offset one past the last tabulated day.
    """
    offsets = [0]
    for y in range(FIRST_YEAR, LAST_YEAR + 1):
        offsets.append(offsets[-1] + year_days(y))
    return tuple(offsets)
