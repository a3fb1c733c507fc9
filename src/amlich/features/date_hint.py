# src/amlich/features/date_hint.py
from __future__ import annotations

import logging
from datetime import date
from typing import Literal, Tuple

from amlich.core.converter import LunarDate, lunar_to_solar, solar_to_lunar
from amlich.core.errors import LunarCalendarError
from amlich.features.config import LEAP_LABEL

log = logging.getLogger(__name__)

CalendarType = Literal["solar", "lunar"]

SOLAR_HINT_TEMPLATE = "(Tương ứng Âm lịch: {label})"
LUNAR_HINT_TEMPLATE = "(Tương ứng Dương lịch: {label})"


def format_lunar_label(ld: LunarDate) -> str:
    """
    "d/m/y", with a leap suffix for the inserted month: "15/2/2023 (nhuận)".
    """
    label = f"{ld.day}/{ld.month}/{ld.year}"
    return f"{label} ({LEAP_LABEL})" if ld.is_leap else label


def format_solar_label(d: date) -> str:
    return f"{d.day}/{d.month}/{d.year}"


def _split_ymd(date_str: str) -> Tuple[int, int, int]:
    parts = str(date_str).strip().split("-")
    if len(parts) != 3:
        raise ValueError(f"expected YYYY-MM-DD, got {date_str!r}")
    y, m, d = (int(p) for p in parts)
    return y, m, d


def converted_date_hint(date_str: str, calendar_type: CalendarType = "solar") -> str:
    """
    Hint shown next to a date field: the same day in the other calendar.

    - calendar_type="solar": date_str is Gregorian, hint shows the lunar date
    - calendar_type="lunar": date_str is a lunar (non-leap) date, hint shows the Gregorian date

    Never raises; a date that cannot be converted gives "".
    """
    if not date_str:
        return ""

    try:
        y, m, d = _split_ymd(date_str)
        if calendar_type == "solar":
            ld = solar_to_lunar(y, m, d)
            return SOLAR_HINT_TEMPLATE.format(label=format_lunar_label(ld))
        if calendar_type == "lunar":
            sd = lunar_to_solar(y, m, d, False)
            return LUNAR_HINT_TEMPLATE.format(label=format_solar_label(sd.to_date()))
        raise ValueError(f"calendar_type must be 'solar' or 'lunar' (got {calendar_type!r})")
    except (LunarCalendarError, ValueError) as e:
        log.debug("converted_date_hint: no hint for date=%r calendar_type=%r: %s", date_str, calendar_type, e)
        return ""
