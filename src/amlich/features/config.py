# src/amlich/features/config.py
from __future__ import annotations

"""
Feature-level constants for displaying lunar dates (Vietnamese labels).

- month names: 1 -> "Giêng", 11 -> "Một", 12 -> "Chạp", leap months get the "nhuận" suffix
- Can Chi (sexagenary) year name: stem = (Y + 6) % 10, branch = (Y + 8) % 12
    1984 -> Giáp Tý, 2024 -> Giáp Thìn
"""

from typing import Dict, List

LUNAR_MONTH_NAME_BY_MONTH_NO: Dict[int, str] = {
    1:  "Giêng",
    2:  "Hai",
    3:  "Ba",
    4:  "Tư",
    5:  "Năm",
    6:  "Sáu",
    7:  "Bảy",
    8:  "Tám",
    9:  "Chín",
    10: "Mười",
    11: "Một",
    12: "Chạp",
}

LEAP_LABEL = "nhuận"

HEAVENLY_STEMS: List[str] = ["Giáp", "Ất", "Bính", "Đinh", "Mậu", "Kỷ", "Canh", "Tân", "Nhâm", "Quý"]
EARTHLY_BRANCHES: List[str] = ["Tý", "Sửu", "Dần", "Mão", "Thìn", "Tỵ", "Ngọ", "Mùi", "Thân", "Dậu", "Tuất", "Hợi"]


def lunar_month_name_from_month_no(month_no: int) -> str:
    m = int(month_no)
    try:
        return LUNAR_MONTH_NAME_BY_MONTH_NO[m]
    except KeyError as e:
        raise ValueError(f"invalid lunar month_no: {month_no}") from e


def lunar_month_display_name(month_no: int, is_leap: bool) -> str:
    base = f"tháng {lunar_month_name_from_month_no(month_no)}"
    return f"{base} {LEAP_LABEL}" if is_leap else base


def can_chi_year(year: int) -> str:
    """
    Sexagenary name of a lunar year, e.g. 2024 -> "Giáp Thìn".
    """
    y = int(year)
    return f"{HEAVENLY_STEMS[(y + 6) % 10]} {EARTHLY_BRANCHES[(y + 8) % 12]}"
