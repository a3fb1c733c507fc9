from __future__ import annotations

import pytest

from amlich.core.converter import LunarDate
from amlich.features.config import can_chi_year, lunar_month_display_name
from amlich.features.date_hint import converted_date_hint, format_lunar_label


@pytest.mark.parametrize(
    "year, name",
    [(1984, "Giáp Tý"), (2000, "Canh Thìn"), (2023, "Quý Mão"), (2024, "Giáp Thìn")],
)
def test_can_chi_year(year, name):
    assert can_chi_year(year) == name


def test_lunar_month_display_name():
    assert lunar_month_display_name(1, False) == "tháng Giêng"
    assert lunar_month_display_name(10, False) == "tháng Mười"
    assert lunar_month_display_name(11, False) == "tháng Một"
    assert lunar_month_display_name(12, False) == "tháng Chạp"
    assert lunar_month_display_name(2, True) == "tháng Hai nhuận"
    with pytest.raises(ValueError):
        lunar_month_display_name(13, False)


def test_format_lunar_label():
    assert format_lunar_label(LunarDate(2024, 8, 15, False)) == "15/8/2024"
    assert format_lunar_label(LunarDate(2023, 2, 1, True)) == "1/2/2023 (nhuận)"


def test_hint_for_solar_input():
    assert converted_date_hint("2024-02-10", "solar") == "(Tương ứng Âm lịch: 1/1/2024)"
    assert converted_date_hint("2023-03-22", "solar") == "(Tương ứng Âm lịch: 1/2/2023 (nhuận))"


def test_hint_for_lunar_input():
    assert converted_date_hint("2024-08-15", "lunar") == "(Tương ứng Dương lịch: 17/9/2024)"
    assert converted_date_hint("2024-01-01", "lunar") == "(Tương ứng Dương lịch: 10/2/2024)"


@pytest.mark.parametrize(
    "date_str, calendar_type",
    [
        ("", "solar"),
        ("abc", "solar"),
        ("2024-02", "solar"),
        ("1800-01-01", "solar"),
        ("2023-02-29", "solar"),
        ("2024-01-30", "lunar"),
        ("2060-01-01", "lunar"),
        ("2024-02-10", "julian"),
    ],
)
def test_hint_is_empty_when_conversion_fails(date_str, calendar_type):
    assert converted_date_hint(date_str, calendar_type) == ""


def test_hint_ignores_bad_leap_policy_env(monkeypatch):
    monkeypatch.setenv("AMLICH_LEAP_POLICY", "bogus")
    assert converted_date_hint("2024-02-10", "solar") == "(Tương ứng Âm lịch: 1/1/2024)"
    assert converted_date_hint("2024-08-15", "lunar") == "(Tương ứng Dương lịch: 17/9/2024)"
