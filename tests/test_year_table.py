from __future__ import annotations

from datetime import date, timedelta

import pytest

from amlich.core.errors import InvalidCalendarFieldError, OutOfRangeYearError
from amlich.core.year_table import (
    EPOCH,
    FIRST_YEAR,
    LAST_YEAR,
    LUNAR_INFO,
    check_int_field,
    decode_year,
    leap_month,
    leap_month_days,
    lunar_months,
    month_days,
    year_days,
    year_info,
    year_start_offsets,
)


def test_table_bounds():
    assert len(LUNAR_INFO) == 150
    assert FIRST_YEAR == 1900
    assert LAST_YEAR == 2049
    assert LUNAR_INFO[0] == 0x04BD8
    assert LUNAR_INFO[-1] == 0x0ADA0


@pytest.mark.parametrize("year", [1899, 2050, 2100])
def test_year_info_rejects_years_outside_table(year):
    with pytest.raises(OutOfRangeYearError):
        year_info(year)


def test_leap_month_numbers():
    assert leap_month(1900) == 8
    assert leap_month(2020) == 4
    assert leap_month(2023) == 2
    assert leap_month(2024) == 0


def test_leap_month_days():
    assert leap_month_days(1900) == 29
    assert leap_month_days(1906) == 30  # 0x16554
    assert leap_month_days(2023) == 29
    assert leap_month_days(2024) == 0


def test_month_days_2024():
    # 0x04b60 -> month bits 0100 1011 0110
    assert [month_days(2024, m) for m in range(1, 13)] == [29, 30, 29, 29, 30, 29, 30, 30, 29, 30, 30, 29]


@pytest.mark.parametrize("month", [0, 13])
def test_month_days_rejects_bad_month(month):
    with pytest.raises(InvalidCalendarFieldError):
        month_days(2024, month)


def test_year_days():
    assert year_days(2024) == 354
    assert year_days(2023) == 384
    assert year_days(2020) == 384


def test_decoded_year_matches_packed_accessors():
    for y in range(FIRST_YEAR, LAST_YEAR + 1):
        yi = decode_year(y)
        assert yi.leap_month == leap_month(y)
        assert yi.leap_days == leap_month_days(y)
        assert len(yi.month_lengths) == 12
        assert all(n in (29, 30) for n in yi.month_lengths)
        assert yi.total_days == year_days(y)


def test_lunar_months_places_leap_after_ordinary_sibling():
    months = lunar_months(2023)
    assert len(months) == 13
    assert months[1] == (2, False, 30)
    assert months[2] == (2, True, 29)
    assert months[3][:2] == (3, False)

    assert len(lunar_months(2024)) == 12
    assert not any(is_leap for _, is_leap, _ in lunar_months(2024))


def test_at_most_one_leap_month_per_year():
    for y in range(FIRST_YEAR, LAST_YEAR + 1):
        leaps = [m for m, is_leap, _ in lunar_months(y) if is_leap]
        if leap_month(y) == 0:
            assert leaps == []
        else:
            assert leaps == [leap_month(y)]
        assert sum(days for _, _, days in lunar_months(y)) == year_days(y)


def test_year_start_offsets():
    starts = year_start_offsets()
    assert len(starts) == len(LUNAR_INFO) + 1
    assert starts[0] == 0
    for i, y in enumerate(range(FIRST_YEAR, LAST_YEAR + 1)):
        assert starts[i + 1] - starts[i] == year_days(y)


def test_year_start_offsets_land_on_known_new_years():
    starts = year_start_offsets()
    assert EPOCH + timedelta(days=starts[2000 - FIRST_YEAR]) == date(2000, 2, 5)
    assert EPOCH + timedelta(days=starts[2024 - FIRST_YEAR]) == date(2024, 2, 10)


def test_check_int_field():
    assert check_int_field(7, "month") == 7
    with pytest.raises(InvalidCalendarFieldError) as ei:
        check_int_field(2.9, "month")
    assert ei.value.details == {"month": 2.9}
    for bad in (True, False, 2.0, "2", None):
        with pytest.raises(InvalidCalendarFieldError):
            check_int_field(bad, "month")


@pytest.mark.parametrize("month", [2.0, 2.5, True, "2"])
def test_month_days_rejects_non_integer_month(month):
    with pytest.raises(InvalidCalendarFieldError):
        month_days(2024, month)


def test_decoded_years_are_cached_per_year():
    assert decode_year(2024) is decode_year(2024)
    assert lunar_months(2023) is lunar_months(2023)


@pytest.mark.parametrize("year", [2024.0, "2024", True])
def test_decoders_reject_non_integer_year(year):
    with pytest.raises(InvalidCalendarFieldError):
        decode_year(year)
    with pytest.raises(InvalidCalendarFieldError):
        lunar_months(year)
    with pytest.raises(InvalidCalendarFieldError):
        year_info(year)


def test_decoders_reject_years_outside_table():
    with pytest.raises(OutOfRangeYearError):
        decode_year(2050)
    with pytest.raises(OutOfRangeYearError):
        lunar_months(1899)
