from __future__ import annotations

import logging
import time
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from amlich.core.converter import (
    LunarDate,
    lunar_dates_between,
    lunar_to_solar,
    solar_date_to_lunar,
    supported_solar_range,
)
from amlich.core.errors import LunarCalendarError
from amlich.core.newmoon import table_month_starts
from amlich.core.year_table import FIRST_YEAR, LAST_YEAR, decode_year, lunar_months
from amlich.features.config import can_chi_year, lunar_month_display_name
from amlich.features.date_hint import converted_date_hint, format_lunar_label

router = APIRouter(prefix="/api/v1", tags=["public"])

log = logging.getLogger("amlich.api.public")

DEFAULT_LIMIT_DAYS = 370


# ============================================================
# Response Models
# ============================================================
class LunarDateModel(BaseModel):
    year: int
    month: int
    day: int
    is_leap: bool = Field(default=False, description="true for the inserted leap month")
    label: str = ""
    month_name: str = ""
    year_name: str = ""


class LunarDayResponse(BaseModel):
    date: date
    lunar: LunarDateModel


class SolarDayResponse(BaseModel):
    lunar: LunarDateModel
    date: date


class RangeResponse(BaseModel):
    start: date
    end: date
    days: List[LunarDayResponse]


class LunarMonthModel(BaseModel):
    month: int
    is_leap: bool
    days: int
    first_day: date
    month_name: str


class LunarYearResponse(BaseModel):
    year: int
    year_name: str
    leap_month: int = Field(default=0, description="0 when the year has no leap month")
    total_days: int
    months: List[LunarMonthModel]


class HintResponse(BaseModel):
    date: str
    calendar_type: str
    hint: str = Field(default="", description="empty when the date cannot be converted")


# ============================================================
# Helpers: parsing & errors
# ============================================================
def _parse_iso_date(s: str) -> date:
    try:
        return date.fromisoformat(s)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid date format: {s} (expected YYYY-MM-DD)") from e


def _parse_date_any(x: str | date) -> date:
    if isinstance(x, date):
        return x
    return _parse_iso_date(str(x))


def _unprocessable(e: LunarCalendarError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(e))


def _lunar_model(ld: LunarDate) -> LunarDateModel:
    return LunarDateModel(
        year=ld.year,
        month=ld.month,
        day=ld.day,
        is_leap=ld.is_leap,
        label=format_lunar_label(ld),
        month_name=lunar_month_display_name(ld.month, ld.is_leap),
        year_name=can_chi_year(ld.year),
    )


# =========================================================
# Public API (function-style, HTTP-ready)
# =========================================================
def get_lunar_day(date_: str | date) -> LunarDayResponse:
    d = _parse_date_any(date_)
    try:
        ld = solar_date_to_lunar(d)
    except LunarCalendarError as e:
        raise _unprocessable(e) from e
    return LunarDayResponse(date=d, lunar=_lunar_model(ld))


def get_solar_day(
    year: int,
    month: int,
    day: int,
    *,
    leap: bool = False,
    leap_policy: Optional[str] = None,
) -> SolarDayResponse:
    try:
        sd = lunar_to_solar(year, month, day, leap, leap_policy=leap_policy)
    except LunarCalendarError as e:
        raise _unprocessable(e) from e
    except ValueError as e:
        # bad leap_policy value
        raise HTTPException(status_code=422, detail=str(e)) from e

    # the flag may have been dropped by leap_policy="ignore"
    resolved = solar_date_to_lunar(sd.to_date())
    return SolarDayResponse(lunar=_lunar_model(resolved), date=sd.to_date())


def get_lunar_range(
    start: str | date,
    end: str | date,
    *,
    limit_days: int = DEFAULT_LIMIT_DAYS,
) -> RangeResponse:
    """
    Inclusive [start, end] conversion.
    """
    s = _parse_date_any(start)
    e = _parse_date_any(end)
    if e < s:
        raise HTTPException(status_code=422, detail="end must be >= start")

    days_count = (e - s).days + 1
    if days_count > limit_days:
        raise HTTPException(status_code=422, detail=f"range too large: {days_count} days (limit_days={limit_days})")

    first, last = supported_solar_range()
    if s < first or e > last:
        raise HTTPException(
            status_code=422,
            detail=f"range outside supported dates: {first.isoformat()} .. {last.isoformat()}",
        )

    days = [
        LunarDayResponse(date=d, lunar=_lunar_model(ld))
        for d, ld in lunar_dates_between(s, date.fromordinal(e.toordinal() + 1))
    ]
    return RangeResponse(start=s, end=e, days=days)


def get_lunar_year(year: int) -> LunarYearResponse:
    try:
        yi = decode_year(year)
        starts = {(m, leap): first_day for m, leap, first_day in table_month_starts(year)}
        months = [
            LunarMonthModel(
                month=m,
                is_leap=is_leap,
                days=days,
                first_day=starts[(m, is_leap)],
                month_name=lunar_month_display_name(m, is_leap),
            )
            for m, is_leap, days in lunar_months(year)
        ]
    except LunarCalendarError as e:
        raise _unprocessable(e) from e

    return LunarYearResponse(
        year=yi.year,
        year_name=can_chi_year(yi.year),
        leap_month=yi.leap_month,
        total_days=yi.total_days,
        months=months,
    )


# ============================================================
# Endpoints
# ============================================================
@router.get("/lunar", response_model=LunarDayResponse)
def get_lunar_endpoint(
    date_str: str = Query(..., alias="date", description="YYYY-MM-DD (solar)"),
) -> LunarDayResponse:
    return get_lunar_day(date_str)


@router.get("/solar", response_model=SolarDayResponse)
def get_solar_endpoint(
    year: int = Query(..., ge=FIRST_YEAR, le=LAST_YEAR),
    month: int = Query(..., ge=1, le=12),
    day: int = Query(..., ge=1, le=30),
    leap: bool = Query(False, description="leap month"),
    leap_policy: Optional[str] = Query(None, description="strict | ignore"),
) -> SolarDayResponse:
    return get_solar_day(year, month, day, leap=leap, leap_policy=leap_policy)


@router.get("/range", response_model=RangeResponse)
def get_range_endpoint(
    start_str: str = Query(..., alias="start", description="YYYY-MM-DD"),
    end_str: str = Query(..., alias="end", description="YYYY-MM-DD"),
    limit_days: int = Query(DEFAULT_LIMIT_DAYS, ge=1, le=2000, description="max days per request"),
    timing: bool = Query(False, description="log timing"),
) -> RangeResponse:
    t0 = time.perf_counter()
    res = get_lunar_range(start_str, end_str, limit_days=limit_days)
    t1 = time.perf_counter()

    if timing:
        log.warning("timing /range start=%s end=%s days=%d total=%.3fs", res.start, res.end, len(res.days), t1 - t0)

    return res


@router.get("/year/{year}", response_model=LunarYearResponse)
def get_year_endpoint(year: int) -> LunarYearResponse:
    return get_lunar_year(year)


@router.get("/hint", response_model=HintResponse)
def get_hint_endpoint(
    date_str: str = Query("", alias="date", description="YYYY-MM-DD"),
    calendar_type: str = Query("solar", description="solar | lunar"),
) -> HintResponse:
    return HintResponse(
        date=date_str,
        calendar_type=calendar_type,
        hint=converted_date_hint(date_str, calendar_type),  # type: ignore[arg-type]
    )


@router.get("/meta")
def get_meta_endpoint() -> Dict[str, Any]:
    first, last = supported_solar_range()
    return {
        "lunar_years": {"first": FIRST_YEAR, "last": LAST_YEAR},
        "solar_dates": {"first": first.isoformat(), "last": last.isoformat()},
    }
