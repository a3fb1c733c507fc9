# src/amlich/core/newmoon.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .converter import lunar_to_solar_date
from .year_table import lunar_months

UTC = timezone.utc
# the packed table follows the China Standard Time day boundary
UTC8 = timezone(timedelta(hours=8), "UTC+08:00")


@runtime_checkable
class NewMoonProvider(Protocol):
    def new_moons_utc(self, start_utc: datetime, end_utc: datetime) -> List[datetime]: ...


@dataclass(frozen=True)
class MonthStartCheck:
    """
    One tabulated month start compared with the astronomical new moon.
    delta_days = table_start - new_moon_local (0 when they agree).
    """
    year: int
    month: int
    is_leap: bool
    table_start: date
    new_moon_utc: Optional[datetime]
    new_moon_local: Optional[date]

    @property
    def delta_days(self) -> Optional[int]:
        if self.new_moon_local is None:
            return None
        return (self.table_start - self.new_moon_local).days

    @property
    def ok(self) -> bool:
        return self.delta_days == 0


def table_month_starts(year: int) -> List[Tuple[int, bool, date]]:
    """(month, is_leap, first solar day) for each month of a lunar year."""
    return [
        (m, is_leap, lunar_to_solar_date(year, m, 1, is_leap))
        for m, is_leap, _days in lunar_months(year)
    ]


def _nearest(day: date, moons: Sequence[Tuple[datetime, date]], max_gap_days: int) -> Optional[Tuple[datetime, date]]:
    best: Optional[Tuple[datetime, date]] = None
    for t, d in moons:
        gap = abs((d - day).days)
        if gap > max_gap_days:
            continue
        if best is None or gap < abs((best[1] - day).days):
            best = (t, d)
    return best


def check_year_against_new_moons(
    provider: NewMoonProvider,
    year: int,
    *,
    tz: timezone = UTC8,
    max_gap_days: int = 3,
) -> List[MonthStartCheck]:
    """
    For every month of the lunar year, find the new moon (local date in tz)
    closest to the tabulated first day.
    """
    starts = table_month_starts(year)
    first = starts[0][2] - timedelta(days=max_gap_days + 1)
    last = starts[-1][2] + timedelta(days=max_gap_days + 1)

    t0 = datetime.combine(first, time(0, 0), tzinfo=tz).astimezone(UTC)
    t1 = datetime.combine(last, time(0, 0), tzinfo=tz).astimezone(UTC)
    moons = [(t, t.astimezone(tz).date()) for t in provider.new_moons_utc(t0, t1)]

    out: List[MonthStartCheck] = []
    for m, is_leap, start in starts:
        hit = _nearest(start, moons, max_gap_days)
        out.append(
            MonthStartCheck(
                year=int(year),
                month=m,
                is_leap=is_leap,
                table_start=start,
                new_moon_utc=hit[0] if hit else None,
                new_moon_local=hit[1] if hit else None,
            )
        )
    return out
