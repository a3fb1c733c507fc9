from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

from skyfield.api import Loader
from skyfield import almanac

log = logging.getLogger(__name__)

NEW_MOON_PHASE = 0


# ----------------------------
# Ephemeris path resolution
# ----------------------------
def _project_data_dir() -> Path:
    return Path(__file__).resolve().parents[4] / "data"


def _default_ephemeris_path() -> Path:
    """
    Prefer de440s (longer coverage) if present; otherwise fall back to de421.
    """
    data_dir = _project_data_dir()
    p440s = data_dir / "de440s.bsp"
    p421 = data_dir / "de421.bsp"
    return p440s if p440s.exists() else p421


def resolve_ephemeris_path(
    *,
    ephemeris_path: Optional[Path],
    ephemeris: Optional[Union[str, Path]],
) -> Path:
    """
    Resolution priority:
      1) ephemeris_path (Path) if provided
      2) ephemeris (str|Path): absolute path as is, bare name under the project data dir
      3) default: de440s if present else de421
    """
    if ephemeris_path is not None:
        return ephemeris_path

    if ephemeris is not None:
        p = ephemeris if isinstance(ephemeris, Path) else Path(ephemeris)
        if p.is_absolute():
            return p
        return _project_data_dir() / p

    return _default_ephemeris_path()


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class SkyfieldProvider:
    """
    New-moon instants from a JPL ephemeris via skyfield.almanac.
    """

    ephemeris_path: Optional[Path] = None
    ephemeris: Optional[Union[str, Path]] = None

    def __post_init__(self) -> None:
        resolved = resolve_ephemeris_path(
            ephemeris_path=self.ephemeris_path,
            ephemeris=self.ephemeris,
        )
        object.__setattr__(self, "ephemeris_path", resolved)

        if not self.ephemeris_path.exists():
            data_dir = _project_data_dir()
            raise FileNotFoundError(
                f"Ephemeris not found: {self.ephemeris_path}\n"
                f"Place de440s.bsp or de421.bsp under {data_dir}, "
                "or pass ephemeris='de440s.bsp' / ephemeris_path=Path(...)."
            )

        loader = Loader(str(self.ephemeris_path.parent))
        eph = loader(self.ephemeris_path.name)
        object.__setattr__(self, "_eph", eph)
        object.__setattr__(self, "_ts", loader.timescale())

    def new_moons_utc(self, start_utc: datetime, end_utc: datetime) -> List[datetime]:
        """New moon instants in [start_utc, end_utc), UTC-aware."""
        s, e = _as_utc(start_utc), _as_utc(end_utc)
        if e <= s:
            raise ValueError("end_utc must be greater than start_utc")

        t0 = self._ts.from_datetime(s)
        t1 = self._ts.from_datetime(e)
        times, phases = almanac.find_discrete(t0, t1, almanac.moon_phases(self._eph))

        out: List[datetime] = []
        for t, ph in zip(times, phases):
            if int(ph) != NEW_MOON_PHASE:
                continue
            dt = t.utc_datetime()
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            out.append(dt)

        log.debug("new moons %s .. %s: %d found", s.isoformat(), e.isoformat(), len(out))
        return out

    def coverage_years(self) -> Tuple[int, int]:
        """Calendar years fully covered by the loaded ephemeris segments."""
        segs = self._eph.spk.segments
        t0 = self._ts.tt_jd(min(seg.start_jd for seg in segs))
        t1 = self._ts.tt_jd(max(seg.end_jd for seg in segs))
        return t0.utc_datetime().year + 1, t1.utc_datetime().year - 1
