# src/amlich/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Tuple

LeapPolicy = Literal["strict", "ignore"]

LEAP_POLICIES: Tuple[str, ...] = ("strict", "ignore")

ENV_LEAP_POLICY = "AMLICH_LEAP_POLICY"
ENV_DEBUG_CONVERTER = "AMLICH_DEBUG_CONVERTER"


def _env_truthy(name: str) -> bool:
    v = os.environ.get(name, "")
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def normalize_leap_policy(policy: str) -> LeapPolicy:
    p = str(policy).strip().lower()
    if p not in LEAP_POLICIES:
        raise ValueError(f"leap_policy must be one of {LEAP_POLICIES} (got {policy!r})")
    return p  # type: ignore[return-value]


@dataclass(frozen=True)
class ConverterConfig:
    """
    Converter behavior knobs.

    leap_policy:
        What lunar_to_solar does with is_leap_month=True when the lunar year
        has no leap month of that number.
          - "strict": raise InconsistentLeapRequestError
          - "ignore": drop the flag and convert the ordinary month
    debug:
        Emit debug log records for the year/month walk.
    """
    leap_policy: LeapPolicy = "strict"
    debug: bool = False


def debug_from_env() -> bool:
    """AMLICH_DEBUG_CONVERTER only; the leap policy is not looked at."""
    return _env_truthy(ENV_DEBUG_CONVERTER)


def default_config() -> ConverterConfig:
    """
    Build the config from the environment.

      AMLICH_LEAP_POLICY=strict|ignore
      AMLICH_DEBUG_CONVERTER=1
    """
    raw = os.environ.get(ENV_LEAP_POLICY, "").strip()
    policy = normalize_leap_policy(raw) if raw else "strict"
    return ConverterConfig(leap_policy=policy, debug=debug_from_env())
