# src/amlich/core/errors.py
"""
Typed failures for the lunar calendar converter.

Exception hierarchy:
    LunarCalendarError (ValueError)
    ├── OutOfRangeYearError
    ├── InvalidCalendarFieldError
    └── InconsistentLeapRequestError
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class LunarCalendarError(ValueError):
    """Base class for every conversion failure."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class OutOfRangeYearError(LunarCalendarError):
    """
    The date falls outside the tabulated lunar years.

    Examples:
        - solar date before 1900-01-31
        - lunar year after the last table entry
    """


class InvalidCalendarFieldError(LunarCalendarError):
    """
    A month or day field is not valid for its calendar.

    Examples:
        - month 13
        - solar 2023-02-29
        - lunar day 30 in a 29-day month
    """


class InconsistentLeapRequestError(LunarCalendarError):
    """Leap month requested but the lunar year has no leap month with that number."""
