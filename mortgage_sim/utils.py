"""Utility functions for the mortgage simulator.

This module provides helpers for parsing user input into Python data types and
for handling dates, including adding months and normalizing year-month strings
to ``datetime.date`` instances. It uses Python's ``datetime`` module to
calculate month offsets.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
import calendar

from .data_models import RateChange


def parse_year_month(ym: str) -> date:
    """Return the first day of the month named by ``ym``.

    Parameters
    ----------
    ym: str
        Year and month as ``"YYYY-MM"``. Anything after the month, such as a
        day, is discarded.

    Raises
    ------
    ValueError
        If no valid year and month can be read from ``ym``.
    """
    try:
        parts = ym.strip().split("-")
        if len(parts) < 2:
            raise ValueError
        return date(int(parts[0]), int(parts[1]), 1)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid year-month string: {ym}") from exc


def parse_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM`` into a ``date``.

    A missing day means the first of the month.
    """
    parts = value.strip().split("-")
    if len(parts) == 2:
        return parse_year_month(value)
    try:
        if len(parts) != 3:
            raise ValueError
        return date(int(parts[0]), int(parts[1]), int(parts[2]))
    except ValueError as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def add_months(dt: date, months: int) -> date:
    """Shift ``dt`` forward by ``months`` calendar months.

    Days past the end of the target month fall back to its last day, so the
    payment after Jan 31 is due on Feb 28 (or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def same_month(a: date, b: date) -> bool:
    return (a.year, a.month) == (b.year, b.month)


def decimal_from_str(value: str) -> Decimal:
    """Read a money or rate amount as a finite ``Decimal``.

    Thousands separators are dropped. NaN, infinities and unparsable text
    raise ``ValueError``.
    """
    try:
        cleaned = str(value).replace(",", "").strip()
        result = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_rate_change(value: str) -> RateChange:
    """Parse a ``YYYY-MM[-DD]:RATE`` string into a ``RateChange``."""
    parts = value.split(":")
    if len(parts) != 2:
        raise ValueError(f"Rate change must be in YYYY-MM-DD:RATE format; got {value}")
    when, rate = parts
    return RateChange(date=parse_date(when), rate=decimal_from_str(rate.rstrip("% ")))
