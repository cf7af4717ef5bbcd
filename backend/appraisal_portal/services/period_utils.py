"""Review period calendar helpers."""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime, time
from typing import Literal

from appraisal_portal.models.review_period import PeriodType, ReviewPeriod, ReviewPeriodDraft, ReviewPeriodSummary

Quarter = Literal["Q1", "Q2", "Q3", "Q4"]
Half = Literal["H1", "H2"]
Cadence = Literal["quarter", "half"]

_QUARTER_MONTHS: dict[str, tuple[int, int]] = {
    "Q1": (1, 3),
    "Q2": (4, 6),
    "Q3": (7, 9),
    "Q4": (10, 12),
}
_HALF_MONTHS: dict[str, tuple[int, int]] = {
    "H1": (1, 6),
    "H2": (7, 12),
}


def current_quarter(today: date | None = None) -> Quarter:
    month = (today or date.today()).month
    return f"Q{(month - 1) // 3 + 1}"  # type: ignore[return-value]


def current_half(today: date | None = None) -> Half:
    return "H1" if (today or date.today()).month <= 6 else "H2"


def _month_span(year: int, first_month: int, last_month: int) -> tuple[datetime, datetime]:
    last_day = calendar.monthrange(year, last_month)[1]
    return (
        datetime(year, first_month, 1),
        datetime.combine(date(year, last_month, last_day), time(23, 59, 59)),
    )


def quarter_dates(quarter: Quarter, year: int) -> tuple[datetime, datetime]:
    return _month_span(year, *_QUARTER_MONTHS[quarter])


def half_dates(half: Half, year: int) -> tuple[datetime, datetime]:
    return _month_span(year, *_HALF_MONTHS[half])


def generate_period_name(period_type: PeriodType, year: int) -> str:
    return f"{period_type} {year}"


def _parse(value: str | datetime) -> datetime:
    """Naive local wall-clock time; offset-aware values are converted first."""
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.replace(tzinfo=None)


def _short(value: datetime) -> str:
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def format_date_range(start_date: str | datetime, end_date: str | datetime) -> str:
    return f"{_short(_parse(start_date))} - {_short(_parse(end_date))}"


def days_remaining(end_date: str | datetime, now: datetime | None = None) -> int:
    delta = _parse(end_date) - _parse(now or datetime.now())
    return math.ceil(delta.total_seconds() / 86400)


def is_period_active(period: ReviewPeriod, now: datetime | None = None) -> bool:
    if period.status != "active":
        return False
    moment = _parse(now or datetime.now())
    return _parse(period.start_date) <= moment <= _parse(period.end_date)


def period_draft(
    period_type: PeriodType | None = None,
    year: int | None = None,
    cadence: Cadence = "quarter",
    today: date | None = None,
) -> ReviewPeriodDraft:
    """Name and date range for a new review period.

    Without an explicit type the current quarter (or half, for the "half"
    cadence) is used. Annual periods span the calendar year and Custom
    periods carry no dates.
    """
    today = today or date.today()
    if period_type is None:
        period_type = current_half(today) if cadence == "half" else current_quarter(today)
    year = year or today.year

    if period_type in _QUARTER_MONTHS:
        span: tuple[datetime, datetime] | None = quarter_dates(period_type, year)  # type: ignore[arg-type]
    elif period_type in _HALF_MONTHS:
        span = half_dates(period_type, year)  # type: ignore[arg-type]
    elif period_type == "Annual":
        span = _month_span(year, 1, 12)
    else:
        span = None

    return ReviewPeriodDraft(
        type=period_type,
        year=year,
        name=generate_period_name(period_type, year),
        start_date=span[0].isoformat() if span else None,
        end_date=span[1].isoformat() if span else None,
    )


def summarize_period(period: ReviewPeriod, now: datetime | None = None) -> ReviewPeriodSummary:
    return ReviewPeriodSummary(
        period=period,
        date_range=format_date_range(period.start_date, period.end_date),
        days_remaining=days_remaining(period.end_date, now),
        is_active=is_period_active(period, now),
    )
