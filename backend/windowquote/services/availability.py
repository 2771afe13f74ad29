"""Booked-date lookup for the quote wizard calendar.

Scheduling is one job per calendar day: a day with any booking is taken,
regardless of time of day. Partial-day capacity is not modelled.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..models import Booking


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def get_booked_dates(
    db: Session,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[date]:
    """Return distinct booked calendar days in ascending order.

    With no range every booking's date is returned. When both ``start`` and
    ``end`` are given only dates with ``start <= scheduled_date <= end`` are
    included.
    """
    query = db.query(Booking.scheduled_date).distinct()
    if start is not None and end is not None:
        query = query.filter(
            Booking.scheduled_date >= start,
            Booking.scheduled_date <= end,
        )
    rows = query.order_by(Booking.scheduled_date.asc()).all()
    return [row[0] for row in rows]


def is_date_disabled(
    day: date | datetime,
    booked_dates: Iterable[date | datetime],
    today: Optional[date] = None,
) -> bool:
    """True when ``day`` is in the past or already has a booking."""
    candidate = _as_date(day)
    today = today or date.today()
    if candidate < today:
        return True
    return any(_as_date(booked) == candidate for booked in booked_dates)
