from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic_core import PydanticCustomError
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.booking import coerce_calendar_date
from ..services.availability import get_booked_dates
from ..utils.errors import ValidationError

router = APIRouter(tags=["availability"])


def _parse_bound(value: Optional[str], field: str) -> Optional[date]:
    if value is None or not value.strip():
        return None
    try:
        return coerce_calendar_date(value)
    except PydanticCustomError:
        raise ValidationError("Invalid date", field)


@router.get("/availability", response_model=List[str])
def read_availability(
    start: Optional[str] = Query(default=None),
    end: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    """Booked calendar days as ISO date strings.

    The range filter applies only when both ``start`` and ``end`` are given;
    otherwise every booked day is returned.
    """
    start_date = _parse_bound(start, "start")
    end_date = _parse_bound(end, "end")
    if start_date and end_date and start_date > end_date:
        raise ValidationError("Start date must be on or before end date", "start")
    return [d.isoformat() for d in get_booked_dates(db, start_date, end_date)]
