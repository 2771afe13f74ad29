# backend/windowquote/api/api_booking.py

import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from .. import crud
from ..database import get_db
from ..models import AdminUser
from ..schemas.booking import BookingCreate, BookingResponse, BookingStats
from ..services.notifications import notify_booking_created
from .auth import get_current_admin

router = APIRouter(tags=["bookings"])
logger = logging.getLogger(__name__)
# No prefix here; main.py mounts this router under /api.


@router.post("/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    *,
    db: Session = Depends(get_db),
    booking_in: BookingCreate,
    background_tasks: BackgroundTasks,
):
    """Create a booking from a quote wizard submission. Open to anonymous visitors."""
    db_booking = crud.booking.create_booking(db, booking_in)
    response = BookingResponse.model_validate(db_booking)
    background_tasks.add_task(notify_booking_created, response)
    return response


@router.get("/bookings", response_model=List[BookingResponse])
def list_bookings(
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """All bookings ordered by scheduled date (admin dashboard table)."""
    return crud.booking.get_bookings(db)


@router.get("/bookings/stats", response_model=BookingStats)
def booking_stats(
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """Revenue and volume figures for the dashboard stat cards."""
    return crud.booking.get_stats(db)
