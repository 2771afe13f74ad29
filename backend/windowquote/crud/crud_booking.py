import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..models.booking_status import BookingStatus
from ..services.quote_calculator import booking_total_price
from . import crud_pricing

logger = logging.getLogger(__name__)


class CRUDBooking:
    def get_bookings(self, db: Session) -> List[models.Booking]:
        return (
            db.query(models.Booking)
            .order_by(models.Booking.scheduled_date.asc(), models.Booking.id.asc())
            .all()
        )

    def create_booking(self, db: Session, booking_in: schemas.BookingCreate) -> models.Booking:
        # Price against the configuration as it is right now; the stored
        # value is a snapshot and later pricing edits never touch it.
        # get_settings only writes when the pricing row is missing (a request
        # that beats startup seeding); that insert is its own commit and the
        # booking below is still a single transactional write.
        config = crud_pricing.get_settings(db)
        total_price = booking_total_price(config, booking_in)
        if booking_in.total_price is not None and round(booking_in.total_price) != total_price:
            logger.warning(
                "Submitted total %s differs from server price %s; using server price",
                booking_in.total_price,
                total_price,
            )

        data = booking_in.model_dump(exclude={"total_price"})
        db_booking = models.Booking(
            **data,
            total_price=total_price,
            status=BookingStatus.PENDING,  # never trust a caller-supplied status
        )
        db.add(db_booking)
        db.commit()
        db.refresh(db_booking)
        logger.info(
            "Booking created id=%s date=%s total=%s",
            db_booking.id,
            db_booking.scheduled_date,
            db_booking.total_price,
        )
        return db_booking

    def get_stats(self, db: Session) -> schemas.BookingStats:
        total_bookings, total_revenue = db.query(
            func.count(models.Booking.id),
            func.coalesce(func.sum(models.Booking.total_price), 0),
        ).one()
        pending = (
            db.query(func.count(models.Booking.id))
            .filter(models.Booking.status == BookingStatus.PENDING)
            .scalar()
        )
        average = total_revenue / total_bookings if total_bookings else 0.0
        return schemas.BookingStats(
            total_revenue=int(total_revenue),
            total_bookings=int(total_bookings),
            pending_bookings=int(pending or 0),
            average_value=round(float(average), 2),
        )


booking = CRUDBooking()
