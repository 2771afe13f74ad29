from sqlalchemy import Boolean, Column, Date, Enum, Integer, String

from .base import BaseModel
from .booking_status import BookingStatus


class Booking(BaseModel):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)

    # Job details
    window_count = Column(Integer, nullable=False)
    is_commercial = Column(Boolean, nullable=False, default=False)

    # Services selected
    exterior = Column(Boolean, nullable=False, default=True)
    interior = Column(Boolean, nullable=False, default=False)
    screens = Column(Boolean, nullable=False, default=False)
    sills = Column(Boolean, nullable=False, default=False)
    gutters = Column(Boolean, nullable=False, default=False)
    solar = Column(Boolean, nullable=False, default=False)
    solar_panel_count = Column(Integer, nullable=False, default=0)

    # Price snapshot taken at submission; never recomputed afterwards
    total_price = Column(Integer, nullable=False)
    scheduled_date = Column(Date, nullable=False, index=True)
    status = Column(
        Enum(BookingStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
        default=BookingStatus.PENDING,
    )
