from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from ..models.booking_status import BookingStatus
from .base import CamelModel


# Per-field checks shared by the server schema and the quote wizard.
def check_customer_name(value: Any) -> str:
    value = str(value or "").strip()
    if len(value) < 2:
        raise PydanticCustomError("name_too_short", "Name is required")
    return value


def check_customer_email(value: Any) -> str:
    try:
        return validate_email(str(value or "").strip(), check_deliverability=False).normalized
    except EmailNotValidError:
        raise PydanticCustomError("invalid_email", "Invalid email")


def check_customer_phone(value: Any) -> str:
    value = str(value or "").strip()
    if len(value) < 10:
        raise PydanticCustomError("invalid_phone", "Valid phone number required")
    return value


# Upper bounds keep prices inside a 64-bit INTEGER column.
MAX_WINDOW_COUNT = 100_000
MAX_SOLAR_PANELS = 100_000


def check_window_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise PydanticCustomError("window_count_too_low", "At least 1 window required")
    if value > MAX_WINDOW_COUNT:
        raise PydanticCustomError(
            "window_count_too_high",
            "Window count cannot exceed {limit}",
            {"limit": MAX_WINDOW_COUNT},
        )
    return value


def check_solar_panel_count(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise PydanticCustomError("invalid_panel_count", "Solar panel count cannot be negative")
    if value > MAX_SOLAR_PANELS:
        raise PydanticCustomError(
            "panel_count_too_high",
            "Solar panel count cannot exceed {limit}",
            {"limit": MAX_SOLAR_PANELS},
        )
    return value


def coerce_calendar_date(value: Any) -> date:
    """Coerce an ISO date, ISO datetime or date/datetime into a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            if len(raw) == 10:
                return date.fromisoformat(raw)
            return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise PydanticCustomError("invalid_date", "Invalid date")


FIELD_CHECKS: Dict[str, Callable[[Any], Any]] = {
    "customer_name": check_customer_name,
    "customer_email": check_customer_email,
    "customer_phone": check_customer_phone,
    "window_count": check_window_count,
    "solar_panel_count": check_solar_panel_count,
    "scheduled_date": coerce_calendar_date,
}


class ServiceSelection(CamelModel):
    """Window count plus the add-on choices a customer makes while quoting.

    This is what the quote calculator prices; a booking is a selection plus
    contact details and a day.
    """

    window_count: int
    is_commercial: bool = False
    exterior: bool = True
    interior: bool = False
    screens: bool = False
    sills: bool = False
    gutters: bool = False
    solar: bool = False
    solar_panel_count: Optional[int] = 0

    @field_validator("window_count")
    @classmethod
    def window_count_in_range(cls, v: int) -> int:
        return check_window_count(v)

    @field_validator("solar_panel_count")
    @classmethod
    def panel_count_in_range(cls, v: Optional[int]) -> int:
        return check_solar_panel_count(v)


# Properties to receive on creation (public quote wizard submission).
# Caller-supplied id/status/createdAt are not declared and are dropped.
class BookingCreate(ServiceSelection):
    customer_name: str
    customer_email: str
    customer_phone: str
    # Accepted for compatibility with the wizard payload; the server prices
    # the booking itself at submission time.
    total_price: Optional[float] = Field(default=None, allow_inf_nan=False)
    scheduled_date: date

    @field_validator("customer_name")
    @classmethod
    def name_present(cls, v: str) -> str:
        return check_customer_name(v)

    @field_validator("customer_email")
    @classmethod
    def email_format(cls, v: str) -> str:
        return check_customer_email(v)

    @field_validator("customer_phone")
    @classmethod
    def phone_length(cls, v: str) -> str:
        return check_customer_phone(v)

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> date:
        return coerce_calendar_date(v)

# Properties to return to client
class BookingResponse(CamelModel):
    id: int
    customer_name: str
    customer_email: str
    customer_phone: str
    window_count: int
    is_commercial: bool
    exterior: bool
    interior: bool
    screens: bool
    sills: bool
    gutters: bool
    solar: bool
    solar_panel_count: int
    total_price: int
    scheduled_date: date
    status: BookingStatus
    created_at: datetime


class BookingStats(CamelModel):
    total_revenue: int = 0
    total_bookings: int = 0
    pending_bookings: int = 0
    average_value: float = Field(default=0.0)
