import logging

from ..core.config import settings
from ..schemas.booking import BookingResponse
from ..utils.email import send_email
from .quote_calculator import format_currency

logger = logging.getLogger(__name__)


def _booking_summary(booking: BookingResponse) -> str:
    services = [
        name
        for name, selected in (
            ("Exterior", booking.exterior),
            ("Interior", booking.interior),
            ("Screens", booking.screens),
            ("Sills", booking.sills),
            ("Gutters", booking.gutters),
            ("Solar panels", booking.solar),
        )
        if selected
    ]
    lines = [
        f"Date: {booking.scheduled_date:%A, %B %d, %Y}",
        f"Windows: {booking.window_count}",
        f"Services: {', '.join(services) or 'None'}",
    ]
    if booking.solar:
        lines.append(f"Solar panels: {booking.solar_panel_count}")
    if booking.is_commercial:
        lines.append("Property: Commercial")
    lines.append(f"Estimated total: {format_currency(booking.total_price)}")
    return "\n".join(lines)


def notify_booking_created(booking: BookingResponse) -> None:
    """Email the customer a confirmation and the business a heads-up.

    Runs as a background task; delivery problems are logged by send_email.
    """
    summary = _booking_summary(booking)
    send_email(
        booking.customer_email,
        f"{settings.BUSINESS_NAME}: booking received",
        f"Hi {booking.customer_name},\n\n"
        "Thanks for booking with us. We will be in touch shortly to confirm.\n\n"
        f"{summary}\n",
    )
    if settings.BUSINESS_EMAIL:
        send_email(
            settings.BUSINESS_EMAIL,
            f"New booking #{booking.id} from {booking.customer_name}",
            f"{summary}\nPhone: {booking.customer_phone}\nEmail: {booking.customer_email}\n",
        )
    else:
        logger.debug("BUSINESS_EMAIL not set; skipping staff notification")
