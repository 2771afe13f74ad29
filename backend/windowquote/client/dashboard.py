"""Admin dashboard: booking table, stat cards and the pricing form."""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..schemas.booking import coerce_calendar_date
from ..schemas.pricing import PricingSettingsUpdate
from ..services.quote_calculator import format_currency
from .api_client import ApiError, WindowQuoteClient

logger = logging.getLogger(__name__)

_SERVICE_LABELS = (
    ("exterior", "Exterior"),
    ("interior", "Interior"),
    ("screens", "Screens"),
    ("sills", "Sills"),
    ("gutters", "Gutters"),
    ("solar", "Solar"),
)


class Dashboard:
    """Holds what the admin page shows. Failures set ``banner`` and re-raise."""

    def __init__(self, api: WindowQuoteClient) -> None:
        self.api = api
        self.bookings: List[Dict[str, Any]] = []
        self.stats: Dict[str, Any] = {}
        self.pricing: Dict[str, Any] = {}
        self.banner: Optional[str] = None
        self.notice: Optional[str] = None

    def load(self) -> None:
        try:
            self.bookings = self.api.list_bookings()
            self.stats = self.api.booking_stats()
            self.pricing = self.api.get_settings()
        except ApiError as exc:
            self.banner = f"Could not load dashboard: {exc.message}"
            logger.error("Dashboard load failed (%s): %s", exc.status_code, exc.message)
            raise
        self.banner = None

    def rows(self) -> List[Dict[str, Any]]:
        """Booking table rows, in the order the API returns them."""
        rows = []
        for booking in self.bookings:
            services = [label for key, label in _SERVICE_LABELS if booking.get(key)]
            rows.append(
                {
                    "id": booking["id"],
                    "customer": booking["customerName"],
                    "email": booking["customerEmail"],
                    "date": f"{coerce_calendar_date(booking['scheduledDate']):%b %d, %Y}",
                    "windows": booking["windowCount"],
                    "services": ", ".join(services),
                    "total": format_currency(booking["totalPrice"]),
                    "status": booking["status"],
                }
            )
        return rows

    def stat_cards(self) -> Dict[str, str]:
        return {
            "Total Revenue": format_currency(self.stats.get("totalRevenue", 0)),
            "Total Bookings": str(self.stats.get("totalBookings", 0)),
            "Pending": str(self.stats.get("pendingBookings", 0)),
            "Average Value": format_currency(self.stats.get("averageValue", 0)),
        }

    def save_settings(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Send a partial pricing update; returns the full stored config."""
        self.notice = None
        try:
            checked = PricingSettingsUpdate.model_validate(changes)
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            self.banner = f"Could not save settings: {first['msg']}"
            raise ApiError(400, first["msg"], field) from exc

        payload = {to_camel(k): v for k, v in checked.model_dump(exclude_unset=True).items()}
        try:
            self.pricing = self.api.update_settings(payload)
        except ApiError as exc:
            self.banner = f"Could not save settings: {exc.message}"
            logger.error("Settings update failed (%s): %s", exc.status_code, exc.message)
            raise
        self.banner = None
        self.notice = "Settings Updated"
        return self.pricing
