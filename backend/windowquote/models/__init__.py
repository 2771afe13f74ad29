from .booking import Booking
from .booking_status import BookingStatus
from .pricing_settings import PricingSettings, DEFAULT_PRICING, SINGLETON_KEY
from .admin_user import AdminUser

__all__ = [
    "Booking",
    "BookingStatus",
    "PricingSettings",
    "DEFAULT_PRICING",
    "SINGLETON_KEY",
    "AdminUser",
]
