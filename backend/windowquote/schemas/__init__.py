from .booking import BookingCreate, BookingResponse, BookingStats, ServiceSelection
from .pricing import PricingSettingsUpdate, PricingSettingsResponse
from .user import Token, AdminUserResponse

__all__ = [
    "BookingCreate",
    "BookingResponse",
    "BookingStats",
    "ServiceSelection",
    "PricingSettingsUpdate",
    "PricingSettingsResponse",
    "Token",
    "AdminUserResponse",
]
