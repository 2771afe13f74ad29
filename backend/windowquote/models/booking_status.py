import enum

class BookingStatus(str, enum.Enum):
    """Lifecycle of a booking. New bookings always start as PENDING."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
