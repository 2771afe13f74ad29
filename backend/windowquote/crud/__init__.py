from .crud_booking import booking
from . import crud_pricing

# Usage: ``crud.booking.create_booking(...)``, ``crud.crud_pricing.get_settings(...)``
