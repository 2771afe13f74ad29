from sqlalchemy import Column, Integer, String, UniqueConstraint

from .base import BaseModel

SINGLETON_KEY = "default"

# Defaults for the first configuration row.
DEFAULT_PRICING = {
    "exterior_price": 10,
    "interior_addon": 5,
    "screens_addon": 3,
    "sills_addon": 3,
    "gutters_flat_fee": 50,
    "solar_per_panel": 10,
    "commercial_multiplier": "1.5",
}


class PricingSettings(BaseModel):
    """The single pricing configuration row.

    ``singleton_key`` is always ``"default"``; the unique constraint is what
    keeps concurrent first reads from inserting a second row.
    """

    __tablename__ = "pricing_settings"

    id = Column(Integer, primary_key=True, index=True)
    singleton_key = Column(String, nullable=False, default=SINGLETON_KEY)
    exterior_price = Column(Integer, nullable=False, default=DEFAULT_PRICING["exterior_price"])
    interior_addon = Column(Integer, nullable=False, default=DEFAULT_PRICING["interior_addon"])
    screens_addon = Column(Integer, nullable=False, default=DEFAULT_PRICING["screens_addon"])
    sills_addon = Column(Integer, nullable=False, default=DEFAULT_PRICING["sills_addon"])
    gutters_flat_fee = Column(Integer, nullable=False, default=DEFAULT_PRICING["gutters_flat_fee"])
    solar_per_panel = Column(Integer, nullable=False, default=DEFAULT_PRICING["solar_per_panel"])
    # Stored as text to avoid float drift; parsed with Decimal when pricing
    commercial_multiplier = Column(
        String, nullable=False, default=DEFAULT_PRICING["commercial_multiplier"]
    )

    __table_args__ = (
        UniqueConstraint("singleton_key", name="uq_pricing_settings_singleton_key"),
    )
