from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from .base import CamelModel

MAX_PRICE = 1_000_000
MAX_MULTIPLIER = Decimal("100")


def parse_multiplier(value: Any) -> Decimal:
    """Parse a commercial multiplier into a finite, positive Decimal.

    Raises ``PydanticCustomError`` for anything else.
    """
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise PydanticCustomError("invalid_multiplier", "Multiplier must be a decimal number")
    if not parsed.is_finite() or parsed <= 0:
        raise PydanticCustomError("invalid_multiplier", "Multiplier must be greater than 0")
    return parsed


class PricingSettingsBase(CamelModel):
    exterior_price: int = Field(ge=0)
    interior_addon: int = Field(ge=0)
    screens_addon: int = Field(ge=0)
    sills_addon: int = Field(ge=0)
    gutters_flat_fee: int = Field(ge=0)
    solar_per_panel: int = Field(ge=0)
    commercial_multiplier: str


class PricingSettingsUpdate(CamelModel):
    """Partial update; only supplied fields are merged into the stored row."""

    model_config = ConfigDict(extra="forbid")

    exterior_price: Optional[int] = Field(default=None, ge=0, le=MAX_PRICE)
    interior_addon: Optional[int] = Field(default=None, ge=0, le=MAX_PRICE)
    screens_addon: Optional[int] = Field(default=None, ge=0, le=MAX_PRICE)
    sills_addon: Optional[int] = Field(default=None, ge=0, le=MAX_PRICE)
    gutters_flat_fee: Optional[int] = Field(default=None, ge=0, le=MAX_PRICE)
    solar_per_panel: Optional[int] = Field(default=None, ge=0, le=MAX_PRICE)
    commercial_multiplier: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise PydanticCustomError("null_value", "Value is required")
        return v

    @field_validator("commercial_multiplier", mode="before")
    @classmethod
    def normalize_multiplier(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, bool):
            raise PydanticCustomError("invalid_multiplier", "Multiplier must be a decimal number")
        parsed = parse_multiplier(v)
        if parsed > MAX_MULTIPLIER:
            raise PydanticCustomError(
                "invalid_multiplier",
                "Multiplier cannot exceed {limit}",
                {"limit": str(MAX_MULTIPLIER)},
            )
        return str(parsed)


class PricingSettingsResponse(PricingSettingsBase):
    id: int
    updated_at: Optional[datetime] = None
