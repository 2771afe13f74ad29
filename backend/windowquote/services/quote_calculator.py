from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Mapping

from pydantic_core import PydanticCustomError

from ..schemas.pricing import parse_multiplier

# Gutter cleaning is priced as a fixed "basic package": the configured flat
# fee is scaled by this factor. Kept as-is pending product review.
GUTTERS_PACKAGE_FACTOR = 100

_DOLLAR = Decimal("1")
_CENT = Decimal("0.01")


def _to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default


def _read_field(source: Any, key: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def _flag(source: Any, key: str) -> bool:
    return bool(_read_field(source, key))


def multiplier_or_one(raw: Any) -> Decimal:
    """Stored commercial multiplier, or 1 when it does not parse.

    Same parsing as the settings schema, which rejects bad values on write;
    here a bad stored value prices as non-commercial instead of failing.
    """
    try:
        return parse_multiplier(raw)
    except PydanticCustomError:
        return Decimal("1")


def window_unit_price(config: Any, selection: Any) -> Decimal:
    """Per-window price for the selected window services."""
    unit = Decimal("0")
    if _flag(selection, "exterior"):
        unit += _to_decimal(_read_field(config, "exterior_price"))
    if _flag(selection, "interior"):
        unit += _to_decimal(_read_field(config, "interior_addon"))
    if _flag(selection, "screens"):
        unit += _to_decimal(_read_field(config, "screens_addon"))
    if _flag(selection, "sills"):
        unit += _to_decimal(_read_field(config, "sills_addon"))
    return unit


def compute_total(config: Any, selection: Any) -> Decimal:
    """Return the exact quote total for ``selection`` under ``config``.

    ``config`` and ``selection`` may be ORM rows, pydantic models or plain
    mappings using the snake_case field names. Nothing is rounded here; use
    :func:`booking_total_price` for the stored integer snapshot and
    :func:`format_currency` for display.
    """
    window_count = _to_decimal(_read_field(selection, "window_count"))
    total = window_unit_price(config, selection) * window_count

    if _flag(selection, "gutters"):
        total += _to_decimal(_read_field(config, "gutters_flat_fee")) * GUTTERS_PACKAGE_FACTOR
    if _flag(selection, "solar"):
        panels = _to_decimal(_read_field(selection, "solar_panel_count"))
        total += _to_decimal(_read_field(config, "solar_per_panel")) * panels

    if _flag(selection, "is_commercial"):
        total *= multiplier_or_one(_read_field(config, "commercial_multiplier"))
    return total


def booking_total_price(config: Any, selection: Any) -> int:
    """Whole-dollar price snapshot stored on a booking (rounded half-up once)."""
    return int(compute_total(config, selection).quantize(_DOLLAR, rounding=ROUND_HALF_UP))


def format_currency(amount: Any, symbol: str = "$") -> str:
    value = _to_decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"
