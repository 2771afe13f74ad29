"""Customer-facing quote flow as an explicit state machine.

The wizard collects contact details and a service selection, shows a live
price, lets the customer pick a free day and submits the booking. It holds
no UI; a front end renders ``step``, ``form``, ``errors`` and
``quote_total`` and calls the transition methods.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic.alias_generators import to_camel, to_snake
from pydantic_core import PydanticCustomError

from ..core.config import settings
from ..schemas.booking import FIELD_CHECKS
from ..services.availability import is_date_disabled
from ..services.quote_calculator import booking_total_price, compute_total, format_currency
from .api_client import ApiError, WindowQuoteClient

logger = logging.getLogger(__name__)


class WizardStep(str, Enum):
    CONTACT = "contact"
    ESTIMATE = "estimate"
    REVIEW = "review"
    SCHEDULE = "schedule"
    SUCCESS = "success"


STEP_ORDER: List[WizardStep] = list(WizardStep)

# Fields that must pass their checks before leaving a step.
STEP_GUARDS: Dict[WizardStep, tuple[str, ...]] = {
    WizardStep.CONTACT: ("customer_name", "customer_email", "customer_phone"),
    WizardStep.ESTIMATE: ("window_count",),
    WizardStep.REVIEW: (),
}


class WizardError(Exception):
    """Transition requested from a step that does not allow it."""


@dataclass
class QuoteForm:
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    is_commercial: bool = False
    window_count: int = 10
    exterior: bool = True
    interior: bool = False
    screens: bool = False
    sills: bool = False
    gutters: bool = False
    solar: bool = False
    solar_panel_count: int = 0


_FORM_FIELDS = {f.name for f in fields(QuoteForm)}


class QuoteWizard:
    def __init__(self, api: WindowQuoteClient, today: Optional[date] = None) -> None:
        self.api = api
        self._today = today
        self.pricing: Optional[Dict[str, Any]] = None
        self.booked_dates: List[date] = []
        self.reset()

    @property
    def today(self) -> date:
        return self._today or date.today()

    def reset(self) -> None:
        """Back to the first step with an empty form."""
        self.step = WizardStep.CONTACT
        self.form = QuoteForm()
        self.errors: Dict[str, str] = {}
        self.selected_date: Optional[date] = None
        self.booking: Optional[Dict[str, Any]] = None

    # data loading

    def load_pricing(self) -> Dict[str, Any]:
        raw = self.api.get_settings()
        self.pricing = {to_snake(key): value for key, value in raw.items()}
        return self.pricing

    def load_availability(self) -> List[date]:
        start = self.today
        end = start + timedelta(days=settings.AVAILABILITY_WINDOW_DAYS)
        self.booked_dates = self.api.get_availability(start, end)
        return self.booked_dates

    # form input

    def update(self, **values: Any) -> None:
        """Set form fields; clears any previous error on those fields."""
        unknown = set(values) - _FORM_FIELDS
        if unknown:
            raise AttributeError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        for name, value in values.items():
            setattr(self.form, name, value)
            self.errors.pop(name, None)

    def validate_fields(self, names: tuple[str, ...]) -> bool:
        ok = True
        for name in names:
            try:
                FIELD_CHECKS[name](getattr(self.form, name))
            except PydanticCustomError as exc:
                self.errors[name] = exc.message()
                ok = False
            else:
                self.errors.pop(name, None)
        return ok

    # pricing

    @property
    def quote_total(self) -> Decimal:
        """Live price for the current selection; zero until pricing is loaded."""
        if self.pricing is None:
            return Decimal("0")
        return compute_total(self.pricing, self.form)

    @property
    def display_total(self) -> str:
        return format_currency(self.quote_total)

    # transitions

    def next(self) -> bool:
        """Advance one step if the current step's fields are valid."""
        if self.step not in STEP_GUARDS:
            raise WizardError(f"Cannot advance from {self.step.value}; use submit()")
        if not self.validate_fields(STEP_GUARDS[self.step]):
            logger.debug("Wizard blocked at %s: %s", self.step.value, self.errors)
            return False
        self.step = STEP_ORDER[STEP_ORDER.index(self.step) + 1]
        return True

    def back(self) -> bool:
        if self.step in (WizardStep.CONTACT, WizardStep.SUCCESS):
            return False
        self.step = STEP_ORDER[STEP_ORDER.index(self.step) - 1]
        return True

    def is_date_disabled(self, day: date) -> bool:
        return is_date_disabled(day, self.booked_dates, self.today)

    def select_date(self, day: date) -> bool:
        if self.is_date_disabled(day):
            self.errors["scheduled_date"] = "Date unavailable"
            return False
        self.selected_date = day
        self.errors.pop("scheduled_date", None)
        return True

    def submit(self) -> bool:
        """Create the booking from the Schedule step.

        The price is computed once more against freshly loaded pricing, so a
        configuration change since Review is reflected in what is stored.
        """
        if self.step is not WizardStep.SCHEDULE:
            raise WizardError(f"Cannot submit from {self.step.value}")
        if self.selected_date is None or self.is_date_disabled(self.selected_date):
            self.errors["scheduled_date"] = "Please select an available date"
            return False

        self.load_pricing()
        payload = {to_camel(key): value for key, value in asdict(self.form).items()}
        payload["totalPrice"] = booking_total_price(self.pricing, self.form)
        payload["scheduledDate"] = self.selected_date.isoformat()

        try:
            self.booking = self.api.create_booking(payload)
        except ApiError as exc:
            if exc.status_code != 400:
                raise
            self.errors[to_snake(exc.field) if exc.field else "form"] = exc.message
            return False

        logger.info("Quote submitted booking id=%s", self.booking.get("id"))
        self.errors = {}
        self.step = WizardStep.SUCCESS
        return True
