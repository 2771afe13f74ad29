from .api_client import ApiError, WindowQuoteClient
from .dashboard import Dashboard
from .quote_wizard import QuoteForm, QuoteWizard, WizardError, WizardStep

__all__ = [
    "ApiError",
    "WindowQuoteClient",
    "Dashboard",
    "QuoteForm",
    "QuoteWizard",
    "WizardError",
    "WizardStep",
]
