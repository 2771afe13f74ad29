from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from ..crud import crud_pricing
from ..database import get_db
from ..models import AdminUser
from ..schemas.pricing import PricingSettingsResponse, PricingSettingsUpdate
from .auth import get_current_admin

router = APIRouter(tags=["settings"])
logger = logging.getLogger(__name__)


@router.get("/settings", response_model=PricingSettingsResponse)
def read_pricing_settings(db: Session = Depends(get_db)):
    """Return the pricing configuration used by the quote wizard."""
    return crud_pricing.get_settings(db)


@router.post("/settings", response_model=PricingSettingsResponse)
def update_pricing_settings(
    settings_in: PricingSettingsUpdate,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """Merge the supplied prices into the stored configuration."""
    changes = settings_in.model_dump(exclude_unset=True)
    logger.info("Admin %s updating pricing: %s", current_admin.email, changes)
    return crud_pricing.update_settings(db, changes)
