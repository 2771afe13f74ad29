import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models
from ..models.pricing_settings import DEFAULT_PRICING, SINGLETON_KEY

logger = logging.getLogger(__name__)


def _get_existing(db: Session) -> models.PricingSettings | None:
    return (
        db.query(models.PricingSettings)
        .filter(models.PricingSettings.singleton_key == SINGLETON_KEY)
        .first()
    )


def get_settings(db: Session) -> models.PricingSettings:
    """Return the pricing row, creating it with defaults on first access.

    Two requests can both see an empty table; the unique singleton key makes
    the slower insert fail, and that request re-reads the winner's row.
    """
    existing = _get_existing(db)
    if existing is not None:
        return existing

    created = models.PricingSettings(singleton_key=SINGLETON_KEY, **DEFAULT_PRICING)
    db.add(created)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Pricing row created concurrently; re-reading")
        existing = _get_existing(db)
        if existing is None:
            raise
        return existing
    db.refresh(created)
    logger.info("Created default pricing configuration id=%s", created.id)
    return created


def update_settings(db: Session, changes: Dict[str, Any]) -> models.PricingSettings:
    """Merge ``changes`` into the pricing row; unspecified fields are untouched."""
    config = get_settings(db)
    for key, value in changes.items():
        setattr(config, key, value)
    db.commit()
    db.refresh(config)
    logger.info("Pricing configuration updated fields=%s", sorted(changes))
    return config
