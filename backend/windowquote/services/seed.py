import logging

from ..crud import crud_pricing
from ..database import Base, engine, get_db_session
from .admin_bootstrap import ensure_default_admin

logger = logging.getLogger(__name__)


def seed_database() -> None:
    """Create tables and make sure the pricing row and an admin exist.

    Safe to call on every boot.
    """
    Base.metadata.create_all(bind=engine)
    with get_db_session() as db:
        config = crud_pricing.get_settings(db)
        logger.info(
            "Pricing configuration ready id=%s exterior=%s multiplier=%s",
            config.id,
            config.exterior_price,
            config.commercial_multiplier,
        )
        ensure_default_admin(db)
