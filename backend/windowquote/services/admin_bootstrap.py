from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..models import AdminUser
from ..utils.auth import get_password_hash, normalize_email

logger = logging.getLogger(__name__)


def ensure_default_admin(db: Session) -> Optional[AdminUser]:
    """Create a default admin if none exists and bootstrap is enabled.

    Controlled by DEFAULT_ADMIN_BOOTSTRAP. Turn it off in production once
    real admin accounts exist.
    """
    if not settings.DEFAULT_ADMIN_BOOTSTRAP:
        return None
    if db.query(AdminUser).count() > 0:
        return None

    admin = AdminUser(
        email=normalize_email(settings.DEFAULT_ADMIN_EMAIL),
        password=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
        display_name=settings.DEFAULT_ADMIN_NAME,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Bootstrapped default admin %s", admin.email)
    return admin
