"""Database seeding helpers."""

import logging

from sqlalchemy.orm import Session

from restohub.core.config import settings
from restohub.models.staff import MANAGER_ROLE
from restohub.services.staff_service import create_staff, get_staff_by_email

logger = logging.getLogger(__name__)


def ensure_default_manager(session: Session) -> None:
    """Create the bootstrap manager account when credentials are configured."""
    if not settings.manager_email or not settings.manager_password:
        return

    if get_staff_by_email(session, settings.manager_email) is not None:
        return

    create_staff(
        session,
        name=settings.manager_name,
        email=settings.manager_email,
        password=settings.manager_password,
        role=MANAGER_ROLE,
    )
    logger.info("[BOOTSTRAP] Default manager created email=%s", settings.manager_email)
