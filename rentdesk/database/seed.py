"""
Database seed - default settings row and first administrator.
"""
import logging

from sqlalchemy.orm import Session

from ..core.config import settings
from .models import AdminUser, Settings, SETTINGS_ID

logger = logging.getLogger(__name__)


def seed_settings(session: Session):
    """Create the settings row with defaults if it does not exist yet."""
    if session.get(Settings, SETTINGS_ID):
        return
    session.add(Settings(id=SETTINGS_ID))
    session.commit()
    logger.info("Default settings created")


def seed_admin(session: Session):
    """Create the first admin from ADMIN_EMAIL / ADMIN_PASSWORD when both are set."""
    from ..core.security import get_password_hash

    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return
    email = settings.ADMIN_EMAIL.lower().strip()
    if session.query(AdminUser).filter(AdminUser.email == email).first():
        logger.info("Admin already exists")
        return

    session.add(AdminUser(
        name=settings.ADMIN_NAME,
        email=email,
        password_hash=get_password_hash(settings.ADMIN_PASSWORD),
        role="admin",
        is_active=True,
    ))
    session.commit()
    logger.info(f"Admin created ({email})")


def seed_all(session: Session):
    """Main seed entry point."""
    seed_settings(session)
    seed_admin(session)
