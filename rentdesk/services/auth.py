"""
Authentication service.
Registers administrators, checks credentials and issues tokens.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ConflictError, InvalidInputError
from ..core.security import create_access_token, get_password_hash, verify_password, TokenData
from ..database.models import AdminUser

logger = logging.getLogger(__name__)


MIN_PASSWORD_LENGTH = 6


class AuthService:
    """Authentication service class."""

    def __init__(self, db: Session):
        self.db = db

    def register_admin(self, name: str, email: str, password: str) -> AdminUser:
        if not name or not name.strip():
            raise InvalidInputError("Name is required", field="name")
        if not email or not email.strip():
            raise InvalidInputError("Email is required", field="email")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidInputError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", field="password"
            )

        email = email.lower().strip()
        if self.db.query(AdminUser).filter(AdminUser.email == email).first():
            raise ConflictError("User with this email already exists")

        admin = AdminUser(
            name=name.strip(),
            email=email,
            password_hash=get_password_hash(password),
            role="admin",
        )
        self.db.add(admin)
        self.db.commit()
        logger.info(f"Admin {admin.email} registered")
        return admin

    def authenticate(self, email: str, password: str) -> Optional[AdminUser]:
        """Return the admin for valid credentials, otherwise None."""
        admin = self.db.query(AdminUser).filter(
            AdminUser.email == email.lower().strip(),
            AdminUser.is_active == True
        ).first()

        if not admin or not verify_password(password, admin.password_hash):
            logger.warning(f"Failed login for {email}")
            return None
        return admin

    def create_token(self, admin: AdminUser) -> dict:
        token_data = TokenData(admin_id=admin.id, email=admin.email, role=admin.role)
        return {
            "access_token": create_access_token(token_data.to_dict()),
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }
