"""
FastAPI dependencies for authentication.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from .clock import Clock, system_clock
from .security import verify_access_token, TokenData


# HTTP Bearer token scheme
security = HTTPBearer()


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> AdminUser:
    """Validate the bearer token and load the administrator it belongs to."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authorized, token failed",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = verify_access_token(credentials.credentials)
    if payload is None or payload.get("sub") is None:
        raise credentials_exception

    token_data = TokenData.from_dict(payload)
    admin = db.query(AdminUser).filter(AdminUser.id == token_data.admin_id).first()

    if admin is None:
        raise credentials_exception

    if not admin.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled"
        )

    return admin


def get_clock() -> Clock:
    """Clock used by request handlers. Tests override it with a FixedClock."""
    return system_clock
