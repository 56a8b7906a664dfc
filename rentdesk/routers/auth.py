"""
Authentication endpoints.
Endpoint: /api/auth/...
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from ..core.dependencies import get_current_admin
from ..schemas.auth import AdminInfo, LoginRequest, RegisterRequest, TokenResponse
from ..services.auth import AuthService

router = APIRouter(tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Create an administrator account."""
    admin = AuthService(db).register_admin(body.name, body.email, body.password)
    return {"success": True, "message": "Admin created successfully", "data": {"id": admin.id}}


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for an access token."""
    service = AuthService(db)
    admin = service.authenticate(body.email, body.password)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return TokenResponse(**service.create_token(admin), user=AdminInfo.model_validate(admin))


@router.get("/me", response_model=AdminInfo)
async def me(admin: AdminUser = Depends(get_current_admin)):
    """Current administrator."""
    return admin
