from fastapi import APIRouter, Depends, HTTPException, status
from typing import Any, Dict
from datetime import timedelta
from studio.core.auth import create_access_token, get_current_admin, ADMIN_ROLE
from studio.core.config import settings
from studio.schemas.admin import AdminLogin, AdminResponse, Token
from studio.services.admin_service import authenticate_admin

router = APIRouter()

@router.post("/login", response_model=Token)
async def login(credentials: AdminLogin) -> Any:
    """
    Exchange admin credentials for a bearer token
    """
    admin = await authenticate_admin(credentials.email, credentials.password)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Create access token
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": admin["id"], "role": ADMIN_ROLE},
        expires_delta=access_token_expires
    )

    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=AdminResponse)
async def read_admin_me(current_admin: Dict[str, Any] = Depends(get_current_admin)):
    """Get the logged-in admin"""
    return {"id": current_admin["id"], "email": current_admin["email"], "role": ADMIN_ROLE}
