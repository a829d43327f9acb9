from datetime import datetime, timedelta
from typing import Any, Dict, Optional
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from studio.core.config import settings
from studio.db.mongodb import db
from bson.objectid import ObjectId
from bson.errors import InvalidId

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

ADMIN_ROLE = "admin"

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hashed password."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM
    )

    return encoded_jwt

def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode a token, raising 401 when it is invalid, expired or not an admin token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError as jwt_error:
        logger.warning(f"JWT decode error: {jwt_error}")
        raise credentials_exception

    if payload.get("sub") is None or payload.get("role") != ADMIN_ROLE:
        raise credentials_exception

    return payload

async def get_current_admin(token: str = Depends(oauth2_scheme)) -> Dict[str, Any]:
    """Resolve the studio administrator behind a bearer token."""
    payload = decode_access_token(token)
    subject = payload["sub"]

    try:
        object_id = ObjectId(subject)
    except (InvalidId, TypeError):
        logger.warning(f"Invalid admin ObjectId format in token: {subject}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid admin ID format in token"
        )

    admin = await db.db.admins.find_one({"_id": object_id})
    if admin is None:
        logger.warning(f"Admin not found for ID: {subject}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    admin["id"] = str(admin["_id"])
    return admin
