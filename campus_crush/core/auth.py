"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes
"""

from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select

from campus_crush.core.config import get_settings
from campus_crush.db.database import get_db_session, fetch_one
from campus_crush.db.tables import users

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor
bearer_scheme = HTTPBearer()


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Returns the full users row as a dict.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    with get_db_session() as db:
        user = fetch_one(db, select(users).where(users.c.user_id == int(user_id)))

    if not user:
        raise credentials_exception

    if not user["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    # Picked up by the monitoring middleware
    request.state.user_id = user["user_id"]
    return user


async def get_onboarded_user(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require a completed profile (college + gender)."""
    if not user["college_id"] or not user["gender"]:
        raise HTTPException(status_code=400, detail="Please complete your profile first")
    return user


async def get_current_admin(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require admin role."""
    if user["role"] != "admin":
        raise HTTPException(status_code=403, detail="Admins only")
    return user
