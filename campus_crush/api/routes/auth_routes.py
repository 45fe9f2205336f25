"""
Authentication Routes

POST /auth/register - Register with a college email
POST /auth/login - Login and get JWT token
GET /auth/user - Get current user info
"""

from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends, Request
from sqlalchemy import func, insert, select, update

from campus_crush.db.database import get_db_session, fetch_one
from campus_crush.db.tables import users
from campus_crush.core.auth import hash_password, verify_password, create_access_token, get_current_user
from campus_crush.core.logger import get_logger
from campus_crush.core.rate_limit import limiter, AUTH_LIMIT
from campus_crush.utils.college_email import find_college_for_email
from campus_crush.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = get_logger(__name__)


@router.post("/register", response_model=MessageResponse, status_code=201)
@limiter.limit(AUTH_LIMIT)
async def register(request: Request, data: RegisterRequest):
    """
    Register a new account with a college email.

    After registration, login to get access token, then complete profile setup.
    """
    email = data.email.lower()

    with get_db_session() as db:
        college = find_college_for_email(db, email)
        if not college:
            raise HTTPException(status_code=400, detail="Please use your college email")

        # Check email exists
        existing = fetch_one(db, select(users.c.user_id).where(func.lower(users.c.email) == email))
        if existing:
            raise HTTPException(status_code=400, detail="Email already registered")

        now = datetime.utcnow()
        db.execute(
            insert(users).values(
                email=email,
                password_hash=hash_password(data.password),
                role="user",
                first_name=data.first_name,
                last_name=data.last_name,
                college_id=college["college_id"],
                created_at=now,
                updated_at=now
            )
        )

    logger.info("Registered %s at college %s", email, college["college_id"])
    return MessageResponse(message=f"Registered successfully at {college['name']}. Please login.")


@router.post("/login", response_model=TokenResponse)
@limiter.limit(AUTH_LIMIT)
async def login(request: Request, data: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        user = fetch_one(db, select(
            users.c.user_id, users.c.password_hash, users.c.role, users.c.is_active
        ).where(func.lower(users.c.email) == data.email.lower()))

        if not user:
            raise HTTPException(status_code=401, detail="Invalid email or password")

        if not verify_password(data.password, user["password_hash"]):
            raise HTTPException(status_code=401, detail="Invalid email or password")

        if not user["is_active"]:
            raise HTTPException(status_code=403, detail="Account deactivated")

        db.execute(
            update(users).where(users.c.user_id == user["user_id"]).values(last_active_at=datetime.utcnow())
        )

    token = create_access_token(data={"sub": str(user["user_id"]), "role": user["role"]})

    return TokenResponse(access_token=token, user_id=user["user_id"], role=user["role"])


@router.get("/user", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return UserResponse(**user)
