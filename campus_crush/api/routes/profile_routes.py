"""
Profile Routes

GET /profile - Get own profile
POST /profile/setup - Complete onboarding (college, gender, display name, bio)
PUT /profile - Update display name / bio
POST /profile/image - Upload profile photo (JPG/PNG/WEBP)
"""

from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File
from sqlalchemy import select, update

from campus_crush.db.database import get_db_session, fetch_one
from campus_crush.db.tables import colleges, users
from campus_crush.core.auth import get_current_user
from campus_crush.core.logger import get_logger
from campus_crush.utils.college_email import email_domain, domain_matches
from campus_crush.utils.file_upload import read_image_upload, save_profile_image
from campus_crush.schemas.schemas import (
    ProfileSetup, ProfileUpdate, UserResponse, ImageUploadResponse
)

router = APIRouter(prefix="/profile", tags=["Profile"])
logger = get_logger(__name__)


def load_user(db, user_id: int) -> dict:
    return fetch_one(db, select(users).where(users.c.user_id == user_id))


@router.get("", response_model=UserResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    """Get current user's private profile."""
    return UserResponse(**user)


@router.post("/setup", response_model=UserResponse)
async def setup_profile(data: ProfileSetup, user: dict = Depends(get_current_user)):
    """
    Complete onboarding.

    The account's email domain must belong to the chosen college;
    that match is what marks the profile as verified.
    """
    with get_db_session() as db:
        college = fetch_one(db, select(colleges).where(colleges.c.college_id == data.college_id))
        if not college or not college["is_active"]:
            raise HTTPException(status_code=404, detail="College not found")

        if not domain_matches(email_domain(user["email"]), college["email_domain"]):
            raise HTTPException(status_code=403, detail="Email domain does not match the selected college")

        now = datetime.utcnow()
        values = {
            "college_id": college["college_id"],
            "gender": data.gender.value,
            "verification_status": "verified",
            "verification_method": "email_domain",
            "last_active_at": now,
            "updated_at": now
        }
        if data.display_name is not None:
            values["display_name"] = data.display_name
        if data.bio is not None:
            values["bio"] = data.bio

        db.execute(update(users).where(users.c.user_id == user["user_id"]).values(**values))
        updated = load_user(db, user["user_id"])

    logger.info("Profile setup completed for user %s", user["user_id"])
    return UserResponse(**updated)


@router.put("", response_model=UserResponse)
async def update_profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    """Update profile. Only provided fields are updated."""
    values = data.model_dump(exclude_none=True)

    if not values:
        raise HTTPException(status_code=400, detail="No fields to update")

    with get_db_session() as db:
        db.execute(
            update(users).where(users.c.user_id == user["user_id"]).values(**values, updated_at=datetime.utcnow())
        )
        updated = load_user(db, user["user_id"])

    return UserResponse(**updated)


@router.post("/image", response_model=ImageUploadResponse)
async def upload_profile_image(
    file: UploadFile = File(..., description="Profile photo (JPG, PNG or WEBP)"),
    user: dict = Depends(get_current_user)
):
    """
    Upload a profile photo.

    Process:
    1. Validate extension and size
    2. Decode + normalize (RGB, max width) with Pillow
    3. Save under the uploads directory
    4. Store the public URL on the profile
    """
    content = await read_image_upload(file)
    url = save_profile_image(user["user_id"], content)

    with get_db_session() as db:
        db.execute(
            update(users).where(users.c.user_id == user["user_id"]).values(
                profile_image_url=url, updated_at=datetime.utcnow()
            )
        )

    return ImageUploadResponse(success=True, message="Profile image updated", profile_image_url=url)
