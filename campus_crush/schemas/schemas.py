"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class VerificationStatus(str, Enum):
    unverified = "unverified"
    verified = "verified"


class RatingStatus(str, Enum):
    active = "active"
    removed = "removed"


class AppealReason(str, Enum):
    inappropriate = "inappropriate"
    fake_rating = "fake_rating"
    harassment = "harassment"
    spam = "spam"
    other = "other"


class AppealStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class AppealDecision(str, Enum):
    approved = "approved"
    rejected = "rejected"


class FeedbackType(str, Enum):
    bug = "bug"
    feature = "feature"
    improvement = "improvement"
    other = "other"


class PeriodType(str, Enum):
    weekly = "weekly"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=8, max_length=72)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: str

class UserResponse(BaseModel):
    """Private view of the caller's own account."""
    user_id: int
    email: str
    role: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    college_id: Optional[int] = None
    gender: Optional[str] = None
    verification_status: str
    ratings_received: int = 0
    average_score: Optional[float] = None
    last_active_at: Optional[datetime] = None
    created_at: datetime


# ============================================================
# COLLEGE SCHEMAS
# ============================================================

class CollegeCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email_domain: str = Field(..., min_length=3, max_length=255)

    @field_validator("email_domain")
    @classmethod
    def normalize_domain(cls, v: str) -> str:
        v = v.strip().lower().lstrip("@")
        if "." not in v or " " in v:
            raise ValueError("email_domain must look like 'college.edu'")
        return v

class CollegeResponse(BaseModel):
    college_id: int
    name: str
    email_domain: str
    is_active: bool
    created_at: datetime


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileSetup(BaseModel):
    college_id: int
    gender: Gender
    display_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)

class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)

class PublicProfile(BaseModel):
    """What other students get to see. No email, no stats."""
    user_id: int
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    gender: Optional[str] = None
    college_id: Optional[int] = None

class ImageUploadResponse(BaseModel):
    success: bool
    message: str
    profile_image_url: str


# ============================================================
# RATING SCHEMAS
# ============================================================

class RatingCreate(BaseModel):
    target_user_id: int
    score: int = Field(..., ge=1, le=10)

class RatingReceipt(BaseModel):
    rating_id: int
    target_user_id: int
    score: int
    created_at: datetime

class ReceivedRating(BaseModel):
    rating_id: int
    score: int
    status: str
    created_at: datetime

class RatingStatsResponse(BaseModel):
    ratings_received: int
    average_score: Optional[float] = None
    score_distribution: Dict[int, int]


# ============================================================
# LEADERBOARD SCHEMAS
# ============================================================

class LeaderboardEntry(BaseModel):
    rank: int
    user: PublicProfile
    average_score: float
    total_ratings: int

class LeaderboardResponse(BaseModel):
    college_id: int
    period_type: str
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    entries: List[LeaderboardEntry] = []
    user_in_top: bool = False

class LeaderboardComputeRequest(BaseModel):
    college_id: Optional[int] = None

class LeaderboardComputeResponse(BaseModel):
    colleges_computed: int
    entries_written: int


# ============================================================
# APPEAL SCHEMAS
# ============================================================

class AppealCreate(BaseModel):
    rating_id: Optional[int] = None
    reason: AppealReason
    description: str = Field(..., min_length=10, max_length=500)

class AppealReview(BaseModel):
    status: AppealDecision

class AppealResponse(BaseModel):
    appeal_id: int
    user_id: int
    rating_id: Optional[int] = None
    reason: str
    description: Optional[str] = None
    status: str
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime


# ============================================================
# FEEDBACK SCHEMAS
# ============================================================

class FeedbackCreate(BaseModel):
    type: FeedbackType
    category: Optional[str] = Field(None, max_length=100)
    title: str = Field(..., min_length=5, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    rating: Optional[int] = Field(None, ge=1, le=5)
    device_info: Optional[str] = None

class FeedbackResponse(BaseModel):
    feedback_id: int
    user_id: Optional[int] = None
    type: str
    category: Optional[str] = None
    title: str
    description: str
    rating: Optional[int] = None
    status: str
    priority: str
    device_info: Optional[str] = None
    created_at: datetime


# ============================================================
# MONITORING SCHEMAS
# ============================================================

class PerformanceStatsResponse(BaseModel):
    total_requests: int
    average_response_time: int
    error_rate: float
    slow_requests: int
    time_window: str = "1 hour"

class ErrorLogResponse(BaseModel):
    message: str
    endpoint: str
    method: str
    timestamp: datetime
    status_code: int
    user_id: Optional[int] = None

class EndpointStatsResponse(BaseModel):
    endpoint: str
    request_count: int
    average_response_time: int
    error_count: int
    error_rate: float


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
