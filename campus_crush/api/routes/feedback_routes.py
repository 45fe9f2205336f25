"""
Feedback Routes

POST /feedback - Report a bug or suggest a feature
GET /feedback - Your submitted feedback
"""

from fastapi import APIRouter, Depends, Request
from typing import List

from campus_crush.core.auth import get_current_user
from campus_crush.services.feedback_service import get_feedback_service
from campus_crush.schemas.schemas import FeedbackCreate, FeedbackResponse

router = APIRouter(prefix="/feedback", tags=["Feedback"])


@router.post("", response_model=FeedbackResponse, status_code=201)
async def submit_feedback(
    request: Request,
    data: FeedbackCreate,
    user: dict = Depends(get_current_user)
):
    """Submit feedback. Device info defaults to your User-Agent."""
    service = get_feedback_service()
    stored = service.submit_feedback(
        user_id=user["user_id"],
        type=data.type.value,
        title=data.title,
        description=data.description,
        category=data.category,
        rating=data.rating,
        device_info=data.device_info or request.headers.get("user-agent")
    )
    return FeedbackResponse(**stored)


@router.get("", response_model=List[FeedbackResponse])
async def get_my_feedback(user: dict = Depends(get_current_user)):
    service = get_feedback_service()
    return [FeedbackResponse(**f) for f in service.list_user_feedback(user["user_id"])]
