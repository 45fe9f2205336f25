"""
Rating Routes

POST /ratings - Rate a profile (anonymous, 1-10)
GET /ratings/received - Ratings you received
GET /ratings/stats - Your score distribution
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from typing import List

from campus_crush.core.auth import get_current_user, get_onboarded_user
from campus_crush.core.rate_limit import limiter, RATING_LIMIT
from campus_crush.services.rating_service import get_rating_service
from campus_crush.services.leaderboard_service import refresh_college_leaderboard
from campus_crush.schemas.schemas import (
    RatingCreate, RatingReceipt, ReceivedRating, RatingStatsResponse
)

router = APIRouter(prefix="/ratings", tags=["Ratings"])


@router.post("", response_model=RatingReceipt, status_code=201)
@limiter.limit(RATING_LIMIT)
async def create_rating(
    request: Request,
    data: RatingCreate,
    background_tasks: BackgroundTasks,
    user: dict = Depends(get_onboarded_user)
):
    """
    Rate another student.

    Rules:
    - Same college, opposite gender
    - One rating per person, no self-rating
    - Your identity is stored only as a salted hash

    The college leaderboard is recomputed after the response is sent.
    """
    service = get_rating_service()
    receipt = service.create_rating(
        rater=user,
        target_user_id=data.target_user_id,
        score=data.score,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent")
    )

    background_tasks.add_task(refresh_college_leaderboard, receipt["college_id"])

    return RatingReceipt(**receipt)


@router.get("/received", response_model=List[ReceivedRating])
async def get_received_ratings(user: dict = Depends(get_current_user)):
    """Ratings you received, newest first. Raters stay anonymous."""
    service = get_rating_service()
    return [ReceivedRating(**r) for r in service.get_received_ratings(user["user_id"])]


@router.get("/stats", response_model=RatingStatsResponse)
async def get_rating_stats(user: dict = Depends(get_current_user)):
    service = get_rating_service()
    return RatingStatsResponse(**service.get_rating_stats(user["user_id"]))
