"""
Leaderboard Routes

GET /leaderboard - Weekly top profiles of your college
"""

from fastapi import APIRouter, HTTPException, Depends, Query

from campus_crush.core.auth import get_current_user
from campus_crush.services.leaderboard_service import get_leaderboard_service
from campus_crush.schemas.schemas import LeaderboardResponse, PeriodType

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    period: str = Query(PeriodType.weekly.value, description="Leaderboard period (weekly)"),
    user: dict = Depends(get_current_user)
):
    """
    Get the latest leaderboard of your college.

    Computed from ratings of the last 7 days; needs a minimum number of
    ratings to appear.
    """
    if not user["college_id"]:
        raise HTTPException(status_code=400, detail="Please complete your profile first")

    if period not in [p.value for p in PeriodType]:
        raise HTTPException(status_code=400, detail=f"Unsupported period: {period}")

    service = get_leaderboard_service()
    board = service.get_leaderboard(user["college_id"], period)

    user_in_top = any(e["user"]["user_id"] == user["user_id"] for e in board["entries"])

    return LeaderboardResponse(**board, user_in_top=user_in_top)
