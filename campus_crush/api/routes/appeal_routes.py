"""
Appeal Routes

POST /appeals - Dispute a rating
GET /appeals - Your appeals
"""

from fastapi import APIRouter, Depends
from typing import List

from campus_crush.core.auth import get_current_user
from campus_crush.services.appeal_service import get_appeal_service
from campus_crush.schemas.schemas import AppealCreate, AppealResponse

router = APIRouter(prefix="/appeals", tags=["Appeals"])


@router.post("", response_model=AppealResponse, status_code=201)
async def create_appeal(data: AppealCreate, user: dict = Depends(get_current_user)):
    """
    File an appeal.

    Pass rating_id to dispute a specific rating you received; an admin
    will review it.
    """
    service = get_appeal_service()
    appeal = service.create_appeal(
        user_id=user["user_id"],
        reason=data.reason.value,
        description=data.description,
        rating_id=data.rating_id
    )
    return AppealResponse(**appeal)


@router.get("", response_model=List[AppealResponse])
async def get_my_appeals(user: dict = Depends(get_current_user)):
    service = get_appeal_service()
    return [AppealResponse(**a) for a in service.list_user_appeals(user["user_id"])]
