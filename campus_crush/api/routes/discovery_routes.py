"""
Discovery Routes

GET /profiles/random - Random batch of profiles to rate
GET /profiles/search - Search profiles by name
"""

from fastapi import APIRouter, Depends, Query
from typing import List

from campus_crush.core.auth import get_onboarded_user
from campus_crush.services.discovery_service import get_discovery_service
from campus_crush.schemas.schemas import PublicProfile

router = APIRouter(prefix="/profiles", tags=["Discovery"])


@router.get("/random", response_model=List[PublicProfile])
async def get_random_profiles(
    limit: int = Query(10, ge=1, le=50),
    include_rated: bool = Query(False, description="Include profiles you already rated"),
    user: dict = Depends(get_onboarded_user)
):
    """
    Get random profiles to rate.

    Only verified, opposite gender students from your own college.
    """
    service = get_discovery_service()
    results = service.get_random_profiles(user, limit=limit, include_rated=include_rated)
    return [PublicProfile(**r) for r in results]


@router.get("/search", response_model=List[PublicProfile])
async def search_profiles(
    q: str = Query(..., min_length=1, max_length=100, description="Name to search for"),
    limit: int = Query(20, ge=1, le=50),
    user: dict = Depends(get_onboarded_user)
):
    """Search profiles by first, last or display name."""
    service = get_discovery_service()
    results = service.search_profiles(user, q, limit=limit)
    return [PublicProfile(**r) for r in results]
