"""
College Routes

GET /colleges - List active colleges (public, cached)
"""

from typing import List

from fastapi import APIRouter
from sqlalchemy import select

from campus_crush.core.config import get_settings
from campus_crush.db.database import get_db_session, fetch_all
from campus_crush.db.tables import colleges
from campus_crush.utils.cache import cache, CacheKeys
from campus_crush.schemas.schemas import CollegeResponse

router = APIRouter(prefix="/colleges", tags=["Colleges"])
settings = get_settings()


def list_active_colleges() -> List[dict]:
    cached = cache.get(CacheKeys.colleges())
    if cached is not None:
        return cached

    with get_db_session() as db:
        results = fetch_all(db, select(colleges).where(
            colleges.c.is_active.is_(True)
        ).order_by(colleges.c.name))

    cache.set(CacheKeys.colleges(), results, ttl=settings.colleges_cache_ttl_seconds)
    return results


@router.get("", response_model=List[CollegeResponse])
async def get_colleges():
    """List colleges students can register with."""
    return [CollegeResponse(**c) for c in list_active_colleges()]
