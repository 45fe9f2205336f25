"""
Admin Routes (role: admin)

POST /admin/colleges - Add a college
POST /admin/leaderboard/compute - Recompute leaderboards
GET /admin/appeals - List appeals
PUT /admin/appeals/{appeal_id} - Approve / reject an appeal
GET /admin/feedback - List all feedback
GET /admin/monitoring/performance - Request stats for the last hour
GET /admin/monitoring/errors - Recent unhandled errors
GET /admin/monitoring/endpoints - Per-endpoint stats
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Depends, Query
from sqlalchemy import insert, select

from campus_crush.db.database import get_db_session, fetch_one
from campus_crush.db.tables import colleges
from campus_crush.core.auth import get_current_admin
from campus_crush.core.logger import get_logger
from campus_crush.utils.cache import cache, CacheKeys
from campus_crush.services.appeal_service import get_appeal_service
from campus_crush.services.feedback_service import get_feedback_service
from campus_crush.services.leaderboard_service import get_leaderboard_service, refresh_college_leaderboard
from campus_crush.services.monitoring_service import get_monitoring_service
from campus_crush.schemas.schemas import (
    CollegeCreate, CollegeResponse, LeaderboardComputeRequest, LeaderboardComputeResponse,
    AppealStatus, AppealReview, AppealResponse, FeedbackResponse,
    PerformanceStatsResponse, ErrorLogResponse, EndpointStatsResponse
)

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = get_logger(__name__)


# ============================================================
# COLLEGES
# ============================================================

@router.post("/colleges", response_model=CollegeResponse, status_code=201)
async def create_college(data: CollegeCreate, admin: dict = Depends(get_current_admin)):
    """Add a college. Students register with emails on its domain."""
    with get_db_session() as db:
        existing = fetch_one(db, select(colleges.c.college_id).where(
            colleges.c.email_domain == data.email_domain
        ))
        if existing:
            raise HTTPException(status_code=400, detail="A college with this email domain already exists")

        result = db.execute(
            insert(colleges).values(
                name=data.name,
                email_domain=data.email_domain,
                is_active=True,
                created_at=datetime.utcnow()
            ).returning(colleges.c.college_id)
        )
        college_id = result.scalar_one()
        college = fetch_one(db, select(colleges).where(colleges.c.college_id == college_id))

    cache.delete(CacheKeys.colleges())
    logger.info("College %s (%s) created by admin %s", college_id, data.email_domain, admin["user_id"])

    return CollegeResponse(**college)


# ============================================================
# LEADERBOARD
# ============================================================

@router.post("/leaderboard/compute", response_model=LeaderboardComputeResponse)
async def compute_leaderboard(
    data: Optional[LeaderboardComputeRequest] = None,
    admin: dict = Depends(get_current_admin)
):
    """Recompute one college's leaderboard, or every active college's."""
    service = get_leaderboard_service()

    if data and data.college_id is not None:
        with get_db_session() as db:
            college = fetch_one(db, select(colleges.c.college_id).where(
                colleges.c.college_id == data.college_id
            ))
        if not college:
            raise HTTPException(status_code=404, detail="College not found")

        entries = service.compute_leaderboard(data.college_id)
        return LeaderboardComputeResponse(colleges_computed=1, entries_written=len(entries))

    computed, written = service.compute_all()
    return LeaderboardComputeResponse(colleges_computed=computed, entries_written=written)


# ============================================================
# APPEALS
# ============================================================

@router.get("/appeals", response_model=List[AppealResponse])
async def list_appeals(
    status: Optional[AppealStatus] = Query(None, description="Filter by status"),
    limit: int = Query(100, ge=1, le=500),
    admin: dict = Depends(get_current_admin)
):
    service = get_appeal_service()
    results = service.list_appeals(status=status.value if status else None, limit=limit)
    return [AppealResponse(**a) for a in results]


@router.put("/appeals/{appeal_id}", response_model=AppealResponse)
async def review_appeal(
    appeal_id: int,
    data: AppealReview,
    background_tasks: BackgroundTasks,
    admin: dict = Depends(get_current_admin)
):
    """
    Approve or reject a pending appeal.

    Approving an appeal on a rating removes that rating; the target's
    stats are recomputed now and the leaderboard after the response.
    """
    service = get_appeal_service()
    updated, affected_college = service.review_appeal(appeal_id, admin["user_id"], data.status.value)

    if affected_college is not None:
        background_tasks.add_task(refresh_college_leaderboard, affected_college)

    return AppealResponse(**updated)


# ============================================================
# FEEDBACK
# ============================================================

@router.get("/feedback", response_model=List[FeedbackResponse])
async def list_feedback(
    limit: int = Query(50, ge=1, le=200),
    admin: dict = Depends(get_current_admin)
):
    service = get_feedback_service()
    return [FeedbackResponse(**f) for f in service.list_feedback(limit=limit)]


# ============================================================
# MONITORING
# ============================================================

@router.get("/monitoring/performance", response_model=PerformanceStatsResponse)
async def get_performance_stats(admin: dict = Depends(get_current_admin)):
    """Request count, latency and error rate over the last hour."""
    return PerformanceStatsResponse(**get_monitoring_service().performance_stats())


@router.get("/monitoring/errors", response_model=List[ErrorLogResponse])
async def get_recent_errors(
    limit: int = Query(10, ge=1, le=100),
    admin: dict = Depends(get_current_admin)
):
    return [ErrorLogResponse(**e) for e in get_monitoring_service().recent_errors(limit)]


@router.get("/monitoring/endpoints", response_model=List[EndpointStatsResponse])
async def get_endpoint_stats(admin: dict = Depends(get_current_admin)):
    return [EndpointStatsResponse(**e) for e in get_monitoring_service().endpoint_stats()]
