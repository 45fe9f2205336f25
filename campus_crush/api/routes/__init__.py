"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from campus_crush.api.routes.auth_routes import router as auth_router
from campus_crush.api.routes.college_routes import router as college_router
from campus_crush.api.routes.profile_routes import router as profile_router
from campus_crush.api.routes.discovery_routes import router as discovery_router
from campus_crush.api.routes.rating_routes import router as rating_router
from campus_crush.api.routes.leaderboard_routes import router as leaderboard_router
from campus_crush.api.routes.appeal_routes import router as appeal_router
from campus_crush.api.routes.feedback_routes import router as feedback_router
from campus_crush.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(college_router)
api_router.include_router(profile_router)
api_router.include_router(discovery_router)
api_router.include_router(rating_router)
api_router.include_router(leaderboard_router)
api_router.include_router(appeal_router)
api_router.include_router(feedback_router)
api_router.include_router(admin_router)
