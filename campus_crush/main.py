"""
Campus Crush - Main Application

FastAPI backend with:
- Relational database via SQLAlchemy (PostgreSQL in production)
- JWT authentication, college email verification
- Anonymous ratings + weekly per-college leaderboards
- slowapi rate limiting, in-process cache and request monitoring
- Frontend served from /frontend/public when present

Run: uvicorn campus_crush.main:app --reload
"""

import asyncio
import os
import time
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse, JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from campus_crush.api.routes import api_router
from campus_crush.core.config import get_settings
from campus_crush.core.exceptions import CampusCrushError
from campus_crush.core.logger import setup_logging, get_logger
from campus_crush.core.rate_limit import limiter
from campus_crush.db.database import init_db, test_database_connection
from campus_crush.services.monitoring_service import get_monitoring_service
from campus_crush.utils.cache import cache

settings = get_settings()
setup_logging()
logger = get_logger(__name__)

# Get the project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
FRONTEND_DIR = os.path.join(PROJECT_ROOT, "frontend", "public")

CACHE_CLEANUP_INTERVAL_SECONDS = 60

# Create FastAPI app
app = FastAPI(
    title="Campus Crush",
    description="""
    Anonymous, college-scoped profile ratings.

    ## Features
    - **Authentication**: register with a college email, JWT bearer tokens
    - **Profiles**: onboarding, bio, profile photo
    - **Discovery**: random and name search, same college, opposite gender
    - **Ratings**: anonymous 1-10 scores, one per person
    - **Leaderboards**: weekly top profiles per college
    - **Appeals & Feedback**: dispute ratings, report bugs
    - **Admin**: colleges, appeal review, monitoring
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def monitor_requests(request: Request, call_next):
    """Record duration and status of every request."""
    monitoring = get_monitoring_service()
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        monitoring.record_request(
            request.url.path, request.method, (time.perf_counter() - start) * 1000, 500,
            getattr(request.state, "user_id", None)
        )
        raise

    monitoring.record_request(
        request.url.path, request.method, (time.perf_counter() - start) * 1000, response.status_code,
        getattr(request.state, "user_id", None)
    )
    return response


@app.exception_handler(CampusCrushError)
async def campus_crush_error_handler(request: Request, exc: CampusCrushError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Log, record and hide internals from the client."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    get_monitoring_service().record_error(
        exc, request.url.path, request.method, 500, getattr(request.state, "user_id", None)
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "timestamp": datetime.utcnow().isoformat()}
    )


# Include API routes
app.include_router(api_router, prefix="/api")

# Uploaded profile images
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

# Serve static files (for any additional assets)
if os.path.exists(FRONTEND_DIR):
    app.mount("/static", StaticFiles(directory=FRONTEND_DIR), name="static")


async def _cleanup_cache_periodically():
    while True:
        await asyncio.sleep(CACHE_CLEANUP_INTERVAL_SECONDS)
        removed = cache.cleanup()
        if removed:
            logger.debug("Cache cleanup removed %d expired entries", removed)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create tables and start the cache cleanup loop."""
    init_db()
    app.state.cache_cleanup_task = asyncio.create_task(_cleanup_cache_periodically())
    logger.info("Campus Crush API started")


@app.on_event("shutdown")
async def shutdown_event():
    task = getattr(app.state, "cache_cleanup_task", None)
    if task:
        task.cancel()


# Serve frontend for root path
@app.get("/", tags=["Frontend"])
async def serve_frontend():
    """Serve the frontend."""
    index_path = os.path.join(FRONTEND_DIR, "index.html")
    if os.path.exists(index_path):
        return FileResponse(index_path)
    return {"status": "healthy", "app": "Campus Crush", "message": "Frontend not found. API is running."}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    database_ok = test_database_connection()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "disconnected",
        "timestamp": datetime.utcnow().isoformat()
    }
