"""
Leaderboard Service

PURPOSE:
Precompute weekly per-college rankings and serve them from a short TTL cache.

HOW IT WORKS:
1. Aggregate active ratings from the last N days per rated user
   (AVG(score), COUNT(*)), only verified + active users of that college
2. Drop users under the minimum rating count
3. Order by average desc, then count desc, then user id
4. Replace the college's stored weekly rows with the new ranks
5. Invalidate the cached leaderboard for that college

WHEN IT RUNS:
- After every new rating (background task)
- After an appeal removes a rating
- On demand from the admin endpoint
"""

from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, insert, select

from campus_crush.core.config import get_settings
from campus_crush.core.logger import get_logger
from campus_crush.db.database import get_db_session, fetch_one, fetch_all
from campus_crush.db.tables import PUBLIC_PROFILE_COLUMNS, colleges, leaderboards, ratings, users
from campus_crush.utils.cache import cache, CacheKeys

settings = get_settings()
logger = get_logger(__name__)

WEEKLY = "weekly"


class LeaderboardService:

    def __init__(
        self,
        size: int = None,
        min_ratings: int = None,
        period_days: int = None,
        cache_ttl: int = None
    ):
        self.size = size or settings.leaderboard_size
        self.min_ratings = settings.leaderboard_min_ratings if min_ratings is None else min_ratings
        self.period_days = period_days or settings.leaderboard_period_days
        self.cache_ttl = settings.leaderboard_cache_ttl_seconds if cache_ttl is None else cache_ttl

    def period_bounds(self, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        period_end = now or datetime.utcnow()
        return period_end - timedelta(days=self.period_days), period_end

    def compute_leaderboard(self, college_id: int, now: Optional[datetime] = None) -> List[dict]:
        """
        Rebuild the weekly leaderboard of one college.

        Returns:
            List of stored entries (rank, user_id, average_score, total_ratings)
        """
        period_start, period_end = self.period_bounds(now)

        score_avg = func.avg(ratings.c.score)
        score_count = func.count(ratings.c.rating_id)

        ranking_query = (
            select(
                ratings.c.target_user_id.label("user_id"),
                score_avg.label("average_score"),
                score_count.label("total_ratings")
            )
            .select_from(ratings.join(users, users.c.user_id == ratings.c.target_user_id))
            .where(
                ratings.c.college_id == college_id,
                users.c.college_id == college_id,
                ratings.c.status == "active",
                ratings.c.created_at >= period_start,
                ratings.c.created_at <= period_end,
                users.c.verification_status == "verified",
                users.c.is_active.is_(True)
            )
            .group_by(ratings.c.target_user_id)
            .having(score_count >= self.min_ratings)
            .order_by(score_avg.desc(), score_count.desc(), ratings.c.target_user_id.asc())
            .limit(self.size)
        )

        with get_db_session() as db:
            top_users = fetch_all(db, ranking_query)

            db.execute(
                delete(leaderboards).where(
                    leaderboards.c.college_id == college_id,
                    leaderboards.c.period_type == WEEKLY
                )
            )

            entries = [
                {
                    "college_id": college_id,
                    "user_id": row["user_id"],
                    "rank": rank,
                    "average_score": round(float(row["average_score"]), 2),
                    "total_ratings": row["total_ratings"],
                    "period_start": period_start,
                    "period_end": period_end,
                    "period_type": WEEKLY,
                    "created_at": period_end
                } for rank, row in enumerate(top_users, start=1)
            ]

            if entries:
                db.execute(insert(leaderboards), entries)

        self.invalidate(college_id)
        logger.info("Leaderboard computed for college %s: %d entries", college_id, len(entries))
        return entries

    def compute_all(self, now: Optional[datetime] = None) -> Tuple[int, int]:
        """Recompute every active college. Returns (colleges, entries written)."""
        with get_db_session() as db:
            college_ids = [r["college_id"] for r in fetch_all(
                db, select(colleges.c.college_id).where(colleges.c.is_active.is_(True))
            )]

        written = 0
        for college_id in college_ids:
            written += len(self.compute_leaderboard(college_id, now))
        return len(college_ids), written

    def get_leaderboard(self, college_id: int, period_type: str = WEEKLY) -> dict:
        """
        Most recent stored leaderboard of a college (cached).

        Returns:
            dict with college_id, period_type, period_start, period_end, entries
        """
        key = CacheKeys.leaderboard(college_id, period_type)
        cached = cache.get(key)
        if cached is not None:
            return cached

        with get_db_session() as db:
            latest = fetch_one(db, select(
                func.max(leaderboards.c.period_start).label("period_start")
            ).where(
                leaderboards.c.college_id == college_id,
                leaderboards.c.period_type == period_type
            ))

            rows = []
            if latest and latest["period_start"] is not None:
                rows = fetch_all(db, select(
                    leaderboards.c.rank,
                    leaderboards.c.average_score,
                    leaderboards.c.total_ratings,
                    leaderboards.c.period_start,
                    leaderboards.c.period_end,
                    *PUBLIC_PROFILE_COLUMNS
                ).select_from(
                    leaderboards.join(users, users.c.user_id == leaderboards.c.user_id)
                ).where(
                    leaderboards.c.college_id == college_id,
                    leaderboards.c.period_type == period_type,
                    leaderboards.c.period_start == latest["period_start"]
                ).order_by(leaderboards.c.rank).limit(self.size))

        result = {
            "college_id": college_id,
            "period_type": period_type,
            "period_start": rows[0]["period_start"] if rows else None,
            "period_end": rows[0]["period_end"] if rows else None,
            "entries": [
                {
                    "rank": r["rank"],
                    "average_score": r["average_score"],
                    "total_ratings": r["total_ratings"],
                    "user": {col.name: r[col.name] for col in PUBLIC_PROFILE_COLUMNS}
                } for r in rows
            ]
        }

        cache.set(key, result, ttl=self.cache_ttl)
        return result

    def invalidate(self, college_id: int) -> None:
        cache.delete_prefix(CacheKeys.leaderboard_prefix(college_id))


def refresh_college_leaderboard(college_id: int) -> None:
    """
    Background task run after rating changes.

    Failures are logged, not raised: the rating itself is already stored.
    """
    try:
        get_leaderboard_service().compute_leaderboard(college_id)
    except Exception:
        logger.exception("Error updating leaderboard for college %s", college_id)


def get_leaderboard_service() -> LeaderboardService:
    """Get leaderboard service instance."""
    return LeaderboardService()
