"""
Appeal Service

Users can dispute a rating they received (or file a general appeal).
Admins approve or reject; approving an appeal on a rating removes that
rating from stats and leaderboards.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import insert, select, update

from campus_crush.core.exceptions import ConflictError, NotFoundError
from campus_crush.core.logger import get_logger
from campus_crush.db.database import get_db_session, fetch_one, fetch_all
from campus_crush.db.tables import appeals, ratings
from campus_crush.services.rating_service import update_user_stats

logger = get_logger(__name__)


class AppealService:

    def create_appeal(self, user_id: int, reason: str, description: str, rating_id: Optional[int] = None) -> dict:
        """
        File an appeal.

        Raises:
            NotFoundError: rating missing or not received by this user
            ConflictError: a pending appeal for this rating already exists
        """
        with get_db_session() as db:
            if rating_id is not None:
                rating = fetch_one(db, select(ratings.c.rating_id).where(
                    ratings.c.rating_id == rating_id,
                    ratings.c.target_user_id == user_id
                ))
                if not rating:
                    raise NotFoundError("Rating not found")

                pending = fetch_one(db, select(appeals.c.appeal_id).where(
                    appeals.c.rating_id == rating_id,
                    appeals.c.status == "pending"
                ))
                if pending:
                    raise ConflictError("An appeal for this rating is already pending")

            result = db.execute(
                insert(appeals).values(
                    user_id=user_id,
                    rating_id=rating_id,
                    reason=reason,
                    description=description,
                    status="pending",
                    created_at=datetime.utcnow()
                ).returning(appeals.c.appeal_id)
            )
            appeal_id = result.scalar_one()
            appeal = fetch_one(db, select(appeals).where(appeals.c.appeal_id == appeal_id))

        logger.info("Appeal %s filed by user %s", appeal_id, user_id)
        return appeal

    def list_user_appeals(self, user_id: int) -> List[dict]:
        with get_db_session() as db:
            return fetch_all(db, select(appeals).where(
                appeals.c.user_id == user_id
            ).order_by(appeals.c.created_at.desc(), appeals.c.appeal_id.desc()))

    def list_appeals(self, status: Optional[str] = None, limit: int = 100) -> List[dict]:
        query = select(appeals)
        if status:
            query = query.where(appeals.c.status == status)
        query = query.order_by(appeals.c.created_at.desc(), appeals.c.appeal_id.desc()).limit(limit)

        with get_db_session() as db:
            return fetch_all(db, query)

    def review_appeal(self, appeal_id: int, reviewer_id: int, decision: str) -> Tuple[dict, Optional[int]]:
        """
        Approve or reject a pending appeal.

        Returns:
            (updated appeal, college_id whose leaderboard needs a refresh or None)
        """
        affected_college = None

        with get_db_session() as db:
            appeal = fetch_one(db, select(appeals).where(appeals.c.appeal_id == appeal_id))
            if not appeal:
                raise NotFoundError("Appeal not found")
            if appeal["status"] != "pending":
                raise ConflictError("Appeal has already been reviewed")

            db.execute(
                update(appeals).where(appeals.c.appeal_id == appeal_id).values(
                    status=decision,
                    reviewed_by=reviewer_id,
                    reviewed_at=datetime.utcnow()
                )
            )

            if decision == "approved" and appeal["rating_id"] is not None:
                rating = fetch_one(db, select(ratings).where(ratings.c.rating_id == appeal["rating_id"]))
                if rating and rating["status"] == "active":
                    db.execute(
                        update(ratings).where(ratings.c.rating_id == rating["rating_id"]).values(status="removed")
                    )
                    update_user_stats(db, rating["target_user_id"])
                    affected_college = rating["college_id"]

            updated = fetch_one(db, select(appeals).where(appeals.c.appeal_id == appeal_id))

        logger.info("Appeal %s %s by admin %s", appeal_id, decision, reviewer_id)
        return updated, affected_college


def get_appeal_service() -> AppealService:
    """Get appeal service instance."""
    return AppealService()
