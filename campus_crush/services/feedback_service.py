"""
Feedback Service - bug reports and feature requests from users.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import insert, select

from campus_crush.core.logger import get_logger
from campus_crush.db.database import get_db_session, fetch_one, fetch_all
from campus_crush.db.tables import feedback

logger = get_logger(__name__)


class FeedbackService:

    def submit_feedback(
        self,
        user_id: int,
        type: str,
        title: str,
        description: str,
        category: Optional[str] = None,
        rating: Optional[int] = None,
        device_info: Optional[str] = None
    ) -> dict:
        now = datetime.utcnow()
        with get_db_session() as db:
            result = db.execute(
                insert(feedback).values(
                    user_id=user_id,
                    type=type,
                    category=category,
                    title=title,
                    description=description,
                    rating=rating,
                    status="open",
                    priority="medium",
                    device_info=device_info,
                    created_at=now,
                    updated_at=now
                ).returning(feedback.c.feedback_id)
            )
            feedback_id = result.scalar_one()
            stored = fetch_one(db, select(feedback).where(feedback.c.feedback_id == feedback_id))

        logger.info("Feedback %s (%s) submitted by user %s", feedback_id, type, user_id)
        return stored

    def list_user_feedback(self, user_id: int) -> List[dict]:
        with get_db_session() as db:
            return fetch_all(db, select(feedback).where(
                feedback.c.user_id == user_id
            ).order_by(feedback.c.created_at.desc(), feedback.c.feedback_id.desc()))

    def list_feedback(self, limit: int = 50) -> List[dict]:
        """All feedback, newest first (admin view)."""
        with get_db_session() as db:
            return fetch_all(db, select(feedback).order_by(
                feedback.c.created_at.desc(), feedback.c.feedback_id.desc()
            ).limit(limit))


def get_feedback_service() -> FeedbackService:
    """Get feedback service instance."""
    return FeedbackService()
