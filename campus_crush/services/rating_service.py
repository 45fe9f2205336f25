"""
Rating Service

PURPOSE:
Store anonymous 1-10 ratings between students and keep the rated
user's cached stats (ratings_received, average_score) in sync.

ANONYMITY:
- The rater is stored only as sha256(rater_id + salt)
- The same hash is what enforces "one rating per pair"
- Rating receipts and received-rating lists never include rater data

RULES (checked in this order):
1. No self-rating
2. Target must exist and be active
3. Same college
4. Opposite gender (male <-> female)
5. Not already rated
"""

import hashlib
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import IntegrityError

from campus_crush.core.config import get_settings
from campus_crush.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from campus_crush.core.logger import get_logger
from campus_crush.db.database import get_db_session, fetch_one, fetch_all
from campus_crush.db.tables import ratings, users

settings = get_settings()
logger = get_logger(__name__)

OPPOSITE_GENDER = {"male": "female", "female": "male"}


def hash_value(value: str) -> str:
    """Plain sha256 hex digest, used for IP / device fingerprints."""
    return hashlib.sha256(value.encode()).hexdigest()


def hash_rater_id(rater_id: int, salt: str = None) -> str:
    """Salted hash of the rater's user id."""
    salt = settings.rating_salt if salt is None else salt
    return hashlib.sha256(f"{rater_id}{salt}".encode()).hexdigest()


def is_opposite_gender(gender_a: Optional[str], gender_b: Optional[str]) -> bool:
    return OPPOSITE_GENDER.get(gender_a) == gender_b


def update_user_stats(db, user_id: int) -> dict:
    """
    Recompute ratings_received / average_score from active ratings.

    Runs inside the caller's session so it commits with the rating change.
    """
    stats = fetch_one(db, select(
        func.count(ratings.c.rating_id).label("count"),
        func.avg(ratings.c.score).label("avg")
    ).where(
        ratings.c.target_user_id == user_id,
        ratings.c.status == "active"
    ))

    count = stats["count"] or 0
    average = round(float(stats["avg"]), 2) if count else None

    db.execute(
        update(users)
        .where(users.c.user_id == user_id)
        .values(ratings_received=count, average_score=average, updated_at=datetime.utcnow())
    )
    return {"ratings_received": count, "average_score": average}


class RatingService:

    def __init__(self, salt: str = None):
        self.salt = settings.rating_salt if salt is None else salt

    def has_rated(self, db, rater_id: int, target_user_id: int) -> bool:
        existing = fetch_one(db, select(ratings.c.rating_id).where(
            ratings.c.rater_id_hash == hash_rater_id(rater_id, self.salt),
            ratings.c.target_user_id == target_user_id
        ).limit(1))
        return existing is not None

    def create_rating(
        self,
        rater: dict,
        target_user_id: int,
        score: int,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> dict:
        """
        Validate and store a rating.

        Args:
            rater: users row of the caller (must be onboarded)
            target_user_id: user being rated
            score: 1-10

        Returns:
            Receipt dict: rating_id, target_user_id, score, college_id, created_at

        Raises:
            ValidationError, NotFoundError, ForbiddenError, ConflictError
        """
        if not 1 <= score <= 10:
            raise ValidationError("Score must be between 1 and 10")

        if target_user_id == rater["user_id"]:
            raise ValidationError("You cannot rate yourself")

        with get_db_session() as db:
            target = fetch_one(db, select(users).where(users.c.user_id == target_user_id))
            if not target or not target["is_active"]:
                raise NotFoundError("User not found")

            if rater["college_id"] != target["college_id"]:
                raise ForbiddenError("You can only rate users from your college")

            if not is_opposite_gender(rater["gender"], target["gender"]):
                raise ForbiddenError("You can only rate opposite gender students")

            if self.has_rated(db, rater["user_id"], target_user_id):
                raise ConflictError("You have already rated this user")

            try:
                result = db.execute(
                    insert(ratings).values(
                        rater_id_hash=hash_rater_id(rater["user_id"], self.salt),
                        target_user_id=target_user_id,
                        score=score,
                        college_id=rater["college_id"],
                        ip_hash=hash_value(ip_address) if ip_address else None,
                        device_hash=hash_value(user_agent) if user_agent else None,
                        status="active",
                        created_at=datetime.utcnow()
                    ).returning(ratings.c.rating_id, ratings.c.created_at)
                )
                rating_id, created_at = result.fetchone()
            except IntegrityError:
                # Lost a race with a concurrent submission for the same pair
                raise ConflictError("You have already rated this user")

            update_user_stats(db, target_user_id)

        logger.info("Rating %s stored for user %s (college %s)", rating_id, target_user_id, rater["college_id"])

        return {
            "rating_id": rating_id,
            "target_user_id": target_user_id,
            "score": score,
            "college_id": rater["college_id"],
            "created_at": created_at
        }

    def get_received_ratings(self, user_id: int) -> List[dict]:
        """Ratings a user received, newest first. Never includes rater data."""
        with get_db_session() as db:
            return fetch_all(db, select(
                ratings.c.rating_id, ratings.c.score, ratings.c.status, ratings.c.created_at
            ).where(
                ratings.c.target_user_id == user_id
            ).order_by(ratings.c.created_at.desc(), ratings.c.rating_id.desc()))

    def get_rating_stats(self, user_id: int) -> dict:
        """Count, average and 1-10 histogram of a user's active ratings."""
        with get_db_session() as db:
            rows = fetch_all(db, select(
                ratings.c.score, func.count(ratings.c.rating_id).label("count")
            ).where(
                ratings.c.target_user_id == user_id,
                ratings.c.status == "active"
            ).group_by(ratings.c.score))

        distribution = {score: 0 for score in range(1, 11)}
        for row in rows:
            distribution[row["score"]] = row["count"]

        total = sum(distribution.values())
        average = round(sum(s * c for s, c in distribution.items()) / total, 2) if total else None

        return {
            "ratings_received": total,
            "average_score": average,
            "score_distribution": distribution
        }


def get_rating_service() -> RatingService:
    """Get rating service instance."""
    return RatingService()
