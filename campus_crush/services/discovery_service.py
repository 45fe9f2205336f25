"""
Discovery Service - which profiles a student gets to see.

Candidates are always:
- same college
- opposite gender (male <-> female; "other" sees nobody for now)
- verified and active
- not the caller
"""

from typing import List

from sqlalchemy import and_, func, or_, select

from campus_crush.db.database import get_db_session, fetch_all
from campus_crush.db.tables import PUBLIC_PROFILE_COLUMNS, ratings, users
from campus_crush.services.rating_service import OPPOSITE_GENDER, hash_rater_id


def _candidate_filter(user: dict):
    return and_(
        users.c.college_id == user["college_id"],
        users.c.gender == OPPOSITE_GENDER[user["gender"]],
        users.c.verification_status == "verified",
        users.c.is_active.is_(True),
        users.c.user_id != user["user_id"]
    )


class DiscoveryService:

    def get_random_profiles(self, user: dict, limit: int = 10, include_rated: bool = False) -> List[dict]:
        """Random batch of candidates, skipping people the caller already rated."""
        if user["gender"] not in OPPOSITE_GENDER:
            return []

        query = select(*PUBLIC_PROFILE_COLUMNS).where(_candidate_filter(user))

        if not include_rated:
            already_rated = select(ratings.c.target_user_id).where(
                ratings.c.rater_id_hash == hash_rater_id(user["user_id"])
            )
            query = query.where(users.c.user_id.not_in(already_rated))

        query = query.order_by(func.random()).limit(limit)

        with get_db_session() as db:
            return fetch_all(db, query)

    def search_profiles(self, user: dict, search: str, limit: int = 20) -> List[dict]:
        """Case-insensitive match on first name, last name or display name."""
        if user["gender"] not in OPPOSITE_GENDER:
            return []

        term = search.strip()
        query = select(*PUBLIC_PROFILE_COLUMNS).where(
            _candidate_filter(user),
            or_(
                users.c.first_name.icontains(term, autoescape=True),
                users.c.last_name.icontains(term, autoescape=True),
                users.c.display_name.icontains(term, autoescape=True)
            )
        ).order_by(users.c.first_name, users.c.last_name, users.c.user_id).limit(limit)

        with get_db_session() as db:
            return fetch_all(db, query)


def get_discovery_service() -> DiscoveryService:
    """Get discovery service instance."""
    return DiscoveryService()
