"""
Table definitions (SQLAlchemy Core).

colleges     - supported colleges, keyed by email domain
users        - accounts + profile + cached rating stats
ratings      - anonymous 1-10 scores, rater stored only as salted hash
appeals      - user disputes against received ratings
feedback     - product feedback from users
leaderboards - precomputed weekly rankings per college
"""

from datetime import datetime

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, MetaData,
    String, Table, Text, UniqueConstraint
)

metadata = MetaData()


colleges = Table(
    "colleges", metadata,
    Column("college_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("email_domain", String(255), nullable=False, unique=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False, default=datetime.utcnow),
)


users = Table(
    "users", metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False, default="user"),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("display_name", String(100)),
    Column("bio", Text),
    Column("profile_image_url", String(500)),
    Column("college_id", Integer, ForeignKey("colleges.college_id")),
    Column("gender", String(20)),
    Column("verification_status", String(20), nullable=False, default="unverified"),
    Column("verification_method", String(50)),
    # Stats, recomputed after every rating change
    Column("ratings_received", Integer, nullable=False, default=0),
    Column("average_score", Float),
    Column("is_active", Boolean, nullable=False, default=True),
    # Abuse prevention metadata
    Column("last_active_at", DateTime),
    Column("device_hash", String(64)),
    Column("ip_hash", String(64)),
    Column("created_at", DateTime, nullable=False, default=datetime.utcnow),
    Column("updated_at", DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow),
    Index("users_college_gender_idx", "college_id", "gender"),
)

# What other students may see of a user
PUBLIC_PROFILE_COLUMNS = [
    users.c.user_id, users.c.display_name, users.c.first_name, users.c.bio,
    users.c.profile_image_url, users.c.gender, users.c.college_id
]


ratings = Table(
    "ratings", metadata,
    Column("rating_id", Integer, primary_key=True, autoincrement=True),
    Column("rater_id_hash", String(64), nullable=False),
    Column("target_user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("score", Integer, nullable=False),
    Column("college_id", Integer, ForeignKey("colleges.college_id")),
    Column("ip_hash", String(64)),
    Column("device_hash", String(64)),
    # active | removed (after an approved appeal)
    Column("status", String(20), nullable=False, default="active"),
    Column("created_at", DateTime, nullable=False, default=datetime.utcnow),
    UniqueConstraint("rater_id_hash", "target_user_id", name="ratings_rater_target_uq"),
    Index("ratings_target_idx", "target_user_id"),
    Index("ratings_college_idx", "college_id"),
    Index("ratings_created_idx", "created_at"),
)


appeals = Table(
    "appeals", metadata,
    Column("appeal_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("rating_id", Integer, ForeignKey("ratings.rating_id", ondelete="CASCADE")),
    Column("reason", String(30), nullable=False),
    Column("description", Text),
    Column("status", String(20), nullable=False, default="pending"),
    Column("reviewed_by", Integer, ForeignKey("users.user_id")),
    Column("reviewed_at", DateTime),
    Column("created_at", DateTime, nullable=False, default=datetime.utcnow),
    Index("appeals_user_idx", "user_id"),
    Index("appeals_status_idx", "status"),
)


feedback = Table(
    "feedback", metadata,
    Column("feedback_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE")),
    Column("type", String(20), nullable=False),
    Column("category", String(100)),
    Column("title", String(100), nullable=False),
    Column("description", Text, nullable=False),
    Column("rating", Integer),
    Column("status", String(20), nullable=False, default="open"),
    Column("priority", String(20), nullable=False, default="medium"),
    Column("device_info", Text),
    Column("created_at", DateTime, nullable=False, default=datetime.utcnow),
    Column("updated_at", DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow),
    Index("feedback_user_idx", "user_id"),
    Index("feedback_status_idx", "status"),
    Index("feedback_created_idx", "created_at"),
)


leaderboards = Table(
    "leaderboards", metadata,
    Column("entry_id", Integer, primary_key=True, autoincrement=True),
    Column("college_id", Integer, ForeignKey("colleges.college_id"), nullable=False),
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("rank", Integer, nullable=False),
    Column("average_score", Float, nullable=False),
    Column("total_ratings", Integer, nullable=False),
    Column("period_start", DateTime, nullable=False),
    Column("period_end", DateTime, nullable=False),
    Column("period_type", String(20), nullable=False, default="weekly"),
    Column("created_at", DateTime, nullable=False, default=datetime.utcnow),
    Index("leaderboards_college_period_idx", "college_id", "period_start"),
)
