"""
Rate limiting - one shared slowapi Limiter, keyed by client IP.

The default limit covers every route; auth and rating routes add
tighter limits with @limiter.limit(...).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from campus_crush.core.config import get_settings

settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)

AUTH_LIMIT = settings.rate_limit_auth
RATING_LIMIT = settings.rate_limit_ratings
