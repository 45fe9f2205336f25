"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "crush_user"
    postgres_password: str = "password"
    postgres_db: str = "campus_crush"

    # Full SQLAlchemy URL, overrides the postgres_* parts when set
    database_url: Optional[str] = None

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Ratings
    rating_salt: str = "campus_crush_salt_2024"

    # Leaderboard
    leaderboard_size: int = 10
    leaderboard_min_ratings: int = 5
    leaderboard_period_days: int = 7
    leaderboard_cache_ttl_seconds: int = 300
    colleges_cache_ttl_seconds: int = 300

    # Rate limits (slowapi syntax)
    rate_limit_default: str = "100/minute"
    rate_limit_auth: str = "20/15minutes"
    rate_limit_ratings: str = "10/minute"
    rate_limit_enabled: bool = True

    # Uploads
    upload_dir: str = "uploads"
    max_image_size_mb: int = 5
    max_image_width: int = 1024

    # Monitoring
    slow_request_ms: int = 1000
    monitoring_max_metrics: int = 1000
    monitoring_max_errors: int = 500

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or self.postgres_url

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
