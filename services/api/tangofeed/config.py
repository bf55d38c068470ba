"""
Configuration management using Pydantic BaseSettings.
All values can be overridden via environment variables or a .env file.

Scoring weights and caps are not settings: they live as constants in
tangofeed.ranking.scoring so every deployment ranks identically.
"""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Relational store (MySQL-protocol compatible) ───────────────────────
    db_host: str = "tidb"
    db_port: int = 4000
    db_user: str = "root"
    db_password: str = ""
    db_database: str = "tango_community"
    # Full SQLAlchemy URL; takes precedence over the pieces above
    database_dsn: Optional[str] = None

    @property
    def database_url(self) -> str:
        if self.database_dsn:
            return self.database_dsn
        return (
            f"mysql+aiomysql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_database}"
        )

    # ── Ranking windows ────────────────────────────────────────────────────
    personalized_window_days: int = 7
    following_window_days: int = 7
    discover_window_hours: int = 48
    trending_window_hours: int = 24
    recommended_window_days: int = 7
    interaction_window_days: int = 30
    active_users_window_minutes: int = 60

    # ── Candidate pools ────────────────────────────────────────────────────
    personalized_candidate_limit: int = 200
    discover_candidate_limit: int = 100
    recommended_candidate_limit: int = 50
    max_consecutive_per_author: int = 3

    # ── Page sizes ─────────────────────────────────────────────────────────
    feed_page_size: int = 20
    trending_limit: int = 5
    recommended_limit: int = 10
    active_users_limit: int = 10

    # Request-level budget owned by the HTTP layer; the core never times out
    feed_request_timeout_seconds: float = 5.0

    # ── Observability ──────────────────────────────────────────────────────
    otel_exporter_otlp_endpoint: str = "http://jaeger:4317"
    tracing_enabled: bool = True
    service_name: str = "feed-service"
    environment: str = "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
