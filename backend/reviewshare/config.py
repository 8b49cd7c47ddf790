"""
ReviewShare Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before the app starts.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "dev-change-this-secret"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development against
    DynamoDB Local. Production deployments MUST override JWT_SECRET and
    CORS_ORIGINS.
    """

    # ── AWS / DynamoDB ────────────────────────────────────────────────────
    aws_region: str = Field(default="us-east-1")

    # What: Override endpoint, e.g. http://localhost:8001 for DynamoDB Local
    # Empty means the regional AWS endpoint.
    dynamodb_endpoint_url: Optional[str] = Field(default=None)

    users_table: str = Field(default="Users")
    profiles_table: str = Field(default="Profiles")
    reviews_table: str = Field(default="Reviews")
    comments_table: str = Field(default="Comments")
    drafts_table: str = Field(default="Drafts")
    counters_table: str = Field(default="Counters")

    # What: Provision missing tables during startup (DynamoDB Local, demos)
    create_tables_on_startup: bool = Field(default=False)

    # ── Auth ──────────────────────────────────────────────────────────────
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60, ge=1, le=10080)

    # What: New accounts must confirm a one-time code before they can log in
    require_email_confirmation: bool = Field(default=True)
    confirmation_code_ttl_minutes: int = Field(default=30, ge=1, le=1440)

    # ── Pagination ────────────────────────────────────────────────────────
    page_size_default: int = Field(default=10, ge=1, le=100)
    page_size_max: int = Field(default=100, ge=1, le=1000)

    # ── Conditional-write races ───────────────────────────────────────────
    # How many times a lost conditional write is re-attempted before the
    # operation fails with a conflict.
    id_allocation_attempts: int = Field(default=3, ge=1, le=10)
    unsave_attempts: int = Field(default=3, ge=1, le=10)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (split by cors_origins_list)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-IP sliding window rate limit
    rate_limit_requests: int = Field(default=1000, ge=10, le=100000)
    rate_limit_window: int = Field(default=3600, ge=60, le=86400)  # seconds

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # JWT_SECRET and jwt_secret both work
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that security-sensitive settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if not self.jwt_secret or self.jwt_secret == DEFAULT_JWT_SECRET:
            errors.append(
                "JWT_SECRET is not set. Tokens are signed with the development default."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
