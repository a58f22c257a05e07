# config.py
"""Application settings loaded from the environment."""

import os
import logging
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

# Load environment variables from the .env file
load_dotenv()

EMAIL_FAILURE_POLICIES = ("abort", "ignore")


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return ["*"]
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    """Typed view over the environment variables the handlers read."""

    app_env: str = "production"
    log_level: str = "INFO"
    log_format: str = "json"

    aws_region: str = "us-east-1"
    ses_region: Optional[str] = None
    s3_region: Optional[str] = None

    submissions_table: Optional[str] = None
    projects_table: Optional[str] = None
    projects_category_index: str = "CategoryIndex"
    projects_cache_seconds: int = 300
    resume_bucket: Optional[str] = None

    from_email: Optional[str] = None
    to_email: Optional[str] = None
    site_name: str = "Portfolio"

    admin_api_key: Optional[str] = None
    trusted_image_prefix: str = "https://res.cloudinary.com/"
    cors_origins: List[str] = ["*"]

    rate_limit_max: int = 3
    rate_limit_window_ms: int = 60_000
    rate_limit_max_clients: int = 10_000
    rate_limit_table: Optional[str] = None

    email_failure_policy: str = "abort"
    idempotency_ttl_seconds: int = 600

    @field_validator("email_failure_policy")
    @classmethod
    def policy_must_be_known(cls, v: str) -> str:
        v = v.lower()
        if v not in EMAIL_FAILURE_POLICIES:
            raise ValueError(f"email_failure_policy must be one of {EMAIL_FAILURE_POLICIES}")
        return v

    @field_validator("rate_limit_max", "rate_limit_window_ms", "rate_limit_max_clients")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Rate limit settings must be positive")
        return v

    @property
    def development(self) -> bool:
        return self.app_env.lower() == "development"

    @property
    def effective_ses_region(self) -> str:
        return self.ses_region or self.aws_region

    @property
    def effective_s3_region(self) -> str:
        return self.s3_region or self.aws_region

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from os.environ, leaving unset values at their defaults."""
        env = {
            "app_env": os.getenv("APP_ENV"),
            "log_level": os.getenv("LOG_LEVEL"),
            "log_format": os.getenv("LOG_FORMAT"),
            "aws_region": os.getenv("AWS_REGION"),
            "ses_region": os.getenv("SES_REGION"),
            "s3_region": os.getenv("S3_REGION"),
            "submissions_table": os.getenv("DYNAMODB_TABLE"),
            "projects_table": os.getenv("PROJECTS_TABLE"),
            "projects_category_index": os.getenv("PROJECTS_CATEGORY_INDEX"),
            "projects_cache_seconds": os.getenv("PROJECTS_CACHE_SECONDS"),
            "resume_bucket": os.getenv("RESUME_BUCKET"),
            "from_email": os.getenv("FROM_EMAIL"),
            "to_email": os.getenv("TO_EMAIL"),
            "site_name": os.getenv("SITE_NAME"),
            "admin_api_key": os.getenv("ADMIN_API_KEY"),
            "trusted_image_prefix": os.getenv("TRUSTED_IMAGE_PREFIX"),
            "rate_limit_max": os.getenv("RATE_LIMIT_MAX"),
            "rate_limit_window_ms": os.getenv("RATE_LIMIT_WINDOW_MS"),
            "rate_limit_max_clients": os.getenv("RATE_LIMIT_MAX_CLIENTS"),
            "rate_limit_table": os.getenv("RATE_LIMIT_TABLE"),
            "email_failure_policy": os.getenv("EMAIL_FAILURE_POLICY"),
            "idempotency_ttl_seconds": os.getenv("IDEMPOTENCY_TTL_SECONDS"),
        }
        values = {key: value for key, value in env.items() if value not in (None, "")}
        if os.getenv("CORS_ORIGINS"):
            values["cors_origins"] = _split_csv(os.getenv("CORS_ORIGINS"))
        return cls(**values)


@lru_cache()
def get_settings() -> Settings:
    """Settings dependency, parsed once per process."""
    settings = Settings.from_env()
    logger.debug(f"Loaded settings for environment '{settings.app_env}'")
    return settings
