# dependencies.py
"""Centralized dependencies for the FastAPI application.

Collaborators are built from settings here so tests can swap any of them
through ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache

from fastapi import Depends, Request

from . import aws
from .config import Settings, get_settings
from .exceptions import ProjectsMisconfigured, RateLimitExceeded
from .rate_limit import DynamoDBWindowStore, InMemoryWindowStore, SlidingWindowRateLimiter, now_ms
from .services.email import Mailer
from .services.idempotency import IdempotencyCache
from .services.projects import ProjectService
from .services.storage import ResumeStorage
from .services.submissions import SubmissionService

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def get_client_id(request: Request) -> str:
    """Source IP of the caller; Mangum fills it from the API Gateway request context."""
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


@lru_cache()
def get_rate_limiter() -> SlidingWindowRateLimiter:
    """Process-wide limiter. Shared through DynamoDB when RATE_LIMIT_TABLE is set."""
    settings = get_settings()
    if settings.rate_limit_table:
        logger.info(f"Using DynamoDB rate limit store {settings.rate_limit_table}")
        table = aws.dynamodb_table(settings.rate_limit_table, settings.aws_region, "RATE_LIMIT_TABLE")
        store = DynamoDBWindowStore(table)
    else:
        store = InMemoryWindowStore(max_clients=settings.rate_limit_max_clients)
    return SlidingWindowRateLimiter(
        store=store,
        max_per_window=settings.rate_limit_max,
        window_ms=settings.rate_limit_window_ms,
    )


def enforce_rate_limit(
    client_id: str = Depends(get_client_id),
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
) -> str:
    """Raise RateLimitExceeded for a client over its quota; otherwise return its id."""
    if not limiter.allow(client_id):
        raise RateLimitExceeded()
    return client_id


@lru_cache()
def get_idempotency_cache() -> IdempotencyCache:
    settings = get_settings()
    return IdempotencyCache(ttl_ms=settings.idempotency_ttl_seconds * 1000, clock=now_ms)


def get_submissions_table(settings: Settings = Depends(get_settings)):
    return aws.dynamodb_table(settings.submissions_table, settings.aws_region, "DYNAMODB_TABLE")


def get_projects_table(settings: Settings = Depends(get_settings)):
    return aws.dynamodb_table(
        settings.projects_table, settings.aws_region, "PROJECTS_TABLE", error=ProjectsMisconfigured
    )


def get_resume_storage(settings: Settings = Depends(get_settings)) -> ResumeStorage:
    region = settings.effective_s3_region
    return ResumeStorage(aws.s3_client(region), settings.resume_bucket, region)


def get_mailer(settings: Settings = Depends(get_settings)) -> Mailer:
    return Mailer(aws.ses_client(settings.effective_ses_region))


def get_submission_service(
    table=Depends(get_submissions_table),
    storage: ResumeStorage = Depends(get_resume_storage),
    mailer: Mailer = Depends(get_mailer),
    idempotency: IdempotencyCache = Depends(get_idempotency_cache),
    settings: Settings = Depends(get_settings),
) -> SubmissionService:
    return SubmissionService(table, storage, mailer, settings, idempotency=idempotency)


def get_listing_service(
    table=Depends(get_submissions_table),
    settings: Settings = Depends(get_settings),
) -> SubmissionService:
    """Read-only use of the submissions table; no S3 or SES clients are built."""
    return SubmissionService(table, storage=None, mailer=None, settings=settings)


def get_project_service(
    table=Depends(get_projects_table),
    settings: Settings = Depends(get_settings),
) -> ProjectService:
    return ProjectService(
        table,
        category_index=settings.projects_category_index,
        trusted_image_prefix=settings.trusted_image_prefix,
    )
