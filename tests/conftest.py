# tests/conftest.py
"""Shared fixtures.

Every AWS collaborator is replaced through ``app.dependency_overrides``, so
no test touches the network.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from portfolio_api import dependencies
from portfolio_api.config import Settings, get_settings
from portfolio_api.main import app
from portfolio_api.rate_limit import SlidingWindowRateLimiter
from portfolio_api.services.email import Mailer
from portfolio_api.services.idempotency import IdempotencyCache
from portfolio_api.services.storage import ResumeStorage

ADMIN_KEY = "test-admin-key"


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int):
        self.now += ms


class FakeTable:
    """Enough of a DynamoDB Table for put/scan round trips."""

    def __init__(self, items=None):
        self.items = list(items or [])
        self.put_calls = 0

    def put_item(self, Item):
        self.put_calls += 1
        self.items.append(dict(Item))
        return {}

    def scan(self, **kwargs):
        return {"Items": [dict(item) for item in self.items]}


@pytest.fixture
def settings():
    return Settings(
        submissions_table="submissions",
        projects_table="projects",
        resume_bucket="resume-bucket",
        from_email="site@example.com",
        to_email="owner@example.com",
        site_name="Example Studio",
        admin_api_key=ADMIN_KEY,
        log_format="text",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return SlidingWindowRateLimiter(clock=clock)


@pytest.fixture
def submissions_table():
    return FakeTable()


@pytest.fixture
def projects_table():
    table = MagicMock()
    table.scan.return_value = {"Items": []}
    table.query.return_value = {"Items": []}
    return table


@pytest.fixture
def s3():
    return MagicMock()


@pytest.fixture
def ses():
    client = MagicMock()
    client.send_email.return_value = {"MessageId": "msg-1"}
    return client


@pytest.fixture
def client(settings, clock, limiter, submissions_table, projects_table, s3, ses):
    """TestClient with fake collaborators and a fresh limiter."""
    idempotency = IdempotencyCache(ttl_ms=600_000, clock=clock)
    overrides = {
        get_settings: lambda: settings,
        dependencies.get_rate_limiter: lambda: limiter,
        dependencies.get_idempotency_cache: lambda: idempotency,
        dependencies.get_submissions_table: lambda: submissions_table,
        dependencies.get_projects_table: lambda: projects_table,
        dependencies.get_resume_storage: lambda: ResumeStorage(s3, settings.resume_bucket, "us-east-1"),
        dependencies.get_mailer: lambda: Mailer(ses),
    }
    app.dependency_overrides.update(overrides)
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"x-api-key": ADMIN_KEY}


@pytest.fixture
def valid_submission():
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "message": "I'd like a new website.",
    }
