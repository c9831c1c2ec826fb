"""Pytest configuration and fixtures for Facility Reports tests.

Every test gets a fresh in-memory document store with three signed-in
principals: an admin, a technician and a plain user.
"""

import itertools
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from facility_reports.api.app import create_app
from facility_reports.api.auth import create_id_token
from facility_reports.config import Settings
from facility_reports.models import AuthSession, NewReport, Principal, Report
from facility_reports.services import (
    IdentityResolver,
    ReportLifecycleService,
    ReportQueryService,
    ReportStatsService,
    RoleRegistry,
    UserAdminService,
)
from facility_reports.services import identity
from facility_reports.services import lifecycle as lifecycle_module
from facility_reports.services import users as users_module
from facility_reports.store import InMemoryDocumentStore, ReportStore, UserStore

ADMIN_EMAIL = "a@org.com"
TECHNICIAN_EMAIL = "tech1@org.com"
TEST_SECRET = "test-id-token-secret"


# ── Clock ────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def ticking_clock(monkeypatch):
    """Each utcnow() call is one second after the previous one."""
    ticks = itertools.count()
    start = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)

    def fake_utcnow():
        return start + timedelta(seconds=next(ticks))

    for module in (identity, lifecycle_module, users_module):
        monkeypatch.setattr(module, "utcnow", fake_utcnow)


# ── Store & services ─────────────────────────────────────────────

@pytest.fixture
def documents() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def report_repo(documents) -> ReportStore:
    return ReportStore(documents)


@pytest.fixture
def user_repo(documents) -> UserStore:
    return UserStore(documents)


@pytest.fixture
def registry() -> RoleRegistry:
    return RoleRegistry(
        admin_emails=[ADMIN_EMAIL],
        technician_emails=[TECHNICIAN_EMAIL],
    )


@pytest.fixture
def resolver(user_repo, registry) -> IdentityResolver:
    return IdentityResolver(user_repo, registry)


@pytest.fixture
def lifecycle(report_repo, user_repo) -> ReportLifecycleService:
    return ReportLifecycleService(report_repo, user_repo)


@pytest.fixture
def queries(report_repo) -> ReportQueryService:
    return ReportQueryService(report_repo)


@pytest.fixture
def stats(report_repo) -> ReportStatsService:
    return ReportStatsService(report_repo)


@pytest.fixture
def user_admin(user_repo) -> UserAdminService:
    return UserAdminService(user_repo)


# ── Sessions ─────────────────────────────────────────────────────

def make_principal(uid: str, email: str, name: str = None) -> Principal:
    return Principal(id=uid, email=email, display_name=name)


@pytest_asyncio.fixture
async def admin_session(resolver) -> AuthSession:
    return await resolver.resolve_session(
        make_principal("admin1", ADMIN_EMAIL, "Admin")
    )


@pytest_asyncio.fixture
async def tech_session(resolver) -> AuthSession:
    return await resolver.resolve_session(
        make_principal("tech1", TECHNICIAN_EMAIL, "Somchai")
    )


@pytest_asyncio.fixture
async def user_session(resolver) -> AuthSession:
    return await resolver.resolve_session(
        make_principal("user1", "reporter@org.com", "Reporter")
    )


# ── Test data ────────────────────────────────────────────────────

def new_report(**overrides) -> NewReport:
    data = {
        "location": "Room 101",
        "problem_type": "electrical",
        "problem_details": "Ceiling light flickers",
        "images": ["data:image/png;base64,iVBORw0KGgo="],
    }
    data.update(overrides)
    return NewReport(**data)


@pytest_asyncio.fixture
async def report(lifecycle, user_session) -> Report:
    return await lifecycle.create_report(user_session, new_report())


# ── HTTP client ──────────────────────────────────────────────────

def make_settings(**overrides) -> Settings:
    values = {
        "admin_emails": [ADMIN_EMAIL],
        "technician_emails": [TECHNICIAN_EMAIL],
        "id_token_secret": TEST_SECRET,
        "log_level": "DEBUG",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def client(settings, documents) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(settings=settings, documents=documents)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def principal_headers(uid: str, email: str, name: str = None, **token_options) -> dict:
    """Headers carrying a signed ID token, as the identity provider issues it."""
    return bearer(create_id_token(make_settings(), uid, email, name=name, **token_options))


ADMIN_HEADERS = principal_headers("admin1", ADMIN_EMAIL, "Admin")
TECH_HEADERS = principal_headers("tech1", TECHNICIAN_EMAIL, "Somchai")
USER_HEADERS = principal_headers("user1", "reporter@org.com", "Reporter")


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
