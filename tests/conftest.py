"""Pytest configuration and fixtures for the review gate tests."""

import os
from typing import Callable, Generator, List

import httpx
import pytest

from review_gate.config.settings import Settings, reset_settings
from review_gate.models.auth_models import ReviewerAuth
from review_gate.services.github_service import GitHubAuthorizationService
from review_gate.utils.auth_cache import AuthorizationCache
from review_gate.utils.circuit_breaker import HostCircuitBreaker

GITHUB_API_URL = "https://api.github.test"


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch) -> Generator[None, None, None]:
    """Isolate every test from REVIEW_GATE_* variables and cached settings."""
    for key in list(os.environ):
        if key.startswith("REVIEW_GATE_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a fake GitHub API."""
    return Settings(github_api_url=GITHUB_API_URL)


# ============================================================================
# Authorization Fixtures
# ============================================================================


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def auth_cache(fake_clock: FakeClock) -> AuthorizationCache:
    return AuthorizationCache(ttl_seconds=300, max_entries=3, clock=fake_clock)


@pytest.fixture
def verified_auth() -> ReviewerAuth:
    """Verified reviewer with write access."""
    return ReviewerAuth(is_verified=True, login="reviewer", has_write_access=True)


@pytest.fixture
def read_only_auth() -> ReviewerAuth:
    """Verified reviewer without write access."""
    return ReviewerAuth(is_verified=True, login="reader", has_write_access=False)


@pytest.fixture
def unverified_auth() -> ReviewerAuth:
    return ReviewerAuth.unverified("stranger")


class RecordingHandler:
    """MockTransport handler that records requests and replays a response factory."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)


def _permission_response(
    permission: str, login: str
) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(
        200, json={"permission": permission, "user": {"login": login}}
    )


@pytest.fixture
def permission_response():
    """Factory for a 200 collaborator permission response."""
    return _permission_response


@pytest.fixture
def make_service(settings: Settings, auth_cache: AuthorizationCache):
    """Factory building a GitHubAuthorizationService backed by a MockTransport."""
    created: List[GitHubAuthorizationService] = []

    def _make(
        respond: Callable[[httpx.Request], httpx.Response],
        cache: AuthorizationCache = None,
        failure_threshold: int = 5,
    ):
        handler = RecordingHandler(respond)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        service = GitHubAuthorizationService(
            cache=cache or auth_cache,
            client=client,
            circuit_breaker=HostCircuitBreaker(
                failure_threshold=failure_threshold, recovery_timeout=60
            ),
            settings=settings,
        )
        created.append(service)
        return service, handler

    yield _make

    for service in created:
        service.cache.clear()
