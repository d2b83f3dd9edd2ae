"""
GitHub reviewer authorization service
"""

import logging
from typing import Dict, Optional
from urllib.parse import quote

import httpx
from aiocircuitbreaker import CircuitBreakerError
from pydantic import ValidationError

from review_gate.config.settings import Settings, get_settings
from review_gate.models.auth_models import (
    WRITE_PERMISSIONS,
    CollaboratorPermission,
    PermissionLookupFailure,
    PermissionLookupNotFound,
    PermissionLookupResult,
    PermissionLookupSuccess,
    ReviewerAuth,
)
from review_gate.utils.auth_cache import AuthorizationCache, build_cache_key
from review_gate.utils.circuit_breaker import HostCircuitBreaker
from review_gate.utils.text import truncate_text

logger = logging.getLogger(__name__)

MAX_LOGGED_BODY = 200


class GitHubAuthorizationService:
    """
    Verifies reviewers against GitHub's collaborator permission endpoint.

    Every ambiguous or failed outcome yields an unverified ReviewerAuth.
    Successful and not-found lookups are cached; failures are not, so the
    next call goes back to the network.
    """

    def __init__(
        self,
        cache: Optional[AuthorizationCache] = None,
        client: Optional[httpx.AsyncClient] = None,
        circuit_breaker: Optional[HostCircuitBreaker] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.github_api_url
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.settings.github_user_agent,
        }
        self.cache = cache or AuthorizationCache(
            ttl_seconds=self.settings.auth_cache_ttl_seconds,
            max_entries=self.settings.auth_cache_max_entries,
        )
        self.circuit_breaker = circuit_breaker or HostCircuitBreaker(
            failure_threshold=self.settings.circuit_breaker_failure_threshold,
            recovery_timeout=self.settings.circuit_breaker_timeout,
        )

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.settings.request_timeout,
            limits=httpx.Limits(
                max_keepalive_connections=self.settings.max_keepalive_connections,
                max_connections=self.settings.max_connections,
                keepalive_expiry=self.settings.keepalive_expiry,
            ),
        )

    @staticmethod
    def permission_path(owner: str, repo: str, login: str) -> str:
        segments = (quote(part, safe="") for part in (owner, repo, login))
        return "/repos/{}/{}/collaborators/{}/permission".format(*segments)

    async def _send(self, path: str, headers: Dict[str, str]) -> httpx.Response:
        return await self.client.get(f"{self.base_url}{path}", headers=headers)

    async def _lookup_permission(
        self, login: str, owner: str, repo: str, credential: str
    ) -> PermissionLookupResult:
        """Query the permission endpoint and map every outcome to a tagged result"""
        headers = {**self.headers, "Authorization": f"Bearer {credential}"}
        path = self.permission_path(owner, repo, login)

        try:
            response = await self.circuit_breaker.call(self._send, path, headers)
        except CircuitBreakerError:
            return PermissionLookupFailure(reason="circuit breaker open")
        except httpx.HTTPError as e:
            # Exception text can echo request headers, so only the type is kept
            return PermissionLookupFailure(reason=type(e).__name__)
        except Exception as e:
            return PermissionLookupFailure(reason=f"unexpected {type(e).__name__}")

        if response.status_code == 404:
            return PermissionLookupNotFound()

        if not response.is_success:
            return PermissionLookupFailure(
                reason=truncate_text(
                    f"{response.reason_phrase} {response.text}".strip(), MAX_LOGGED_BODY
                ),
                status_code=response.status_code,
            )

        try:
            payload = CollaboratorPermission.model_validate_json(response.content)
        except ValidationError as e:
            return PermissionLookupFailure(
                reason=f"malformed permission response ({e.error_count()} errors)",
                status_code=response.status_code,
            )

        return PermissionLookupSuccess(
            permission=payload.permission, login=payload.user.login
        )

    async def verify(
        self, login: str, owner: str, repo: str, credential: str
    ) -> ReviewerAuth:
        """
        Verify a reviewer's identity and write access on a repository.

        Args:
            login: Reviewer's GitHub login
            owner: Repository owner
            repo: Repository name
            credential: GitHub token used for the lookup. Never stored,
                logged or returned.

        Returns:
            ReviewerAuth, unverified on any failure
        """
        key = build_cache_key(owner, repo, login)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(
                f"Authorization cache hit for {login} on {owner}/{repo}",
                extra={"operation": "verify_reviewer_cache_hit", "login": login},
            )
            return cached

        outcome = await self._lookup_permission(login, owner, repo, credential)

        if isinstance(outcome, PermissionLookupSuccess):
            is_verified = outcome.login.lower() == login.lower()
            if not is_verified:
                logger.warning(
                    f"Permission response for {owner}/{repo} returned login "
                    f"{outcome.login!r}, expected {login!r}",
                    extra={
                        "operation": "verify_reviewer",
                        "login": login,
                        "repository": f"{owner}/{repo}",
                        "error_type": "login_mismatch",
                    },
                )
            result = ReviewerAuth(
                is_verified=is_verified,
                login=outcome.login if is_verified else login,
                has_write_access=outcome.permission in WRITE_PERMISSIONS,
            )
            self.cache.put(key, result)
            logger.info(
                f"Verified reviewer {login} on {owner}/{repo}: "
                f"permission={outcome.permission}",
                extra={
                    "operation": "verify_reviewer_success",
                    "login": login,
                    "repository": f"{owner}/{repo}",
                    "is_verified": result.is_verified,
                    "has_write_access": result.has_write_access,
                },
            )
            return result

        if isinstance(outcome, PermissionLookupNotFound):
            result = ReviewerAuth.unverified(login)
            self.cache.put(key, result)
            logger.info(
                f"Reviewer {login} is not a collaborator on {owner}/{repo}",
                extra={
                    "operation": "verify_reviewer_not_found",
                    "login": login,
                    "repository": f"{owner}/{repo}",
                },
            )
            return result

        if isinstance(outcome, PermissionLookupFailure):
            logger.error(
                f"Failed to verify reviewer {login} on {owner}/{repo}: {outcome.reason}",
                extra={
                    "operation": "verify_reviewer",
                    "login": login,
                    "repository": f"{owner}/{repo}",
                    "error_type": "lookup_failure",
                    "status_code": outcome.status_code,
                },
            )
            return ReviewerAuth.unverified(login)

        raise TypeError(f"Unhandled permission lookup outcome: {outcome!r}")

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit with proper cleanup"""
        await self.close()

    async def close(self):
        """Close the HTTP client if this service created it"""
        if self._owns_client and not self.client.is_closed:
            await self.client.aclose()
            logger.info("GitHub service HTTP client closed")
