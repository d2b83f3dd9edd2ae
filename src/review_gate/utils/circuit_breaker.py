"""
Circuit breaker for calls to the GitHub API
"""

import logging
from typing import Any, Callable, Optional, Type

import httpx
from aiocircuitbreaker import CircuitBreaker, CircuitBreakerError

from review_gate.config.settings import get_settings

logger = logging.getLogger(__name__)


class HostCircuitBreaker:
    """Circuit breaker that opens after repeated transport failures"""

    def __init__(
        self,
        failure_threshold: Optional[int] = None,
        recovery_timeout: Optional[int] = None,
        expected_exceptions: Optional[tuple[Type[Exception], ...]] = None,
    ):
        """
        Initialize circuit breaker for the GitHub API

        Args:
            failure_threshold: Number of failures before opening circuit
            recovery_timeout: Seconds to wait before attempting recovery
            expected_exceptions: Tuple of exceptions that count as failures
        """
        settings = get_settings()

        self.failure_threshold = (
            failure_threshold or settings.circuit_breaker_failure_threshold
        )
        self.recovery_timeout = recovery_timeout or settings.circuit_breaker_timeout

        if expected_exceptions is None:
            expected_exceptions = (httpx.TransportError,)

        self.breaker = CircuitBreaker(
            failure_threshold=self.failure_threshold,
            recovery_timeout=self.recovery_timeout,
            expected_exception=expected_exceptions,
        )

        logger.info(
            f"Circuit breaker initialized: "
            f"failure_threshold={self.failure_threshold}, "
            f"recovery_timeout={self.recovery_timeout}s"
        )

    async def call(self, func: Callable, *args: Any, **kwargs: Any) -> Any:
        """
        Call an async function with circuit breaker protection

        Raises:
            CircuitBreakerError: When the circuit is open
            Exception: Original exception if the call itself failed
        """
        try:
            return await self.breaker(func)(*args, **kwargs)
        except CircuitBreakerError:
            logger.error(
                f"Circuit breaker is OPEN after {self.failure_threshold} failures. "
                f"Will retry in {self.recovery_timeout}s"
            )
            raise

    @property
    def failure_count(self) -> int:
        """Get current failure count"""
        return getattr(self.breaker, "_failure_count", 0)
