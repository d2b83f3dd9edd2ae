"""
In-memory cache for reviewer authorization lookups
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from urllib.parse import quote

from review_gate.models.auth_models import ReviewerAuth

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60
DEFAULT_MAX_ENTRIES = 1000


def build_cache_key(owner: str, repo: str, login: str) -> str:
    """Build a cache key from URL-escaped owner, repo and login"""
    return "/".join(quote(part, safe="") for part in (owner, repo, login))


@dataclass(frozen=True)
class CacheEntry:
    result: ReviewerAuth
    timestamp: float


class AuthorizationCache:
    """
    Bounded, time-expiring store of reviewer authorization results.

    Expiry is checked lazily on read. When full, the oldest inserted entry is
    evicted before a new key is added (insertion order, not LRU: reads do not
    refresh an entry's position).
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")

        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[ReviewerAuth]:
        """Return the cached result, or None if missing or expired"""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.timestamp > self.ttl_seconds:
            del self._entries[key]
            logger.debug(f"Authorization cache entry expired: {key}")
            return None

        return entry.result

    def put(self, key: str, result: ReviewerAuth) -> None:
        """Store a result, evicting the oldest entry when at capacity"""
        if key in self._entries:
            # Re-inserting moves the key to the newest position
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            oldest_key = next(iter(self._entries))
            del self._entries[oldest_key]
            logger.debug(f"Authorization cache full, evicted {oldest_key}")

        self._entries[key] = CacheEntry(result=result, timestamp=self._clock())

    def clear(self) -> None:
        """Remove all entries"""
        self._entries = {}
        logger.debug("Authorization cache cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None
