"""
Utility modules for the review gate
"""

from .auth_cache import AuthorizationCache, build_cache_key
from .text import count_lines, truncate_text

__all__ = ["AuthorizationCache", "build_cache_key", "count_lines", "truncate_text"]
