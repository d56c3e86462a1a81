"""Cache: in-process TTL cache and cache key utilities.

The cache is created once in the app lifespan and injected into
repositories; key format lives in keys.py.
"""

from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import (
    build_key,
    prefix_of,
    profile_auth0_key,
    profile_email_key,
)
from app.infrastructure.cache.memory_cache import MemoryCache

__all__ = [
    "CacheProtocol",
    "MemoryCache",
    "build_key",
    "prefix_of",
    "profile_auth0_key",
    "profile_email_key",
]
