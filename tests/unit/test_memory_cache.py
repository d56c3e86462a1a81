"""MemoryCache: TTL expiry on an injected clock, prefix invalidation, read-through."""

from unittest.mock import AsyncMock

import pytest

from app.domain.exceptions import ValidationException
from app.infrastructure.cache import MemoryCache, build_key, prefix_of, profile_email_key


async def test_get_returns_value_until_ttl_expires(cache: MemoryCache, clock) -> None:
    await cache.set("cohorts:current", ["c1"], ttl=60)
    assert await cache.get("cohorts:current") == ["c1"]
    clock.advance(59.9)
    assert await cache.get("cohorts:current") == ["c1"]
    clock.advance(0.1)
    assert await cache.get("cohorts:current") is None


async def test_set_uses_default_ttl(clock) -> None:
    cache = MemoryCache(clock=clock, default_ttl=10)
    await cache.set("k", 1)
    clock.advance(10)
    assert await cache.get("k") is None


async def test_non_positive_ttl_is_not_stored(cache: MemoryCache) -> None:
    await cache.set("k", 1, ttl=0)
    assert await cache.get("k") is None


async def test_get_or_fetch_fetches_once_within_ttl(cache: MemoryCache, clock) -> None:
    fetch = AsyncMock(return_value={"id": "rec1"})
    assert await cache.get_or_fetch("teams:id:rec1", fetch, ttl=30) == {"id": "rec1"}
    assert await cache.get_or_fetch("teams:id:rec1", fetch, ttl=30) == {"id": "rec1"}
    assert fetch.await_count == 1
    clock.advance(31)
    await cache.get_or_fetch("teams:id:rec1", fetch, ttl=30)
    assert fetch.await_count == 2


async def test_get_or_fetch_caches_none(cache: MemoryCache) -> None:
    """A lookup that found nothing is remembered for its TTL."""
    fetch = AsyncMock(return_value=None)
    assert await cache.get_or_fetch("profile:email:x@example.com", fetch) is None
    assert await cache.get_or_fetch("profile:email:x@example.com", fetch) is None
    assert fetch.await_count == 1


async def test_get_or_fetch_does_not_store_failures(cache: MemoryCache) -> None:
    fetch = AsyncMock(side_effect=[RuntimeError("store down"), "ok"])
    with pytest.raises(RuntimeError):
        await cache.get_or_fetch("k", fetch)
    assert await cache.get_or_fetch("k", fetch) == "ok"


async def test_delete_prefix_only_removes_matching_keys(cache: MemoryCache) -> None:
    await cache.set(build_key("teams", "id", "rec1"), 1)
    await cache.set(build_key("teams", "user", "rec2"), 2)
    await cache.set(build_key("teamsx", "id", "rec3"), 3)
    removed = await cache.delete_prefix(prefix_of("teams"))
    assert removed == 2
    assert await cache.get("teamsx:id:rec3") == 3


async def test_stats_counts_expired_entries(cache: MemoryCache, clock) -> None:
    await cache.set("a", 1, ttl=5)
    await cache.set("b", 2, ttl=50)
    clock.advance(10)
    assert cache.stats() == {"total": 2, "active": 1, "expired": 1}
    cache.clear()
    assert cache.stats()["total"] == 0


def test_build_key_rejects_separator_and_empty_components() -> None:
    with pytest.raises(ValidationException):
        build_key("teams", "a:b")
    with pytest.raises(ValidationException):
        build_key("teams", "")


def test_profile_email_key_is_case_insensitive() -> None:
    assert profile_email_key(" Ada@Example.com ") == profile_email_key("ada@example.com")
    assert profile_email_key("ada@example.com") == "profile:email:ada@example.com"
