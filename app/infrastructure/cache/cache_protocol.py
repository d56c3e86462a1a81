"""Cache protocol for the repository layer (DIP). Implementation: MemoryCache."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class CacheProtocol(Protocol):
    """Protocol for read-through caches used by repositories."""

    async def get(self, key: str) -> Any:
        """Return cached value or None (missing or expired)."""
        ...

    async def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store value with optional TTL in seconds."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key from cache."""
        ...

    async def delete_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix; return how many were removed."""
        ...

    async def get_or_fetch(
        self, key: str, fetch: Callable[[], Awaitable[T]], ttl: float | None = None
    ) -> T:
        """Return the cached value for key, or await fetch() and cache its result."""
        ...
