"""Shared plumbing for Airtable repositories.

A repository gets the record store client and the cache injected; it
never reaches for module-level singletons. fetch_* methods always hit the
store, get_* methods go through the cache, writes invalidate their prefixes.
"""

import logging
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import httpx

from app.core.constants import RECORD_ID_BATCH_SIZE
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.airtable import formulas
from app.infrastructure.airtable._rest_client import (
    AirtableAPIError,
    AirtableRESTClient,
    StoreRecord,
    TableReference,
)
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import prefix_of
from app.infrastructure.exceptions import RecordStoreException

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AirtableRepository:
    """Base class: table access, error wrapping, cache helpers.

    Subclasses set table_name (their primary table) and cache_prefix.
    """

    table_name: str = ""
    cache_prefix: str = ""

    def __init__(
        self,
        store: AirtableRESTClient,
        cache: CacheProtocol,
        ttl: float = 300,
    ) -> None:
        """Initialize repository.

        Args:
            store: Record store client (table handles are memoized there).
            cache: Read-through cache shared by all repositories.
            ttl: Seconds a cached read stays valid.
        """
        self.store = store
        self.cache = cache
        self.ttl = ttl

    def _table(self, name: str | None = None) -> TableReference:
        return self.store.table(name or self.table_name)

    @contextmanager
    def _store_errors(
        self,
        operation: str,
        *,
        missing: tuple[str, str] | None = None,
        **context: Any,
    ) -> Iterator[None]:
        """Wrap client/transport failures in RecordStoreException with context.

        missing names the (entity, record id) a write targets; a store 404
        for it becomes ResourceNotFoundException instead of a store failure.
        """
        try:
            yield
        except (AirtableAPIError, httpx.HTTPError) as e:
            if missing is not None and isinstance(e, AirtableAPIError) and e.status_code == 404:
                logger.info("%s %s not found while %s", missing[0], missing[1], operation)
                raise ResourceNotFoundException(*missing) from e
            logger.error("Record store error while %s %s: %s", operation, context, e)
            raise RecordStoreException.from_error(operation, e, **context) from e

    async def _cached(
        self, key: str, fetch: Callable[[], Awaitable[T]], ttl: float | None = None
    ) -> T:
        return await self.cache.get_or_fetch(key, fetch, self.ttl if ttl is None else ttl)

    async def _invalidate(self, *prefixes: str) -> None:
        for prefix in prefixes or (self.cache_prefix,):
            await self.cache.delete_prefix(prefix_of(prefix))

    async def _on_after_write(self) -> None:
        """Override in subclasses that must invalidate more than cache_prefix."""
        await self._invalidate()

    async def _select_by_ids(
        self, record_ids: list[str], table_name: str | None = None
    ) -> list[StoreRecord]:
        """Records with the given ids, fetched RECORD_ID_BATCH_SIZE ids per select.

        Call inside _store_errors; results keep batch order.
        """
        records: list[StoreRecord] = []
        for start in range(0, len(record_ids), RECORD_ID_BATCH_SIZE):
            batch = record_ids[start : start + RECORD_ID_BATCH_SIZE]
            records.extend(await self._table(table_name).select(formula=formulas.record_id_in(batch)))
        return records

    @staticmethod
    def _require(value: Any, field: str, message: str | None = None) -> None:
        """Raise ValidationException before any I/O when a required value is missing."""
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationException(message or f"{field} is required", field=field)
