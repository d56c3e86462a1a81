"""Thin Airtable REST API client (no vendor SDK).

Resolves logical table names to configured table ids and exposes
find/select/create/update/delete per table. All HTTP calls use
httpx.AsyncClient so they do not block the event loop. Rate limiting (429)
and 5xx responses are retried with exponential backoff and jitter;
every other error status is raised immediately.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Sequence
from typing import Any
from urllib.parse import quote

import httpx

from app.domain.exceptions import TableNotConfiguredException

logger = logging.getLogger(__name__)

_BASE = "https://api.airtable.com/v0"
_MAX_PAGE_SIZE = 100
_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class AirtableAPIError(Exception):
    """Raised for a non-2xx Airtable response (after retries, if retryable)."""

    def __init__(
        self, status_code: int, message: str, error_type: str | None = None
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        super().__init__(f"Airtable API error {status_code}: {message}")


def _parse_error(resp: httpx.Response) -> AirtableAPIError:
    """Build AirtableAPIError from an error body ({"error": {"type", "message"}} or {"error": "TYPE"})."""
    error_type: str | None = None
    message = resp.reason_phrase or "request failed"
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            error_type = err.get("type")
            message = err.get("message") or error_type or message
        elif isinstance(err, str):
            error_type = err
            message = err
    return AirtableAPIError(resp.status_code, message, error_type)


class StoreRecord:
    """One raw record (id + fields as returned by the store)."""

    __slots__ = ("id", "fields", "created_time")

    def __init__(
        self, id_: str, fields: dict[str, Any], created_time: str | None = None
    ) -> None:
        self.id = id_
        self.fields = fields
        self.created_time = created_time

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "StoreRecord":
        return cls(
            payload.get("id", ""),
            payload.get("fields") or {},
            payload.get("createdTime"),
        )

    def __repr__(self) -> str:
        return f"StoreRecord(id={self.id!r}, fields={self.fields!r})"


class TableReference:
    """Handle for one table; all operations address it by table id."""

    def __init__(self, client: "AirtableRESTClient", name: str, table_id: str):
        self._client = client
        self.name = name
        self.table_id = table_id

    async def find(self, record_id: str) -> StoreRecord | None:
        """Fetch one record by id; returns None if it does not exist (404)."""
        out = await self._client.request(
            "GET", self.table_id, record_id, not_found_ok=True
        )
        if out is None:
            return None
        return StoreRecord.from_api(out)

    async def select(
        self,
        *,
        formula: str | None = None,
        sort: Sequence[tuple[str, str]] | None = None,
        max_records: int | None = None,
        page_size: int | None = None,
        fields: Sequence[str] | None = None,
        view: str | None = None,
    ) -> list[StoreRecord]:
        """List records matching formula, following offset pagination.

        Args:
            formula: filterByFormula expression (see formulas.py).
            sort: (field, "asc" | "desc") pairs, applied in order.
            max_records: Stop after this many records in total.
            page_size: Records per page (capped at 100).
            fields: Only return these columns.
            view: Optional view name or id.

        Returns:
            Records in store order; [] when nothing matches.
        """
        params: list[tuple[str, str]] = []
        if formula:
            params.append(("filterByFormula", formula))
        for i, (field, direction) in enumerate(sort or ()):
            params.append((f"sort[{i}][field]", field))
            params.append((f"sort[{i}][direction]", direction))
        if max_records is not None:
            params.append(("maxRecords", str(max_records)))
        params.append(("pageSize", str(min(page_size or _MAX_PAGE_SIZE, _MAX_PAGE_SIZE))))
        for name in fields or ():
            params.append(("fields[]", name))
        if view:
            params.append(("view", view))

        records: list[StoreRecord] = []
        offset: str | None = None
        while True:
            page_params = params + ([("offset", offset)] if offset else [])
            out = await self._client.request("GET", self.table_id, params=page_params)
            out = out or {}
            records.extend(StoreRecord.from_api(r) for r in out.get("records", []))
            offset = out.get("offset")
            if not offset or (max_records is not None and len(records) >= max_records):
                break
        if max_records is not None:
            return records[:max_records]
        return records

    async def create(self, fields: dict[str, Any]) -> StoreRecord:
        """Create a record and return it as stored."""
        out = await self._client.request("POST", self.table_id, body={"fields": fields})
        return StoreRecord.from_api(out or {})

    async def update(self, record_id: str, fields: dict[str, Any]) -> StoreRecord:
        """Patch only the given fields of a record (other fields untouched)."""
        out = await self._client.request(
            "PATCH", self.table_id, record_id, body={"fields": fields}
        )
        return StoreRecord.from_api(out or {})

    async def delete(self, record_id: str) -> str:
        """Delete a record; returns the deleted record id."""
        out = await self._client.request("DELETE", self.table_id, record_id)
        return (out or {}).get("id", record_id)


class AirtableRESTClient:
    """Lightweight Airtable client using the REST API.

    Table handles are memoized per logical name for the client's lifetime.
    """

    def __init__(
        self,
        api_key: str,
        base_id: str,
        table_ids: dict[str, str],
        *,
        http_client: httpx.AsyncClient | None = None,
        api_url: str = _BASE,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_seconds: float = 0.5,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._base_url = f"{api_url.rstrip('/')}/{base_id}"
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self._table_ids = dict(table_ids)
        self._tables: dict[str, TableReference] = {}
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self._max_retries = max_retries
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    def table(self, name: str) -> TableReference:
        """Return the memoized handle for a logical table name.

        Raises:
            TableNotConfiguredException: No table id configured for name.
        """
        ref = self._tables.get(name)
        if ref is not None:
            return ref
        table_id = self._table_ids.get(name)
        if not table_id:
            raise TableNotConfiguredException(name)
        ref = TableReference(self, name, table_id)
        self._tables[name] = ref
        return ref

    def _retry_delay(self, attempt: int, retry_after: str | None = None) -> float:
        if retry_after:
            try:
                return max(float(retry_after), 0.0)
            except ValueError:
                pass
        base = self._backoff_seconds * (2**attempt)
        return base + random.uniform(0, self._backoff_seconds)

    async def request(
        self,
        method: str,
        table_id: str,
        record_id: str | None = None,
        *,
        params: list[tuple[str, str]] | None = None,
        body: dict[str, Any] | None = None,
        not_found_ok: bool = False,
    ) -> dict[str, Any] | None:
        """Perform one API call with bounded retry on 429/5xx and transport errors.

        Returns:
            Decoded JSON body, or None for a 404 when not_found_ok.

        Raises:
            AirtableAPIError: Non-2xx response that is not retryable (or retries exhausted).
            httpx.TransportError: Network failure after retries.
        """
        url = f"{self._base_url}/{quote(table_id, safe='')}"
        if record_id:
            url = f"{url}/{quote(record_id, safe='')}"
        attempt = 0
        while True:
            try:
                resp = await self._http.request(
                    method, url, params=params, json=body, headers=self._headers
                )
            except httpx.TransportError as e:
                if attempt >= self._max_retries:
                    raise
                delay = self._retry_delay(attempt)
                logger.warning(
                    "Airtable %s %s transport error (%s); retry %s in %.2fs",
                    method, table_id, e, attempt + 1, delay,
                )
                await self._sleep(delay)
                attempt += 1
                continue
            if resp.status_code in _RETRYABLE_STATUS and attempt < self._max_retries:
                delay = self._retry_delay(attempt, resp.headers.get("Retry-After"))
                logger.warning(
                    "Airtable %s %s returned %s; retry %s in %.2fs",
                    method, table_id, resp.status_code, attempt + 1, delay,
                )
                await self._sleep(delay)
                attempt += 1
                continue
            break
        if resp.status_code == 404 and not_found_ok:
            return None
        if resp.is_error:
            raise _parse_error(resp)
        if not resp.content:
            return {}
        return resp.json()
