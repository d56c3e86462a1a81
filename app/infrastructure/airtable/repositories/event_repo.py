"""Calendar event repository."""

from typing import Any

from app.application.dtos.event import Event
from app.core.constants import CACHE_PREFIX_EVENTS
from app.domain.exceptions import ValidationException
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import (
    event_to_fields,
    normalize_event,
    normalize_participation,
)
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced

_BY_START = [("Start Date/Time", "asc")]


class EventRepository(AirtableRepository):
    table_name = tables.EVENTS
    cache_prefix = CACHE_PREFIX_EVENTS

    async def _select(
        self,
        formula: str,
        operation: str,
        max_records: int | None = None,
        **context: Any,
    ) -> list[Event]:
        with self._store_errors(operation, **context):
            records = await self._table().select(
                formula=formula, sort=_BY_START, max_records=max_records
            )
        return [normalize_event(r) for r in records]

    @traced()
    async def fetch_event(self, event_id: str) -> Event | None:
        self._require(event_id, "event_id", "Event ID is required")
        with self._store_errors("fetching event", event_id=event_id):
            record = await self._table().find(event_id)
        return normalize_event(record)

    async def get_event(self, event_id: str) -> Event | None:
        self._require(event_id, "event_id", "Event ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "id", event_id),
            lambda: self.fetch_event(event_id),
        )

    @traced()
    async def fetch_upcoming_events(self, limit: int = 10) -> list[Event]:
        """Events starting after now, soonest first."""
        if limit < 1:
            raise ValidationException("limit must be positive", field="limit")
        return await self._select(
            formulas.after_now("Start Date/Time"),
            "fetching upcoming events",
            max_records=limit,
            limit=limit,
        )

    async def get_upcoming_events(self, limit: int = 10) -> list[Event]:
        return await self._cached(
            build_key(self.cache_prefix, "upcoming", limit),
            lambda: self.fetch_upcoming_events(limit),
        )

    @traced()
    async def fetch_events_by_program(self, program_id: str) -> list[Event]:
        self._require(program_id, "program_id", "Program ID is required")
        return await self._select(
            formulas.field_equals("Initiative Record ID", program_id),
            "fetching program events",
            program_id=program_id,
        )

    async def get_events_by_program(self, program_id: str) -> list[Event]:
        self._require(program_id, "program_id", "Program ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "program", program_id),
            lambda: self.fetch_events_by_program(program_id),
        )

    @traced()
    async def fetch_events_by_cohort(self, cohort_id: str) -> list[Event]:
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        return await self._select(
            formulas.field_equals("Cohort Record ID", cohort_id),
            "fetching cohort events",
            cohort_id=cohort_id,
        )

    async def get_events_by_cohort(self, cohort_id: str) -> list[Event]:
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "cohort", cohort_id),
            lambda: self.fetch_events_by_cohort(cohort_id),
        )

    @traced()
    async def fetch_events_by_user(self, contact_id: str) -> list[Event]:
        """Events of every cohort and program the contact participates in.

        Returns [] without querying events when the contact has no participation.
        """
        self._require(contact_id, "contact_id", "Contact ID is required")
        with self._store_errors("fetching user participation", contact_id=contact_id):
            records = await self._table(tables.PARTICIPATION).select(
                formula=formulas.find_in("Contacts", contact_id)
            )
        participation = [normalize_participation(r) for r in records]
        cohort_ids = sorted({p.cohort_id for p in participation if p.cohort_id})
        program_ids = sorted({p.initiative_id for p in participation if p.initiative_id})
        if not cohort_ids and not program_ids:
            return []
        formula = formulas.or_(
            *(formulas.field_equals("Cohort Record ID", cid) for cid in cohort_ids),
            *(formulas.field_equals("Initiative Record ID", pid) for pid in program_ids),
        )
        return await self._select(formula, "fetching user events", contact_id=contact_id)

    async def get_events_by_user(self, contact_id: str) -> list[Event]:
        self._require(contact_id, "contact_id", "Contact ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "user", contact_id),
            lambda: self.fetch_events_by_user(contact_id),
        )

    @traced()
    async def create_event(self, data: dict[str, Any]) -> Event:
        """Create an event; end_datetime defaults to start_datetime."""
        self._require(data.get("name"), "name", "Event name is required")
        self._require(data.get("start_datetime"), "start_datetime", "Event start is required")
        payload = dict(data)
        if not payload.get("end_datetime"):
            payload["end_datetime"] = payload["start_datetime"]
        fields = event_to_fields(payload)
        with self._store_errors("creating event"):
            record = await self._table().create(fields)
        await self._on_after_write()
        return normalize_event(record)

    @traced()
    async def update_event(self, event_id: str, updates: dict[str, Any]) -> Event:
        self._require(event_id, "event_id", "Event ID is required")
        fields = event_to_fields(updates)
        if not fields:
            raise ValidationException("No event fields to update")
        with self._store_errors("updating event", missing=("event", event_id), event_id=event_id):
            record = await self._table().update(event_id, fields)
        await self._on_after_write()
        return normalize_event(record)

    @traced()
    async def delete_event(self, event_id: str) -> str:
        self._require(event_id, "event_id", "Event ID is required")
        with self._store_errors("deleting event", missing=("event", event_id), event_id=event_id):
            deleted = await self._table().delete(event_id)
        await self._on_after_write()
        return deleted
