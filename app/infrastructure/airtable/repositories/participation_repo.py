"""Participation repository (contact membership in a cohort)."""

from typing import Any

from app.application.dtos.participation import Participation
from app.core.constants import (
    CACHE_PREFIX_EVENTS,
    CACHE_PREFIX_PARTICIPATION,
    CACHE_PREFIX_PROFILE,
)
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import normalize_participation, participation_to_fields
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced


class ParticipationRepository(AirtableRepository):
    table_name = tables.PARTICIPATION
    cache_prefix = CACHE_PREFIX_PARTICIPATION

    async def _on_after_write(self) -> None:
        # Profiles derive onboarding state and user events from participation.
        await self._invalidate(CACHE_PREFIX_PARTICIPATION, CACHE_PREFIX_PROFILE, CACHE_PREFIX_EVENTS)

    @traced()
    async def fetch_participation_by_user(self, contact_id: str) -> list[Participation]:
        self._require(contact_id, "contact_id", "Contact ID is required")
        with self._store_errors("fetching participation", contact_id=contact_id):
            records = await self._table().select(formula=formulas.find_in("Contacts", contact_id))
        return [p for p in (normalize_participation(r) for r in records) if p.contact_id == contact_id]

    async def get_participation_by_user(self, contact_id: str) -> list[Participation]:
        self._require(contact_id, "contact_id", "Contact ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "user", contact_id),
            lambda: self.fetch_participation_by_user(contact_id),
        )

    @traced()
    async def create_participation(self, data: dict[str, Any]) -> Participation:
        """Link a contact to a cohort; status Active and capacity Participant by default."""
        self._require(data.get("contact_id"), "contact_id", "Contact ID is required")
        self._require(data.get("cohort_id"), "cohort_id", "Cohort ID is required")
        fields = participation_to_fields({"status": "Active", "capacity": "Participant", **data})
        with self._store_errors(
            "creating participation", contact_id=data["contact_id"], cohort_id=data["cohort_id"]
        ):
            record = await self._table().create(fields)
        await self._on_after_write()
        return normalize_participation(record)

    @traced()
    async def delete_participation(self, participation_id: str) -> str:
        self._require(participation_id, "participation_id", "Participation ID is required")
        with self._store_errors(
            "deleting participation",
            missing=("participation", participation_id),
            record_id=participation_id,
        ):
            deleted = await self._table().delete(participation_id)
        await self._on_after_write()
        return deleted
