"""Education record repository."""

from typing import Any

from app.application.dtos.education import Education
from app.core.constants import CACHE_PREFIX_EDUCATION, CACHE_PREFIX_PROFILE
from app.domain.exceptions import ValidationException
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import education_to_fields, normalize_education
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced


class EducationRepository(AirtableRepository):
    table_name = tables.EDUCATION
    cache_prefix = CACHE_PREFIX_EDUCATION

    async def _on_after_write(self) -> None:
        # Profiles embed education, so they go stale with it.
        await self._invalidate(CACHE_PREFIX_EDUCATION, CACHE_PREFIX_PROFILE)

    @traced()
    async def fetch_education(self, education_id: str) -> Education | None:
        self._require(education_id, "education_id", "Education ID is required")
        with self._store_errors("fetching education", education_id=education_id):
            record = await self._table().find(education_id)
        return normalize_education(record)

    async def get_education(self, education_id: str) -> Education | None:
        self._require(education_id, "education_id", "Education ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "id", education_id),
            lambda: self.fetch_education(education_id),
        )

    @traced()
    async def fetch_education_by_contact(self, contact_id: str) -> list[Education]:
        self._require(contact_id, "contact_id", "Contact ID is required")
        with self._store_errors("fetching contact education", contact_id=contact_id):
            records = await self._table().select(formula=formulas.find_in("Contact", contact_id))
        return [normalize_education(r) for r in records]

    @traced()
    async def create_education(self, data: dict[str, Any]) -> Education:
        """Create an education record linked to data["contact_id"]."""
        self._require(data.get("contact_id"), "contact_id", "Contact ID is required")
        fields = education_to_fields(data)
        with self._store_errors("creating education", contact_id=data["contact_id"]):
            record = await self._table().create(fields)
        await self._on_after_write()
        return normalize_education(record)

    @traced()
    async def update_education(self, education_id: str, updates: dict[str, Any]) -> Education:
        self._require(education_id, "education_id", "Education ID is required")
        fields = education_to_fields(updates)
        if not fields:
            raise ValidationException("No education fields to update")
        with self._store_errors(
            "updating education", missing=("education", education_id), education_id=education_id
        ):
            record = await self._table().update(education_id, fields)
        await self._on_after_write()
        return normalize_education(record)

    @traced()
    async def delete_education(self, education_id: str) -> str:
        self._require(education_id, "education_id", "Education ID is required")
        with self._store_errors(
            "deleting education", missing=("education", education_id), education_id=education_id
        ):
            deleted = await self._table().delete(education_id)
        await self._on_after_write()
        return deleted
