"""Learning resource repository."""

from typing import Any

from app.application.dtos.resource import Resource
from app.core.constants import CACHE_PREFIX_RESOURCES
from app.domain.exceptions import ValidationException
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import normalize_resource, resource_to_fields
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced

_BY_NAME = [("Name", "asc")]


class ResourceRepository(AirtableRepository):
    """Resources scoped globally, to a program or to a cohort."""

    table_name = tables.RESOURCES
    cache_prefix = CACHE_PREFIX_RESOURCES

    async def _select(self, formula: str, operation: str, **context: Any) -> list[Resource]:
        with self._store_errors(operation, **context):
            records = await self._table().select(formula=formula, sort=_BY_NAME)
        return [normalize_resource(r) for r in records]

    @traced()
    async def fetch_resource(self, resource_id: str) -> Resource | None:
        self._require(resource_id, "resource_id", "Resource ID is required")
        with self._store_errors("fetching resource", resource_id=resource_id):
            record = await self._table().find(resource_id)
        return normalize_resource(record)

    async def get_resource(self, resource_id: str) -> Resource | None:
        self._require(resource_id, "resource_id", "Resource ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "id", resource_id),
            lambda: self.fetch_resource(resource_id),
        )

    @traced()
    async def fetch_resources_by_program(self, program_id: str) -> list[Resource]:
        self._require(program_id, "program_id", "Program ID is required")
        return await self._select(
            formulas.field_equals("Initiative Record ID", program_id),
            "fetching program resources",
            program_id=program_id,
        )

    async def get_resources_by_program(self, program_id: str) -> list[Resource]:
        self._require(program_id, "program_id", "Program ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "program", program_id),
            lambda: self.fetch_resources_by_program(program_id),
        )

    @traced()
    async def fetch_resources_by_cohort(self, cohort_id: str) -> list[Resource]:
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        return await self._select(
            formulas.field_equals("Cohort Record ID", cohort_id),
            "fetching cohort resources",
            cohort_id=cohort_id,
        )

    async def get_resources_by_cohort(self, cohort_id: str) -> list[Resource]:
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "cohort", cohort_id),
            lambda: self.fetch_resources_by_cohort(cohort_id),
        )

    @traced()
    async def fetch_global_resources(self) -> list[Resource]:
        return await self._select(formulas.is_true("Is Global"), "fetching global resources")

    async def get_global_resources(self) -> list[Resource]:
        return await self._cached(
            build_key(self.cache_prefix, "global"), self.fetch_global_resources
        )

    async def fetch_available_resources(
        self, program_id: str | None = None, cohort_id: str | None = None
    ) -> list[Resource]:
        """Global resources plus those of the given program and cohort, without duplicates."""
        groups = [await self.get_global_resources()]
        if program_id:
            groups.append(await self.get_resources_by_program(program_id))
        if cohort_id:
            groups.append(await self.get_resources_by_cohort(cohort_id))
        seen: set[str] = set()
        out: list[Resource] = []
        for group in groups:
            for resource in group:
                if resource.id not in seen:
                    seen.add(resource.id)
                    out.append(resource)
        return out

    @traced()
    async def create_resource(self, data: dict[str, Any]) -> Resource:
        self._require(data.get("name"), "name", "Resource name is required")
        defaults = {"type": "Link", "category": "General", "is_global": False}
        fields = resource_to_fields({**defaults, **data})
        with self._store_errors("creating resource"):
            record = await self._table().create(fields)
        await self._on_after_write()
        return normalize_resource(record)

    @traced()
    async def update_resource(self, resource_id: str, updates: dict[str, Any]) -> Resource:
        self._require(resource_id, "resource_id", "Resource ID is required")
        fields = resource_to_fields(updates)
        if not fields:
            raise ValidationException("No resource fields to update")
        with self._store_errors(
            "updating resource", missing=("resource", resource_id), resource_id=resource_id
        ):
            record = await self._table().update(resource_id, fields)
        await self._on_after_write()
        return normalize_resource(record)

    @traced()
    async def delete_resource(self, resource_id: str) -> str:
        self._require(resource_id, "resource_id", "Resource ID is required")
        with self._store_errors(
            "deleting resource", missing=("resource", resource_id), resource_id=resource_id
        ):
            deleted = await self._table().delete(resource_id)
        await self._on_after_write()
        return deleted
