"""Program (initiative) and major repository.

Programs live in the Initiatives table; the Programs table holds degree
majors used by education records.
"""

from app.application.dtos.program import Major, Program
from app.core.constants import CACHE_PREFIX_MAJORS, CACHE_PREFIX_PROGRAMS
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import normalize_major, normalize_program
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced


class ProgramRepository(AirtableRepository):
    table_name = tables.INITIATIVES
    cache_prefix = CACHE_PREFIX_PROGRAMS

    @traced()
    async def fetch_program(self, program_id: str) -> Program | None:
        self._require(program_id, "program_id", "Program ID is required")
        with self._store_errors("fetching program", program_id=program_id):
            record = await self._table().find(program_id)
        return normalize_program(record)

    async def get_program(self, program_id: str) -> Program | None:
        self._require(program_id, "program_id", "Program ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "id", program_id),
            lambda: self.fetch_program(program_id),
        )

    @traced()
    async def fetch_active_programs(self) -> list[Program]:
        with self._store_errors("fetching active programs"):
            records = await self._table().select(
                formula=formulas.field_equals("Status", "Active"), sort=[("Name", "asc")]
            )
        return [normalize_program(r) for r in records]

    async def get_active_programs(self) -> list[Program]:
        return await self._cached(
            build_key(self.cache_prefix, "active"), self.fetch_active_programs
        )

    @traced()
    async def fetch_majors(self, query: str | None = None, limit: int | None = None) -> list[Major]:
        """Majors sorted by name, optionally filtered by a name substring."""
        formula = ""
        if query and query.strip():
            formula = formulas.or_(
                formulas.contains_lower("Major", query.strip()),
                formulas.contains_lower("Name", query.strip()),
            )
        with self._store_errors("fetching majors"):
            records = await self._table(tables.PROGRAMS).select(
                formula=formula or None, sort=[("Major", "asc")], max_records=limit
            )
        return [normalize_major(r) for r in records]

    async def get_majors(self) -> list[Major]:
        return await self._cached(build_key(CACHE_PREFIX_MAJORS, "all"), self.fetch_majors)
