"""Cohort and milestone repository (read-only)."""

import dataclasses
from collections.abc import Callable
from datetime import date

from app.application.dtos.cohort import Cohort, Milestone
from app.application.dtos.program import Program
from app.core.constants import CACHE_PREFIX_COHORTS, CACHE_PREFIX_MILESTONES
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable._rest_client import AirtableRESTClient, StoreRecord
from app.infrastructure.airtable.normalizers import (
    normalize_cohort,
    normalize_milestone,
    normalize_program,
)
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.airtable.repositories.partnership_repo import PartnershipRepository
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import utc_now


def _today_utc() -> date:
    return utc_now().date()


class CohortRepository(AirtableRepository):
    """Cohorts with their program embedded, plus cohort milestones."""

    table_name = tables.COHORTS
    cache_prefix = CACHE_PREFIX_COHORTS

    def __init__(
        self,
        store: AirtableRESTClient,
        cache: CacheProtocol,
        ttl: float = 600,
        today: Callable[[], date] = _today_utc,
    ) -> None:
        super().__init__(store, cache, ttl)
        self.today = today
        self.partnerships = PartnershipRepository(store, cache, ttl)

    async def _with_programs(self, records: list[StoreRecord]) -> list[Cohort]:
        today = self.today()
        cohorts = [normalize_cohort(r, today) for r in records]
        programs: dict[str, Program | None] = {}
        out: list[Cohort] = []
        for cohort in cohorts:
            pid = cohort.initiative_id
            if pid and pid not in programs:
                with self._store_errors("fetching cohort program", program_id=pid):
                    programs[pid] = normalize_program(await self._table(tables.INITIATIVES).find(pid))
            out.append(dataclasses.replace(cohort, program=programs.get(pid)) if pid else cohort)
        return out

    @traced()
    async def fetch_cohort(self, cohort_id: str) -> Cohort | None:
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        with self._store_errors("fetching cohort", cohort_id=cohort_id):
            record = await self._table().find(cohort_id)
        if record is None:
            return None
        return (await self._with_programs([record]))[0]

    async def get_cohort(self, cohort_id: str) -> Cohort | None:
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "id", cohort_id),
            lambda: self.fetch_cohort(cohort_id),
        )

    @traced()
    async def fetch_current_cohorts(self) -> list[Cohort]:
        """Cohorts flagged current or running today (inclusive date range)."""
        today = self.today().isoformat()
        formula = formulas.or_(
            formulas.is_true("Current Cohort"),
            formulas.is_true("Is Current"),
            formulas.is_true("Current"),
            formulas.and_(
                formulas.field("Start Date"),
                formulas.field("End Date"),
                f"{formulas.field('Start Date')}<={formulas.escape(today)}",
                f"{formulas.field('End Date')}>={formulas.escape(today)}",
            ),
        )
        with self._store_errors("fetching current cohorts"):
            records = await self._table().select(formula=formula)
        return [c for c in await self._with_programs(records) if c.is_current]

    async def get_current_cohorts(self) -> list[Cohort]:
        return await self._cached(
            build_key(self.cache_prefix, "current"), self.fetch_current_cohorts
        )

    @traced()
    async def fetch_public_cohorts(self) -> list[Cohort]:
        """Public, Active cohorts currently accepting applications."""
        formula = formulas.and_(
            formulas.is_true("Public"),
            formulas.field_equals("Status", "Active"),
            formulas.is_true("Accepting Applications"),
        )
        with self._store_errors("fetching public cohorts"):
            records = await self._table().select(formula=formula, sort=[("Start Date", "asc")])
        return await self._with_programs(records)

    async def get_public_cohorts(self) -> list[Cohort]:
        return await self._cached(build_key(self.cache_prefix, "public"), self.fetch_public_cohorts)

    @traced()
    async def fetch_cohorts_by_institution(self, institution_id: str) -> list[Cohort]:
        """Cohorts linked to the institution directly or through a partnership.

        Direct links come first; partnership cohorts are appended once each.
        """
        self._require(institution_id, "institution_id", "Institution ID is required")
        with self._store_errors("fetching institution cohorts", institution_id=institution_id):
            records = await self._table().select(
                formula=formulas.find_in("Institution", institution_id)
            )
        direct = await self._with_programs(records)
        seen = {c.id for c in direct}
        extra_ids: list[str] = []
        for partnership in await self.partnerships.get_partnerships_by_institution(institution_id):
            for cohort_id in partnership.cohort_ids:
                if cohort_id not in seen:
                    seen.add(cohort_id)
                    extra_ids.append(cohort_id)
        via_partnership: list[Cohort] = []
        if extra_ids:
            with self._store_errors("fetching partnership cohorts", institution_id=institution_id):
                records = await self._select_by_ids(extra_ids)
            via_partnership = await self._with_programs(records)
        return direct + via_partnership

    async def get_cohorts_by_institution(self, institution_id: str) -> list[Cohort]:
        self._require(institution_id, "institution_id", "Institution ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "institution", institution_id),
            lambda: self.fetch_cohorts_by_institution(institution_id),
        )

    @traced()
    async def fetch_cohorts_by_program(self, program_id: str) -> list[Cohort]:
        self._require(program_id, "program_id", "Program ID is required")
        with self._store_errors("fetching program cohorts", program_id=program_id):
            records = await self._table().select(
                formula=formulas.find_in("Initiative", program_id)
            )
        cohorts = await self._with_programs(records)
        return [c for c in cohorts if c.initiative_id == program_id]

    @traced()
    async def fetch_milestones_by_cohort(self, cohort_id: str) -> list[Milestone]:
        """Milestones of a cohort ordered by their Number column."""
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        with self._store_errors("fetching cohort milestones", cohort_id=cohort_id):
            records = await self._table(tables.MILESTONES).select(
                formula=formulas.find_in("Cohort", cohort_id), sort=[("Number", "asc")]
            )
        milestones = [normalize_milestone(r) for r in records]
        return sorted(milestones, key=lambda m: m.number)

    async def get_milestones_by_cohort(self, cohort_id: str) -> list[Milestone]:
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        return await self._cached(
            build_key(CACHE_PREFIX_MILESTONES, "cohort", cohort_id),
            lambda: self.fetch_milestones_by_cohort(cohort_id),
        )
