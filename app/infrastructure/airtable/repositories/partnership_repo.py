"""Institution partnership repository (read-only)."""

from app.application.dtos.partnership import Partnership
from app.core.constants import CACHE_PREFIX_PARTNERSHIPS
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import normalize_partnership
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced


class PartnershipRepository(AirtableRepository):
    table_name = tables.PARTNERSHIPS
    cache_prefix = CACHE_PREFIX_PARTNERSHIPS

    @traced()
    async def fetch_partnerships_by_institution(self, institution_id: str) -> list[Partnership]:
        """Partnerships whose Institution link contains institution_id.

        Falls back to scanning the whole table when the formula matches
        nothing (link columns render display values in some bases).
        """
        self._require(institution_id, "institution_id", "Institution ID is required")
        with self._store_errors("fetching institution partnerships", institution_id=institution_id):
            records = await self._table().select(
                formula=formulas.find_in("Institution", institution_id)
            )
            if not records:
                records = await self._table().select()
        partnerships = [normalize_partnership(r) for r in records]
        # FIND matches substrings of the joined link values; keep exact links only.
        return [p for p in partnerships if p.institution_id == institution_id]

    async def get_partnerships_by_institution(self, institution_id: str) -> list[Partnership]:
        self._require(institution_id, "institution_id", "Institution ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "institution", institution_id),
            lambda: self.fetch_partnerships_by_institution(institution_id),
        )
