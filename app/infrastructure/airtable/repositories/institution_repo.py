"""Institution repository (read-only)."""

from app.application.dtos.institution import Institution
from app.core.constants import CACHE_PREFIX_INSTITUTIONS
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import normalize_institution
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced

MIN_SEARCH_LENGTH = 2


def email_domain(email: str | None) -> str | None:
    """Lowercased domain of an email address, or None when there is none."""
    if not email or "@" not in email:
        return None
    domain = email.rsplit("@", 1)[1].strip().lower()
    return domain or None


class InstitutionRepository(AirtableRepository):
    table_name = tables.INSTITUTIONS
    cache_prefix = CACHE_PREFIX_INSTITUTIONS

    @traced()
    async def fetch_institution(self, institution_id: str) -> Institution | None:
        self._require(institution_id, "institution_id", "Institution ID is required")
        with self._store_errors("fetching institution", institution_id=institution_id):
            record = await self._table().find(institution_id)
        return normalize_institution(record)

    async def get_institution(self, institution_id: str) -> Institution | None:
        self._require(institution_id, "institution_id", "Institution ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "id", institution_id),
            lambda: self.fetch_institution(institution_id),
        )

    @traced()
    async def search_institutions(self, query: str, limit: int = 10) -> list[Institution]:
        """Name or alias contains query (case-insensitive).

        Queries shorter than two characters return [] without a store call.
        """
        query = (query or "").strip().lower()
        if len(query) < MIN_SEARCH_LENGTH:
            return []
        formula = formulas.or_(
            formulas.contains_lower("Name", query),
            formulas.contains_lower("Aliases", query),
        )
        with self._store_errors("searching institutions", limit=limit):
            records = await self._table().select(
                formula=formula, max_records=limit, sort=[("Name", "asc")]
            )
        return [normalize_institution(r) for r in records]

    @traced()
    async def fetch_institution_by_domain(self, email: str) -> Institution | None:
        """Institution whose Domain column matches the email's domain."""
        domain = email_domain(email)
        if domain is None:
            return None
        formula = formulas.or_(
            formulas.lower_equals("Domain", domain),
            formulas.lower_equals("Domain", f"*.{domain}"),
            formulas.contains_lower("Domain", domain),
        )
        with self._store_errors("looking up institution by domain"):
            records = await self._table().select(formula=formula, max_records=1)
        return normalize_institution(records[0]) if records else None

    async def get_institution_by_domain(self, email: str) -> Institution | None:
        domain = email_domain(email)
        if domain is None:
            return None
        return await self._cached(
            build_key(self.cache_prefix, "domain", domain),
            lambda: self.fetch_institution_by_domain(email),
        )
