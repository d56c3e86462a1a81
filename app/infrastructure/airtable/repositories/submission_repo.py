"""Milestone submission repository."""

from typing import Any

from app.application.dtos.submission import Submission
from app.core.constants import CACHE_PREFIX_SUBMISSIONS
from app.domain.enums import SubmissionStatus
from app.domain.exceptions import ValidationException
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import normalize_submission, submission_to_fields
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced

_NEWEST_FIRST = [("Created Time", "desc")]


class SubmissionRepository(AirtableRepository):
    """Team deliverables per milestone (Submissions table)."""

    table_name = tables.SUBMISSIONS
    cache_prefix = CACHE_PREFIX_SUBMISSIONS

    @traced()
    async def fetch_submission(self, submission_id: str) -> Submission | None:
        self._require(submission_id, "submission_id", "Submission ID is required")
        with self._store_errors("fetching submission", submission_id=submission_id):
            record = await self._table().find(submission_id)
        return normalize_submission(record)

    @traced()
    async def fetch_submissions_by_team(self, team_id: str) -> list[Submission]:
        """All submissions of a team, newest first."""
        self._require(team_id, "team_id", "Team ID is required")
        with self._store_errors("fetching team submissions", team_id=team_id):
            records = await self._table().select(
                formula=formulas.field_equals("Team Record ID", team_id),
                sort=_NEWEST_FIRST,
            )
        return [normalize_submission(r) for r in records]

    async def get_submissions_by_team(self, team_id: str) -> list[Submission]:
        self._require(team_id, "team_id", "Team ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "team", team_id),
            lambda: self.fetch_submissions_by_team(team_id),
        )

    @traced()
    async def fetch_submissions_by_milestone(
        self, milestone_id: str, team_id: str | None = None
    ) -> list[Submission]:
        """Submissions for a milestone, optionally narrowed to one team."""
        self._require(milestone_id, "milestone_id", "Milestone ID is required")
        formula = formulas.and_(
            formulas.field_equals("Milestone Record ID", milestone_id),
            formulas.field_equals("Team Record ID", team_id) if team_id else "",
        )
        with self._store_errors(
            "fetching milestone submissions", milestone_id=milestone_id, team_id=team_id
        ):
            records = await self._table().select(formula=formula, sort=_NEWEST_FIRST)
        return [normalize_submission(r) for r in records]

    @traced()
    async def create_submission(self, data: dict[str, Any]) -> Submission:
        """Create a submission; status defaults to Submitted.

        Raises:
            ValidationException: team_id or milestone_id missing, or an unknown field.
        """
        self._require(data.get("team_id"), "team_id", "Team ID is required")
        self._require(data.get("milestone_id"), "milestone_id", "Milestone ID is required")
        fields = submission_to_fields({"status": SubmissionStatus.SUBMITTED.value, **data})
        with self._store_errors(
            "creating submission", team_id=data["team_id"], milestone_id=data["milestone_id"]
        ):
            record = await self._table().create(fields)
        await self._on_after_write()
        return normalize_submission(record)

    @traced()
    async def update_submission(
        self, submission_id: str, updates: dict[str, Any]
    ) -> Submission:
        """Patch only the given fields of a submission."""
        self._require(submission_id, "submission_id", "Submission ID is required")
        fields = submission_to_fields(updates)
        if not fields:
            raise ValidationException("No submission fields to update")
        with self._store_errors(
            "updating submission",
            missing=("submission", submission_id),
            submission_id=submission_id,
        ):
            record = await self._table().update(submission_id, fields)
        await self._on_after_write()
        return normalize_submission(record)
