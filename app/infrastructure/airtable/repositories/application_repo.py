"""Cohort application repository."""

from typing import Any

from app.application.dtos.participation import Application
from app.core.constants import CACHE_PREFIX_APPLICATIONS
from app.domain.enums import ApplicationStatus, ApplicationType
from app.domain.exceptions import ValidationException
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import application_to_fields, normalize_application
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.shared.telemetry.tracing import traced


def application_fields_for_type(data: dict[str, Any]) -> dict[str, Any]:
    """Apply per-type rules to new application data.

    xtrapreneurs needs reason and commitment and is accepted immediately;
    joinTeam needs a team and a message and always starts as Submitted.

    Raises:
        ValidationException: Unknown type or a type-specific field is missing.
    """
    values = {"status": ApplicationStatus.SUBMITTED.value, **data}
    app_type = values.get("type") or ApplicationType.INDIVIDUAL.value
    if app_type not in ApplicationType.values():
        raise ValidationException(f"Invalid application type: {app_type}", field="type")
    values["type"] = app_type
    if app_type == ApplicationType.XTRAPRENEURS.value:
        if not values.get("reason"):
            raise ValidationException(
                "Reason is required for xtrapreneurs applications", field="reason"
            )
        if not values.get("commitment"):
            raise ValidationException(
                "Commitment is required for xtrapreneurs applications", field="commitment"
            )
        values["status"] = ApplicationStatus.ACCEPTED.value
    elif app_type == ApplicationType.JOIN_TEAM.value:
        if not values.get("team_to_join_id"):
            raise ValidationException(
                "Team to join is required for team join requests", field="team_to_join_id"
            )
        if not values.get("join_team_message"):
            raise ValidationException(
                "Join team message is required for team join requests", field="join_team_message"
            )
        values["status"] = ApplicationStatus.SUBMITTED.value
    return values


class ApplicationRepository(AirtableRepository):
    table_name = tables.APPLICATIONS
    cache_prefix = CACHE_PREFIX_APPLICATIONS

    @traced()
    async def fetch_application(self, application_id: str) -> Application | None:
        self._require(application_id, "application_id", "Application ID is required")
        with self._store_errors("fetching application", application_id=application_id):
            record = await self._table().find(application_id)
        return normalize_application(record)

    @traced()
    async def fetch_applications_by_user(
        self, contact_id: str, cohort_id: str | None = None
    ) -> list[Application]:
        """Applications of a contact, optionally for one cohort."""
        self._require(contact_id, "contact_id", "Contact ID is required")
        formula = formulas.and_(
            formulas.find_in("Contact", contact_id),
            formulas.find_in("Cohort", cohort_id) if cohort_id else "",
        )
        with self._store_errors(
            "fetching applications", contact_id=contact_id, cohort_id=cohort_id
        ):
            records = await self._table().select(formula=formula)
        applications = [normalize_application(r) for r in records]
        return [
            a
            for a in applications
            if a.contact_id == contact_id and (cohort_id is None or a.cohort_id == cohort_id)
        ]

    async def check_application(self, contact_id: str, cohort_id: str) -> Application | None:
        """The contact's application to the cohort, or None if they have not applied."""
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        applications = await self.fetch_applications_by_user(contact_id, cohort_id)
        return applications[0] if applications else None

    @traced()
    async def create_application(self, data: dict[str, Any]) -> Application:
        self._require(data.get("contact_id"), "contact_id", "Contact ID is required")
        self._require(data.get("cohort_id"), "cohort_id", "Cohort ID is required")
        fields = application_to_fields(application_fields_for_type(data))
        with self._store_errors(
            "creating application", contact_id=data["contact_id"], cohort_id=data["cohort_id"]
        ):
            record = await self._table().create(fields)
        await self._on_after_write()
        return normalize_application(record)

    @traced()
    async def update_application_status(self, application_id: str, status: str) -> Application:
        self._require(application_id, "application_id", "Application ID is required")
        if status not in {s.value for s in ApplicationStatus}:
            raise ValidationException(f"Invalid application status: {status}", field="status")
        with self._store_errors(
            "updating application status",
            missing=("application", application_id),
            application_id=application_id,
        ):
            record = await self._table().update(application_id, application_to_fields({"status": status}))
        await self._on_after_write()
        return normalize_application(record)
