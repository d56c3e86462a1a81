"""Profile workflows: contact fields plus the contact's education record."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from app.application.dtos.education import Education
from app.application.dtos.user import UserProfile
from app.application.interfaces.repositories import IEducationRepository, IUserRepository
from app.application.use_cases.saga import Saga
from app.domain.exceptions import ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)

CONTACT_FIELDS = frozenset({"first_name", "last_name", "referral_source"})
EDUCATION_FIELDS = frozenset(
    {"institution_id", "degree_type", "major_id", "graduation_year", "graduation_semester"}
)


def _previous_values(current: Any, keys: Mapping[str, Any]) -> dict[str, Any]:
    return {key: getattr(current, key) for key in keys}


class CreateEducationWorkflow:
    """Creates an education record and links it to its contact."""

    def __init__(self, user_repo: IUserRepository, education_repo: IEducationRepository) -> None:
        self._user_repo = user_repo
        self._education_repo = education_repo

    def add_steps(
        self,
        saga: Saga,
        contact_id: str,
        data: dict[str, Any],
        previous_education_ids: list[str],
    ) -> None:
        """Append create + link steps to saga (result under "create_education")."""
        saga.step(
            "create_education",
            lambda: self._education_repo.create_education({**data, "contact_id": contact_id}),
            lambda education: self._education_repo.delete_education(education.id),
        )
        saga.step(
            "link_education",
            lambda: self._user_repo.update_user(
                contact_id,
                {"education_ids": [saga.results["create_education"].id, *previous_education_ids]},
            ),
            lambda _: self._user_repo.update_user(
                contact_id, {"education_ids": previous_education_ids}
            ),
        )

    async def execute(
        self, contact_id: str, data: dict[str, Any], previous_education_ids: list[str] | None = None
    ) -> Education:
        unknown = sorted(set(data) - EDUCATION_FIELDS)
        if unknown:
            raise ValidationException(f"Unknown education field: {unknown[0]}", field=unknown[0])
        saga = Saga("create_education")
        self.add_steps(saga, contact_id, data, list(previous_education_ids or []))
        results = await saga.run()
        return results["create_education"]


class UpdateProfileWorkflow:
    """Updates contact fields and creates or updates the contact's education."""

    def __init__(self, user_repo: IUserRepository, education_repo: IEducationRepository) -> None:
        self._user_repo = user_repo
        self._education_repo = education_repo
        self._create_education = CreateEducationWorkflow(user_repo, education_repo)

    async def execute(self, profile: UserProfile, updates: dict[str, Any]) -> dict[str, Any]:
        """Apply a profile update.

        Args:
            profile: Current profile of the signed-in user.
            updates: Internal field name -> value; contact and education
                fields may be mixed. education_id selects the record to update
                (defaults to the profile's first education record).

        Returns:
            Step name -> result for the steps that ran.

        Raises:
            ValidationException: Unknown field or nothing to update.
            ResourceNotFoundException: education_id does not exist.
            WorkflowFailedException: A later step failed; earlier writes were undone.
        """
        updates = dict(updates)
        education_id = updates.pop("education_id", None) or (
            profile.education_ids[0] if profile.education_ids else None
        )
        unknown = sorted(set(updates) - CONTACT_FIELDS - EDUCATION_FIELDS)
        if unknown:
            raise ValidationException(f"Unknown profile field: {unknown[0]}", field=unknown[0])
        contact_updates = {k: v for k, v in updates.items() if k in CONTACT_FIELDS}
        education_updates = {k: v for k, v in updates.items() if k in EDUCATION_FIELDS}
        if not contact_updates and not education_updates:
            raise ValidationException("No profile fields to update")

        saga = Saga("update_profile")
        if contact_updates:
            previous = _previous_values(profile, contact_updates)
            saga.step(
                "update_contact",
                lambda: self._user_repo.update_user(profile.contact_id, contact_updates),
                lambda _: self._user_repo.update_user(profile.contact_id, previous),
            )
        if education_updates and education_id:
            current = await self._education_repo.fetch_education(education_id)
            if current is None:
                raise ResourceNotFoundException("education", education_id)
            previous_education = _previous_values(current, education_updates)
            saga.step(
                "update_education",
                lambda: self._education_repo.update_education(education_id, education_updates),
                lambda _: self._education_repo.update_education(education_id, previous_education),
            )
        elif education_updates:
            self._create_education.add_steps(
                saga, profile.contact_id, education_updates, list(profile.education_ids)
            )
        results = await saga.run()
        logger.info("Profile of contact %s updated (%s)", profile.contact_id, ", ".join(results))
        return results
