"""Cohort application workflows: apply and review."""

from __future__ import annotations

import logging
from typing import Any

from app.application.dtos.participation import Application
from app.application.dtos.user import UserProfile
from app.application.interfaces.repositories import (
    IApplicationRepository,
    IParticipationRepository,
    ITeamRepository,
    IUserRepository,
)
from app.application.use_cases.saga import Saga
from app.domain.enums import ApplicationStatus, ApplicationType, OnboardingStatus
from app.domain.exceptions import ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)


class ApplyToCohortWorkflow:
    """Submits a cohort application and the writes that follow it.

    Steps: create the application; for team applications add the cohort to
    the team; mark the contact's onboarding as Applied; for xtrapreneurs
    (accepted immediately) create the participation record.
    """

    def __init__(
        self,
        application_repo: IApplicationRepository,
        participation_repo: IParticipationRepository,
        team_repo: ITeamRepository,
        user_repo: IUserRepository,
    ) -> None:
        self._application_repo = application_repo
        self._participation_repo = participation_repo
        self._team_repo = team_repo
        self._user_repo = user_repo

    async def execute(self, profile: UserProfile, data: dict[str, Any]) -> dict[str, Any]:
        """Apply profile's contact to data["cohort_id"].

        Args:
            profile: Signed-in user's profile.
            data: cohort_id, type and per-type fields (team_id for team,
                team_to_join_id and join_team_message for joinTeam, reason and
                commitment for xtrapreneurs).

        Returns:
            Step name -> result ("create_application" always present).

        Raises:
            ValidationException: Missing cohort, team, or an active application exists.
            WorkflowFailedException: A later step failed; the application was withdrawn.
        """
        data = dict(data)
        cohort_id = data.get("cohort_id")
        if not cohort_id:
            raise ValidationException("Cohort ID is required", field="cohort_id")
        app_type = data.get("type") or ApplicationType.INDIVIDUAL.value
        team_id = data.pop("team_id", None)
        if app_type == ApplicationType.TEAM.value and not team_id:
            raise ValidationException("Team ID is required for team applications", field="team_id")

        existing = await self._application_repo.check_application(profile.contact_id, cohort_id)
        if existing is not None and existing.status != ApplicationStatus.WITHDRAWN.value:
            raise ValidationException("Already applied to this cohort", field="cohort_id")

        saga = Saga("apply_to_cohort")
        saga.step(
            "create_application",
            lambda: self._application_repo.create_application(
                {**data, "type": app_type, "contact_id": profile.contact_id}
            ),
            lambda application: self._application_repo.update_application_status(
                application.id, ApplicationStatus.WITHDRAWN.value
            ),
        )
        if team_id:
            team = await self._team_repo.fetch_team(team_id, with_members=False)
            if team is None:
                raise ResourceNotFoundException("team", team_id)
            if cohort_id not in team.cohort_ids:
                previous_cohorts = list(team.cohort_ids)
                saga.step(
                    "link_team_cohort",
                    lambda: self._team_repo.update_team(
                        team_id, {"cohort_ids": [*previous_cohorts, cohort_id]}
                    ),
                    lambda _: self._team_repo.update_team(team_id, {"cohort_ids": previous_cohorts}),
                )
        if profile.onboarding_status != OnboardingStatus.APPLIED.value:
            previous_status = profile.onboarding_status
            saga.step(
                "mark_applied",
                lambda: self._user_repo.update_onboarding_status(
                    profile.contact_id, OnboardingStatus.APPLIED.value
                ),
                lambda _: self._user_repo.update_onboarding_status(
                    profile.contact_id, previous_status
                ),
            )
        if app_type == ApplicationType.XTRAPRENEURS.value:
            saga.step(
                "create_participation",
                lambda: self._participation_repo.create_participation(
                    {"contact_id": profile.contact_id, "cohort_id": cohort_id}
                ),
            )
        results = await saga.run()
        logger.info(
            "Contact %s applied to cohort %s (%s)", profile.contact_id, cohort_id, app_type
        )
        return results


class ReviewApplicationWorkflow:
    """Changes an application's status; acceptance creates the participation."""

    def __init__(
        self,
        application_repo: IApplicationRepository,
        participation_repo: IParticipationRepository,
    ) -> None:
        self._application_repo = application_repo
        self._participation_repo = participation_repo

    async def execute(self, application: Application, status: str) -> dict[str, Any]:
        """Set status; on first acceptance add the applicant to the cohort.

        Raises:
            ValidationException: Invalid status.
            WorkflowFailedException: Participation failed; the previous status was restored.
        """
        previous_status = application.status
        saga = Saga("review_application")
        saga.step(
            "update_status",
            lambda: self._application_repo.update_application_status(application.id, status),
            lambda _: self._application_repo.update_application_status(
                application.id, previous_status
            ),
        )
        accepted = ApplicationStatus.ACCEPTED.value
        if status == accepted and previous_status != accepted:
            if not application.contact_id or not application.cohort_id:
                raise ValidationException(
                    "Application has no contact or cohort to enroll", field="id"
                )
            saga.step(
                "create_participation",
                lambda: self._participation_repo.create_participation(
                    {"contact_id": application.contact_id, "cohort_id": application.cohort_id}
                ),
            )
        return await saga.run()
