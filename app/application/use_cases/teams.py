"""Create team workflow: team record plus the creator's participation."""

from __future__ import annotations

import logging
from typing import Any

from app.application.dtos.team import Team
from app.application.interfaces.repositories import IParticipationRepository, ITeamRepository
from app.application.use_cases.saga import Saga
from app.domain.enums import TEAM_LEAD_CAPACITY
from app.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)


class CreateTeamWorkflow:
    """Creates a team with the creator as its first member and team lead."""

    def __init__(
        self,
        team_repo: ITeamRepository,
        participation_repo: IParticipationRepository,
    ) -> None:
        self._team_repo = team_repo
        self._participation_repo = participation_repo

    async def execute(
        self,
        contact_id: str,
        name: str,
        *,
        description: str = "",
        cohort_id: str | None = None,
        program_id: str | None = None,
    ) -> Team:
        """Create the team, then the creator's Team Lead participation.

        Participation needs a cohort, so without cohort_id only the team is
        created (the creator is still linked as a member).

        Raises:
            ValidationException: Missing contact or blank name.
            WorkflowFailedException: Participation failed; the team was deleted.
        """
        if not contact_id:
            raise ValidationException("Contact ID is required", field="contact_id")
        if not name or not name.strip():
            raise ValidationException("Team name is required", field="name")

        team_data: dict[str, Any] = {
            "name": name.strip(),
            "description": (description or "").strip(),
            "member_ids": [contact_id],
        }
        if cohort_id:
            team_data["cohort_ids"] = [cohort_id]
        if program_id:
            team_data["initiative_ids"] = [program_id]

        saga = Saga("create_team")
        saga.step(
            "create_team",
            lambda: self._team_repo.create_team(team_data),
            lambda team: self._team_repo.delete_team(team.id),
        )
        if cohort_id:
            saga.step(
                "create_participation",
                lambda: self._participation_repo.create_participation(
                    {
                        "contact_id": contact_id,
                        "cohort_id": cohort_id,
                        "team_id": saga.results["create_team"].id,
                        "capacity": TEAM_LEAD_CAPACITY,
                        **({"initiative_id": program_id} if program_id else {}),
                    }
                ),
            )
        results = await saga.run()
        created: Team = results["create_team"]
        logger.info("Team %s created by contact %s", created.id, contact_id)
        return await self._team_repo.fetch_team(created.id) or created
