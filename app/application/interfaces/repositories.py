"""Repository interfaces (ports) used by the multi-step workflows.

Protocols define the contracts the Airtable repositories fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.education import Education
    from app.application.dtos.participation import Application, Participation
    from app.application.dtos.points import (
        PointsSummary,
        PointsTransaction,
        Reward,
        RewardClaim,
    )
    from app.application.dtos.team import Team
    from app.application.dtos.user import UserProfile


class IUserRepository(Protocol):
    """Protocol for contact repository (DIP)."""

    async def update_user(self, contact_id: str, updates: dict[str, Any]) -> UserProfile:
        """Patch contact fields given by internal name."""

    async def update_onboarding_status(self, contact_id: str, status: str) -> UserProfile:
        """Set the contact's onboarding status."""


class IEducationRepository(Protocol):
    """Protocol for education repository (DIP)."""

    async def fetch_education(self, education_id: str) -> Education | None:
        """Return one education record or None."""

    async def create_education(self, data: dict[str, Any]) -> Education:
        """Create an education record for data["contact_id"]."""

    async def update_education(self, education_id: str, updates: dict[str, Any]) -> Education:
        """Patch education fields given by internal name."""

    async def delete_education(self, education_id: str) -> str:
        """Delete an education record; returns its id."""


class ITeamRepository(Protocol):
    """Protocol for team repository (DIP)."""

    async def fetch_team(self, team_id: str, with_members: bool = True) -> Team | None:
        """Return a team (members resolved by default) or None."""

    async def create_team(self, data: dict[str, Any]) -> Team:
        """Create a team."""

    async def update_team(self, team_id: str, updates: dict[str, Any]) -> Team:
        """Patch team fields given by internal name."""

    async def delete_team(self, team_id: str) -> str:
        """Delete a team; returns its id."""


class IParticipationRepository(Protocol):
    """Protocol for participation repository (DIP)."""

    async def create_participation(self, data: dict[str, Any]) -> Participation:
        """Link a contact to a cohort."""

    async def delete_participation(self, participation_id: str) -> str:
        """Delete a participation record; returns its id."""


class IApplicationRepository(Protocol):
    """Protocol for application repository (DIP)."""

    async def check_application(self, contact_id: str, cohort_id: str) -> Application | None:
        """Return the contact's application to the cohort, if any."""

    async def create_application(self, data: dict[str, Any]) -> Application:
        """Create an application (per-type rules apply)."""

    async def update_application_status(self, application_id: str, status: str) -> Application:
        """Change an application's status."""


class IPointsRepository(Protocol):
    """Protocol for points repository (DIP)."""

    async def fetch_points_summary(self, user_auth0_id: str) -> PointsSummary:
        """Uncached totals over the user's completed transactions."""

    async def fetch_reward(self, reward_id: str) -> Reward | None:
        """Return one reward or None."""

    async def create_reward_claim(self, data: dict[str, Any]) -> RewardClaim:
        """Create a pending reward claim."""

    async def delete_reward_claim(self, claim_id: str) -> str:
        """Delete a reward claim; returns its id."""

    async def create_transaction(self, data: dict[str, Any]) -> PointsTransaction:
        """Record a points transaction."""
