"""Team repository.

A team's member roles come from the participation record linking the
contact to the team (its Capacity column).
"""

import dataclasses
from typing import Any

from app.application.dtos.team import Team, TeamMember
from app.core.constants import CACHE_PREFIX_PROFILE, CACHE_PREFIX_TEAMS
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import (
    normalize_participation,
    normalize_team,
    normalize_team_member,
    team_to_fields,
)
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced


class TeamRepository(AirtableRepository):
    table_name = tables.TEAMS
    cache_prefix = CACHE_PREFIX_TEAMS

    async def _on_after_write(self) -> None:
        await self._invalidate(CACHE_PREFIX_TEAMS, CACHE_PREFIX_PROFILE)

    @traced()
    async def fetch_team_members(self, team: Team) -> list[TeamMember]:
        """Member contacts of a team, in the team's member order."""
        if not team.member_ids:
            return []
        with self._store_errors("fetching team members", team_id=team.id):
            contacts = await self._select_by_ids(team.member_ids, tables.CONTACTS)
            participation_records = await self._table(tables.PARTICIPATION).select(
                formula=formulas.find_in("Team", team.id)
            )
        roles: dict[str, tuple[str, str]] = {}
        for record in participation_records:
            participation = normalize_participation(record)
            if participation.team_id == team.id and participation.contact_id:
                roles.setdefault(participation.contact_id, (participation.capacity, participation.id))
        by_id = {c.id: c for c in contacts}
        members: list[TeamMember] = []
        for contact_id in team.member_ids:
            contact = by_id.get(contact_id)
            if contact is None:
                continue
            role, participation_id = roles.get(contact_id, (None, None))
            members.append(normalize_team_member(contact, role, participation_id))
        return members

    @traced()
    async def fetch_team(self, team_id: str, with_members: bool = True) -> Team | None:
        self._require(team_id, "team_id", "Team ID is required")
        with self._store_errors("fetching team", team_id=team_id):
            record = await self._table().find(team_id)
        team = normalize_team(record)
        if team is None or not with_members:
            return team
        return dataclasses.replace(team, members=await self.fetch_team_members(team))

    async def get_team(self, team_id: str) -> Team | None:
        self._require(team_id, "team_id", "Team ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "id", team_id),
            lambda: self.fetch_team(team_id),
        )

    @traced()
    async def fetch_teams_by_cohort(self, cohort_id: str) -> list[Team]:
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        with self._store_errors("fetching cohort teams", cohort_id=cohort_id):
            records = await self._table().select(formula=formulas.find_in("Cohort", cohort_id))
        teams = [normalize_team(r) for r in records]
        return [t for t in teams if cohort_id in t.cohort_ids]

    async def get_teams_by_cohort(self, cohort_id: str) -> list[Team]:
        self._require(cohort_id, "cohort_id", "Cohort ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "cohort", cohort_id),
            lambda: self.fetch_teams_by_cohort(cohort_id),
        )

    @traced()
    async def fetch_teams_by_user(self, contact_id: str) -> list[Team]:
        """Teams listing the contact as a member, with members resolved."""
        self._require(contact_id, "contact_id", "Contact ID is required")
        with self._store_errors("fetching user teams", contact_id=contact_id):
            records = await self._table().select(formula=formulas.find_in("Members", contact_id))
        teams = [t for t in (normalize_team(r) for r in records) if contact_id in t.member_ids]
        return [dataclasses.replace(t, members=await self.fetch_team_members(t)) for t in teams]

    async def get_teams_by_user(self, contact_id: str) -> list[Team]:
        self._require(contact_id, "contact_id", "Contact ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "user", contact_id),
            lambda: self.fetch_teams_by_user(contact_id),
        )

    @traced()
    async def create_team(self, data: dict[str, Any]) -> Team:
        self._require(data.get("name"), "name", "Team name is required")
        fields = team_to_fields({"description": "", **data})
        with self._store_errors("creating team"):
            record = await self._table().create(fields)
        await self._on_after_write()
        return normalize_team(record)

    @traced()
    async def update_team(self, team_id: str, updates: dict[str, Any]) -> Team:
        self._require(team_id, "team_id", "Team ID is required")
        fields = team_to_fields(updates)
        if not fields:
            raise ValidationException("No team fields to update")
        with self._store_errors("updating team", missing=("team", team_id), team_id=team_id):
            record = await self._table().update(team_id, fields)
        await self._on_after_write()
        return normalize_team(record)

    @traced()
    async def delete_team(self, team_id: str) -> str:
        self._require(team_id, "team_id", "Team ID is required")
        with self._store_errors("deleting team", missing=("team", team_id), team_id=team_id):
            deleted = await self._table().delete(team_id)
        await self._on_after_write()
        return deleted

    async def _require_team(self, team_id: str) -> Team:
        team = await self.fetch_team(team_id, with_members=False)
        if team is None:
            raise ResourceNotFoundException("team", team_id)
        return team

    async def add_team_member(self, team_id: str, contact_id: str) -> Team:
        """Link a contact to the team (no write when already a member)."""
        self._require(contact_id, "contact_id", "Contact ID is required")
        team = await self._require_team(team_id)
        if contact_id in team.member_ids:
            return team
        return await self.update_team(team_id, {"member_ids": [*team.member_ids, contact_id]})

    async def remove_team_member(self, team_id: str, contact_id: str) -> Team:
        self._require(contact_id, "contact_id", "Contact ID is required")
        team = await self._require_team(team_id)
        if contact_id not in team.member_ids:
            raise ResourceNotFoundException("team member", contact_id)
        remaining = [m for m in team.member_ids if m != contact_id]
        return await self.update_team(team_id, {"member_ids": remaining})
