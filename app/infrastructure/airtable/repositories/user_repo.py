"""Contact (user) repository.

Contacts are found by email first (the most reliable key: Auth0 subjects
change when a user switches login provider), then by Auth0 subject.
"""

import dataclasses
import logging
from typing import Any

from app.application.dtos.user import UserProfile
from app.core.constants import CACHE_PREFIX_PROFILE
from app.domain.enums import OnboardingStatus
from app.domain.exceptions import ValidationException
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import (
    normalize_education,
    normalize_user,
    user_to_fields,
)
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import profile_auth0_key, profile_email_key
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

# Contact fields a user may change on their own profile
PROFILE_FIELDS = frozenset({"first_name", "last_name", "referral_source"})


class UserRepository(AirtableRepository):
    table_name = tables.CONTACTS
    cache_prefix = CACHE_PREFIX_PROFILE

    @traced()
    async def fetch_user_by_email(self, email: str) -> UserProfile | None:
        """Case-insensitive email lookup; first match wins."""
        self._require(email, "email", "Email is required")
        with self._store_errors("fetching user by email"):
            records = await self._table().select(
                formula=formulas.lower_equals("Email", email.strip()), max_records=1
            )
        return normalize_user(records[0]) if records else None

    @traced()
    async def fetch_user_by_auth0_id(self, auth0_id: str) -> UserProfile | None:
        self._require(auth0_id, "auth0_id", "Auth0 ID is required")
        with self._store_errors("fetching user by auth0 id"):
            records = await self._table().select(
                formula=formulas.field_equals("Auth0 ID", auth0_id), max_records=1
            )
        return normalize_user(records[0]) if records else None

    @traced()
    async def fetch_users_by_ids(self, contact_ids: list[str]) -> list[UserProfile]:
        """Contacts for the given record ids (missing ids are skipped)."""
        ids = [cid for cid in contact_ids if cid]
        if not ids:
            return []
        with self._store_errors("fetching users by ids", count=len(ids)):
            records = await self._select_by_ids(ids)
        return [normalize_user(r) for r in records]

    async def _with_education(self, profile: UserProfile | None) -> UserProfile | None:
        if profile is None or not profile.education_ids:
            return profile
        education_id = profile.education_ids[0]
        with self._store_errors("fetching profile education", education_id=education_id):
            record = await self._table(tables.EDUCATION).find(education_id)
        return dataclasses.replace(profile, education=normalize_education(record))

    async def get_user_by_email(self, email: str) -> UserProfile | None:
        self._require(email, "email", "Email is required")

        async def fetch() -> UserProfile | None:
            return await self._with_education(await self.fetch_user_by_email(email))

        return await self._cached(profile_email_key(email), fetch)

    async def get_user_by_auth0_id(self, auth0_id: str) -> UserProfile | None:
        self._require(auth0_id, "auth0_id", "Auth0 ID is required")

        async def fetch() -> UserProfile | None:
            return await self._with_education(await self.fetch_user_by_auth0_id(auth0_id))

        return await self._cached(profile_auth0_key(auth0_id), fetch)

    async def get_user_profile(
        self, auth0_id: str | None, email: str | None
    ) -> UserProfile | None:
        """Full profile (contact plus first education record), email first.

        Raises:
            ValidationException: Neither auth0_id nor email given.
        """
        if not auth0_id and not email:
            raise ValidationException("Email or Auth0 ID is required", field="email")
        profile = await self.get_user_by_email(email) if email else None
        if profile is None and auth0_id:
            profile = await self.get_user_by_auth0_id(auth0_id)
        return profile

    async def check_user_exists(self, email: str) -> bool:
        return await self.get_user_by_email(email) is not None

    async def is_onboarding_completed(self, auth0_id: str | None, email: str | None) -> bool:
        profile = await self.get_user_profile(auth0_id, email)
        return profile is not None and profile.onboarding_completed

    @traced()
    async def update_user(self, contact_id: str, updates: dict[str, Any]) -> UserProfile:
        """Patch the given contact fields and drop every cached profile."""
        self._require(contact_id, "contact_id", "Contact ID is required")
        fields = user_to_fields(updates)
        if not fields:
            raise ValidationException("No contact fields to update")
        with self._store_errors("updating user", missing=("user", contact_id), contact_id=contact_id):
            record = await self._table().update(contact_id, fields)
        await self._on_after_write()
        return normalize_user(record)

    async def update_user_profile(
        self, contact_id: str, updates: dict[str, Any]
    ) -> UserProfile:
        """Update self-service profile fields (names, referral source)."""
        disallowed = sorted(set(updates) - PROFILE_FIELDS)
        if disallowed:
            raise ValidationException(
                f"Field cannot be changed on a profile: {disallowed[0]}", field=disallowed[0]
            )
        return await self.update_user(contact_id, updates)

    async def update_onboarding_status(
        self, contact_id: str, status: str = OnboardingStatus.APPLIED.value
    ) -> UserProfile:
        if status not in {s.value for s in OnboardingStatus}:
            raise ValidationException(f"Invalid onboarding status: {status}", field="status")
        logger.info("Setting onboarding status of %s to %s", contact_id, status)
        return await self.update_user(contact_id, {"onboarding_status": status})

    async def link_auth0_id(self, contact_id: str, auth0_id: str) -> UserProfile:
        """Store the Auth0 subject on a contact found by email."""
        self._require(auth0_id, "auth0_id", "Auth0 ID is required")
        return await self.update_user(contact_id, {"auth0_id": auth0_id})
