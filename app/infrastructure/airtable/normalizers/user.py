"""Contact (user) normalizer."""

from typing import Any, TypedDict

from app.application.dtos.user import UserProfile
from app.domain.enums import OnboardingStatus
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import (
    attachments_from,
    build_patch,
    first_id,
    link,
    read_fields,
)

ContactFields = TypedDict(
    "ContactFields",
    {
        "Email": str,
        "First Name": str,
        "Last Name": str,
        "Auth0 ID": str,
        "Onboarding": str,
        "Referral Source": str,
        "Headshot": list[dict],
        "Education": list[str],
        "Participation": list[str],
        "Cohorts (from Participation)": list[str],
        "Institution (from Education)": list[str],
        "Name (from Institution) (from Education)": str,
        "Degree Type (from Education)": str,
        "Major (from Education)": str,
        "Graduation Year (from Education)": str,
        "Graduation Semester (from Education)": str,
    },
    total=False,
)

FIELD_MAP: dict[str, str] = {
    "email": "Email",
    "first_name": "First Name",
    "last_name": "Last Name",
    "auth0_id": "Auth0 ID",
    "onboarding_status": "Onboarding",
    "referral_source": "Referral Source",
    "education_ids": "Education",
}

_CONVERTERS = {"education_ids": link}


def normalize_user(record: StoreRecord | None) -> UserProfile | None:
    if record is None:
        return None
    raw = read_fields(record.fields, ContactFields)
    participation = raw.get("Participation", [])
    onboarding = raw.get("Onboarding") or OnboardingStatus.REGISTERED.value
    headshots = attachments_from(raw.get("Headshot"))
    return UserProfile(
        contact_id=record.id,
        email=raw.get("Email", ""),
        first_name=raw.get("First Name", ""),
        last_name=raw.get("Last Name", ""),
        auth0_id=raw.get("Auth0 ID", ""),
        onboarding_status=onboarding,
        onboarding_completed=onboarding == OnboardingStatus.APPLIED.value or bool(participation),
        referral_source=raw.get("Referral Source", ""),
        headshot_url=headshots[0].url if headshots else "",
        education_ids=raw.get("Education", []),
        participation_ids=participation,
        cohort_ids=raw.get("Cohorts (from Participation)", []),
        institution_id=first_id(raw.get("Institution (from Education)")),
        institution_name=raw.get("Name (from Institution) (from Education)", ""),
        degree_type=raw.get("Degree Type (from Education)", ""),
        major=raw.get("Major (from Education)", ""),
        graduation_year=raw.get("Graduation Year (from Education)", ""),
        graduation_semester=raw.get("Graduation Semester (from Education)", ""),
    )


def user_to_fields(updates: dict[str, Any]) -> dict[str, Any]:
    return build_patch(updates, FIELD_MAP, entity="user", converters=_CONVERTERS)
