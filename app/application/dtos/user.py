"""DTOs for user/contact use cases (no dependency on the record store)."""

from dataclasses import dataclass

from app.application.dtos.education import Education


@dataclass(frozen=True)
class UserProfile:
    """Contact read-model with education lookups flattened in.

    education is only filled by the profile read (get_user_profile); plain
    contact lookups leave it None.
    """

    contact_id: str
    email: str
    first_name: str
    last_name: str
    auth0_id: str
    onboarding_status: str
    onboarding_completed: bool
    referral_source: str
    headshot_url: str
    education_ids: list[str]
    participation_ids: list[str]
    cohort_ids: list[str]
    institution_id: str | None
    institution_name: str
    degree_type: str
    major: str
    graduation_year: str
    graduation_semester: str
    education: Education | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
