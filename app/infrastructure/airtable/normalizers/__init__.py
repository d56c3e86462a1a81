"""Entity normalizers: raw record fields <-> application DTOs.

normalize_* maps a StoreRecord (or None) to a fully defaulted DTO (or None);
*_to_fields maps a sparse internal update to a sparse store patch.
"""

from app.infrastructure.airtable.normalizers.cohort import normalize_cohort, normalize_milestone
from app.infrastructure.airtable.normalizers.education import (
    education_to_fields,
    normalize_education,
)
from app.infrastructure.airtable.normalizers.event import event_to_fields, normalize_event
from app.infrastructure.airtable.normalizers.institution import normalize_institution
from app.infrastructure.airtable.normalizers.participation import (
    application_to_fields,
    normalize_application,
    normalize_participation,
    participation_to_fields,
)
from app.infrastructure.airtable.normalizers.partnership import normalize_partnership
from app.infrastructure.airtable.normalizers.points import (
    claim_to_fields,
    normalize_claim,
    normalize_reward,
    normalize_transaction,
    transaction_to_fields,
)
from app.infrastructure.airtable.normalizers.program import normalize_major, normalize_program
from app.infrastructure.airtable.normalizers.resource import normalize_resource, resource_to_fields
from app.infrastructure.airtable.normalizers.submission import (
    normalize_submission,
    submission_to_fields,
)
from app.infrastructure.airtable.normalizers.team import (
    normalize_team,
    normalize_team_member,
    team_to_fields,
)
from app.infrastructure.airtable.normalizers.user import normalize_user, user_to_fields

__all__ = [
    "application_to_fields",
    "claim_to_fields",
    "education_to_fields",
    "event_to_fields",
    "normalize_application",
    "normalize_claim",
    "normalize_cohort",
    "normalize_education",
    "normalize_event",
    "normalize_institution",
    "normalize_major",
    "normalize_milestone",
    "normalize_participation",
    "normalize_partnership",
    "normalize_program",
    "normalize_resource",
    "normalize_reward",
    "normalize_submission",
    "normalize_team",
    "normalize_team_member",
    "normalize_transaction",
    "participation_to_fields",
    "resource_to_fields",
    "submission_to_fields",
    "team_to_fields",
    "transaction_to_fields",
    "user_to_fields",
]
