"""Domain enumerations for the dashboard.

Values match the strings stored in the record store's single-select
columns, so members can be written to and compared with raw fields.
"""

from enum import Enum


class OnboardingStatus(str, Enum):
    """Contact onboarding progress ("Onboarding" column)."""

    REGISTERED = "Registered"
    APPLIED = "Applied"


class ApplicationType(str, Enum):
    """Kinds of cohort application; each has its own required fields."""

    INDIVIDUAL = "individual"
    TEAM = "team"
    JOIN_TEAM = "joinTeam"
    XTRAPRENEURS = "xtrapreneurs"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid type values as strings."""
        return [t.value for t in cls]


class ApplicationStatus(str, Enum):
    SUBMITTED = "Submitted"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"


class SubmissionStatus(str, Enum):
    PENDING = "Pending"
    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    NEEDS_REVISION = "Needs Revision"


class TransactionStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class MilestoneStatus(str, Enum):
    UPCOMING = "upcoming"
    LATE = "late"


class ResourceScope(str, Enum):
    """Where a resource or event is visible."""

    GLOBAL = "global"
    PROGRAM = "program"
    COHORT = "cohort"


# Points transaction type recorded when a reward is claimed
REWARD_CLAIM_TRANSACTION_TYPE = "Reward Claim"
TEAM_LEAD_CAPACITY = "Team Lead"
