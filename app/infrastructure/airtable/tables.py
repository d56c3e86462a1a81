"""Logical table names for the Airtable base.

Repositories address tables by these names; the REST client resolves them
to table ids from settings (AIRTABLE_<NAME>_TABLE_ID).
"""

CONTACTS = "contacts"
EDUCATION = "education"
INSTITUTIONS = "institutions"
PROGRAMS = "programs"  # majors / degree programs
INITIATIVES = "initiatives"
COHORTS = "cohorts"
PARTICIPATION = "participation"
TEAMS = "teams"
PARTNERSHIPS = "partnerships"
APPLICATIONS = "applications"
MILESTONES = "milestones"
SUBMISSIONS = "submissions"
RESOURCES = "resources"
EVENTS = "events"
POINTS = "points"
REWARDS = "rewards"
CLAIMED_REWARDS = "claimed_rewards"

ALL_TABLES = (
    CONTACTS,
    EDUCATION,
    INSTITUTIONS,
    PROGRAMS,
    INITIATIVES,
    COHORTS,
    PARTICIPATION,
    TEAMS,
    PARTNERSHIPS,
    APPLICATIONS,
    MILESTONES,
    SUBMISSIONS,
    RESOURCES,
    EVENTS,
    POINTS,
    REWARDS,
    CLAIMED_REWARDS,
)
