"""Entity normalizers: total over raw input, defaults applied, sparse patches."""

from datetime import UTC, date, datetime

import pytest

from app.domain.exceptions import ValidationException
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers import (
    application_to_fields,
    claim_to_fields,
    education_to_fields,
    event_to_fields,
    normalize_application,
    normalize_claim,
    normalize_cohort,
    normalize_education,
    normalize_event,
    normalize_milestone,
    normalize_participation,
    normalize_resource,
    normalize_reward,
    normalize_submission,
    normalize_team,
    normalize_transaction,
    normalize_user,
    participation_to_fields,
    resource_to_fields,
    submission_to_fields,
    team_to_fields,
    transaction_to_fields,
    user_to_fields,
)
from app.infrastructure.airtable.normalizers import education as education_normalizer
from app.infrastructure.airtable.normalizers import event as event_normalizer
from app.infrastructure.airtable.normalizers import participation as participation_normalizer
from app.infrastructure.airtable.normalizers import points as points_normalizer
from app.infrastructure.airtable.normalizers import resource as resource_normalizer
from app.infrastructure.airtable.normalizers import submission as submission_normalizer
from app.infrastructure.airtable.normalizers import team as team_normalizer
from app.infrastructure.airtable.normalizers import user as user_normalizer
from app.infrastructure.airtable.normalizers._fields import read_fields, writable_values
from app.infrastructure.airtable.normalizers.submission import SubmissionFields

ALL_NORMALIZERS = [
    normalize_application,
    normalize_claim,
    normalize_cohort,
    normalize_education,
    normalize_event,
    normalize_milestone,
    normalize_participation,
    normalize_resource,
    normalize_reward,
    normalize_submission,
    normalize_team,
    normalize_transaction,
    normalize_user,
]


@pytest.mark.parametrize("normalize", ALL_NORMALIZERS)
def test_none_record_maps_to_none(normalize) -> None:
    assert normalize(None) is None


@pytest.mark.parametrize("normalize", ALL_NORMALIZERS)
def test_empty_record_yields_defaults(normalize) -> None:
    """Every normalizer accepts a record with no fields at all."""
    out = normalize(StoreRecord("rec1", {}))
    record_id = out.id if hasattr(out, "id") else out.contact_id
    assert record_id == "rec1"


def test_user_defaults_and_onboarding(make_record) -> None:
    user = normalize_user(make_record("recC", **{"Email": "ada@example.com"}))
    assert user.contact_id == "recC"
    assert user.first_name == ""
    assert user.onboarding_status == "Registered"
    assert user.onboarding_completed is False
    assert user.education_ids == []
    assert user.institution_id is None


def test_user_with_participation_counts_as_onboarded(make_record) -> None:
    user = normalize_user(make_record("recC", **{"Participation": ["recP1"]}))
    assert user.onboarding_completed is True


def test_lookup_lists_collapse_to_scalars(make_record) -> None:
    """Lookup columns arrive as lists; scalar fields take the first item."""
    user = normalize_user(
        make_record(
            "recC",
            **{
                "Name (from Institution) (from Education)": ["State University"],
                "Graduation Year (from Education)": [2026],
                "Institution (from Education)": ["recI1"],
            },
        )
    )
    assert user.institution_name == "State University"
    assert user.graduation_year == "2026"
    assert user.institution_id == "recI1"


def test_ill_typed_values_fall_back_to_defaults(make_record) -> None:
    team = normalize_team(make_record("recT", **{"Name": {"bad": True}, "Members": "recC1"}))
    assert team.name == "Unnamed Team"
    assert team.member_ids == ["recC1"]


def test_read_fields_ignores_unknown_keys() -> None:
    raw = read_fields({"Status": "Approved", "Surprise": 1}, SubmissionFields)
    assert raw == {"Status": "Approved"}


def test_normalize_is_idempotent_on_shared_fields(make_record) -> None:
    """Normalizing the same record twice gives equal DTOs."""
    rec = make_record(
        "recS",
        **{"Team Record ID": "recT", "Milestone Record ID": "recM", "Status": "Submitted"},
    )
    assert normalize_submission(rec) == normalize_submission(rec)


_FILE = {"id": "att1", "url": "https://files/a.pdf", "filename": "a.pdf"}

ROUND_TRIP_CASES = [
    pytest.param(
        normalize_user, user_to_fields, user_normalizer.FIELD_MAP,
        {
            "Email": "ada@example.com", "First Name": "Ada", "Last Name": "Lovelace",
            "Auth0 ID": "auth0|ada", "Onboarding": "Applied", "Referral Source": "Friend",
            "Education": ["recE"],
        },
        id="user",
    ),
    pytest.param(
        normalize_education, education_to_fields, education_normalizer.FIELD_MAP,
        {
            "Contact": ["recC"], "Institution": ["recI"], "Degree Type": "Masters",
            "Major": ["recMj"], "Graduation Year": "2026", "Graduation Semester": "Spring",
        },
        id="education",
    ),
    pytest.param(
        normalize_team, team_to_fields, team_normalizer.FIELD_MAP,
        {
            "Name": "Rocket", "Description": "Fast", "Members": ["recC1", "recC2"],
            "Cohort": ["recCo"], "Initiative": ["recP"],
        },
        id="team",
    ),
    pytest.param(
        normalize_submission, submission_to_fields, submission_normalizer.FIELD_MAP,
        {
            "Team Record ID": "recT", "Milestone Record ID": "recM", "Submission Text": "Done",
            "Submission Link": "https://example.com/deck", "Files": [_FILE],
            "Status": "Approved", "Feedback": "Nice",
        },
        id="submission",
    ),
    pytest.param(
        normalize_resource, resource_to_fields, resource_normalizer.FIELD_MAP,
        {
            "Name": "Handbook", "Description": "Read me", "URL": "https://example.com/h",
            "Type": "Document", "Category": "Guides", "Is Global": False,
            "Cohort Record ID": "recCo", "Cohort Name": "Spring", "File Attachments": [_FILE],
        },
        id="resource",
    ),
    pytest.param(
        normalize_event, event_to_fields, event_normalizer.FIELD_MAP,
        {
            "Name": "Demo Day", "Description": "Pitches", "Start Date/Time": "2025-05-01T17:00:00.000Z",
            "End Date/Time": "2025-05-01T19:00:00.000Z", "Location": "Hall A", "Type": "Showcase",
            "Status": "Scheduled", "Initiative Record ID": "recP", "Initiative Name": "Xcelerate",
        },
        id="event",
    ),
    pytest.param(
        normalize_participation, participation_to_fields, participation_normalizer.PARTICIPATION_FIELD_MAP,
        {
            "Contacts": ["recC"], "Cohorts": ["recCo"], "Initiative": ["recP"], "Team": ["recT"],
            "Status": "Active", "Capacity": "Team Lead",
        },
        id="participation",
    ),
    pytest.param(
        normalize_application, application_to_fields, participation_normalizer.APPLICATION_FIELD_MAP,
        {
            "Contact": ["recC"], "Cohort": ["recCo"], "Status": "Submitted", "Type": "Join Team",
            "Team to Join": ["recT"], "Join Team Message": "Let me in",
        },
        id="application",
    ),
    pytest.param(
        normalize_transaction, transaction_to_fields, points_normalizer.TRANSACTION_FIELD_MAP,
        {
            "Points": 100, "Type": "Milestone", "Description": "Shipped", "Status": "Completed",
            "User Auth0 ID": "auth0|ada", "Milestone Record ID": "recM", "Milestone Name": "MVP",
        },
        id="transaction",
    ),
    pytest.param(
        normalize_claim, claim_to_fields, points_normalizer.CLAIM_FIELD_MAP,
        {
            "User Auth0 ID": "auth0|ada", "Reward Record ID": "recR", "Reward Name": "Hoodie",
            "Points Used": 300, "Status": "Fulfilled", "Delivery Details": "Front desk",
            "Fulfilled Date": "2025-03-01",
        },
        id="claim",
    ),
]


@pytest.mark.parametrize("sparse", [False, True], ids=["full", "sparse"])
@pytest.mark.parametrize("normalize, to_fields, field_map, fields", ROUND_TRIP_CASES)
def test_writing_back_normalized_values_normalizes_to_the_same_dto(
    normalize, to_fields, field_map, fields, sparse, make_record
) -> None:
    """A patch built from a DTO's writable values reads back as the same DTO."""
    dto = normalize(make_record("rec1", **({} if sparse else fields)))
    patch = to_fields(writable_values(dto, field_map))
    assert set(patch) == set(field_map.values())
    assert normalize(make_record("rec1", **patch)) == dto


def test_submission_attachments(make_record) -> None:
    sub = normalize_submission(
        make_record(
            "recS",
            **{
                "Files": [
                    {"id": "att1", "url": "https://files/a.pdf", "filename": "a.pdf", "size": 12, "type": "application/pdf"},
                    {"id": "att2", "filename": "no-url.pdf"},
                ]
            },
        )
    )
    assert len(sub.files) == 1
    assert sub.files[0].filename == "a.pdf"
    assert sub.files[0].content_type == "application/pdf"
    assert sub.status == "Pending"


def test_cohort_current_from_flag_or_date_range(make_record) -> None:
    flagged = normalize_cohort(make_record("rec1", **{"Current Cohort": True}), today=date(2025, 1, 1))
    in_range = normalize_cohort(
        make_record("rec2", **{"Start Date": "2025-01-01", "End Date": "2025-06-30"}),
        today=date(2025, 3, 1),
    )
    past = normalize_cohort(
        make_record("rec3", **{"Start Date": "2024-01-01", "End Date": "2024-06-30"}),
        today=date(2025, 3, 1),
    )
    assert flagged.is_current is True
    assert in_range.is_current is True
    assert past.is_current is False
    assert past.name == "Unnamed Cohort"


def test_milestone_status_late_after_due(make_record) -> None:
    now = datetime(2025, 3, 1, tzinfo=UTC)
    late = normalize_milestone(make_record("recM1", **{"Due Datetime": "2025-02-01T12:00:00.000Z"}), now=now)
    upcoming = normalize_milestone(make_record("recM2", **{"Due Datetime": "2025-04-01T12:00:00.000Z"}), now=now)
    undated = normalize_milestone(make_record("recM3"), now=now)
    assert late.status == "late"
    assert upcoming.status == "upcoming"
    assert undated.status == "upcoming"


def test_resource_scope(make_record) -> None:
    assert normalize_resource(make_record("r1", **{"Is Global": True, "Cohort Record ID": "c"})).scope == "global"
    assert normalize_resource(make_record("r2", **{"Cohort Record ID": "c"})).scope == "cohort"
    assert normalize_resource(make_record("r3", **{"Initiative Record ID": "p"})).scope == "program"


def test_transaction_points_from_numeric_text(make_record) -> None:
    tx = normalize_transaction(make_record("recX", **{"Points": "-25", "Status": "Completed"}))
    assert tx.points == -25
    assert tx.type == "Unknown"


def test_participation_and_application_defaults(make_record) -> None:
    participation = normalize_participation(make_record("recP", **{"Cohort": ["recCo"]}))
    application = normalize_application(make_record("recA"))
    assert participation.cohort_id == "recCo"
    assert participation.capacity == "Participant"
    assert application.status == "Submitted"


def test_empty_patch_has_no_keys() -> None:
    assert submission_to_fields({}) == {}
    assert user_to_fields({}) == {}


def test_patch_contains_only_given_fields() -> None:
    assert submission_to_fields({"status": "Approved"}) == {"Status": "Approved"}


def test_patch_wraps_links_in_lists() -> None:
    assert team_to_fields({"member_ids": "recC1", "cohort_ids": None}) == {
        "Members": ["recC1"],
        "Cohort": [],
    }


def test_patch_rejects_unknown_field() -> None:
    with pytest.raises(ValidationException) as exc_info:
        resource_to_fields({"colour": "red"})
    assert exc_info.value.details == {"field": "colour"}


def test_attachment_patch_requires_url() -> None:
    with pytest.raises(ValidationException):
        submission_to_fields({"files": [{"filename": "a.pdf"}]})
    assert submission_to_fields({"files": [{"url": "https://f/a.pdf", "filename": "a.pdf"}]}) == {
        "Files": [{"url": "https://f/a.pdf", "filename": "a.pdf"}]
    }
