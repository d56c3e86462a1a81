"""Repository tests against a fake record store.

Checks that required ids are validated before any store call, that get_*
reads are served from cache within the TTL, that writes invalidate, and
that store failures surface as RecordStoreException with context.
"""

from datetime import date

import pytest

from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.airtable import tables
from app.infrastructure.airtable._rest_client import AirtableAPIError
from app.infrastructure.airtable.normalizers import normalize_transaction
from app.infrastructure.airtable.repositories import (
    ApplicationRepository,
    CohortRepository,
    EducationRepository,
    EventRepository,
    InstitutionRepository,
    ParticipationRepository,
    PartnershipRepository,
    PointsRepository,
    ResourceRepository,
    SubmissionRepository,
    TeamRepository,
    UserRepository,
)
from app.infrastructure.airtable.repositories.points_repo import summarize_points
from app.infrastructure.exceptions import RecordStoreException


# ---- Submissions ----


async def test_fetch_submissions_by_team_without_rows_returns_empty_list(store, cache) -> None:
    repo = SubmissionRepository(store, cache)
    assert await repo.fetch_submissions_by_team("team123") == []
    kwargs = store.table(tables.SUBMISSIONS).select.await_args.kwargs
    assert kwargs["formula"] == '{Team Record ID}="team123"'
    assert kwargs["sort"] == [("Created Time", "desc")]


async def test_fetch_submissions_by_team_requires_id(store, cache) -> None:
    repo = SubmissionRepository(store, cache)
    with pytest.raises(ValidationException):
        await repo.fetch_submissions_by_team("")
    store.table(tables.SUBMISSIONS).select.assert_not_awaited()


async def test_update_submission_sends_sparse_patch(store, cache, make_record) -> None:
    table = store.table(tables.SUBMISSIONS)
    table.update.return_value = make_record("sub1", **{"Status": "Approved"})
    repo = SubmissionRepository(store, cache)
    updated = await repo.update_submission("sub1", {"status": "Approved"})
    table.update.assert_awaited_once_with("sub1", {"Status": "Approved"})
    assert updated.status == "Approved"


async def test_create_submission_defaults_status(store, cache, make_record) -> None:
    table = store.table(tables.SUBMISSIONS)
    table.create.return_value = make_record("sub2", **{"Status": "Submitted"})
    repo = SubmissionRepository(store, cache)
    await repo.create_submission({"team_id": "recT", "milestone_id": "recM", "text": "Done"})
    fields = table.create.await_args.args[0]
    assert fields == {
        "Status": "Submitted",
        "Team Record ID": "recT",
        "Milestone Record ID": "recM",
        "Submission Text": "Done",
    }


async def test_create_submission_without_milestone_never_calls_store(store, cache) -> None:
    repo = SubmissionRepository(store, cache)
    with pytest.raises(ValidationException) as exc_info:
        await repo.create_submission({"team_id": "recT"})
    assert exc_info.value.details == {"field": "milestone_id"}
    store.table(tables.SUBMISSIONS).create.assert_not_awaited()


# ---- Resources ----


async def test_create_resource_without_name_never_calls_store(store, cache) -> None:
    repo = ResourceRepository(store, cache)
    with pytest.raises(ValidationException):
        await repo.create_resource({})
    store.table(tables.RESOURCES).create.assert_not_awaited()


async def test_available_resources_are_deduplicated(store, cache, make_record) -> None:
    shared = make_record("res1", **{"Name": "Handbook", "Is Global": True})
    table = store.table(tables.RESOURCES)
    table.select.side_effect = [
        [shared],
        [shared, make_record("res2", **{"Name": "Pitch deck", "Initiative Record ID": "prog1"})],
    ]
    repo = ResourceRepository(store, cache)
    resources = await repo.fetch_available_resources(program_id="prog1")
    assert [r.id for r in resources] == ["res1", "res2"]


# ---- Cache behaviour ----


async def test_get_reads_are_cached_within_ttl(store, cache, clock, make_record) -> None:
    table = store.table(tables.TEAMS)
    table.select.return_value = [make_record("recT", **{"Name": "Alpha", "Cohort": ["recCo"]})]
    repo = TeamRepository(store, cache, ttl=60)
    first = await repo.get_teams_by_cohort("recCo")
    second = await repo.get_teams_by_cohort("recCo")
    assert first == second
    assert table.select.await_count == 1
    clock.advance(61)
    await repo.get_teams_by_cohort("recCo")
    assert table.select.await_count == 2


async def test_fetch_reads_bypass_cache(store, cache) -> None:
    repo = TeamRepository(store, cache)
    await repo.fetch_teams_by_cohort("recCo")
    await repo.fetch_teams_by_cohort("recCo")
    assert store.table(tables.TEAMS).select.await_count == 2


async def test_write_invalidates_cached_reads(store, cache, make_record) -> None:
    table = store.table(tables.TEAMS)
    table.select.return_value = [make_record("recT", **{"Name": "Alpha", "Cohort": ["recCo"]})]
    table.update.return_value = make_record("recT", **{"Name": "Beta", "Cohort": ["recCo"]})
    repo = TeamRepository(store, cache)
    await repo.get_teams_by_cohort("recCo")
    await repo.update_team("recT", {"name": "Beta"})
    await repo.get_teams_by_cohort("recCo")
    assert table.select.await_count == 2


async def test_store_failure_is_wrapped_and_not_cached(store, cache) -> None:
    table = store.table(tables.TEAMS)
    table.select.side_effect = [AirtableAPIError(500, "boom"), []]
    repo = TeamRepository(store, cache)
    with pytest.raises(RecordStoreException) as exc_info:
        await repo.get_teams_by_cohort("recCo")
    assert exc_info.value.details["operation"] == "fetching cohort teams"
    assert exc_info.value.details["cohort_id"] == "recCo"
    assert await repo.get_teams_by_cohort("recCo") == []


async def test_write_to_missing_record_is_not_found(store, cache) -> None:
    store.table(tables.RESOURCES).update.side_effect = AirtableAPIError(404, "NOT_FOUND")
    repo = ResourceRepository(store, cache)
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await repo.update_resource("recMissing", {"name": "Handbook"})
    assert exc_info.value.details == {"resource_type": "resource", "resource_id": "recMissing"}


async def test_select_404_stays_a_store_error(store, cache) -> None:
    store.table(tables.TEAMS).select.side_effect = AirtableAPIError(404, "TABLE_NOT_FOUND")
    repo = TeamRepository(store, cache)
    with pytest.raises(RecordStoreException):
        await repo.fetch_teams_by_cohort("recCo")


# ---- Users ----


async def test_user_profile_found_by_email_with_education(store, cache, make_record) -> None:
    store.table(tables.CONTACTS).select.return_value = [
        make_record("recC", **{"Email": "ada@example.com", "Education": ["recE"]})
    ]
    store.table(tables.EDUCATION).find.return_value = make_record(
        "recE", **{"Degree Type": "Bachelors", "Institution": ["recI"]}
    )
    repo = UserRepository(store, cache)
    profile = await repo.get_user_profile("auth0|ada", "Ada@Example.com")
    assert profile.contact_id == "recC"
    assert profile.education.degree_type == "Bachelors"
    formula = store.table(tables.CONTACTS).select.await_args.kwargs["formula"]
    assert formula == 'LOWER({Email})="ada@example.com"'


async def test_user_profile_falls_back_to_auth0_id(store, cache, make_record) -> None:
    store.table(tables.CONTACTS).select.side_effect = [
        [],
        [make_record("recC", **{"Auth0 ID": "auth0|ada"})],
    ]
    repo = UserRepository(store, cache)
    profile = await repo.get_user_profile("auth0|ada", "new@example.com")
    assert profile.auth0_id == "auth0|ada"


async def test_user_profile_requires_an_identifier(store, cache) -> None:
    repo = UserRepository(store, cache)
    with pytest.raises(ValidationException):
        await repo.get_user_profile(None, None)
    store.table(tables.CONTACTS).select.assert_not_awaited()


async def test_update_user_profile_rejects_protected_fields(store, cache) -> None:
    repo = UserRepository(store, cache)
    with pytest.raises(ValidationException) as exc_info:
        await repo.update_user_profile("recC", {"email": "other@example.com"})
    assert exc_info.value.details == {"field": "email"}
    store.table(tables.CONTACTS).update.assert_not_awaited()


async def test_fetch_users_by_ids_skips_store_for_empty_list(store, cache) -> None:
    repo = UserRepository(store, cache)
    assert await repo.fetch_users_by_ids([]) == []
    store.table(tables.CONTACTS).select.assert_not_awaited()


async def test_fetch_users_by_ids_selects_in_batches_of_ten(store, cache, make_record) -> None:
    ids = [f"recC{i:02d}" for i in range(25)]
    store.table(tables.CONTACTS).select.side_effect = [
        [make_record(cid) for cid in ids[:10]],
        [make_record(cid) for cid in ids[10:20]],
        [make_record(cid) for cid in ids[20:]],
    ]
    repo = UserRepository(store, cache)
    users = await repo.fetch_users_by_ids(ids)
    assert [u.contact_id for u in users] == ids
    calls = store.table(tables.CONTACTS).select.await_args_list
    assert [c.kwargs["formula"].count("RECORD_ID()") for c in calls] == [10, 10, 5]
    assert 'RECORD_ID()="recC20"' in calls[2].kwargs["formula"]


# ---- Education ----


async def test_get_education_is_cached(store, cache, make_record) -> None:
    table = store.table(tables.EDUCATION)
    table.find.return_value = make_record("recE", **{"Degree Type": "Masters", "Contact": ["recC"]})
    repo = EducationRepository(store, cache)
    first = await repo.get_education("recE")
    assert await repo.get_education("recE") == first
    assert first.degree_type == "Masters"
    assert first.contact_id == "recC"
    table.find.assert_awaited_once_with("recE")


async def test_get_education_requires_id(store, cache) -> None:
    repo = EducationRepository(store, cache)
    with pytest.raises(ValidationException):
        await repo.get_education("  ")
    store.table(tables.EDUCATION).find.assert_not_awaited()


# ---- Teams ----


async def test_fetch_team_resolves_members_with_roles(store, cache, make_record) -> None:
    store.table(tables.TEAMS).find.return_value = make_record(
        "recT", **{"Name": "Alpha", "Members": ["recC1", "recC2"]}
    )
    store.table(tables.CONTACTS).select.return_value = [
        make_record("recC2", **{"First Name": "Grace"}),
        make_record("recC1", **{"First Name": "Ada"}),
    ]
    store.table(tables.PARTICIPATION).select.return_value = [
        make_record("recP1", **{"Contacts": ["recC1"], "Team": ["recT"], "Capacity": "Team Lead"}),
    ]
    repo = TeamRepository(store, cache)
    team = await repo.fetch_team("recT")
    assert [m.first_name for m in team.members] == ["Ada", "Grace"]
    assert [m.role for m in team.members] == ["Team Lead", "Member"]
    assert team.members[0].participation_id == "recP1"


async def test_add_team_member_is_idempotent(store, cache, make_record) -> None:
    store.table(tables.TEAMS).find.return_value = make_record("recT", **{"Members": ["recC1"]})
    repo = TeamRepository(store, cache)
    await repo.add_team_member("recT", "recC1")
    store.table(tables.TEAMS).update.assert_not_awaited()


async def test_remove_team_member_not_on_team(store, cache, make_record) -> None:
    store.table(tables.TEAMS).find.return_value = make_record("recT", **{"Members": ["recC1"]})
    repo = TeamRepository(store, cache)
    with pytest.raises(ResourceNotFoundException):
        await repo.remove_team_member("recT", "recC9")


async def test_add_member_to_missing_team(store, cache) -> None:
    repo = TeamRepository(store, cache)
    with pytest.raises(ResourceNotFoundException):
        await repo.add_team_member("recMissing", "recC1")


# ---- Cohorts ----


async def test_current_cohorts_embed_program_once(store, cache, make_record) -> None:
    store.table(tables.COHORTS).select.return_value = [
        make_record("co1", **{"Current Cohort": True, "Initiative": ["prog1"]}),
        make_record("co2", **{"Start Date": "2025-01-01", "End Date": "2025-12-31", "Initiative": ["prog1"]}),
        make_record("co3", **{"Start Date": "2020-01-01", "End Date": "2020-12-31"}),
    ]
    store.table(tables.INITIATIVES).find.return_value = make_record("prog1", **{"Name": "Xcelerate"})
    repo = CohortRepository(store, cache, today=lambda: date(2025, 6, 1))
    cohorts = await repo.fetch_current_cohorts()
    assert [c.id for c in cohorts] == ["co1", "co2"]
    assert cohorts[0].program.name == "Xcelerate"
    assert store.table(tables.INITIATIVES).find.await_count == 1


async def test_milestones_sorted_by_number(store, cache, make_record) -> None:
    store.table(tables.MILESTONES).select.return_value = [
        make_record("m2", **{"Number": 2}),
        make_record("m1", **{"Number": 1}),
    ]
    repo = CohortRepository(store, cache)
    assert [m.id for m in await repo.fetch_milestones_by_cohort("co1")] == ["m1", "m2"]


async def test_cohorts_by_program_keep_exact_program_links(store, cache, make_record) -> None:
    store.table(tables.COHORTS).select.return_value = [
        make_record("co1", **{"Initiative": ["prog1"]}),
        make_record("co2", **{"Initiative": ["prog10"]}),
    ]
    store.table(tables.INITIATIVES).find.return_value = make_record("prog1", **{"Name": "Xcelerate"})
    repo = CohortRepository(store, cache, today=lambda: date(2025, 6, 1))
    cohorts = await repo.fetch_cohorts_by_program("prog1")
    assert [c.id for c in cohorts] == ["co1"]
    assert cohorts[0].program.name == "Xcelerate"
    formula = store.table(tables.COHORTS).select.await_args.kwargs["formula"]
    assert formula == 'FIND("prog1", ARRAYJOIN({Initiative}))'


# ---- Applications and participation ----


async def test_xtrapreneurs_application_is_accepted_immediately(store, cache, make_record) -> None:
    table = store.table(tables.APPLICATIONS)
    table.create.return_value = make_record("app1", **{"Status": "Accepted", "Type": "xtrapreneurs"})
    repo = ApplicationRepository(store, cache)
    await repo.create_application(
        {
            "contact_id": "recC",
            "cohort_id": "co1",
            "type": "xtrapreneurs",
            "reason": "Build things",
            "commitment": "10h/week",
        }
    )
    fields = table.create.await_args.args[0]
    assert fields["Status"] == "Accepted"
    assert fields["Contact"] == ["recC"]
    assert fields["Cohort"] == ["co1"]


async def test_join_team_application_requires_message(store, cache) -> None:
    repo = ApplicationRepository(store, cache)
    with pytest.raises(ValidationException) as exc_info:
        await repo.create_application(
            {"contact_id": "recC", "cohort_id": "co1", "type": "joinTeam", "team_to_join_id": "recT"}
        )
    assert exc_info.value.details == {"field": "join_team_message"}
    store.table(tables.APPLICATIONS).create.assert_not_awaited()


async def test_invalid_application_status_rejected(store, cache) -> None:
    repo = ApplicationRepository(store, cache)
    with pytest.raises(ValidationException):
        await repo.update_application_status("app1", "Maybe")
    store.table(tables.APPLICATIONS).update.assert_not_awaited()


async def test_participation_write_invalidates_profiles(store, cache, make_record) -> None:
    await cache.set("profile:email:ada@example.com", "stale")
    store.table(tables.PARTICIPATION).create.return_value = make_record(
        "recP", **{"Contacts": ["recC"], "Cohorts": ["co1"]}
    )
    repo = ParticipationRepository(store, cache)
    await repo.create_participation({"contact_id": "recC", "cohort_id": "co1"})
    assert await cache.get("profile:email:ada@example.com") is None


async def test_delete_participation_invalidates_profiles(store, cache) -> None:
    await cache.set("profile:email:ada@example.com", "stale")
    store.table(tables.PARTICIPATION).delete.return_value = "recP"
    repo = ParticipationRepository(store, cache)
    assert await repo.delete_participation("recP") == "recP"
    store.table(tables.PARTICIPATION).delete.assert_awaited_once_with("recP")
    assert await cache.get("profile:email:ada@example.com") is None


async def test_delete_missing_participation_is_not_found(store, cache) -> None:
    store.table(tables.PARTICIPATION).delete.side_effect = AirtableAPIError(404, "NOT_FOUND")
    repo = ParticipationRepository(store, cache)
    with pytest.raises(ResourceNotFoundException):
        await repo.delete_participation("recMissing")


# ---- Points ----


def test_summarize_points_counts_completed_only(make_record) -> None:
    transactions = [
        normalize_transaction(make_record("t1", **{"Points": 100, "Status": "Completed"})),
        normalize_transaction(make_record("t2", **{"Points": -30, "Status": "Completed"})),
        normalize_transaction(make_record("t3", **{"Points": 50, "Status": "Pending"})),
    ]
    summary = summarize_points(transactions)
    assert (summary.total_earned, summary.total_spent, summary.available) == (100, 30, 70)
    assert summary.transaction_count == 3


async def test_create_transaction_requires_owner(store, cache) -> None:
    repo = PointsRepository(store, cache)
    with pytest.raises(ValidationException):
        await repo.create_transaction({"points": 10, "type": "Bonus"})
    store.table(tables.POINTS).create.assert_not_awaited()


async def test_team_transactions_newest_first(store, cache, make_record) -> None:
    store.table(tables.POINTS).select.return_value = [
        make_record("t2", **{"Points": 50, "Team Record ID": "recT", "Status": "Completed"}),
        make_record("t1", **{"Points": 20, "Team Record ID": "recT"}),
    ]
    repo = PointsRepository(store, cache)
    transactions = await repo.fetch_transactions_by_team("recT")
    assert [(t.id, t.points, t.team_id) for t in transactions] == [("t2", 50, "recT"), ("t1", 20, "recT")]
    kwargs = store.table(tables.POINTS).select.await_args.kwargs
    assert kwargs["formula"] == '{Team Record ID}="recT"'
    assert kwargs["sort"] == [("Created Time", "desc")]


# ---- Institutions, partnerships, events ----


async def test_short_institution_query_skips_store(store, cache) -> None:
    repo = InstitutionRepository(store, cache)
    assert await repo.search_institutions(" m ") == []
    store.table(tables.INSTITUTIONS).select.assert_not_awaited()


async def test_institution_by_domain_without_at_sign(store, cache) -> None:
    repo = InstitutionRepository(store, cache)
    assert await repo.get_institution_by_domain("not-an-email") is None
    store.table(tables.INSTITUTIONS).select.assert_not_awaited()


async def test_partnerships_fall_back_to_full_scan(store, cache, make_record) -> None:
    store.table(tables.PARTNERSHIPS).select.side_effect = [
        [],
        [
            make_record("pa1", **{"Institution": ["recI"], "Cohorts": ["co1"]}),
            make_record("pa2", **{"Institution": ["recOther"], "Cohorts": ["co2"]}),
        ],
    ]
    repo = PartnershipRepository(store, cache)
    partnerships = await repo.fetch_partnerships_by_institution("recI")
    assert [p.id for p in partnerships] == ["pa1"]


async def test_events_by_user_without_participation(store, cache) -> None:
    repo = EventRepository(store, cache)
    assert await repo.fetch_events_by_user("recC") == []
    store.table(tables.EVENTS).select.assert_not_awaited()
