"""Tests for the event actions."""

from sports_events_api.app.core.db import get_connection
from sports_events_api.app.core.security import resolve_principal
from sports_events_api.app.schemas.event import SPORT_CATEGORIES
from sports_events_api.app.schemas.result import Acknowledgement, FailureKind
from sports_events_api.app.services import event_service, venue_service

MISSING_EVENT = "3d6f0a8e-1b2c-4d5e-8f90-a1b2c3d4e5f6"


async def make_venue(context, name="Arena"):
    result = await venue_service.create_venue({"name": name, "address": f"{name} Street 1"}, context)
    assert result.ok, result
    return result.value


async def make_event(context, venue_ids, **fields):
    payload = {
        "name": "Finals",
        "category": "Basketball",
        "scheduled_at": "2025-06-01T18:00:00Z",
        "venue_ids": venue_ids,
    }
    payload.update(fields)
    result = await event_service.create_event(payload, context)
    assert result.ok, result
    return result.value


def link_rows(event_id):
    conn = get_connection()
    try:
        return sorted(
            row["venue_id"]
            for row in conn.execute("SELECT venue_id FROM event_venues WHERE event_id = ?", (event_id,))
        )
    finally:
        conn.close()


class TestCreateEvent:
    async def test_create_sets_owner_and_id(self, alice, venue):
        event = await make_event(alice, [venue.id])
        principal = await resolve_principal(alice)
        assert event.id
        assert event.owner_id == principal.id
        assert event.category == "Basketball"
        assert event.scheduled_at == "2025-06-01T18:00:00.000Z"
        assert event.description is None
        assert link_rows(event.id) == [venue.id]

    async def test_created_event_is_immediately_usable(self, alice, venue):
        event = await make_event(alice, [venue.id])
        fetched = await event_service.get_event({"id": event.id}, alice)
        assert fetched.ok
        assert fetched.value.id == event.id
        assert [v.id for v in fetched.value.venues] == [venue.id]

    async def test_no_venues(self, alice):
        result = await event_service.create_event(
            {"name": "Finals", "category": "Basketball", "scheduled_at": "2025-06-01T18:00:00Z", "venue_ids": []},
            alice,
        )
        assert not result.ok
        assert result.error == "At least one venue is required"
        assert result.kind == FailureKind.VALIDATION

    async def test_unknown_venue_leaves_event_without_links(self, alice):
        """The event row is committed before the links; a bad link does not undo it."""
        result = await event_service.create_event(
            {
                "name": "Finals",
                "category": "Basketball",
                "scheduled_at": "2025-06-01T18:00:00Z",
                "venue_ids": [MISSING_EVENT],
            },
            alice,
        )
        assert not result.ok
        assert result.kind == FailureKind.PERSISTENCE
        listed = await event_service.list_events({}, alice)
        assert [e.name for e in listed.value] == ["Finals"]
        assert listed.value[0].venues == []

    async def test_empty_description_is_stored_as_none(self, alice, venue):
        event = await make_event(alice, [venue.id], description="")
        assert event.description is None

    async def test_date_outside_storable_range_is_invalid(self, alice, venue):
        for scheduled_at in ("9999-12-31T23:00:00-05:00", "0999-06-01T00:00:00Z"):
            result = await event_service.create_event(
                {"name": "Finals", "category": "Basketball", "scheduled_at": scheduled_at, "venue_ids": [venue.id]},
                alice,
            )
            assert result.error == "Invalid date and time"
            assert result.kind == FailureKind.VALIDATION
        listed = await event_service.list_events({}, alice)
        assert listed.value == []

    async def test_requires_session(self, venue):
        result = await event_service.create_event(
            {"name": "Finals", "category": "Basketball", "scheduled_at": "2025-06-01T18:00:00Z", "venue_ids": [venue.id]}
        )
        assert result.error == "Unauthorized"


class TestListEvents:
    async def test_query_is_case_insensitive_substring(self, alice, venue):
        await make_event(alice, [venue.id])
        await make_event(alice, [venue.id], name="Opening game")
        result = await event_service.list_events({"query": "fin"}, alice)
        assert result.ok
        assert [e.name for e in result.value] == ["Finals"]
        assert result.value[0].venues[0].name == venue.name

    async def test_filters_are_conjunctive(self, alice, venue):
        await make_event(alice, [venue.id], name="Finals", category="Basketball")
        await make_event(alice, [venue.id], name="Finals", category="Tennis")
        await make_event(alice, [venue.id], name="Quarter", category="Tennis")
        result = await event_service.list_events({"query": "FINALS", "category": "Tennis"}, alice)
        assert [(e.name, e.category) for e in result.value] == [("Finals", "Tennis")]

    async def test_category_is_exact(self, alice, venue):
        await make_event(alice, [venue.id], category="Basketball")
        result = await event_service.list_events({"category": "basket"}, alice)
        assert result.value == []

    async def test_wildcards_match_literally(self, alice, venue):
        await make_event(alice, [venue.id], name="Finals")
        await make_event(alice, [venue.id], name="100% effort")
        result = await event_service.list_events({"query": "%"}, alice)
        assert [e.name for e in result.value] == ["100% effort"]

    async def test_query_matches_case_beyond_ascii(self, alice, venue):
        await make_event(alice, [venue.id], name="Équipe Finale")
        await make_event(alice, [venue.id], name="Straßenlauf")
        await make_event(alice, [venue.id], name="Opening game")
        by_accent = await event_service.list_events({"query": "éQUIPE"}, alice)
        assert [e.name for e in by_accent.value] == ["Équipe Finale"]
        by_fold = await event_service.list_events({"query": "STRASSE"}, alice)
        assert [e.name for e in by_fold.value] == ["Straßenlauf"]

    async def test_ordered_by_schedule(self, alice, venue):
        await make_event(alice, [venue.id], name="Late", scheduled_at="2025-09-01T10:00:00Z")
        await make_event(alice, [venue.id], name="Early", scheduled_at="2025-03-01T10:00:00+02:00")
        await make_event(alice, [venue.id], name="Middle", scheduled_at="2025-06-01T10:00:00Z")
        result = await event_service.list_events(None, alice)
        assert [e.name for e in result.value] == ["Early", "Middle", "Late"]

    async def test_only_own_events(self, alice, bob, venue):
        await make_event(alice, [venue.id], name="Alice game")
        await make_event(bob, [venue.id], name="Bob game")
        result = await event_service.list_events({}, bob)
        assert [e.name for e in result.value] == ["Bob game"]

    async def test_each_event_has_its_venues(self, alice):
        a = await make_venue(alice, "Arena")
        b = await make_venue(alice, "Bowl")
        await make_event(alice, [a.id], name="One", scheduled_at="2025-01-01T00:00:00Z")
        await make_event(alice, [a.id, b.id], name="Two", scheduled_at="2025-01-02T00:00:00Z")
        result = await event_service.list_events({}, alice)
        assert [[v.name for v in e.venues] for e in result.value] == [["Arena"], ["Arena", "Bowl"]]


class TestGetEvent:
    async def test_absent_event_is_success_with_none(self, alice):
        result = await event_service.get_event({"id": MISSING_EVENT}, alice)
        assert result.ok
        assert result.value is None

    async def test_other_owner_sees_nothing(self, alice, bob, venue):
        event = await make_event(alice, [venue.id])
        result = await event_service.get_event({"id": event.id}, bob)
        assert result.ok
        assert result.value is None

    async def test_invalid_id(self, alice):
        result = await event_service.get_event({"id": "abc"}, alice)
        assert result.error == "Invalid event ID"


class TestUpdateEvent:
    async def test_partial_update_keeps_other_fields(self, alice, venue):
        event = await make_event(alice, [venue.id], description="Home game")
        result = await event_service.update_event({"id": event.id, "name": "Grand Finals"}, alice)
        assert result.ok, result
        updated = result.value
        assert updated.name == "Grand Finals"
        assert updated.category == event.category
        assert updated.scheduled_at == event.scheduled_at
        assert updated.description == "Home game"
        assert updated.updated_at >= event.updated_at
        assert link_rows(event.id) == [venue.id]

    async def test_description_can_be_cleared(self, alice, venue):
        event = await make_event(alice, [venue.id], description="Home game")
        result = await event_service.update_event({"id": event.id, "description": None}, alice)
        assert result.value.description is None

    async def test_empty_description_clears_it(self, alice, venue):
        event = await make_event(alice, [venue.id], description="Home game")
        result = await event_service.update_event({"id": event.id, "description": ""}, alice)
        assert result.value.description is None

    async def test_replaces_venue_set(self, alice):
        a = await make_venue(alice, "Arena")
        b = await make_venue(alice, "Bowl")
        event = await make_event(alice, [a.id])
        result = await event_service.update_event({"id": event.id, "venue_ids": [b.id]}, alice)
        assert result.ok
        assert link_rows(event.id) == [b.id]

    async def test_same_venue_list_twice_is_idempotent(self, alice):
        a = await make_venue(alice, "Arena")
        b = await make_venue(alice, "Bowl")
        event = await make_event(alice, [a.id])
        for _ in range(2):
            result = await event_service.update_event({"id": event.id, "venue_ids": [a.id, b.id, a.id]}, alice)
            assert result.ok
        assert link_rows(event.id) == sorted([a.id, b.id])

    async def test_foreign_event_is_not_found(self, alice, bob, venue):
        event = await make_event(alice, [venue.id])
        result = await event_service.update_event({"id": event.id, "name": "Hijacked"}, bob)
        assert not result.ok
        assert result.error == "Event not found"
        assert result.kind == FailureKind.NOT_FOUND
        mine = await event_service.get_event({"id": event.id}, alice)
        assert mine.value.name == "Finals"

    async def test_missing_event_is_not_found(self, alice):
        result = await event_service.update_event({"id": MISSING_EVENT, "name": "Ghost"}, alice)
        assert result.error == "Event not found"


class TestDeleteEvent:
    async def test_delete_removes_event_and_links(self, alice, venue):
        event = await make_event(alice, [venue.id])
        result = await event_service.delete_event({"id": event.id}, alice)
        assert result.ok
        assert result.value == Acknowledgement()
        assert (await event_service.get_event({"id": event.id}, alice)).value is None
        assert link_rows(event.id) == []

    async def test_delete_missing_event_succeeds(self, alice):
        result = await event_service.delete_event({"id": MISSING_EVENT}, alice)
        assert result.ok

    async def test_cannot_delete_foreign_event(self, alice, bob, venue):
        event = await make_event(alice, [venue.id])
        await event_service.delete_event({"id": event.id}, bob)
        assert (await event_service.get_event({"id": event.id}, alice)).value is not None

    async def test_non_uuid_id_is_rejected(self, alice):
        result = await event_service.delete_event({"id": "nonexistent-uuid"}, alice)
        assert result.error == "Invalid event ID"


class TestCategories:
    async def test_public(self):
        result = await event_service.list_categories()
        assert result.ok
        assert result.value == list(SPORT_CATEGORIES)
