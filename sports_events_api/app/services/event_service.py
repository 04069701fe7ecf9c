"""
Business logic for events.

Events are owned: every query is scoped to the caller's user id, so an
event belonging to someone else behaves exactly like one that does not
exist.  Venues are attached through the ``event_venues`` link table.

Creating or updating an event writes the event row and the venue links
in two separate commits.  If the second step fails the event keeps its
new values while its links are stale; no compensating rollback is
attempted.

The module-level ``list_events``, ``get_event``, ``create_event``,
``update_event``, ``delete_event`` and ``list_categories`` are the
actions built from the ``EventService`` handlers.
"""

import asyncio
import logging
from typing import List, Optional, Union

from sports_events_api.app.core.actions import create_action
from sports_events_api.app.core.db import get_connection, new_id, to_iso, utcnow
from sports_events_api.app.schemas.event import (
    SPORT_CATEGORIES,
    EventCreate,
    EventLookup,
    EventRead,
    EventSearch,
    EventUpdate,
    EventWithVenues,
)
from sports_events_api.app.schemas.fields import EmptyInput
from sports_events_api.app.schemas.result import (
    Acknowledgement,
    ActionFailure,
    FailureKind,
    failure,
)
from sports_events_api.app.schemas.venue import VenueRead

logger = logging.getLogger(__name__)

EVENT_NOT_FOUND = "Event not found"


def _escape_like(text: str) -> str:
    """Make ``%`` and ``_`` in user input match literally in a LIKE pattern."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class EventService:
    """Handlers for the event actions.

    Each handler receives the validated input and the caller's user id
    and lets database errors propagate to the action wrapper.
    """

    @classmethod
    async def list_events(cls, data: EventSearch, user_id: str) -> List[EventWithVenues]:
        """Return the caller's events with their venues.

        ``query`` matches a case-insensitive substring of the name,
        ``category`` matches exactly; both filters apply together.
        Results are ordered by ``scheduled_at`` ascending.
        """
        sql = "SELECT * FROM events WHERE owner_id = ?"
        params: list = [user_id]
        if data.query:
            sql += " AND casefold(name) LIKE ? ESCAPE '\\'"
            params.append(f"%{_escape_like(data.query.casefold())}%")
        if data.category:
            sql += " AND category = ?"
            params.append(data.category)
        sql += " ORDER BY scheduled_at ASC, created_at ASC"

        conn = get_connection()
        try:
            rows = conn.execute(sql, tuple(params)).fetchall()
        finally:
            conn.close()

        events = [EventRead.model_validate(dict(row)) for row in rows]
        venues = await asyncio.gather(*(cls._venues_for(event.id) for event in events))
        return [
            EventWithVenues(**event.model_dump(), venues=event_venues)
            for event, event_venues in zip(events, venues)
        ]

    @classmethod
    async def get_event(cls, data: EventLookup, user_id: str) -> Optional[EventWithVenues]:
        """Return one of the caller's events, or ``None`` if there is no such event."""
        event = cls._fetch(data.id, user_id)
        if event is None:
            return None
        venues = await cls._venues_for(event.id)
        return EventWithVenues(**event.model_dump(), venues=venues)

    @classmethod
    async def create_event(cls, data: EventCreate, user_id: str) -> EventRead:
        """Insert an event owned by the caller, then link its venues."""
        event_id = new_id()
        now = utcnow()
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO events (id, owner_id, name, category, scheduled_at, description, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event_id,
                    user_id,
                    data.name,
                    data.category,
                    to_iso(data.scheduled_at),
                    data.description,
                    now,
                    now,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("User %s created event %s '%s'", user_id, event_id, data.name)

        cls._replace_venues(event_id, data.venue_ids)
        return cls._fetch(event_id, user_id)

    @classmethod
    async def update_event(cls, data: EventUpdate, user_id: str) -> Union[EventRead, ActionFailure]:
        """Apply the supplied fields to one of the caller's events.

        Fields absent from the input are left untouched.  When
        ``venue_ids`` is supplied the event's venue links are replaced
        by exactly that set.
        """
        changes = data.changes()
        if "scheduled_at" in changes:
            changes["scheduled_at"] = to_iso(changes["scheduled_at"])
        changes["updated_at"] = utcnow()
        assignments = ", ".join(f"{column} = ?" for column in changes)

        conn = get_connection()
        try:
            cursor = conn.execute(
                f"UPDATE events SET {assignments} WHERE id = ? AND owner_id = ?",
                (*changes.values(), data.id, user_id),
            )
            updated = cursor.rowcount
            conn.commit()
        finally:
            conn.close()
        if not updated:
            return failure(EVENT_NOT_FOUND, FailureKind.NOT_FOUND)
        logger.info("User %s updated event %s (%s)", user_id, data.id, ", ".join(changes))

        if data.venue_ids is not None:
            cls._replace_venues(data.id, data.venue_ids)
        return cls._fetch(data.id, user_id)

    @classmethod
    async def delete_event(cls, data: EventLookup, user_id: str) -> Acknowledgement:
        """Delete one of the caller's events.

        Deleting an event that does not exist (or is not the caller's)
        is not an error.  Venue links go with the event.
        """
        conn = get_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM events WHERE id = ? AND owner_id = ?",
                (data.id, user_id),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("User %s deleted event %s (%s row(s))", user_id, data.id, cursor.rowcount)
        return Acknowledgement()

    @classmethod
    async def list_categories(cls, data: EmptyInput, user_id: Optional[str]) -> List[str]:
        """Suggested sport categories, in display order."""
        return list(SPORT_CATEGORIES)

    @staticmethod
    def _fetch(event_id: str, user_id: str) -> Optional[EventRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM events WHERE id = ? AND owner_id = ?",
                (event_id, user_id),
            ).fetchone()
        finally:
            conn.close()
        return EventRead.model_validate(dict(row)) if row else None

    @staticmethod
    async def _venues_for(event_id: str) -> List[VenueRead]:
        conn = get_connection()
        try:
            rows = conn.execute(
                """
                SELECT v.id, v.name, v.address, v.created_at
                FROM event_venues ev JOIN venues v ON v.id = ev.venue_id
                WHERE ev.event_id = ?
                ORDER BY v.name ASC
                """,
                (event_id,),
            ).fetchall()
        finally:
            conn.close()
        return [VenueRead.model_validate(dict(row)) for row in rows]

    @staticmethod
    def _replace_venues(event_id: str, venue_ids: List[str]) -> None:
        """Delete every link of the event, then insert ``venue_ids``.

        The insert is skipped when ``venue_ids`` is empty.  Both
        statements run in one commit, separate from the event write.
        """
        conn = get_connection()
        try:
            conn.execute("DELETE FROM event_venues WHERE event_id = ?", (event_id,))
            if venue_ids:
                conn.executemany(
                    "INSERT INTO event_venues (id, event_id, venue_id) VALUES (?, ?, ?)",
                    [(new_id(), event_id, venue_id) for venue_id in venue_ids],
                )
            conn.commit()
        finally:
            conn.close()


list_events = create_action(EventSearch, EventService.list_events, name="list_events")
get_event = create_action(EventLookup, EventService.get_event, name="get_event")
create_event = create_action(EventCreate, EventService.create_event, name="create_event")
update_event = create_action(EventUpdate, EventService.update_event, name="update_event")
delete_event = create_action(EventLookup, EventService.delete_event, name="delete_event")
list_categories = create_action(
    EmptyInput, EventService.list_categories, require_auth=False, name="list_categories"
)
