"""
Business logic for venues.

Venues are shared reference data: they have no owner, so handlers
ignore the caller's id beyond requiring that there is one.
"""

import logging
from typing import List, Optional

from sports_events_api.app.core.actions import create_action
from sports_events_api.app.core.db import get_connection, new_id, utcnow
from sports_events_api.app.core.errors import NotFoundError
from sports_events_api.app.schemas.venue import VenueCreate, VenueList, VenueRead, VenueUpdate

logger = logging.getLogger(__name__)

VENUE_NOT_FOUND = "Venue not found"


class VenueService:
    """Handlers for the venue actions."""

    @classmethod
    async def list_venues(cls, data: VenueList, user_id: Optional[str]) -> List[VenueRead]:
        """Return every venue ordered by name."""
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT id, name, address, created_at FROM venues ORDER BY name ASC"
            ).fetchall()
        finally:
            conn.close()
        return [VenueRead.model_validate(dict(row)) for row in rows]

    @classmethod
    async def create_venue(cls, data: VenueCreate, user_id: Optional[str]) -> VenueRead:
        venue = VenueRead(id=new_id(), name=data.name, address=data.address or None, created_at=utcnow())
        conn = get_connection()
        try:
            conn.execute(
                "INSERT INTO venues (id, name, address, created_at) VALUES (?, ?, ?, ?)",
                (venue.id, venue.name, venue.address, venue.created_at),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("User %s created venue %s '%s'", user_id, venue.id, venue.name)
        return venue

    @classmethod
    async def update_venue(cls, data: VenueUpdate, user_id: Optional[str]) -> VenueRead:
        """Replace a venue's name and address."""
        conn = get_connection()
        try:
            cursor = conn.execute(
                "UPDATE venues SET name = ?, address = ? WHERE id = ?",
                (data.name, data.address or None, data.id),
            )
            conn.commit()
            if not cursor.rowcount:
                raise NotFoundError(VENUE_NOT_FOUND)
            row = conn.execute(
                "SELECT id, name, address, created_at FROM venues WHERE id = ?",
                (data.id,),
            ).fetchone()
        finally:
            conn.close()
        logger.info("User %s updated venue %s", user_id, data.id)
        return VenueRead.model_validate(dict(row))


list_venues = create_action(VenueList, VenueService.list_venues, name="list_venues")
create_venue = create_action(VenueCreate, VenueService.create_venue, name="create_venue")
update_venue = create_action(VenueUpdate, VenueService.update_venue, name="update_venue")
