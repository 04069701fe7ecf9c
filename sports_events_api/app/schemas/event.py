"""
Pydantic models for event data.

Request schemas (``EventSearch``, ``EventLookup``, ``EventCreate``,
``EventUpdate``) validate action input; ``EventRead`` and
``EventWithVenues`` describe the rows relayed back to the caller.
Timestamps are returned exactly as stored: ISO-8601 UTC strings.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from .fields import RequestSchema, parse_datetime, required_text, uuid_list, uuid_text
from .venue import VenueRead

SPORT_CATEGORIES = (
    "Basketball",
    "Football",
    "Soccer",
    "Baseball",
    "Tennis",
    "Golf",
    "Hockey",
    "Volleyball",
    "Swimming",
    "Track & Field",
    "Other",
)

NAME_REQUIRED = "Event name is required"
NAME_TOO_LONG = "Event name must be less than 255 characters"
CATEGORY_REQUIRED = "Sport type is required"
DATE_REQUIRED = "Date and time is required"
DATE_INVALID = "Invalid date and time"
DESCRIPTION_TOO_LONG = "Description must be less than 1000 characters"
VENUES_REQUIRED = "At least one venue is required"
VENUE_ID_INVALID = "Invalid venue ID"
EVENT_ID_INVALID = "Invalid event ID"


def _check_venue_ids(value: Any) -> List[str]:
    if value is None:
        raise ValueError(VENUES_REQUIRED)
    if not isinstance(value, (list, tuple)):
        raise ValueError(VENUE_ID_INVALID)
    venue_ids = uuid_list(value, VENUE_ID_INVALID)
    if not venue_ids:
        raise ValueError(VENUES_REQUIRED)
    return venue_ids


def _check_description(value: Optional[str]) -> Optional[str]:
    """An empty description is stored as no description."""
    if value is not None and len(value) > 1000:
        raise ValueError(DESCRIPTION_TOO_LONG)
    return value or None


class EventSearch(RequestSchema):
    """Filters for listing events.  Empty strings mean "no filter"."""

    query: Optional[str] = Field(None, examples=["fin"])
    category: Optional[str] = Field(None, examples=["Basketball"])


class EventLookup(RequestSchema):
    """Identifies a single event (fetch and delete)."""

    missing_messages = {"id": EVENT_ID_INVALID}

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, value: Any) -> str:
        return uuid_text(value, EVENT_ID_INVALID)


class EventCreate(RequestSchema):
    """Schema for creating an event."""

    missing_messages = {
        "name": NAME_REQUIRED,
        "category": CATEGORY_REQUIRED,
        "scheduled_at": DATE_REQUIRED,
        "venue_ids": VENUES_REQUIRED,
    }

    name: str = Field(..., examples=["Finals"])
    category: str = Field(..., examples=["Basketball"])
    scheduled_at: datetime = Field(..., examples=["2025-06-01T18:00:00Z"])
    description: Optional[str] = Field(None, examples=["Season finals, home game"])
    venue_ids: List[str] = Field(..., examples=[["7c1f4a3e-2d0b-4b7e-9a57-3f7d0a1c9b10"]])

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return required_text(value, NAME_REQUIRED, 255, NAME_TOO_LONG)

    @field_validator("category")
    @classmethod
    def _category(cls, value: str) -> str:
        return required_text(value, CATEGORY_REQUIRED)

    @field_validator("scheduled_at", mode="before")
    @classmethod
    def _scheduled_at(cls, value: Any) -> datetime:
        return parse_datetime(value, DATE_REQUIRED, DATE_INVALID)

    @field_validator("description")
    @classmethod
    def _description(cls, value: Optional[str]) -> Optional[str]:
        return _check_description(value)

    @field_validator("venue_ids", mode="before")
    @classmethod
    def _venue_ids(cls, value: Any) -> List[str]:
        return _check_venue_ids(value)


class EventUpdate(RequestSchema):
    """Schema for updating an event.

    Every field except ``id`` is optional; only fields present in the
    input are applied.  ``description`` may be sent as ``null`` to clear
    it, the other fields reject ``null``.  When ``venue_ids`` is present
    it replaces the event's whole venue set.
    """

    missing_messages = {"id": EVENT_ID_INVALID}

    id: str
    name: Optional[str] = None
    category: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    description: Optional[str] = None
    venue_ids: Optional[List[str]] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, value: Any) -> str:
        return uuid_text(value, EVENT_ID_INVALID)

    @field_validator("name")
    @classmethod
    def _name(cls, value: Optional[str]) -> str:
        return required_text(value, NAME_REQUIRED, 255, NAME_TOO_LONG)

    @field_validator("category")
    @classmethod
    def _category(cls, value: Optional[str]) -> str:
        return required_text(value, CATEGORY_REQUIRED)

    @field_validator("scheduled_at", mode="before")
    @classmethod
    def _scheduled_at(cls, value: Any) -> datetime:
        return parse_datetime(value, DATE_REQUIRED, DATE_INVALID)

    @field_validator("description")
    @classmethod
    def _description(cls, value: Optional[str]) -> Optional[str]:
        return _check_description(value)

    @field_validator("venue_ids", mode="before")
    @classmethod
    def _venue_ids(cls, value: Any) -> List[str]:
        return _check_venue_ids(value)

    def changes(self) -> dict:
        """Column values supplied by the caller, excluding ``id`` and ``venue_ids``."""
        return self.model_dump(exclude_unset=True, exclude={"id", "venue_ids"})


class EventRead(BaseModel):
    """An event row as stored."""

    id: str
    owner_id: str
    name: str
    category: str
    scheduled_at: str
    description: Optional[str] = None
    created_at: str
    updated_at: str

    model_config = {
        "from_attributes": True,
    }


class EventWithVenues(EventRead):
    """An event together with the venues linked to it."""

    venues: List[VenueRead] = []
