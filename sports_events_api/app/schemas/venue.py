"""
Pydantic models for venues.

Venues are shared between all accounts: they carry no owner and any
authenticated user may list, create or edit them.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .fields import RequestSchema, required_text, uuid_text

NAME_REQUIRED = "Venue name is required"
NAME_TOO_LONG = "Venue name must be less than 255 characters"
ADDRESS_REQUIRED = "Address is required"
ADDRESS_TOO_LONG = "Address must be less than 500 characters"
VENUE_ID_INVALID = "Invalid venue ID"


class VenueList(RequestSchema):
    """Listing venues takes no input."""


class VenueCreate(RequestSchema):
    """Schema for creating a venue."""

    missing_messages = {"name": NAME_REQUIRED, "address": ADDRESS_REQUIRED}

    name: str = Field(..., examples=["Madison Square Garden"])
    address: str = Field(..., examples=["4 Pennsylvania Plaza, New York, NY"])

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return required_text(value, NAME_REQUIRED, 255, NAME_TOO_LONG)

    @field_validator("address")
    @classmethod
    def _address(cls, value: str) -> str:
        return required_text(value, ADDRESS_REQUIRED, 500, ADDRESS_TOO_LONG)


class VenueUpdate(VenueCreate):
    """Schema for updating a venue; all fields are replaced."""

    missing_messages = {**VenueCreate.missing_messages, "id": VENUE_ID_INVALID}

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, value: Any) -> str:
        return uuid_text(value, VENUE_ID_INVALID)


class VenueRead(BaseModel):
    """A venue row as stored."""

    id: str
    name: str
    address: Optional[str] = None
    created_at: str

    model_config = {
        "from_attributes": True,
    }
