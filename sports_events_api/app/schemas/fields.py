"""
Reusable field checks and error formatting for the request schemas.

Pydantic's built-in constraint messages are generic ("String should
have at least 1 character").  The schemas instead run the checks below
from ``field_validator`` hooks so every violation carries a message
that can be shown to the user as is.  ``format_validation_errors``
then flattens a ``ValidationError`` into the single comma-joined
string returned by the action layer.
"""

import re
import uuid
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Iterable, List, Optional

from pydantic import BaseModel, ValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_YEAR = 1000
MAX_YEAR = 9999


class RequestSchema(BaseModel):
    """Base class for action input schemas.

    ``missing_messages`` maps a field name to the message reported when
    the field is absent from the input altogether.
    """

    missing_messages: ClassVar[Dict[str, str]] = {}

    model_config = {
        "extra": "ignore",
    }


def required_text(
    value: Optional[str],
    required: str,
    max_length: Optional[int] = None,
    too_long: Optional[str] = None,
) -> str:
    """Reject ``None`` and empty strings, and optionally enforce a length cap."""
    if value is None or value == "":
        raise ValueError(required)
    if max_length is not None and len(value) > max_length:
        raise ValueError(too_long or required)
    return value


def uuid_text(value: Any, message: str) -> str:
    """Return ``value`` as a canonical lowercase UUID string."""
    try:
        return str(uuid.UUID(str(value)))
    except (TypeError, ValueError, AttributeError):
        raise ValueError(message) from None


def uuid_list(values: Iterable[Any], message: str) -> List[str]:
    """Canonicalise a list of UUIDs, dropping repeats (first one wins)."""
    seen: List[str] = []
    for value in values:
        canonical = uuid_text(value, message)
        if canonical not in seen:
            seen.append(canonical)
    return seen


def parse_datetime(value: Any, required: str, invalid: str) -> datetime:
    """Accept a ``datetime`` or an ISO-8601 string (``Z`` suffix allowed).

    The result is converted to UTC (naive values are taken to be UTC) and
    must fall in years 1000 to 9999, the range the stored four-digit
    year format can represent.
    """
    if value is None or value == "":
        raise ValueError(required)
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(invalid) from None
    else:
        raise ValueError(invalid)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        parsed = parsed.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError(invalid) from None
    if not MIN_YEAR <= parsed.year <= MAX_YEAR:
        raise ValueError(invalid)
    return parsed


def _error_message(schema: type, error: Dict[str, Any]) -> str:
    if error["type"] == "missing":
        field = error["loc"][0] if error["loc"] else ""
        return getattr(schema, "missing_messages", {}).get(field, "Required")
    if error["type"] == "value_error":
        cause = error.get("ctx", {}).get("error")
        if cause is not None and str(cause):
            return str(cause)
    return error["msg"]


def format_validation_errors(schema: type, exc: ValidationError) -> str:
    """Join every violation of ``exc`` into one message.

    Messages are reported in field order and joined with ``", "``;
    repeats are collapsed so a message appears once.
    """
    messages: List[str] = []
    for error in exc.errors():
        message = _error_message(schema, error)
        if message not in messages:
            messages.append(message)
    return ", ".join(messages)


class EmptyInput(RequestSchema):
    """For actions that take no input."""
