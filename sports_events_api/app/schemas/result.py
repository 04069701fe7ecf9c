"""
Tagged result returned by every action.

An action never raises to its caller.  It returns either
``ActionSuccess`` (``ok`` is ``True`` and ``value`` holds the payload)
or ``ActionFailure`` (``ok`` is ``False`` and ``error`` holds a
user-displayable message).  Branch on ``ok`` (or use ``match``) before
touching ``value``::

    match await create_event(payload, context):
        case ActionSuccess(value=event):
            ...
        case ActionFailure(error=message):
            ...
"""

from enum import Enum
from typing import Generic, Literal, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T")


class FailureKind(str, Enum):
    """Coarse classification of a failed action.

    Only the HTTP layer looks at it (to choose a status code); the
    ``error`` text is what callers display.
    """

    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"
    UNEXPECTED = "unexpected"


class ActionSuccess(BaseModel, Generic[T]):
    ok: Literal[True] = True
    value: T


class ActionFailure(BaseModel):
    ok: Literal[False] = False
    error: str
    kind: FailureKind = FailureKind.UNEXPECTED


ActionResult = Union[ActionSuccess, ActionFailure]


class Acknowledgement(BaseModel):
    """Payload of actions that have nothing to return but success."""

    ok: bool = True


def failure(error: str, kind: FailureKind = FailureKind.UNEXPECTED) -> ActionFailure:
    return ActionFailure(error=error, kind=kind)
