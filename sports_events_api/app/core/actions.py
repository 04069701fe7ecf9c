"""
The action layer.

Every operation exposed by the services is built with
``create_action``, which composes input validation, principal
resolution and the operation's handler into one coroutine that always
returns an ``ActionResult``:

1. validate the raw input against the action's schema;
2. when authentication is required, resolve the principal from the
   caller's ``SessionContext``; on failure return ``"Unauthorized"``
   (so an anonymous caller never learns what was wrong with the input);
   then, if validation failed, return every violation joined into one
   message;
3. await ``handler(validated_input, principal_id)``;
4. turn anything the handler raises into a failure carrying the
   exception's message (or a generic message when it has none);
5. otherwise wrap the handler's return value in ``ActionSuccess``.

This is the only place exceptions are caught.  Handlers let errors
propagate; an ``ActionError`` keeps its own message and failure kind.
A handler may also return an ``ActionFailure`` itself, which is passed
through unchanged.
"""

import logging
import sqlite3
from functools import wraps
from typing import Any, Awaitable, Callable, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from sports_events_api.app.schemas.fields import format_validation_errors
from sports_events_api.app.schemas.result import (
    ActionFailure,
    ActionResult,
    ActionSuccess,
    FailureKind,
    failure,
)

from .errors import GENERIC_ERROR, ActionError
from .security import AuthFailure, SessionContext, resolve_principal

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=BaseModel)
T = TypeVar("T")

Handler = Callable[[S, Optional[str]], Awaitable[Union[T, ActionFailure]]]
Action = Callable[..., Awaitable[ActionResult]]


def _failure_from_exception(name: str, exc: Exception) -> ActionFailure:
    if isinstance(exc, ActionError):
        logger.info("Action %s failed: %s", name, exc.message)
        return failure(exc.message or GENERIC_ERROR, exc.kind)
    if isinstance(exc, sqlite3.Error):
        logger.exception("Action %s failed in the database", name)
        return failure(str(exc) or GENERIC_ERROR, FailureKind.PERSISTENCE)
    logger.exception("Action %s raised an unexpected error", name)
    return failure(str(exc) or GENERIC_ERROR, FailureKind.UNEXPECTED)


def _coerce_input(raw_input: Any) -> Any:
    if raw_input is None:
        return {}
    if isinstance(raw_input, BaseModel):
        return raw_input.model_dump(exclude_unset=True)
    return raw_input


def create_action(
    schema: Type[S],
    handler: Handler,
    require_auth: bool = True,
    name: Optional[str] = None,
) -> Action:
    """Build an action from a schema and a handler.

    Parameters
    ----------
    schema : type[BaseModel]
        Pydantic model the raw input is validated against.
    handler : callable
        ``async handler(validated_input, principal_id)``.  ``principal_id``
        is ``None`` when ``require_auth`` is false.
    require_auth : bool
        Whether a resolved principal is needed to run the handler.
    name : Optional[str]
        Used in log lines; defaults to the handler's name.

    Returns
    -------
    callable
        ``async action(raw_input=None, context=None) -> ActionResult``.
        ``raw_input`` may be a mapping, a model instance or ``None``.
    """
    action_name = name or getattr(handler, "__name__", "action")

    @wraps(handler)
    async def action(
        raw_input: Union[Mapping[str, Any], BaseModel, None] = None,
        context: Optional[SessionContext] = None,
    ) -> ActionResult:
        validated: Optional[BaseModel] = None
        invalid: Optional[str] = None
        try:
            validated = schema.model_validate(_coerce_input(raw_input))
        except ValidationError as exc:
            invalid = format_validation_errors(schema, exc)

        principal_id: Optional[str] = None
        if require_auth:
            # Anonymous callers get "Unauthorized" even for invalid input.
            principal = await resolve_principal(context)
            if isinstance(principal, AuthFailure):
                logger.warning("Action %s called without a valid session", action_name)
                return failure(principal.error, FailureKind.UNAUTHORIZED)
            principal_id = principal.id

        if invalid is not None:
            logger.info("Action %s rejected input: %s", action_name, invalid)
            return failure(invalid, FailureKind.VALIDATION)

        try:
            value = await handler(validated, principal_id)
        except Exception as exc:
            return _failure_from_exception(action_name, exc)

        if isinstance(value, ActionFailure):
            return value
        return ActionSuccess(value=value)

    return action
