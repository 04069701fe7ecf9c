"""
Rendering of action results as HTTP responses.

The body is always the serialized ``ActionResult``; only the status
code is derived from the failure kind.  Request bodies are handed to
the actions as received, so malformed input is reported by the action
layer in the same shape as any other failure.
"""

from typing import Any, Mapping

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sports_events_api.app.schemas.result import ActionFailure, FailureKind, failure

INVALID_REQUEST = "Invalid request"

STATUS_BY_KIND = {
    FailureKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    FailureKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.PERSISTENCE: status.HTTP_400_BAD_REQUEST,
    FailureKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def render(result, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Serialize ``result`` with a status code matching its outcome."""
    if isinstance(result, ActionFailure):
        code = STATUS_BY_KIND.get(result.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
        headers = {"WWW-Authenticate": "Bearer"} if result.kind == FailureKind.UNAUTHORIZED else None
        return JSONResponse(status_code=code, content=result.model_dump(mode="json"), headers=headers)
    return JSONResponse(status_code=success_status, content=result.model_dump(mode="json"))


def with_path(payload: Any, **fields: Any) -> Any:
    """Merge path parameters into a request body.

    A missing body becomes just the path parameters.  A body that is not
    a JSON object is returned unchanged for the action to reject.
    """
    if payload is None:
        return dict(fields)
    if isinstance(payload, Mapping):
        return {**payload, **fields}
    return payload


async def request_validation_failure(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render parameter errors FastAPI detects itself (bad JSON, bad query values)."""
    return render(failure(INVALID_REQUEST, FailureKind.VALIDATION))
