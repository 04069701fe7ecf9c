"""
Event endpoints for API v1.

Thin adapters from HTTP to the event actions: path and query
parameters are merged into the action input, the bearer token becomes
the ``SessionContext`` and the ``ActionResult`` is returned as the
body.  All validation happens inside the actions, so request bodies are
passed on as received.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from sports_events_api.app.api.responses import render, with_path
from sports_events_api.app.core.security import SessionContext, get_session_context
from sports_events_api.app.services import event_service

router = APIRouter()


@router.get("/")
async def list_events(
    query: Optional[str] = Query(None, description="Case-insensitive substring of the event name"),
    category: Optional[str] = Query(None, description="Exact sport category"),
    context: SessionContext = Depends(get_session_context),
) -> JSONResponse:
    """List the caller's events, soonest first, each with its venues."""
    result = await event_service.list_events({"query": query, "category": category}, context)
    return render(result)


@router.get("/categories")
async def list_categories() -> JSONResponse:
    """Suggested sport categories.  Does not require authentication."""
    return render(await event_service.list_categories())


@router.get("/{event_id}")
async def get_event(
    event_id: str,
    context: SessionContext = Depends(get_session_context),
) -> JSONResponse:
    """Fetch one event.  An unknown event yields ``{"ok": true, "value": null}``."""
    return render(await event_service.get_event({"id": event_id}, context))


@router.post("/")
async def create_event(
    payload: Any = Body(None),
    context: SessionContext = Depends(get_session_context),
) -> JSONResponse:
    """Create an event owned by the caller and link it to at least one venue."""
    result = await event_service.create_event(payload, context)
    return render(result, success_status=status.HTTP_201_CREATED)


@router.patch("/{event_id}")
async def update_event(
    event_id: str,
    payload: Any = Body(None),
    context: SessionContext = Depends(get_session_context),
) -> JSONResponse:
    """Partially update an event.

    Only the fields present in the body change.  ``venue_ids``, when
    present, replaces the whole venue set.
    """
    result = await event_service.update_event(with_path(payload, id=event_id), context)
    return render(result)


@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    context: SessionContext = Depends(get_session_context),
) -> JSONResponse:
    """Delete an event.  Deleting an unknown event still succeeds."""
    return render(await event_service.delete_event({"id": event_id}, context))
