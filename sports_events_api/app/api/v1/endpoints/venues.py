"""
Venue endpoints for API v1.

Venues are shared between accounts; every route still requires a
signed-in caller.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from sports_events_api.app.api.responses import render, with_path
from sports_events_api.app.core.security import SessionContext, get_session_context
from sports_events_api.app.services import venue_service

router = APIRouter()


@router.get("/")
async def list_venues(context: SessionContext = Depends(get_session_context)) -> JSONResponse:
    """List all venues ordered by name."""
    return render(await venue_service.list_venues(None, context))


@router.post("/")
async def create_venue(
    payload: Any = Body(None),
    context: SessionContext = Depends(get_session_context),
) -> JSONResponse:
    result = await venue_service.create_venue(payload, context)
    return render(result, success_status=status.HTTP_201_CREATED)


@router.put("/{venue_id}")
async def update_venue(
    venue_id: str,
    payload: Any = Body(None),
    context: SessionContext = Depends(get_session_context),
) -> JSONResponse:
    """Replace a venue's name and address."""
    result = await venue_service.update_venue(with_path(payload, id=venue_id), context)
    return render(result)
