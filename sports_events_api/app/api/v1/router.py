"""
Top-level router for version 1 of the API.

Aggregates the domain routers under their prefixes.  When a new domain
is added, include its router here.
"""

from fastapi import APIRouter

from .endpoints import auth, events, venues

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(venues.router, prefix="/venues", tags=["venues"])
