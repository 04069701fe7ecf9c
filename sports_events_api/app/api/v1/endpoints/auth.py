"""
Authentication endpoints for API v1.

Registration, e-mail/password login, login with an external identity
provider, logout and the current user's profile.  Login responses carry
an access token to send back as ``Authorization: Bearer <token>``.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from sports_events_api.app.api.responses import render
from sports_events_api.app.core.security import SessionContext, get_session_context
from sports_events_api.app.services import auth_service

router = APIRouter()


@router.post("/register")
async def register(payload: Any = Body(None)) -> JSONResponse:
    """Create an account from an e-mail address and a password."""
    result = await auth_service.register(payload)
    return render(result, success_status=status.HTTP_201_CREATED)


@router.post("/login")
async def login(payload: Any = Body(None)) -> JSONResponse:
    """Exchange e-mail and password for an access token."""
    return render(await auth_service.login(payload))


@router.post("/external")
async def login_with_external_provider(payload: Any = Body(None)) -> JSONResponse:
    """Exchange an external identity (``provider`` + ``subject``) for an access token.

    The first login with a given identity creates the account.
    """
    return render(await auth_service.login_with_external_provider(payload))


@router.post("/logout")
async def logout(
    everywhere: bool = Query(False, description="Close every session of the account"),
    context: SessionContext = Depends(get_session_context),
) -> JSONResponse:
    return render(await auth_service.logout(context, everywhere=everywhere))


@router.get("/me")
async def me(context: SessionContext = Depends(get_session_context)) -> JSONResponse:
    """Profile of the signed-in user."""
    return render(await auth_service.current_user(None, context))
