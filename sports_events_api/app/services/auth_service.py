"""
Business logic for accounts and sessions.

Registration and both login flows are actions that do not require an
authenticated caller.  A successful login opens a row in ``sessions``
and returns an access token bound to it; ``logout`` revokes that row,
after which the token is rejected by the principal resolver even though
it has not expired yet.

Failure messages are fixed, user-facing strings.  In particular a
wrong password and an unknown e-mail produce the same message.
"""

import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from sports_events_api.app.core.actions import create_action
from sports_events_api.app.core.config import settings
from sports_events_api.app.core.db import get_connection, new_id, to_iso, utcnow
from sports_events_api.app.core.errors import ConflictError, NotFoundError
from sports_events_api.app.core.security import (
    AuthFailure,
    SessionContext,
    create_access_token,
    hash_password,
    resolve_principal,
    verify_password,
)
from sports_events_api.app.schemas.auth import (
    Credentials,
    ExternalLogin,
    SessionRevocation,
    TokenRead,
    UserRead,
)
from sports_events_api.app.schemas.fields import EmptyInput
from sports_events_api.app.schemas.result import (
    Acknowledgement,
    ActionFailure,
    ActionResult,
    ActionSuccess,
    FailureKind,
    failure,
)

logger = logging.getLogger(__name__)

ALREADY_REGISTERED = "User already registered"
INVALID_CREDENTIALS = "Invalid login credentials"
ACCOUNT_DISABLED = "User account disabled"


class AuthService:
    """Handlers for the authentication actions."""

    @classmethod
    async def register(cls, data: Credentials, user_id: Optional[str]) -> Acknowledgement:
        """Create an e-mail/password account.

        The caller still has to log in afterwards.
        """
        now = utcnow()
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO users (id, email, password, provider, created_at, updated_at)
                VALUES (?, ?, ?, 'email', ?, ?)
                """,
                (new_id(), data.email, hash_password(data.password), now, now),
            )
            conn.commit()
        except sqlite3.IntegrityError:
            conn.rollback()
            raise ConflictError(ALREADY_REGISTERED) from None
        finally:
            conn.close()
        logger.info("Registered user %s", data.email)
        return Acknowledgement()

    @classmethod
    async def login(cls, data: Credentials, user_id: Optional[str]) -> Union[TokenRead, ActionFailure]:
        """Check an e-mail/password pair and open a session."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, password, disabled FROM users WHERE email = ?",
                (data.email,),
            ).fetchone()
        finally:
            conn.close()
        if row is None or not verify_password(data.password, row["password"]):
            logger.info("Failed login for %s", data.email)
            return failure(INVALID_CREDENTIALS, FailureKind.UNAUTHORIZED)
        if row["disabled"]:
            return failure(ACCOUNT_DISABLED, FailureKind.UNAUTHORIZED)
        return cls.open_session(row["id"])

    @classmethod
    async def login_with_external_provider(
        cls, data: ExternalLogin, user_id: Optional[str]
    ) -> Union[TokenRead, ActionFailure]:
        """Sign in with an identity asserted by an external provider.

        The account linked to ``(provider, subject)`` is used, or created
        on first login.  The supplied e-mail is stored on a new account
        only when no other account already uses it.
        """
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, disabled FROM users WHERE provider = ? AND provider_subject = ?",
                (data.provider, data.subject),
            ).fetchone()
            if row is None:
                email = data.email
                if email is not None:
                    taken = conn.execute("SELECT 1 FROM users WHERE email = ?", (email,)).fetchone()
                    if taken:
                        email = None
                account_id = new_id()
                now = utcnow()
                conn.execute(
                    """
                    INSERT INTO users (id, email, full_name, provider, provider_subject, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (account_id, email, data.full_name, data.provider, data.subject, now, now),
                )
                conn.commit()
                logger.info("Created %s account %s", data.provider, account_id)
            elif row["disabled"]:
                return failure(ACCOUNT_DISABLED, FailureKind.UNAUTHORIZED)
            else:
                account_id = row["id"]
        finally:
            conn.close()
        return cls.open_session(account_id)

    @classmethod
    async def current_user(cls, data: EmptyInput, user_id: str) -> UserRead:
        """Profile of the authenticated caller."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, email, full_name, provider FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            raise NotFoundError("User not found")
        return UserRead.model_validate(dict(row))

    @staticmethod
    def open_session(user_id: str) -> TokenRead:
        """Record a new session for ``user_id`` and issue its token."""
        lifetime = settings.access_token_expire_minutes * 60
        now = datetime.now(timezone.utc)
        session_id = new_id()
        expires_at = to_iso(now + timedelta(seconds=lifetime))
        conn = get_connection()
        try:
            conn.execute(
                "INSERT INTO sessions (id, user_id, created_at, expires_at) VALUES (?, ?, ?, ?)",
                (session_id, user_id, to_iso(now), expires_at),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("Opened session %s for user %s", session_id, user_id)
        token = create_access_token({"sub": user_id, "sid": session_id}, expires_delta=lifetime)
        return TokenRead(access_token=token, expires_at=expires_at)

    @classmethod
    async def revoke_sessions(cls, data: SessionRevocation, user_id: Optional[str]) -> Acknowledgement:
        """Mark the given session (or every session of the account) revoked."""
        conn = get_connection()
        try:
            if data.everywhere:
                conn.execute(
                    "UPDATE sessions SET revoked_at = ? WHERE user_id = ? AND revoked_at IS NULL",
                    (utcnow(), data.user_id),
                )
            else:
                conn.execute(
                    "UPDATE sessions SET revoked_at = ? WHERE id = ? AND user_id = ?",
                    (utcnow(), data.session_id, data.user_id),
                )
            conn.commit()
        finally:
            conn.close()
        logger.info("User %s logged out%s", data.user_id, " everywhere" if data.everywhere else "")
        return Acknowledgement()


register = create_action(Credentials, AuthService.register, require_auth=False, name="register")
login = create_action(Credentials, AuthService.login, require_auth=False, name="login")
login_with_external_provider = create_action(
    ExternalLogin,
    AuthService.login_with_external_provider,
    require_auth=False,
    name="login_with_external_provider",
)
current_user = create_action(EmptyInput, AuthService.current_user, name="current_user")
_revoke_sessions = create_action(
    SessionRevocation, AuthService.revoke_sessions, require_auth=False, name="logout"
)


async def logout(context: Optional[SessionContext] = None, everywhere: bool = False) -> ActionResult:
    """Close the caller's session, or all of the account's sessions with ``everywhere``.

    Logging out without a valid session succeeds: the caller ends up
    signed out either way.
    """
    principal = await resolve_principal(context)
    if isinstance(principal, AuthFailure):
        return ActionSuccess(value=Acknowledgement())
    return await _revoke_sessions(
        {"user_id": principal.id, "session_id": principal.session_id, "everywhere": everywhere}
    )
