"""
Security helpers: password hashing, signed access tokens and the
principal resolver.

Tokens are compact JWTs signed with HMAC-SHA256 using the application
secret.  Each token carries the user id (``sub``), the id of the
server-side session it belongs to (``sid``) and an expiry (``exp``).
A token is only honoured while its session row is present and not
revoked, which is what makes logout effective before ``exp``.

Passwords are hashed with PBKDF2-HMAC-SHA256 and a random salt and
stored as ``"salthex$hashhex"``.

The resolver takes the caller's credentials as an explicit
``SessionContext`` instead of reading ambient request state, so any
code path (HTTP endpoint, script, test) can hand in whatever session
it has.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import sqlite3
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .db import get_connection, utcnow
from .errors import UNAUTHORIZED

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT with the given claims.

    The claims are extended with ``exp`` (UNIX timestamp).  Clients
    send the token back as ``Authorization: Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed, normally ``{"sub": user_id, "sid": session_id}``.
    expires_delta : Optional[int]
        Lifetime in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.
    """
    to_encode = dict(data)
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": settings.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a token's signature and expiry and return its claims.

    Returns ``None`` for anything that is not a valid, unexpired token
    signed with the current secret.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(_sign(signing_input, settings.secret_key), actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    try:
        if int(data.get("exp", 0)) < int(time.time()):
            return None
    except (TypeError, ValueError):
        return None
    return data


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256 and a 16-byte salt."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check a plain password against a stored ``salt$hash`` string.

    Accounts created through an external provider have no password and
    never match.
    """
    if not hashed_password or "$" not in hashed_password:
        return False
    salt_hex, hash_hex = hashed_password.split("$", 1)
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


# ---------------------------------------------------------------------------
# Principal resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SessionContext:
    """Credentials presented by the caller of an action."""

    access_token: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "SessionContext":
        return cls()


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    id: str
    session_id: str


@dataclass(frozen=True)
class AuthFailure:
    """Resolution failed.  The reason is deliberately not exposed."""

    error: str = UNAUTHORIZED


def _lookup_session(user_id: str, session_id: str) -> bool:
    conn = get_connection()
    try:
        row = conn.execute(
            """
            SELECT s.expires_at, s.revoked_at, u.disabled
            FROM sessions s JOIN users u ON u.id = s.user_id
            WHERE s.id = ? AND s.user_id = ?
            """,
            (session_id, user_id),
        ).fetchone()
    finally:
        conn.close()
    if row is None or row["revoked_at"] is not None or row["disabled"]:
        return False
    return row["expires_at"] > utcnow()


async def resolve_principal(context: Optional[SessionContext]) -> Union[Principal, AuthFailure]:
    """Return the caller's ``Principal`` or an ``AuthFailure``.

    No token, a malformed or expired token, a revoked or unknown
    session, a disabled account and a storage error all produce the same
    ``AuthFailure`` so callers learn nothing about which check failed.
    Session state is only read here, never written.
    """
    if context is None or not context.access_token:
        return AuthFailure()
    claims = decode_access_token(context.access_token)
    if not claims:
        logger.debug("Rejected token: bad signature, shape or expiry")
        return AuthFailure()
    user_id, session_id = claims.get("sub"), claims.get("sid")
    if not isinstance(user_id, str) or not isinstance(session_id, str):
        return AuthFailure()
    try:
        active = _lookup_session(user_id, session_id)
    except sqlite3.Error:
        logger.exception("Session lookup failed")
        return AuthFailure()
    if not active:
        return AuthFailure()
    return Principal(id=user_id, session_id=session_id)


security = HTTPBearer(auto_error=False)


def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> SessionContext:
    """FastAPI dependency turning the bearer header into a ``SessionContext``.

    It never rejects the request: whether authentication is required is
    decided by the action being called.
    """
    if credentials is None:
        return SessionContext.anonymous()
    return SessionContext(access_token=credentials.credentials)
