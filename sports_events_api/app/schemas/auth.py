"""
Pydantic models for authentication.

``Credentials`` is shared by registration and password login;
``ExternalLogin`` carries an identity asserted by an external provider
(e.g. Google).  Tokens are returned as ``TokenRead``.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from sports_events_api.app.core.config import settings

from .fields import EMAIL_PATTERN, RequestSchema, required_text

EMAIL_INVALID = "Invalid email address"
PROVIDER_UNSUPPORTED = "Unsupported identity provider"
SUBJECT_REQUIRED = "External account ID is required"
PASSWORD_REQUIRED = "Password is required"


def _password_too_short() -> str:
    return f"Password must be at least {settings.min_password_length} characters"


class Credentials(RequestSchema):
    """E-mail and password, as entered on the sign-up and sign-in forms."""

    missing_messages = {"email": EMAIL_INVALID, "password": PASSWORD_REQUIRED}

    email: str = Field(..., examples=["fan@example.com"])
    password: str = Field(..., examples=["correct horse battery"])

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError(EMAIL_INVALID)
        return value.lower()

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        if len(value) < settings.min_password_length:
            raise ValueError(_password_too_short())
        return value


class ExternalLogin(RequestSchema):
    """Identity asserted by an external provider.

    ``subject`` is the account identifier within the provider.  The
    optional ``email`` and ``full_name`` only populate a new account on
    first login.
    """

    missing_messages = {"provider": PROVIDER_UNSUPPORTED, "subject": SUBJECT_REQUIRED}

    provider: str = Field(..., examples=["google"])
    subject: str = Field(..., examples=["108234567890123456789"])
    email: Optional[str] = None
    full_name: Optional[str] = None

    @field_validator("provider")
    @classmethod
    def _provider(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in settings.allowed_providers:
            raise ValueError(PROVIDER_UNSUPPORTED)
        return value

    @field_validator("subject")
    @classmethod
    def _subject(cls, value: str) -> str:
        return required_text(value.strip(), SUBJECT_REQUIRED)

    @field_validator("email")
    @classmethod
    def _email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not EMAIL_PATTERN.match(value):
            raise ValueError(EMAIL_INVALID)
        return value.lower()


class TokenRead(BaseModel):
    """Access token issued on login."""

    access_token: str
    token_type: str = "bearer"
    expires_at: str


class UserRead(BaseModel):
    """The authenticated user's profile."""

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    provider: str = "email"

    model_config = {
        "from_attributes": True,
    }



class SessionRevocation(RequestSchema):
    """Which sessions to close on logout.

    Built by the logout operation from the resolved principal rather
    than supplied by clients.
    """

    user_id: str
    session_id: str
    everywhere: bool = False
