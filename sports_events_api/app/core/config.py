"""
Application configuration.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any environment at all, which is also what the
test-suite relies on.  Override values via environment variables in a
real deployment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Sports Events API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Signing key and lifetime of access tokens.  Every token is bound to
    # a row in the ``sessions`` table, so logging out invalidates the
    # token before ``exp`` is reached.
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    min_password_length: int = int(os.getenv("MIN_PASSWORD_LENGTH", "8"))

    # Comma-separated allow-list of external identity providers accepted
    # by the external login operation, e.g. OAUTH_PROVIDERS="google,github".
    oauth_providers: str = os.getenv("OAUTH_PROVIDERS", "google")

    # Path to the SQLite database.  Relative paths are resolved against
    # the package root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "sports_events.db")

    @property
    def allowed_providers(self) -> set[str]:
        return {p.strip().lower() for p in self.oauth_providers.split(",") if p.strip()}


# Instantiated once; modules read attributes at call time so tests can
# override individual fields on this instance.
settings = Settings()
