"""Error types raised below the action layer."""

from sports_events_api.app.schemas.result import FailureKind

UNAUTHORIZED = "Unauthorized"
GENERIC_ERROR = "An unexpected error occurred"


class ActionError(Exception):
    """Failure whose message is safe to show to the end user."""

    kind = FailureKind.UNEXPECTED

    def __init__(self, message: str = GENERIC_ERROR) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ActionError):
    kind = FailureKind.NOT_FOUND


class ConflictError(ActionError):
    kind = FailureKind.PERSISTENCE
