"""
Error taxonomy for the content service.

Service errors carry a user-facing message and the HTTP status the web
layer translates them to. Store errors are raised by storage backends and
never reach HTTP callers directly.
"""


class ServiceError(Exception):
    """Base class for recoverable, caller-visible failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class InvalidInputError(ServiceError):
    """Blank, malformed or missing input."""
    status_code = 400


class NotFoundError(ServiceError):
    """A referenced entity does not exist."""
    status_code = 404


class ConflictError(ServiceError):
    """A uniqueness constraint would be violated."""
    status_code = 409


class InternalError(ServiceError):
    """Unexpected failure from a collaborator (storage, connectivity)."""
    status_code = 500


class CancelledError(ServiceError):
    """A collaborator cancelled or timed out the operation."""
    status_code = 503


# Name used by recommendation engine callers.
EngineError = ServiceError


class StoreError(Exception):
    """Raised by store backends for any storage failure."""


class StoreTimeoutError(StoreError):
    """The storage backend did not answer in time."""


class DuplicateRecordError(StoreError):
    """A record with the same unique key already exists."""


class DuplicateUsernameError(DuplicateRecordError):
    """The username is already taken."""
