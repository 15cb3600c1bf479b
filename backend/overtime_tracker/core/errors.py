"""Domain errors raised by the tracking engine.

Each error carries the HTTP status it is rendered with; the single exception
handler registered in ``overtime_tracker.main`` turns them into
``{"detail": message}`` responses.
"""


class TrackingError(Exception):
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConflictError(TrackingError):
    status_code = 409


class ConcurrentModificationError(ConflictError):
    """Writes for the same employee kept colliding past the retry limit."""


class NotFoundError(TrackingError):
    status_code = 404


class InvalidStateError(TrackingError):
    status_code = 409


class PolicyViolationError(TrackingError):
    status_code = 403


class InvalidInputError(TrackingError):
    status_code = 422
