"""Error taxonomy for the verification portal.

Every error carries a message that is safe to show to the person using the
portal; details for operators go to the log.
"""
from __future__ import annotations


class PortalError(Exception):
    """Base class for failures that resolve to a visible, actionable state."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class TransportError(PortalError):
    """A call to the remote record store failed."""

    default_message = "The worker database could not be reached."


class ConflictError(TransportError):
    """A guarded update found the record changed since it was loaded."""

    default_message = "The worker record changed while verifying. Please try again."


class ValidationError(PortalError):
    """The request was incomplete and was rejected before any remote call."""

    default_message = "Please select a factory and enter NIK/KTP"


class NotFoundError(PortalError):
    """No record matched the submitted identifier."""

    default_message = "Verification failed. Please check your input."
