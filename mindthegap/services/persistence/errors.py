"""
Persistence Exceptions

Every adapter failure is a PersistenceError carrying a user_message, so
the dashboard flow can turn it into a transient message without knowing
which strategy raised it.

Taxonomy:
- BackendError / TransportError: the backend said no, or never answered
- SnapshotDecodeError: a shared link or stored snapshot is malformed
- the rest: preconditions (no session, nothing to share, unknown donation)
"""

from typing import Optional


GENERIC_ERROR_MESSAGE = "Something went sideways while talking to the server."


class PersistenceError(Exception):
    """Base exception for persistence operations."""

    default_user_message = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str = "", user_message: Optional[str] = None):
        super().__init__(message or self.default_user_message)
        self.user_message = user_message or self.default_user_message


class BackendError(PersistenceError):
    """The backend answered with a non-success status."""

    def __init__(
        self,
        message: str = "",
        status_code: Optional[int] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message, user_message)
        self.status_code = status_code


class TransportError(PersistenceError):
    """The request never got a response (network, timeout, DNS...)."""
    pass


class SharedSnapshotUnavailableError(PersistenceError):
    """A share link pointed at state that could not be loaded."""

    default_user_message = "Could not load that shared snapshot."


class SessionStartError(PersistenceError):
    """A fresh household could not be created."""

    default_user_message = "Starting a fresh session failed. Try again shortly."


class NoActiveSessionError(PersistenceError):
    """A remote mutation was attempted before a household was adopted."""

    default_user_message = "There is no active session yet. Reload the page to start one."


class NothingToShareError(PersistenceError):
    """Share was requested with no data (or no household) to share."""

    default_user_message = "Add your own numbers before sharing them."


class DonationNotFoundError(PersistenceError):
    """The donation to edit or remove does not exist (local mode)."""

    default_user_message = "That donation could not be found. Reload and try again."


class SnapshotDecodeError(PersistenceError):
    """A shared-link payload or stored snapshot could not be decoded."""

    default_user_message = "Could not load that shared snapshot."
