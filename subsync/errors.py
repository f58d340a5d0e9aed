"""
Exceptions raised by the synchronization engine and its collaborators.

Data-consistency anomalies (a fetched id with no cached match, a followed
channel whose uploads playlist could not be resolved) are not errors and
have no exception here: they are skipped or degraded where they occur.
"""

from typing import Optional


class SubsyncError(Exception):
    """Base class for all subsync errors."""
    pass


class NoActiveAccountError(SubsyncError):
    """Raised when no account is signed in to the host environment."""
    pass


class AccountMismatchError(SubsyncError):
    """Raised when the requested account is not the environment's active account."""

    def __init__(self, requested_id: str, active_id: Optional[str]):
        super().__init__(
            f"The currently selected account (ID {active_id}) is not the "
            f"requested one (ID {requested_id})"
        )
        self.requested_id = requested_id
        self.active_id = active_id


class RemoteLookupError(SubsyncError):
    """Raised by the remote API client for network, not-found or quota failures."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
