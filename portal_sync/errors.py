"""Error taxonomy for the extract -> submit pipeline."""
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import SubmitResult


class PortalSyncError(Exception):
    """Base class for every error raised by portal_sync."""


class NetworkError(PortalSyncError):
    """Transport failure or non-success status while fetching a page or logo."""


class ParseError(PortalSyncError):
    """Expected structure is missing from the source markup."""


class StorageError(PortalSyncError):
    """Artifacts could not be written to the local data folder."""


class LedgerCorruption(PortalSyncError):
    """The persisted ledger is unreadable or not a JSON array of strings."""


class SubmissionError(PortalSyncError):
    """A required form element is missing or the upload was not confirmed."""

    def __init__(self, message: str, result: Optional["SubmitResult"] = None):
        super().__init__(message)
        self.result = result
