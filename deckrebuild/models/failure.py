"""
Failure classification for deck ingestion and reconciliation.

Two kinds of failure exist and they travel differently:

- Upload faults (unrecognized structure, malformed card units, useless
  uploads) are EXPECTED input. They are converted to ParseIssue records and
  returned inside the ParsedList. They are never raised past the parser.
- Collaborator faults (the persistence side being unreachable) and invalid
  caller input are raised as KnownError subclasses.

INVARIANT: Every ParseIssue carries a FailureKind, so callers can tell a
rejected file from a skipped card unit without parsing message text.
"""

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    UPLOAD_REJECTED = "upload_rejected"

    # Upload content failures
    FORMAT_UNRECOGNIZED = "format_unrecognized"
    FIELD_INVALID = "field_invalid"
    EMPTY_RESULT = "empty_result"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"


@dataclass(frozen=True, slots=True)
class ParseIssue:
    """
    A diagnostic recorded while parsing one upload.

    Attributes:
        kind: What went wrong
        message: Human-readable description, shown to the uploader
        position: 1-based card unit or line number, None for file-level issues
    """

    kind: FailureKind
    message: str
    position: int | None = None

    @property
    def is_file_level(self) -> bool:
        return self.position is None


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def to_issue(self, position: int | None = None) -> ParseIssue:
        """Convert to a ParseIssue for inclusion in a parse result."""
        return ParseIssue(kind=self.kind, message=self.message, position=position)


class FormatError(KnownError):
    """
    The upload has no recognizable root or card collection.

    Fatal to the single file being parsed. No partial structured parse
    is attempted once this is raised.
    """

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.FORMAT_UNRECOGNIZED,
            message=message,
            detail=detail,
            suggestion="Export the deck again from MTGO as .dek or .txt.",
        )


class UploadRejectedError(KnownError):
    """The upload was refused before parsing (extension, size, emptiness)."""

    def __init__(self, message: str):
        super().__init__(kind=FailureKind.UPLOAD_REJECTED, message=message)


class FieldError(KnownError):
    """
    A single card unit could not be read.

    Soft: the unit is skipped and parsing continues.
    """

    def __init__(self, message: str):
        super().__init__(kind=FailureKind.FIELD_INVALID, message=message)


class EmptyResultError(KnownError):
    """No valid cards and no field errors: the upload is useless."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.EMPTY_RESULT,
            message="No valid cards found in file",
            suggestion="Check that the file lists cards as '<quantity> <name>'.",
        )


class CollaboratorUnavailableError(KnownError):
    """
    A storage or notification collaborator could not be reached.

    Fatal to the request that needed it. Previously published results
    are left untouched.
    """

    def __init__(self, operation: str, detail: str | None = None):
        self.operation = operation
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message=f"Could not {operation}: deck storage is unavailable",
            detail=detail,
            suggestion="Try again in a moment.",
        )
