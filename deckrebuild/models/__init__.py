from deckrebuild.models.card import CardRecord
from deckrebuild.models.collections import (
    CollectionSnapshot,
    Contribution,
    ContributionSet,
    RequirementDeck,
    RequirementSet,
)
from deckrebuild.models.deck_list import DeckStats, Dialect, ParsedList
from deckrebuild.models.failure import (
    CollaboratorUnavailableError,
    EmptyResultError,
    FailureKind,
    FieldError,
    FormatError,
    KnownError,
    ParseIssue,
    UploadRejectedError,
)
from deckrebuild.models.report import (
    CardStatusReport,
    ContributorReport,
    ParsedListReport,
    ProgressReport,
    ReconciliationReport,
    build_parsed_list_report,
    build_report,
)
from deckrebuild.models.status import (
    CardStatus,
    CardStatusKind,
    Contributor,
    PriceQuote,
    ProgressSummary,
    ReconciliationSnapshot,
)

__all__ = [
    # Cards and parsed lists
    "CardRecord",
    "DeckStats",
    "Dialect",
    "ParsedList",
    # Collections
    "CollectionSnapshot",
    "Contribution",
    "ContributionSet",
    "RequirementDeck",
    "RequirementSet",
    # Failures
    "CollaboratorUnavailableError",
    "EmptyResultError",
    "FailureKind",
    "FieldError",
    "FormatError",
    "KnownError",
    "ParseIssue",
    "UploadRejectedError",
    # Status
    "CardStatus",
    "CardStatusKind",
    "Contributor",
    "PriceQuote",
    "ProgressSummary",
    "ReconciliationSnapshot",
    # Reports
    "CardStatusReport",
    "ContributorReport",
    "ParsedListReport",
    "ProgressReport",
    "ReconciliationReport",
    "build_parsed_list_report",
    "build_report",
]
