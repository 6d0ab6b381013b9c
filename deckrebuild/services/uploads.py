"""
Upload ingestion.

Parses an uploaded deck file and hands the result to the deck sink, either
as a requirement deck or as a contribution. Both paths use the same parser
and the same sideboard filter.

Failed parses are never stored. With dry_run the upload is parsed and the
would-be write is logged, but the sink is not touched.
"""

import logging
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Protocol

from deckrebuild.models.deck_list import ParsedList
from deckrebuild.models.failure import (
    CollaboratorUnavailableError,
    FailureKind,
    KnownError,
)
from deckrebuild.parsers.deck_list import parse_deck_file

logger = logging.getLogger(__name__)


class DeckSink(Protocol):
    """Storage collaborator that accepts parsed uploads."""

    async def store_requirement(
        self, deck_name: str, uploaded_by: str, parsed: ParsedList
    ) -> str: ...

    async def store_contribution(self, contributor_name: str, parsed: ParsedList) -> str: ...

    async def remove_requirement(self, deck_id: str) -> bool: ...


@dataclass
class UploadResult:
    """
    Outcome of one upload.

    Attributes:
        success: True if the file yielded at least one valid card
        parsed: The full parse result with diagnostics
        contributor_name: Uploader or contributor name
        deck_name: Requirement deck label, None for contributions
        stored: Identifier assigned by the sink, None if nothing was stored
        cards_processed: Number of distinct cards in the upload
        errors: Diagnostic messages from parsing
    """

    success: bool
    parsed: ParsedList
    contributor_name: str
    deck_name: str | None = None
    stored: str | None = None
    cards_processed: int = 0
    errors: list[str] = field(default_factory=list)


def _require_name(value: str, field_name: str) -> str:
    name = value.strip()
    if not name:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message=f"{field_name} is required",
            suggestion=f"Enter a {field_name.lower()} before uploading.",
        )
    return name


def _result(
    parsed: ParsedList,
    contributor_name: str,
    deck_name: str | None = None,
    stored: str | None = None,
) -> UploadResult:
    return UploadResult(
        success=parsed.success,
        parsed=parsed,
        contributor_name=contributor_name,
        deck_name=deck_name,
        stored=stored,
        cards_processed=len(parsed.cards),
        errors=parsed.errors,
    )


async def ingest_requirement_upload(
    sink: DeckSink,
    filename: str,
    content: str | bytes,
    uploaded_by: str,
    deck_name: str | None = None,
    *,
    dry_run: bool = False,
) -> UploadResult:
    """
    Parse a requirement deck upload and store it.

    Args:
        sink: Storage collaborator
        filename: Uploaded filename, decides the dialect family
        content: Raw file content
        uploaded_by: Who is uploading the deck
        deck_name: Deck label, defaults to the filename without extension
        dry_run: Parse and log only, never write

    Returns:
        UploadResult with the parse outcome and assigned deck id

    Raises:
        KnownError: If uploaded_by is empty
        CollaboratorUnavailableError: If the sink fails
    """
    uploader = _require_name(uploaded_by, "Uploader name")
    label = (deck_name or "").strip() or PurePath(filename).stem

    parsed = parse_deck_file(filename, content)
    if not parsed.success:
        logger.info(
            "requirement_upload_failed",
            extra={"upload_filename": filename, "issue_count": len(parsed.issues)},
        )
        return _result(parsed, uploader, deck_name=label)

    if dry_run:
        logger.info(
            "requirement_upload_dry_run",
            extra={
                "deck_name": label,
                "uploaded_by": uploader,
                "unique_cards": len(parsed.cards),
                "total_cards": parsed.total_cards,
            },
        )
        return _result(parsed, uploader, deck_name=label)

    try:
        deck_id = await sink.store_requirement(label, uploader, parsed)
    except Exception as e:
        logger.warning(
            "requirement_store_failed",
            extra={"deck_name": label, "error": str(e)},
        )
        raise CollaboratorUnavailableError("store requirement deck", detail=str(e)) from e

    logger.info(
        "requirement_upload_stored",
        extra={"deck_id": deck_id, "deck_name": label, "unique_cards": len(parsed.cards)},
    )
    return _result(parsed, uploader, deck_name=label, stored=deck_id)


async def ingest_contribution_upload(
    sink: DeckSink,
    filename: str,
    content: str | bytes,
    contributor_name: str,
    *,
    dry_run: bool = False,
) -> UploadResult:
    """
    Parse a contribution upload and store it.

    Raises:
        KnownError: If contributor_name is empty
        CollaboratorUnavailableError: If the sink fails
    """
    contributor = _require_name(contributor_name, "Contributor name")

    parsed = parse_deck_file(filename, content)
    if not parsed.success:
        logger.info(
            "contribution_upload_failed",
            extra={"upload_filename": filename, "issue_count": len(parsed.issues)},
        )
        return _result(parsed, contributor)

    if dry_run:
        logger.info(
            "contribution_upload_dry_run",
            extra={
                "contributor": contributor,
                "upload_filename": filename,
                "unique_cards": len(parsed.cards),
                "total_cards": parsed.total_cards,
            },
        )
        return _result(parsed, contributor)

    try:
        contribution_id = await sink.store_contribution(contributor, parsed)
    except Exception as e:
        logger.warning(
            "contribution_store_failed",
            extra={"contributor": contributor, "error": str(e)},
        )
        raise CollaboratorUnavailableError("store contribution", detail=str(e)) from e

    logger.info(
        "contribution_upload_stored",
        extra={"contribution_id": contribution_id, "contributor": contributor},
    )
    return _result(parsed, contributor, stored=contribution_id)
