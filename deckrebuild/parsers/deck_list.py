"""
Card list parser.

Turns a detected deck file into a ParsedList: canonical (name, quantity)
records plus diagnostics.

Each dialect has its own parsing function, selected by the detected
dialect. Per card unit the rules are the same everywhere:

1. Sideboard units are skipped silently (never an error)
2. Quantity and name are resolved by trying the dialect's synonyms in order
3. Quantity must be a positive integer and name non-empty after trimming

PARTIAL FAILURE POLICY: a malformed unit records a FieldError and is
skipped. Parsing never aborts on a per-unit fault. A structural problem
with the file as a whole (FormatError) produces a failed ParsedList.
Expected malformed input is never raised to the caller.
"""

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from deckrebuild.models.card import CardRecord
from deckrebuild.models.deck_list import Dialect, ParsedList
from deckrebuild.models.failure import (
    EmptyResultError,
    FieldError,
    FormatError,
    ParseIssue,
    UploadRejectedError,
)
from deckrebuild.parsers.consolidation import consolidate
from deckrebuild.parsers.dialect import (
    DetectedDocument,
    decode_content,
    detect_dialect,
    local_name,
    validate_upload,
)
from deckrebuild.parsers.names import normalize_card_name

logger = logging.getLogger(__name__)

# Pattern: "4 Lightning Bolt"
# Groups: (quantity, card_name)
CARD_LINE_PATTERN = re.compile(r"^(\d+)\s+(.+)$", re.ASCII)

_QUANTITY_PATTERN = re.compile(r"^\d+$", re.ASCII)

SIDEBOARD_FLAG = "sideboard"


@dataclass(frozen=True)
class FieldSynonym:
    """
    One place a card unit may keep a field.

    Child element tags match exactly. Attribute names match in any case.
    """

    kind: str  # "child" or "attribute"
    key: str

    def read(self, unit: ET.Element) -> str | None:
        if self.kind == "child":
            for child in unit:
                if local_name(child.tag) == self.key:
                    return child.text or ""
            return None
        return _attribute(unit, self.key)


def _child(tag: str) -> FieldSynonym:
    return FieldSynonym("child", tag)


def _attr(name: str) -> FieldSynonym:
    return FieldSynonym("attribute", name)


# First match wins. Element-style files keep fields in sub-nodes, attribute-style
# files in attributes; each dialect falls back to the other form.
QUANTITY_SYNONYMS: dict[Dialect, tuple[FieldSynonym, ...]] = {
    Dialect.STRUCTURED_ELEMENT: (_child("Quantity"), _child("quantity"), _attr("quantity")),
    Dialect.STRUCTURED_ATTRIBUTE: (_attr("quantity"), _child("Quantity"), _child("quantity")),
}

NAME_SYNONYMS: dict[Dialect, tuple[FieldSynonym, ...]] = {
    Dialect.STRUCTURED_ELEMENT: (_child("Name"), _child("name"), _child("n"), _attr("name")),
    Dialect.STRUCTURED_ATTRIBUTE: (_attr("name"), _child("Name"), _child("name"), _child("n")),
}


UnitParse = tuple[list[CardRecord], list[ParseIssue]]


# =============================================================================
# STRUCTURED DIALECTS
# =============================================================================


def parse_structured_element(document: DetectedDocument) -> UnitParse:
    """Parse <Card><Quantity/><Name/></Card> units."""
    return _parse_units(document.units, Dialect.STRUCTURED_ELEMENT)


def parse_structured_attribute(document: DetectedDocument) -> UnitParse:
    """Parse <Cards Quantity=".." Name=".." Sideboard=".."/> units."""
    return _parse_units(document.units, Dialect.STRUCTURED_ATTRIBUTE)


def _parse_units(units: tuple[ET.Element, ...], dialect: Dialect) -> UnitParse:
    cards: list[CardRecord] = []
    issues: list[ParseIssue] = []

    for position, unit in enumerate(units, 1):
        try:
            card = _parse_unit(unit, dialect, position)
        except FieldError as e:
            issues.append(e.to_issue(position))
            continue
        if card is not None:
            cards.append(card)

    return cards, issues


def _parse_unit(unit: ET.Element, dialect: Dialect, position: int) -> CardRecord | None:
    """
    Read one card unit.

    Returns None for sideboard units.

    Raises:
        FieldError: Missing or invalid quantity or name
    """
    if _is_sideboard_unit(unit):
        return None

    raw_quantity = _resolve(unit, QUANTITY_SYNONYMS[dialect])
    if raw_quantity is None:
        raise FieldError(f"Card {position}: Missing quantity")

    raw_name = _resolve(unit, NAME_SYNONYMS[dialect])
    if raw_name is None:
        raise FieldError(f"Card {position}: Missing card name")

    name = normalize_card_name(raw_name)
    if not name:
        raise FieldError(f"Card {position}: Empty card name")

    quantity = parse_quantity(raw_quantity)
    if quantity is None:
        raise FieldError(f'Card {position} ({name}): Invalid quantity "{raw_quantity.strip()}"')

    return CardRecord(name=name, quantity=quantity)


def _resolve(unit: ET.Element, synonyms: tuple[FieldSynonym, ...]) -> str | None:
    for synonym in synonyms:
        value = synonym.read(unit)
        if value is not None:
            return value
    return None


def _attribute(unit: ET.Element, name: str) -> str | None:
    wanted = name.lower()
    for key, value in unit.attrib.items():
        if local_name(key).lower() == wanted:
            return value
    return None


def _is_sideboard_unit(unit: ET.Element) -> bool:
    """Only an explicit "true" flag marks a sideboard unit."""
    flag = _attribute(unit, SIDEBOARD_FLAG)
    if flag is None:
        for child in unit:
            if local_name(child.tag).lower() == SIDEBOARD_FLAG:
                flag = child.text or ""
                break
    return flag is not None and flag.strip().lower() == "true"


def parse_quantity(raw: str) -> int | None:
    """Parse a positive base-10 integer, None if invalid."""
    stripped = raw.strip()
    if not _QUANTITY_PATTERN.match(stripped):
        return None
    quantity = int(stripped)
    return quantity if quantity > 0 else None


# =============================================================================
# PLAIN TEXT DIALECT
# =============================================================================


def parse_plain_text(document: DetectedDocument) -> UnitParse:
    """
    Parse "<quantity> <card name>" lines.

    The first blank line after at least one card starts the sideboard and
    everything after it is skipped. Lines that don't look like cards
    (headers such as "Sideboard", comments) are ignored, not errors.
    """
    cards: list[CardRecord] = []
    issues: list[ParseIssue] = []
    in_sideboard = False

    for line_number, raw_line in enumerate(document.lines, 1):
        line = raw_line.strip()

        if not line:
            if cards:
                in_sideboard = True
            continue

        if in_sideboard:
            continue

        match = CARD_LINE_PATTERN.match(line)
        if not match:
            continue

        raw_quantity, raw_name = match.groups()
        try:
            cards.append(_card_from_line(raw_quantity, raw_name, line_number))
        except FieldError as e:
            issues.append(e.to_issue(line_number))

    return cards, issues


def _card_from_line(raw_quantity: str, raw_name: str, line_number: int) -> CardRecord:
    quantity = parse_quantity(raw_quantity)
    if quantity is None:
        raise FieldError(f'Line {line_number}: Invalid quantity "{raw_quantity}"')

    name = normalize_card_name(raw_name)
    if not name:
        raise FieldError(f"Line {line_number}: Empty card name")

    return CardRecord(name=name, quantity=quantity)


DIALECT_PARSERS: dict[Dialect, Callable[[DetectedDocument], UnitParse]] = {
    Dialect.STRUCTURED_ELEMENT: parse_structured_element,
    Dialect.STRUCTURED_ATTRIBUTE: parse_structured_attribute,
    Dialect.PLAIN_TEXT: parse_plain_text,
}


# =============================================================================
# PUBLIC API
# =============================================================================


def parse_deck_content(
    content: str | bytes,
    source_label: str,
    format_hint: str = "auto",
) -> ParsedList:
    """
    Parse deck file content into a consolidated ParsedList.

    Args:
        content: Raw file content (bytes are decoded as UTF-8)
        source_label: Label for the result, usually the filename
        format_hint: File extension ("dek", "xml", "txt") or "auto"

    Returns:
        ParsedList. success is False when no valid card was found, in which
        case issues is never empty.
    """
    text = decode_content(content)

    try:
        document = detect_dialect(text, format_hint)
    except FormatError as e:
        logger.info(
            "deck_format_unrecognized",
            extra={"source_label": source_label, "reason": e.message, "detail": e.detail},
        )
        return ParsedList(source_label=source_label, issues=[e.to_issue()])

    cards, issues = DIALECT_PARSERS[document.dialect](document)
    consolidated = consolidate(cards)

    if not consolidated and not issues:
        issues.append(EmptyResultError().to_issue())

    parsed = ParsedList(
        source_label=source_label,
        cards=consolidated,
        issues=issues,
        dialect=document.dialect,
    )

    logger.info(
        "deck_parsed",
        extra={
            "source_label": source_label,
            "dialect": document.dialect.value,
            "unique_cards": len(parsed.cards),
            "total_cards": parsed.total_cards,
            "issue_count": len(parsed.issues),
        },
    )
    return parsed


def parse_deck_file(
    filename: str,
    content: str | bytes,
    max_bytes: int | None = None,
) -> ParsedList:
    """
    Validate and parse an uploaded deck file.

    The extension decides the dialect family (.dek/.xml markup, .txt text).
    Rejected uploads come back as a failed ParsedList, not an exception.
    """
    size = len(content) if isinstance(content, bytes) else len(content.encode("utf-8"))

    try:
        extension = validate_upload(filename, size, max_bytes)
    except UploadRejectedError as e:
        logger.info(
            "deck_upload_rejected",
            extra={"upload_filename": filename, "reason": e.message},
        )
        return ParsedList(source_label=filename, issues=[e.to_issue()])

    return parse_deck_content(content, filename, extension)


def parse_deck_path(path: Path, max_bytes: int | None = None) -> ParsedList:
    """Read and parse a deck file from disk."""
    return parse_deck_file(path.name, path.read_bytes(), max_bytes)
