"""
Deck file dialect detection.

Classifies a raw upload into one of three dialects and hands back a
representation the card list parser can walk:

- structured-element / structured-attribute: an XML element tree plus the
  card unit elements found under the deck root
- plain-text: the file's lines

Structured files must have a recognizable root (a <Deck> document element)
holding a card collection (<Cards> or <Card> children). Anything else is a
FormatError, and no partial structured parse is attempted. Plain text has no
root requirement: a text file with no card lines is still "parseable" and
the card list parser decides what that means.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import PurePath

from deckrebuild.config import PLAIN_TEXT_EXTENSIONS, STRUCTURED_EXTENSIONS, settings
from deckrebuild.models.deck_list import Dialect
from deckrebuild.models.failure import FormatError, UploadRejectedError

logger = logging.getLogger(__name__)

ACCEPTED_EXTENSIONS = STRUCTURED_EXTENSIONS | PLAIN_TEXT_EXTENSIONS

ROOT_TAG = "deck"
CONTAINER_TAG = "cards"
UNIT_TAG = "card"

# Attribute names that mark a unit as attribute-style (compared lowercased)
_UNIT_ATTRIBUTES = frozenset({"quantity", "name"})


@dataclass(frozen=True)
class DetectedDocument:
    """
    A classified upload, ready for the card list parser.

    Attributes:
        dialect: Which parsing function applies
        root: Document element for structured dialects, None for plain text
        units: Card unit elements in document order (structured only)
        lines: Raw lines of the file (plain text only)
    """

    dialect: Dialect
    root: ET.Element | None = None
    units: tuple[ET.Element, ...] = field(default_factory=tuple)
    lines: tuple[str, ...] = field(default_factory=tuple)


def file_extension(filename: str) -> str:
    """Lowercased extension without the dot ("" if none)."""
    return PurePath(filename).suffix.lower().lstrip(".")


def validate_upload(filename: str, size: int, max_bytes: int | None = None) -> str:
    """
    Check an upload before reading it.

    Args:
        filename: Name of the uploaded file
        size: Size in bytes
        max_bytes: Size limit, defaults to settings.max_upload_bytes

    Returns:
        The file's extension, to be used as the format hint

    Raises:
        UploadRejectedError: Unsupported extension, empty file, or file too large
    """
    limit = settings.max_upload_bytes if max_bytes is None else max_bytes
    extension = file_extension(filename)

    if extension not in ACCEPTED_EXTENSIONS:
        accepted = ", ".join(f".{ext}" for ext in sorted(ACCEPTED_EXTENSIONS))
        raise UploadRejectedError(f"File must have one of these extensions: {accepted}")

    if size == 0:
        raise UploadRejectedError("File is empty")

    if size > limit:
        raise UploadRejectedError(f"File too large (max {limit // (1024 * 1024)}MB)")

    return extension


def decode_content(content: str | bytes) -> str:
    """Decode an upload as UTF-8, dropping a byte order mark if present."""
    if isinstance(content, bytes):
        return content.decode("utf-8-sig", errors="replace")
    return content.removeprefix("\ufeff")


def detect_dialect(text: str, format_hint: str = "auto") -> DetectedDocument:
    """
    Classify deck file content.

    Args:
        text: Decoded file content
        format_hint: File extension ("dek", "xml", "txt") or "auto" to sniff

    Returns:
        DetectedDocument for the card list parser

    Raises:
        FormatError: Unsupported hint, malformed markup, or no deck root /
            card collection in a structured file
    """
    hint = format_hint.lower().lstrip(".")

    if hint == "auto":
        structured = text.lstrip().startswith("<")
    elif hint in STRUCTURED_EXTENSIONS:
        structured = True
    elif hint in PLAIN_TEXT_EXTENSIONS:
        structured = False
    else:
        raise FormatError(f"Unsupported file format: .{hint}")

    if not structured:
        return DetectedDocument(dialect=Dialect.PLAIN_TEXT, lines=tuple(text.splitlines()))

    return _detect_structured(text)


def _detect_structured(text: str) -> DetectedDocument:
    cleaned = text.strip()
    if not cleaned:
        raise FormatError("File is empty")

    try:
        root = ET.fromstring(cleaned)
    except (ET.ParseError, ValueError) as e:
        raise FormatError("Invalid deck file: malformed XML", detail=str(e)) from e

    if not _is_tag(root, ROOT_TAG):
        raise FormatError("Invalid deck file format: No Deck element found")

    units = _find_card_units(root)
    dialect = (
        Dialect.STRUCTURED_ATTRIBUTE
        if any(_has_unit_attributes(unit) for unit in units)
        else Dialect.STRUCTURED_ELEMENT
    )

    logger.debug(
        "dialect_detected",
        extra={"dialect": dialect.value, "unit_count": len(units)},
    )
    return DetectedDocument(dialect=dialect, root=root, units=tuple(units))


def _find_card_units(root: ET.Element) -> list[ET.Element]:
    """
    Collect card unit elements under the deck root, in document order.

    Accepted shapes:
        <Deck><Cards><Card>...</Card></Cards></Deck>   container of units
        <Deck><Cards Quantity=".." Name=".."/></Deck>  each Cards is a unit
        <Deck><Card>...</Card></Deck>                  units directly under root

    An empty <Cards/> container contributes nothing.

    Raises:
        FormatError: If the root holds no Cards or Card node at all
    """
    units: list[ET.Element] = []
    found_collection = False

    for child in root:
        if _is_tag(child, CONTAINER_TAG):
            found_collection = True
            nested = [node for node in child if _is_tag(node, UNIT_TAG)]
            if nested:
                units.extend(nested)
            elif child.attrib or len(child) > 0:
                units.append(child)
        elif _is_tag(child, UNIT_TAG):
            found_collection = True
            units.append(child)

    if not found_collection:
        raise FormatError("No cards found in deck file")

    return units


def local_name(tag: str) -> str:
    """Element tag without any "{namespace}" prefix."""
    return tag.rsplit("}", 1)[-1]


def _is_tag(element: ET.Element, name: str) -> bool:
    return local_name(element.tag).lower() == name


def _has_unit_attributes(element: ET.Element) -> bool:
    return any(local_name(key).lower() in _UNIT_ATTRIBUTES for key in element.attrib)
