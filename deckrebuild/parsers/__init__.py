from deckrebuild.parsers.consolidation import cards_to_dict, consolidate
from deckrebuild.parsers.deck_list import (
    parse_deck_content,
    parse_deck_file,
    parse_deck_path,
)
from deckrebuild.parsers.dialect import DetectedDocument, detect_dialect, validate_upload
from deckrebuild.parsers.names import name_sort_key, normalize_card_name

__all__ = [
    "DetectedDocument",
    "cards_to_dict",
    "consolidate",
    "detect_dialect",
    "name_sort_key",
    "normalize_card_name",
    "parse_deck_content",
    "parse_deck_file",
    "parse_deck_path",
    "validate_upload",
]
