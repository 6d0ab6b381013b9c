"""
Card name normalization.

The normalized name is the merge key everywhere two names are compared.
Case is preserved: "mountain" and "Mountain" are different keys.
"""

import re

_WHITESPACE_RUN = re.compile(r"\s+")

# Curly and typographic quotes seen in exports pasted through word processors
_DOUBLE_QUOTES = "“”„‟″"
_SINGLE_QUOTES = "‘’‚‛′"

_QUOTE_TABLE = str.maketrans(
    {**dict.fromkeys(_DOUBLE_QUOTES, '"'), **dict.fromkeys(_SINGLE_QUOTES, "'")}
)


def normalize_card_name(name: str) -> str:
    """
    Canonicalize a card name for matching and merging.

    Trims surrounding whitespace, collapses internal whitespace runs to a
    single space, and straightens curly quotes and apostrophes.

    Examples:
        "  Lightning   Bolt " -> "Lightning Bolt"
        "Urza’s Saga" -> "Urza's Saga"
    """
    collapsed = _WHITESPACE_RUN.sub(" ", name).strip()
    return collapsed.translate(_QUOTE_TABLE)


def name_sort_key(name: str) -> tuple[str, str]:
    """
    Alphabetical sort key for normalized names.

    Case-insensitive first, exact name as tie-breaker so the order is total.
    """
    return (name.casefold(), name)
