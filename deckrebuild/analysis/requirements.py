"""
Requirements aggregation.

The required quantity of a card is the MAXIMUM quantity found for it in any
single requirement deck, not the sum. A card needed x4 in one target deck
and x2 in another requires 4 copies in total, since the decks are rebuilt
from one shared pool.

MAX is not decomposable on removal: if the deck that supplied a maximum is
removed, the previous maximum cannot be recovered from the aggregate. The
aggregate is therefore always recomputed from all current decks.
"""

from collections.abc import Iterable

from deckrebuild.models.deck_list import ParsedList
from deckrebuild.parsers.names import normalize_card_name


def aggregate_requirements(requirement_lists: Iterable[ParsedList]) -> dict[str, int]:
    """
    Compute the required quantity of each card across requirement decks.

    Single pass over every requirement row, keeping a running max per name.

    Args:
        requirement_lists: Parsed lists of all current requirement decks

    Returns:
        Dict mapping normalized card names to required quantity
    """
    required: dict[str, int] = {}

    for parsed in requirement_lists:
        for card in parsed.cards:
            name = normalize_card_name(card.name)
            current = required.get(name, 0)
            required[name] = max(current, card.quantity)

    return required
