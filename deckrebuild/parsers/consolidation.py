"""
Duplicate consolidation within one parsed list.

A deck file may list the same card more than once ("2 Island" and later
"3 Island"). Consolidation merges those into one record per normalized name.

INVARIANTS:
- Conservation: output quantity sum equals input quantity sum
- Idempotence: consolidate(consolidate(x)) == consolidate(x)
- Output is sorted alphabetically by normalized name
"""

from collections.abc import Iterable

from deckrebuild.models.card import CardRecord
from deckrebuild.parsers.names import name_sort_key, normalize_card_name


def consolidate(cards: Iterable[CardRecord]) -> list[CardRecord]:
    """
    Merge duplicate card records by normalized name, summing quantities.

    Args:
        cards: Card records from a single deck file (sideboard already excluded)

    Returns:
        One record per distinct normalized name, sorted by name
    """
    totals: dict[str, int] = {}
    for card in cards:
        key = normalize_card_name(card.name)
        totals[key] = totals.get(key, 0) + card.quantity

    return [
        CardRecord(name=name, quantity=totals[name]) for name in sorted(totals, key=name_sort_key)
    ]


def cards_to_dict(cards: Iterable[CardRecord]) -> dict[str, int]:
    """Consolidated {name: quantity} view of a card list."""
    return {card.name: card.quantity for card in consolidate(cards)}
