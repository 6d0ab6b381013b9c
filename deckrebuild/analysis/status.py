"""
Status classification.

Combines the requirement and contribution aggregates into one CardStatus per
card in the union of both name sets. A card with a requirement and nothing
gathered appears, and so does a card gathered with no requirement.

ORDERING CONTRACT: needed < exact < surplus, then name ascending. The export
and UI collaborators rely on this order being stable for identical input.
"""

from collections.abc import Mapping

from deckrebuild.analysis.contributions import ContributionTotal
from deckrebuild.models.status import CardStatus
from deckrebuild.parsers.names import name_sort_key


def classify_statuses(
    required: Mapping[str, int],
    gathered: Mapping[str, ContributionTotal],
) -> list[CardStatus]:
    """
    Build the sorted status list for every known card.

    Args:
        required: Card name -> required quantity (MAX aggregate)
        gathered: Card name -> gathered total (SUM aggregate)

    Returns:
        CardStatus list sorted by status rank, then name
    """
    statuses: list[CardStatus] = []

    for name in set(required) | set(gathered):
        total = gathered.get(name)
        statuses.append(
            CardStatus(
                name=name,
                required_quantity=required.get(name, 0),
                gathered_quantity=total.total_quantity if total else 0,
                contributors=tuple(total.contributors) if total else (),
            )
        )

    statuses.sort(key=status_sort_key)
    return statuses


def status_sort_key(card_status: CardStatus) -> tuple[int, tuple[str, str]]:
    return (card_status.status.rank, name_sort_key(card_status.name))

