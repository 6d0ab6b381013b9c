"""
Needed-list export.

Renders the cards still needed as plain text, one "<outstanding> <name>"
line per card, in status order. The output pastes straight back into the
plain-text deck dialect.
"""

from collections.abc import Iterable

from deckrebuild.models.status import CardStatus, CardStatusKind


def format_needed_list(statuses: Iterable[CardStatus]) -> str:
    """
    Format the needed subset of a status list.

    Args:
        statuses: Card statuses in classifier order

    Returns:
        Newline-joined lines with no trailing newline, "" if nothing is needed
    """
    return "\n".join(
        _format_line(card_status)
        for card_status in statuses
        if card_status.status is CardStatusKind.NEEDED
    )


def _format_line(card_status: CardStatus) -> str:
    return f"{card_status.outstanding_quantity} {card_status.name}"
