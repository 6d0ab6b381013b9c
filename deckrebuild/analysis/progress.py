"""
Progress summary.

Rolls a full status list into scalar totals. Surplus on one card never
offsets a deficit on another: outstanding totals only count positive
outstanding quantities.
"""

from collections.abc import Iterable

from deckrebuild.models.status import CardStatus, CardStatusKind, ProgressSummary


def summarize_progress(statuses: Iterable[CardStatus]) -> ProgressSummary:
    """
    Compute totals, status counts and completion percentage.

    completion_percentage = round(100 * (required - outstanding) / required),
    rounding halves up, or 0 when nothing is required.
    """
    total_required = 0
    total_gathered = 0
    total_outstanding = 0
    counts = dict.fromkeys(CardStatusKind, 0)
    unique = 0

    for card_status in statuses:
        unique += 1
        total_required += card_status.required_quantity
        total_gathered += card_status.gathered_quantity
        total_outstanding += max(0, card_status.outstanding_quantity)
        counts[card_status.status] += 1

    return ProgressSummary(
        total_required=total_required,
        total_gathered=total_gathered,
        total_outstanding=total_outstanding,
        completion_percentage=completion_percentage(total_required, total_outstanding),
        needed_count=counts[CardStatusKind.NEEDED],
        exact_count=counts[CardStatusKind.EXACT],
        surplus_count=counts[CardStatusKind.SURPLUS],
        unique_card_count=unique,
    )


def completion_percentage(total_required: int, total_outstanding: int) -> int:
    """Whole-number percentage of required copies already covered."""
    if total_required <= 0:
        return 0
    covered = total_required - total_outstanding
    # Integer round-half-up of 100 * covered / total_required
    return (200 * covered + total_required) // (2 * total_required)
