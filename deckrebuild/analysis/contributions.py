"""
Contribution aggregation.

Gathered quantities are SUMMED across every contribution list. Each list's
share is kept as a Contributor entry so the UI can show who gave what.
Over-contribution is accepted without limit.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from deckrebuild.models.collections import Contribution
from deckrebuild.models.status import Contributor
from deckrebuild.parsers.names import normalize_card_name


@dataclass
class ContributionTotal:
    """Gathered total for one card with per-list attribution."""

    total_quantity: int = 0
    contributors: list[Contributor] = field(default_factory=list)

    def add(self, contributor: Contributor) -> None:
        self.total_quantity += contributor.quantity
        self.contributors.append(contributor)


def aggregate_contributions(
    contributions: Iterable[Contribution],
) -> dict[str, ContributionTotal]:
    """
    Sum gathered quantities per card across all contributions.

    Args:
        contributions: Every contribution received so far

    Returns:
        Dict mapping normalized card names to their ContributionTotal.
        Contributors appear in contribution order.
    """
    gathered: dict[str, ContributionTotal] = {}

    for contribution in contributions:
        for card in contribution.parsed.cards:
            name = normalize_card_name(card.name)
            total = gathered.setdefault(name, ContributionTotal())
            total.add(
                Contributor(
                    name=contribution.contributor_name,
                    quantity=card.quantity,
                    source=contribution.source_label,
                )
            )

    return gathered
