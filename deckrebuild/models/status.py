from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class CardStatusKind(str, Enum):
    """Where a card stands against its requirement."""

    NEEDED = "needed"  # outstanding > 0
    EXACT = "exact"  # outstanding == 0
    SURPLUS = "surplus"  # outstanding < 0

    @property
    def rank(self) -> int:
        """Sort rank: needed first, then exact, then surplus."""
        return _STATUS_RANK[self]

    @classmethod
    def from_outstanding(cls, outstanding: int) -> "CardStatusKind":
        if outstanding > 0:
            return cls.NEEDED
        if outstanding == 0:
            return cls.EXACT
        return cls.SURPLUS


_STATUS_RANK = {
    CardStatusKind.NEEDED: 0,
    CardStatusKind.EXACT: 1,
    CardStatusKind.SURPLUS: 2,
}


@dataclass(frozen=True, slots=True)
class Contributor:
    """One contribution list's share of a card's gathered total."""

    name: str
    quantity: int
    source: str


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """
    Price decoration from the price-lookup collaborator.

    Attributes:
        price: MTGO price in tix, None if no printing has one
        canonical_grouping: Set code of the printing the price belongs to
    """

    price: Decimal | None
    canonical_grouping: str


@dataclass(frozen=True)
class CardStatus:
    """
    Reconciled state of one card. Always rebuilt, never mutated.

    `price` is decoration only and plays no part in the quantities.
    """

    name: str
    required_quantity: int
    gathered_quantity: int
    contributors: tuple[Contributor, ...] = ()
    price: PriceQuote | None = None

    @property
    def outstanding_quantity(self) -> int:
        return self.required_quantity - self.gathered_quantity

    @property
    def status(self) -> CardStatusKind:
        return CardStatusKind.from_outstanding(self.outstanding_quantity)


@dataclass(frozen=True)
class ProgressSummary:
    """Scalar totals over a full set of card statuses."""

    total_required: int = 0
    total_gathered: int = 0
    total_outstanding: int = 0
    completion_percentage: int = 0
    needed_count: int = 0
    exact_count: int = 0
    surplus_count: int = 0
    unique_card_count: int = 0


@dataclass(frozen=True)
class ReconciliationSnapshot:
    """One published result of the recompute entry point."""

    statuses: tuple[CardStatus, ...] = ()
    summary: ProgressSummary = field(default_factory=ProgressSummary)

    def needed(self) -> list[CardStatus]:
        return [s for s in self.statuses if s.status is CardStatusKind.NEEDED]

    def gathered(self) -> list[CardStatus]:
        return [s for s in self.statuses if s.gathered_quantity > 0]

    def get(self, card_name: str) -> CardStatus | None:
        for card_status in self.statuses:
            if card_status.name == card_name:
                return card_status
        return None
