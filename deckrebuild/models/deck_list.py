from dataclasses import dataclass, field
from enum import Enum

from deckrebuild.models.card import CardRecord
from deckrebuild.models.failure import ParseIssue


class Dialect(str, Enum):
    """The three deck file dialects understood by the parser."""

    # <Card><Quantity>4</Quantity><Name>Lightning Bolt</Name></Card>
    STRUCTURED_ELEMENT = "structured-element"

    # <Cards Quantity="4" Name="Lightning Bolt" Sideboard="false" />
    STRUCTURED_ATTRIBUTE = "structured-attribute"

    # 4 Lightning Bolt
    PLAIN_TEXT = "plain-text"

    @property
    def is_structured(self) -> bool:
        return self is not Dialect.PLAIN_TEXT


@dataclass(frozen=True)
class DeckStats:
    """Summary numbers for one parsed deck file."""

    total_cards: int
    unique_cards: int
    average_quantity: float
    has_errors: bool


@dataclass
class ParsedList:
    """
    The outcome of parsing one uploaded deck file.

    Attributes:
        source_label: Where the list came from (usually the filename)
        cards: Consolidated, sideboard-free card records sorted by name
        issues: Every diagnostic recorded during the parse
        dialect: Dialect chosen by detection, None if detection failed
    """

    source_label: str
    cards: list[CardRecord] = field(default_factory=list)
    issues: list[ParseIssue] = field(default_factory=list)
    dialect: Dialect | None = None

    @property
    def errors(self) -> list[str]:
        """Issue messages, in the order they were recorded."""
        return [issue.message for issue in self.issues]

    @property
    def success(self) -> bool:
        """True if at least one valid card was found."""
        return len(self.cards) > 0

    @property
    def total_cards(self) -> int:
        return sum(card.quantity for card in self.cards)

    def stats(self) -> DeckStats:
        unique = len(self.cards)
        total = self.total_cards
        average = round(total / unique, 2) if unique > 0 else 0.0
        return DeckStats(
            total_cards=total,
            unique_cards=unique,
            average_quantity=average,
            has_errors=len(self.issues) > 0,
        )
