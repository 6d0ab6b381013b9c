"""
Requirement and contribution collections.

Both sets are immutable snapshots. A structural change produces a new set,
which forces a full recomputation downstream. This matters for requirements:
the required quantity is a MAX across decks, and a MAX cannot be undone
incrementally when the deck that supplied it is removed.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from deckrebuild.models.deck_list import ParsedList


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class RequirementDeck:
    """
    A target deck whose card quantities must be rebuilt.

    Attributes:
        deck_id: Identifier assigned by the storage collaborator
        deck_name: Human label for the deck
        uploaded_by: Who uploaded the deck
        parsed: The parsed deck file
        created_at: When the deck was added
    """

    deck_id: str
    deck_name: str
    uploaded_by: str
    parsed: ParsedList
    created_at: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class Contribution:
    """
    Cards donated toward the requirements by one contributor.

    The source label of the parsed list is the uploaded filename.
    """

    contribution_id: str
    contributor_name: str
    parsed: ParsedList
    created_at: datetime = field(default_factory=_now)

    @property
    def source_label(self) -> str:
        return self.parsed.source_label


@dataclass(frozen=True)
class RequirementSet:
    """All current requirement decks in insertion order."""

    decks: tuple[RequirementDeck, ...] = ()

    def __iter__(self) -> Iterator[RequirementDeck]:
        return iter(self.decks)

    def __len__(self) -> int:
        return len(self.decks)

    def get(self, deck_id: str) -> RequirementDeck | None:
        for deck in self.decks:
            if deck.deck_id == deck_id:
                return deck
        return None

    def with_deck(self, deck: RequirementDeck) -> "RequirementSet":
        """Return a new set including `deck`. Deck ids must be unique."""
        if self.get(deck.deck_id) is not None:
            raise ValueError(f"Requirement deck '{deck.deck_id}' already exists")
        return replace(self, decks=(*self.decks, deck))

    def without_deck(self, deck_id: str) -> "RequirementSet":
        """Return a new set with `deck_id` removed (unchanged if absent)."""
        return replace(self, decks=tuple(d for d in self.decks if d.deck_id != deck_id))

    def lists(self) -> list[ParsedList]:
        return [deck.parsed for deck in self.decks]


@dataclass(frozen=True)
class ContributionSet:
    """All contributions so far. Grows monotonically."""

    contributions: tuple[Contribution, ...] = ()

    def __iter__(self) -> Iterator[Contribution]:
        return iter(self.contributions)

    def __len__(self) -> int:
        return len(self.contributions)

    def with_contribution(self, contribution: Contribution) -> "ContributionSet":
        return replace(self, contributions=(*self.contributions, contribution))

    def uploads(self) -> list[tuple[str, str]]:
        """
        Distinct (source_label, contributor_name) pairs in upload order.

        The same contributor uploading the same filename twice is one upload
        for history display, even though both count toward gathered totals.
        """
        seen: set[tuple[str, str]] = set()
        uploads: list[tuple[str, str]] = []
        for contribution in self.contributions:
            key = (contribution.source_label, contribution.contributor_name)
            if key not in seen:
                seen.add(key)
                uploads.append(key)
        return uploads


@dataclass(frozen=True)
class CollectionSnapshot:
    """Everything the recompute entry point reads, captured at one instant."""

    requirements: RequirementSet = field(default_factory=RequirementSet)
    contributions: ContributionSet = field(default_factory=ContributionSet)
