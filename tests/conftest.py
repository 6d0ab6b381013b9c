from pathlib import Path

import pytest

from deckrebuild.models.card import CardRecord
from deckrebuild.models.collections import (
    CollectionSnapshot,
    Contribution,
    ContributionSet,
    RequirementDeck,
    RequirementSet,
)
from deckrebuild.models.deck_list import ParsedList

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _make_list(source_label: str, cards: dict[str, int]) -> ParsedList:
    """Build a successful ParsedList from a {name: quantity} dict."""
    return ParsedList(
        source_label=source_label,
        cards=[CardRecord(name=name, quantity=qty) for name, qty in cards.items()],
    )


def _make_snapshot(
    requirements: list[dict[str, int]],
    contributions: list[tuple[str, dict[str, int]]] | None = None,
) -> CollectionSnapshot:
    """Build a collection snapshot from plain dicts."""
    decks = tuple(
        RequirementDeck(
            deck_id=f"deck-{i}",
            deck_name=f"Deck {i}",
            uploaded_by="tester",
            parsed=_make_list(f"deck-{i}.txt", cards),
        )
        for i, cards in enumerate(requirements, 1)
    )
    given = tuple(
        Contribution(
            contribution_id=f"contribution-{i}",
            contributor_name=name,
            parsed=_make_list(f"{name.lower()}-{i}.txt", cards),
        )
        for i, (name, cards) in enumerate(contributions or [], 1)
    )
    return CollectionSnapshot(
        requirements=RequirementSet(decks=decks),
        contributions=ContributionSet(contributions=given),
    )


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_plain_text() -> str:
    """Plain-text deck with a sideboard after the blank line."""
    return "4 Lightning Bolt\n3 Goblin Guide\n\n4 Pyroblast"


@pytest.fixture
def sample_element_deck() -> str:
    """Structured deck with Quantity/Name sub-elements."""
    return """<?xml version="1.0" encoding="utf-8"?>
<Deck>
  <Cards>
    <Card><Quantity>4</Quantity><Name>Lightning Bolt</Name></Card>
    <Card><Quantity>3</Quantity><Name>Goblin Guide</Name></Card>
  </Cards>
</Deck>"""


@pytest.fixture
def sample_attribute_deck() -> str:
    """Structured deck in the MTGO attribute style."""
    return """<?xml version="1.0" encoding="utf-8"?>
<Deck>
  <Cards CatID="1" Quantity="4" Sideboard="false" Name="Lightning Bolt" />
  <Cards CatID="2" Quantity="3" Sideboard="false" Name="Goblin Guide" />
  <Cards CatID="3" Quantity="4" Sideboard="true" Name="Pyroblast" />
</Deck>"""


@pytest.fixture
def make_list():
    """Factory fixture: make_list(source_label, {name: quantity})."""
    return _make_list


@pytest.fixture
def make_snapshot():
    """Factory fixture: make_snapshot([requirement dicts], [(contributor, dict)])."""
    return _make_snapshot
