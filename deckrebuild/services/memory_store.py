"""
In-memory deck store.

Process-local stand-in for the persistence and change-notification
collaborators. Used by the CLI job and by tests. It implements both the
SnapshotSource and DeckSink protocols.
"""

import logging
import uuid
from collections.abc import Awaitable, Callable

from deckrebuild.models.collections import (
    CollectionSnapshot,
    Contribution,
    ContributionSet,
    RequirementDeck,
    RequirementSet,
)
from deckrebuild.models.deck_list import ParsedList
from deckrebuild.services.reconciliation import ChangeEvent, ChangeSource

logger = logging.getLogger(__name__)

ChangeListener = Callable[[ChangeEvent], Awaitable[object]]


class InMemoryDeckStore:
    """
    Holds requirement decks and contributions as immutable sets.

    Every write swaps in a new set and then notifies the listener, so a
    snapshot handed out earlier never changes under its reader. A listener
    failure is logged and does not undo or fail the committed write.
    """

    def __init__(self, on_change: ChangeListener | None = None) -> None:
        self._requirements = RequirementSet()
        self._contributions = ContributionSet()
        self._on_change = on_change

    async def load_snapshot(self) -> CollectionSnapshot:
        return CollectionSnapshot(
            requirements=self._requirements,
            contributions=self._contributions,
        )

    # --- Requirement Operations ---

    async def store_requirement(self, deck_name: str, uploaded_by: str, parsed: ParsedList) -> str:
        """Add a requirement deck. Returns the new deck id."""
        deck = RequirementDeck(
            deck_id=str(uuid.uuid4()),
            deck_name=deck_name,
            uploaded_by=uploaded_by,
            parsed=parsed,
        )
        self._requirements = self._requirements.with_deck(deck)
        await self._notify(ChangeEvent(ChangeSource.REQUIREMENTS, "insert"))
        return deck.deck_id

    async def remove_requirement(self, deck_id: str) -> bool:
        """
        Remove a requirement deck.

        Returns False if no deck has this id.
        """
        if self._requirements.get(deck_id) is None:
            return False
        self._requirements = self._requirements.without_deck(deck_id)
        await self._notify(ChangeEvent(ChangeSource.REQUIREMENTS, "delete"))
        return True

    async def list_requirement_decks(self) -> list[RequirementDeck]:
        """Requirement decks, newest first."""
        return sorted(self._requirements, key=lambda d: d.created_at, reverse=True)

    # --- Contribution Operations ---

    async def store_contribution(self, contributor_name: str, parsed: ParsedList) -> str:
        """Append a contribution. Returns the new contribution id."""
        contribution = Contribution(
            contribution_id=str(uuid.uuid4()),
            contributor_name=contributor_name,
            parsed=parsed,
        )
        self._contributions = self._contributions.with_contribution(contribution)
        await self._notify(ChangeEvent(ChangeSource.CONTRIBUTIONS, "insert"))
        return contribution.contribution_id

    async def _notify(self, event: ChangeEvent) -> None:
        if self._on_change is None:
            return
        try:
            await self._on_change(event)
        except Exception as e:
            logger.warning(
                "change_notification_failed",
                extra={
                    "change_source": event.source.value,
                    "action": event.action,
                    "error": str(e),
                },
            )
