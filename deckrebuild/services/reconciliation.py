"""
Recompute entry point.

Reconciliation is a pure function from a CollectionSnapshot to a new
ReconciliationSnapshot. Nothing is updated incrementally: every change to the
requirement or contribution data triggers a full recompute.

StatusBoard is the thin stateful shell around that function. It holds the
last PUBLISHED snapshot and replaces it only when a recompute completes.

INVARIANTS:
- A failed load never touches the published snapshot (no partial overwrite)
- A refresh that started earlier never overwrites one that started later
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from deckrebuild.analysis.contributions import aggregate_contributions
from deckrebuild.analysis.progress import summarize_progress
from deckrebuild.analysis.requirements import aggregate_requirements
from deckrebuild.analysis.status import classify_statuses
from deckrebuild.models.collections import CollectionSnapshot
from deckrebuild.models.failure import CollaboratorUnavailableError, KnownError
from deckrebuild.models.status import ReconciliationSnapshot

logger = logging.getLogger(__name__)


class ChangeSource(str, Enum):
    """Which side of the data changed."""

    REQUIREMENTS = "requirements"
    CONTRIBUTIONS = "contributions"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """Notification that persisted deck data changed."""

    source: ChangeSource
    action: str  # "insert", "delete", ...


class SnapshotSource(Protocol):
    """Anything that can hand over the current collection state."""

    async def load_snapshot(self) -> CollectionSnapshot: ...


def recompute(snapshot: CollectionSnapshot) -> ReconciliationSnapshot:
    """
    Reconcile requirements against contributions.

    Deterministic: identical snapshots give identical results, including
    status order.
    """
    required = aggregate_requirements(snapshot.requirements.lists())
    gathered = aggregate_contributions(snapshot.contributions)
    statuses = classify_statuses(required, gathered)
    return ReconciliationSnapshot(
        statuses=tuple(statuses),
        summary=summarize_progress(statuses),
    )


class StatusBoard:
    """
    Publishes reconciliation results for the export and UI collaborators.

    Call refresh() on start-up and wire on_change() to the change
    notification collaborator.
    """

    def __init__(self, source: SnapshotSource) -> None:
        self._source = source
        self._published = ReconciliationSnapshot()
        self._started = 0
        self._published_seq = 0

    @property
    def published(self) -> ReconciliationSnapshot:
        """The last successfully computed snapshot."""
        return self._published

    async def refresh(self) -> ReconciliationSnapshot:
        """
        Load the current collection state, recompute and publish.

        Returns:
            The snapshot now published (a newer one if this refresh was
            overtaken)

        Raises:
            CollaboratorUnavailableError: If the snapshot source fails
        """
        self._started += 1
        seq = self._started

        try:
            collection = await self._source.load_snapshot()
        except KnownError:
            raise
        except Exception as e:
            logger.warning(
                "snapshot_load_failed",
                extra={"refresh_seq": seq, "error": str(e)},
            )
            raise CollaboratorUnavailableError("load deck snapshot", detail=str(e)) from e

        result = recompute(collection)

        if seq < self._published_seq:
            logger.debug("stale_refresh_discarded", extra={"refresh_seq": seq})
            return self._published

        self._published = result
        self._published_seq = seq
        logger.info(
            "status_board_published",
            extra={
                "refresh_seq": seq,
                "unique_cards": result.summary.unique_card_count,
                "completion_percentage": result.summary.completion_percentage,
            },
        )
        return result

    async def on_change(self, event: ChangeEvent) -> ReconciliationSnapshot:
        """Entry point for the change notification collaborator."""
        logger.debug(
            "deck_data_changed",
            extra={"change_source": event.source.value, "action": event.action},
        )
        return await self.refresh()
