from unittest.mock import AsyncMock

import pytest

from deckrebuild.models.card import CardRecord
from deckrebuild.models.failure import CollaboratorUnavailableError, FailureKind, KnownError
from deckrebuild.services.memory_store import InMemoryDeckStore
from deckrebuild.services.uploads import ingest_contribution_upload, ingest_requirement_upload


@pytest.fixture
def store() -> InMemoryDeckStore:
    return InMemoryDeckStore()


class TestRequirementUpload:
    @pytest.mark.asyncio
    async def test_stores_parsed_deck(self, store: InMemoryDeckStore) -> None:
        result = await ingest_requirement_upload(store, "burn.txt", "4 Lightning Bolt", "alice")

        assert result.success
        assert result.stored is not None
        assert result.deck_name == "burn"
        assert result.contributor_name == "alice"
        assert result.cards_processed == 1

        snapshot = await store.load_snapshot()
        deck = snapshot.requirements.get(result.stored)
        assert deck is not None
        assert deck.uploaded_by == "alice"
        assert deck.parsed.cards == [CardRecord("Lightning Bolt", 4)]

    @pytest.mark.asyncio
    async def test_explicit_deck_name(self, store: InMemoryDeckStore) -> None:
        result = await ingest_requirement_upload(
            store, "burn.txt", "4 Lightning Bolt", "alice", deck_name="Legacy Burn"
        )

        assert result.deck_name == "Legacy Burn"

    @pytest.mark.asyncio
    async def test_dry_run_does_not_store(self, store: InMemoryDeckStore) -> None:
        result = await ingest_requirement_upload(
            store, "burn.txt", "4 Lightning Bolt", "alice", dry_run=True
        )

        assert result.success
        assert result.stored is None
        assert len((await store.load_snapshot()).requirements) == 0

    @pytest.mark.asyncio
    async def test_failed_parse_is_not_stored(self, store: InMemoryDeckStore) -> None:
        result = await ingest_requirement_upload(store, "burn.pdf", "4 Lightning Bolt", "alice")

        assert not result.success
        assert result.stored is None
        assert result.errors
        assert len((await store.load_snapshot()).requirements) == 0

    @pytest.mark.asyncio
    async def test_partial_parse_is_stored_with_errors(self, store: InMemoryDeckStore) -> None:
        result = await ingest_requirement_upload(
            store, "burn.txt", "4 Lightning Bolt\n0 Island", "alice"
        )

        assert result.success
        assert result.stored is not None
        assert result.errors == ['Line 2: Invalid quantity "0"']

    @pytest.mark.asyncio
    async def test_requires_uploader(self, store: InMemoryDeckStore) -> None:
        with pytest.raises(KnownError) as exc_info:
            await ingest_requirement_upload(store, "burn.txt", "4 Lightning Bolt", "   ")

        assert exc_info.value.kind is FailureKind.INVALID_INPUT

    @pytest.mark.asyncio
    async def test_sink_failure_is_escalated(self) -> None:
        sink = AsyncMock()
        sink.store_requirement.side_effect = RuntimeError("connection refused")

        with pytest.raises(CollaboratorUnavailableError) as exc_info:
            await ingest_requirement_upload(sink, "burn.txt", "4 Lightning Bolt", "alice")

        assert exc_info.value.operation == "store requirement deck"

    @pytest.mark.asyncio
    async def test_failing_change_listener_still_reports_stored(self) -> None:
        store = InMemoryDeckStore(on_change=AsyncMock(side_effect=RuntimeError("board offline")))

        result = await ingest_requirement_upload(store, "d.txt", "4 Island", "me")

        assert result.success
        assert result.stored is not None
        assert len((await store.load_snapshot()).requirements) == 1


class TestContributionUpload:
    @pytest.mark.asyncio
    async def test_stores_contribution(self, store: InMemoryDeckStore) -> None:
        result = await ingest_contribution_upload(store, "bolts.txt", "3 Lightning Bolt", "Bob")

        assert result.success
        assert result.deck_name is None
        snapshot = await store.load_snapshot()
        assert snapshot.contributions.uploads() == [("bolts.txt", "Bob")]

    @pytest.mark.asyncio
    async def test_sideboard_excluded_like_requirements(self, store: InMemoryDeckStore) -> None:
        """Contributions go through the same parser and sideboard filter."""
        result = await ingest_contribution_upload(
            store, "bolts.txt", "4 Lightning Bolt\n\n4 Pyroblast", "Bob"
        )

        assert result.parsed.cards == [CardRecord("Lightning Bolt", 4)]

    @pytest.mark.asyncio
    async def test_dry_run_leaves_sink_untouched(self) -> None:
        sink = AsyncMock()

        result = await ingest_contribution_upload(
            sink, "bolts.txt", "3 Lightning Bolt", "Bob", dry_run=True
        )

        assert result.success
        assert result.stored is None
        sink.store_contribution.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_requires_contributor(self, store: InMemoryDeckStore) -> None:
        with pytest.raises(KnownError, match="Contributor name is required"):
            await ingest_contribution_upload(store, "bolts.txt", "3 Lightning Bolt", "")

    @pytest.mark.asyncio
    async def test_sink_failure_is_escalated(self) -> None:
        sink = AsyncMock()
        sink.store_contribution.side_effect = OSError("disk full")

        with pytest.raises(CollaboratorUnavailableError, match="Could not store contribution"):
            await ingest_contribution_upload(sink, "bolts.txt", "3 Lightning Bolt", "Bob")
