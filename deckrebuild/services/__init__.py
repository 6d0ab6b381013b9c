"""
Deckrebuild services.

Ingestion, reconciliation and the collaborators around them.
"""

from deckrebuild.services.memory_store import InMemoryDeckStore
from deckrebuild.services.needed_export import format_needed_list
from deckrebuild.services.price_lookup import (
    PriceLookup,
    ScryfallPriceClient,
    decorate_with_prices,
    select_printing_price,
)
from deckrebuild.services.reconciliation import (
    ChangeEvent,
    ChangeSource,
    SnapshotSource,
    StatusBoard,
    recompute,
)
from deckrebuild.services.sample_deck import create_sample_dek, create_sample_txt
from deckrebuild.services.uploads import (
    DeckSink,
    UploadResult,
    ingest_contribution_upload,
    ingest_requirement_upload,
)

__all__ = [
    # Reconciliation
    "ChangeEvent",
    "ChangeSource",
    "SnapshotSource",
    "StatusBoard",
    "recompute",
    # Uploads
    "DeckSink",
    "UploadResult",
    "ingest_contribution_upload",
    "ingest_requirement_upload",
    # Collaborators
    "InMemoryDeckStore",
    "PriceLookup",
    "ScryfallPriceClient",
    "decorate_with_prices",
    "select_printing_price",
    # Output
    "format_needed_list",
    "create_sample_dek",
    "create_sample_txt",
]
