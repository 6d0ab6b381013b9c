"""
Report models for the export and UI collaborators.

Pydantic views of the reconciliation output, serializable with
model_dump_json(). Built from the domain dataclasses, never the other way.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from deckrebuild.models.deck_list import ParsedList
from deckrebuild.models.status import CardStatus, ReconciliationSnapshot


class ContributorReport(BaseModel):
    """One contribution list's share of a card."""

    name: str
    quantity: int
    source: str


class CardStatusReport(BaseModel):
    """Reconciled state of one card."""

    name: str
    required_quantity: int = Field(..., ge=0)
    gathered_quantity: int = Field(..., ge=0)
    outstanding_quantity: int
    status: str = Field(..., description="needed, exact or surplus")
    contributors: list[ContributorReport] = Field(default_factory=list)
    price_tix: Decimal | None = Field(default=None, description="MTGO price, if decorated")
    price_set: str | None = Field(default=None, description="Set the price belongs to")


class ProgressReport(BaseModel):
    """Totals across every card."""

    total_required: int = 0
    total_gathered: int = 0
    total_outstanding: int = 0
    completion_percentage: int = Field(default=0, ge=0, le=100)
    needed_count: int = 0
    exact_count: int = 0
    surplus_count: int = 0
    unique_card_count: int = 0


class ParsedListReport(BaseModel):
    """Per-file parse outcome, as shown after an upload."""

    source_label: str
    success: bool
    dialect: str | None = None
    cards: dict[str, int] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)
    total_cards: int = 0
    unique_cards: int = 0
    average_quantity: float = 0.0


class ReconciliationReport(BaseModel):
    """Full published state: per-card statuses plus progress."""

    cards: list[CardStatusReport] = Field(default_factory=list)
    progress: ProgressReport = Field(default_factory=ProgressReport)


def _card_report(card_status: CardStatus) -> CardStatusReport:
    price = card_status.price
    return CardStatusReport(
        name=card_status.name,
        required_quantity=card_status.required_quantity,
        gathered_quantity=card_status.gathered_quantity,
        outstanding_quantity=card_status.outstanding_quantity,
        status=card_status.status.value,
        contributors=[
            ContributorReport(name=c.name, quantity=c.quantity, source=c.source)
            for c in card_status.contributors
        ],
        price_tix=price.price if price else None,
        price_set=price.canonical_grouping if price else None,
    )


def build_report(snapshot: ReconciliationSnapshot) -> ReconciliationReport:
    """Convert a reconciliation snapshot to its report form, order preserved."""
    summary = snapshot.summary
    return ReconciliationReport(
        cards=[_card_report(s) for s in snapshot.statuses],
        progress=ProgressReport(
            total_required=summary.total_required,
            total_gathered=summary.total_gathered,
            total_outstanding=summary.total_outstanding,
            completion_percentage=summary.completion_percentage,
            needed_count=summary.needed_count,
            exact_count=summary.exact_count,
            surplus_count=summary.surplus_count,
            unique_card_count=summary.unique_card_count,
        ),
    )


def build_parsed_list_report(parsed: ParsedList) -> ParsedListReport:
    stats = parsed.stats()
    return ParsedListReport(
        source_label=parsed.source_label,
        success=parsed.success,
        dialect=parsed.dialect.value if parsed.dialect else None,
        cards={card.name: card.quantity for card in parsed.cards},
        errors=parsed.errors,
        total_cards=stats.total_cards,
        unique_cards=stats.unique_cards,
        average_quantity=stats.average_quantity,
    )
