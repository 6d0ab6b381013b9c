from deckrebuild.analysis.contributions import ContributionTotal
from deckrebuild.analysis.progress import completion_percentage, summarize_progress
from deckrebuild.analysis.status import classify_statuses
from deckrebuild.models.status import (
    CardStatus,
    CardStatusKind,
    Contributor,
    ProgressSummary,
)


def _gathered(quantity: int, who: str = "Alice") -> ContributionTotal:
    return ContributionTotal(
        total_quantity=quantity,
        contributors=[Contributor(name=who, quantity=quantity, source=f"{who}.txt")],
    )


class TestClassifyStatuses:
    def test_sign_rule(self) -> None:
        statuses = classify_statuses(
            {"Lightning Bolt": 4, "Island": 2, "Forest": 1},
            {"Island": _gathered(2), "Forest": _gathered(3)},
        )
        by_name = {s.name: s for s in statuses}

        assert by_name["Lightning Bolt"].status is CardStatusKind.NEEDED
        assert by_name["Lightning Bolt"].outstanding_quantity == 4
        assert by_name["Island"].status is CardStatusKind.EXACT
        assert by_name["Forest"].status is CardStatusKind.SURPLUS
        assert by_name["Forest"].outstanding_quantity == -2

    def test_gathered_without_requirement_is_surplus(self) -> None:
        statuses = classify_statuses({}, {"Mountain": _gathered(1)})

        assert statuses == [
            CardStatus(
                name="Mountain",
                required_quantity=0,
                gathered_quantity=1,
                contributors=(Contributor("Alice", 1, "Alice.txt"),),
            )
        ]
        assert statuses[0].status is CardStatusKind.SURPLUS

    def test_sorted_by_status_then_name(self) -> None:
        statuses = classify_statuses(
            {"Lightning Bolt": 4, "Island": 2, "Forest": 1, "Brainstorm": 1, "swamp": 1},
            {"Island": _gathered(2), "Forest": _gathered(3), "Mountain": _gathered(1)},
        )

        assert [s.name for s in statuses] == [
            "Brainstorm",
            "Lightning Bolt",
            "swamp",
            "Island",
            "Forest",
            "Mountain",
        ]

    def test_deterministic(self) -> None:
        required = {"B": 1, "A": 1, "C": 2}
        gathered = {"C": _gathered(2)}

        assert classify_statuses(required, gathered) == classify_statuses(
            dict(reversed(list(required.items()))), gathered
        )


class TestSummarizeProgress:
    def test_totals(self) -> None:
        statuses = [
            CardStatus("Lightning Bolt", required_quantity=4, gathered_quantity=1),
            CardStatus("Island", required_quantity=2, gathered_quantity=2),
            CardStatus("Forest", required_quantity=1, gathered_quantity=3),
        ]

        summary = summarize_progress(statuses)

        assert summary.total_required == 7
        assert summary.total_gathered == 6
        # Forest's surplus does not offset Lightning Bolt's deficit
        assert summary.total_outstanding == 3
        assert summary.completion_percentage == 57
        assert (summary.needed_count, summary.exact_count, summary.surplus_count) == (1, 1, 1)
        assert summary.unique_card_count == 3

    def test_empty(self) -> None:
        assert summarize_progress([]) == ProgressSummary()

    def test_nothing_required(self) -> None:
        summary = summarize_progress([CardStatus("Mountain", 0, 2)])

        assert summary.completion_percentage == 0
        assert summary.surplus_count == 1

    def test_complete(self) -> None:
        summary = summarize_progress([CardStatus("Island", 2, 5)])

        assert summary.completion_percentage == 100
        assert summary.total_outstanding == 0


class TestCompletionPercentage:
    def test_rounds_half_up(self) -> None:
        assert completion_percentage(8, 7) == 13  # 12.5%

    def test_rounds_down_below_half(self) -> None:
        assert completion_percentage(3, 2) == 33

    def test_zero_required(self) -> None:
        assert completion_percentage(0, 0) == 0
