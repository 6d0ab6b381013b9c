from deckrebuild.analysis.contributions import ContributionTotal, aggregate_contributions
from deckrebuild.analysis.progress import completion_percentage, summarize_progress
from deckrebuild.analysis.requirements import aggregate_requirements
from deckrebuild.analysis.status import classify_statuses, status_sort_key

__all__ = [
    "ContributionTotal",
    "aggregate_contributions",
    "aggregate_requirements",
    "classify_statuses",
    "completion_percentage",
    "status_sort_key",
    "summarize_progress",
]
