"""
Reconcile deck files on disk.

Reads requirement decks and contributions from two directories, reconciles
them, and prints what is still needed. Can be run as a standalone script.

Directory layout:
    requirements/<deck>.dek|.xml|.txt          one requirement deck per file
    contributions/<contributor>/<file>         attributed to <contributor>
    contributions/<file>                       attributed to --default-contributor
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal
from pathlib import Path

from deckrebuild.config import settings
from deckrebuild.models.report import build_parsed_list_report, build_report
from deckrebuild.models.status import ReconciliationSnapshot
from deckrebuild.parsers.dialect import ACCEPTED_EXTENSIONS, file_extension
from deckrebuild.services.memory_store import InMemoryDeckStore
from deckrebuild.services.needed_export import format_needed_list
from deckrebuild.services.price_lookup import ScryfallPriceClient, decorate_with_prices
from deckrebuild.services.reconciliation import StatusBoard
from deckrebuild.services.uploads import (
    UploadResult,
    ingest_contribution_upload,
    ingest_requirement_upload,
)

logger = logging.getLogger(__name__)

DEFAULT_UPLOADER = "cli"
DEFAULT_CONTRIBUTOR = "Unknown"


def discover_deck_files(directory: Path) -> list[Path]:
    """Deck files directly inside a directory, sorted by name."""
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and file_extension(path.name) in ACCEPTED_EXTENSIONS
    )


def discover_contributions(directory: Path, default_contributor: str) -> list[tuple[str, Path]]:
    """
    Find contribution files and who they belong to.

    Returns:
        (contributor_name, path) pairs, top-level files first
    """
    found = [(default_contributor, path) for path in discover_deck_files(directory)]
    for subdir in sorted(p for p in directory.iterdir() if p.is_dir()):
        found.extend((subdir.name, path) for path in discover_deck_files(subdir))
    return found


async def load_directories(
    store: InMemoryDeckStore,
    requirements_dir: Path,
    contributions_dir: Path | None,
    uploaded_by: str,
    default_contributor: str,
    dry_run: bool = False,
) -> tuple[list[UploadResult], list[UploadResult]]:
    """
    Ingest every deck file into the store.

    Returns:
        Tuple of (requirement results, contribution results)
    """
    requirement_results: list[UploadResult] = []
    for path in discover_deck_files(requirements_dir):
        result = await ingest_requirement_upload(
            store, path.name, path.read_bytes(), uploaded_by, dry_run=dry_run
        )
        requirement_results.append(result)

    contribution_results: list[UploadResult] = []
    if contributions_dir is not None:
        for contributor, path in discover_contributions(contributions_dir, default_contributor):
            result = await ingest_contribution_upload(
                store, path.name, path.read_bytes(), contributor, dry_run=dry_run
            )
            contribution_results.append(result)

    logger.info(
        "Loaded %d requirement files and %d contribution files",
        len(requirement_results),
        len(contribution_results),
    )
    return requirement_results, contribution_results


def format_progress(snapshot: ReconciliationSnapshot) -> str:
    summary = snapshot.summary
    return (
        f"Progress: {summary.total_required - summary.total_outstanding}/"
        f"{summary.total_required} cards ({summary.completion_percentage}%), "
        f"{summary.needed_count} needed, {summary.exact_count} exact, "
        f"{summary.surplus_count} surplus"
    )


def format_needed_cost(snapshot: ReconciliationSnapshot) -> str:
    """Total tix for the outstanding copies of priced cards."""
    total = Decimal("0")
    unpriced = 0
    for card_status in snapshot.needed():
        if card_status.price is None or card_status.price.price is None:
            unpriced += 1
            continue
        total += card_status.price.price * card_status.outstanding_quantity
    return f"Estimated cost of needed cards: {total} tix ({unpriced} unpriced)"


def _print_dry_run(results: list[UploadResult], kind: str) -> None:
    for result in results:
        report = build_parsed_list_report(result.parsed)
        state = "OK" if report.success else "FAILED"
        print(
            f"[{kind}] {report.source_label} ({result.contributor_name}): {state}, "
            f"{report.unique_cards} unique / {report.total_cards} total"
        )
        for error in report.errors:
            print(f"    {error}")


async def run_reconcile(args: argparse.Namespace) -> int:
    """
    Run the reconcile job.

    Returns:
        Process exit status
    """
    store = InMemoryDeckStore()
    requirement_results, contribution_results = await load_directories(
        store,
        args.requirements,
        args.contributions,
        args.uploaded_by,
        args.default_contributor,
        dry_run=args.dry_run,
    )

    for result in (*requirement_results, *contribution_results):
        if not result.success:
            print(
                f"Skipped {result.parsed.source_label}: {'; '.join(result.errors)}",
                file=sys.stderr,
            )

    if not any(result.success for result in requirement_results):
        print("Error: no requirement deck could be parsed", file=sys.stderr)
        return 1

    if args.dry_run:
        _print_dry_run(requirement_results, "requirement")
        _print_dry_run(contribution_results, "contribution")
        return 0

    board = StatusBoard(store)
    snapshot = await board.refresh()

    if args.prices:
        async with ScryfallPriceClient() as client:
            decorated = await decorate_with_prices(snapshot.statuses, client.lookup)
        snapshot = ReconciliationSnapshot(statuses=tuple(decorated), summary=snapshot.summary)

    if args.json:
        print(build_report(snapshot).model_dump_json(indent=2))
        return 0

    needed = format_needed_list(snapshot.statuses)
    if needed:
        print(needed)
        print()
    print(format_progress(snapshot))
    if args.prices:
        print(format_needed_cost(snapshot))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconcile contributed deck files against requirement decks"
    )
    parser.add_argument(
        "--requirements",
        type=Path,
        required=True,
        help="Directory of requirement deck files",
    )
    parser.add_argument(
        "--contributions",
        type=Path,
        help="Directory of contribution files (subdirectories name the contributor)",
    )
    parser.add_argument(
        "--uploaded-by",
        default=DEFAULT_UPLOADER,
        help="Uploader recorded for requirement decks",
    )
    parser.add_argument(
        "--default-contributor",
        default=DEFAULT_CONTRIBUTOR,
        help="Contributor for files directly in the contributions directory",
    )
    parser.add_argument("--json", action="store_true", help="Print the full JSON report")
    parser.add_argument("--prices", action="store_true", help="Look up MTGO prices on Scryfall")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse every file and report per-file results without reconciling",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the reconcile job."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug or settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.requirements.is_dir():
        parser.error(f"requirements directory not found: {args.requirements}")
    if args.contributions is not None and not args.contributions.is_dir():
        parser.error(f"contributions directory not found: {args.contributions}")

    exit_code = asyncio.run(run_reconcile(args))
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
