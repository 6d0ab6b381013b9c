"""Tests for the reconcile job."""

import json
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from deckrebuild.jobs.reconcile import (
    discover_contributions,
    discover_deck_files,
    main,
)
from deckrebuild.models.status import PriceQuote

CONTROL_DEK = """<?xml version="1.0" encoding="utf-8"?>
<Deck>
  <Cards CatID="1" Quantity="2" Sideboard="false" Name="Lightning Bolt" />
  <Cards CatID="2" Quantity="4" Sideboard="false" Name="Counterspell" />
</Deck>"""


class FakePriceClient:
    async def __aenter__(self) -> "FakePriceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def lookup(self, card_name: str) -> PriceQuote:
        return PriceQuote(Decimal("0.50"), "M10")


@pytest.fixture
def deck_dirs(tmp_path: Path) -> tuple[Path, Path]:
    """Two requirement decks, one named and one anonymous contribution."""
    requirements = tmp_path / "requirements"
    requirements.mkdir()
    (requirements / "burn.txt").write_text("4 Lightning Bolt\n2 Goblin Guide\n")
    (requirements / "control.dek").write_text(CONTROL_DEK)
    (requirements / "notes.md").write_text("not a deck")

    contributions = tmp_path / "contributions"
    (contributions / "alice").mkdir(parents=True)
    (contributions / "alice" / "bolts.txt").write_text("1 Lightning Bolt\n")
    (contributions / "guides.txt").write_text("2 Goblin Guide\n")
    return requirements, contributions


class TestDiscovery:
    def test_discover_deck_files(self, deck_dirs: tuple[Path, Path]) -> None:
        requirements, _ = deck_dirs

        assert [p.name for p in discover_deck_files(requirements)] == ["burn.txt", "control.dek"]

    def test_discover_contributions(self, deck_dirs: tuple[Path, Path]) -> None:
        _, contributions = deck_dirs

        found = discover_contributions(contributions, "Unknown")

        assert [(who, path.name) for who, path in found] == [
            ("Unknown", "guides.txt"),
            ("alice", "bolts.txt"),
        ]


class TestReconcileMain:
    def test_prints_needed_list_and_progress(
        self, deck_dirs: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        requirements, contributions = deck_dirs

        main(["--requirements", str(requirements), "--contributions", str(contributions)])

        out = capsys.readouterr().out
        assert out.startswith("4 Counterspell\n3 Lightning Bolt\n\n")
        assert "Progress: 3/10 cards (30%), 2 needed, 1 exact, 0 surplus" in out

    def test_json_report(
        self, deck_dirs: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        requirements, contributions = deck_dirs

        main(
            [
                "--requirements",
                str(requirements),
                "--contributions",
                str(contributions),
                "--json",
            ]
        )

        report = json.loads(capsys.readouterr().out)
        assert report["progress"]["completion_percentage"] == 30
        assert [card["name"] for card in report["cards"]] == [
            "Counterspell",
            "Lightning Bolt",
            "Goblin Guide",
        ]

    def test_without_contributions(
        self, deck_dirs: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        requirements, _ = deck_dirs

        main(["--requirements", str(requirements)])

        assert "Progress: 0/10 cards (0%)" in capsys.readouterr().out

    def test_dry_run_reports_each_file(
        self, deck_dirs: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        requirements, contributions = deck_dirs

        main(
            [
                "--requirements",
                str(requirements),
                "--contributions",
                str(contributions),
                "--dry-run",
                "--uploaded-by",
                "organizer",
            ]
        )

        out = capsys.readouterr().out
        assert "[requirement] burn.txt (organizer): OK, 2 unique / 6 total" in out
        assert "[contribution] bolts.txt (alice): OK" in out
        assert "Progress" not in out

    def test_prices(
        self, deck_dirs: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        requirements, contributions = deck_dirs

        with patch("deckrebuild.jobs.reconcile.ScryfallPriceClient", FakePriceClient):
            main(
                [
                    "--requirements",
                    str(requirements),
                    "--contributions",
                    str(contributions),
                    "--prices",
                ]
            )

        out = capsys.readouterr().out
        assert "Estimated cost of needed cards: 3.50 tix (0 unpriced)" in out

    def test_exits_when_no_requirement_parses(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        requirements = tmp_path / "requirements"
        requirements.mkdir()
        (requirements / "broken.dek").write_text("<Collection />")

        with pytest.raises(SystemExit) as exc_info:
            main(["--requirements", str(requirements)])

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Skipped broken.dek" in err
        assert "no requirement deck could be parsed" in err

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--requirements", str(tmp_path / "missing")])

        assert exc_info.value.code == 2
