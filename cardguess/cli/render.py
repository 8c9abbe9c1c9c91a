"""Rendering helpers dedicated to the CLI experience."""

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.table import Table

from ..benchmark import BenchmarkReport, GameRecord
from ..cards import Card
from ..feedback import Feedback

_SUIT_SYMBOLS = {
    "C": ("♣", "green"),
    "D": ("♦", "magenta"),
    "H": ("♥", "red"),
    "S": ("♠", "cyan"),
}

FEEDBACK_LABELS = ("Cards", "Lower", "Ranks", "Higher", "Suits")


def format_card(card: Card) -> str:
    """Return a Rich-rendered label for ``card``."""

    symbol, color = _SUIT_SYMBOLS.get(card.suit.value, (card.suit.value, "white"))
    return f"[{color}]{card.rank.value}{symbol}[/{color}]"


def format_hand(cards: Sequence[Card]) -> str:
    return " ".join(format_card(card) for card in cards)


def feedback_table(score: Feedback, title: str = "Feedback") -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    for label in FEEDBACK_LABELS:
        table.add_column(label, justify="right")
    table.add_row(*(str(value) for value in score))
    return table


def game_table(game: GameRecord) -> Table:
    """Return a Rich table listing every round of ``game``."""

    table = Table(title=f"Answer {format_hand(game.answer)}", box=box.SIMPLE_HEAVY)
    table.add_column("Round", justify="right")
    table.add_column("Guess", justify="left")
    table.add_column("Candidates", justify="right")
    for label in FEEDBACK_LABELS:
        table.add_column(label, justify="right")

    size = len(game.answer)
    for entry in game.rounds:
        guess = format_hand(entry.guess)
        if entry.feedback.is_solved(size):
            guess = f"[bold green]{guess}[/bold green]"
        table.add_row(
            str(entry.round_number),
            guess,
            str(entry.candidates_before),
            *(str(value) for value in entry.feedback),
        )
    return table


def benchmark_table(report: BenchmarkReport) -> Table:
    """Return the aggregated benchmark summary table."""

    table = Table(title=f"Benchmark ({report.size} cards, {len(report.games)} games)", box=box.DOUBLE_EDGE)
    table.add_column("Guesses", justify="right")
    table.add_column("Games", justify="right")
    for guesses, count in report.histogram().items():
        table.add_row(str(guesses), str(count))
    table.add_section()
    table.add_row("[bold]mean[/bold]", f"[bold blue]{report.mean_rounds:.2f}[/bold blue]")
    table.add_row("[bold]max[/bold]", str(report.max_rounds))
    return table
