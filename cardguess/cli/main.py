"""Typer entry-point wiring for the cardguess CLI."""

from __future__ import annotations

import re

import typer
from rich.console import Console

from .. import benchmark, engine
from ..cards import CardSet, parse_cards
from ..feedback import Feedback, feedback
from ..logging_utils import LOG_LEVEL, setup_logging
from .render import benchmark_table, feedback_table, format_hand, game_table

app = typer.Typer(add_completion=False, rich_markup_mode="rich")
console = Console()

_SEPARATORS = re.compile(r"[\s,]+")


def _parse_hand(text: str) -> CardSet:
    """Parse ``"6C 10H"`` or ``"6c,th"`` into a card set."""

    codes = [code for code in _SEPARATORS.split(text.strip()) if code]
    if not codes:
        raise ValueError("no cards given")
    return parse_cards(codes)


def _parse_feedback(text: str, size: int) -> Feedback:
    """Parse five whitespace/comma separated integers, each within ``[0, size]``."""

    parts = [part for part in _SEPARATORS.split(text.strip()) if part]
    if len(parts) != 5:
        raise ValueError("enter exactly five numbers: cards lower ranks higher suits")
    try:
        values = [int(part) for part in parts]
    except ValueError as exc:
        raise ValueError(f"feedback must be integers, got '{text}'") from exc
    for value in values:
        if not 0 <= value <= size:
            raise ValueError(f"each feedback number must be between 0 and {size}")
    return Feedback(*values)


def _hand_option(text: str) -> CardSet:
    try:
        return _parse_hand(text)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _check_size(size: int) -> None:
    if size not in engine.SUPPORTED_SIZES:
        raise typer.BadParameter(f"size must be one of {engine.SUPPORTED_SIZES}")


@app.callback()
def configure(
    log_level: str = typer.Option(LOG_LEVEL, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)."),
) -> None:
    """Guess a hidden set of 2-4 playing cards from five-number feedback."""

    setup_logging(log_level)


@app.command()
def solve(
    answer: str = typer.Argument(..., help="Hidden cards, e.g. '6C 10H'."),
    max_rounds: int = typer.Option(60, min=1, help="Give up after this many guesses."),
) -> None:
    """Play the guesser against a known answer and show every round."""

    hand = _hand_option(answer)
    _check_size(len(hand))
    record = benchmark.play_game(hand, benchmark.GameConfig(max_rounds=max_rounds))
    console.print(game_table(record))
    console.print(f"[cyan]Solved in {record.guesses} guess(es).[/cyan]")


@app.command()
def score(
    target: str = typer.Option(..., "--target", help="Target cards, e.g. '6C 10H'."),
    guess: str = typer.Option(..., "--guess", help="Guessed cards, e.g. '5D QS'."),
) -> None:
    """Print the five-part feedback for ``guess`` against ``target``."""

    target_hand = _hand_option(target)
    guess_hand = _hand_option(guess)
    if len(target_hand) != len(guess_hand):
        raise typer.BadParameter("target and guess must hold the same number of cards")
    console.print(feedback_table(feedback(target_hand, guess_hand)))


@app.command()
def play(
    size: int = typer.Option(3, help="Number of hidden cards (2-4)."),
) -> None:
    """Think of a hand; the engine guesses and you answer with five numbers."""

    _check_size(size)
    guess, state = engine.initial_guess(size)
    round_number = 1
    while True:
        console.print(f"[bold]Guess {round_number}[/bold]: {format_hand(guess)}")
        text = typer.prompt("Feedback (cards lower ranks higher suits)")
        try:
            reply = _parse_feedback(text, size)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            continue
        if reply.is_solved(size):
            console.print(f"[green]Found it in {round_number} guess(es).[/green]")
            return
        try:
            guess, state = engine.next_guess((guess, state), reply)
        except engine.InconsistentFeedback as exc:
            console.print(f"[red]{exc}; the feedback given so far contradicts itself.[/red]")
            raise typer.Exit(code=1) from exc
        round_number += 1


@app.command("benchmark")
def benchmark_cli(
    size: int = typer.Option(2, help="Number of hidden cards (2-4)."),
    games: int = typer.Option(20, min=1, help="Number of random answers to solve."),
    seed: int = typer.Option(123, help="Random seed for the sampled answers."),
) -> None:
    """Solve random answers and summarise how many guesses they took."""

    _check_size(size)
    report = benchmark.run_benchmark(size, games, seed=seed)
    console.print(benchmark_table(report))


def main() -> None:
    """Entry-point for ``python -m cardguess.cli``."""

    app()


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    main()
