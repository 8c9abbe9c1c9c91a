"""Self-play driver and benchmark harness for the guessing engine."""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from . import engine
from .cards import Card, CardSet, card_set, format_cards, full_deck
from .engine import EngineConfig
from .feedback import Feedback, feedback
from .logging_utils import get_logger

__all__ = ["GameConfig", "RoundRecord", "GameRecord", "BenchmarkReport", "play_game", "run_benchmark"]

logger = get_logger(__name__)


@dataclass(slots=True)
class GameConfig:
    """Limits applied by the self-play driver."""

    max_rounds: int = 60


@dataclass(frozen=True, slots=True)
class RoundRecord:
    """One guess, the feedback it drew and the candidates left before it was played."""

    round_number: int
    guess: CardSet
    feedback: Feedback
    candidates_before: int


@dataclass(frozen=True, slots=True)
class GameRecord:
    """Full transcript of a solved game."""

    answer: CardSet
    rounds: Sequence[RoundRecord]

    @property
    def guesses(self) -> int:
        return len(self.rounds)


def play_game(
    answer: Sequence[Card],
    config: GameConfig | None = None,
    engine_config: EngineConfig | None = None,
) -> GameRecord:
    """Play the guessing side against a known ``answer`` until it is found."""

    config = config or GameConfig()
    answer = card_set(answer)
    size = len(answer)

    guess, state = engine.initial_guess(size, engine_config)
    # The opening guess was never part of the space; count it back in.
    candidates = len(state.space) + 1
    rounds: list[RoundRecord] = []

    for round_number in range(1, config.max_rounds + 1):
        score = feedback(answer, guess)
        rounds.append(RoundRecord(round_number, guess, score, candidates))
        if score.is_solved(size):
            logger.info("solved %s in %d guess(es)", format_cards(answer), round_number)
            return GameRecord(answer=answer, rounds=tuple(rounds))
        guess, state = engine.next_guess((guess, state), score)
        candidates = len(state.space)

    raise RuntimeError(f"answer {format_cards(answer)} not found within {config.max_rounds} rounds")


@dataclass(slots=True)
class BenchmarkReport:
    """Aggregate statistics over many self-play games."""

    size: int
    games: list[GameRecord] = field(default_factory=list)

    def record(self, game: GameRecord) -> None:
        if len(game.answer) != self.size:
            raise ValueError("game size does not match benchmark size")
        self.games.append(game)

    @property
    def mean_rounds(self) -> float:
        if not self.games:
            return 0.0
        return sum(game.guesses for game in self.games) / len(self.games)

    @property
    def max_rounds(self) -> int:
        return max((game.guesses for game in self.games), default=0)

    def histogram(self) -> dict[int, int]:
        """Return ``{guess count: number of games}`` in ascending guess count."""

        counts = Counter(game.guesses for game in self.games)
        return dict(sorted(counts.items()))


def run_benchmark(
    size: int,
    games: int,
    *,
    seed: int = 123,
    config: GameConfig | None = None,
    engine_config: EngineConfig | None = None,
) -> BenchmarkReport:
    """Solve ``games`` random answers of ``size`` cards and collect statistics."""

    if games <= 0:
        raise ValueError("games must be positive")
    if size not in engine.SUPPORTED_SIZES:
        raise engine.UnsupportedGuessSize(f"guess size must be one of {engine.SUPPORTED_SIZES}, got {size}")

    rng = random.Random(seed)
    deck = full_deck()
    report = BenchmarkReport(size=size)
    for _ in range(games):
        answer = rng.sample(deck, size)
        report.record(play_game(answer, config, engine_config))

    logger.info(
        "benchmark size=%d games=%d mean=%.2f max=%d",
        size,
        games,
        report.mean_rounds,
        report.max_rounds,
    )
    return report
