"""Candidate-set engine: opening guess, pruning and utility-driven guess selection."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Iterator, Mapping, Sequence

import numpy as np
from numba import njit

from . import encoding
from .cards import Card, CardSet, card_set, card_set_from_ids, ids_of, parse_cards
from .combinations import combination_matrix
from .feedback import FEEDBACK_CODES, Feedback, _feedback_code, encode_feedback, feedback, score_rows_as_targets
from .logging_utils import get_logger

__all__ = [
    "SUPPORTED_SIZES",
    "OPENING_GUESSES",
    "UnsupportedGuessSize",
    "InconsistentFeedback",
    "EngineConfig",
    "CandidateSpace",
    "GuessState",
    "initial_guess",
    "next_guess",
    "prune",
    "best_guess",
    "utility",
]

logger = get_logger(__name__)

SUPPORTED_SIZES: Final[tuple[int, ...]] = (2, 3, 4)

# Ranks roughly evenly spaced across the 13 ranks, suits pairwise distinct.
OPENING_GUESSES: Final[Mapping[int, tuple[str, ...]]] = MappingProxyType(
    {
        2: ("6C", "10H"),
        3: ("5C", "8H", "QS"),
        4: ("3C", "6D", "9H", "QS"),
    }
)


class UnsupportedGuessSize(ValueError):
    """Raised when a game is started with a guess size outside 2-4."""


class InconsistentFeedback(RuntimeError):
    """Raised when feedback is malformed or no candidate is consistent with it."""


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Configuration values for guess selection."""

    full_search_below: int = 4
    opening_guesses: Mapping[int, Sequence[str]] = field(default_factory=lambda: OPENING_GUESSES)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "opening_guesses",
            MappingProxyType({size: tuple(codes) for size, codes in self.opening_guesses.items()}),
        )

    def opening_for(self, size: int) -> CardSet:
        """Return the opening guess for ``size``."""

        if size not in SUPPORTED_SIZES:
            raise UnsupportedGuessSize(f"guess size must be one of {SUPPORTED_SIZES}, got {size}")
        guess = parse_cards(self.opening_guesses[size])
        if len(guess) != size:
            raise ValueError(f"opening guess for size {size} has {len(guess)} cards")
        return guess


class CandidateSpace:
    """Read-only, ordered collection of the card sets still consistent with feedback."""

    __slots__ = ("_rows",)

    def __init__(self, rows: np.ndarray) -> None:
        if rows.ndim != 2:
            raise ValueError("candidate rows must form a 2-D matrix")
        frozen = np.array(rows, dtype=np.uint8, order="C")
        frozen.flags.writeable = False
        self._rows = frozen

    @property
    def rows(self) -> np.ndarray:
        return self._rows

    @property
    def size(self) -> int:
        """Number of cards in every candidate set."""

        return int(self._rows.shape[1])

    def __len__(self) -> int:
        return int(self._rows.shape[0])

    def __iter__(self) -> Iterator[CardSet]:
        for row in self._rows:
            yield card_set_from_ids(row)

    def __getitem__(self, index: int) -> CardSet:
        return card_set_from_ids(self._rows[index])

    def __contains__(self, candidate: object) -> bool:
        if not isinstance(candidate, tuple) or len(candidate) != self.size:
            return False
        if not all(isinstance(card, Card) for card in candidate):
            return False
        return bool(self._row_mask(card_set(candidate)).any())

    def _row_mask(self, candidate: CardSet) -> np.ndarray:
        target = encoding.ids_array(ids_of(candidate))
        return (self._rows == target).all(axis=1)

    def first(self) -> CardSet:
        if not len(self):
            raise InconsistentFeedback("no candidate is consistent with the feedback received")
        return self[0]

    def without(self, candidate: CardSet) -> "CandidateSpace":
        """Return a space with ``candidate`` removed (no-op when absent)."""

        return CandidateSpace(self._rows[~self._row_mask(candidate)])

    def __repr__(self) -> str:
        return f"CandidateSpace(size={self.size}, candidates={len(self)})"


@dataclass(frozen=True, slots=True)
class GuessState:
    """Per-game state threaded between rounds; each round returns a new one."""

    space: CandidateSpace
    config: EngineConfig = field(default_factory=EngineConfig)

    @property
    def size(self) -> int:
        return self.space.size


def initial_guess(size: int, config: EngineConfig | None = None) -> tuple[CardSet, GuessState]:
    """Start a game for guess size ``size``.

    The returned space holds every ``size``-combination of the deck except the
    opening guess itself. Dropping the opening guess is only sound because the
    driver stops the game the moment a guess scores ``correct_cards == size``.
    """

    config = config or EngineConfig()
    guess = config.opening_for(size)
    space = CandidateSpace(combination_matrix(size, range(encoding.DECK_CARD_COUNT))).without(guess)
    logger.debug("size %d game opened with %d candidates", size, len(space))
    return guess, GuessState(space=space, config=config)


def _validated_code(score: Sequence[int], size: int) -> int:
    if len(score) != 5:
        raise InconsistentFeedback(f"feedback must have five components, got {len(score)}")
    for value in score:
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InconsistentFeedback(f"feedback component {value!r} is not an integer")
        if not 0 <= value <= size:
            raise InconsistentFeedback(f"feedback component {value} outside [0, {size}]")
    return encode_feedback([int(value) for value in score])


def prune(space: CandidateSpace, guess: CardSet, score: Sequence[int]) -> CandidateSpace:
    """Keep the candidates ``c`` with ``feedback(c, guess) == score``, minus ``guess``."""

    code = _validated_code(score, len(guess))
    guess_ids = encoding.ids_array(ids_of(guess))
    codes = score_rows_as_targets(space.rows, guess_ids)
    return CandidateSpace(space.rows[codes == code]).without(guess)


@njit(cache=True)
def _utility_scores(
    rows: np.ndarray,
    card_ranks: np.ndarray,
    card_suits: np.ndarray,
    counts: np.ndarray,
) -> np.ndarray:
    n_rows = rows.shape[0]
    scores = np.zeros(n_rows, dtype=np.float64)
    if n_rows < 2:
        return scores
    for g in range(n_rows):
        counts[:] = 0
        for c in range(n_rows):
            if c == g:
                continue
            counts[_feedback_code(rows[g], rows[c], card_ranks, card_suits)] += 1
        total = 0
        for k in range(counts.size):
            total += counts[k] * counts[k]
        scores[g] = total / (n_rows - 1)
    return scores


def utility(guess: CardSet, rest: Sequence[CardSet]) -> float:
    """Expected size of the feedback group holding the answer if ``guess`` is played.

    ``rest`` is grouped by ``feedback(guess, candidate)``; the score is the
    size-weighted mean group size. Lower is better.
    """

    if not rest:
        return 0.0
    groups = Counter(feedback(guess, candidate) for candidate in rest)
    return sum(count * count for count in groups.values()) / len(rest)


def best_guess(space: CandidateSpace) -> CardSet:
    """Return the candidate with the lowest utility, earliest row on ties."""

    if not len(space):
        raise InconsistentFeedback("no candidate is consistent with the feedback received")
    counts = np.zeros(FEEDBACK_CODES, dtype=np.int64)
    scores = _utility_scores(space.rows, encoding.CARD_RANKS, encoding.CARD_SUITS, counts)
    chosen = int(np.argmin(scores))
    logger.debug("utility search over %d candidates picked row %d (%.3f)", len(space), chosen, scores[chosen])
    return space[chosen]


def next_guess(
    previous: tuple[CardSet, GuessState],
    score: Sequence[int] | Feedback,
) -> tuple[CardSet, GuessState]:
    """Advance one round: prune with ``score`` and choose the next guess.

    Guesses smaller than ``config.full_search_below`` go through the full
    utility search. Larger ones take the first consistent candidate, since
    pairwise scoring of the 4-card space is quadratic in its size.
    """

    prev_guess, state = previous
    prev_guess = card_set(prev_guess)
    if len(prev_guess) != state.size:
        raise ValueError(f"guess has {len(prev_guess)} cards, game expects {state.size}")

    space = prune(state.space, prev_guess, score)
    logger.debug("feedback %s pruned %d -> %d candidates", tuple(score), len(state.space), len(space))
    if not len(space):
        raise InconsistentFeedback(f"feedback {tuple(score)} leaves no consistent candidate")

    if len(prev_guess) < state.config.full_search_below:
        guess = best_guess(space)
    else:
        guess = space.first()
    return guess, GuessState(space=space, config=state.config)
