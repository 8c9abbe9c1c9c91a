"""Five-part feedback scoring between a target set and a guess."""

from __future__ import annotations

from collections import Counter
from typing import Final, NamedTuple, Sequence

import numpy as np
from numba import njit

from . import encoding
from .cards import Card

__all__ = [
    "FEEDBACK_BASE",
    "FEEDBACK_CODES",
    "Feedback",
    "feedback",
    "encode_feedback",
    "decode_feedback",
    "score_rows_as_targets",
    "score_rows_as_guesses",
]

# Every component lies in [0, 4], so a base-5 positional code is dense and unique.
FEEDBACK_BASE: Final[int] = 5
FEEDBACK_CODES: Final[int] = FEEDBACK_BASE**5


class Feedback(NamedTuple):
    """Comparison result for one guess against one target."""

    correct_cards: int
    lower_ranks: int
    correct_ranks: int
    higher_ranks: int
    correct_suits: int

    def is_solved(self, size: int) -> bool:
        """Return ``True`` when every card of a size-``size`` guess is correct."""

        return self.correct_cards == size


def _matched(target_values: Sequence[object], guess_values: Sequence[object]) -> int:
    # Multiset intersection: each guess value is consumed by at most one target value.
    return sum((Counter(target_values) & Counter(guess_values)).values())


def feedback(target: Sequence[Card], guess: Sequence[Card]) -> Feedback:
    """Score ``guess`` against ``target``.

    Either argument may be hypothetical; the function is pure and is used
    both for real answers and while pruning or ranking candidates.
    """

    if not guess:
        raise ValueError("guess must contain at least one card")
    target_ranks = [card.rank.idx for card in target]
    guess_ranks = [card.rank.idx for card in guess]
    lowest = min(guess_ranks)
    highest = max(guess_ranks)
    return Feedback(
        correct_cards=len(set(target) & set(guess)),
        lower_ranks=sum(1 for rank in target_ranks if rank < lowest),
        correct_ranks=_matched(target_ranks, guess_ranks),
        higher_ranks=sum(1 for rank in target_ranks if rank > highest),
        correct_suits=_matched([card.suit for card in target], [card.suit for card in guess]),
    )


def encode_feedback(score: Sequence[int]) -> int:
    """Return the dense integer code for a five-part score."""

    if len(score) != 5:
        raise ValueError("feedback must have exactly five components")
    code = 0
    for value in score:
        if not 0 <= value < FEEDBACK_BASE:
            raise ValueError(f"feedback component {value} out of range")
        code = code * FEEDBACK_BASE + int(value)
    return code


def decode_feedback(code: int) -> Feedback:
    """Inverse of :func:`encode_feedback`."""

    if not 0 <= code < FEEDBACK_CODES:
        raise ValueError(f"feedback code {code} out of range")
    values = []
    for _ in range(5):
        code, value = divmod(code, FEEDBACK_BASE)
        values.append(value)
    return Feedback(*reversed(values))


@njit(cache=True)
def _feedback_code(
    target: np.ndarray,
    guess: np.ndarray,
    card_ranks: np.ndarray,
    card_suits: np.ndarray,
) -> int:
    lowest = 127
    highest = -1
    for j in range(guess.size):
        rank = card_ranks[guess[j]]
        if rank < lowest:
            lowest = rank
        if rank > highest:
            highest = rank

    exact = 0
    lower = 0
    ranks = 0
    higher = 0
    suits = 0
    rank_used = 0
    suit_used = 0
    for i in range(target.size):
        cid = target[i]
        rank = card_ranks[cid]
        suit = card_suits[cid]
        if rank < lowest:
            lower += 1
        elif rank > highest:
            higher += 1
        for j in range(guess.size):
            if guess[j] == cid:
                exact += 1
                break
        for j in range(guess.size):
            bit = 1 << j
            if (rank_used & bit) == 0 and card_ranks[guess[j]] == rank:
                rank_used |= bit
                ranks += 1
                break
        for j in range(guess.size):
            bit = 1 << j
            if (suit_used & bit) == 0 and card_suits[guess[j]] == suit:
                suit_used |= bit
                suits += 1
                break

    base = FEEDBACK_BASE
    return (((exact * base + lower) * base + ranks) * base + higher) * base + suits


@njit(cache=True)
def _score_rows(
    rows: np.ndarray,
    fixed: np.ndarray,
    rows_are_targets: bool,
    card_ranks: np.ndarray,
    card_suits: np.ndarray,
) -> np.ndarray:
    out = np.empty(rows.shape[0], dtype=np.int64)
    for i in range(rows.shape[0]):
        if rows_are_targets:
            out[i] = _feedback_code(rows[i], fixed, card_ranks, card_suits)
        else:
            out[i] = _feedback_code(fixed, rows[i], card_ranks, card_suits)
    return out


def score_rows_as_targets(rows: np.ndarray, guess_ids: np.ndarray) -> np.ndarray:
    """Return ``encode_feedback(feedback(row, guess))`` for every row of ``rows``."""

    return _score_rows(rows, guess_ids, True, encoding.CARD_RANKS, encoding.CARD_SUITS)


def score_rows_as_guesses(rows: np.ndarray, target_ids: np.ndarray) -> np.ndarray:
    """Return ``encode_feedback(feedback(target, row))`` for every row of ``rows``."""

    return _score_rows(rows, target_ids, False, encoding.CARD_RANKS, encoding.CARD_SUITS)
