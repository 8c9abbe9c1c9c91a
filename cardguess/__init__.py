"""Top-level package for the card-deduction guessing engine."""

from . import benchmark, cards, combinations, encoding, engine, feedback
from .engine import initial_guess, next_guess
from .feedback import feedback as score

__all__ = [
    "benchmark",
    "cards",
    "combinations",
    "encoding",
    "engine",
    "feedback",
    "initial_guess",
    "next_guess",
    "score",
]
