"""Card abstractions and helpers for the guessing game."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Iterable, Sequence

from . import encoding


class Suit(str, Enum):
    """Enumeration of the four suits, in deck order."""

    CLUBS = "C"
    DIAMONDS = "D"
    HEARTS = "H"
    SPADES = "S"

    @property
    def idx(self) -> int:
        return encoding.SUIT_TO_IDX[self.value]


class Rank(str, Enum):
    """Enumeration of ranks; ``idx`` gives the total order (2 lowest, Ace highest)."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    @classmethod
    def ordered(cls) -> tuple["Rank", ...]:
        """Return ranks from lowest to highest."""

        return tuple(cls(rank) for rank in encoding.RANKS)

    @property
    def idx(self) -> int:
        return encoding.RANK_TO_IDX[self.value]


@total_ordering
@dataclass(frozen=True, slots=True)
class Card:
    """Value object describing a single card of the 52-card deck."""

    suit: Suit
    rank: Rank

    @classmethod
    def from_id(cls, card_identifier: int) -> "Card":
        decoded = encoding.decode_id(int(card_identifier))
        return cls(Suit(encoding.SUITS[decoded.suit_idx]), Rank(encoding.RANKS[decoded.rank_idx]))

    @classmethod
    def from_code(cls, code: str) -> "Card":
        return cls.from_id(encoding.id_from_code(code))

    @property
    def id(self) -> int:
        return encoding.card_id(self.rank.idx, self.suit.idx)

    @property
    def code(self) -> str:
        return f"{self.rank.value}{self.suit.value}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.id < other.id

    def __str__(self) -> str:
        return self.code


CardSet = tuple[Card, ...]


def full_deck() -> list[Card]:
    """Return all 52 cards in deterministic deck order."""

    return [Card.from_id(card_identifier) for card_identifier in range(encoding.DECK_CARD_COUNT)]


def card_set(cards: Iterable[Card]) -> CardSet:
    """Normalise ``cards`` into a deck-ordered, duplicate-free ``CardSet``."""

    ordered = tuple(sorted(cards))
    if len(set(ordered)) != len(ordered):
        raise ValueError("a card set cannot contain the same card twice")
    return ordered


def card_set_from_ids(card_identifiers: Iterable[int]) -> CardSet:
    return card_set(Card.from_id(card_identifier) for card_identifier in card_identifiers)


def ids_of(cards: Iterable[Card]) -> list[int]:
    return [card.id for card in cards]


def parse_cards(codes: Iterable[str]) -> CardSet:
    """Parse text codes (``"6C"``, ``"10H"``, ``"TH"``) into a ``CardSet``."""

    return card_set(Card.from_code(code) for code in codes)


def format_cards(cards: Sequence[Card]) -> str:
    return " ".join(card.code for card in cards)
