"""Card identifier encoding utilities for the 52-card deck."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable

import numpy as np

RANKS: Final[list[str]] = ["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]
SUITS: Final[list[str]] = ["C", "D", "H", "S"]
RANK_TO_IDX: Final[dict[str, int]] = {rank: idx for idx, rank in enumerate(RANKS)}
SUIT_TO_IDX: Final[dict[str, int]] = {suit: idx for idx, suit in enumerate(SUITS)}
RANK_ALIASES: Final[dict[str, str]] = {"T": "10"}
NUM_RANKS: Final[int] = len(RANKS)
NUM_SUITS: Final[int] = len(SUITS)
DECK_CARD_COUNT: Final[int] = NUM_RANKS * NUM_SUITS


@dataclass(frozen=True, slots=True)
class CardDecoding:
    """Typed container describing a decoded card identifier."""

    rank_idx: int
    suit_idx: int


def card_id(rank_idx: int, suit_idx: int) -> int:
    """Encode a rank and suit index into a card identifier."""

    if not 0 <= suit_idx < NUM_SUITS:
        raise ValueError("suit_idx out of range")
    if not 0 <= rank_idx < NUM_RANKS:
        raise ValueError("rank_idx out of range")
    return suit_idx * NUM_RANKS + rank_idx


def _validate_card_identifier(card_identifier: int) -> None:
    if card_identifier < 0 or card_identifier >= DECK_CARD_COUNT:
        raise ValueError(f"card identifier {card_identifier} out of range")


def decode_id(card_identifier: int) -> CardDecoding:
    """Decode a card identifier into its rank and suit indices."""

    _validate_card_identifier(card_identifier)
    suit_idx, rank_idx = divmod(card_identifier, NUM_RANKS)
    return CardDecoding(rank_idx, suit_idx)


def code_for(card_identifier: int) -> str:
    """Return the short text code (``"10H"``) for ``card_identifier``."""

    decoded = decode_id(card_identifier)
    return f"{RANKS[decoded.rank_idx]}{SUITS[decoded.suit_idx]}"


def id_from_code(code: str) -> int:
    """Parse a text code such as ``"QS"``, ``"10h"`` or ``"TH"``."""

    text = code.strip().upper()
    if len(text) < 2:
        raise ValueError(f"invalid card code '{code}'")
    rank, suit = text[:-1], text[-1]
    rank = RANK_ALIASES.get(rank, rank)
    if rank not in RANK_TO_IDX or suit not in SUIT_TO_IDX:
        raise ValueError(f"invalid card code '{code}'")
    return card_id(RANK_TO_IDX[rank], SUIT_TO_IDX[suit])


def ids_array(card_identifiers: Iterable[int]) -> np.ndarray:
    """Return ``card_identifiers`` as a ``uint8`` array suitable for the kernels."""

    values = list(card_identifiers)
    for card_identifier in values:
        _validate_card_identifier(card_identifier)
    return np.array(values, dtype=np.uint8)


CARD_RANKS: Final[np.ndarray] = np.empty(DECK_CARD_COUNT, dtype=np.int8)
CARD_SUITS: Final[np.ndarray] = np.empty(DECK_CARD_COUNT, dtype=np.int8)
for _cid in range(DECK_CARD_COUNT):
    _decoded = decode_id(_cid)
    CARD_RANKS[_cid] = _decoded.rank_idx
    CARD_SUITS[_cid] = _decoded.suit_idx
