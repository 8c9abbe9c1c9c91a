from __future__ import annotations

from math import comb

import numpy as np
import pytest

from cardguess.cards import full_deck
from cardguess.combinations import combination_matrix, combinations


def test_combinations_follow_item_order() -> None:
    assert combinations(2, "abcd") == [
        ("a", "b"),
        ("a", "c"),
        ("a", "d"),
        ("b", "c"),
        ("b", "d"),
        ("c", "d"),
    ]


@pytest.mark.parametrize(
    ("n", "items", "expected"),
    [
        (0, [1, 2, 3], [()]),
        (0, [], [()]),
        (4, [1, 2, 3], []),
        (-1, [1, 2, 3], []),
        (3, [1, 2, 3], [(1, 2, 3)]),
        (1, [], []),
    ],
)
def test_combinations_edge_cases(n: int, items: list[int], expected: list[tuple[int, ...]]) -> None:
    assert combinations(n, items) == expected


def test_combinations_are_deterministic() -> None:
    deck = full_deck()

    assert combinations(2, deck) == combinations(2, deck)


@pytest.mark.parametrize("n", [2, 3])
def test_deck_combinations_are_exact(n: int) -> None:
    combos = combinations(n, full_deck())

    assert len(combos) == comb(52, n)
    assert len(set(combos)) == len(combos)
    assert all(len(set(combo)) == n for combo in combos)


def test_combination_matrix_for_four_cards() -> None:
    matrix = combination_matrix(4, range(52))

    assert matrix.shape == (comb(52, 4), 4)
    assert matrix.dtype == np.uint8
    assert np.all(matrix[:, :-1] < matrix[:, 1:])
    assert matrix[0].tolist() == [0, 1, 2, 3]
    assert matrix[-1].tolist() == [48, 49, 50, 51]


def test_combination_matrix_rows_match_combinations() -> None:
    ids = [3, 8, 20, 41, 50]
    matrix = combination_matrix(3, ids)

    assert [tuple(row) for row in matrix.tolist()] == combinations(3, ids)


def test_combination_matrix_empty_when_too_large() -> None:
    matrix = combination_matrix(3, [1, 2])

    assert matrix.shape == (0, 3)
