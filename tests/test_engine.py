from __future__ import annotations

import dataclasses
from math import comb

import numpy as np
import pytest

from cardguess import engine
from cardguess.cards import CardSet, parse_cards
from cardguess.combinations import combination_matrix
from cardguess.engine import (
    CandidateSpace,
    EngineConfig,
    InconsistentFeedback,
    UnsupportedGuessSize,
    best_guess,
    initial_guess,
    next_guess,
    prune,
    utility,
)
from cardguess.feedback import feedback


def _row_set(space: CandidateSpace) -> set[tuple[int, ...]]:
    return {tuple(row) for row in space.rows.tolist()}


@pytest.mark.parametrize(
    ("size", "opening"),
    [
        (2, ["6C", "10H"]),
        (3, ["5C", "8H", "QS"]),
        (4, ["3C", "6D", "9H", "QS"]),
    ],
)
def test_initial_guess_uses_opening_table(size: int, opening: list[str]) -> None:
    guess, state = initial_guess(size)

    assert guess == parse_cards(opening)
    assert len(state.space) == comb(52, size) - 1
    assert guess not in state.space
    assert state.size == size


def test_opening_guesses_have_distinct_suits() -> None:
    for size in engine.SUPPORTED_SIZES:
        guess, _ = initial_guess(size)
        assert len({card.suit for card in guess}) == size
        assert len({card.rank for card in guess}) == size


@pytest.mark.parametrize("size", [0, 1, 5, 13])
def test_initial_guess_rejects_unsupported_sizes(size: int) -> None:
    with pytest.raises(UnsupportedGuessSize):
        initial_guess(size)


def test_candidate_space_is_read_only() -> None:
    _, state = initial_guess(2)

    with pytest.raises(ValueError):
        state.space.rows[0, 0] = 7


def test_next_guess_retains_answer_and_prunes_monotonically() -> None:
    answer = parse_cards(["2C", "KS"])
    guess, state = initial_guess(2)
    score = feedback(answer, guess)

    new_guess, new_state = next_guess((guess, state), score)

    assert answer in new_state.space
    assert guess not in new_state.space
    assert _row_set(new_state.space) <= _row_set(state.space)
    assert len(new_state.space) < len(state.space)
    assert new_guess in new_state.space
    for candidate in new_state.space:
        assert feedback(candidate, guess) == score


def test_pruning_keeps_answer_across_rounds() -> None:
    answer = parse_cards(["4D", "9S", "JH"])
    guess, state = initial_guess(3)
    while True:
        score = feedback(answer, guess)
        if score.is_solved(3):
            break
        previous_rows = _row_set(state.space)
        guess, state = next_guess((guess, state), score)
        assert answer in state.space
        assert _row_set(state.space) <= previous_rows
    assert guess == answer


def test_next_guess_for_four_cards_takes_first_candidate(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(_space: CandidateSpace) -> CardSet:
        raise AssertionError("utility search must not run for four-card guesses")

    monkeypatch.setattr(engine, "best_guess", fail)
    answer = parse_cards(["2C", "7D", "JH", "AS"])
    guess, state = initial_guess(4)

    new_guess, new_state = next_guess((guess, state), feedback(answer, guess))

    assert new_guess == new_state.space[0]
    assert answer in new_state.space


def test_full_search_threshold_is_configurable(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[int] = []

    def record(space: CandidateSpace) -> CardSet:
        calls.append(len(space))
        return space.first()

    monkeypatch.setattr(engine, "best_guess", record)
    answer = parse_cards(["2C", "KS"])

    guess, state = initial_guess(2, EngineConfig(full_search_below=2))
    next_guess((guess, state), feedback(answer, guess))
    assert calls == []

    guess, state = initial_guess(2)
    next_guess((guess, state), feedback(answer, guess))
    assert len(calls) == 1


def test_prune_rejects_malformed_scores() -> None:
    guess, state = initial_guess(2)

    with pytest.raises(InconsistentFeedback):
        prune(state.space, guess, (1, 0, 1))
    with pytest.raises(InconsistentFeedback):
        prune(state.space, guess, (3, 0, 0, 0, 0))


@pytest.mark.parametrize(
    "score",
    [
        (0.9, 0, 0.5, 0, 1.7),
        (0, 0, 0, 0, 1.0),
        (True, 0, 0, 0, 0),
        ("1", 0, 0, 0, 0),
    ],
)
def test_prune_rejects_non_integer_scores(score: tuple[object, ...]) -> None:
    guess, state = initial_guess(2)

    with pytest.raises(InconsistentFeedback):
        prune(state.space, guess, score)


def test_prune_accepts_numpy_integer_scores() -> None:
    answer = parse_cards(["2C", "KS"])
    guess, state = initial_guess(2)
    score = tuple(np.int64(value) for value in feedback(answer, guess))

    assert answer in prune(state.space, guess, score)


def test_default_configs_are_not_shared_between_games() -> None:
    _, first = initial_guess(2)
    _, second = initial_guess(2)

    assert first.config is not second.config
    with pytest.raises(dataclasses.FrozenInstanceError):
        first.config.full_search_below = 2  # type: ignore[misc]
    assert second.config.full_search_below == 4


def test_engine_config_copies_opening_table() -> None:
    table = {2: ["2C", "3D"], 3: ["5C", "8H", "QS"], 4: ["3C", "6D", "9H", "QS"]}
    config = EngineConfig(opening_guesses=table)
    table[2] = ["AS", "KS"]

    assert config.opening_for(2) == parse_cards(["2C", "3D"])
    with pytest.raises(TypeError):
        config.opening_guesses[2] = ("AS", "KS")  # type: ignore[index]


def test_next_guess_raises_when_no_candidate_survives() -> None:
    guess, state = initial_guess(2)

    with pytest.raises(InconsistentFeedback):
        next_guess((guess, state), (2, 0, 2, 0, 2))


def test_next_guess_rejects_wrong_sized_guess() -> None:
    _, state = initial_guess(2)

    with pytest.raises(ValueError):
        next_guess((parse_cards(["2C", "3C", "4C"]), state), (0, 0, 0, 0, 0))


def test_utility_of_known_partitions() -> None:
    guess = parse_cards(["2C", "3C"])
    # Each candidate below scores differently against ``guess``.
    distinct = [parse_cards(["2C", "4D"]), parse_cards(["5H", "6H"]), parse_cards(["2D", "3D"])]
    assert utility(guess, distinct) == pytest.approx(1.0)

    # Both candidates give feedback (0, 2, 0, 0, 0) with ``guess`` as the target.
    same = [parse_cards(["9H", "10H"]), parse_cards(["JS", "QS"])]
    assert utility(guess, same) == pytest.approx(2.0)
    assert utility(guess, []) == 0.0


def test_best_guess_matches_reference_utility() -> None:
    space = CandidateSpace(combination_matrix(2, [0, 5, 13, 18, 27, 33, 40, 51]))
    candidates = list(space)

    scores = [utility(candidate, [other for other in candidates if other != candidate]) for candidate in candidates]
    expected = candidates[scores.index(min(scores))]

    assert best_guess(space) == expected


def test_best_guess_is_deterministic() -> None:
    guess, state = initial_guess(2)
    answer = parse_cards(["8D", "QC"])
    _, pruned = next_guess((guess, state), feedback(answer, guess))

    assert best_guess(pruned.space) == best_guess(pruned.space)


def test_best_guess_breaks_ties_by_order() -> None:
    # Two candidates: each leaves exactly one other, so utilities tie at 1.0.
    space = CandidateSpace(np.array([[0, 1], [2, 3]], dtype=np.uint8))

    assert best_guess(space) == space[0]


def test_best_guess_single_and_empty_space() -> None:
    single = CandidateSpace(np.array([[4, 17]], dtype=np.uint8))
    assert best_guess(single) == single[0]

    empty = CandidateSpace(np.zeros((0, 2), dtype=np.uint8))
    with pytest.raises(InconsistentFeedback):
        best_guess(empty)
    with pytest.raises(InconsistentFeedback):
        empty.first()


def test_candidate_space_membership_and_removal() -> None:
    space = CandidateSpace(combination_matrix(2, [0, 1, 2]))
    pair = parse_cards(["2C", "3C"])

    assert pair in space
    assert parse_cards(["2C", "2D"]) not in space
    assert "2C" not in space
    smaller = space.without(pair)
    assert len(smaller) == 2
    assert pair not in smaller
    assert len(space) == 3
