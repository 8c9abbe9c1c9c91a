"""Enumeration of fixed-size subsets of an ordered sequence."""

from __future__ import annotations

from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")

__all__ = ["combinations", "combination_matrix"]


def _collect(
    pool: Sequence[T],
    start: int,
    need: int,
    prefix: list[T],
    out: list[tuple[T, ...]],
) -> None:
    if need == 0:
        out.append(tuple(prefix))
        return
    # A head past ``last_head`` leaves fewer than ``need - 1`` items to follow it.
    last_head = len(pool) - need
    for head in range(start, last_head + 1):
        prefix.append(pool[head])
        _collect(pool, head + 1, need - 1, prefix, out)
        prefix.pop()


def combinations(n: int, items: Sequence[T]) -> list[tuple[T, ...]]:
    """Return every size-``n`` subset of ``items`` as a tuple in ``items`` order.

    Subsets come out lexicographically by position: all subsets containing
    ``items[0]`` first, then those built from ``items[1:]``, and so on. The
    order is stable for equal inputs, which the guess tie-break relies on.
    ``n == 0`` yields a single empty tuple; negative ``n`` or ``n`` larger
    than ``len(items)`` yields nothing.
    """

    if n < 0 or n > len(items):
        return []
    out: list[tuple[T, ...]] = []
    _collect(items, 0, n, [], out)
    return out


def combination_matrix(n: int, card_ids: Sequence[int]) -> np.ndarray:
    """Return the size-``n`` combinations of ``card_ids`` as a ``uint8`` matrix.

    Row ``i`` is the ``i``-th combination produced by :func:`combinations`.
    """

    rows = combinations(n, list(card_ids))
    if not rows:
        return np.zeros((0, max(n, 0)), dtype=np.uint8)
    return np.array(rows, dtype=np.uint8).reshape(len(rows), n)
