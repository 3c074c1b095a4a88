"""
Distinct Random Sub-lists
===========================
Draw a bounded number of distinct, fixed-size random sub-lists from an
ordered collection. Used by the convergence study to pick random subsets of
users of every size 2..N.

The stream is capped at min(count, C(len(items), size)): asking for more
distinct sub-lists than exist would otherwise never terminate.
"""

from typing import Hashable, Iterator, List, Sequence, Tuple, TypeVar

import numpy as np

from groupeval.validation.combinatorics import binomial_coefficient

T = TypeVar("T", bound=Hashable)


def _random_indices(n_items: int, size: int, rng: np.random.RandomState) -> List[int]:
    """``size`` distinct indices in [0, n_items), in draw order."""
    picked: List[int] = []
    seen = set()
    while len(picked) < size:
        idx = int(rng.randint(0, n_items))
        if idx in seen:
            continue
        seen.add(idx)
        picked.append(idx)
    return picked


def random_sublists(
    items: Sequence[T],
    size: int,
    count: int,
    rng: np.random.RandomState,
) -> Iterator[List[T]]:
    """
    Lazily yield up to ``count`` distinct random sub-lists of length ``size``.

    Two sub-lists are equal when they hold the same items, whatever the
    order. The generator is not restartable; iterating a fresh call with an
    identically seeded ``rng`` reproduces the same stream.

    Args:
        items: pairwise distinct, hashable elements
        size: length of every sub-list, 1 <= size <= len(items)
        count: maximum number of sub-lists to yield
        rng: seeded numpy RandomState
    """
    n_items = len(items)
    if not 0 < size <= n_items:
        raise ValueError(f"size must be in [1, {n_items}], got {size}")
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if len(set(items)) != n_items:
        raise ValueError("items must be pairwise distinct")

    limit = min(count, binomial_coefficient(n_items, size))
    if limit == 0:
        return

    if size == n_items:
        yield list(items)
        return

    emitted = set()
    while len(emitted) < limit:
        sub = [items[i] for i in _random_indices(n_items, size, rng)]
        key = frozenset(sub)
        if key in emitted:
            continue
        emitted.add(key)
        yield sub


def generate_group_subsets(
    groups: Sequence[T],
    max_per_size: int,
    rng: np.random.RandomState,
) -> Iterator[Tuple[int, List[T]]]:
    """
    Random group subsets of every size 2, ..., N, ``max_per_size`` each at most.

    Yields:
        (subset_size, subset) pairs, sizes in increasing order
    """
    n_groups = len(groups)
    for size in range(2, n_groups + 1):
        how_many = min(max_per_size, binomial_coefficient(n_groups, size))
        for subset in random_sublists(groups, size, how_many, rng):
            yield size, subset
