"""Tests for distinct random sub-lists."""

import itertools
import math

import numpy as np
import pytest

from groupeval.validation.sampling import generate_group_subsets, random_sublists

USERS = ["u0", "u1", "u2", "u3", "u4", "u5"]


class TestRandomSublists:
    @pytest.mark.parametrize("size,count", [(1, 3), (2, 5), (3, 20), (4, 100), (5, 2)])
    def test_sublists_are_valid_and_distinct(self, size: int, count: int) -> None:
        subs = list(random_sublists(USERS, size, count, np.random.RandomState(0)))

        assert len(subs) == min(count, math.comb(len(USERS), size))
        keys = {frozenset(s) for s in subs}
        assert len(keys) == len(subs)
        for s in subs:
            assert len(s) == size
            assert set(s) <= set(USERS)
            assert len(set(s)) == size

    def test_full_size_returns_items_once(self) -> None:
        subs = list(random_sublists(USERS, len(USERS), 50, np.random.RandomState(0)))
        assert subs == [USERS]

    def test_request_beyond_bound_terminates(self) -> None:
        subs = list(random_sublists(USERS, 2, 10_000, np.random.RandomState(3)))
        assert len(subs) == 15

    def test_every_item_reachable(self) -> None:
        subs = list(random_sublists(["a", "b", "c"], 2, 3, np.random.RandomState(1)))
        assert {frozenset(s) for s in subs} == {
            frozenset(p) for p in itertools.combinations("abc", 2)
        }

    def test_deterministic_for_same_seed(self) -> None:
        first = list(random_sublists(USERS, 3, 6, np.random.RandomState(42)))
        second = list(random_sublists(USERS, 3, 6, np.random.RandomState(42)))
        assert first == second

    def test_lazy_and_not_restartable(self) -> None:
        gen = random_sublists(USERS, 2, 4, np.random.RandomState(0))
        assert len(next(gen)) == 2
        assert len(list(gen)) == 3
        assert list(gen) == []

    def test_zero_count_yields_nothing(self) -> None:
        assert list(random_sublists(USERS, 2, 0, np.random.RandomState(0))) == []

    @pytest.mark.parametrize("items,size,count", [
        (USERS, 0, 1),
        (USERS, 7, 1),
        (USERS, 2, -1),
        (["a", "a", "b"], 2, 1),
    ])
    def test_invalid_arguments(self, items, size: int, count: int) -> None:
        with pytest.raises(ValueError):
            list(random_sublists(items, size, count, np.random.RandomState(0)))


class TestGenerateGroupSubsets:
    def test_sizes_and_counts(self) -> None:
        pairs = list(generate_group_subsets(USERS, 5, np.random.RandomState(0)))

        counts = {}
        for size, subset in pairs:
            assert len(subset) == size
            counts[size] = counts.get(size, 0) + 1
        assert counts == {2: 5, 3: 5, 4: 5, 5: 5, 6: 1}

    def test_sizes_increase(self) -> None:
        sizes = [size for size, _ in generate_group_subsets(USERS[:4], 2, np.random.RandomState(0))]
        assert sizes == sorted(sizes)
        assert sizes[0] == 2 and sizes[-1] == 4

    def test_fewer_than_two_groups_yields_nothing(self) -> None:
        assert list(generate_group_subsets(["u0"], 5, np.random.RandomState(0))) == []
