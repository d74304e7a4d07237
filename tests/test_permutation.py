from itertools import permutations

import pytest

from suggestion_engine.permutation import (
    clamp_permutation_greedy,
    is_within_displacement,
    safe_reorder,
    sanitize_permutation,
    window,
)


@pytest.mark.parametrize(
    "raw, n, expected",
    [
        ([3, 1, 2], 3, [3, 1, 2]),
        ([], 3, [1, 2, 3]),
        ([0, 9, -4], 3, [1, 2, 3]),
        ([2, 2, 2], 3, [2, 1, 3]),
        ([4, 0, 2, 7, 2], 4, [4, 2, 1, 3]),
        ([1, 2], 0, []),
        ([1, 2], -1, []),
    ],
)
def test_sanitize_permutation(raw, n, expected):
    assert sanitize_permutation(raw, n) == expected


def test_sanitize_skips_non_integers():
    assert sanitize_permutation([2, "1", 1.0, True, None, 3], 3) == [2, 3, 1]


def test_sanitize_always_yields_permutation():
    for n in range(0, 7):
        for raw in ([], [0] * n, list(range(n, 0, -1)), [n + 1, -1, 1, 1]):
            assert sorted(sanitize_permutation(raw, n)) == list(range(1, n + 1))


def test_window_is_clipped_to_list():
    assert window(1, 5, 2) == (0, 2)
    assert window(3, 5, 2) == (0, 4)
    assert window(5, 5, 2) == (2, 4)
    assert window(2, 5, 0) == (1, 1)


def test_clamp_reversed_list():
    assert clamp_permutation_greedy([5, 4, 3, 2, 1], 2) == [1, 2, 5, 4, 3]


def test_clamp_prefers_tightest_window():
    assert clamp_permutation_greedy([2, 1, 3], 1) == [1, 2, 3]


def test_clamp_keeps_swap_within_bound():
    assert clamp_permutation_greedy([2, 1], 2) == [2, 1]


def test_clamp_with_zero_displacement_is_identity():
    assert clamp_permutation_greedy([4, 3, 1, 2], 0) == [1, 2, 3, 4]
    assert clamp_permutation_greedy([4, 3, 1, 2], -3) == [1, 2, 3, 4]


def test_clamp_with_wide_bound_keeps_proposal():
    assert clamp_permutation_greedy([4, 3, 1, 2], 3) == [4, 3, 1, 2]
    assert clamp_permutation_greedy([4, 3, 1, 2], 10) == [4, 3, 1, 2]


def test_clamp_empty():
    assert clamp_permutation_greedy([], 2) == []


def test_clamp_repairs_non_permutation_input():
    result = clamp_permutation_greedy([3, 3, 1], 1)

    assert sorted(result) == [1, 2, 3]
    assert is_within_displacement(result, 1)


@pytest.mark.parametrize("d", [0, 1, 2, 3])
def test_clamp_is_total_and_bounded_for_all_permutations(d):
    for n in range(1, 7):
        for perm in permutations(range(1, n + 1)):
            result = clamp_permutation_greedy(list(perm), d)
            assert sorted(result) == list(range(1, n + 1))
            assert is_within_displacement(result, d)


def test_clamp_of_compliant_permutation_stays_compliant():
    for perm in permutations(range(1, 6)):
        if is_within_displacement(perm, 1):
            assert is_within_displacement(clamp_permutation_greedy(list(perm), 1), 1)


def test_is_within_displacement():
    assert is_within_displacement([1, 2, 3], 0)
    assert is_within_displacement([3, 1, 2], 2)
    assert not is_within_displacement([3, 1, 2], 1)


def test_safe_reorder():
    assert safe_reorder([0, 5, 2, -1, 1], 3) == [2, 1, 3]
    assert safe_reorder([5, 4, 3, 2, 1], 5) == [1, 2, 5, 4, 3]
    assert safe_reorder("garbage", 2) == [1, 2]
    assert safe_reorder([], 0) == []
